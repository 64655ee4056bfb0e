"""Lookup engine — wire address resolution with the database readers."""

from __future__ import annotations

import logging

from .composer import compose, compose_bogon
from .database import GeoDatabase
from .models import GeoResult, LookupOptions
from .resolver import resolve_address, reverse_lookup

log = logging.getLogger(__name__)


def lookup_address(
    raw_query: str,
    db: GeoDatabase,
    options: LookupOptions | None = None,
) -> GeoResult:
    """Look up an address or hostname in an open GeoDatabase.

    Accepts formats like:
        8.8.8.8
        2001:4860:4860::8888
        8[.]8[.]8[.]8
        dns.google
    """
    options = options or LookupOptions()
    ip = resolve_address(raw_query)

    if not ip.is_global:
        log.debug("%s is not globally routable", ip)
        return compose_bogon(ip)

    city = db.city.lookup(ip, last_subdivision=options.last_subdivision)
    asn = db.asn.lookup(ip)
    hostname = reverse_lookup(ip) if options.reverse_dns else None
    return compose(ip, city, asn, hostname=hostname)
