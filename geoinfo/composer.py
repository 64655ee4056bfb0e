"""Merge City and ASN records into one ipinfo.io-style result."""

from __future__ import annotations

from .config import OSM_URL
from .models import ASNRecord, CityRecord, GeoResult, IPAddress


def format_org(asn: ASNRecord | None) -> str | None:
    """Format the owner the way ipinfo.io does: "AS15169 Google LLC"."""
    if asn is None:
        return None
    if asn.number is not None and asn.organization:
        return f"AS{asn.number} {asn.organization}"
    if asn.number is not None:
        return f"AS{asn.number}"
    return asn.organization or None


def compose(
    ip: IPAddress,
    city: CityRecord | None,
    asn: ASNRecord | None,
    hostname: str | None = None,
) -> GeoResult:
    """Build the result for a routable address.

    Fields missing from both records stay None. `loc` and the map link only
    exist when the City record has both coordinates.
    """
    city = city or CityRecord()

    loc = osm = None
    if city.latitude is not None and city.longitude is not None:
        loc = f"{city.latitude},{city.longitude}"
        osm = OSM_URL.format(lat=city.latitude, lon=city.longitude)

    return GeoResult(
        ip=str(ip),
        hostname=hostname,
        city=city.city,
        region=city.region,
        country=city.country,
        loc=loc,
        osm=osm,
        org=format_org(asn),
        postal=city.postal,
        timezone=city.timezone,
        country_name=city.country_name,
        region_name=city.region_name,
        accuracy_radius=city.accuracy_radius,
        asn=asn.number if asn else None,
        asn_org=asn.organization if asn else None,
        network=asn.network if asn else None,
    )


def compose_bogon(ip: IPAddress) -> GeoResult:
    """Result for an address that is not globally routable."""
    return GeoResult(ip=str(ip), bogon=True)
