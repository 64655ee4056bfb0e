"""Serialize results as JSON or a Rich table.

Absent fields are left out of the JSON object entirely; only `ip` is always
present, and `bogon` appears only when true.
"""

from __future__ import annotations

import json

from rich.markup import escape
from rich.table import Table

from .models import GeoResult

# ipinfo.io key order
JSON_FIELDS = (
    "ip",
    "hostname",
    "bogon",
    "city",
    "region",
    "country",
    "loc",
    "osm",
    "org",
    "postal",
    "timezone",
)


def to_dict(result: GeoResult) -> dict:
    data = {}
    for name in JSON_FIELDS:
        value = getattr(result, name)
        if value is None or value is False:
            continue
        data[name] = value
    return data


def render_json(result: GeoResult, indent: int | None = 2) -> str:
    return json.dumps(to_dict(result), indent=indent, ensure_ascii=False)


def render_table(result: GeoResult) -> Table:
    """Two-column table of every known field."""
    table = Table(title=result.ip, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    if result.bogon:
        table.add_row("Bogon", "[yellow]yes[/yellow] (not globally routable)")
        return table

    rows = [
        ("Hostname", result.hostname),
        ("City", result.city),
        ("Region", _with_code(result.region_name, result.region)),
        ("Country", _with_code(result.country_name, result.country)),
        ("Postal", result.postal),
        ("Location", result.loc),
        (
            "Accuracy",
            f"{result.accuracy_radius} km"
            if result.accuracy_radius is not None
            else None,
        ),
        ("Timezone", result.timezone),
        ("Map", result.osm),
    ]
    for label, value in rows:
        if value is not None:
            table.add_row(label, escape(value))

    if result.asn is not None or result.asn_org:
        table.add_section()
        if result.asn is not None:
            table.add_row("ASN", f"AS{result.asn}")
        if result.asn_org:
            table.add_row("Organization", escape(result.asn_org))
        if result.network:
            table.add_row("Network", result.network)

    return table


def _with_code(name: str | None, code: str | None) -> str | None:
    if name and code:
        return f"{name} ({code})"
    return name or code
