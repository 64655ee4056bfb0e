"""Dataclasses for database records, lookup settings, and results."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from pathlib import Path

from .config import ASN_DB_NAMES, CITY_DB_NAMES

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class CityRecord:
    """Location data from a City database. Any field may be missing."""

    country: str | None = None  # ISO 3166-1 alpha-2, e.g. "CH"
    country_name: str | None = None
    region: str | None = None  # subdivision ISO code, e.g. "ZH"
    region_name: str | None = None
    city: str | None = None
    postal: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    accuracy_radius: int | None = None  # km
    timezone: str | None = None  # e.g. "Europe/Zurich"


@dataclass(frozen=True)
class ASNRecord:
    """Network owner from an ASN database."""

    number: int | None = None  # e.g. 15169
    organization: str | None = None  # e.g. "Google LLC"
    network: str | None = None  # e.g. "8.8.8.0/24"


@dataclass(frozen=True)
class GeoResult:
    """Everything known about one address, ready for rendering."""

    ip: str
    hostname: str | None = None
    bogon: bool = False
    city: str | None = None
    region: str | None = None
    country: str | None = None
    loc: str | None = None  # "lat,lon"
    osm: str | None = None
    org: str | None = None  # "AS15169 Google LLC"
    postal: str | None = None
    timezone: str | None = None
    # Table view only
    country_name: str | None = None
    region_name: str | None = None
    accuracy_radius: int | None = None
    asn: int | None = None
    asn_org: str | None = None
    network: str | None = None


@dataclass(frozen=True)
class DatabaseConfig:
    """Locations of the City and ASN databases."""

    city_path: Path
    asn_path: Path

    @classmethod
    def from_directory(
        cls,
        mmdb_dir: Path,
        city_db: Path | None = None,
        asn_db: Path | None = None,
    ) -> DatabaseConfig:
        """Pick database files inside *mmdb_dir*; explicit paths win.

        GeoIP2 editions are preferred over GeoLite2 when both exist.
        """
        return cls(
            city_path=city_db or _first_existing(mmdb_dir, CITY_DB_NAMES),
            asn_path=asn_db or _first_existing(mmdb_dir, ASN_DB_NAMES),
        )


@dataclass(frozen=True)
class LookupOptions:
    last_subdivision: bool = False
    reverse_dns: bool = True


def _first_existing(directory: Path, names: tuple[str, ...]) -> Path:
    for name in names:
        path = directory / name
        if path.exists():
            return path
    # Nothing there; report the free edition in the open error
    return directory / names[-1]
