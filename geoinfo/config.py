"""Paths, database names, and lookup defaults."""

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "geoinfo"

# MaxMind database files, commercial edition first
CITY_DB_NAMES = ("GeoIP2-City.mmdb", "GeoLite2-City.mmdb")
ASN_DB_NAMES = ("GeoIP2-ASN.mmdb", "GeoLite2-ASN.mmdb")

# Where geoipupdate and distro packages usually put them
MMDB_DIR_CANDIDATES = (
    Path("/var/lib/GeoIP"),
    Path("/usr/share/GeoIP"),
    Path("/usr/local/share/GeoIP"),
    Path(user_data_dir(APP_NAME)),
)
MMDB_DIR_ENVVAR = "GEOINFO_MMDB_DIR"

DEFAULT_LANGUAGE = "en"

OSM_URL = "https://www.openstreetmap.org/#map=11/{lat}/{lon}"


def default_mmdb_dir() -> Path:
    """First candidate directory that exists, else /var/lib/GeoIP."""
    for candidate in MMDB_DIR_CANDIDATES:
        if candidate.is_dir():
            return candidate
    return MMDB_DIR_CANDIDATES[0]
