"""Read-only access to MaxMind City and ASN databases."""

from __future__ import annotations

import logging
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import geoip2.database
import geoip2.errors
import maxminddb

from .config import DEFAULT_LANGUAGE
from .errors import DatabaseOpenError, InvalidInputError
from .models import ASNRecord, CityRecord, DatabaseConfig, IPAddress

log = logging.getLogger(__name__)


class CityLookup(Protocol):
    def lookup(
        self, ip: IPAddress, last_subdivision: bool = False
    ) -> CityRecord | None: ...


class ASNLookup(Protocol):
    def lookup(self, ip: IPAddress) -> ASNRecord | None: ...


class MaxMindCityLookup:
    """City view over a GeoIP2/GeoLite2 City reader."""

    def __init__(self, reader: geoip2.database.Reader):
        self._reader = reader

    def lookup(
        self, ip: IPAddress, last_subdivision: bool = False
    ) -> CityRecord | None:
        try:
            response = self._reader.city(ip)
        except geoip2.errors.AddressNotFoundError:
            log.debug("%s not in City database", ip)
            return None
        except ValueError as exc:
            # e.g. an IPv6 address against an IPv4-only database
            log.debug("City lookup for %s skipped: %s", ip, exc)
            return None

        subdivision = None
        if response.subdivisions:
            subdivision = (
                response.subdivisions[-1]
                if last_subdivision
                else response.subdivisions[0]
            )

        location = response.location
        record = CityRecord(
            country=response.country.iso_code,
            country_name=response.country.name,
            region=subdivision.iso_code if subdivision else None,
            region_name=subdivision.name if subdivision else None,
            city=response.city.name,
            postal=response.postal.code,
            latitude=location.latitude,
            longitude=location.longitude,
            accuracy_radius=location.accuracy_radius,
            timezone=location.time_zone,
        )
        return None if _is_empty(record) else record


class MaxMindASNLookup:
    """ASN view over a GeoIP2/GeoLite2 ASN reader."""

    def __init__(self, reader: geoip2.database.Reader):
        self._reader = reader

    def lookup(self, ip: IPAddress) -> ASNRecord | None:
        try:
            response = self._reader.asn(ip)
        except geoip2.errors.AddressNotFoundError:
            log.debug("%s not in ASN database", ip)
            return None
        except ValueError as exc:
            log.debug("ASN lookup for %s skipped: %s", ip, exc)
            return None

        network = response.network
        record = ASNRecord(
            number=response.autonomous_system_number,
            organization=response.autonomous_system_organization,
            network=str(network) if network is not None else None,
        )
        if record.number is None and record.organization is None:
            return None
        return record


class GeoDatabase:
    """City and ASN databases, opened together and closed together.

    Usage:
        with GeoDatabase(config) as db:
            city = db.city.lookup(ip)
            asn = db.asn.lookup(ip)
    """

    def __init__(self, config: DatabaseConfig, language: str = DEFAULT_LANGUAGE):
        self.config = config
        self.language = language
        self._city_reader: geoip2.database.Reader | None = None
        self._asn_reader: geoip2.database.Reader | None = None

    def __enter__(self) -> GeoDatabase:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        # Names fall back to English when the database lacks the language
        locales = [self.language]
        if self.language != DEFAULT_LANGUAGE:
            locales.append(DEFAULT_LANGUAGE)

        city_reader = _open_reader(self.config.city_path, "City", locales)
        try:
            asn_reader = _open_reader(self.config.asn_path, "ASN", locales)
        except DatabaseOpenError:
            city_reader.close()
            raise

        self._city_reader = city_reader
        self._asn_reader = asn_reader

        languages = city_reader.metadata().languages
        if languages and self.language not in languages:
            self.close()
            raise InvalidInputError(
                f"language {self.language!r} not in City database "
                f"(available: {', '.join(languages)})"
            )

    def close(self) -> None:
        for reader in (self._city_reader, self._asn_reader):
            if reader is not None:
                reader.close()
        self._city_reader = None
        self._asn_reader = None

    @property
    def city(self) -> CityLookup:
        return MaxMindCityLookup(self._require(self._city_reader))

    @property
    def asn(self) -> ASNLookup:
        return MaxMindASNLookup(self._require(self._asn_reader))

    def languages(self) -> list[str]:
        """IETF language codes the City database has names for."""
        return list(self._require(self._city_reader).metadata().languages)

    def metadata(self) -> list[dict]:
        """Describe both databases (type, build date, size)."""
        return [
            _describe(self.config.city_path, self._require(self._city_reader)),
            _describe(self.config.asn_path, self._require(self._asn_reader)),
        ]

    @staticmethod
    def _require(reader):
        if reader is None:
            raise RuntimeError("GeoDatabase used outside of its with-block")
        return reader


def _open_reader(
    path: Path, kind: str, locales: list[str]
) -> geoip2.database.Reader:
    """Open *path* and make sure it is a *kind* ("City" or "ASN") database."""
    log.debug("Opening %s database %s", kind, path)
    try:
        reader = geoip2.database.Reader(str(path), locales=locales)
    except (OSError, ValueError, maxminddb.InvalidDatabaseError) as exc:
        raise DatabaseOpenError(
            f"cannot open {kind} database {path}: {exc}"
        ) from exc

    database_type = reader.metadata().database_type
    if kind not in database_type:
        reader.close()
        raise DatabaseOpenError(
            f"{path} is a {database_type} database, expected {kind}"
        )
    return reader


def _describe(path: Path, reader: geoip2.database.Reader) -> dict:
    meta = reader.metadata()
    description = meta.description or {}
    return {
        "path": str(path),
        "type": meta.database_type,
        "description": description.get("en") or next(iter(description.values()), ""),
        "built": datetime.fromtimestamp(meta.build_epoch, tz=timezone.utc),
        "ip_version": meta.ip_version,
        "node_count": meta.node_count,
        "languages": list(meta.languages),
    }


def _is_empty(record) -> bool:
    return all(getattr(record, f.name) is None for f in fields(record))
