"""Shared fakes for geoip2 readers and the system resolver."""

from __future__ import annotations

from types import SimpleNamespace

import geoip2.errors
import maxminddb
import pytest


class FakeReader:
    """Stands in for geoip2.database.Reader over a registered database."""

    def __init__(self, registry, path, locales=None):
        if path not in registry.databases:
            raise FileNotFoundError(2, "No such file or directory", path)
        spec = registry.databases[path]
        if spec.get("corrupt"):
            raise maxminddb.InvalidDatabaseError(
                "Error opening database file. Is this a valid MaxMind DB file?"
            )
        self.path = path
        self.locales = locales
        self._spec = spec
        self.closed = False
        registry.opened.append(self)

    def metadata(self):
        return SimpleNamespace(
            database_type=self._spec["type"],
            languages=self._spec.get("languages", ["de", "en", "fr"]),
            description={"en": f"{self._spec['type']} test database"},
            build_epoch=1700000000,
            ip_version=6,
            node_count=1234,
        )

    def _get(self, ip):
        records = self._spec.get("records", {})
        if str(ip) not in records:
            raise geoip2.errors.AddressNotFoundError(
                f"The address {ip} is not in the database."
            )
        return records[str(ip)]

    def city(self, ip):
        return self._get(ip)

    def asn(self, ip):
        return self._get(ip)

    def close(self):
        self.closed = True


class FakeDatabases:
    def __init__(self, directory):
        self.directory = directory
        self.databases: dict[str, dict] = {}
        self.opened: list[FakeReader] = []

    def add(self, name, db_type, records=None, **extra):
        """Register a database file under the test directory."""
        path = self.directory / name
        path.write_bytes(b"")
        self.databases[str(path)] = {"type": db_type, "records": records or {}, **extra}
        return path

    @staticmethod
    def city_response(
        country="CH",
        country_name="Switzerland",
        subdivisions=(("ZH", "Zurich"),),
        city="Zürich",
        postal="8000",
        latitude=47.3667,
        longitude=8.55,
        accuracy_radius=20,
        time_zone="Europe/Zurich",
    ):
        return SimpleNamespace(
            country=SimpleNamespace(iso_code=country, name=country_name),
            subdivisions=tuple(
                SimpleNamespace(iso_code=code, name=name) for code, name in subdivisions
            ),
            city=SimpleNamespace(name=city),
            postal=SimpleNamespace(code=postal),
            location=SimpleNamespace(
                latitude=latitude,
                longitude=longitude,
                accuracy_radius=accuracy_radius,
                time_zone=time_zone,
            ),
        )

    @staticmethod
    def asn_response(number=15169, organization="Google LLC", network="8.8.8.0/24"):
        return SimpleNamespace(
            autonomous_system_number=number,
            autonomous_system_organization=organization,
            network=network,
        )


@pytest.fixture
def fake_dbs(tmp_path, monkeypatch):
    """Patch geoip2.database.Reader with readers over in-memory records."""
    registry = FakeDatabases(tmp_path)

    def make_reader(path, locales=None):
        return FakeReader(registry, path, locales=locales)

    monkeypatch.setattr("geoip2.database.Reader", make_reader)
    return registry


@pytest.fixture
def standard_dbs(fake_dbs):
    """GeoLite2 City and ASN databases covering a few public addresses.

    8.8.8.8 is in both, 1.2.3.4 only in City, 9.9.9.9 in neither.
    """
    fake_dbs.add(
        "GeoLite2-City.mmdb",
        "GeoLite2-City",
        {
            "8.8.8.8": fake_dbs.city_response(
                country="US",
                country_name="United States",
                subdivisions=(("CA", "California"),),
                city="Mountain View",
                postal="94035",
                latitude=37.386,
                longitude=-122.0838,
                accuracy_radius=1000,
                time_zone="America/Los_Angeles",
            ),
            "1.2.3.4": fake_dbs.city_response(
                country="AU",
                country_name="Australia",
                subdivisions=(),
                city=None,
                postal=None,
                latitude=-33.494,
                longitude=143.2104,
                accuracy_radius=1000,
                time_zone="Australia/Sydney",
            ),
            "2a02:1388::1": fake_dbs.city_response(
                subdivisions=(("ZH", "Zurich"), ("ZH-1", "Bezirk Zürich")),
            ),
        },
    )
    fake_dbs.add(
        "GeoLite2-ASN.mmdb",
        "GeoLite2-ASN",
        {"8.8.8.8": fake_dbs.asn_response()},
    )
    return fake_dbs


@pytest.fixture
def no_dns(monkeypatch):
    """Fail any real DNS query made during a test."""

    def refuse(*args, **kwargs):
        raise AssertionError("unexpected DNS query")

    monkeypatch.setattr("socket.getaddrinfo", refuse)
    monkeypatch.setattr("socket.gethostbyaddr", refuse)
