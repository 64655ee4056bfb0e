"""geoinfo — ipinfo.io-style answers from local MaxMind databases."""

__version__ = "0.1.0"
