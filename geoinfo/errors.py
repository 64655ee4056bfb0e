"""Exceptions raised by the lookup pipeline."""


class GeoinfoError(Exception):
    """Base class for fatal errors reported to the user."""


class InvalidInputError(GeoinfoError):
    """The query is empty or can never be an address or hostname."""


class ResolutionError(GeoinfoError):
    """A hostname could not be resolved to an address."""


class DatabaseOpenError(GeoinfoError):
    """A MaxMind database could not be opened or has the wrong type."""
