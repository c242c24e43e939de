"""Exceptions raised by the prototype store."""


class StoreError(Exception):
    """Base exception for prototype store errors."""

    pass


class ConfigurationError(StoreError):
    """Raised when the store (or cache configuration) is given invalid values.

    Raised at construction time, before any data is stored.
    """

    pass
