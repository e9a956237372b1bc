"""Exception hierarchy shared by the store, engines and command router."""

from __future__ import annotations


class AisleError(Exception):
    """Base class for errors raised by Aisle."""


class StorageError(AisleError):
    """A session file could not be read, parsed or written."""


class ModelError(AisleError):
    """The categorization call failed (network, malformed output, bad provider)."""


class ConfigurationError(ModelError):
    """The model selection string names an unknown provider or is malformed."""
