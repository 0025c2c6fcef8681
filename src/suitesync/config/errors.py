"""Errors raised while loading account and manifest configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised for malformed settings, e.g. manifest dependencies of the wrong shape."""


class MissingConfigurationError(ConfigurationError):
    """Raised when account credentials or other required variables are unset."""
