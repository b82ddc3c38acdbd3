"""Errors raised while reading process configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Base class for configuration problems detected at startup."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""


class InvalidConfigurationError(ConfigurationError):
    """An environment variable is set but cannot be used."""

    def __init__(self, name: str, raw: str, expected: str) -> None:
        super().__init__(f"{name} must be {expected}, got {raw!r}")
        self.name = name
        self.raw = raw
