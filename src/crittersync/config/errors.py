"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class InaccessiblePathError(ConfigurationError):
    """Raised when a configured file or directory cannot be accessed."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Path is not accessible: {path}")
        self.path = path


class OverridesError(ConfigurationError):
    """Raised when an overrides file cannot be read or has an invalid shape."""
