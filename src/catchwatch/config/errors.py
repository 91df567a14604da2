"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required environment variables are absent or blank."""

    def __init__(self, names: list[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationValueError(ConfigurationError):
    """An environment variable is set but cannot be read as the expected type."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {expected} value for {name}: {value!r}")
