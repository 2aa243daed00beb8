"""inflationkit exception hierarchy.

Fetch failures, malformed payloads and bad configuration each get their
own type; fetch failures also say whether a retry could help.
"""

from __future__ import annotations


class InflationKitError(Exception):
    """Base for all inflationkit exceptions."""


class DataSourceError(InflationKitError):
    """Fetch, HTTP, or file read failures for a measure or base series."""

    def __init__(self, message: str, *, transient: bool = True) -> None:
        super().__init__(message)
        self.transient = transient


class DataValidationError(InflationKitError):
    """Payload parsed but failed structural or numeric validation."""


class ConfigError(InflationKitError):
    """Raised when configuration loading or validation fails."""
