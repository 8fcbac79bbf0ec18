"""Exception hierarchy for plugin-compat.

All exceptions inherit from CompatError, so callers can catch every
failure raised by the package with a single except clause.

Exception Hierarchy:
    CompatError (base)
    ├── VersionParseError      # Version string could not be parsed
    ├── FatalParseError        # Required configuration value is unparseable
    ├── RequirementTableError  # Requirement table violates its ordering invariant
    └── ConfigurationError     # Project settings file unreadable or invalid

Only FatalParseError and ConfigurationError are expected to reach callers
of the verification entry points. Parse failures on optional values and
descriptors are resolved to "absent" inside the engine.

Example:
    >>> from plugin_compat.errors import FatalParseError
    >>> raise FatalParseError("platform.build", "latest")
    Traceback (most recent call last):
        ...
    FatalParseError: Cannot parse required value platform.build='latest'
"""

from __future__ import annotations


class CompatError(Exception):
    """Base exception for all plugin-compat errors."""

    pass


class VersionParseError(CompatError, ValueError):
    """Raised when a version string cannot be parsed.

    Attributes:
        raw: The raw value that failed to parse.
        reason: Short description of what was wrong with it.
    """

    def __init__(self, raw: str, reason: str) -> None:
        """Initialize VersionParseError.

        Args:
            raw: The raw value that failed to parse.
            reason: Short description of what was wrong with it.
        """
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid version {raw!r}: {reason}")


class FatalParseError(CompatError):
    """Raised when a required configuration value cannot be parsed.

    Verification is aborted before any diagnostic is produced because no
    rule can be evaluated without the value.

    Attributes:
        field: Dotted name of the configuration field.
        raw: The raw value that failed to parse.
    """

    def __init__(self, field: str, raw: str | None) -> None:
        """Initialize FatalParseError.

        Args:
            field: Dotted name of the configuration field.
            raw: The raw value that failed to parse (None when missing).
        """
        self.field = field
        self.raw = raw
        super().__init__(f"Cannot parse required value {field}={raw!r}")


class RequirementTableError(CompatError):
    """Raised when a requirement table is not strictly descending by key.

    Attributes:
        table: Name of the offending table.
    """

    def __init__(self, table: str, message: str) -> None:
        """Initialize RequirementTableError.

        Args:
            table: Name of the offending table.
            message: Description of the violation.
        """
        self.table = table
        super().__init__(f"Invalid requirement table '{table}': {message}")


class ConfigurationError(CompatError):
    """Raised when a project settings file cannot be loaded.

    Attributes:
        path: Path of the settings file, if known.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Description of the problem.
            path: Path of the settings file, if known.
        """
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


__all__ = [
    "CompatError",
    "ConfigurationError",
    "FatalParseError",
    "RequirementTableError",
    "VersionParseError",
]
