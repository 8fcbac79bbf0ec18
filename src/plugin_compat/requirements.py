"""Build-number to toolchain requirement tables.

Each table maps a minimum platform build number (threshold) to the
toolchain version that platform requires. Lookups return the requirement
of the greatest threshold that is <= the queried build number, or None
when the build number is below every threshold.

Tables are immutable and injected into the verifier, so tests can use
synthetic data. The built-in data is curated by hand and append-only at
the high end: a newly released platform resolves to the most recent
entry until a new threshold is added.

Example:
    >>> from plugin_compat.requirements import ToolchainRequirements
    >>> from plugin_compat.version import Version
    >>> requirements = ToolchainRequirements.default()
    >>> requirements.jvm_target.required_version(Version(231, 8770, 65))
    Version('17')
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from plugin_compat.errors import ConfigurationError, RequirementTableError, VersionParseError
from plugin_compat.version import Version

logger = structlog.get_logger(__name__)


class ToolchainRequirementTable:
    """Strictly-descending threshold table with greatest-lower-bound lookup.

    Attributes:
        name: Table name used in logs and error messages.
        entries: (threshold, requirement) pairs in lookup order.
    """

    def __init__(
        self,
        entries: Iterable[tuple[Version, Version]],
        *,
        name: str = "requirements",
    ) -> None:
        """Initialize ToolchainRequirementTable.

        Args:
            entries: (threshold, requirement) pairs, highest threshold first.
            name: Table name used in logs and error messages.

        Raises:
            RequirementTableError: If thresholds are not strictly decreasing.
        """
        self.name = name
        self.entries: tuple[tuple[Version, Version], ...] = tuple(entries)

        for (previous, _), (current, _) in zip(self.entries, self.entries[1:]):
            if not current < previous:
                raise RequirementTableError(
                    name,
                    f"thresholds must be strictly decreasing, found {previous} before {current}",
                )

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[Any, Any],
        *,
        name: str = "requirements",
        requirement_parser: Callable[[str], Version] = Version.parse,
    ) -> ToolchainRequirementTable:
        """Build a table from an unordered threshold -> requirement mapping.

        Args:
            mapping: Thresholds and requirements as strings or numbers.
            name: Table name used in logs and error messages.
            requirement_parser: Parser for requirement values.

        Returns:
            Table sorted into lookup order.

        Raises:
            RequirementTableError: If a value cannot be parsed or two keys
                normalise to the same threshold.
        """
        try:
            pairs = [
                (Version.parse(str(threshold)), requirement_parser(str(requirement)))
                for threshold, requirement in mapping.items()
            ]
        except VersionParseError as e:
            raise RequirementTableError(name, str(e)) from e

        pairs.sort(key=lambda pair: pair[0], reverse=True)
        return cls(pairs, name=name)

    def required_version(self, build_number: Version | None) -> Version | None:
        """Resolve the requirement for a platform build number.

        Args:
            build_number: Platform build number, or None.

        Returns:
            Requirement of the greatest threshold <= build_number, or None if
            no threshold qualifies.
        """
        if build_number is None:
            return None
        for threshold, requirement in self.entries:
            if build_number >= threshold:
                return requirement
        return None

    def map_requirements(
        self,
        transform: Callable[[Version], Version],
        *,
        name: str | None = None,
    ) -> ToolchainRequirementTable:
        """Derive a table with the same thresholds and transformed requirements."""
        return ToolchainRequirementTable(
            ((threshold, transform(requirement)) for threshold, requirement in self.entries),
            name=name or self.name,
        )

    def __iter__(self) -> Iterator[tuple[Version, Version]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"ToolchainRequirementTable(name={self.name!r}, entries={len(self.entries)})"


# Java version required to run each platform generation
PLATFORM_JAVA_VERSIONS: dict[str, str] = {
    "242": "21",
    "222": "17",
    "203": "11",
    "162": "8",
}

# Kotlin version bundled with each platform generation
PLATFORM_KOTLIN_VERSIONS: dict[str, str] = {
    "242": "1.9.24",
    "241": "1.9.22",
    "233": "1.9.21",
    "232": "1.8.20",
    "231": "1.8.0",
    "223": "1.7.0",
    "222": "1.6.21",
    "221": "1.6.20",
    "213": "1.5.10",
    "212": "1.5.10",
    "211": "1.4.32",
    "203": "1.4.0",
    "202": "1.3.70",
    "201": "1.3.61",
    "193": "1.3.31",
}


@dataclass(frozen=True)
class ToolchainRequirements:
    """The three tables consulted by the verifier.

    Attributes:
        jvm_target: Minimum JVM level required to run the platform.
        kotlin_language: Kotlin language level bundled with the platform.
        kotlin_api: Kotlin API level bundled with the platform.
    """

    jvm_target: ToolchainRequirementTable
    kotlin_language: ToolchainRequirementTable
    kotlin_api: ToolchainRequirementTable

    @classmethod
    def from_tables(
        cls,
        jvm_target: Mapping[Any, Any],
        kotlin: Mapping[Any, Any],
    ) -> ToolchainRequirements:
        """Build requirements from a JVM table and a bundled-Kotlin table.

        The language table is the bundled Kotlin version truncated to
        MAJOR.MINOR; the API table uses the full bundled version.
        """
        kotlin_api = ToolchainRequirementTable.from_mapping(kotlin, name="kotlin_api")
        return cls(
            jvm_target=ToolchainRequirementTable.from_mapping(
                jvm_target,
                name="jvm_target",
                requirement_parser=Version.parse_jvm_level,
            ),
            kotlin_language=kotlin_api.map_requirements(
                lambda version: version.truncate(2),
                name="kotlin_language",
            ),
            kotlin_api=kotlin_api,
        )

    @classmethod
    def default(cls) -> ToolchainRequirements:
        """Built-in requirement tables."""
        return cls.from_tables(PLATFORM_JAVA_VERSIONS, PLATFORM_KOTLIN_VERSIONS)

    def tables(self) -> tuple[ToolchainRequirementTable, ...]:
        return (self.jvm_target, self.kotlin_language, self.kotlin_api)


def load_requirements(path: Path) -> ToolchainRequirements:
    """Load replacement requirement tables from a YAML file.

    The file may define ``jvm_target`` and ``kotlin`` mappings; missing
    keys fall back to the built-in data. ``kotlin_language`` and
    ``kotlin_api`` override the tables derived from ``kotlin``.

    Args:
        path: Path to the YAML file.

    Returns:
        ToolchainRequirements built from the file.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
        RequirementTableError: If a table is invalid.
    """
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read requirement tables: {e.strerror}", str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in requirement tables: {e}", str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Requirement tables must be a mapping", str(path))
    for key, table in data.items():
        if not isinstance(table, dict):
            raise ConfigurationError(f"Requirement table '{key}' must be a mapping", str(path))

    requirements = ToolchainRequirements.from_tables(
        data.get("jvm_target", PLATFORM_JAVA_VERSIONS),
        data.get("kotlin", PLATFORM_KOTLIN_VERSIONS),
    )
    if "kotlin_language" in data:
        requirements = replace(
            requirements,
            kotlin_language=ToolchainRequirementTable.from_mapping(
                data["kotlin_language"], name="kotlin_language"
            ),
        )
    if "kotlin_api" in data:
        requirements = replace(
            requirements,
            kotlin_api=ToolchainRequirementTable.from_mapping(
                data["kotlin_api"], name="kotlin_api"
            ),
        )

    logger.debug(
        "requirement_tables_loaded",
        path=str(path),
        tables={table.name: len(table) for table in requirements.tables()},
    )
    return requirements


__all__ = [
    "PLATFORM_JAVA_VERSIONS",
    "PLATFORM_KOTLIN_VERSIONS",
    "ToolchainRequirementTable",
    "ToolchainRequirements",
    "load_requirements",
]
