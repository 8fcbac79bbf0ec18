"""Partially-specified version values for platform and toolchain levels.

A Version holds one to three non-negative integer components
(MAJOR[.MINOR[.PATCH]]) exactly as they were written. Absent trailing
components stay absent for rendering, and are padded with zero for
ordering, so ``2023 < 2023.1`` and ``2023 == 2023.0``.

Comparison Rules:
    - Ordering is lexicographic over (major, minor, patch).
    - ``compare()`` is null-safe: when either operand is None the pair is
      treated as equal. A configuration value that was never supplied can
      therefore never trigger a violation.

Example:
    >>> from plugin_compat.version import Version, compare
    >>> Version.parse("231.8770.65") > Version.parse("231")
    True
    >>> compare(Version.parse("17"), None)
    0
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable

import structlog

from plugin_compat.errors import VersionParseError

logger = structlog.get_logger(__name__)

MAX_COMPONENTS = 3

# Product code prefix of a full build number, e.g. "IC-" in "IC-231.8770.65"
_PRODUCT_CODE_PREFIX = re.compile(r"^[A-Z]{2,}-")

# Gradle-style JVM level spellings: VERSION_17, JVM_1_8
_JVM_LEVEL_PREFIX = re.compile(r"^(VERSION|JVM)_", re.IGNORECASE)


@functools.total_ordering
class Version:
    """Ordered version value with 1-3 components.

    Attributes:
        components: The components as written, most significant first.
    """

    __slots__ = ("components",)

    components: tuple[int, ...]

    def __init__(self, *components: int) -> None:
        """Initialize Version.

        Args:
            *components: One to three non-negative integers.

        Raises:
            ValueError: If the component count or values are out of range.
        """
        if not 1 <= len(components) <= MAX_COMPONENTS:
            raise ValueError(
                f"Version needs 1 to {MAX_COMPONENTS} components, got {len(components)}"
            )
        if any(c < 0 for c in components):
            raise ValueError(f"Version components must be non-negative: {components}")
        object.__setattr__(self, "components", tuple(int(c) for c in components))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Version is immutable")

    def __reduce__(self) -> tuple[type[Version], tuple[int, ...]]:
        return (Version, self.components)

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a dot-delimited version string.

        Args:
            value: Version string (e.g., "17", "1.8.20", "231.8770.65").

        Returns:
            Parsed Version.

        Raises:
            VersionParseError: On empty input, a non-numeric or negative
                segment, or more than three segments.

        Examples:
            >>> Version.parse("1.8.20")
            Version('1.8.20')
            >>> Version.parse("2023.1").minor
            1
        """
        if value is None:
            raise VersionParseError("None", "value is missing")
        text = str(value).strip()
        if not text:
            raise VersionParseError(str(value), "empty string")

        segments = text.split(".")
        if len(segments) > MAX_COMPONENTS:
            raise VersionParseError(text, f"more than {MAX_COMPONENTS} components")

        components: list[int] = []
        for segment in segments:
            if not (segment.isascii() and segment.isdigit()):
                raise VersionParseError(text, f"segment {segment!r} is not a non-negative integer")
            components.append(int(segment))
        return cls(*components)

    @classmethod
    def parse_build_number(cls, value: str) -> Version:
        """Parse a platform build number, tolerating a product code prefix.

        Build numbers with more than three parts keep the first three.

        Examples:
            >>> Version.parse_build_number("IC-231.8770.65")
            Version('231.8770.65')
            >>> Version.parse_build_number("AI-223.8836.35.2231.10406996")
            Version('223.8836.35')
        """
        text = str(value).strip() if value is not None else ""
        segments = _PRODUCT_CODE_PREFIX.sub("", text).split(".")
        return cls.parse(".".join(segments[:MAX_COMPONENTS]))

    @classmethod
    def parse_jvm_level(cls, value: str) -> Version:
        """Parse a JVM language level the way Gradle's JavaVersion reads it.

        Legacy ``1.N`` spellings collapse to ``N`` and only the feature
        release is kept.

        Examples:
            >>> Version.parse_jvm_level("1.8")
            Version('8')
            >>> Version.parse_jvm_level("VERSION_17")
            Version('17')
            >>> Version.parse_jvm_level("11.0.2")
            Version('11')
        """
        text = str(value).strip() if value is not None else ""
        segments = _JVM_LEVEL_PREFIX.sub("", text).replace("_", ".").split(".")
        if segments[0] == "1" and len(segments) > 1:
            return cls.parse(segments[1])
        return cls.parse(segments[0])

    @property
    def major(self) -> int:
        return self.components[0]

    @property
    def minor(self) -> int | None:
        return self.components[1] if len(self.components) > 1 else None

    @property
    def patch(self) -> int | None:
        return self.components[2] if len(self.components) > 2 else None

    def truncate(self, size: int) -> Version:
        """Keep at most the first ``size`` components."""
        return Version(*self.components[:size])

    def _key(self) -> tuple[int, ...]:
        return self.components + (0,) * (MAX_COMPONENTS - len(self.components))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


def compare(a: Version | None, b: Version | None) -> int:
    """Null-safe three-way comparison.

    Args:
        a: Left operand, or None when the value was never supplied.
        b: Right operand, or None when the value was never supplied.

    Returns:
        -1, 0 or 1. Returns 0 whenever either operand is None.

    Examples:
        >>> compare(Version(11), Version(17))
        -1
        >>> compare(None, Version(17))
        0
    """
    if a is None or b is None:
        return 0
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def format_jvm_level(version: Version | None) -> str:
    """Render a JVM level the way Gradle's JavaVersion prints it.

    Levels up to 8 use the legacy ``1.N`` spelling.

    Examples:
        >>> format_jvm_level(Version(8))
        '1.8'
        >>> format_jvm_level(Version(17))
        '17'
    """
    if version is None:
        return "None"
    if version.major <= 8:
        return f"1.{version.major}"
    return str(version)


def parse_optional(
    value: str | None,
    parser: Callable[[str], Version] = Version.parse,
    *,
    field: str | None = None,
) -> Version | None:
    """Parse an optional value, treating absence and parse failures alike.

    Args:
        value: Raw value, or None when not configured.
        parser: Parsing function (Version.parse, Version.parse_jvm_level, ...).
        field: Field name used for logging.

    Returns:
        Parsed Version, or None when the value is missing or unparseable.
    """
    if value is None or not str(value).strip():
        return None
    try:
        return parser(value)
    except VersionParseError as e:
        logger.debug("optional_version_ignored", field=field, raw=value, reason=e.reason)
        return None


__all__ = [
    "MAX_COMPONENTS",
    "Version",
    "compare",
    "format_jvm_level",
    "parse_optional",
]
