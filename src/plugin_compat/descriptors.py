"""Plugin descriptor (plugin.xml) parsing.

Descriptors declare the platform builds a plugin supports through the
``<idea-version since-build="..." until-build="..."/>`` element. The
verifier only needs the declared minimum (``since-build``).

Descriptors that cannot be read or parsed are dropped with a warning:
a broken descriptor never aborts verification.

Example:
    >>> from pathlib import Path
    >>> from plugin_compat.descriptors import DescriptorSet
    >>> descriptors = DescriptorSet.load([Path("build/patchedPluginXmlFiles/plugin.xml")])
    >>> [str(d.since_build) for d in descriptors]
    ['221.0']
"""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from plugin_compat.errors import VersionParseError
from plugin_compat.version import Version, parse_optional

logger = structlog.get_logger(__name__)

IDEA_VERSION_ELEMENT = "idea-version"
SINCE_BUILD_ATTRIBUTE = "since-build"
UNTIL_BUILD_ATTRIBUTE = "until-build"


class PluginDescriptor(BaseModel):
    """Successfully parsed plugin descriptor.

    Attributes:
        path: Location of the descriptor file.
        plugin_id: Value of ``<id>``, if present.
        name: Value of ``<name>``, if present.
        since_build: Declared minimum supported platform build.
        until_build: Declared maximum supported platform build, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    path: Path = Field(..., description="Location of the descriptor file")
    plugin_id: str | None = Field(default=None, description="Plugin identifier from <id>")
    name: str | None = Field(default=None, description="Plugin name from <name>")
    since_build: Version = Field(..., description="Declared minimum supported platform build")
    until_build: Version | None = Field(
        default=None,
        description="Declared maximum supported platform build",
    )


def _until_build(raw: str | None) -> Version | None:
    # "231.*" is an open upper bound within the 231 branch
    if raw is not None and raw.strip().endswith(".*"):
        raw = raw.strip()[:-2]
    return parse_optional(raw, Version.parse_build_number, field=UNTIL_BUILD_ATTRIBUTE)


def _text(root: ElementTree.Element, tag: str) -> str | None:
    element = root.find(tag)
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def parse_plugin_descriptor(path: Path) -> PluginDescriptor | None:
    """Parse a single plugin descriptor.

    Args:
        path: Path to a plugin.xml file.

    Returns:
        PluginDescriptor, or None if the file cannot be read, is not
        well-formed XML, or lacks a parseable since-build.
    """
    log = logger.bind(descriptor=str(path))
    try:
        root = ElementTree.parse(path).getroot()
    except OSError as e:
        log.warning("descriptor_unreadable", error=str(e))
        return None
    except ElementTree.ParseError as e:
        log.warning("descriptor_malformed", error=str(e))
        return None

    idea_version = root.find(IDEA_VERSION_ELEMENT)
    raw_since = idea_version.get(SINCE_BUILD_ATTRIBUTE) if idea_version is not None else None
    if raw_since is None:
        log.warning("descriptor_missing_since_build")
        return None

    try:
        since_build = Version.parse_build_number(raw_since)
    except VersionParseError as e:
        log.warning("descriptor_invalid_since_build", raw=raw_since, reason=e.reason)
        return None

    return PluginDescriptor(
        path=path,
        plugin_id=_text(root, "id"),
        name=_text(root, "name"),
        since_build=since_build,
        until_build=_until_build(idea_version.get(UNTIL_BUILD_ATTRIBUTE)),
    )


class DescriptorSet:
    """Ordered collection of successfully parsed descriptors.

    Attributes:
        descriptors: Parsed descriptors, in the order their paths were supplied.
        skipped: Paths of descriptors that failed to parse.
    """

    def __init__(
        self,
        descriptors: Iterable[PluginDescriptor] = (),
        skipped: Iterable[Path] = (),
    ) -> None:
        self.descriptors: tuple[PluginDescriptor, ...] = tuple(descriptors)
        self.skipped: tuple[Path, ...] = tuple(skipped)

    @classmethod
    def load(cls, paths: Iterable[Path]) -> DescriptorSet:
        """Parse descriptors, dropping the ones that fail.

        Args:
            paths: Descriptor file paths.

        Returns:
            DescriptorSet preserving the supplied order.
        """
        parsed: list[PluginDescriptor] = []
        skipped: list[Path] = []
        for path in paths:
            descriptor = parse_plugin_descriptor(Path(path))
            if descriptor is None:
                skipped.append(Path(path))
            else:
                parsed.append(descriptor)

        logger.debug("descriptors_loaded", parsed=len(parsed), skipped=len(skipped))
        return cls(parsed, skipped)

    def __iter__(self) -> Iterator[PluginDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def __bool__(self) -> bool:
        return bool(self.descriptors)


__all__ = [
    "DescriptorSet",
    "PluginDescriptor",
    "parse_plugin_descriptor",
]
