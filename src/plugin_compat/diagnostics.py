"""Diagnostic and report models returned by the verifier.

A Diagnostic is data, never an exception: it describes one detected
incompatibility as a self-contained, one-line message. The report
aggregates diagnostics into a single warning only when there is at least
one of them.

Example:
    >>> report = VerificationReport(diagnostics=[...])
    >>> print(report.warning_message)
    The following plugin configuration issues were found:
    - The Java configuration specifies sourceCompatibility=8 but ...
    See: https://jb.gg/intellij-platform-versions
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

VERSIONS_DOCUMENTATION_URL = "https://jb.gg/intellij-platform-versions"
KOTLIN_STDLIB_URL = "https://jb.gg/intellij-platform-kotlin-stdlib"
KOTLIN_OOM_URL = "https://jb.gg/intellij-platform-kotlin-oom"
OLD_DOWNLOAD_DIR_URL = "https://jb.gg/intellij-platform-plugin-verifier-old-download-dir"

WARNING_HEADER = "The following plugin configuration issues were found:"


class DiagnosticKind(str, Enum):
    """Classification of a detected incompatibility."""

    PLATFORM_TOO_OLD = "platform_too_old"
    """since-build targets an older platform major than the one compiled against."""

    TARGET_LEVEL_TOO_HIGH = "target_level_too_high"
    """Java targetCompatibility exceeds what the platform can run."""

    SECONDARY_RUNTIME_TARGET_TOO_HIGH = "secondary_runtime_target_too_high"
    """Kotlin jvmTarget exceeds what the platform can run."""

    API_LEVEL_TOO_HIGH = "api_level_too_high"
    """Kotlin apiVersion exceeds the Kotlin bundled with since-build."""

    SOURCE_LEVEL_TOO_LOW = "source_level_too_low"
    """Java sourceCompatibility is below the level the platform is built with."""

    SECONDARY_LANGUAGE_LEVEL_TOO_LOW = "secondary_language_level_too_low"
    """Kotlin languageVersion is below the Kotlin bundled with the platform."""

    STDLIB_CONFLICT = "stdlib_conflict"
    """Kotlin stdlib dependency may clash with the bundled one."""

    KNOWN_DEFECT = "known_defect"
    """Kotlin plugin version known to exhaust the Gradle heap."""


class Diagnostic(BaseModel):
    """A single detected incompatibility.

    Attributes:
        kind: Classification of the incompatibility.
        message: Self-contained, one-line description.
        descriptor: Descriptor the diagnostic was derived from, or None for
            platform-wide checks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: DiagnosticKind = Field(..., description="Classification of the incompatibility")
    message: str = Field(..., min_length=1, description="One-line description")
    descriptor: Path | None = Field(
        default=None,
        description="Descriptor the diagnostic was derived from",
    )


class VerificationReport(BaseModel):
    """Outcome of one verification pass.

    Attributes:
        diagnostics: Diagnostics in emission order.
        skipped_descriptors: Descriptor paths that could not be parsed.
        hint: Informational migration hint, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    diagnostics: list[Diagnostic] = Field(default_factory=list)
    skipped_descriptors: list[Path] = Field(default_factory=list)
    hint: str | None = Field(default=None, description="Informational migration hint")

    @property
    def has_issues(self) -> bool:
        return bool(self.diagnostics)

    @property
    def warning_message(self) -> str | None:
        """Aggregated multi-line warning, or None when nothing was found."""
        return format_warning(self.diagnostics)


def format_warning(diagnostics: list[Diagnostic]) -> str | None:
    """Render diagnostics as a single aggregated warning.

    Args:
        diagnostics: Diagnostics in emission order.

    Returns:
        Multi-line warning text, or None if diagnostics is empty.
    """
    if not diagnostics:
        return None
    lines = [WARNING_HEADER]
    lines.extend(f"- {diagnostic.message}" for diagnostic in diagnostics)
    lines.append(f"See: {VERSIONS_DOCUMENTATION_URL}")
    return "\n".join(lines)


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "VerificationReport",
    "format_warning",
]
