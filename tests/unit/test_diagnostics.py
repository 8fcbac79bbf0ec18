"""Unit tests for diagnostics and the aggregated warning."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from plugin_compat.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    VerificationReport,
    format_warning,
)


@pytest.fixture
def diagnostics() -> list[Diagnostic]:
    return [
        Diagnostic(
            kind=DiagnosticKind.PLATFORM_TOO_OLD,
            message="The 'since-build' property is lower than the target IntelliJ Platform "
            "major version: 221.0 < 231.",
            descriptor=Path("plugin.xml"),
        ),
        Diagnostic(
            kind=DiagnosticKind.STDLIB_CONFLICT,
            message="stdlib may conflict",
        ),
    ]


class TestFormatWarning:
    """Tests for format_warning()."""

    def test_empty_batch_produces_no_warning(self) -> None:
        """Test that no diagnostics means no output at all, not an empty string."""
        assert format_warning([]) is None

    def test_aggregated_lines(self, diagnostics: list[Diagnostic]) -> None:
        warning = format_warning(diagnostics)

        assert warning == (
            "The following plugin configuration issues were found:\n"
            "- The 'since-build' property is lower than the target IntelliJ Platform "
            "major version: 221.0 < 231.\n"
            "- stdlib may conflict\n"
            "See: https://jb.gg/intellij-platform-versions"
        )


class TestDiagnostic:
    """Tests for the Diagnostic model."""

    def test_message_required(self) -> None:
        with pytest.raises(ValidationError):
            Diagnostic(kind=DiagnosticKind.KNOWN_DEFECT, message="")

    def test_frozen(self, diagnostics: list[Diagnostic]) -> None:
        with pytest.raises(ValidationError):
            diagnostics[0].message = "changed"  # type: ignore[misc]

    def test_kind_values(self) -> None:
        assert DiagnosticKind.TARGET_LEVEL_TOO_HIGH.value == "target_level_too_high"
        assert DiagnosticKind("known_defect") is DiagnosticKind.KNOWN_DEFECT


class TestVerificationReport:
    """Tests for VerificationReport."""

    def test_empty_report(self) -> None:
        report = VerificationReport()

        assert not report.has_issues
        assert report.warning_message is None
        assert report.hint is None

    def test_warning_message(self, diagnostics: list[Diagnostic]) -> None:
        report = VerificationReport(diagnostics=diagnostics)

        assert report.has_issues
        assert report.warning_message == format_warning(diagnostics)

    def test_json_serialisation(self, diagnostics: list[Diagnostic]) -> None:
        report = VerificationReport(
            diagnostics=diagnostics,
            skipped_descriptors=[Path("broken.xml")],
            hint="hint",
        )

        data = json.loads(report.model_dump_json())

        assert [d["kind"] for d in data["diagnostics"]] == ["platform_too_old", "stdlib_conflict"]
        assert data["diagnostics"][0]["descriptor"] == "plugin.xml"
        assert data["diagnostics"][1]["descriptor"] is None
        assert data["skipped_descriptors"] == ["broken.xml"]
        assert data["hint"] == "hint"
