"""Unit tests for the download directory migration hint."""

from __future__ import annotations

from pathlib import Path

import pytest

from plugin_compat.migration import legacy_download_dir_hint


@pytest.fixture
def legacy_dir(tmp_path: Path) -> Path:
    """Old download directory holding one downloaded IDE."""
    directory = tmp_path / "legacy" / "ides"
    (directory / "IC-2023.1").mkdir(parents=True)
    return directory


class TestLegacyDownloadDirHint:
    """Tests for legacy_download_dir_hint()."""

    def test_hint_names_both_directories(self, tmp_path: Path, legacy_dir: Path) -> None:
        download_dir = tmp_path / "cache" / "ides"

        hint = legacy_download_dir_hint(download_dir, legacy_dir)

        assert hint == (
            f"The Plugin Verifier download directory is set to {download_dir}, "
            f"but downloaded IDEs were also found in {legacy_dir}, "
            "see: https://jb.gg/intellij-platform-plugin-verifier-old-download-dir"
        )

    def test_same_directory(self, legacy_dir: Path) -> None:
        assert legacy_download_dir_hint(legacy_dir, legacy_dir) is None

    def test_same_directory_relative(
        self, tmp_path: Path, legacy_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert legacy_download_dir_hint(Path("legacy/ides"), legacy_dir) is None

    def test_legacy_directory_missing(self, tmp_path: Path) -> None:
        assert legacy_download_dir_hint(tmp_path / "ides", tmp_path / "missing") is None

    def test_legacy_directory_empty(self, tmp_path: Path) -> None:
        empty = tmp_path / "legacy"
        empty.mkdir()

        assert legacy_download_dir_hint(tmp_path / "ides", empty) is None

    def test_legacy_path_is_a_file(self, tmp_path: Path) -> None:
        legacy = tmp_path / "legacy"
        legacy.write_text("not a directory")

        assert legacy_download_dir_hint(tmp_path / "ides", legacy) is None

    @pytest.mark.parametrize("missing", ["download_dir", "legacy_dir"])
    def test_unknown_paths(self, tmp_path: Path, legacy_dir: Path, missing: str) -> None:
        paths = {"download_dir": tmp_path / "ides", "legacy_dir": legacy_dir}
        paths[missing] = None  # type: ignore[assignment]

        assert legacy_download_dir_hint(**paths) is None

    def test_probe_failure_treated_as_missing(
        self, tmp_path: Path, legacy_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _denied(self: Path) -> None:
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", _denied)

        assert legacy_download_dir_hint(tmp_path / "ides", legacy_dir) is None
