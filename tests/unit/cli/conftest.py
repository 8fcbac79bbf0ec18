"""Fixtures for CLI unit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

PROJECT_TEMPLATE = """platform:
  version: "2023.1"
  build: "IC-{build}"
java:
  source_compatibility: "{source}"
  target_compatibility: "{target}"
descriptors:
  - plugin.xml
"""


@pytest.fixture
def write_project(
    tmp_path: Path,
    write_descriptor: Callable[..., Path],
) -> Callable[..., Path]:
    """Factory writing plugin-compat.yaml plus a plugin.xml next to it.

    Returns:
        Callable accepting build, source, target and since_build; returns the
        settings file path.
    """

    def _write(
        build: str = "231.8770.65",
        source: str = "17",
        target: str = "17",
        since_build: str = "231.8770",
    ) -> Path:
        write_descriptor(since_build)
        path = tmp_path / "plugin-compat.yaml"
        path.write_text(PROJECT_TEMPLATE.format(build=build, source=source, target=target))
        return path

    return _write
