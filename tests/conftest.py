"""Shared fixtures for plugin-compat tests.

Provides:
- Isolation of structlog configuration and PLUGIN_COMPAT_* environment
- A plugin.xml factory writing descriptors under tmp_path
- Synthetic requirement tables and a baseline compiler configuration
- An in-memory span exporter wired into the plugin-compat tracer
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from plugin_compat.config import CompilerConfiguration
from plugin_compat.requirements import ToolchainRequirements
from plugin_compat.telemetry.tracing import set_tracer
from plugin_compat.version import Version

DescriptorFactory = Callable[..., Path]
ConfigFactory = Callable[..., CompilerConfiguration]

DESCRIPTOR_TEMPLATE = """<idea-plugin>
  <id>{plugin_id}</id>
  <name>{name}</name>
  {idea_version}
</idea-plugin>
"""


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point download directories into tmp_path and reset structlog afterwards."""
    for name in ("LOG_LEVEL", "JSON_LOGS"):
        monkeypatch.delenv(f"PLUGIN_COMPAT_{name}", raising=False)
    monkeypatch.setenv("PLUGIN_COMPAT_DOWNLOAD_DIR", str(tmp_path / "cache" / "ides"))
    monkeypatch.setenv("PLUGIN_COMPAT_LEGACY_DOWNLOAD_DIR", str(tmp_path / "legacy" / "ides"))
    yield
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Returns:
        CliRunner instance for testing Click commands.
    """
    return CliRunner()


@pytest.fixture
def write_descriptor(tmp_path: Path) -> DescriptorFactory:
    """Factory writing plugin.xml files into tmp_path.

    Returns:
        Callable accepting since_build, until_build, filename, plugin_id, name.
        Pass since_build=None to omit the attribute.
    """

    def _write(
        since_build: str | None = "231.0",
        until_build: str | None = None,
        *,
        filename: str = "plugin.xml",
        plugin_id: str = "org.example.plugin",
        name: str = "Example",
    ) -> Path:
        attributes = []
        if since_build is not None:
            attributes.append(f'since-build="{since_build}"')
        if until_build is not None:
            attributes.append(f'until-build="{until_build}"')
        idea_version = f"<idea-version {' '.join(attributes)}/>"

        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            DESCRIPTOR_TEMPLATE.format(plugin_id=plugin_id, name=name, idea_version=idea_version)
        )
        return path

    return _write


@pytest.fixture
def synthetic_requirements() -> ToolchainRequirements:
    """Two-generation requirement tables.

    jvm_target: 231 -> 17, 221 -> 11
    kotlin:     231 -> 1.8.0, 221 -> 1.6.20 (language: 1.8, 1.6)
    """
    return ToolchainRequirements.from_tables(
        jvm_target={"231": "17", "221": "11"},
        kotlin={"231": "1.8.0", "221": "1.6.20"},
    )


@pytest.fixture
def make_config() -> ConfigFactory:
    """Factory for CompilerConfiguration with a clean 2023.1 / Java 17 baseline.

    Keyword overrides accept strings for Version fields.
    """
    version_fields = {
        "platform_version": Version.parse,
        "platform_build": Version.parse_build_number,
        "source_compatibility": Version.parse_jvm_level,
        "target_compatibility": Version.parse_jvm_level,
        "kotlin_jvm_target": Version.parse_jvm_level,
        "kotlin_api_version": Version.parse,
        "kotlin_language_version": Version.parse,
        "kotlin_version": Version.parse,
    }

    def _make(**overrides: Any) -> CompilerConfiguration:
        values: dict[str, Any] = {
            "platform_version": "2023.1",
            "platform_build": "231.0.0",
            "source_compatibility": "17",
            "target_compatibility": "17",
        }
        values.update(overrides)
        for key, parser in version_fields.items():
            if isinstance(values.get(key), str):
                values[key] = parser(values[key])
        return CompilerConfiguration(**values)

    return _make


@pytest.fixture
def span_exporter() -> Generator[InMemorySpanExporter, None, None]:
    """Record plugin-compat spans in memory."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    set_tracer(provider.get_tracer("plugin_compat.tests"))
    yield exporter
    set_tracer(None)
    provider.shutdown()
