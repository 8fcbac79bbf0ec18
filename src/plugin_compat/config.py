"""Configuration models for plugin-compat.

Three layers, resolved outside the verification engine:

- ProjectSettings: raw, string-valued project configuration loaded from
  a YAML file (what the build script declares).
- VerifierSettings: process-wide values read from environment variables
  (download directories, logging).
- CompilerConfiguration: the parsed, immutable input of one verification
  run, produced by ProjectSettings.to_configuration().

Environment Variables:
    PLUGIN_COMPAT_DOWNLOAD_DIR: Plugin Verifier download directory
    PLUGIN_COMPAT_LEGACY_DOWNLOAD_DIR: Old default download directory
    PLUGIN_COMPAT_LOG_LEVEL: Minimum log level (default: WARNING)
    PLUGIN_COMPAT_JSON_LOGS: Emit JSON logs instead of console output

Example:
    >>> from pathlib import Path
    >>> settings = load_project_settings(Path("plugin-compat.yaml"))
    >>> config = settings.to_configuration(VerifierSettings())
    >>> str(config.platform_build)
    '231.8770.65'
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from plugin_compat.errors import ConfigurationError, FatalParseError, VersionParseError
from plugin_compat.version import Version, parse_optional

logger = structlog.get_logger(__name__)


def default_download_dir() -> Path:
    """Default Plugin Verifier download directory (XDG cache aware)."""
    cache_home = os.environ.get("XDG_CACHE_HOME")
    base = Path(cache_home) if cache_home else Path.home() / ".cache"
    return base / "pluginVerifier" / "ides"


def default_legacy_download_dir() -> Path:
    """Download directory used by older Plugin Verifier releases."""
    return Path.home() / ".pluginVerifier" / "ides"


class CompilerConfiguration(BaseModel):
    """Parsed input of a single verification run.

    Optional Kotlin values are None when they were never configured or
    failed to parse; the verifier never reports on absent values.

    Attributes:
        platform_version: Marketing version of the target platform (e.g. 2023.1).
        platform_build: Build number of the target platform (e.g. 231.8770.65).
        source_compatibility: Java source level.
        target_compatibility: Java target level.
        kotlin_plugin_available: Whether the Kotlin compiler is in use.
        kotlin_jvm_target: Kotlin ``jvmTarget``.
        kotlin_api_version: Kotlin ``apiVersion``.
        kotlin_language_version: Kotlin ``languageVersion``.
        kotlin_version: Version of the Kotlin Gradle plugin.
        kotlin_stdlib_default_dependency: ``kotlin.stdlib.default.dependency``,
            None when never set.
        kotlin_incremental_use_classpath_snapshot:
            ``kotlin.incremental.useClasspathSnapshot``, None when never set.
        download_dir: Configured Plugin Verifier download directory.
        legacy_download_dir: Old default download directory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    platform_version: Version
    platform_build: Version
    source_compatibility: Version
    target_compatibility: Version
    kotlin_plugin_available: bool = False
    kotlin_jvm_target: Version | None = None
    kotlin_api_version: Version | None = None
    kotlin_language_version: Version | None = None
    kotlin_version: Version | None = None
    kotlin_stdlib_default_dependency: bool | None = None
    kotlin_incremental_use_classpath_snapshot: bool | None = None
    download_dir: Path | None = None
    legacy_download_dir: Path | None = None


# =============================================================================
# Raw project settings (YAML)
# =============================================================================


def _to_str(value: Any) -> Any:
    # YAML reads 17 as int and 1.8 as float; keep the written form
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _RawSection(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        return _to_str(value)


class PlatformSection(_RawSection):
    """Resolved target platform identity."""

    version: str | None = Field(default=None, description="Platform version, e.g. 2023.1")
    build: str | None = Field(default=None, description="Platform build number, e.g. 231.8770.65")


class JavaSection(_RawSection):
    """Java compiler settings."""

    source_compatibility: str | None = Field(default=None, description="sourceCompatibility")
    target_compatibility: str | None = Field(default=None, description="targetCompatibility")


class KotlinSection(_RawSection):
    """Kotlin compiler settings and gradle.properties flags."""

    plugin_available: bool = Field(default=False, description="Kotlin Gradle plugin applied")
    jvm_target: str | None = Field(default=None, description="kotlinOptions.jvmTarget")
    api_version: str | None = Field(default=None, description="kotlinOptions.apiVersion")
    language_version: str | None = Field(default=None, description="kotlinOptions.languageVersion")
    version: str | None = Field(default=None, description="Kotlin Gradle plugin version")
    stdlib_default_dependency: bool | None = Field(
        default=None,
        description="kotlin.stdlib.default.dependency (null when never set)",
    )
    incremental_use_classpath_snapshot: bool | None = Field(
        default=None,
        description="kotlin.incremental.useClasspathSnapshot (null when never set)",
    )


class PluginVerifierSection(_RawSection):
    """Plugin Verifier settings."""

    download_dir: Path | None = Field(default=None, description="IDE download directory")


class ProjectSettings(BaseModel):
    """Raw project configuration as declared by the build.

    Attributes:
        platform: Target platform identity.
        java: Java compiler settings.
        kotlin: Kotlin compiler settings.
        plugin_verifier: Plugin Verifier settings.
        descriptors: Plugin descriptor paths.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    platform: PlatformSection = Field(default_factory=PlatformSection)
    java: JavaSection = Field(default_factory=JavaSection)
    kotlin: KotlinSection = Field(default_factory=KotlinSection)
    plugin_verifier: PluginVerifierSection = Field(default_factory=PluginVerifierSection)
    descriptors: list[Path] = Field(default_factory=list)

    def to_configuration(self, settings: VerifierSettings | None = None) -> CompilerConfiguration:
        """Parse the raw values into a CompilerConfiguration.

        Args:
            settings: Process-wide settings supplying the download directories.

        Returns:
            CompilerConfiguration for one verification run.

        Raises:
            FatalParseError: If a required value is missing or unparseable.
        """
        settings = settings or VerifierSettings()
        kotlin = self.kotlin

        return CompilerConfiguration(
            platform_version=_required("platform.version", self.platform.version, Version.parse),
            platform_build=_required(
                "platform.build", self.platform.build, Version.parse_build_number
            ),
            source_compatibility=_required(
                "java.source_compatibility",
                self.java.source_compatibility,
                Version.parse_jvm_level,
            ),
            target_compatibility=_required(
                "java.target_compatibility",
                self.java.target_compatibility,
                Version.parse_jvm_level,
            ),
            kotlin_plugin_available=kotlin.plugin_available,
            kotlin_jvm_target=parse_optional(
                kotlin.jvm_target, Version.parse_jvm_level, field="kotlin.jvm_target"
            ),
            kotlin_api_version=parse_optional(kotlin.api_version, field="kotlin.api_version"),
            kotlin_language_version=parse_optional(
                kotlin.language_version, field="kotlin.language_version"
            ),
            kotlin_version=parse_optional(kotlin.version, field="kotlin.version"),
            kotlin_stdlib_default_dependency=kotlin.stdlib_default_dependency,
            kotlin_incremental_use_classpath_snapshot=kotlin.incremental_use_classpath_snapshot,
            download_dir=(self.plugin_verifier.download_dir or settings.download_dir).absolute(),
            legacy_download_dir=settings.legacy_download_dir.absolute(),
        )


def _required(field: str, raw: str | None, parser: Callable[[str], Version]) -> Version:
    if raw is None:
        raise FatalParseError(field, raw)
    try:
        return parser(raw)
    except VersionParseError as e:
        raise FatalParseError(field, raw) from e


def load_project_settings(config_path: Path) -> ProjectSettings:
    """Load project settings from a YAML file.

    Relative descriptor and download paths are resolved against the
    directory containing the file.

    Args:
        config_path: Path to the YAML settings file.

    Returns:
        Validated ProjectSettings.

    Raises:
        ConfigurationError: If the file cannot be read or fails validation.
    """
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read settings file: {e.strerror}", str(config_path)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", str(config_path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must contain a mapping", str(config_path))

    try:
        settings = ProjectSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} validation error(s)\n{e}",
            str(config_path),
        ) from e

    base = config_path.parent
    download_dir = settings.plugin_verifier.download_dir
    settings = settings.model_copy(
        update={
            "descriptors": [base / path for path in settings.descriptors],
            "plugin_verifier": PluginVerifierSection(
                download_dir=base / download_dir if download_dir is not None else None
            ),
        }
    )
    logger.debug(
        "project_settings_loaded",
        path=str(config_path),
        descriptors=len(settings.descriptors),
    )
    return settings


class VerifierSettings(BaseSettings):
    """Process-wide settings resolved from the environment.

    Environment variables use the ``PLUGIN_COMPAT_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_COMPAT_",
        extra="ignore",
    )

    download_dir: Path = Field(
        default_factory=default_download_dir,
        description="Plugin Verifier download directory",
    )
    legacy_download_dir: Path = Field(
        default_factory=default_legacy_download_dir,
        description="Old default Plugin Verifier download directory",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum log level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


__all__ = [
    "CompilerConfiguration",
    "JavaSection",
    "KotlinSection",
    "PlatformSection",
    "PluginVerifierSection",
    "ProjectSettings",
    "VerifierSettings",
    "default_download_dir",
    "default_legacy_download_dir",
    "load_project_settings",
]
