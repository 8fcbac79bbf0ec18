"""Compatibility verification of compiler settings against a target platform.

The verifier is a pure function of its inputs: platform identity, compiler
configuration, parsed plugin descriptors and the injected requirement
tables. It returns diagnostics in a fixed order:

1. For each descriptor, in the order supplied:
   since-build vs. platform major, Java target, Kotlin jvmTarget, Kotlin apiVersion.
2. Once per run, against the platform build:
   Java source level, Kotlin language level, Java target, Kotlin jvmTarget,
   Kotlin stdlib dependency flag, known-defect Kotlin versions.

Every comparison uses the null-safe compare(): a value that was never
configured never produces a diagnostic. Kotlin values are only considered
when the Kotlin plugin is available.

Example:
    >>> from pathlib import Path
    >>> from plugin_compat.config import load_project_settings
    >>> settings = load_project_settings(Path("plugin-compat.yaml"))
    >>> verifier = CompatibilityVerifier()
    >>> diagnostics = verifier.verify(
    ...     settings.to_configuration(), DescriptorSet.load(settings.descriptors)
    ... )
    >>> for diagnostic in diagnostics:
    ...     print(diagnostic.message)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from plugin_compat.config import CompilerConfiguration, ProjectSettings, VerifierSettings
from plugin_compat.descriptors import DescriptorSet, PluginDescriptor
from plugin_compat.diagnostics import (
    KOTLIN_OOM_URL,
    KOTLIN_STDLIB_URL,
    Diagnostic,
    DiagnosticKind,
    VerificationReport,
)
from plugin_compat.migration import legacy_download_dir_hint
from plugin_compat.requirements import ToolchainRequirements
from plugin_compat.telemetry.tracing import create_span
from plugin_compat.version import Version, compare, format_jvm_level

logger = structlog.get_logger(__name__)

# Kotlin Gradle plugin versions in [1.8.20, 1.9) exhaust the Gradle heap
# unless kotlin.incremental.useClasspathSnapshot is set explicitly
KNOWN_DEFECT_RANGE: tuple[Version, Version] = (Version(1, 8, 20), Version(1, 9))


class CompatibilityVerifier:
    """Checks compiler settings against platform requirements.

    Attributes:
        requirements: Requirement tables used for lookups.
    """

    def __init__(self, requirements: ToolchainRequirements | None = None) -> None:
        """Initialize CompatibilityVerifier.

        Args:
            requirements: Requirement tables; defaults to the built-in data.
        """
        self.requirements = requirements or ToolchainRequirements.default()
        self._log = logger.bind(component="CompatibilityVerifier")

    def verify(
        self,
        config: CompilerConfiguration,
        descriptors: Iterable[PluginDescriptor] = (),
    ) -> list[Diagnostic]:
        """Evaluate every rule and collect diagnostics in emission order.

        Args:
            config: Parsed compiler configuration.
            descriptors: Successfully parsed plugin descriptors.

        Returns:
            Diagnostics, possibly empty. Never raises for a valid configuration.
        """
        descriptors = list(descriptors)
        with create_span(
            "verify.configuration",
            attributes={
                "verify.platform_build": str(config.platform_build),
                "verify.descriptor_count": len(descriptors),
            },
        ) as span:
            diagnostics: list[Diagnostic] = []
            for descriptor in descriptors:
                diagnostics.extend(self._check_descriptor(config, descriptor))
            diagnostics.extend(self._check_platform(config))
            span.set_attribute("verify.diagnostic_count", len(diagnostics))

        self._log.debug(
            "verification_complete",
            platform_build=str(config.platform_build),
            descriptors=len(descriptors),
            diagnostics=len(diagnostics),
        )
        return diagnostics

    def run(
        self,
        config: CompilerConfiguration,
        descriptors: DescriptorSet | None = None,
    ) -> VerificationReport:
        """Verify and attach the download directory migration hint.

        Args:
            config: Parsed compiler configuration.
            descriptors: Parsed plugin descriptors.

        Returns:
            VerificationReport with diagnostics, skipped descriptors and hint.
        """
        if descriptors is None:
            descriptors = DescriptorSet()
        diagnostics = self.verify(config, descriptors)
        hint = legacy_download_dir_hint(config.download_dir, config.legacy_download_dir)
        return VerificationReport(
            diagnostics=diagnostics,
            skipped_descriptors=list(descriptors.skipped),
            hint=hint,
        )

    def _kotlin(self, config: CompilerConfiguration, value: Version | None) -> Version | None:
        return value if config.kotlin_plugin_available else None

    def _check_descriptor(
        self,
        config: CompilerConfiguration,
        descriptor: PluginDescriptor,
    ) -> Iterator[Diagnostic]:
        since_build = descriptor.since_build
        since_build_java = self.requirements.jvm_target.required_version(since_build)
        since_build_kotlin_api = self.requirements.kotlin_api.required_version(since_build)
        jvm_target = self._kotlin(config, config.kotlin_jvm_target)
        api_version = self._kotlin(config, config.kotlin_api_version)
        path = descriptor.path
        target = format_jvm_level(config.target_compatibility)
        required_java = format_jvm_level(since_build_java)
        jvm = format_jvm_level(jvm_target)

        if since_build.major < config.platform_build.major:
            yield Diagnostic(
                kind=DiagnosticKind.PLATFORM_TOO_OLD,
                descriptor=path,
                message=(
                    "The 'since-build' property is lower than the target IntelliJ Platform "
                    f"major version: {since_build} < {config.platform_build.major}."
                ),
            )
        if compare(since_build_java, config.target_compatibility) < 0:
            yield Diagnostic(
                kind=DiagnosticKind.TARGET_LEVEL_TOO_HIGH,
                descriptor=path,
                message=(
                    "The Java configuration specifies "
                    f"targetCompatibility={target} but "
                    f"since-build='{since_build}' property requires "
                    f"targetCompatibility={required_java}."
                ),
            )
        if compare(since_build_java, jvm_target) < 0:
            yield Diagnostic(
                kind=DiagnosticKind.SECONDARY_RUNTIME_TARGET_TOO_HIGH,
                descriptor=path,
                message=(
                    f"The Kotlin configuration specifies jvmTarget={jvm} but "
                    f"since-build='{since_build}' property requires jvmTarget={required_java}."
                ),
            )
        if compare(since_build_kotlin_api, api_version) < 0:
            yield Diagnostic(
                kind=DiagnosticKind.API_LEVEL_TOO_HIGH,
                descriptor=path,
                message=(
                    f"The Kotlin configuration specifies apiVersion={api_version} but "
                    f"since-build='{since_build}' property requires "
                    f"apiVersion={since_build_kotlin_api}."
                ),
            )

    def _check_platform(self, config: CompilerConfiguration) -> Iterator[Diagnostic]:
        platform = config.platform_version
        platform_java = self.requirements.jvm_target.required_version(config.platform_build)
        platform_kotlin_language = self.requirements.kotlin_language.required_version(
            config.platform_build
        )
        jvm_target = self._kotlin(config, config.kotlin_jvm_target)
        language_version = self._kotlin(config, config.kotlin_language_version)
        kotlin_version = self._kotlin(config, config.kotlin_version)
        source = format_jvm_level(config.source_compatibility)
        target = format_jvm_level(config.target_compatibility)
        required_java = format_jvm_level(platform_java)
        jvm = format_jvm_level(jvm_target)

        if compare(platform_java, config.source_compatibility) > 0:
            yield Diagnostic(
                kind=DiagnosticKind.SOURCE_LEVEL_TOO_LOW,
                message=(
                    "The Java configuration specifies "
                    f"sourceCompatibility={source} but IntelliJ Platform "
                    f"{platform} requires sourceCompatibility={required_java}."
                ),
            )
        if compare(platform_kotlin_language, language_version) > 0:
            yield Diagnostic(
                kind=DiagnosticKind.SECONDARY_LANGUAGE_LEVEL_TOO_LOW,
                message=(
                    f"The Kotlin configuration specifies languageVersion={language_version} but "
                    f"IntelliJ Platform {platform} requires "
                    f"languageVersion={platform_kotlin_language}."
                ),
            )
        if compare(platform_java, config.target_compatibility) < 0:
            yield Diagnostic(
                kind=DiagnosticKind.TARGET_LEVEL_TOO_HIGH,
                message=(
                    "The Java configuration specifies "
                    f"targetCompatibility={target} but IntelliJ Platform "
                    f"{platform} requires targetCompatibility={required_java}."
                ),
            )
        if compare(platform_java, jvm_target) < 0:
            yield Diagnostic(
                kind=DiagnosticKind.SECONDARY_RUNTIME_TARGET_TOO_HIGH,
                message=(
                    f"The Kotlin configuration specifies jvmTarget={jvm} but "
                    f"IntelliJ Platform {platform} requires jvmTarget={required_java}."
                ),
            )
        if config.kotlin_plugin_available and config.kotlin_stdlib_default_dependency is None:
            yield Diagnostic(
                kind=DiagnosticKind.STDLIB_CONFLICT,
                message=(
                    "The dependency on the Kotlin Standard Library (stdlib) is automatically "
                    "added when using the Gradle Kotlin plugin and may conflict with the version "
                    f"provided with the IntelliJ Platform, see: {KOTLIN_STDLIB_URL}"
                ),
            )
        if (
            kotlin_version is not None
            and KNOWN_DEFECT_RANGE[0] <= kotlin_version < KNOWN_DEFECT_RANGE[1]
            and config.kotlin_incremental_use_classpath_snapshot is None
        ):
            yield Diagnostic(
                kind=DiagnosticKind.KNOWN_DEFECT,
                message=(
                    f"The Kotlin plugin in version {kotlin_version} used with the Gradle IntelliJ "
                    "Plugin leads to the 'java.lang.OutOfMemoryError: Java heap space' "
                    f"exception, see: {KOTLIN_OOM_URL}"
                ),
            )


def verify_project(
    settings: ProjectSettings,
    *,
    descriptor_paths: Iterable[Path] = (),
    requirements: ToolchainRequirements | None = None,
    verifier_settings: VerifierSettings | None = None,
) -> VerificationReport:
    """Resolve project settings and run a full verification pass.

    Required values are parsed before any descriptor is read, so a
    FatalParseError aborts the pass without producing diagnostics.

    Args:
        settings: Raw project settings.
        descriptor_paths: Extra descriptor paths, appended to settings.descriptors.
        requirements: Requirement tables; defaults to the built-in data.
        verifier_settings: Process-wide settings.

    Returns:
        VerificationReport for the project.

    Raises:
        FatalParseError: If a required configuration value cannot be parsed.
    """
    config = settings.to_configuration(verifier_settings)
    with create_span("verify.load_descriptors"):
        descriptors = DescriptorSet.load([*settings.descriptors, *descriptor_paths])
    return CompatibilityVerifier(requirements).run(config, descriptors)


__all__ = [
    "KNOWN_DEFECT_RANGE",
    "CompatibilityVerifier",
    "verify_project",
]
