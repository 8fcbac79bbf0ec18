"""plugin-compat: compiler settings verification for IntelliJ Platform plugins.

Checks a plugin project's Java and Kotlin compiler settings against the
requirements of the platform it targets and the platforms its plugin.xml
descriptors declare support for.

Example:
    >>> from pathlib import Path
    >>> from plugin_compat import CompatibilityVerifier, DescriptorSet, load_project_settings
    >>> settings = load_project_settings(Path("plugin-compat.yaml"))
    >>> report = CompatibilityVerifier().run(
    ...     settings.to_configuration(),
    ...     DescriptorSet.load(settings.descriptors),
    ... )
    >>> report.warning_message is None
    True
"""

from __future__ import annotations

__version__ = "0.1.0"

from plugin_compat.config import (
    CompilerConfiguration,
    ProjectSettings,
    VerifierSettings,
    load_project_settings,
)
from plugin_compat.descriptors import DescriptorSet, PluginDescriptor, parse_plugin_descriptor
from plugin_compat.diagnostics import Diagnostic, DiagnosticKind, VerificationReport
from plugin_compat.errors import (
    CompatError,
    ConfigurationError,
    FatalParseError,
    RequirementTableError,
    VersionParseError,
)
from plugin_compat.requirements import (
    ToolchainRequirements,
    ToolchainRequirementTable,
    load_requirements,
)
from plugin_compat.verifier import CompatibilityVerifier, verify_project
from plugin_compat.version import Version, compare, parse_optional

__all__ = [
    "__version__",
    # Errors
    "CompatError",
    "ConfigurationError",
    "FatalParseError",
    "RequirementTableError",
    "VersionParseError",
    # Versions
    "Version",
    "compare",
    "parse_optional",
    # Requirement tables
    "ToolchainRequirementTable",
    "ToolchainRequirements",
    "load_requirements",
    # Descriptors
    "DescriptorSet",
    "PluginDescriptor",
    "parse_plugin_descriptor",
    # Configuration
    "CompilerConfiguration",
    "ProjectSettings",
    "VerifierSettings",
    "load_project_settings",
    # Verification
    "CompatibilityVerifier",
    "Diagnostic",
    "DiagnosticKind",
    "VerificationReport",
    "verify_project",
]
