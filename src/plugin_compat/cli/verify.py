"""Verify command implementation.

This module implements `plugin-compat verify`, which:
- Loads project settings (plugin-compat.yaml) and process-wide settings
- Parses the plugin descriptors
- Checks the compiler configuration against the platform requirements
- Prints the aggregated warning and the download directory hint

Diagnostics are advisory: the command exits 0 when it could evaluate the
configuration, whatever it found.

Example:
    $ plugin-compat verify --config plugin-compat.yaml
    $ plugin-compat verify -c plugin-compat.yaml -d build/plugin.xml --format json
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from plugin_compat.cli.utils import ExitCode, error_exit, info, success, warn
from plugin_compat.config import VerifierSettings, load_project_settings
from plugin_compat.errors import ConfigurationError, FatalParseError, RequirementTableError
from plugin_compat.requirements import ToolchainRequirements, load_requirements
from plugin_compat.verifier import verify_project

logger = structlog.get_logger(__name__)


def load_tables(tables: Path | None) -> ToolchainRequirements:
    """Load requirement tables from a file, or the built-in ones."""
    if tables is None:
        return ToolchainRequirements.default()
    try:
        return load_requirements(tables)
    except (ConfigurationError, RequirementTableError) as e:
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)


@click.command(
    name="verify",
    help="Check compiler settings against the target platform requirements.",
    epilog="""
Examples:
    $ plugin-compat verify --config plugin-compat.yaml
    $ plugin-compat verify -c plugin-compat.yaml -d build/plugin.xml
    $ plugin-compat verify -c plugin-compat.yaml --format json
""",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="plugin-compat.yaml",
    show_default=True,
    help="Path to the project settings file.",
    metavar="PATH",
)
@click.option(
    "--descriptor",
    "-d",
    "descriptors",
    type=click.Path(dir_okay=False, path_type=Path),
    multiple=True,
    help="Plugin descriptor (plugin.xml) to check. Repeatable.",
    metavar="PATH",
)
@click.option(
    "--tables",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file replacing the built-in requirement tables.",
    metavar="PATH",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def verify_command(
    ctx: click.Context,
    config_path: Path,
    descriptors: tuple[Path, ...],
    tables: Path | None,
    output_format: str,
) -> None:
    """Verify the project configuration.

    Args:
        ctx: Click context carrying the process-wide settings.
        config_path: Path to the project settings file.
        descriptors: Extra plugin descriptor paths.
        tables: Optional requirement tables file.
        output_format: Output format (text, json).
    """
    verifier_settings = (ctx.obj or {}).get("settings") or VerifierSettings()

    if not config_path.exists():
        error_exit(
            "Settings file not found",
            exit_code=ExitCode.FILE_NOT_FOUND,
            path=str(config_path),
        )

    requirements = load_tables(tables)

    try:
        settings = load_project_settings(config_path)
        report = verify_project(
            settings,
            descriptor_paths=descriptors,
            requirements=requirements,
            verifier_settings=verifier_settings,
        )
    except ConfigurationError as e:
        error_exit(str(e), exit_code=ExitCode.VALIDATION_ERROR)
    except FatalParseError as e:
        error_exit(
            "Required version could not be parsed",
            exit_code=ExitCode.VALIDATION_ERROR,
            field=e.field,
            value=e.raw,
        )

    logger.info(
        "verification_report",
        diagnostics=len(report.diagnostics),
        skipped_descriptors=len(report.skipped_descriptors),
        hint=report.hint is not None,
    )

    if output_format.lower() == "json":
        success(report.model_dump_json(indent=2))
        return

    warning = report.warning_message
    if warning is not None:
        warn(warning)
    if report.hint is not None:
        info(report.hint)


__all__ = ["load_tables", "verify_command"]
