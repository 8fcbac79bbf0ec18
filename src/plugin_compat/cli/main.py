"""Main entry point for the plugin-compat CLI.

Commands:
    plugin-compat verify: Check compiler settings against the platform
    plugin-compat tables: Print the requirement tables

Example:
    $ plugin-compat --help
    $ plugin-compat verify --config plugin-compat.yaml
"""

from __future__ import annotations

import sys
from importlib.metadata import version as get_version

import click
from pydantic import ValidationError

from plugin_compat.cli.tables import tables_command
from plugin_compat.cli.verify import verify_command
from plugin_compat.config import VerifierSettings
from plugin_compat.telemetry.logging import configure_logging


def _get_version() -> str:
    """Get the plugin-compat package version.

    Returns:
        Version string from package metadata, or 'unknown' if not installed.
    """
    try:
        return get_version("plugin-compat")
    except Exception:
        return "unknown"


@click.group(
    name="plugin-compat",
    help="plugin-compat - Verify plugin compiler settings against IntelliJ Platform requirements.",
    epilog="Use 'plugin-compat <command> --help' for command-specific help.",
    context_settings={
        "help_option_names": ["-h", "--help"],
    },
)
@click.version_option(
    version=_get_version(),
    prog_name="plugin-compat",
    message="%(prog)s %(version)s",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Root command group for the plugin-compat CLI."""
    ctx.ensure_object(dict)
    try:
        settings = VerifierSettings()
    except ValidationError as e:
        raise click.UsageError(f"Invalid PLUGIN_COMPAT_* environment: {e}") from e
    configure_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_output=settings.json_logs,
    )
    ctx.obj["settings"] = settings


cli.add_command(verify_command)
cli.add_command(tables_command)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the plugin-compat CLI.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
