"""Tables command: print requirement tables in lookup order.

Example:
    $ plugin-compat tables
    $ plugin-compat tables --tables custom-tables.yaml
"""

from __future__ import annotations

from pathlib import Path

import click

from plugin_compat.cli.utils import success
from plugin_compat.cli.verify import load_tables


@click.command(name="tables", help="Print the build number to toolchain requirement tables.")
@click.option(
    "--tables",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file replacing the built-in requirement tables.",
    metavar="PATH",
)
def tables_command(tables: Path | None) -> None:
    """Print each table, highest threshold first."""
    requirements = load_tables(tables)
    for table in requirements.tables():
        success(f"{table.name}:")
        for threshold, requirement in table:
            success(f"  {threshold} -> {requirement}")


__all__ = ["tables_command"]
