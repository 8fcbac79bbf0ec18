"""Command-line interface for plugin-compat.

Entry point: plugin_compat.cli.main:main
"""

from __future__ import annotations

from plugin_compat.cli.main import cli, main

__all__ = ["cli", "main"]
