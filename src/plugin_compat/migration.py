"""Plugin Verifier download directory migration hint.

Older Plugin Verifier releases downloaded IDEs into ~/.pluginVerifier/ides.
When a different directory is configured but the old one still holds
downloads, users get an informational hint pointing at it.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from plugin_compat.diagnostics import OLD_DOWNLOAD_DIR_URL

logger = structlog.get_logger(__name__)


def _has_entries(directory: Path) -> bool:
    # Probe failures count as "does not exist"
    try:
        if not directory.is_dir():
            return False
        return any(True for _ in directory.iterdir())
    except OSError as e:
        logger.debug("download_dir_probe_failed", path=str(directory), error=str(e))
        return False


def legacy_download_dir_hint(download_dir: Path | None, legacy_dir: Path | None) -> str | None:
    """Build the migration hint, if one applies.

    Args:
        download_dir: Configured download directory.
        legacy_dir: Old default download directory.

    Returns:
        Informational message, or None when the directories are the same,
        the legacy directory is missing or empty, or either path is unknown.
    """
    if download_dir is None or legacy_dir is None:
        return None

    download_dir = download_dir.absolute()
    legacy_dir = legacy_dir.absolute()
    if download_dir == legacy_dir or not _has_entries(legacy_dir):
        return None

    return (
        f"The Plugin Verifier download directory is set to {download_dir}, "
        f"but downloaded IDEs were also found in {legacy_dir}, see: {OLD_DOWNLOAD_DIR_URL}"
    )


__all__ = ["legacy_download_dir_hint"]
