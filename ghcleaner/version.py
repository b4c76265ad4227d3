"""Build metadata reported by the ``version`` command.

``BUILD_DATE`` and ``GIT_COMMIT`` are rewritten by release builds; the
version comes from the installed distribution metadata.
"""

from __future__ import annotations

import importlib.metadata
import platform

DISTRIBUTION_NAME = "github-notifications-cleaner"
BUILD_DATE = "unknown"
GIT_COMMIT = "unknown"


def package_version() -> str:
    """Return the installed distribution version, or ``dev`` from a checkout."""
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def build_info_lines() -> list[str]:
    """Return the human-readable build metadata lines."""
    return [
        f"Build date: {BUILD_DATE}",
        f"Version: {package_version()}",
        f"Git commit: {GIT_COMMIT}",
        f"Python version: {platform.python_version()}",
    ]
