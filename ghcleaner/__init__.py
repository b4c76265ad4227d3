"""Clean up a GitHub notifications inbox.

Notifications older than a configurable number of days, or whose issue or
pull request has been closed, are marked done through the GitHub REST API.
"""

from __future__ import annotations

from .version import package_version

__version__ = package_version()

__all__ = ["__version__"]
