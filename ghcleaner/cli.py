"""Command-line interface for the GitHub notifications cleaner.

Usage:
    github-notifications-cleaner clean --token <GITHUB_TOKEN> --days-threshold 15
    github-notifications-cleaner clean --dry-run
    github-notifications-cleaner version

Environment variables:
    GITHUB_TOKEN   - Personal access token with notifications access, used
                     when ``--token`` is not given
    GITHUB_API_URL - REST API root (default: https://api.github.com)
    LOG_LEVEL      - debug, info, warn or error (default: info)
"""

from __future__ import annotations

import asyncio
import os
import sys
import typing as typ

from cyclopts import App, Parameter

from ghcleaner.cleaner import (
    DEFAULT_OLDER_THAN_DAYS,
    CleanerConfig,
    CleanerError,
    CleanResult,
    NotificationsCleaner,
)
from ghcleaner.github import (
    GitHubConfigError,
    GitHubRestClient,
    GitHubRestConfig,
)
from ghcleaner.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from ghcleaner.version import build_info_lines, package_version

if typ.TYPE_CHECKING:
    import httpx

logger = get_logger(__name__)

app = App(
    name="github-notifications-cleaner",
    help="A CLI tool to clean up GitHub notifications.",
    version=package_version(),
)


async def run_clean(
    rest_config: GitHubRestConfig,
    cleaner_config: CleanerConfig,
    *,
    timeout_s: float | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> CleanResult:
    """Run one cleaning pass against the GitHub REST API.

    Parameters
    ----------
    rest_config
        API credentials and endpoint.
    cleaner_config
        Triage settings for the run.
    timeout_s
        Optional deadline for the whole run. Exceeding it cancels in-flight
        requests and raises ``TimeoutError``.
    http_client
        Optional pre-built HTTP client, mainly for tests.

    """
    async with GitHubRestClient(rest_config, http_client=http_client) as client:
        cleaner = NotificationsCleaner(client, config=cleaner_config)
        async with asyncio.timeout(timeout_s):
            return await cleaner.clean()


def _resolve_rest_config(token: str) -> GitHubRestConfig:
    token = token.strip()
    if token:
        return GitHubRestConfig(token=token)
    return GitHubRestConfig.from_env()


@app.command
def clean(
    *,
    token: typ.Annotated[str, Parameter(name=["--token", "-t"])] = "",
    days_threshold: typ.Annotated[
        int, Parameter(name=["--days-threshold", "-d"])
    ] = DEFAULT_OLDER_THAN_DAYS,
    dry_run: typ.Annotated[bool, Parameter(name=["--dry-run", "-n"])] = False,
    concurrency: int = 1,
    timeout: float | None = None,
) -> int:
    """Clean up GitHub notifications.

    Marks notifications as done when they were last updated more than
    ``days_threshold`` days ago, or when the issue or pull request they refer
    to is closed.

    Args:
        token: GitHub personal access token with notifications access.
            Falls back to the GITHUB_TOKEN environment variable.
        days_threshold: Mark notifications older than this number of days as
            done.
        dry_run: Log matching notifications without marking them done.
        concurrency: Number of notifications evaluated at once.
        timeout: Abort the whole run after this many seconds.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    try:
        rest_config = _resolve_rest_config(token)
        cleaner_config = CleanerConfig(
            older_than_days=days_threshold,
            dry_run=dry_run,
            concurrency=concurrency,
        )
    except (GitHubConfigError, ValueError) as exc:
        log_error(logger, "invalid configuration: %s", exc)
        return 1

    try:
        result = asyncio.run(run_clean(rest_config, cleaner_config, timeout_s=timeout))
    except TimeoutError:
        log_error(logger, "error cleaning notifications: timed out after %ss", timeout)
        return 1
    except CleanerError as exc:
        log_error(logger, "error cleaning notifications: %s", exc)
        return 1

    log_info(
        logger,
        "Notifications cleaned successfully. fetched=%d matched=%d "
        "marked_done=%d failed=%d",
        result.fetched,
        result.matched,
        result.marked_done,
        result.failed,
    )
    return 0


@app.command
def version() -> int:
    """Print the version number and build metadata."""
    for line in build_info_lines():
        print(line)
    return 0


def main() -> int:
    """Entry point for the CLI."""
    raw_level = os.environ.get("LOG_LEVEL", "info")
    normalized_level, invalid_level = configure_logging(raw_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid LOG_LEVEL %r, falling back to %s",
            raw_level,
            normalized_level,
        )
    return app()


if __name__ == "__main__":
    sys.exit(main())
