"""Behavioural tests for notification cleanup runs."""

from __future__ import annotations

import asyncio
import dataclasses
import datetime as dt
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from ghcleaner.cleaner import (
    CleanerConfig,
    CleanResult,
    NotificationListingError,
    NotificationsCleaner,
)
from ghcleaner.github.models import Notification, SubjectType
from tests.unit.cleaner_test_helpers import (
    FakeNotificationsAPI,
    NotificationSpec,
    RecordingEventLogger,
    fixed_clock,
    issue_url,
    make_notification,
    pull_url,
)


def run_async[T](coro: typ.Coroutine[typ.Any, typ.Any, T]) -> T:
    """Run async coroutines in sync BDD step functions."""
    return asyncio.run(coro)


@dataclasses.dataclass(slots=True)
class CleanupContext:
    """Shared state used by cleanup BDD steps."""

    older_than_days: int = 15
    dry_run: bool = False
    notifications: list[Notification] = dataclasses.field(default_factory=list)
    states: dict[tuple[str, str, str, int], str] = dataclasses.field(
        default_factory=dict
    )
    failing_threads: set[int] = dataclasses.field(default_factory=set)
    listing_fails: bool = False
    client: FakeNotificationsAPI | None = None
    result: CleanResult | None = None
    error: BaseException | None = None


@scenario(
    "../notifications_cleanup.feature",
    "Stale and closed notifications are marked done",
)
def test_stale_and_closed_notifications_marked_done() -> None:
    """Behavioural test: age and closed-state rules both mark notifications."""


@scenario(
    "../notifications_cleanup.feature",
    "Dry run leaves every notification untouched",
)
def test_dry_run_leaves_notifications() -> None:
    """Behavioural test: dry-run mode never marks notifications done."""


@scenario(
    "../notifications_cleanup.feature",
    "A notification that cannot be marked done does not stop the run",
)
def test_mark_failure_is_isolated() -> None:
    """Behavioural test: mark-done failures are counted, not fatal."""


@scenario(
    "../notifications_cleanup.feature",
    "A listing failure aborts the run",
)
def test_listing_failure_aborts_run() -> None:
    """Behavioural test: listing failures abort before any disposition."""


@pytest.fixture
def cleanup_context() -> CleanupContext:
    """Return fresh per-scenario state."""
    return CleanupContext()


@given(parsers.parse("the notification age threshold is {days:d} days"))
def age_threshold(cleanup_context: CleanupContext, days: int) -> None:
    """Set the age threshold."""
    cleanup_context.older_than_days = days


@given("dry-run mode is enabled")
def dry_run_enabled(cleanup_context: CleanupContext) -> None:
    """Enable dry-run mode."""
    cleanup_context.dry_run = True


@given(
    parsers.re(
        r'a notification "(?P<thread_id>\d+)" updated (?P<days>\d+) days ago '
        r'about (?P<kind>issue|pull request) "(?P<owner>[^/]+)/(?P<repo>[^#]+)'
        r'#(?P<number>\d+)" which is (?P<state>open|closed)'
    )
)
def notification_about_subject(  # noqa: PLR0913 - one argument per captured field
    cleanup_context: CleanupContext,
    thread_id: str,
    days: str,
    kind: str,
    owner: str,
    repo: str,
    number: str,
    state: str,
) -> None:
    """Add a notification and the state of the subject behind it."""
    is_pull = kind == "pull request"
    url_for = pull_url if is_pull else issue_url
    cleanup_context.notifications.append(
        make_notification(
            NotificationSpec(
                id=thread_id,
                age=dt.timedelta(days=int(days)),
                subject_type=(
                    SubjectType.PULL_REQUEST if is_pull else SubjectType.ISSUE
                ),
                url=url_for(owner, repo, int(number)),
                repository=f"{owner}/{repo}",
            )
        )
    )
    lookup_kind = "pull" if is_pull else "issue"
    cleanup_context.states[(lookup_kind, owner, repo, int(number))] = state


@given(parsers.parse('marking notification "{thread_id:d}" done fails'))
def marking_fails(cleanup_context: CleanupContext, thread_id: int) -> None:
    """Make the mark-done call fail for one thread."""
    cleanup_context.failing_threads.add(thread_id)


@given("listing notifications fails")
def listing_fails(cleanup_context: CleanupContext) -> None:
    """Make the first listing page fail."""
    cleanup_context.listing_fails = True


@when("the cleaner runs")
def cleaner_runs(cleanup_context: CleanupContext) -> None:
    """Run one cleaning pass against the fake API."""
    client = FakeNotificationsAPI(
        pages=[cleanup_context.notifications],
        states=cleanup_context.states,
        failing_page=1 if cleanup_context.listing_fails else None,
        failing_threads=cleanup_context.failing_threads,
    )
    cleanup_context.client = client
    cleaner = NotificationsCleaner(
        client,
        config=CleanerConfig(
            older_than_days=cleanup_context.older_than_days,
            dry_run=cleanup_context.dry_run,
        ),
        event_logger=RecordingEventLogger(),
        clock=fixed_clock,
    )
    try:
        cleanup_context.result = run_async(cleaner.clean())
    except NotificationListingError as exc:
        cleanup_context.error = exc


@then(parsers.parse('notifications "{thread_ids}" are marked done'))
def notifications_marked_done(
    cleanup_context: CleanupContext, thread_ids: str
) -> None:
    """Assert exactly the given threads were marked done, in order."""
    assert cleanup_context.client is not None
    expected = [int(thread_id) for thread_id in thread_ids.split(",")]
    assert cleanup_context.client.marked_done == expected


@then("no notifications are marked done")
def no_notifications_marked_done(cleanup_context: CleanupContext) -> None:
    """Assert nothing was marked done."""
    assert cleanup_context.client is not None
    assert cleanup_context.client.marked_done == []


@then(
    parsers.parse(
        "the run reports {fetched:d} fetched, {matched:d} matched and "
        "{failed:d} failed"
    )
)
def run_reports(
    cleanup_context: CleanupContext, fetched: int, matched: int, failed: int
) -> None:
    """Assert the run totals."""
    result = cleanup_context.result
    assert result is not None, f"run failed: {cleanup_context.error}"
    assert (result.fetched, result.matched, result.failed) == (
        fetched,
        matched,
        failed,
    )


@then("the run fails with a listing error")
def run_fails_with_listing_error(cleanup_context: CleanupContext) -> None:
    """Assert the run aborted on listing."""
    assert isinstance(cleanup_context.error, NotificationListingError)
    assert cleanup_context.result is None
    assert cleanup_context.client is not None
    assert cleanup_context.client.lookups == []
