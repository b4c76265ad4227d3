"""Notification triage engine.

The cleaner pages through every notification thread, decides for each one
whether it can be marked done, and marks the matches. A notification
qualifies when it was last updated before the age threshold, or when the
issue or pull request behind it is closed. Failures that concern a single
notification are logged and skipped; only a failure to list notifications
aborts the run.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import typing as typ

from ghcleaner.github.models import SubjectType

from .config import CleanerConfig, utcnow
from .errors import NotificationIDError, NotificationListingError, SubjectURLError
from .observability import CleanerEventLogger, CleanRunContext
from .subject import SubjectRef, parse_subject_url

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from ghcleaner.github.client import NotificationsAPI
    from ghcleaner.github.models import Notification

    type Clock = cabc.Callable[[], dt.datetime]

_CLOSED_STATE = "closed"


class MatchReason(enum.StrEnum):
    """Why a notification qualifies for being marked done."""

    AGE = "age"
    CLOSED = "closed"


class Disposition(enum.StrEnum):
    """What happened to a notification after evaluation."""

    KEPT = "kept"
    DRY_RUN = "dry_run"
    MARKED_DONE = "marked_done"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True, slots=True)
class CleanResult:
    """Summary of a single cleaning run."""

    fetched: int = 0
    matched: int = 0
    marked_done: int = 0
    failed: int = 0


@dataclasses.dataclass(slots=True)
class _Tally:
    """Per-run counters; the only state shared between notifications."""

    matched: int = 0
    marked_done: int = 0
    failed: int = 0

    def record(self, disposition: Disposition) -> None:
        if disposition is Disposition.KEPT:
            return
        self.matched += 1
        if disposition is Disposition.FAILED:
            self.failed += 1
        elif disposition is Disposition.MARKED_DONE:
            self.marked_done += 1


def _thread_id(notification: Notification) -> int:
    """Convert a notification id into the integer thread id."""
    raw = notification.id.strip()
    if not raw.isdecimal():
        raise NotificationIDError.not_numeric(notification.id)
    return int(raw)


class NotificationsCleaner:
    """Mark stale or resolved GitHub notifications as done."""

    def __init__(
        self,
        client: NotificationsAPI,
        *,
        config: CleanerConfig | None = None,
        event_logger: CleanerEventLogger | None = None,
        clock: Clock = utcnow,
    ) -> None:
        """Create a cleaner bound to a GitHub notifications client."""
        self._client = client
        self._config = config or CleanerConfig()
        self._event_logger = event_logger or CleanerEventLogger()
        self._clock = clock

    @property
    def config(self) -> CleanerConfig:
        """Return the configuration used by this cleaner."""
        return self._config

    async def clean(self) -> CleanResult:
        """Run one cleaning pass over every pending notification.

        The age threshold is computed once at the start so every notification
        is judged against the same instant.

        Returns
        -------
        CleanResult
            Counts of fetched, matched, marked and failed notifications.

        Raises
        ------
        NotificationListingError
            If any page of the notification list cannot be fetched.

        """
        started_at = self._clock()
        threshold = self._config.threshold(started_at)
        context = CleanRunContext(
            started_at=started_at,
            threshold=threshold,
            older_than_days=self._config.older_than_days,
            dry_run=self._config.dry_run,
        )
        self._event_logger.log_run_started(context)

        try:
            result = await self._clean_inner(threshold)
        except BaseException as exc:
            self._event_logger.log_run_failed(
                context, exc, self._clock() - started_at
            )
            raise

        self._event_logger.log_run_completed(
            context, result, self._clock() - started_at
        )
        return result

    async def _clean_inner(self, threshold: dt.datetime) -> CleanResult:
        notifications = await self.list_all_pending()
        tally = _Tally()

        if self._config.concurrency == 1:
            for notification in notifications:
                await self._process_notification(notification, threshold, tally)
        else:
            semaphore = asyncio.Semaphore(self._config.concurrency)

            async def _bounded(notification: Notification) -> None:
                async with semaphore:
                    await self._process_notification(notification, threshold, tally)

            async with asyncio.TaskGroup() as group:
                for notification in notifications:
                    group.create_task(_bounded(notification))

        return CleanResult(
            fetched=len(notifications),
            matched=tally.matched,
            marked_done=tally.marked_done,
            failed=tally.failed,
        )

    async def list_all_pending(self) -> tuple[Notification, ...]:
        """Fetch every notification, following pagination to the end.

        Raises
        ------
        NotificationListingError
            If any page fails to load. No partial list is returned.

        """
        notifications: list[Notification] = []
        page = 1
        while True:
            try:
                batch = await self._client.list_notifications(
                    page=page, per_page=self._config.page_size
                )
            except Exception as exc:
                raise NotificationListingError.page_failed(page, exc) from exc

            self._event_logger.log_page_fetched(
                page, len(batch.notifications), batch.next_page
            )
            notifications.extend(batch.notifications)
            if batch.next_page == 0:
                return tuple(notifications)
            page = batch.next_page

    async def evaluate_notification(
        self, notification: Notification, threshold: dt.datetime
    ) -> MatchReason | None:
        """Return why a notification qualifies, or ``None`` when it does not.

        Rules are applied in order and short-circuit:

        1. Updated strictly before ``threshold``: qualifies, no network call.
        2. Issue or pull request subject: qualifies when its state is closed.

        Raises
        ------
        SubjectURLError
            If the subject URL cannot be parsed.
        GitHubAPIError
            If the issue or pull request lookup fails.

        """
        updated_at = notification.updated_at
        if updated_at is not None and updated_at < threshold:
            return MatchReason.AGE

        subject_type = notification.subject.type
        if subject_type not in (SubjectType.ISSUE, SubjectType.PULL_REQUEST):
            return None

        ref = _subject_ref(notification)
        if subject_type == SubjectType.PULL_REQUEST:
            state = await self._client.get_pull_request_state(
                ref.owner, ref.repo, ref.number
            )
        else:
            state = await self._client.get_issue_state(ref.owner, ref.repo, ref.number)

        if state.lower() == _CLOSED_STATE:
            return MatchReason.CLOSED
        return None

    async def qualifies_for_disposition(
        self, notification: Notification, threshold: dt.datetime
    ) -> bool:
        """Return whether a notification should be marked done."""
        return await self.evaluate_notification(notification, threshold) is not None

    async def dispose_if_qualified(
        self, notification: Notification, reason: MatchReason | None
    ) -> Disposition:
        """Mark a qualifying notification as done, honouring dry-run mode.

        Identifier conversion and mark-done failures are logged and reported
        as :attr:`Disposition.FAILED`; they are never retried.
        """
        if reason is None:
            return Disposition.KEPT

        dry_run = self._config.dry_run
        self._event_logger.log_notification_matched(
            notification, reason, dry_run=dry_run
        )
        if dry_run:
            return Disposition.DRY_RUN

        try:
            thread_id = _thread_id(notification)
            await self._client.mark_thread_done(thread_id)
        except Exception as exc:  # noqa: BLE001 - isolate per-notification failures
            self._event_logger.log_notification_mark_failed(notification, exc)
            return Disposition.FAILED

        self._event_logger.log_notification_marked_done(notification)
        return Disposition.MARKED_DONE

    async def _process_notification(
        self,
        notification: Notification,
        threshold: dt.datetime,
        tally: _Tally,
    ) -> None:
        try:
            reason = await self.evaluate_notification(notification, threshold)
        except Exception as exc:  # noqa: BLE001 - isolate per-notification failures
            self._event_logger.log_notification_skipped(notification, exc)
            tally.failed += 1
            return

        tally.record(await self.dispose_if_qualified(notification, reason))


def _subject_ref(notification: Notification) -> SubjectRef:
    url = notification.subject.url
    if not url:
        raise SubjectURLError.missing(notification.id)
    return parse_subject_url(url)
