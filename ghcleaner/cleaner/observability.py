"""Observability primitives for notification cleaning runs.

Provides structured logging and error categorization for listing, triage and
disposition of notifications. All events are emitted as ``[event] key=value``
log lines suitable for parsing by log aggregators.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from ghcleaner.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)
from ghcleaner.logging import get_logger, log_debug, log_error, log_info

from .errors import NotificationIDError, NotificationListingError, SubjectURLError

if typ.TYPE_CHECKING:
    import datetime as dt

    from ghcleaner.github.models import Notification

    from .service import CleanResult, MatchReason

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500
_HTTP_UNAUTHORIZED = 401
_HTTP_FORBIDDEN = 403
_HTTP_NOT_FOUND = 404


class CleanerEventType(enum.StrEnum):
    """Structured log event types for cleaning runs."""

    RUN_STARTED = "cleaner.run.started"
    RUN_COMPLETED = "cleaner.run.completed"
    RUN_FAILED = "cleaner.run.failed"
    PAGE_FETCHED = "cleaner.page.fetched"
    NOTIFICATION_MATCHED = "cleaner.notification.matched"
    NOTIFICATION_MARKED_DONE = "cleaner.notification.marked_done"
    NOTIFICATION_SKIPPED = "cleaner.notification.skipped"
    NOTIFICATION_MARK_FAILED = "cleaner.notification.mark_failed"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in log lines."""

    TRANSIENT = "transient"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    INVALID_NOTIFICATION = "invalid_notification"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True, slots=True)
class CleanRunContext:
    """Shared context for a single cleaning run."""

    started_at: dt.datetime
    threshold: dt.datetime
    older_than_days: int
    dry_run: bool


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (SubjectURLError, ErrorCategory.INVALID_NOTIFICATION),
    (NotificationIDError, ErrorCategory.INVALID_NOTIFICATION),
    (TimeoutError, ErrorCategory.TRANSIENT),
)


def _categorize_api_error(exc: GitHubAPIError) -> ErrorCategory:
    status = exc.status_code
    if status is None or status >= _HTTP_SERVER_ERROR_THRESHOLD:
        return ErrorCategory.TRANSIENT
    if status in {_HTTP_UNAUTHORIZED, _HTTP_FORBIDDEN}:
        return ErrorCategory.AUTHENTICATION
    if status == _HTTP_NOT_FOUND:
        return ErrorCategory.NOT_FOUND
    return ErrorCategory.CLIENT_ERROR


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for log routing.

    Listing errors are categorized by their underlying cause.

    Returns:
        ErrorCategory indicating the type of failure.

    """
    if isinstance(exc, NotificationListingError) and exc.__cause__ is not None:
        return categorize_error(exc.__cause__)

    # GitHubAPIError is split by HTTP status
    if isinstance(exc, GitHubAPIError):
        return _categorize_api_error(exc)

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class CleanerEventLogger:
    """Emit structured cleaning events via femtologging.

    Events are emitted at INFO level for progress, DEBUG for dry-run skips and
    ERROR for failures. The cleaner accepts any object with these methods, so
    tests may substitute a recording implementation.
    """

    def log_run_started(self, context: CleanRunContext) -> None:
        """Log cleaning run start."""
        log_info(
            logger,
            "[%s] threshold=%s older_than_days=%d dry_run=%s",
            CleanerEventType.RUN_STARTED,
            context.threshold.isoformat(),
            context.older_than_days,
            context.dry_run,
        )

    def log_page_fetched(self, page: int, count: int, next_page: int) -> None:
        """Log a fetched notification page."""
        log_info(
            logger,
            "[%s] page=%d notifications=%d next_page=%d",
            CleanerEventType.PAGE_FETCHED,
            page,
            count,
            next_page,
        )

    def log_notification_matched(
        self,
        notification: Notification,
        reason: MatchReason,
        *,
        dry_run: bool,
    ) -> None:
        """Log a notification that qualifies for being marked done."""
        log_info(
            logger,
            "[%s] id=%s repository=%s subject=%r reason=%s "
            "subscription_reason=%s unread=%s dry_run=%s",
            CleanerEventType.NOTIFICATION_MATCHED,
            notification.id,
            notification.repository_name,
            notification.subject.title,
            reason,
            notification.reason or "",
            notification.unread,
            dry_run,
        )
        if dry_run:
            log_debug(
                logger,
                "dry-run mode enabled; not marking notification %s as done",
                notification.id,
            )

    def log_notification_marked_done(self, notification: Notification) -> None:
        """Log a notification that was marked done."""
        log_info(
            logger,
            "[%s] id=%s repository=%s",
            CleanerEventType.NOTIFICATION_MARKED_DONE,
            notification.id,
            notification.repository_name,
        )

    def log_notification_skipped(
        self, notification: Notification, error: BaseException
    ) -> None:
        """Log a notification whose evaluation failed."""
        log_error(
            logger,
            "[%s] id=%s repository=%s error_type=%s error_category=%s "
            "error_message=%s",
            CleanerEventType.NOTIFICATION_SKIPPED,
            notification.id,
            notification.repository_name,
            type(error).__name__,
            categorize_error(error),
            str(error),
        )

    def log_notification_mark_failed(
        self, notification: Notification, error: BaseException
    ) -> None:
        """Log a notification that could not be marked done."""
        log_error(
            logger,
            "[%s] id=%s repository=%s error_type=%s error_category=%s "
            "error_message=%s",
            CleanerEventType.NOTIFICATION_MARK_FAILED,
            notification.id,
            notification.repository_name,
            type(error).__name__,
            categorize_error(error),
            str(error),
        )

    def log_run_completed(
        self,
        context: CleanRunContext,
        result: CleanResult,
        duration: dt.timedelta,
    ) -> None:
        """Log successful run completion with counts."""
        log_info(
            logger,
            "[%s] duration_seconds=%.3f fetched=%d matched=%d marked_done=%d "
            "failed=%d dry_run=%s",
            CleanerEventType.RUN_COMPLETED,
            duration.total_seconds(),
            result.fetched,
            result.matched,
            result.marked_done,
            result.failed,
            context.dry_run,
        )

    def log_run_failed(
        self,
        context: CleanRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed run with error categorization."""
        log_error(
            logger,
            "[%s] duration_seconds=%.3f dry_run=%s error_type=%s "
            "error_category=%s error_message=%s",
            CleanerEventType.RUN_FAILED,
            duration.total_seconds(),
            context.dry_run,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )
