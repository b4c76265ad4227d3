"""Errors raised while triaging notifications."""

from __future__ import annotations


class CleanerError(Exception):
    """Base exception for notification triage failures."""


class NotificationListingError(CleanerError):
    """Raised when the notification list cannot be fetched in full.

    This is the only failure that aborts a cleaning run.
    """

    def __init__(self, message: str, *, page: int) -> None:
        """Initialise with the page that failed to load."""
        self.page = page
        super().__init__(message)

    @classmethod
    def page_failed(cls, page: int, cause: BaseException) -> NotificationListingError:
        """Return an error for a failed page fetch."""
        return cls(f"error listing notifications (page {page}): {cause}", page=page)


class SubjectURLError(CleanerError, ValueError):
    """Raised when a notification subject URL cannot be resolved."""

    @classmethod
    def missing(cls, notification_id: str) -> SubjectURLError:
        """Return an error for a subject without a URL."""
        return cls(f"notification {notification_id} has no subject URL")

    @classmethod
    def malformed(cls, url: str, reason: str) -> SubjectURLError:
        """Return an error for a URL that does not address an issue or PR."""
        return cls(f"invalid subject URL {url!r}: {reason}")


class NotificationIDError(CleanerError, ValueError):
    """Raised when a notification id is not a numeric thread id."""

    @classmethod
    def not_numeric(cls, notification_id: str) -> NotificationIDError:
        """Return an error for a non-numeric notification id."""
        return cls(f"notification id {notification_id!r} is not a numeric thread id")
