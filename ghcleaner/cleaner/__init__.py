"""Notification triage: rules, disposition and run observability."""

from __future__ import annotations

from .config import DEFAULT_OLDER_THAN_DAYS, DEFAULT_PAGE_SIZE, CleanerConfig
from .errors import (
    CleanerError,
    NotificationIDError,
    NotificationListingError,
    SubjectURLError,
)
from .observability import (
    CleanerEventLogger,
    CleanerEventType,
    CleanRunContext,
    ErrorCategory,
    categorize_error,
)
from .service import CleanResult, Disposition, MatchReason, NotificationsCleaner
from .subject import SubjectRef, parse_subject_url

__all__ = [
    "DEFAULT_OLDER_THAN_DAYS",
    "DEFAULT_PAGE_SIZE",
    "CleanResult",
    "CleanRunContext",
    "CleanerConfig",
    "CleanerError",
    "CleanerEventLogger",
    "CleanerEventType",
    "Disposition",
    "ErrorCategory",
    "MatchReason",
    "NotificationIDError",
    "NotificationListingError",
    "NotificationsCleaner",
    "SubjectRef",
    "SubjectURLError",
    "categorize_error",
    "parse_subject_url",
]
