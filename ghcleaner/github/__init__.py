"""GitHub notifications API client and models."""

from __future__ import annotations

from .client import GitHubRestClient, GitHubRestConfig, NotificationsAPI
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import (
    Notification,
    NotificationPage,
    NotificationRepository,
    NotificationSubject,
    SubjectType,
)

__all__ = [
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "Notification",
    "NotificationPage",
    "NotificationRepository",
    "NotificationSubject",
    "NotificationsAPI",
    "SubjectType",
]
