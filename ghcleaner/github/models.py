"""Typed models for GitHub notification payloads."""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003 - msgspec resolves annotations at runtime
import enum

import msgspec


class SubjectType(enum.StrEnum):
    """Notification subject types the cleaner can resolve."""

    ISSUE = "Issue"
    PULL_REQUEST = "PullRequest"


class NotificationSubject(msgspec.Struct, kw_only=True, frozen=True):
    """The resource a notification thread refers to."""

    title: str = ""
    url: str | None = None
    type: str = ""


class NotificationRepository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository metadata attached to a notification thread."""

    full_name: str = ""


class Notification(msgspec.Struct, kw_only=True, frozen=True):
    """A notification thread as returned by ``GET /notifications``.

    Attributes
    ----------
    id
        Thread identifier. GitHub serialises it as a string even though the
        mark-done endpoint addresses threads by integer id.
    updated_at
        Time of the last activity on the thread, when GitHub reports one.
    subject
        The issue, pull request or other resource behind the thread.
    repository
        Repository the thread belongs to.

    """

    id: str
    updated_at: dt.datetime | None = None
    subject: NotificationSubject = msgspec.field(default_factory=NotificationSubject)
    repository: NotificationRepository | None = None
    reason: str | None = None
    unread: bool = False

    @property
    def repository_name(self) -> str:
        """Return the repository full name, or an empty string."""
        return self.repository.full_name if self.repository else ""


class ResourceState(msgspec.Struct, kw_only=True):
    """Subset of issue and pull request payloads read by the cleaner."""

    state: str


@dataclasses.dataclass(frozen=True, slots=True)
class NotificationPage:
    """One page of notifications and the number of the page that follows.

    ``next_page`` is ``0`` when there are no further pages.
    """

    notifications: tuple[Notification, ...]
    next_page: int = 0
