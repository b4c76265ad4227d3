"""Configuration for a notification cleaning run.

Usage
-----
>>> config = CleanerConfig()
>>> config.older_than_days
15
>>> CleanerConfig(older_than_days=30, dry_run=True).dry_run
True

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt

DEFAULT_OLDER_THAN_DAYS = 15
DEFAULT_PAGE_SIZE = 100
_MAX_PAGE_SIZE = 100


@dc.dataclass(frozen=True, slots=True)
class CleanerConfig:
    """Immutable settings for one cleaning run.

    Attributes
    ----------
    older_than_days
        Notifications last updated more than this many days ago are marked
        done regardless of their subject. Default is 15 days.
    dry_run
        When set, matching notifications are only logged.
    page_size
        Number of notifications requested per listing page (1-100).
    concurrency
        Number of notifications evaluated at once. ``1`` processes them
        strictly in order.

    """

    older_than_days: int = DEFAULT_OLDER_THAN_DAYS
    dry_run: bool = False
    page_size: int = DEFAULT_PAGE_SIZE
    concurrency: int = 1

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.older_than_days < 0:
            msg = f"older_than_days must be >= 0, got: {self.older_than_days}"
            raise ValueError(msg)
        if not 1 <= self.page_size <= _MAX_PAGE_SIZE:
            msg = (
                f"page_size must be between 1 and {_MAX_PAGE_SIZE}, "
                f"got: {self.page_size}"
            )
            raise ValueError(msg)
        if self.concurrency < 1:
            msg = f"concurrency must be positive, got: {self.concurrency}"
            raise ValueError(msg)

    def threshold(self, now: dt.datetime) -> dt.datetime:
        """Return the cutoff instant for the age rule."""
        return now - dt.timedelta(days=self.older_than_days)


def utcnow() -> dt.datetime:
    """Return the current time as an aware UTC datetime."""
    return dt.datetime.now(dt.UTC)
