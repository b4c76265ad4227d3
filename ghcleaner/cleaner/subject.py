"""Resolve notification subject URLs into repository coordinates.

Subject URLs point at the REST resource behind a notification, for example
``https://api.github.com/repos/octo/reef/pulls/123``. GitHub Enterprise
Server prefixes the path with ``/api/v3``, so parsing anchors on the
``repos`` segment rather than on a fixed position.
"""

from __future__ import annotations

import dataclasses

import httpx

from .errors import SubjectURLError

# repos/{owner}/{repo}/{resource}/{number}
_SEGMENTS_AFTER_REPOS = 4


@dataclasses.dataclass(frozen=True, slots=True)
class SubjectRef:
    """Repository coordinates of an issue or pull request."""

    owner: str
    repo: str
    number: int

    @property
    def slug(self) -> str:
        """Return ``owner/repo``."""
        return f"{self.owner}/{self.repo}"


def parse_subject_url(raw_url: str) -> SubjectRef:
    """Extract owner, repository and number from a subject URL.

    Parameters
    ----------
    raw_url
        Subject URL reported by the notifications API.

    Returns
    -------
    SubjectRef
        The parsed coordinates.

    Raises
    ------
    SubjectURLError
        If the URL is malformed, lacks the ``repos/{owner}/{repo}/{resource}/
        {number}`` segments, or ends in a non-numeric segment.

    Examples
    --------
    >>> parse_subject_url("https://api.github.com/repos/octo/reef/issues/5")
    SubjectRef(owner='octo', repo='reef', number=5)

    """
    try:
        path = httpx.URL(raw_url).path
    except httpx.InvalidURL as exc:
        raise SubjectURLError.malformed(raw_url, str(exc)) from exc

    segments = [segment for segment in path.split("/") if segment]
    if "repos" not in segments:
        raise SubjectURLError.malformed(raw_url, "missing 'repos' segment")

    tail = segments[segments.index("repos") + 1 :]
    if len(tail) < _SEGMENTS_AFTER_REPOS:
        raise SubjectURLError.malformed(raw_url, "too few path segments")

    owner, repo = tail[0], tail[1]
    number_text = tail[-1]
    if not number_text.isdecimal():
        raise SubjectURLError.malformed(raw_url, f"non-numeric number {number_text!r}")

    return SubjectRef(owner=owner, repo=repo, number=int(number_text))
