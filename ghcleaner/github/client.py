"""GitHub API client implementations used by the notifications cleaner."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import Notification, NotificationPage, ResourceState

_DEFAULT_API_URL = "https://api.github.com"
_API_VERSION = "2022-11-28"
_HTTP_ERROR_STATUS_THRESHOLD = 400


class NotificationsAPI(typ.Protocol):
    """Capabilities the cleaner needs from GitHub."""

    async def list_notifications(
        self, *, page: int, per_page: int
    ) -> NotificationPage:
        """Return one page of notifications, including already-read threads."""
        ...

    async def get_issue_state(self, owner: str, repo: str, number: int) -> str:
        """Return the state (``open`` or ``closed``) of an issue."""
        ...

    async def get_pull_request_state(
        self, owner: str, repo: str, number: int
    ) -> str:
        """Return the state (``open`` or ``closed``) of a pull request."""
        ...

    async def mark_thread_done(self, thread_id: int) -> None:
        """Mark a notification thread as done."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "github-notifications-cleaner"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``GITHUB_TOKEN`` and ``GITHUB_API_URL``."""
        token = os.environ.get("GITHUB_TOKEN", "").strip()
        if not token:
            raise GitHubConfigError.missing_token()
        api_url = os.environ.get("GITHUB_API_URL", "").strip() or _DEFAULT_API_URL
        return cls(token=token, api_url=api_url)


def _next_page_number(response: httpx.Response) -> int:
    """Return the page number advertised by the ``Link: rel="next"`` header."""
    next_link = response.links.get("next")
    if not next_link:
        return 0
    url = next_link.get("url")
    if not url:
        return 0
    raw_page = httpx.URL(url).params.get("page", "")
    return int(raw_page) if raw_page.isdigit() else 0


class GitHubRestClient:
    """GitHub REST implementation of :class:`NotificationsAPI`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_s,
            headers={
                "Authorization": f"Bearer {config.token}",
                "User-Agent": config.user_agent,
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": _API_VERSION,
            },
        )

    async def __aenter__(self) -> typ.Self:
        """Return the client for use as an async context manager."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close owned HTTP resources on context exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def list_notifications(
        self, *, page: int, per_page: int
    ) -> NotificationPage:
        """Fetch one page of notifications with ``all=true``."""
        path = "/notifications"
        response = await self._request(
            "GET",
            path,
            params={"all": "true", "per_page": per_page, "page": page},
        )
        notifications = _decode(response, path, list[Notification])
        return NotificationPage(
            notifications=tuple(notifications),
            next_page=_next_page_number(response),
        )

    async def get_issue_state(self, owner: str, repo: str, number: int) -> str:
        """Fetch an issue and return its state."""
        path = f"/repos/{owner}/{repo}/issues/{number}"
        response = await self._request("GET", path)
        return _decode(response, path, ResourceState).state

    async def get_pull_request_state(
        self, owner: str, repo: str, number: int
    ) -> str:
        """Fetch a pull request and return its state."""
        path = f"/repos/{owner}/{repo}/pulls/{number}"
        response = await self._request("GET", path)
        return _decode(response, path, ResourceState).state

    async def mark_thread_done(self, thread_id: int) -> None:
        """Mark a thread as done via ``DELETE /notifications/threads/{id}``."""
        await self._request("DELETE", f"/notifications/threads/{thread_id}")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, typ.Any] | None = None,
    ) -> httpx.Response:
        """Send a request and translate transport and HTTP failures."""
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.TimeoutException as exc:
            raise GitHubAPIError.timeout(method, path) from exc
        except httpx.RequestError as exc:
            raise GitHubAPIError.network_error(method, path, str(exc)) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code, method, path)
        return response


def _decode[T](response: httpx.Response, path: str, target: type[T]) -> T:
    try:
        return msgspec.json.decode(response.content, type=target)
    except msgspec.DecodeError as exc:
        raise GitHubResponseShapeError.undecodable(path, str(exc)) from exc
