"""GitHub REST client errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub request fails.

    ``status_code`` is ``None`` when the request never produced a response,
    for example on timeouts or connection failures.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, method: str, path: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"GitHub API {method} {path} returned HTTP {status_code}",
            status_code=status_code,
        )

    @classmethod
    def timeout(cls, method: str, path: str) -> GitHubAPIError:
        """Return an error for requests that exceeded the client timeout."""
        return cls(f"GitHub API {method} {path} timed out")

    @classmethod
    def network_error(cls, method: str, path: str, detail: str) -> GitHubAPIError:
        """Return an error for transport-level failures."""
        return cls(f"GitHub API {method} {path} failed: {detail}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses cannot be decoded into expected shapes."""

    @classmethod
    def undecodable(cls, path: str, detail: str) -> GitHubResponseShapeError:
        """Return an error for a response body that failed to decode."""
        return cls(f"GitHub API response for {path} could not be decoded: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("GitHub token is required (pass --token or set GITHUB_TOKEN)")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
