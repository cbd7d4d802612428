"""GitHub REST API v3 client.

Only the call the application needs is implemented: the per-contributor
weekly statistics of a repository. GitHub groups commits, additions and
deletions by week beginning.
"""

from __future__ import annotations

import httpx

from ...observability.loguru_config import get_logger
from .models import (
    ContributorRecord,
    SourceDataInvalidError,
    SourceUnavailableError,
    StatsNotReadyError,
    parse_contributor_stats,
)

__all__ = ["GitHubStatsClient"]

ACCEPT_HEADER = "application/vnd.github.v3+json"

log = get_logger("github")


class GitHubStatsClient:
    """Client for the GitHub repository statistics endpoint."""

    def __init__(
        self,
        *,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        timeout: float = 30.0,
        user_agent: str = "contrib-stats",
    ) -> None:
        """Initialize GitHub client.

        Parameters
        ----------
        base_url
            API base URL
        token
            Optional token sent as a bearer credential
        timeout
            Request timeout in seconds
        user_agent
            User-Agent header (GitHub rejects requests without one)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.user_agent = user_agent

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": ACCEPT_HEADER,
            "User-Agent": self.user_agent,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def stats_url(self, owner: str, repo: str) -> str:
        """URL of the contributor statistics for ``owner/repo``."""
        return f"{self.base_url}/repos/{owner}/{repo}/stats/contributors"

    def fetch_contributor_stats(self, owner: str, repo: str) -> list[ContributorRecord]:
        """Fetch contributor statistics for a repository.

        Parameters
        ----------
        owner
            Repository owner (user or organisation)
        repo
            Repository name

        Returns
        -------
        list[ContributorRecord]
            Records in the order GitHub returned them

        Raises
        ------
        StatsNotReadyError
            GitHub answered 202 and is still computing the statistics
        SourceUnavailableError
            Transport failure or unsuccessful response
        SourceDataInvalidError
            Body is not valid JSON or has an unexpected shape
        """
        url = self.stats_url(owner, repo)
        log.debug("GET {url}", url=url, authenticated=bool(self.token))

        try:
            # Renamed and transferred repositories answer 301 to the new location
            with httpx.Client(timeout=self.timeout, headers=self._headers(), follow_redirects=True) as client:
                response = client.get(url)
        except httpx.TimeoutException as e:
            raise SourceUnavailableError(f"GitHub request timed out after {self.timeout}s") from e
        except (httpx.HTTPError, httpx.RequestError) as e:
            raise SourceUnavailableError(f"GitHub request failed: {e}") from e

        status = response.status_code
        log.debug("GitHub responded {status}", status=status)

        if status == 202:
            raise StatsNotReadyError(
                "GitHub sent a 202, meaning the statistics are not ready yet. Try again in a minute",
                status_code=status,
            )

        # Repositories without commits have no statistics
        if status == 204:
            return []

        if status != 200:
            message = _error_message(response)
            raise SourceUnavailableError(
                f"Did not get a successful response from GitHub for {owner}/{repo}: {status} {message}".rstrip(),
                status_code=status,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceDataInvalidError(f"Error decoding response from GitHub: {e}") from e

        records = parse_contributor_stats(payload)
        log.info("Fetched stats for {count} contributors", count=len(records), repository=f"{owner}/{repo}")
        return records


def _error_message(response: httpx.Response) -> str:
    """Best-effort ``message`` field of a GitHub error body."""
    try:
        data = response.json()
    except ValueError:
        return ""
    if isinstance(data, dict):
        return str(data.get("message", ""))
    return ""
