"""
GitHub API client infrastructure for codewall.

Provides the two remote calls the pipeline needs:
- Resolve a numeric repository ID to its full name
- Obtain a time-limited tarball URL and stream it to disk

Not-found is a normal answer (returns None); every other failure is
raised as RemoteServiceError and never retried here.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from ..domain.candidate import RepositoryRef
from ..domain.failure import EmptyArchive, RemoteServiceError, ScratchAreaError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# Statuses meaning "this ID does not resolve to a visible repository".
# 451 is returned for repositories blocked for legal reasons.
NOT_FOUND_STATUSES = (404, 451)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def reset_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.reset_time)

    @property
    def minutes_until_reset(self) -> int:
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


class GitHubClient:
    """
    GitHub REST API client.

    No request timeout is applied unless one is configured; an unresponsive
    API stalls the run.

    Example:
        client = GitHubClient(token)
        repo = client.get_repository(42)
        if repo:
            url = client.archive_link(repo.full_name)
            client.download(url, Path("/tmp/x.tar.gz"))
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub access token
            api_url: Base URL of the REST API
            timeout: Per-request timeout in seconds (None waits indefinitely)
        """
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'codewall',
            'Authorization': f'token {token}',
        })
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status from the last API response, if any."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining < 0 or limit < 0:
            return

        self._rate_limit_status = RateLimitStatus(
            remaining=remaining,
            limit=limit,
            reset_time=reset_time,
            used=used,
        )
        if self._rate_limit_status.is_low:
            logger.warning(
                f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
            )

    def _get(self, endpoint: str, **kwargs) -> requests.Response:
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteServiceError(f"GitHub API request failed: {e}") from e
        self._update_rate_limit_from_headers(response.headers)
        return response

    def _raise_for_status(self, response: requests.Response, what: str) -> None:
        status = response.status_code
        if status == 401:
            raise RemoteServiceError(f"GitHub rejected the access token while {what}", status)
        if status in (403, 429) and self._rate_limit_status and self._rate_limit_status.remaining == 0:
            raise RemoteServiceError(
                f"GitHub API rate limit exceeded while {what}; resets at "
                f"{self._rate_limit_status.reset_datetime:%H:%M:%S}",
                status,
            )
        raise RemoteServiceError(f"GitHub API error {status} while {what}", status)

    def get_repository(self, repo_id: int) -> Optional[RepositoryRef]:
        """
        Resolve a numeric repository ID.

        Args:
            repo_id: GitHub repository ID

        Returns:
            RepositoryRef, or None if the ID does not resolve to a visible repository

        Raises:
            RemoteServiceError: on any other API failure
        """
        response = self._get(f"repositories/{repo_id}")
        if response.status_code in NOT_FOUND_STATUSES:
            return None
        if response.status_code != 200:
            self._raise_for_status(response, f"resolving repository #{repo_id}")

        try:
            return RepositoryRef.from_api_response(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteServiceError(f"Malformed repository response for #{repo_id}: {e}") from e

    def archive_link(self, full_name: str) -> str:
        """
        Get the time-limited tarball download URL for a repository.

        Raises:
            EmptyArchive: the repository has no archive (e.g. no commits)
            RemoteServiceError: on any other API failure
        """
        response = self._get(f"repos/{full_name}/tarball", allow_redirects=False)
        if response.status_code in (301, 302, 307):
            location = response.headers.get('Location')
            if location:
                return location
            raise RemoteServiceError(f"Tarball redirect for {full_name} has no Location header")
        if response.status_code in NOT_FOUND_STATUSES:
            raise EmptyArchive(f"No archive available for {full_name}.")
        self._raise_for_status(response, f"requesting the archive of {full_name}")

    def download(self, url: str, dest: Path) -> int:
        """
        Stream a URL verbatim into a file.

        Returns:
            Number of bytes written
        """
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteServiceError(f"Archive download failed: {e}") from e

        with response:
            if response.status_code != 200:
                raise RemoteServiceError(
                    f"Archive download failed with HTTP {response.status_code}",
                    response.status_code,
                )
            written = 0
            try:
                with open(dest, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
                        written += len(chunk)
            except requests.RequestException as e:
                raise RemoteServiceError(f"Archive download interrupted: {e}") from e
            except OSError as e:
                raise ScratchAreaError(f"Could not write archive to {dest}: {e}") from e

        logger.debug(f"Downloaded {written} bytes to {dest}")
        return written
