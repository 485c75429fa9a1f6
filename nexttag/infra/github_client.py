"""
GitHub API client infrastructure for nexttag.

Provides a clean abstraction over the GitHub REST API calls that version
resolution needs:
- List tags and commits (pagination resolved via the Link header)
- Read issue labels
- Look up a branch ref and create a tag ref

Every call has a timeout and is attempted once. Transport failures are
raised as RemoteUnavailableError; there is no retry.
"""

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..domain.tag import Branch, Commit, Tag
from ..exit_codes import (
    AlreadyExistsError,
    AuthenticationError,
    ConfigError,
    IssueNotFoundError,
    RemoteUnavailableError,
)

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"

# GitHub caps per_page at 100
PAGE_SIZE = 100


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def reset_datetime(self) -> datetime:
        """Get reset time as datetime."""
        return datetime.fromtimestamp(self.reset_time)

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


def split_repository(repository: str) -> tuple:
    """
    Split ``owner/name`` into its parts.

    Raises:
        ConfigError: If the value is not of the form owner/name
    """
    parts = (repository or "").strip().strip('/').split('/')
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"repository must be given as owner/name, got {repository!r}")
    return parts[0], parts[1]


class GitHubClient:
    """
    GitHub API client bound to one repository.

    Example:
        client = GitHubClient("octo", "widgets", token=os.environ["GITHUB_TOKEN"])
        for tag in client.list_tags():
            print(tag.name, tag.commit_sha)
    """

    def __init__(
        self,
        owner: str,
        name: str,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize GitHubClient.

        Args:
            owner: Repository owner
            name: Repository name
            token: GitHub token (defaults to NEXTTAG_GITHUB_TOKEN or GITHUB_TOKEN env var)
            api_url: API base URL, for GitHub Enterprise
            timeout: Per-request timeout in seconds
            session: requests session to use (creates one if None)
        """
        self.owner = owner
        self.name = name
        self.token = token or os.environ.get('NEXTTAG_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self._rate_limit_status: Optional[RateLimitStatus] = None

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'User-Agent': 'nexttag',
        })
        if self.token:
            self.session.headers['Authorization'] = f'Bearer {self.token}'

    @classmethod
    def for_repository(cls, repository: str, **kwargs) -> 'GitHubClient':
        """Create a client from an ``owner/name`` string."""
        owner, name = split_repository(repository)
        return cls(owner, name, **kwargs)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining >= 0 and limit >= 0:
            self._rate_limit_status = RateLimitStatus(
                remaining=remaining,
                limit=limit,
                reset_time=reset_time,
                used=used
            )

            if self._rate_limit_status.is_low:
                logger.warning(
                    f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                    f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
                )

    def get_rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last API response, if any."""
        return self._rate_limit_status

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None
    ) -> requests.Response:
        """
        Send one request and map transport failures to RemoteUnavailableError.

        Non-2xx responses are returned to the caller, except 401 which
        always means the token is missing or rejected.
        """
        if not url.startswith('http'):
            url = f"{self.api_url}/{url.lstrip('/')}"

        logger.debug(f"{method} {url} {params or ''}")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                timeout=self.timeout
            )
        except requests.Timeout as e:
            raise RemoteUnavailableError(f"GitHub API request timed out: {method} {url}") from e
        except requests.RequestException as e:
            raise RemoteUnavailableError(f"GitHub API request failed: {e}") from e

        self._update_rate_limit_from_headers(response.headers)

        if response.status_code == 401:
            raise AuthenticationError(f"GitHub rejected the access token for {self.full_name}")

        return response

    def _fail(self, response: requests.Response, what: str) -> RemoteUnavailableError:
        message = ""
        try:
            message = response.json().get('message', '')
        except (ValueError, AttributeError):
            pass
        return RemoteUnavailableError(
            f"GitHub API error {response.status_code} while {what}"
            + (f": {message}" if message else ""),
            status_code=response.status_code,
        )

    def _json(self, response: requests.Response, what: str) -> Any:
        """Decode a response body; an unreadable body is a remote failure."""
        try:
            return response.json()
        except ValueError as e:
            raise RemoteUnavailableError(
                f"unreadable GitHub API response while {what}: {e}",
                status_code=response.status_code,
            ) from e

    def _paginate(self, endpoint: str, params: Dict[str, Any], what: str) -> Iterator[Dict[str, Any]]:
        """Yield items of a list endpoint, fetching pages on demand."""
        url: Optional[str] = endpoint
        query: Optional[Dict[str, Any]] = dict(params, per_page=PAGE_SIZE)

        while url:
            response = self._request('GET', url, params=query)
            if response.status_code != 200:
                raise self._fail(response, what)

            data = self._json(response, what)
            if not isinstance(data, list):
                raise RemoteUnavailableError(f"unexpected response while {what}")
            yield from data

            # The next link already carries the query string
            url = response.links.get('next', {}).get('url')
            query = None

    def list_tags(self) -> List[Tag]:
        """
        List every tag of the repository.

        Returns:
            Tags in the order GitHub returns them
        """
        endpoint = f"repos/{self.owner}/{self.name}/tags"
        tags = [
            Tag.from_api_response(item)
            for item in self._paginate(endpoint, {}, "listing tags")
        ]
        logger.debug(f"Loaded {len(tags)} tags from {self.full_name}")
        return tags

    def iter_commits(self, sha: str) -> Iterator[Commit]:
        """
        Iterate commits reachable from ``sha``, newest first.

        Pages are requested lazily, so a consumer that stops early does
        not fetch the rest of the history.
        """
        endpoint = f"repos/{self.owner}/{self.name}/commits"
        for item in self._paginate(endpoint, {'sha': sha}, f"listing commits from {sha[:7]}"):
            yield Commit.from_api_response(item)

    def list_commits(self, sha: str) -> List[Commit]:
        """All commits reachable from ``sha``, newest first."""
        return list(self.iter_commits(sha))

    def get_issue_labels(self, number: int) -> List[str]:
        """
        Get the label names of an issue.

        Raises:
            IssueNotFoundError: If the issue does not exist
        """
        response = self._request('GET', f"repos/{self.owner}/{self.name}/issues/{number}")
        if response.status_code in (404, 410):
            raise IssueNotFoundError(number)
        if response.status_code != 200:
            raise self._fail(response, f"reading issue #{number}")

        data = self._json(response, f"reading issue #{number}")
        if not isinstance(data, dict):
            raise RemoteUnavailableError(f"unexpected response while reading issue #{number}")

        labels = data.get('labels') or []
        return [
            label.get('name', '') if isinstance(label, dict) else str(label)
            for label in labels
        ]

    def find_branch_ref(self, branch_name: str) -> Optional[Branch]:
        """
        Look up a branch head.

        ``git/matching-refs`` matches by prefix, so only an exact
        ``refs/heads/<branch_name>`` result is accepted.

        Returns:
            Branch or None if the branch does not exist
        """
        endpoint = f"repos/{self.owner}/{self.name}/git/matching-refs/heads/{branch_name}"
        response = self._request('GET', endpoint)
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise self._fail(response, f"loading branch {branch_name}")

        wanted = f"refs/heads/{branch_name}"
        for item in self._json(response, f"loading branch {branch_name}"):
            if item.get('ref') == wanted:
                return Branch.from_ref(item['ref'], item.get('object', {}).get('sha', ''))
        return None

    def create_tag_ref(self, tag_name: str, sha: str) -> None:
        """
        Create a lightweight tag at ``sha``.

        Raises:
            AlreadyExistsError: If the tag reference already exists
        """
        endpoint = f"repos/{self.owner}/{self.name}/git/refs"
        response = self._request(
            'POST',
            endpoint,
            json_body={'ref': f"refs/tags/{tag_name}", 'sha': sha}
        )
        if response.status_code == 201:
            logger.debug(f"Created refs/tags/{tag_name} at {sha[:7]}")
            return

        if response.status_code == 422:
            try:
                message = response.json().get('message', '')
            except (ValueError, AttributeError):
                message = ''
            if 'already exists' in message.lower():
                raise AlreadyExistsError(tag_name)

        raise self._fail(response, f"creating tag {tag_name}")
