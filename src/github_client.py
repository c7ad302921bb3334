"""GitHub API client for listing open pull requests and looking up users."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from github import Auth, Github

from models import PullRequest

logger = logging.getLogger(__name__)

# GitHub's maximum page size; only the first page is ever requested.
PAGE_SIZE = 100


class GitHubClient:
    """
    Thin client over PyGithub for the two read-only calls the report needs:

    - GET /repos/{org}/{repo}/pulls?state=open&per_page=100 (first page only)
    - GET /users/{login}

    Errors from PyGithub (GithubException and subclasses) and from the
    underlying requests session propagate to the caller.
    """

    def __init__(self, token: str, org: str, page_size: int = PAGE_SIZE) -> None:
        """
        Initialize GitHub client with authentication token.

        Args:
            token: GitHub token with read access to the organization's repositories
            org: GitHub organization that owns the repositories
            page_size: Number of PRs requested per listing (default: 100)
        """
        auth = Auth.Token(token)
        self.client = Github(auth=auth, per_page=page_size)
        self.org = org
        self.page_size = page_size

    def fetch_open_prs(self, repo_name: str) -> list[PullRequest]:
        """
        Fetch the first page of open pull requests for a repository.

        Args:
            repo_name: Repository name inside the organization (e.g., 'svc-a')

        Returns:
            Pull requests in the order GitHub returns them (newest first),
            at most `page_size` items. Later pages are never requested.

        Raises:
            github.GithubException: If the repository cannot be listed
        """
        full_name = f"{self.org}/{repo_name}"
        # lazy=True skips the GET /repos/{full_name} round trip
        repo = self.client.get_repo(full_name, lazy=True)
        page = repo.get_pulls(state="open").get_page(0)

        prs = [
            PullRequest(
                id=raw.id,
                repo_name=repo_name,
                title=raw.title,
                url=raw.html_url,
                author=raw.user.login,
                created_at=_as_aware(raw.created_at),
                is_draft=bool(raw.draft),
            )
            for raw in page
        ]
        logger.debug(f"  Fetched {len(prs)} open PR(s) from {full_name}")
        return prs

    def get_user_name(self, login: str) -> str | None:
        """
        Look up a user's profile name.

        Args:
            login: GitHub login

        Returns:
            The profile name, or None if the user has not set one

        Raises:
            github.GithubException: If the lookup fails
        """
        user = self.client.get_user(login)
        name = user.name
        return name.strip() if name and name.strip() else None


def _as_aware(value: datetime) -> datetime:
    """PyGithub < 2.0 returns naive UTC datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
