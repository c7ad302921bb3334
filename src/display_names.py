"""Run-scoped resolution of GitHub logins to display names."""

from __future__ import annotations

import logging

import requests
from github import BadAttributeException, GithubException

from github_client import GitHubClient

logger = logging.getLogger(__name__)


class DisplayNameResolver:
    """
    Resolve GitHub logins to profile names, caching results for one run.

    Create one instance per run and share it across teams. Lookups never
    raise: any failure is logged and the login itself is used instead.

    The cache is a plain dict and is not safe for concurrent writers; teams
    are processed sequentially.
    """

    def __init__(self, github_client: GitHubClient) -> None:
        self.github_client = github_client
        self._cache: dict[str, str] = {}

    def resolve(self, login: str) -> str:
        """
        Return the display name for a login.

        Args:
            login: GitHub login

        Returns:
            The user's profile name, or the login if the user has no name
            or the lookup failed
        """
        cached = self._cache.get(login)
        if cached is not None:
            return cached

        try:
            name = self.github_client.get_user_name(login)
        except (GithubException, BadAttributeException, requests.RequestException) as e:
            logger.warning(f"Failed to resolve display name for {login}: {e}. Using login.")
            name = None

        display_name = name if name is not None else login
        self._cache[login] = display_name
        return display_name

    @property
    def cache_size(self) -> int:
        """Number of logins resolved (or attempted) so far in this run."""
        return len(self._cache)
