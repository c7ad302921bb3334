"""Collection of open pull requests relevant to a team."""

from __future__ import annotations

import logging

from github_client import GitHubClient
from models import PullRequest, Team

logger = logging.getLogger(__name__)


class PullRequestAggregator:
    """Gather open, non-draft PRs authored by team members, grouped by repository."""

    def __init__(self, github_client: GitHubClient) -> None:
        self.github_client = github_client

    def aggregate(self, team: Team) -> dict[str, list[PullRequest]]:
        """
        Fetch and filter open PRs across a team's repositories.

        Args:
            team: The team to report on

        Returns:
            Mapping of repository name to the team's PRs in that repository.
            Repositories without matching PRs are omitted. Keys follow the
            team's repository order; PRs keep the order GitHub returned.

        Raises:
            github.GithubException: If any repository cannot be listed. A
                failing repository fails the whole team rather than
                producing an incomplete report.
        """
        groups: dict[str, list[PullRequest]] = {}

        for repo_name in dict.fromkeys(team.repositories):
            prs = self.github_client.fetch_open_prs(repo_name)

            if len(prs) >= self.github_client.page_size:
                logger.warning(
                    f"{repo_name} returned {len(prs)} open PRs, the single-page limit. "
                    "Older PRs beyond the first page are not included in the report."
                )

            team_prs = [pr for pr in prs if not pr.is_draft and pr.author in team.members]
            logger.debug(
                f"  {repo_name}: {len(team_prs)}/{len(prs)} open PR(s) by {team.name} members"
            )

            if team_prs:
                groups[repo_name] = team_prs

        return groups
