"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import Mock

import pytest

from models import PullRequest, Team
from schedule import parse_schedule

# Monday 2025-10-20 09:00 UTC
MONDAY_9AM = datetime(2025, 10, 20, 9, 0, 0, tzinfo=UTC)


def _make_pr(
    author: str = "alice",
    *,
    id: int = 1,
    repo_name: str = "svc-a",
    title: str = "Add retry budget to client",
    age: timedelta = timedelta(days=1),
    now: datetime = MONDAY_9AM,
    is_draft: bool = False,
) -> PullRequest:
    """Build a PullRequest created `age` before `now`."""
    return PullRequest(
        id=id,
        repo_name=repo_name,
        title=title,
        url=f"https://github.com/test-org/{repo_name}/pull/{id}",
        author=author,
        created_at=now - age,
        is_draft=is_draft,
    )


@pytest.fixture
def make_pr():
    """Provide a factory for PullRequests created a given age before Monday 09:00 UTC."""
    return _make_pr


@pytest.fixture
def now() -> datetime:
    """Provide a fixed Monday 09:00 UTC instant."""
    return MONDAY_9AM


@pytest.fixture
def core_team() -> Team:
    """Provide the 'Core' team scheduled for weekdays at 09:00."""
    return Team(
        name="Core",
        channel="C0123456789",
        repositories=("svc-a", "svc-b"),
        members=frozenset({"alice", "bob"}),
        schedule=parse_schedule("0 9 * * 1-5"),
    )


@pytest.fixture
def mock_github_client() -> Mock:
    """Provide a GitHubClient stand-in with no open PRs and no profile names."""
    client = Mock()
    client.page_size = 100
    client.fetch_open_prs.return_value = []
    client.get_user_name.return_value = None
    return client


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def teams_yaml_path(fixtures_dir: Path) -> Path:
    """Return the path to the valid team configuration YAML file."""
    return fixtures_dir / "teams_valid.yaml"
