"""Integration tests for GitHub client with mocked PyGithub responses."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import Mock, patch

import pytest
from github import GithubException

from github_client import GitHubClient


@pytest.fixture
def mock_github():
    """Patch the PyGithub entry point used by GitHubClient."""
    with patch("github_client.Github") as mock_github_cls:
        yield mock_github_cls


def make_raw_pr(number: int, login: str, draft: bool = False, created_at: datetime | None = None):
    """Create a mock PyGithub pull request."""
    pr = Mock()
    pr.id = 1000 + number
    pr.number = number
    pr.title = f"PR {number}"
    pr.html_url = f"https://github.com/test-org/svc-a/pull/{number}"
    pr.user = Mock()
    pr.user.login = login
    pr.created_at = created_at or datetime(2025, 10, 14, 9, 0, 0, tzinfo=UTC)
    pr.draft = draft
    return pr


def test_github_client_initialization(mock_github):
    """Test the PyGithub client is built with token auth and a 100-item page size."""
    client = GitHubClient(token="test_token_123", org="test-org")

    _, kwargs = mock_github.call_args
    assert kwargs["per_page"] == 100
    assert client.org == "test-org"
    assert client.page_size == 100


def test_fetch_open_prs_requests_first_page_only(mock_github):
    """Test a single page of open PRs is requested for org/repo."""
    client = GitHubClient(token="test_token", org="test-org")
    repo = mock_github.return_value.get_repo.return_value
    repo.get_pulls.return_value.get_page.return_value = [make_raw_pr(1, "alice")]

    client.fetch_open_prs("svc-a")

    mock_github.return_value.get_repo.assert_called_once_with("test-org/svc-a", lazy=True)
    repo.get_pulls.assert_called_once_with(state="open")
    repo.get_pulls.return_value.get_page.assert_called_once_with(0)


def test_fetch_open_prs_maps_fields(mock_github):
    """Test PyGithub objects are converted to PullRequest snapshots in API order."""
    client = GitHubClient(token="test_token", org="test-org")
    repo = mock_github.return_value.get_repo.return_value
    repo.get_pulls.return_value.get_page.return_value = [
        make_raw_pr(2, "bob", draft=True),
        make_raw_pr(1, "alice"),
    ]

    prs = client.fetch_open_prs("svc-a")

    assert [pr.id for pr in prs] == [1002, 1001]
    first = prs[0]
    assert first.repo_name == "svc-a"
    assert first.title == "PR 2"
    assert first.url == "https://github.com/test-org/svc-a/pull/2"
    assert first.author == "bob"
    assert first.is_draft is True
    assert prs[1].is_draft is False
    assert first.created_at == datetime(2025, 10, 14, 9, 0, 0, tzinfo=UTC)


def test_fetch_open_prs_naive_timestamp_treated_as_utc(mock_github):
    """Test naive timestamps from older PyGithub versions become UTC-aware."""
    client = GitHubClient(token="test_token", org="test-org")
    repo = mock_github.return_value.get_repo.return_value
    repo.get_pulls.return_value.get_page.return_value = [
        make_raw_pr(1, "alice", created_at=datetime(2025, 10, 14, 9, 0, 0))
    ]

    prs = client.fetch_open_prs("svc-a")

    assert prs[0].created_at.tzinfo is UTC


def test_fetch_open_prs_error_propagates(mock_github):
    """Test listing errors are raised to the caller."""
    client = GitHubClient(token="test_token", org="test-org")
    repo = mock_github.return_value.get_repo.return_value
    repo.get_pulls.return_value.get_page.side_effect = GithubException(
        404, {"message": "Not Found"}
    )

    with pytest.raises(GithubException):
        client.fetch_open_prs("missing-repo")


def test_get_user_name(mock_github):
    """Test profile name lookup."""
    client = GitHubClient(token="test_token", org="test-org")
    mock_github.return_value.get_user.return_value.name = "Alice Liddell"

    assert client.get_user_name("alice") == "Alice Liddell"
    mock_github.return_value.get_user.assert_called_once_with("alice")


@pytest.mark.parametrize("name", [None, "", "   "])
def test_get_user_name_missing(mock_github, name):
    """Test users without a usable profile name return None."""
    client = GitHubClient(token="test_token", org="test-org")
    mock_github.return_value.get_user.return_value.name = name

    assert client.get_user_name("bob") is None
