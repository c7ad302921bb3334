"""Data models for the PR Reminder Board application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

AgeTier = Literal["fresh", "aging", "stale"]


@dataclass(frozen=True)
class Schedule:
    """A parsed five-field schedule expression.

    Only the hour and day-of-week fields are evaluated. Minute, day-of-month
    and month are kept verbatim and never checked.
    """

    expression: str
    """Raw expression as written in the config (e.g., '0 9 * * 1-5')"""

    hour: int | None
    """Hour of day (0-23), or None for the '*' wildcard"""

    days_of_week: frozenset[int] | None
    """Allowed days of week (0 = Sunday ... 6 = Saturday), or None for '*'"""

    minute: str = "*"
    day_of_month: str = "*"
    month: str = "*"


@dataclass(frozen=True)
class Team:
    """A configured team with its Slack channel, repositories and members."""

    name: str
    """Unique display name of the team (e.g., 'Core')"""

    channel: str
    """Slack channel ID the summary is posted to"""

    repositories: tuple[str, ...]
    """Repository names inside the organization, in report order"""

    members: frozenset[str]
    """GitHub logins of team members (exact, case-sensitive match)"""

    schedule: Schedule | None = None
    """When the team's report is due. None means only explicit selection runs it."""


@dataclass(frozen=True)
class PullRequest:
    """A snapshot of an open GitHub pull request."""

    id: int
    """GitHub's global pull request ID"""

    repo_name: str
    """Repository name (e.g., 'svc-a')"""

    title: str
    """PR title"""

    url: str
    """Full URL to the PR on GitHub (e.g., 'https://github.com/org/repo/pull/123')"""

    author: str
    """GitHub login of the PR author"""

    created_at: datetime
    """Timestamp when the PR was created (timezone-aware)"""

    is_draft: bool = False
    """Whether the PR is currently a draft"""


@dataclass
class Config:
    """Application configuration from environment variables and the secret store."""

    github_token: str
    """GitHub token used for REST API calls"""

    github_org: str
    """GitHub organization that owns every configured repository"""

    slack_token: str
    """Slack Bot User OAuth Token for chat.postMessage API"""

    config_path: str = "config.yaml"
    """Path to the YAML team configuration"""

    team_override: str | None = None
    """Team name to run regardless of schedule, or 'all' for every team"""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    timezone: str | None = None
    """IANA time zone for schedule evaluation. None uses the host's local time."""


# Block Kit variants


@dataclass(frozen=True)
class HeaderBlock:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "header", "text": {"type": "plain_text", "text": self.text, "emoji": True}}


@dataclass(frozen=True)
class DividerBlock:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "divider"}


@dataclass(frozen=True)
class SectionBlock:
    text: str
    """mrkdwn-formatted section text"""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "section", "text": {"type": "mrkdwn", "text": self.text}}


@dataclass(frozen=True)
class ContextBlock:
    elements: tuple[str, ...]
    """mrkdwn-formatted context elements"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": text} for text in self.elements],
        }


Block = HeaderBlock | DividerBlock | SectionBlock | ContextBlock


@dataclass(frozen=True)
class BlockMessage:
    """A structured Block Kit message."""

    blocks: tuple[Block, ...]
    fallback_text: str
    """Plain text shown in notifications and by clients that cannot render blocks"""

    def to_payload(self, channel: str) -> dict[str, Any]:
        """Serialize to a chat.postMessage request body."""
        return {
            "channel": channel,
            "text": self.fallback_text,
            "blocks": [block.to_dict() for block in self.blocks],
        }


@dataclass(frozen=True)
class TextMessage:
    """A plain text message."""

    text: str

    def to_payload(self, channel: str) -> dict[str, Any]:
        """Serialize to a chat.postMessage request body."""
        return {"channel": channel, "text": self.text}


ComposedMessage = BlockMessage | TextMessage


@dataclass
class RunSummary:
    """Outcome of one run across all configured teams."""

    succeeded: list[str] = field(default_factory=list)
    """Names of teams whose report was delivered"""

    failed: list[str] = field(default_factory=list)
    """Names of teams whose pipeline raised"""

    skipped: list[str] = field(default_factory=list)
    """Names of teams that were not due"""

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)
