"""Composition of per-team Slack notifications."""

from __future__ import annotations

from datetime import datetime

from display_names import DisplayNameResolver
from models import (
    AgeTier,
    Block,
    BlockMessage,
    ComposedMessage,
    ContextBlock,
    DividerBlock,
    HeaderBlock,
    PullRequest,
    SectionBlock,
    Team,
    TextMessage,
)
from staleness import age_tier, days_open

MAX_TITLE_LENGTH = 100
MAX_HEADER_LENGTH = 150
MAX_SECTION_TEXT = 3000
MAX_BLOCKS = 50
ELLIPSIS = "…"

# Closing divider, truncation warning and footer
TRAILING_BLOCKS = 3

SEVERITY_MARKERS: dict[AgeTier, str] = {
    "fresh": ":large_green_circle:",
    "aging": ":large_orange_circle:",
    "stale": ":red_circle:",
}


def truncate_title(title: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Cut a title to `max_length` characters, appending an ellipsis if anything was cut."""
    if len(title) > max_length:
        return title[:max_length] + ELLIPSIS
    return title


def escape_mrkdwn(text: str) -> str:
    """Escape the characters Slack treats as control sequences in mrkdwn."""
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    return text


def pack_lines(lines: list[str], max_length: int = MAX_SECTION_TEXT) -> list[list[str]]:
    """Split lines into consecutive chunks whose newline-joined text fits in `max_length`."""
    chunks: list[list[str]] = []
    current: list[str] = []
    current_length = 0

    for line in lines:
        added = len(line) + (1 if current else 0)
        if current and current_length + added > max_length:
            chunks.append(current)
            current = []
            current_length = 0
            added = len(line)
        current.append(line)
        current_length += added

    if current:
        chunks.append(current)
    return chunks


class NotificationComposer:
    """Build the Slack message for one team's open PRs."""

    def __init__(self, resolver: DisplayNameResolver) -> None:
        """
        Initialize composer.

        Args:
            resolver: Run-scoped display name resolver shared by every team
        """
        self.resolver = resolver

    def compose(
        self, team: Team, groups: dict[str, list[PullRequest]], now: datetime
    ) -> ComposedMessage:
        """
        Compose the notification for a team.

        PR lines of a repository are packed into as few sections as the
        section text limit allows. Repositories that no longer fit in the
        block limit are left out and counted in a truncation warning.

        Args:
            team: The team being reported on
            groups: Team PRs grouped by repository, in display order
            now: Current time (timezone-aware), used for PR ages

        Returns:
            A TextMessage celebrating an empty queue when `groups` is empty,
            otherwise a BlockMessage with one group per repository
        """
        if not groups:
            return self._build_empty_message(team)

        blocks: list[Block] = [self._build_header(team), DividerBlock()]
        body_limit = MAX_BLOCKS - TRAILING_BLOCKS
        hidden_count = 0

        for repo_name, prs in groups.items():
            available = body_limit - len(blocks)
            # Room for the label plus at least one PR section
            if available < 2:
                hidden_count += len(prs)
                continue

            blocks.append(SectionBlock(f"📦 *Repository:* *{repo_name}*"))
            lines = [self._build_pr_line(pr, now) for pr in prs]
            chunks = pack_lines(lines)
            for chunk in chunks[: available - 1]:
                blocks.append(SectionBlock("\n".join(chunk)))
            for chunk in chunks[available - 1 :]:
                hidden_count += len(chunk)

        blocks.append(DividerBlock())
        if hidden_count:
            blocks.append(self._build_truncation_warning(hidden_count))
        blocks.append(self._build_footer())

        return BlockMessage(blocks=tuple(blocks), fallback_text=f"Open PRs for {team.name}")

    def _build_empty_message(self, team: Team) -> TextMessage:
        return TextMessage(f":tada: No open PRs for {team.name}!")

    def _build_header(self, team: Team) -> HeaderBlock:
        """Header text is plain_text, which Slack caps at 150 characters."""
        prefix = "🔔 Open PRs for "
        name = truncate_title(team.name, MAX_HEADER_LENGTH - len(prefix) - len(ELLIPSIS))
        return HeaderBlock(prefix + name)

    def _build_pr_line(self, pr: PullRequest, now: datetime) -> str:
        """
        Create the mrkdwn line for a single PR.

        Line format:
            {marker} *<{url}|{title}>* - 👤 *{display name}* ({login}) - ⏱ *{days}* days
        """
        days = days_open(pr, now)
        marker = SEVERITY_MARKERS[age_tier(days)]
        title = escape_mrkdwn(truncate_title(pr.title))
        display_name = escape_mrkdwn(self.resolver.resolve(pr.author))

        return (
            f"{marker} *<{pr.url}|{title}>* - "
            f"👤 *{display_name}* ({pr.author}) - "
            f"⏱ *{days}* day{'s' if days != 1 else ''}"
        )

    def _build_truncation_warning(self, count: int) -> ContextBlock:
        plural = "s" if count != 1 else ""
        return ContextBlock(
            (f"⚠️ +{count} more PR{plural} not shown. Check GitHub for full list.",)
        )

    def _build_footer(self) -> ContextBlock:
        return ContextBlock(
            (
                "👀 Please take a moment to review these PRs. "
                f"{SEVERITY_MARKERS['fresh']} 0-4 days • "
                f"{SEVERITY_MARKERS['aging']} 5-9 days • "
                f"{SEVERITY_MARKERS['stale']} 10+ days",
            )
        )
