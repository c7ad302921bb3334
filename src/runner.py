"""Per-run orchestration across teams."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from aggregator import PullRequestAggregator
from composer import NotificationComposer
from models import ComposedMessage, RunSummary, Team
from schedule import should_run

logger = logging.getLogger(__name__)

# Reserved selection override that runs every team regardless of schedule
ALL_TEAMS = "all"


class Dispatcher(Protocol):
    def deliver(self, channel: str, message: ComposedMessage) -> str: ...


class RunController:
    """
    Decide which teams are due and run aggregate -> compose -> deliver for each.

    Teams are processed sequentially. A failure anywhere in one team's
    pipeline is logged and recorded, and the next team still runs.
    """

    def __init__(
        self,
        aggregator: PullRequestAggregator,
        composer: NotificationComposer,
        dispatcher: Dispatcher,
    ) -> None:
        self.aggregator = aggregator
        self.composer = composer
        self.dispatcher = dispatcher

    def select_teams(
        self, teams: list[Team], now: datetime, override: str | None = None
    ) -> list[Team]:
        """
        Pick the teams that should run.

        Args:
            teams: All configured teams
            now: Current time in the schedule clock
            override: 'all' to run every team, a team name to run only that
                team, or None to follow each team's schedule

        Returns:
            Teams to run, in configuration order

        Raises:
            ValueError: If `override` names a team that is not configured
        """
        if override == ALL_TEAMS:
            return list(teams)

        if override:
            selected = [team for team in teams if team.name == override]
            if not selected:
                known = ", ".join(team.name for team in teams)
                msg = f"Unknown team '{override}'. Configured teams: {known}"
                raise ValueError(msg)
            return selected

        selected = []
        for team in teams:
            if team.schedule is None:
                logger.debug(f"Skipping {team.name}: no schedule configured")
            elif should_run(team.schedule, now):
                selected.append(team)
            else:
                logger.debug(f"Skipping {team.name}: not due ({team.schedule.expression})")
        return selected

    def run_team(self, team: Team, now: datetime) -> str:
        """
        Run the full pipeline for one team.

        Returns:
            Timestamp of the delivered message

        Raises:
            Exception: Anything raised by aggregation, composition or delivery
        """
        logger.info(f"Processing team {team.name} ({len(team.repositories)} repositories)")
        groups = self.aggregator.aggregate(team)
        pr_count = sum(len(prs) for prs in groups.values())
        logger.info(f"Found {pr_count} open PR(s) for {team.name} across {len(groups)} repositories")

        message = self.composer.compose(team, groups, now)
        ts = self.dispatcher.deliver(team.channel, message)
        logger.info(f"✅ Notification sent for {team.name} to {team.channel} (ts={ts})")
        return ts

    def run(self, teams: list[Team], now: datetime, override: str | None = None) -> RunSummary:
        """
        Run every due team, isolating failures per team.

        Raises:
            ValueError: If `override` names a team that is not configured
        """
        selected = self.select_teams(teams, now, override)
        selected_names = {team.name for team in selected}
        summary = RunSummary(
            skipped=[team.name for team in teams if team.name not in selected_names]
        )

        if not selected:
            logger.info(f"No teams due at {now.strftime('%Y-%m-%d %H:%M')}")
            return summary

        for team in selected:
            try:
                self.run_team(team, now)
                summary.succeeded.append(team.name)
            except Exception as e:
                logger.error(f"❌ Error processing team {team.name}: {e}", exc_info=True)
                summary.failed.append(team.name)

        return summary
