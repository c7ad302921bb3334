"""Age calculation and severity tiers for pull requests."""

from __future__ import annotations

from datetime import datetime, timedelta

from models import AgeTier, PullRequest

AGING_THRESHOLD_DAYS = 5
STALE_THRESHOLD_DAYS = 10


def days_open(pr: PullRequest, now: datetime) -> int:
    """
    Count whole days a pull request has been open.

    Args:
        pr: The pull request
        now: Current time (timezone-aware)

    Returns:
        Elapsed whole days since creation, floored (e.g., 6 days 23 hours -> 6).
        Never negative, even if the host clock lags GitHub's.
    """
    elapsed = now - pr.created_at
    return max(0, elapsed // timedelta(days=1))


def age_tier(days: int) -> AgeTier:
    """
    Categorize a pull request by whole days open:
    - fresh: 0-4 days
    - aging: 5-9 days
    - stale: 10+ days
    """
    if days >= STALE_THRESHOLD_DAYS:
        return "stale"
    elif days >= AGING_THRESHOLD_DAYS:
        return "aging"
    else:
        return "fresh"
