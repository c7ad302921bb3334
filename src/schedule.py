"""Schedule expression parsing and matching.

Schedules use the familiar five-field layout (minute, hour, day-of-month,
month, day-of-week), but the job is triggered hourly and only the hour and
day-of-week fields are evaluated. Minute, day-of-month and month are accepted
and carried through unchanged so existing crontab-style strings keep working.
"""

from __future__ import annotations

from datetime import datetime

from models import Schedule

WILDCARD = "*"


def parse_schedule(expression: str) -> Schedule:
    """
    Parse a five-field schedule expression.

    Args:
        expression: Schedule string (e.g., '0 9 * * 1-5')

    Returns:
        Parsed Schedule

    Raises:
        ValueError: If the expression does not have five fields, the hour is not
            0-23, or the day-of-week field contains invalid values or an
            inverted range (e.g., '5-2')
    """
    fields = expression.split()
    if len(fields) != 5:
        msg = (
            f"Invalid schedule '{expression}': expected 5 fields "
            "(minute hour day-of-month month day-of-week), "
            f"got {len(fields)}"
        )
        raise ValueError(msg)

    minute, hour, day_of_month, month, day_of_week = fields

    return Schedule(
        expression=expression,
        hour=_parse_hour(hour, expression),
        days_of_week=_parse_days_of_week(day_of_week, expression),
        minute=minute,
        day_of_month=day_of_month,
        month=month,
    )


def _parse_hour(value: str, expression: str) -> int | None:
    if value == WILDCARD:
        return None
    hour = _parse_int(value, "hour", expression)
    if not 0 <= hour <= 23:
        msg = f"Invalid schedule '{expression}': hour {hour} must be between 0 and 23"
        raise ValueError(msg)
    return hour


def _parse_days_of_week(value: str, expression: str) -> frozenset[int] | None:
    """Expand a day-of-week field such as '1-3,5' into {1, 2, 3, 5}."""
    if value == WILDCARD:
        return None

    days: set[int] = set()
    for token in value.split(","):
        if "-" in token:
            start_str, _, end_str = token.partition("-")
            start = _parse_day(start_str, expression)
            end = _parse_day(end_str, expression)
            if start > end:
                msg = (
                    f"Invalid schedule '{expression}': day-of-week range '{token}' "
                    "is inverted (start must not exceed end)"
                )
                raise ValueError(msg)
            days.update(range(start, end + 1))
        else:
            days.add(_parse_day(token, expression))

    return frozenset(days)


def _parse_day(value: str, expression: str) -> int:
    day = _parse_int(value, "day-of-week", expression)
    if not 0 <= day <= 6:
        msg = (
            f"Invalid schedule '{expression}': day-of-week {day} must be between "
            "0 (Sunday) and 6 (Saturday)"
        )
        raise ValueError(msg)
    return day


def _parse_int(value: str, field_name: str, expression: str) -> int:
    # ASCII digits only: no sign, underscore or padding
    if not (value.isascii() and value.isdigit()):
        msg = f"Invalid schedule '{expression}': {field_name} '{value}' is not a number"
        raise ValueError(msg)
    return int(value)


def current_day_of_week(now: datetime) -> int:
    """Return the day of week of `now` with 0 = Sunday ... 6 = Saturday."""
    return now.isoweekday() % 7


def should_run(schedule: Schedule | str, now: datetime) -> bool:
    """
    Decide whether a schedule is due at the given moment.

    Args:
        schedule: Parsed Schedule or raw expression string
        now: Current time in the clock schedules are written against

    Returns:
        True if both the hour and day-of-week fields match `now`
    """
    if isinstance(schedule, str):
        schedule = parse_schedule(schedule)

    if schedule.hour is not None and schedule.hour != now.hour:
        return False

    if schedule.days_of_week is not None and current_day_of_week(now) not in schedule.days_of_week:
        return False

    return True
