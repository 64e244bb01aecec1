"""
Calendar policy.

Decides for any date whether it is a weekend, inside a vacation
blackout, inside the longer backoffice blackout, a restaking day, and
whether a scheduled transaction fires on it.
"""

from collections.abc import Collection
from datetime import date, timedelta
from typing import TYPE_CHECKING

from compound_calculator.constants import (
    BACKOFFICE_VACATION_DAYS,
    DEFAULT_RESTAKING_DAYS,
    SUMMER_ANCHOR,
    VACATION_DAYS,
    WINTER_ANCHOR,
    Frequency,
)


if TYPE_CHECKING:
    from compound_calculator.core.models import TransactionPlan


def is_weekend(day: date) -> bool:
    """Saturday or Sunday."""
    return day.isoweekday() >= 6


def monday_of_week_containing(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def monday_on_or_before(day: date) -> date:
    """Closest Monday not after ``day``."""
    return monday_of_week_containing(day)


def summer_vacation_start(year: int) -> date:
    """Monday of the week containing July 15."""
    month, dom = SUMMER_ANCHOR
    return monday_of_week_containing(date(year, month, dom))


def winter_vacation_start(year: int) -> date:
    """Monday on or before December 25."""
    month, dom = WINTER_ANCHOR
    return monday_on_or_before(date(year, month, dom))


def _in_blackout(day: date, length_days: int) -> bool:
    # A winter block may start in the previous year and reach into January
    last_offset = timedelta(days=length_days - 1)

    summer_start = summer_vacation_start(day.year)
    if summer_start <= day <= summer_start + last_offset:
        return True

    for year in (day.year, day.year - 1):
        winter_start = winter_vacation_start(year)
        if winter_start <= day <= winter_start + last_offset:
            return True

    return False


def is_vacation_period(day: date) -> bool:
    """
    Check if date falls into a vacation blackout.

    Two 14-day blocks per year: summer from the Monday of the week with
    July 15, winter from the Monday on or before December 25.

    Args:
        day: Calendar date

    Returns:
        True inside either block
    """
    return _in_blackout(day, VACATION_DAYS)


def is_backoffice_vacation(day: date) -> bool:
    """
    Check if date falls into a backoffice blackout.

    Same anchors as the vacation blocks, extended by a trailing week.
    Suppresses scheduled transactions only.

    Args:
        day: Calendar date

    Returns:
        True inside either 21-day window
    """
    return _in_blackout(day, BACKOFFICE_VACATION_DAYS)


def is_working_day(day: date, restaking_days: Collection[int] | None = None) -> bool:
    """
    Check if profit accrues and is restaked on a date.

    Args:
        day: Calendar date
        restaking_days: Allowed ISO weekdays (1 = Monday), Mon-Fri if empty

    Returns:
        False on weekends and vacations, otherwise whether the weekday is allowed
    """
    if is_weekend(day) or is_vacation_period(day):
        return False

    allowed = restaking_days or DEFAULT_RESTAKING_DAYS
    return day.isoweekday() in allowed


def months_between(start: date, day: date) -> int:
    """Whole calendar months from ``start``'s month to ``day``'s month."""
    return (day.year - start.year) * 12 + (day.month - start.month)


def should_execute_transaction(
    day: date,
    plan: "TransactionPlan",
    start_date: date,
) -> bool:
    """
    Check if a scheduled transaction fires on a date.

    Plans fire on the start date's day of month, never in month zero,
    and never inside a backoffice blackout.

    Args:
        day: Calendar date
        plan: TransactionPlan with a frequency
        start_date: First simulated day

    Returns:
        True if the plan executes on ``day``
    """
    if is_backoffice_vacation(day):
        return False

    if day.day != start_date.day:
        return False

    offset = months_between(start_date, day)

    if plan.frequency == Frequency.MONTHLY:
        return offset > 0
    if plan.frequency == Frequency.QUARTERLY:
        return offset > 0 and offset % 3 == 0
    if plan.frequency == Frequency.YEARLY:
        return day.month == start_date.month and day.year > start_date.year

    return False
