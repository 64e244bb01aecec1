"""
Summary helpers over simulation results.

Level totals, compact day lists and flat export rows for the
collaborators that render or export a finished run.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from compound_calculator.constants import PartnerLevel
from compound_calculator.core.models import DailyResult, YearlyResult
from compound_calculator.types import (
    CommissionRowDict,
    DailyRowDict,
    LevelTotalsDict,
    YearlySummaryRowDict,
)


@dataclass(frozen=True)
class LevelTotals:
    """Commission totals per year and per (year, month)."""

    yearly: list[LevelTotalsDict]
    monthly: dict[tuple[int, int], LevelTotalsDict]


@dataclass(frozen=True)
class CompactEntry:
    """Either an active day or a run of inactive days."""

    type: Literal["day", "gap"]
    day: DailyResult | None = None
    start: date | None = None
    end: date | None = None
    label: str | None = None


def _level_split(days: list[DailyResult]) -> tuple[Decimal, Decimal]:
    # Fan-out commissions belong to the L1 partner, not the investor
    l1_total = Decimal("0")
    l2_total = Decimal("0")
    for day in days:
        for pc in day.partner_commissions:
            if not pc.credited_to_investor:
                continue
            if pc.level == PartnerLevel.L1:
                l1_total += pc.commission
            else:
                l2_total += pc.commission
    return l1_total, l2_total


def compute_level_totals(yearly: list[YearlyResult]) -> LevelTotals:
    """
    Aggregate the investor's L1 and L2 commissions per month and year.

    Only commissions credited to the investor are counted. L1 fan-out
    entries (those with ``from_partner_id``) credit the L1 partner's own
    stake and are left out; ``PartnerSummary`` totals include them.

    Args:
        yearly: Result of a simulation

    Returns:
        LevelTotals with one yearly entry per year and monthly entries
        keyed by (year, month)
    """
    yearly_totals: list[LevelTotalsDict] = []
    monthly_totals: dict[tuple[int, int], LevelTotalsDict] = {}

    for year in yearly:
        year_l1 = Decimal("0")
        year_l2 = Decimal("0")

        for month in year.months:
            month_l1, month_l2 = _level_split(month.days)
            monthly_totals[(year.year, month.month)] = LevelTotalsDict(
                year=year.year,
                month=month.month,
                l1_total=float(month_l1),
                l2_total=float(month_l2),
            )
            year_l1 += month_l1
            year_l2 += month_l2

        yearly_totals.append(LevelTotalsDict(
            year=year.year,
            month=None,
            l1_total=float(year_l1),
            l2_total=float(year_l2),
        ))

    return LevelTotals(yearly=yearly_totals, monthly=monthly_totals)


def is_inactive_day(day: DailyResult) -> bool:
    """No profit, no commissions and no transactions."""
    return (
        day.profit == 0
        and not day.partner_commissions
        and day.deposit == 0
        and day.withdrawal == 0
    )


def format_gap_label(length: int) -> str:
    """Label of a run of inactive days."""
    unit = "day" if length == 1 else "days"
    return f"Weekend / vacation ({length} {unit})"


def compact_daily_list(days: list[DailyResult]) -> list[CompactEntry]:
    """
    Collapse consecutive inactive days into gap entries.

    Args:
        days: Chronologically ordered days

    Returns:
        Entries in input order; active days are kept as is
    """
    entries: list[CompactEntry] = []

    i = 0
    while i < len(days):
        if not is_inactive_day(days[i]):
            entries.append(CompactEntry(type="day", day=days[i]))
            i += 1
            continue

        j = i
        while j + 1 < len(days) and is_inactive_day(days[j + 1]):
            j += 1

        entries.append(CompactEntry(
            type="gap",
            start=days[i].date,
            end=days[j].date,
            label=format_gap_label(j - i + 1),
        ))
        i = j + 1

    return entries


def daily_rows(yearly: list[YearlyResult]) -> list[DailyRowDict]:
    """
    Flatten a result tree into one export row per day.

    Args:
        yearly: Result of a simulation

    Returns:
        Rows in chronological order
    """
    rows: list[DailyRowDict] = []
    for year in yearly:
        for month in year.months:
            for day in month.days:
                rows.append(DailyRowDict(
                    date=day.date.isoformat(),
                    stake=float(day.stake),
                    profit=float(day.profit),
                    commissions=[
                        CommissionRowDict(
                            partner_id=pc.partner_id,
                            partner_name=pc.partner_name,
                            level=pc.level.value,
                            commission=float(pc.commission),
                            from_partner_id=pc.from_partner_id,
                        )
                        for pc in day.partner_commissions
                    ],
                    net_commissions=float(day.net_commissions),
                    deposit=float(day.deposit),
                    withdrawal=float(day.withdrawal),
                    withdrawal_fee=float(day.withdrawal_fee),
                    new_stake=float(day.new_stake),
                    is_weekend=day.is_weekend,
                    is_vacation=day.is_vacation,
                ))
    return rows


def yearly_summary_rows(yearly: list[YearlyResult]) -> list[YearlySummaryRowDict]:
    """
    Build the simple export: one row per year with level totals.

    Args:
        yearly: Result of a simulation

    Returns:
        Rows ordered by year
    """
    totals = {t["year"]: t for t in compute_level_totals(yearly).yearly}

    return [
        YearlySummaryRowDict(
            year=year.year,
            start_stake=float(year.summary.start_stake),
            end_stake=float(year.summary.end_stake),
            total_profit=float(year.summary.total_profit),
            total_deposits=float(year.summary.total_deposits),
            total_withdrawals=float(year.summary.total_withdrawals),
            l1_total=totals[year.year]["l1_total"],
            l2_total=totals[year.year]["l2_total"],
        )
        for year in yearly
    ]
