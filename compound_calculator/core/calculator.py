"""
Simulation driver.

Folds the daily step over every calendar day of a run and groups the
resulting days into a year -> month tree with bottom-up summaries.
This module contains pure computation without any I/O.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from itertools import groupby
from types import MappingProxyType
from typing import Any

from dateutil.relativedelta import relativedelta
from loguru import logger
from pydantic import ValidationError

from compound_calculator.config.settings import CalculatorSettings, get_settings
from compound_calculator.constants import PartnerLevel
from compound_calculator.core.calendar_policy import is_vacation_period
from compound_calculator.core.models import (
    DailyResult,
    MonthlyResult,
    Partner,
    PartnerSummary,
    PeriodSummary,
    SimulationParams,
    YearlyResult,
)
from compound_calculator.core.rates import build_rate_overrides
from compound_calculator.core.step import StakeState, StepContext, advance_day
from compound_calculator.exceptions import (
    InvalidParameterError,
    PartnerReferenceError,
    from_validation_error,
)


@dataclass(frozen=True)
class ResolvedParams:
    """Fully resolved run configuration with all defaults applied."""

    params: SimulationParams
    initial_stake: Decimal
    start_date: date
    end_date: date
    context: StepContext

    @property
    def day_count(self) -> int:
        """Number of simulated days (0 for an empty range)."""
        return max((self.end_date - self.start_date).days + 1, 0)


@dataclass(frozen=True)
class SimulationStartInfo:
    """Requested versus first active start date."""

    requested_start_date: date
    effective_start_date: date
    notice: str | None = None


def _coerce_params(params: SimulationParams | Mapping[str, Any]) -> SimulationParams:
    if isinstance(params, SimulationParams):
        return params
    try:
        return SimulationParams.model_validate(params)
    except ValidationError as e:
        raise from_validation_error(e) from e


def _build_topology(
    partners: list[Partner],
    strict: bool,
) -> tuple[tuple[Partner, ...], dict[str, tuple[Partner, ...]], tuple[Partner, ...]]:
    """
    Partition partners into L1s, L2s by parent and orphan L2s.

    An L2 whose parent is not an L1 of this run is an orphan.
    """
    l1_partners = tuple(p for p in partners if p.level == PartnerLevel.L1)
    l1_ids = {p.id for p in l1_partners}

    l2_by_parent: dict[str, list[Partner]] = {l1_id: [] for l1_id in l1_ids}
    orphans: list[Partner] = []

    for partner in partners:
        if partner.level != PartnerLevel.L2:
            continue

        if partner.parent_l1_id in l1_ids:
            l2_by_parent[partner.parent_l1_id].append(partner)
            continue

        if partner.parent_l1_id is not None:
            if strict:
                raise PartnerReferenceError(
                    f"Partner {partner.id} references unknown L1 partner "
                    f"{partner.parent_l1_id}",
                    field="partners",
                )
            logger.warning(
                "L2 partner references unknown L1, treating as orphan",
                extra={"partner_id": partner.id, "parent_l1_id": partner.parent_l1_id},
            )
        orphans.append(partner)

    return (
        l1_partners,
        {l1_id: tuple(children) for l1_id, children in l2_by_parent.items()},
        tuple(orphans),
    )


def resolve_params(
    params: SimulationParams | Mapping[str, Any],
    settings: CalculatorSettings | None = None,
) -> ResolvedParams:
    """
    Resolve parameters and defaults once, before the run starts.

    Args:
        params: SimulationParams or an equivalent mapping
        settings: Settings override

    Returns:
        ResolvedParams consumed by the date loop

    Raises:
        InvalidParameterError: If the parameters do not validate
            or the end date falls outside the calendar
    """
    params = _coerce_params(params)
    settings = settings or get_settings()

    initial_stake = params.initial_stake
    if initial_stake is None:
        initial_stake = settings.default_stake

    start_date = params.start_date or (
        date.today() + timedelta(days=settings.start_date_offset_days)
    )
    try:
        end_date = start_date + relativedelta(
            years=params.duration_years, months=params.duration_months
        )
    except (ValueError, OverflowError) as e:
        if params.duration_years * 12 + params.duration_months < 0:
            # Negative durations past date.min give an empty range
            end_date = start_date - timedelta(days=1)
        else:
            raise InvalidParameterError(
                f"Simulation end date is out of range: {e}",
                field="duration_years",
            ) from e

    restaking_days = frozenset(params.restaking_days or settings.default_restaking_days)

    l1_partners, l2_by_parent, orphans = _build_topology(
        params.partners, settings.strict_partner_references
    )

    context = StepContext(
        start_date=start_date,
        settings=settings,
        l1_partners=l1_partners,
        l2_by_parent=MappingProxyType(l2_by_parent),
        orphan_l2_partners=orphans,
        deposits=tuple(params.deposits),
        withdrawals=tuple(params.withdrawals),
        rate_overrides=MappingProxyType(build_rate_overrides(params.real_profit_data)),
        restaking_days=restaking_days,
    )

    return ResolvedParams(
        params=params,
        initial_stake=initial_stake,
        start_date=start_date,
        end_date=end_date,
        context=context,
    )


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def summarize_partners(
    entries: Iterable[tuple[str, str, PartnerLevel, Decimal]],
) -> list[PartnerSummary]:
    """
    Sum commissions by partner id, keeping first-seen order.

    Args:
        entries: (partner_id, partner_name, level, amount) tuples

    Returns:
        One PartnerSummary per partner id
    """
    totals: dict[str, tuple[str, PartnerLevel, Decimal]] = {}
    for partner_id, partner_name, level, amount in entries:
        if partner_id in totals:
            name, lvl, total = totals[partner_id]
            totals[partner_id] = (name, lvl, total + amount)
        else:
            totals[partner_id] = (partner_name, level, amount)

    return [
        PartnerSummary(
            partner_id=partner_id,
            partner_name=name,
            level=level,
            total_commission=total,
        )
        for partner_id, (name, level, total) in totals.items()
    ]


def summarize_days(days: list[DailyResult]) -> PeriodSummary:
    """
    Reduce the days of one month into a summary.

    Args:
        days: Non-empty, chronologically ordered days

    Returns:
        PeriodSummary of the month
    """
    return PeriodSummary(
        start_stake=days[0].stake,
        end_stake=days[-1].new_stake,
        total_profit=sum((d.profit for d in days), Decimal("0")),
        total_deposits=sum((d.deposit for d in days), Decimal("0")),
        total_withdrawals=sum((d.withdrawal for d in days), Decimal("0")),
        total_withdrawal_fees=sum((d.withdrawal_fee for d in days), Decimal("0")),
        partner_summaries=summarize_partners(
            (pc.partner_id, pc.partner_name, pc.level, pc.commission)
            for d in days
            for pc in d.partner_commissions
        ),
    )


def summarize_months(months: list[MonthlyResult]) -> PeriodSummary:
    """
    Reduce the months of one year into a summary.

    Folds month summaries instead of re-scanning days.

    Args:
        months: Non-empty, chronologically ordered months

    Returns:
        PeriodSummary of the year
    """
    summaries = [m.summary for m in months]
    return PeriodSummary(
        start_stake=summaries[0].start_stake,
        end_stake=summaries[-1].end_stake,
        total_profit=sum((s.total_profit for s in summaries), Decimal("0")),
        total_deposits=sum((s.total_deposits for s in summaries), Decimal("0")),
        total_withdrawals=sum((s.total_withdrawals for s in summaries), Decimal("0")),
        total_withdrawal_fees=sum(
            (s.total_withdrawal_fees for s in summaries), Decimal("0")
        ),
        partner_summaries=summarize_partners(
            (ps.partner_id, ps.partner_name, ps.level, ps.total_commission)
            for s in summaries
            for ps in s.partner_summaries
        ),
    )


def group_days(days: list[DailyResult]) -> list[YearlyResult]:
    """
    Group chronological days into years and months.

    Args:
        days: Days in strict chronological order

    Returns:
        YearlyResult list ordered by year
    """
    yearly_results: list[YearlyResult] = []

    for year, year_days in groupby(days, key=lambda d: d.date.year):
        months: list[MonthlyResult] = []
        for month, month_days in groupby(year_days, key=lambda d: d.date.month):
            month_days = list(month_days)
            months.append(MonthlyResult(
                year=year,
                month=month,
                days=month_days,
                summary=summarize_days(month_days),
            ))

        yearly_results.append(YearlyResult(
            year=year,
            months=months,
            summary=summarize_months(months),
        ))

    return yearly_results


class CompoundCalculator:
    """
    Daily compounding simulator for a staked balance.

    Holds only settings; every call to :meth:`simulate` keeps its
    balances local to that call.
    """

    def __init__(self, settings: CalculatorSettings | None = None) -> None:
        """
        Initialize calculator.

        Args:
            settings: Settings override, defaults to the global settings
        """
        self.settings = settings or get_settings()

    def run_days(self, resolved: ResolvedParams) -> list[DailyResult]:
        """
        Fold the daily step over the resolved date range.

        Args:
            resolved: Output of :func:`resolve_params`

        Returns:
            One DailyResult per calendar day, in order
        """
        params = resolved.params
        state = StakeState(
            investor_stake=resolved.initial_stake,
            partner_stakes=MappingProxyType(
                {p.id: p.initial_stake for p in params.partners}
            ),
        )

        days: list[DailyResult] = []
        for day in iter_dates(resolved.start_date, resolved.end_date):
            state, result = advance_day(state, day, resolved.context)
            days.append(result)

        return days

    def simulate(
        self,
        params: SimulationParams | Mapping[str, Any],
    ) -> list[YearlyResult]:
        """
        Simulate a run from its parameters.

        Args:
            params: SimulationParams or an equivalent mapping

        Returns:
            YearlyResult list ordered by year, empty for a negative duration

        Raises:
            InvalidParameterError: If the parameters do not validate

        Example:
            >>> calc = CompoundCalculator()
            >>> years = calc.simulate({
            ...     "initial_stake": "1000",
            ...     "start_date": "2025-03-03",
            ... })
            >>> years[0].months[0].days[0].profit
            Decimal('2.40000')
        """
        resolved = resolve_params(params, self.settings)

        if resolved.day_count == 0:
            logger.warning(
                "Simulation range is empty",
                extra={
                    "start_date": resolved.start_date.isoformat(),
                    "end_date": resolved.end_date.isoformat(),
                },
            )
            return []

        logger.info(
            "Simulation started",
            extra={
                "start_date": resolved.start_date.isoformat(),
                "end_date": resolved.end_date.isoformat(),
                "days": resolved.day_count,
                "partners": len(resolved.params.partners),
            },
        )

        days = self.run_days(resolved)
        yearly_results = group_days(days)

        logger.info(
            "Simulation finished",
            extra={
                "years": len(yearly_results),
                "end_stake": str(yearly_results[-1].summary.end_stake),
            },
        )
        return yearly_results

    def get_start_info(
        self,
        params: SimulationParams | Mapping[str, Any],
    ) -> SimulationStartInfo:
        """
        Find the first day on or after the requested start outside a vacation.

        Args:
            params: SimulationParams or an equivalent mapping

        Returns:
            SimulationStartInfo with a notice when the start moves
        """
        resolved = resolve_params(params, self.settings)
        requested = resolved.start_date

        effective = requested
        while is_vacation_period(effective):
            effective += timedelta(days=1)

        notice = None
        if effective != requested:
            notice = (
                f"Start date {requested.isoformat()} falls into a vacation period; "
                f"first active day is {effective.isoformat()}"
            )

        return SimulationStartInfo(
            requested_start_date=requested,
            effective_start_date=effective,
            notice=notice,
        )


def simulate(
    params: SimulationParams | Mapping[str, Any],
    settings: CalculatorSettings | None = None,
) -> list[YearlyResult]:
    """
    Simulate a run with a fresh calculator.

    Args:
        params: SimulationParams or an equivalent mapping
        settings: Settings override

    Returns:
        YearlyResult list ordered by year
    """
    return CompoundCalculator(settings).simulate(params)


def get_simulation_start_info(
    params: SimulationParams | Mapping[str, Any],
    settings: CalculatorSettings | None = None,
) -> SimulationStartInfo:
    """Requested and effective start date of a run."""
    return CompoundCalculator(settings).get_start_info(params)
