"""
Rate tables.

Pure lookups mapping a stake to its profit share and commission rates,
and a date to its daily gross profit rate.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, NamedTuple

from compound_calculator.config.settings import CalculatorSettings, get_settings
from compound_calculator.constants import (
    BASE_COMMISSION_RATES,
    COMMISSION_TIERS,
    PROFIT_SHARE_TIERS,
    REDUCED_FEE_WITHDRAWALS_PER_MONTH,
    REDUCED_WITHDRAWAL_FEE_RATE,
    STANDARD_WITHDRAWAL_FEE_RATE,
)


if TYPE_CHECKING:
    from compound_calculator.core.models import RealProfitRecord


class CommissionRates(NamedTuple):
    """Commission fractions of a partner's net profit."""

    l1: Decimal
    l2: Decimal


def get_profit_share(stake: Decimal) -> Decimal:
    """
    Get the investor's share of gross profit for a stake.

    Args:
        stake: Current stake

    Returns:
        Profit share fraction (0 below 200)

    Example:
        >>> get_profit_share(Decimal("1500"))
        Decimal('0.30')
    """
    for tier in PROFIT_SHARE_TIERS:
        if stake >= tier.min_stake:
            return tier.share
    return Decimal("0")


def get_commission_rates(stake: Decimal) -> CommissionRates:
    """
    Get commission rates by the referring partner's own stake tier.

    Args:
        stake: Stake of the partner generating the commission

    Returns:
        CommissionRates with L1 and L2 fractions

    Example:
        >>> get_commission_rates(Decimal("1500"))
        CommissionRates(l1=Decimal('0.50'), l2=Decimal('0.25'))
    """
    for tier in COMMISSION_TIERS:
        if stake >= tier.min_stake:
            return CommissionRates(l1=tier.l1_rate, l2=tier.l2_rate)
    return CommissionRates(*BASE_COMMISSION_RATES)


def build_rate_overrides(
    records: Iterable["RealProfitRecord"] | None,
) -> dict[str, Decimal]:
    """
    Index real profit records by ISO date string.

    The first record of a date wins.

    Args:
        records: Iterable of RealProfitRecord or None

    Returns:
        Mapping of "YYYY-MM-DD" to gross profit rate
    """
    overrides: dict[str, Decimal] = {}
    for record in records or ():
        overrides.setdefault(record.date.isoformat(), record.gross_profit_rate)
    return overrides


def get_daily_profit_rate(
    day: date,
    overrides: Mapping[str, Decimal] | None = None,
    settings: CalculatorSettings | None = None,
) -> Decimal:
    """
    Get the daily gross profit rate for a date.

    An override recorded for the exact date replaces the nominal rate,
    which is the monthly rate divided by the assumed working days per month.

    Args:
        day: Calendar date
        overrides: Rates keyed by ISO date string
        settings: Settings override

    Returns:
        Daily gross profit rate as a fraction

    Example:
        >>> get_daily_profit_rate(date(2025, 3, 3))
        Decimal('0.008')
    """
    if overrides:
        rate = overrides.get(day.isoformat())
        if rate is not None:
            return rate
    return (settings or get_settings()).default_daily_profit_rate


def calculate_net_profit(
    stake: Decimal,
    daily_rate: Decimal,
) -> Decimal:
    """
    Calculate one day's net profit.

    Formula: stake * daily_rate * profit_share(stake)

    Args:
        stake: Stake at start of the step
        daily_rate: Daily gross profit rate

    Returns:
        Net profit (0 for non-positive stakes)
    """
    if stake <= 0:
        return Decimal("0")
    return stake * daily_rate * get_profit_share(stake)


def estimate_monthly_profit(
    stake: Decimal,
    settings: CalculatorSettings | None = None,
) -> Decimal:
    """
    Estimate a month's net profit at the nominal rate.

    Used for percentage withdrawals, ignoring realised rates.

    Args:
        stake: Current stake
        settings: Settings override

    Returns:
        Estimated monthly net profit
    """
    if stake <= 0:
        return Decimal("0")
    monthly_rate = (settings or get_settings()).monthly_gross_profit_rate
    return stake * monthly_rate * get_profit_share(stake)


def get_withdrawal_fee(amount: Decimal, withdrawals_this_month: int) -> Decimal:
    """
    Calculate the fee of a withdrawal.

    The first two withdrawals of a calendar month pay 1.25%, later ones 2.5%.

    Args:
        amount: Withdrawal amount
        withdrawals_this_month: Withdrawals already made this month

    Returns:
        Fee amount

    Example:
        >>> get_withdrawal_fee(Decimal("100"), 2)
        Decimal('2.500')
    """
    if withdrawals_this_month < REDUCED_FEE_WITHDRAWALS_PER_MONTH:
        return amount * REDUCED_WITHDRAWAL_FEE_RATE
    return amount * STANDARD_WITHDRAWAL_FEE_RATE
