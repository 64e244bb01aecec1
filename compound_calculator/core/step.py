"""
Daily step function.

Advances the investor's and partners' stakes by one calendar day and
records what happened on that day.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from types import MappingProxyType

from loguru import logger

from compound_calculator.config.settings import CalculatorSettings
from compound_calculator.constants import PartnerLevel
from compound_calculator.core.calendar_policy import (
    is_vacation_period,
    is_weekend,
    is_working_day,
    should_execute_transaction,
)
from compound_calculator.core.models import (
    DailyResult,
    Partner,
    PartnerCommission,
    TransactionPlan,
)
from compound_calculator.core.rates import (
    calculate_net_profit,
    estimate_monthly_profit,
    get_commission_rates,
    get_daily_profit_rate,
    get_withdrawal_fee,
)


@dataclass(frozen=True)
class StakeState:
    """Running balances threaded from one day to the next."""

    investor_stake: Decimal
    partner_stakes: Mapping[str, Decimal]
    withdrawals_this_month: int = 0
    counter_month: tuple[int, int] | None = None  # (year, month) of the counter


@dataclass(frozen=True)
class StepContext:
    """Resolved inputs shared by every day of one run."""

    start_date: date
    settings: CalculatorSettings
    l1_partners: tuple[Partner, ...] = ()
    l2_by_parent: Mapping[str, tuple[Partner, ...]] = field(default_factory=dict)
    orphan_l2_partners: tuple[Partner, ...] = ()
    deposits: tuple[TransactionPlan, ...] = ()
    withdrawals: tuple[TransactionPlan, ...] = ()
    rate_overrides: Mapping[str, Decimal] = field(default_factory=dict)
    restaking_days: frozenset[int] = frozenset()


def _accrue_partner_commissions(
    day: date,
    context: StepContext,
    partner_stakes: dict[str, Decimal],
    daily_rate: Decimal,
) -> list[PartnerCommission]:
    """
    Restake partner profits and collect the day's commissions.

    Mutates ``partner_stakes`` in place.
    """
    commissions: list[PartnerCommission] = []

    for l1 in context.l1_partners:
        l1_stake = partner_stakes.get(l1.id, Decimal("0"))
        if l1_stake <= 0:
            continue

        l1_net = calculate_net_profit(l1_stake, daily_rate)
        partner_stakes[l1.id] = l1_stake + l1_net

        commissions.append(PartnerCommission(
            partner_id=l1.id,
            partner_name=l1.name,
            level=PartnerLevel.L1,
            commission=l1_net * get_commission_rates(l1_stake).l1,
        ))

        for l2 in context.l2_by_parent.get(l1.id, ()):
            l2_stake = partner_stakes.get(l2.id, Decimal("0"))
            if l2_stake <= 0:
                continue

            l2_net = calculate_net_profit(l2_stake, daily_rate)
            partner_stakes[l2.id] = l2_stake + l2_net
            rates = get_commission_rates(l2_stake)

            commissions.append(PartnerCommission(
                partner_id=l2.id,
                partner_name=l2.name,
                level=PartnerLevel.L2,
                commission=l2_net * rates.l2,
            ))

            # The parent L1 earns from its L2 on top of its own profit
            fan_out = l2_net * rates.l1
            commissions.append(PartnerCommission(
                partner_id=l1.id,
                partner_name=l1.name,
                level=PartnerLevel.L1,
                commission=fan_out,
                from_partner_id=l2.id,
            ))
            partner_stakes[l1.id] = partner_stakes[l1.id] + fan_out

    for l2 in context.orphan_l2_partners:
        l2_stake = partner_stakes.get(l2.id, Decimal("0"))
        if l2_stake <= 0:
            continue

        l2_net = calculate_net_profit(l2_stake, daily_rate)
        partner_stakes[l2.id] = l2_stake + l2_net

        commissions.append(PartnerCommission(
            partner_id=l2.id,
            partner_name=l2.name,
            level=PartnerLevel.L2,
            commission=l2_net * get_commission_rates(l2_stake).l2,
        ))

    return commissions


def advance_day(
    state: StakeState,
    day: date,
    context: StepContext,
) -> tuple[StakeState, DailyResult]:
    """
    Apply one calendar day to the running balances.

    Order of operations on a working day: investor profit is computed
    on the opening stake, partner profits are restaked and their
    commissions credited, then the investor's own profit is added.
    Scheduled deposits and withdrawals follow on any day outside the
    backoffice blackout.

    Args:
        state: Balances at the start of the day
        day: Calendar date being simulated
        context: Resolved run inputs

    Returns:
        Tuple of (balances at end of day, DailyResult)
    """
    stake = state.investor_stake
    partner_stakes = dict(state.partner_stakes)

    withdrawals_this_month = state.withdrawals_this_month
    if state.counter_month != (day.year, day.month):
        withdrawals_this_month = 0

    profit = Decimal("0")
    commissions: list[PartnerCommission] = []

    if is_working_day(day, context.restaking_days):
        daily_rate = get_daily_profit_rate(day, context.rate_overrides, context.settings)
        profit = calculate_net_profit(stake, daily_rate)

        commissions = _accrue_partner_commissions(day, context, partner_stakes, daily_rate)
        for pc in commissions:
            if pc.credited_to_investor:
                stake += pc.commission

        stake += profit

    deposit = Decimal("0")
    for plan in context.deposits:
        if should_execute_transaction(day, plan, context.start_date):
            amount = plan.amount or Decimal("0")
            deposit += amount
            stake += amount
            logger.debug(
                "Scheduled deposit applied",
                extra={"date": day.isoformat(), "amount": str(amount)},
            )

    withdrawal = Decimal("0")
    withdrawal_fee = Decimal("0")
    for plan in context.withdrawals:
        if should_execute_transaction(day, plan, context.start_date):
            if plan.percentage:
                amount = (
                    estimate_monthly_profit(stake, context.settings)
                    * plan.percentage / 100
                )
            else:
                amount = plan.amount or Decimal("0")

            fee = get_withdrawal_fee(amount, withdrawals_this_month)
            withdrawal += amount
            withdrawal_fee += fee
            stake -= amount + fee
            withdrawals_this_month += 1
            logger.debug(
                "Scheduled withdrawal applied",
                extra={
                    "date": day.isoformat(),
                    "amount": str(amount),
                    "fee": str(fee),
                    "withdrawals_this_month": withdrawals_this_month,
                },
            )

    net_commissions = sum(
        (pc.commission for pc in commissions if pc.credited_to_investor),
        Decimal("0"),
    )
    # Derived from the closing stake so that the day balances by construction
    opening_stake = stake - profit - net_commissions - deposit + withdrawal + withdrawal_fee

    result = DailyResult(
        date=day,
        stake=opening_stake,
        profit=profit,
        partner_commissions=commissions,
        deposit=deposit,
        withdrawal=withdrawal,
        withdrawal_fee=withdrawal_fee,
        new_stake=stake,
        is_weekend=is_weekend(day),
        is_vacation=is_vacation_period(day),
    )

    new_state = StakeState(
        investor_stake=stake,
        partner_stakes=MappingProxyType(partner_stakes),
        withdrawals_this_month=withdrawals_this_month,
        counter_month=(day.year, day.month),
    )
    return new_state, result
