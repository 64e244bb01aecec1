"""
Type definitions for the compound calculator.

TypedDict rows handed to export collaborators (CSV/PDF generators)
and to the level totals helper.
"""

from typing import TypedDict


class CommissionRowDict(TypedDict):
    """
    One partner commission of a day.

    Attributes:
        partner_id: Partner identifier
        partner_name: Partner display name
        level: "L1" or "L2"
        commission: Commission amount
        from_partner_id: Originating L2 for fan-out commissions, else None
    """
    partner_id: str
    partner_name: str
    level: str
    commission: float
    from_partner_id: str | None


class DailyRowDict(TypedDict):
    """
    Flat export row of one simulated day.

    Attributes:
        date: ISO date
        stake: Stake at start of day
        profit: Investor's net profit
        commissions: Per-partner breakdown
        net_commissions: Commissions credited to the investor
        deposit: Deposited amount
        withdrawal: Withdrawn amount
        withdrawal_fee: Fee of the withdrawals
        new_stake: Stake at end of day
        is_weekend: Saturday or Sunday
        is_vacation: Inside a vacation block
    """
    date: str
    stake: float
    profit: float
    commissions: list[CommissionRowDict]
    net_commissions: float
    deposit: float
    withdrawal: float
    withdrawal_fee: float
    new_stake: float
    is_weekend: bool
    is_vacation: bool


class LevelTotalsDict(TypedDict):
    """
    Commission totals by referral level.

    Attributes:
        year: Calendar year
        month: Calendar month (1-12), None for a whole year
        l1_total: Commissions from L1 partners
        l2_total: Commissions from L2 partners
    """
    year: int
    month: int | None
    l1_total: float
    l2_total: float


class YearlySummaryRowDict(TypedDict):
    """
    Export row of one simulated year.

    Attributes:
        year: Calendar year
        start_stake: Stake at start of the year
        end_stake: Stake at end of the year
        total_profit: Investor's net profit
        total_deposits: Deposited amount
        total_withdrawals: Withdrawn amount
        l1_total: Commissions from L1 partners
        l2_total: Commissions from L2 partners
    """
    year: int
    start_stake: float
    end_stake: float
    total_profit: float
    total_deposits: float
    total_withdrawals: float
    l1_total: float
    l2_total: float