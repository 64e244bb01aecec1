"""
Default constants for the compound staking calculator.

Single source of truth for the tier tables, the nominal profit rate
and the withdrawal fee schedule. Other modules import from here.
"""

from decimal import Decimal
from enum import Enum
from typing import NamedTuple


class PartnerLevel(str, Enum):
    """Referral levels of a partner."""

    L1 = "L1"
    L2 = "L2"


class Frequency(str, Enum):
    """Schedule frequency of a deposit or withdrawal plan."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ProfitShareTier(NamedTuple):
    """Profit share band, inclusive on its lower bound."""

    min_stake: Decimal
    share: Decimal


class CommissionTier(NamedTuple):
    """Commission band keyed by the referring partner's own stake."""

    min_stake: Decimal
    l1_rate: Decimal  # Share of the partner's net profit for its L1 referrer
    l2_rate: Decimal  # Share of the partner's net profit for its L2 referrer


# Sorted by min_stake descending so the first match wins
PROFIT_SHARE_TIERS: list[ProfitShareTier] = [
    ProfitShareTier(min_stake=Decimal("50000"), share=Decimal("0.60")),
    ProfitShareTier(min_stake=Decimal("20000"), share=Decimal("0.50")),
    ProfitShareTier(min_stake=Decimal("10000"), share=Decimal("0.40")),
    ProfitShareTier(min_stake=Decimal("1000"), share=Decimal("0.30")),
    ProfitShareTier(min_stake=Decimal("200"), share=Decimal("0.20")),
]

COMMISSION_TIERS: list[CommissionTier] = [
    CommissionTier(min_stake=Decimal("50000"), l1_rate=Decimal("0.05"), l2_rate=Decimal("0.025")),
    CommissionTier(min_stake=Decimal("20000"), l1_rate=Decimal("0.10"), l2_rate=Decimal("0.05")),
    CommissionTier(min_stake=Decimal("10000"), l1_rate=Decimal("0.25"), l2_rate=Decimal("0.125")),
    CommissionTier(min_stake=Decimal("1000"), l1_rate=Decimal("0.50"), l2_rate=Decimal("0.25")),
]

# Below the lowest commission band
BASE_COMMISSION_RATES = (Decimal("1.00"), Decimal("0.50"))

# Nominal gross profit: 16% per month spread over 20 working days
DEFAULT_MONTHLY_GROSS_PROFIT_RATE = Decimal("0.16")
WORKING_DAYS_PER_MONTH = 20

# Withdrawal fees
REDUCED_FEE_WITHDRAWALS_PER_MONTH = 2
REDUCED_WITHDRAWAL_FEE_RATE = Decimal("0.0125")  # 1.25%
STANDARD_WITHDRAWAL_FEE_RATE = Decimal("0.025")  # 2.5%

# Calendar blackouts
VACATION_DAYS = 14
BACKOFFICE_VACATION_DAYS = 21
SUMMER_ANCHOR = (7, 15)  # (month, day) - week containing July 15
WINTER_ANCHOR = (12, 25)  # (month, day) - Monday on or before Dec 25

# ISO weekday numbers, 1 = Monday
DEFAULT_RESTAKING_DAYS: tuple[int, ...] = (1, 2, 3, 4, 5)

# Minimum investor stake offered as default
DEFAULT_STAKE = Decimal("200")
