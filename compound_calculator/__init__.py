"""
Compound Staking Calculator.

Simulates daily compounding of a staked balance under a tiered profit
share, L1/L2 referral commissions, scheduled deposits and withdrawals,
weekends and vacation blackouts.

Example:
    >>> from compound_calculator import simulate
    >>>
    >>> years = simulate({
    ...     "initial_stake": "1000",
    ...     "duration_years": 1,
    ...     "start_date": "2025-01-06",
    ...     "partners": [
    ...         {"id": "p1", "name": "Anna", "level": "L1", "initial_stake": "1500"},
    ...     ],
    ...     "withdrawals": [{"frequency": "monthly", "amount": "50"}],
    ... })
    >>> print(f"End stake: {years[-1].summary.end_stake:.2f}")
"""

from compound_calculator.config import CalculatorSettings, get_settings, setup_logging
from compound_calculator.constants import Frequency, PartnerLevel
from compound_calculator.core.calculator import (
    CompoundCalculator,
    SimulationStartInfo,
    get_simulation_start_info,
    resolve_params,
    simulate,
)
from compound_calculator.core.calendar_policy import (
    is_backoffice_vacation,
    is_vacation_period,
    is_weekend,
    is_working_day,
    should_execute_transaction,
)
from compound_calculator.core.models import (
    DailyResult,
    MonthlyResult,
    Partner,
    PartnerCommission,
    PartnerSummary,
    PeriodSummary,
    RealProfitRecord,
    SimulationParams,
    TransactionPlan,
    YearlyResult,
)
from compound_calculator.core.rates import (
    CommissionRates,
    get_commission_rates,
    get_daily_profit_rate,
    get_profit_share,
    get_withdrawal_fee,
)
from compound_calculator.core.summary import (
    CompactEntry,
    LevelTotals,
    compact_daily_list,
    compute_level_totals,
    daily_rows,
    yearly_summary_rows,
)
from compound_calculator.exceptions import (
    CalculatorError,
    InvalidParameterError,
    PartnerReferenceError,
)
from compound_calculator.utils import (
    format_currency,
    format_days,
    format_number,
    format_percentage,
    format_period_summary,
    format_yearly_report,
)


__version__ = "1.0.0"
__all__ = [
    # Core
    "CompoundCalculator",
    "simulate",
    "resolve_params",
    "get_simulation_start_info",
    "SimulationStartInfo",
    # Calendar
    "is_weekend",
    "is_vacation_period",
    "is_backoffice_vacation",
    "is_working_day",
    "should_execute_transaction",
    # Rates
    "CommissionRates",
    "get_profit_share",
    "get_commission_rates",
    "get_daily_profit_rate",
    "get_withdrawal_fee",
    # Models
    "SimulationParams",
    "Partner",
    "TransactionPlan",
    "RealProfitRecord",
    "PartnerCommission",
    "DailyResult",
    "PartnerSummary",
    "PeriodSummary",
    "MonthlyResult",
    "YearlyResult",
    # Constants
    "PartnerLevel",
    "Frequency",
    # Summaries
    "CompactEntry",
    "LevelTotals",
    "compute_level_totals",
    "compact_daily_list",
    "daily_rows",
    "yearly_summary_rows",
    # Config
    "CalculatorSettings",
    "get_settings",
    "setup_logging",
    # Errors
    "CalculatorError",
    "InvalidParameterError",
    "PartnerReferenceError",
    # Formatters
    "format_currency",
    "format_percentage",
    "format_number",
    "format_days",
    "format_period_summary",
    "format_yearly_report",
]
