"""
Core simulation functionality.

Calendar policy, rate tables, the daily step and the simulation driver.
"""

from compound_calculator.core.calculator import (
    CompoundCalculator,
    ResolvedParams,
    SimulationStartInfo,
    get_simulation_start_info,
    resolve_params,
    simulate,
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

__all__ = [
    "CompoundCalculator",
    "ResolvedParams",
    "SimulationStartInfo",
    "get_simulation_start_info",
    "resolve_params",
    "simulate",
    "DailyResult",
    "MonthlyResult",
    "Partner",
    "PartnerCommission",
    "PartnerSummary",
    "PeriodSummary",
    "RealProfitRecord",
    "SimulationParams",
    "TransactionPlan",
    "YearlyResult",
]
