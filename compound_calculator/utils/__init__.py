"""
Utility functions for the compound calculator.

Formatting helpers for amounts, percentages and summaries.
"""

from compound_calculator.utils.formatters import (
    format_currency,
    format_days,
    format_number,
    format_percentage,
    format_period_summary,
    format_yearly_report,
)

__all__ = [
    "format_currency",
    "format_percentage",
    "format_number",
    "format_days",
    "format_period_summary",
    "format_yearly_report",
]
