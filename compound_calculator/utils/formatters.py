"""
Formatting utilities for numbers, currency and simulation summaries.

Plain-text rendering for logs and quick reports; rich exports are
handled outside this package.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Union


if TYPE_CHECKING:
    from compound_calculator.core.models import PeriodSummary, YearlyResult


def format_currency(
    amount: Union[float, Decimal],
    currency: str = "$",
    decimals: int = 2,
    thousands_separator: str = ",",
    decimal_separator: str = "."
) -> str:
    """
    Format an amount as currency.

    Args:
        amount: Amount to format
        currency: Currency symbol or code
        decimals: Digits after the decimal point
        thousands_separator: Thousands separator
        decimal_separator: Decimal separator

    Returns:
        Formatted string with currency

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1000, currency="EUR", decimals=0)
        '1,000 EUR'
    """
    formatted = format_number(amount, decimals, thousands_separator, decimal_separator)

    sign = ""
    if formatted.startswith("-"):
        sign, formatted = "-", formatted[1:]

    if currency.startswith("$") or currency.startswith("€"):
        return f"{sign}{currency}{formatted}"
    return f"{sign}{formatted} {currency}"


def format_percentage(
    value: Union[float, Decimal],
    decimals: int = 2,
    show_sign: bool = False
) -> str:
    """
    Format a fraction as a percentage.

    Args:
        value: Fraction to format (0.3 = 30%)
        decimals: Digits after the decimal point
        show_sign: Prefix positive values with +

    Returns:
        Formatted percentage

    Example:
        >>> format_percentage(Decimal("0.125"))
        '12.50%'
        >>> format_percentage(0.5, decimals=0, show_sign=True)
        '+50%'
    """
    percent = float(value) * 100
    sign = "+" if show_sign and percent > 0 else ""
    return f"{sign}{percent:.{decimals}f}%"


def format_number(
    value: Union[float, Decimal, int],
    decimals: Optional[int] = None,
    thousands_separator: str = ",",
    decimal_separator: str = "."
) -> str:
    """
    Format a number for display.

    Args:
        value: Number to format
        decimals: Digits after the decimal point (None keeps all)
        thousands_separator: Thousands separator
        decimal_separator: Decimal separator

    Returns:
        Formatted string

    Example:
        >>> format_number(1234567.89)
        '1,234,567.89'
    """
    spec = "," if decimals is None else f",.{decimals}f"
    formatted = format(float(value), spec)
    return formatted.translate(
        str.maketrans({",": thousands_separator, ".": decimal_separator})
    )


def format_days(days: int) -> str:
    """
    Format a day count.

    Args:
        days: Number of days

    Returns:
        Formatted string like "60 days (~2 months)"
    """
    if days <= 0:
        return "0 days"

    label = "1 day" if days == 1 else f"{days} days"
    months = round(days / 30, 1)
    if months < 1:
        return label

    unit = "month" if months == 1 else "months"
    return f"{label} (~{months:g} {unit})"


def format_period_summary(
    summary: "PeriodSummary",
    currency: str = "$",
) -> str:
    """
    Format a month or year summary as a text block.

    Args:
        summary: PeriodSummary object
        currency: Currency symbol

    Returns:
        Multi-line formatted report
    """
    lines = [
        f"  Start stake:  {format_currency(summary.start_stake, currency)}",
        f"  End stake:    {format_currency(summary.end_stake, currency)}",
        f"  Profit:       {format_currency(summary.total_profit, currency)}",
        f"  Deposits:     {format_currency(summary.total_deposits, currency)}",
        f"  Withdrawals:  {format_currency(summary.total_withdrawals, currency)}",
        f"  Fees:         {format_currency(summary.total_withdrawal_fees, currency)}",
    ]
    for partner in summary.partner_summaries:
        name = partner.partner_name or partner.partner_id
        lines.append(
            f"  {partner.level.value} {name}: "
            f"{format_currency(partner.total_commission, currency)}"
        )
    return "\n".join(lines)


def format_yearly_report(
    yearly: list["YearlyResult"],
    currency: str = "$",
) -> str:
    """
    Format a whole simulation as a per-year text report.

    Args:
        yearly: Result of a simulation
        currency: Currency symbol

    Returns:
        Multi-line report, one block per year
    """
    if not yearly:
        return "No simulated days."

    blocks = []
    for year in yearly:
        day_count = sum(len(month.days) for month in year.months)
        blocks.append(
            f"{year.year}: {format_days(day_count)}\n"
            f"{format_period_summary(year.summary, currency)}"
        )
    return "\n\n".join(blocks)
