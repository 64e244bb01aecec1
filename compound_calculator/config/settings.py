"""
Calculator settings.

Loads configuration from environment variables using pydantic-settings.
All variables use the ``COMPOUND_`` prefix, e.g.
``COMPOUND_MONTHLY_GROSS_PROFIT_RATE=0.12``.
"""

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from compound_calculator.constants import (
    DEFAULT_MONTHLY_GROSS_PROFIT_RATE,
    DEFAULT_RESTAKING_DAYS,
    DEFAULT_STAKE,
    WORKING_DAYS_PER_MONTH,
)


class CalculatorSettings(BaseSettings):
    """Calculator settings loaded from environment variables."""

    # Profit model
    monthly_gross_profit_rate: Decimal = Field(
        default=DEFAULT_MONTHLY_GROSS_PROFIT_RATE,
        ge=0,
        description="Nominal gross profit per month (0.16 = 16%)",
    )
    working_days_per_month: int = Field(
        default=WORKING_DAYS_PER_MONTH,
        description="Assumed working days per month for the daily rate",
    )

    # Parameter defaults
    default_restaking_days: list[int] = Field(
        default_factory=lambda: list(DEFAULT_RESTAKING_DAYS),
        description="ISO weekdays used when a run specifies none",
    )
    default_stake: Decimal = Field(default=DEFAULT_STAKE, ge=0)
    start_date_offset_days: int = Field(
        default=1, description="Default start date is today plus this many days"
    )

    # Validation
    strict_partner_references: bool = Field(
        default=False,
        description="Reject L2 partners whose parent L1 does not exist",
    )

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COMPOUND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("working_days_per_month")
    @classmethod
    def validate_working_days(cls, v: int) -> int:
        """Working days must be positive."""
        if v <= 0:
            raise ValueError("working_days_per_month must be positive")
        return v

    @field_validator("default_restaking_days")
    @classmethod
    def validate_restaking_days(cls, v: list[int]) -> list[int]:
        """Restaking days are ISO weekday numbers."""
        invalid = [day for day in v if day < 1 or day > 7]
        if invalid:
            raise ValueError(f"Invalid ISO weekday numbers: {invalid}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise log level names."""
        return v.upper()

    @property
    def default_daily_profit_rate(self) -> Decimal:
        """Nominal daily gross rate, independent of the actual calendar."""
        return self.monthly_gross_profit_rate / self.working_days_per_month


# Global settings instance
settings = CalculatorSettings()


def get_settings() -> CalculatorSettings:
    """
    Get the global settings instance.

    Returns:
        Process-wide CalculatorSettings
    """
    return settings
