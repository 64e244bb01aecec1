"""Pydantic models for the compound calculator."""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from compound_calculator.constants import Frequency, PartnerLevel


class Partner(BaseModel):
    """Referral partner with its own restaking stake.

    L2 partners may point at the L1 partner that referred them.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., min_length=1, description="Partner identifier")
    name: str = Field(default="", description="Display name")
    level: PartnerLevel = Field(..., description="Referral level (L1 or L2)")
    initial_stake: Decimal = Field(default=Decimal("0"), description="Partner's own stake")
    parent_l1_id: str | None = Field(
        default=None, description="L1 partner that referred this L2 partner"
    )


class TransactionPlan(BaseModel):
    """Scheduled deposit or withdrawal.

    Either a fixed ``amount`` or a ``percentage`` of the estimated monthly
    profit (percent units, 50 = 50%). The percentage wins when both are set.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    frequency: Frequency = Field(..., description="monthly, quarterly or yearly")
    amount: Decimal | None = Field(default=None, ge=0, description="Fixed amount")
    percentage: Decimal | None = Field(
        default=None, ge=0, description="Percent of estimated monthly profit"
    )


class RealProfitRecord(BaseModel):
    """Realised daily gross profit rate for one calendar date."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    date: datetime.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    gross_profit_rate: Decimal = Field(
        ..., ge=0, description="Daily gross profit rate, e.g. 0.008 for 0.8%"
    )


class SimulationParams(BaseModel):
    """Complete input of one simulation run."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    initial_stake: Decimal | None = Field(
        default=None, ge=0, description="Investor's starting stake (default 200)"
    )
    duration_years: int = Field(default=0, description="Whole years to simulate")
    duration_months: int = Field(default=0, description="Additional months to simulate")
    start_date: datetime.date | None = Field(default=None, description="First simulated day")
    partners: list[Partner] = Field(default_factory=list)
    deposits: list[TransactionPlan] = Field(default_factory=list)
    withdrawals: list[TransactionPlan] = Field(default_factory=list)
    real_profit_data: list[RealProfitRecord] | None = Field(default=None)
    restaking_days: list[int] | None = Field(
        default=None, description="ISO weekdays with restaking (1 = Monday)"
    )

    @field_validator("restaking_days")
    @classmethod
    def validate_restaking_days(cls, v: list[int] | None) -> list[int] | None:
        """Restaking days are ISO weekday numbers."""
        if v is not None:
            invalid = [day for day in v if day < 1 or day > 7]
            if invalid:
                raise ValueError(f"Invalid ISO weekday numbers: {invalid}")
        return v


class PartnerCommission(BaseModel):
    """Commission generated by one partner on one day."""

    model_config = ConfigDict(frozen=True)

    partner_id: str
    partner_name: str
    level: PartnerLevel
    commission: Decimal
    from_partner_id: str | None = Field(
        default=None, description="Originating L2 for L1 fan-out commissions"
    )

    @property
    def credited_to_investor(self) -> bool:
        """Fan-out commissions go to the L1 partner, everything else to the investor."""
        return self.from_partner_id is None


class DailyResult(BaseModel):
    """State change of a single calendar day."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    stake: Decimal = Field(..., description="Stake at start of day")
    profit: Decimal = Field(default=Decimal("0"), description="Investor's net profit")
    partner_commissions: list[PartnerCommission] = Field(default_factory=list)
    deposit: Decimal = Field(default=Decimal("0"))
    withdrawal: Decimal = Field(default=Decimal("0"))
    withdrawal_fee: Decimal = Field(default=Decimal("0"))
    new_stake: Decimal = Field(..., description="Stake at end of day")
    is_weekend: bool = False
    is_vacation: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_commissions(self) -> Decimal:
        """Commissions credited to the investor's stake."""
        return sum(
            (pc.commission for pc in self.partner_commissions if pc.credited_to_investor),
            Decimal("0"),
        )


class PartnerSummary(BaseModel):
    """Commission total of one partner over a period."""

    model_config = ConfigDict(frozen=True)

    partner_id: str
    partner_name: str
    level: PartnerLevel
    total_commission: Decimal


class PeriodSummary(BaseModel):
    """Aggregated figures of a month or a year."""

    model_config = ConfigDict(frozen=True)

    start_stake: Decimal
    end_stake: Decimal
    total_profit: Decimal
    total_deposits: Decimal
    total_withdrawals: Decimal
    total_withdrawal_fees: Decimal
    partner_summaries: list[PartnerSummary] = Field(default_factory=list)


class MonthlyResult(BaseModel):
    """Days of one calendar month with their summary."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(..., ge=1, le=12)
    days: list[DailyResult]
    summary: PeriodSummary


class YearlyResult(BaseModel):
    """Months of one calendar year with their summary."""

    model_config = ConfigDict(frozen=True)

    year: int
    months: list[MonthlyResult]
    summary: PeriodSummary
