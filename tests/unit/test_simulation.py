"""
Tests for the simulation driver.

Covers:
- End date calendar arithmetic and empty ranges
- Chronological completeness of the day sequence
- Balance and aggregation invariants over multi-year runs
- Real profit overrides
- Parameter validation and partner reference handling
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from compound_calculator import (
    CalculatorSettings,
    CompoundCalculator,
    InvalidParameterError,
    PartnerReferenceError,
    SimulationParams,
    get_simulation_start_info,
    is_working_day,
    simulate,
)
from compound_calculator.core.calculator import iter_dates, resolve_params


TOLERANCE = Decimal("1e-9")


def _flatten(yearly):
    return [day for year in yearly for month in year.months for day in month.days]


@pytest.fixture
def full_params(partners) -> dict:
    """Two-year run with partners, deposits and withdrawals."""
    return {
        "initial_stake": Decimal("5000"),
        "duration_years": 2,
        "duration_months": 0,
        "start_date": "2025-01-10",
        "partners": partners,
        "deposits": [
            {"frequency": "monthly", "amount": "200"},
            {"frequency": "yearly", "amount": "1000"},
        ],
        "withdrawals": [
            {"frequency": "quarterly", "percentage": "40"},
            {"frequency": "monthly", "amount": "50"},
        ],
    }


@pytest.fixture
def full_run(calc: CompoundCalculator, full_params: dict):
    """Result of the two-year run."""
    return calc.simulate(full_params)


class TestDateRange:
    """Tests for the simulated date range."""

    def test_single_day(self, calc, base_params) -> None:
        """Zero duration simulates exactly the start date."""
        yearly = calc.simulate(base_params)
        days = _flatten(yearly)

        assert len(days) == 1
        assert days[0].date == date(2025, 3, 3)
        assert not days[0].is_weekend
        assert days[0].profit == Decimal("1000") * Decimal("0.008") * Decimal("0.30")

    def test_negative_duration_is_empty(self, calc, base_params) -> None:
        """End before start yields no days instead of looping."""
        assert calc.simulate({**base_params, "duration_months": -1}) == []

    def test_negative_duration_past_calendar_is_empty(self, calc, base_params) -> None:
        """A negative duration reaching before year 1 is still an empty run."""
        assert calc.simulate({**base_params, "duration_years": -3000}) == []

    def test_duration_past_calendar_raises(self, calc, base_params) -> None:
        """An end date beyond year 9999 is rejected before the run starts."""
        with pytest.raises(InvalidParameterError) as exc_info:
            calc.simulate({**base_params, "duration_years": 9000})
        assert exc_info.value.field == "duration_years"
        assert isinstance(exc_info.value.__cause__, (ValueError, OverflowError))

    def test_end_date_calendar_arithmetic(self, settings) -> None:
        """Years and months are added on the calendar."""
        resolved = resolve_params(
            {"initial_stake": 0, "duration_years": 1, "duration_months": 2,
             "start_date": "2025-01-15"},
            settings,
        )
        assert resolved.end_date == date(2026, 3, 15)

    def test_end_date_clamps_to_month_end(self, settings) -> None:
        """Jan 31 plus one month ends on the last day of February."""
        resolved = resolve_params(
            {"initial_stake": 0, "duration_months": 1, "start_date": "2025-01-31"},
            settings,
        )
        assert resolved.end_date == date(2025, 2, 28)
        assert resolved.day_count == 29

    def test_default_start_date(self, settings) -> None:
        """Missing start date means tomorrow."""
        resolved = resolve_params({"initial_stake": 0}, settings)
        assert resolved.start_date == date.today() + timedelta(days=1)

    def test_iter_dates_inclusive(self) -> None:
        """Both ends are included."""
        dates = list(iter_dates(date(2024, 2, 27), date(2024, 3, 1)))
        assert dates == [
            date(2024, 2, 27),
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]


class TestCompleteness:
    """Tests for chronological completeness."""

    def test_one_day_per_date(self, full_run) -> None:
        """Days are contiguous from start to end, without duplicates."""
        days = _flatten(full_run)
        assert days[0].date == date(2025, 1, 10)
        assert days[-1].date == date(2027, 1, 10)
        assert len(days) == (date(2027, 1, 10) - date(2025, 1, 10)).days + 1

        for previous, current in zip(days, days[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_tree_shape(self, full_run) -> None:
        """Years and months are ordered and hold only their own days."""
        assert [y.year for y in full_run] == [2025, 2026, 2027]
        for year in full_run:
            months = [m.month for m in year.months]
            assert months == sorted(months)
            for month in year.months:
                assert month.year == year.year
                assert all(d.date.year == year.year for d in month.days)
                assert all(d.date.month == month.month for d in month.days)

    def test_stake_continuity(self, full_run) -> None:
        """Each day opens with the previous day's closing stake."""
        days = _flatten(full_run)
        for previous, current in zip(days, days[1:]):
            assert abs(current.stake - previous.new_stake) < TOLERANCE


class TestInvariants:
    """Tests for balance and aggregation invariants."""

    def test_balance_invariant(self, full_run) -> None:
        """stake + profit + commissions + deposit - withdrawal - fee == new_stake."""
        for day in _flatten(full_run):
            lhs = (
                day.stake + day.profit + day.net_commissions + day.deposit
                - day.withdrawal - day.withdrawal_fee
            )
            assert abs(lhs - day.new_stake) < TOLERANCE

    def test_month_aggregation(self, full_run) -> None:
        """Month summaries are sums over their days."""
        for year in full_run:
            for month in year.months:
                summary = month.summary
                assert summary.start_stake == month.days[0].stake
                assert summary.end_stake == month.days[-1].new_stake
                assert summary.total_profit == sum(d.profit for d in month.days)
                assert summary.total_deposits == sum(d.deposit for d in month.days)
                assert summary.total_withdrawals == sum(d.withdrawal for d in month.days)
                assert summary.total_withdrawal_fees == sum(
                    d.withdrawal_fee for d in month.days
                )

                expected: dict[str, Decimal] = {}
                for d in month.days:
                    for pc in d.partner_commissions:
                        expected[pc.partner_id] = (
                            expected.get(pc.partner_id, Decimal("0")) + pc.commission
                        )
                actual = {
                    ps.partner_id: ps.total_commission for ps in summary.partner_summaries
                }
                assert actual == expected

    def test_year_aggregation(self, full_run) -> None:
        """Year summaries are sums over their months."""
        for year in full_run:
            months = [m.summary for m in year.months]
            summary = year.summary
            assert summary.start_stake == months[0].start_stake
            assert summary.end_stake == months[-1].end_stake
            assert summary.total_profit == sum(m.total_profit for m in months)
            assert summary.total_deposits == sum(m.total_deposits for m in months)
            assert summary.total_withdrawals == sum(m.total_withdrawals for m in months)

            expected: dict[str, Decimal] = {}
            for m in months:
                for ps in m.partner_summaries:
                    expected[ps.partner_id] = (
                        expected.get(ps.partner_id, Decimal("0")) + ps.total_commission
                    )
            actual = {ps.partner_id: ps.total_commission for ps in summary.partner_summaries}
            assert actual == expected

    def test_non_working_days_idle(self, full_run) -> None:
        """Every non-working day has no profit and no commissions."""
        for day in _flatten(full_run):
            if not is_working_day(day.date):
                assert day.profit == 0
                assert day.partner_commissions == []

    def test_stake_grows(self, full_run) -> None:
        """Profitable setup ends above its start."""
        assert full_run[-1].summary.end_stake > full_run[0].summary.start_stake


class TestTransactionsOverRun:
    """Tests for scheduled transactions across a run."""

    def test_monthly_deposits_skip_backoffice(self, calc) -> None:
        """Jul 20, 2025 is a vacation day, so only the August deposit lands."""
        yearly = calc.simulate({
            "initial_stake": Decimal("1000"),
            "duration_months": 2,
            "start_date": "2025-06-20",
            "deposits": [{"frequency": "monthly", "amount": "100"}],
        })
        deposit_days = [d.date for d in _flatten(yearly) if d.deposit]
        assert deposit_days == [date(2025, 8, 20)]

    def test_deposit_on_weekend(self, calc) -> None:
        """Mar 1, 2025 is a Saturday; the deposit still lands."""
        yearly = calc.simulate({
            "initial_stake": Decimal("1000"),
            "duration_months": 1,
            "start_date": "2025-02-01",
            "deposits": [{"frequency": "monthly", "amount": "100"}],
        })
        last = _flatten(yearly)[-1]
        assert last.date == date(2025, 3, 1)
        assert last.is_weekend
        assert last.profit == 0
        assert last.deposit == Decimal("100")

    def test_third_withdrawal_in_month(self, calc) -> None:
        """Three plans on one day: fees 1.25, 1.25 and 2.50."""
        plan = {"frequency": "monthly", "amount": "100"}
        yearly = calc.simulate({
            "initial_stake": Decimal("1000"),
            "duration_months": 1,
            "start_date": "2025-03-03",
            "withdrawals": [plan, plan, plan],
        })
        last = _flatten(yearly)[-1]
        assert last.withdrawal == Decimal("300")
        assert last.withdrawal_fee == Decimal("5")


class TestRealProfitData:
    """Tests for real profit overrides."""

    def test_override_applies_to_one_day(self, calc) -> None:
        """Mar 4 uses the override, its neighbours the default rate."""
        yearly = calc.simulate({
            "initialStake": "1000",
            "durationMonths": 1,
            "startDate": "2025-03-03",
            "realProfitData": [{"date": "2025-03-04", "grossProfitRate": "0.02"}],
        })
        days = {d.date: d for d in _flatten(yearly)}

        for day, rate in (
            (date(2025, 3, 3), Decimal("0.008")),
            (date(2025, 3, 4), Decimal("0.02")),
            (date(2025, 3, 5), Decimal("0.008")),
        ):
            result = days[day]
            assert result.profit == result.stake * rate * Decimal("0.30")


class TestValidation:
    """Tests for parameter validation."""

    def test_unparseable_start_date(self, calc) -> None:
        """Invalid dates fail fast."""
        with pytest.raises(InvalidParameterError) as exc_info:
            calc.simulate({"initial_stake": 1000, "start_date": "2025-13-45"})
        assert exc_info.value.field in ("start_date", "startDate")

    def test_legacy_shape_rejected(self, calc) -> None:
        """Unknown keys from the legacy parameter shape are rejected."""
        with pytest.raises(InvalidParameterError):
            calc.simulate({
                "initialStake": 1000,
                "startDate": "2025-01-01",
                "transactions": [],
            })

    def test_negative_initial_stake(self, calc) -> None:
        """Investor stake must not be negative."""
        with pytest.raises(InvalidParameterError):
            calc.simulate({"initial_stake": -1, "start_date": "2025-03-03"})

    def test_invalid_restaking_day(self, calc, base_params) -> None:
        """Restaking days are ISO weekdays."""
        with pytest.raises(InvalidParameterError):
            calc.simulate({**base_params, "restaking_days": [0, 8]})

    def test_is_value_error(self, calc) -> None:
        """Callers catching ValueError still see parameter errors."""
        with pytest.raises(ValueError):
            calc.simulate({"initial_stake": "abc"})

    def test_accepts_model(self, calc) -> None:
        """A SimulationParams instance is used as is."""
        params = SimulationParams(initial_stake=Decimal("1000"), start_date=date(2025, 3, 3))
        assert len(_flatten(calc.simulate(params))) == 1


class TestPartnerReferences:
    """Tests for L2 partners with missing parents."""

    PARAMS = {
        "initial_stake": Decimal("1000"),
        "start_date": "2025-03-03",
        "partners": [
            {"id": "x", "level": "L2", "initial_stake": "2000", "parent_l1_id": "missing"},
        ],
    }

    def test_unknown_parent_becomes_orphan(self, calc, log_messages) -> None:
        """Only the L2 commission reaches the investor."""
        day = _flatten(calc.simulate(self.PARAMS))[0]

        assert [(pc.partner_id, pc.from_partner_id) for pc in day.partner_commissions] == [
            ("x", None),
        ]
        # 2000 * 0.008 * 0.30 * 0.25
        assert day.partner_commissions[0].commission == Decimal("1.2")
        assert any("unknown L1" in m for m in log_messages)

    def test_strict_mode_rejects(self) -> None:
        """Strict settings turn the orphan into an error."""
        strict = CalculatorSettings(_env_file=None, strict_partner_references=True)
        with pytest.raises(PartnerReferenceError):
            simulate(self.PARAMS, strict)


class TestStartInfo:
    """Tests for the effective start date helper."""

    def test_start_in_winter_vacation(self, settings) -> None:
        """Dec 24, 2025 moves to Jan 5, 2026."""
        info = get_simulation_start_info(
            {"initial_stake": 1000, "start_date": "2025-12-24"}, settings
        )
        assert info.requested_start_date == date(2025, 12, 24)
        assert info.effective_start_date == date(2026, 1, 5)
        assert "2026-01-05" in info.notice

    def test_start_outside_vacation(self, settings) -> None:
        """Regular dates stay and carry no notice."""
        info = get_simulation_start_info(
            {"initial_stake": 1000, "start_date": "2026-01-05"}, settings
        )
        assert info.effective_start_date == date(2026, 1, 5)
        assert info.notice is None


class TestIsolation:
    """Tests for state isolation between runs."""

    def test_repeated_runs_identical(self, calc, full_params) -> None:
        """No state leaks from one run into the next."""
        first = calc.simulate(full_params)
        second = calc.simulate(full_params)
        assert first == second
