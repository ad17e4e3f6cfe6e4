"""
Tests for calendar expiries and aggregated position Greeks.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from synth_options.analytics.black_scholes import bs_greeks
from synth_options.analytics.positions import (
    DAYS_PER_JULIAN_YEAR,
    OptionPosition,
    portfolio_greeks,
    position_greeks,
    years_to_expiry,
)
from synth_options.analytics.types import MarketParameters
from synth_options.errors import InvalidInputError

REFERENCE = datetime(2025, 12, 31, 12, 0, 0)


class TestYearsToExpiry:
    def test_julian_year(self):
        assert years_to_expiry(REFERENCE + timedelta(days=365.25), REFERENCE) == pytest.approx(1.0)

    def test_date_string_is_midnight_utc(self):
        T = years_to_expiry("2026-01-01", REFERENCE)
        assert T == pytest.approx(0.5 / DAYS_PER_JULIAN_YEAR)

    def test_date_object(self):
        assert years_to_expiry(date(2026, 1, 7), REFERENCE) == pytest.approx(6.5 / DAYS_PER_JULIAN_YEAR)

    def test_aware_datetimes(self):
        expiry = datetime(2026, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=8)))
        reference = REFERENCE.replace(tzinfo=timezone.utc)
        assert years_to_expiry(expiry, reference) == pytest.approx(12 / 24 / DAYS_PER_JULIAN_YEAR)

    def test_expiry_instant_is_zero(self):
        assert years_to_expiry(REFERENCE, REFERENCE) == 0.0

    def test_past_expiry(self):
        with pytest.raises(InvalidInputError, match="before the reference date"):
            years_to_expiry("2025-12-01", REFERENCE)

    @pytest.mark.parametrize("expiry", ["31/12/2026", "soon", 20261231])
    def test_bad_expiry(self, expiry):
        with pytest.raises(InvalidInputError):
            years_to_expiry(expiry, REFERENCE)

    def test_defaults_to_now(self):
        tomorrow = datetime.now(timezone.utc) + timedelta(days=1)
        assert years_to_expiry(tomorrow) == pytest.approx(1 / DAYS_PER_JULIAN_YEAR, rel=1e-3)


class TestPortfolioGreeks:
    params = MarketParameters(87420, 87000, 7 / 365, 0.05, 0.5)

    def test_position_scales_by_signed_quantity(self):
        unit = bs_greeks(self.params, "call")
        short = position_greeks(OptionPosition(self.params, "call", quantity=2, position="short"))
        assert short.delta == pytest.approx(-2 * unit.delta)
        assert short.gamma == pytest.approx(-2 * unit.gamma)
        assert short.theta == pytest.approx(-2 * unit.theta)

    def test_straddle_sums_legs(self):
        call = bs_greeks(self.params, "call")
        put = bs_greeks(self.params, "put")
        total = portfolio_greeks([
            OptionPosition(self.params, "call"),
            OptionPosition(self.params, "put"),
        ])
        assert total.delta == pytest.approx(call.delta + put.delta)
        assert total.vega == pytest.approx(2 * call.vega)
        assert total.rho == pytest.approx(call.rho + put.rho)

    def test_offsetting_positions_cancel(self):
        total = portfolio_greeks([
            OptionPosition(self.params, "call", quantity=3),
            OptionPosition(self.params, "call", quantity=3, position="short"),
        ])
        for value in (total.delta, total.gamma, total.vega, total.theta, total.rho):
            assert value == pytest.approx(0.0, abs=1e-12)

    def test_empty_portfolio(self):
        total = portfolio_greeks([])
        assert (total.delta, total.gamma, total.vega, total.theta, total.rho) == (0.0,) * 5

    def test_invalid_positions(self):
        with pytest.raises(InvalidInputError):
            OptionPosition(self.params, "call", position="flat")
        with pytest.raises(InvalidInputError):
            OptionPosition(self.params, "call", quantity=float("nan"))
        with pytest.raises(InvalidInputError):
            portfolio_greeks([self.params])
