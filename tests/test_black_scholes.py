"""
Tests for Black-Scholes pricing and Greeks.
"""

import math

import pytest

from synth_options.analytics.black_scholes import (
    bs_delta,
    bs_gamma,
    bs_greeks,
    bs_price,
    bs_probability_itm,
    bs_rho,
    bs_theta,
    bs_vega,
    bs_vega_raw,
    norm_cdf,
    norm_cdf_approx,
)
from synth_options.analytics.types import MarketParameters
from synth_options.errors import InvalidInputError

from .utils.black_scholes import black_scholes_call, black_scholes_put, finite_difference

CASES = [
    (100, 100, 1.0, 0.05, 0.20),  # ATM
    (100, 90, 1.0, 0.05, 0.25),  # ITM call
    (100, 110, 0.5, 0.03, 0.30),  # OTM call
    (87420, 87000, 7 / 365, 0.05, 0.50),  # short-dated crypto
    (50, 80, 2.0, 0.01, 0.80),  # deep OTM, long dated
    (150, 100, 0.1, -0.01, 0.15),  # negative rate
]


def make(S, K, T, r, sigma):
    return MarketParameters(spot=S, strike=K, time_to_expiry=T, risk_free_rate=r, volatility=sigma)


class TestPricing:
    """Closed-form prices, parity and boundary behaviour."""

    @pytest.mark.parametrize("S,K,T,r,sigma", CASES)
    def test_put_call_parity(self, S, K, T, r, sigma):
        params = make(S, K, T, r, sigma)
        call = bs_price(params, "call")
        put = bs_price(params, "put")
        assert abs((call - put) - (S - K * math.exp(-r * T))) < 1e-6

    @pytest.mark.parametrize("S,K,T,r,sigma", CASES)
    def test_matches_reference_formula(self, S, K, T, r, sigma):
        params = make(S, K, T, r, sigma)
        assert bs_price(params, "call") == pytest.approx(black_scholes_call(S, K, r, sigma, T), abs=1e-9)
        assert bs_price(params, "put") == pytest.approx(black_scholes_put(S, K, r, sigma, T), abs=1e-9)

    def test_textbook_value(self):
        """S=K=100, T=1, r=5%, σ=20% call is 10.4506."""
        assert bs_price(make(100, 100, 1.0, 0.05, 0.2), "call") == pytest.approx(10.4506, abs=1e-4)

    @pytest.mark.parametrize("S,K", [(110, 100), (90, 100), (100, 100)])
    def test_expiry_returns_intrinsic(self, S, K):
        params = make(S, K, 0.0, 0.05, 0.3)
        assert bs_price(params, "call") == max(S - K, 0.0)
        assert bs_price(params, "put") == max(K - S, 0.0)

    @pytest.mark.parametrize("S,K", [(110, 100), (90, 100), (100, 100)])
    def test_converges_to_intrinsic_as_time_vanishes(self, S, K):
        params = make(S, K, 1e-10, 0.05, 0.3)
        assert bs_price(params, "call") == pytest.approx(max(S - K, 0.0), abs=1e-3)
        assert bs_price(params, "put") == pytest.approx(max(K - S, 0.0), abs=1e-3)

    def test_zero_volatility_prices_discounted_forward(self):
        params = make(100, 100, 1.0, 0.05, 0.0)
        expected = (100 * math.exp(0.05) - 100) * math.exp(-0.05)
        assert bs_price(params, "call") == pytest.approx(expected)
        assert bs_price(params, "put") == 0.0

    def test_price_increases_with_volatility(self):
        prices = [bs_price(make(100, 100, 1.0, 0.05, s), "call") for s in (0.1, 0.2, 0.4, 0.8)]
        assert prices == sorted(prices)

    def test_end_to_end_btc_call_between_intrinsic_and_spot(self):
        params = make(87420, 87000, 7 / 365, 0.05, 0.50)
        call = bs_price(params, "call")
        assert 420 < call < 87420


class TestNormalCdf:
    def test_rational_approximation_error_bound(self):
        for i in range(-800, 801):
            x = i / 100
            assert abs(norm_cdf_approx(x) - norm_cdf(x)) < 1.5e-7

    def test_symmetry(self):
        for x in (0.1, 0.5, 1.0, 2.5):
            assert norm_cdf(x) + norm_cdf(-x) == pytest.approx(1.0)
        assert norm_cdf(0.0) == 0.5


class TestGreeks:
    """Greeks values, bounds and scaling convention."""

    @pytest.mark.parametrize("S,K,T,r,sigma", CASES)
    def test_delta_bounds(self, S, K, T, r, sigma):
        params = make(S, K, T, r, sigma)
        assert 0.0 <= bs_delta(params, "call") <= 1.0
        assert -1.0 <= bs_delta(params, "put") <= 0.0
        assert bs_delta(params, "call") - bs_delta(params, "put") == pytest.approx(1.0)

    @pytest.mark.parametrize("S,K,call_delta,put_delta", [
        (110, 100, 1.0, 0.0),
        (90, 100, 0.0, -1.0),
        (100, 100, 0.0, 0.0),  # strict comparison at the money
    ])
    def test_delta_at_expiry(self, S, K, call_delta, put_delta):
        params = make(S, K, 0.0, 0.05, 0.3)
        assert bs_delta(params, "call") == call_delta
        assert bs_delta(params, "put") == put_delta

    def test_gamma_and_vega_vanish_at_expiry(self):
        params = make(100, 100, 0.0, 0.05, 0.3)
        assert bs_gamma(params) == 0.0
        assert bs_vega(params) == 0.0
        assert bs_theta(params, "call") == 0.0
        assert bs_rho(params, "put") == 0.0

    @pytest.mark.parametrize("S,K,T,r,sigma", CASES)
    def test_gamma_and_vega_non_negative(self, S, K, T, r, sigma):
        params = make(S, K, T, r, sigma)
        assert bs_gamma(params) >= 0.0
        assert bs_vega(params) >= 0.0

    @pytest.mark.parametrize("S,K,T,r,sigma", CASES[:3])
    def test_delta_and_gamma_match_finite_difference(self, S, K, T, r, sigma):
        h = 1e-3 * S
        price = lambda s: bs_price(make(s, K, T, r, sigma), "call")  # noqa: E731
        delta = lambda s: bs_delta(make(s, K, T, r, sigma), "call")  # noqa: E731
        params = make(S, K, T, r, sigma)
        assert bs_delta(params, "call") == pytest.approx(finite_difference(price, S, h), rel=1e-5)
        assert bs_gamma(params) == pytest.approx(finite_difference(delta, S, h), rel=1e-4)

    @pytest.mark.parametrize("option_kind", ["call", "put"])
    def test_vega_is_per_vol_point(self, option_kind):
        S, K, T, r, sigma = 100, 105, 0.75, 0.03, 0.25
        params = make(S, K, T, r, sigma)
        price = lambda s: bs_price(make(S, K, T, r, s), option_kind)  # noqa: E731
        assert bs_vega(params) == pytest.approx(0.01 * finite_difference(price, sigma, 1e-5), rel=1e-5)
        assert bs_vega(params) == pytest.approx(bs_vega_raw(params) / 100)

    @pytest.mark.parametrize("option_kind", ["call", "put"])
    def test_rho_is_per_rate_point(self, option_kind):
        S, K, T, r, sigma = 100, 95, 1.5, 0.04, 0.3
        price = lambda x: bs_price(make(S, K, T, x, sigma), option_kind)  # noqa: E731
        expected = 0.01 * finite_difference(price, r, 1e-6)
        assert bs_rho(make(S, K, T, r, sigma), option_kind) == pytest.approx(expected, rel=1e-5)

    @pytest.mark.parametrize("option_kind", ["call", "put"])
    def test_theta_is_per_calendar_day(self, option_kind):
        S, K, T, r, sigma = 100, 100, 0.5, 0.05, 0.2
        price = lambda t: bs_price(make(S, K, t, r, sigma), option_kind)  # noqa: E731
        expected = -finite_difference(price, T, 1e-6) / 365
        assert bs_theta(make(S, K, T, r, sigma), option_kind) == pytest.approx(expected, rel=1e-5)

    def test_zero_volatility_theta_matches_time_limit(self):
        """Carry-only theta agrees with a tiny-volatility price."""
        S, K, T, r = 110, 100, 1.0, 0.05
        expected = bs_theta(make(S, K, T, r, 1e-6), "call")
        assert bs_theta(make(S, K, T, r, 0.0), "call") == pytest.approx(expected, rel=1e-6)

    def test_long_call_theta_negative(self):
        assert bs_theta(make(100, 100, 0.5, 0.05, 0.2), "call") < 0

    def test_greeks_bundle_consistent(self):
        params = make(87420, 87000, 7 / 365, 0.05, 0.5)
        greeks = bs_greeks(params, "put")
        assert greeks.delta == bs_delta(params, "put")
        assert greeks.gamma == bs_gamma(params)
        assert greeks.vega == bs_vega(params)
        assert greeks.theta == bs_theta(params, "put")
        assert greeks.rho == bs_rho(params, "put")


class TestProbabilityItm:
    def test_call_and_put_sum_to_one(self):
        params = make(100, 105, 0.5, 0.02, 0.3)
        assert bs_probability_itm(params, "call") + bs_probability_itm(params, "put") == pytest.approx(1.0)

    def test_expiry_is_deterministic(self):
        params = make(100, 105, 0.0, 0.02, 0.3)
        assert bs_probability_itm(params, "call") == 0.0
        assert bs_probability_itm(params, "put") == 1.0


class TestInputValidation:
    """Malformed inputs fail fast with InvalidInputError."""

    @pytest.mark.parametrize("kwargs", [
        {"spot": 0},
        {"spot": -100},
        {"strike": 0},
        {"time_to_expiry": -0.1},
        {"volatility": -0.2},
        {"spot": float("nan")},
        {"risk_free_rate": float("inf")},
        {"volatility": "high"},
    ])
    def test_rejects_bad_parameters(self, kwargs):
        values = dict(spot=100, strike=100, time_to_expiry=1.0, risk_free_rate=0.05, volatility=0.2)
        values.update(kwargs)
        with pytest.raises(InvalidInputError):
            MarketParameters(**values)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            MarketParameters(spot=-1, strike=100, time_to_expiry=1, risk_free_rate=0, volatility=0.2)

    def test_rejects_unknown_option_kind(self):
        with pytest.raises(InvalidInputError, match="option_kind"):
            bs_price(make(100, 100, 1.0, 0.05, 0.2), "straddle")
