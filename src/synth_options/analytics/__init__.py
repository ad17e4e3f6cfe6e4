"""
Pricing engine: Black-Scholes valuation, Greeks and implied volatility.
"""

from synth_options.analytics.black_scholes import (
    DAYS_PER_YEAR,
    VOL_POINT,
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
    norm_pdf,
)
from synth_options.analytics.implied_vol import implied_vol, solve_implied_vol
from synth_options.analytics.positions import (
    DAYS_PER_JULIAN_YEAR,
    OptionPosition,
    portfolio_greeks,
    position_greeks,
    years_to_expiry,
)
from synth_options.analytics.types import (
    Greeks,
    ImpliedVolResult,
    MarketParameters,
    OptionKind,
)

__all__ = [
    "DAYS_PER_JULIAN_YEAR",
    "DAYS_PER_YEAR",
    "VOL_POINT",
    "Greeks",
    "ImpliedVolResult",
    "MarketParameters",
    "OptionKind",
    "OptionPosition",
    "bs_delta",
    "bs_gamma",
    "bs_greeks",
    "bs_price",
    "bs_probability_itm",
    "bs_rho",
    "bs_theta",
    "bs_vega",
    "bs_vega_raw",
    "implied_vol",
    "norm_cdf",
    "norm_cdf_approx",
    "norm_pdf",
    "portfolio_greeks",
    "position_greeks",
    "solve_implied_vol",
    "years_to_expiry",
]
