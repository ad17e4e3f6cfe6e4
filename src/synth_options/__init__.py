"""
Synth Options analytics

Black-Scholes pricing, Greeks and implied volatility alongside
probability-weighted analytics over empirical percentile forecasts.
"""

from synth_options._version import __version__

# Pricing engine
from synth_options.analytics import (
    Greeks,
    ImpliedVolResult,
    MarketParameters,
    OptionPosition,
    bs_greeks,
    bs_price,
    bs_probability_itm,
    implied_vol,
    portfolio_greeks,
    solve_implied_vol,
    years_to_expiry,
)
from synth_options.comparison import StrikeComparison, compare_strike, option_chain, vol_regime
from synth_options.config import AnalyticsConfig, load_config

# Distribution analytics engine
from synth_options.distribution import (
    DistributionAnalysis,
    ExpectedValueResult,
    OptionLeg,
    PercentileDistribution,
    Strategy,
    StrategyMetrics,
    analyze_shape,
    expected_value,
    find_breakevens,
    payoff_at,
    payoff_curve,
    probability_itm,
    strategy_metrics,
)
from synth_options.errors import (
    AnalyticsError,
    DegenerateDistributionError,
    InvalidInputError,
    NumericalNonConvergenceError,
)

__all__ = [
    # Version
    "__version__",
    # Pricing engine
    "Greeks",
    "ImpliedVolResult",
    "MarketParameters",
    "OptionPosition",
    "bs_greeks",
    "bs_price",
    "bs_probability_itm",
    "implied_vol",
    "portfolio_greeks",
    "solve_implied_vol",
    "years_to_expiry",
    # Distribution analytics
    "DistributionAnalysis",
    "ExpectedValueResult",
    "OptionLeg",
    "PercentileDistribution",
    "Strategy",
    "StrategyMetrics",
    "analyze_shape",
    "expected_value",
    "find_breakevens",
    "payoff_at",
    "payoff_curve",
    "probability_itm",
    "strategy_metrics",
    # Comparison
    "StrikeComparison",
    "compare_strike",
    "option_chain",
    "vol_regime",
    # Config and errors
    "AnalyticsConfig",
    "load_config",
    "AnalyticsError",
    "DegenerateDistributionError",
    "InvalidInputError",
    "NumericalNonConvergenceError",
]
