"""
Distribution analytics engine.

Turns an empirical percentile forecast and a strategy definition into
probability-weighted risk and reward metrics, independent of any
parametric pricing model.
"""

from synth_options.distribution.metrics import (
    ExpectedValueResult,
    StrategyMetrics,
    expected_value,
    lognormal_probability_of_profit,
    probability_itm,
    strategy_metrics,
)
from synth_options.distribution.percentiles import (
    PercentileDistribution,
    PercentilePoint,
    as_sample_array,
)
from synth_options.distribution.shape import (
    DistributionAnalysis,
    HistogramBin,
    ShapeProfile,
    analyze_shape,
    classify_shape,
    histogram,
)
from synth_options.distribution.strategy import (
    OptionLeg,
    Strategy,
    find_breakevens,
    iter_breakevens,
    payoff_at,
    payoff_curve,
    price_grid,
)

__all__ = [
    "DistributionAnalysis",
    "ExpectedValueResult",
    "HistogramBin",
    "OptionLeg",
    "PercentileDistribution",
    "PercentilePoint",
    "ShapeProfile",
    "Strategy",
    "StrategyMetrics",
    "analyze_shape",
    "as_sample_array",
    "classify_shape",
    "expected_value",
    "find_breakevens",
    "histogram",
    "iter_breakevens",
    "lognormal_probability_of_profit",
    "payoff_at",
    "payoff_curve",
    "price_grid",
    "probability_itm",
    "strategy_metrics",
]
