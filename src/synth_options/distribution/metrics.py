"""
Probability-weighted strategy metrics over an empirical distribution.

Every sample point carries equal weight. For a percentile forecast this
assumes the ranks are roughly evenly spaced; unevenly spaced rank sets
(dense tails, sparse body) bias the means toward the densely sampled
region. Probabilities are counts over a discrete sample, so tail accuracy
is limited by how many points sit in the tails.
"""

import math
from dataclasses import asdict, dataclass

import numpy as np

from synth_options.analytics.black_scholes import norm_cdf
from synth_options.distribution.percentiles import Samples, as_sample_array
from synth_options.distribution.strategy import (
    DEFAULT_BREAKEVEN_RESOLUTION,
    Strategy,
    find_breakevens,
    payoff_at,
    payoff_curve,
    price_grid,
)
from synth_options.errors import InvalidInputError
from synth_options.validation import (
    require_finite,
    require_non_negative,
    require_option_kind,
    require_positive,
)


def _require_samples(samples: Samples) -> np.ndarray:
    values = as_sample_array(samples)
    if values.size == 0:
        raise InvalidInputError("Distribution sample set is empty")
    return values


def probability_itm(samples: Samples, strike: float, option_kind: str) -> float:
    """
    Fraction of sample prices that finish in the money.

    A call counts samples strictly above the strike, a put samples
    strictly below it.
    """
    require_option_kind(option_kind)
    strike = require_positive("strike", strike)
    values = _require_samples(samples)
    if option_kind == "call":
        hits = np.count_nonzero(values > strike)
    else:
        hits = np.count_nonzero(values < strike)
    return hits / values.size


@dataclass(frozen=True)
class ExpectedValueResult:
    """
    Attributes
    ----------
    ev : float
        Mean P&L over all samples
    probability_of_profit : float
        Fraction of samples with P&L > 0
    expected_profit_given_profit : float
        Mean of the strictly positive P&Ls (0 if none)
    expected_loss_given_loss : float
        Mean magnitude of the strictly negative P&Ls (0 if none)
    """

    ev: float
    probability_of_profit: float
    expected_profit_given_profit: float
    expected_loss_given_loss: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def expected_value(strategy: Strategy, samples: Samples) -> ExpectedValueResult:
    """Equal-weight expected P&L of ``strategy`` over the sample."""
    pnl = payoff_curve(strategy, _require_samples(samples))
    profits = pnl[pnl > 0]
    losses = pnl[pnl < 0]
    return ExpectedValueResult(
        ev=float(np.mean(pnl)),
        probability_of_profit=profits.size / pnl.size,
        expected_profit_given_profit=float(np.mean(profits)) if profits.size else 0.0,
        expected_loss_given_loss=float(-np.mean(losses)) if losses.size else 0.0,
    )


def lognormal_probability_of_profit(
    strategy: Strategy,
    spot: float,
    volatility: float,
    time_to_expiry: float,
    risk_free_rate: float,
    price_range: tuple[float, float],
    resolution: int = DEFAULT_BREAKEVEN_RESOLUTION,
) -> float:
    """
    Probability of profit under the Black-Scholes terminal distribution.

    The settlement price is lognormal with drift r - σ²/2. The probability
    mass is split into cells centred on an evenly spaced grid over
    ``price_range`` (the outer cells extend to 0 and infinity) and the cells
    whose grid P&L is positive are summed. With zero time or volatility the
    settlement is the deterministic forward.
    """
    spot = require_positive("spot", spot)
    volatility = require_non_negative("volatility", volatility)
    time_to_expiry = require_non_negative("time_to_expiry", time_to_expiry)
    risk_free_rate = require_finite("risk_free_rate", risk_free_rate)

    if volatility == 0 or time_to_expiry == 0:
        forward = spot * math.exp(risk_free_rate * time_to_expiry)
        return 1.0 if payoff_at(strategy, forward) > 0 else 0.0

    grid = price_grid(price_range, resolution)
    pnl = payoff_curve(strategy, grid)

    mu = math.log(spot) + (risk_free_rate - 0.5 * volatility**2) * time_to_expiry
    scale = volatility * math.sqrt(time_to_expiry)
    boundaries = 0.5 * (grid[:-1] + grid[1:])
    cdf = [0.0]
    cdf.extend(norm_cdf((math.log(b) - mu) / scale) if b > 0 else 0.0 for b in boundaries)
    cdf.append(1.0)
    mass = np.diff(np.array(cdf))
    return float(np.sum(mass[pnl > 0]))


@dataclass(frozen=True)
class StrategyMetrics:
    """
    Summary of a strategy against a forecast distribution.

    ``max_profit`` and ``max_loss`` are taken over the scanned price range,
    so unbounded payoffs are reported at the range edges. ``bs_pop`` is None
    when no Black-Scholes inputs were supplied.
    """

    max_profit: float
    max_loss: float
    breakevens: list[float]
    probability_of_profit: float
    expected_value: float
    expected_profit: float
    expected_loss: float
    risk_reward: float
    synth_pop: float
    bs_pop: float | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def strategy_metrics(
    strategy: Strategy,
    samples: Samples,
    price_range: tuple[float, float],
    *,
    resolution: int = DEFAULT_BREAKEVEN_RESOLUTION,
    spot: float | None = None,
    volatility: float | None = None,
    time_to_expiry: float | None = None,
    risk_free_rate: float = 0.0,
) -> StrategyMetrics:
    """
    Combine payoff scan, breakevens and expected value into one summary.

    When ``spot``, ``volatility`` and ``time_to_expiry`` are all given, the
    Black-Scholes probability of profit is computed alongside the
    distribution-based one.
    """
    ev = expected_value(strategy, samples)
    curve = payoff_curve(strategy, price_grid(price_range, resolution))
    max_profit = float(np.max(curve))
    max_loss = float(np.min(curve))

    if max_loss < 0:
        risk_reward = max(max_profit, 0.0) / -max_loss
    else:
        risk_reward = math.inf

    bs_pop = None
    if spot is not None and volatility is not None and time_to_expiry is not None:
        bs_pop = lognormal_probability_of_profit(
            strategy, spot, volatility, time_to_expiry, risk_free_rate, price_range, resolution
        )

    return StrategyMetrics(
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=find_breakevens(strategy, price_range, resolution),
        probability_of_profit=ev.probability_of_profit,
        expected_value=ev.ev,
        expected_profit=ev.expected_profit_given_profit,
        expected_loss=ev.expected_loss_given_loss,
        risk_reward=risk_reward,
        synth_pop=ev.probability_of_profit,
        bs_pop=bs_pop,
    )
