"""
Synth vs Black-Scholes comparison.

Prices each strike twice: once as the discounted mean payoff over the
forecast distribution, once with the Black-Scholes formula. The gap
between the two is the edge a dashboard surfaces.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass

import numpy as np

from synth_options.analytics.black_scholes import bs_price, bs_probability_itm
from synth_options.analytics.implied_vol import solve_implied_vol
from synth_options.analytics.types import MarketParameters
from synth_options.distribution.metrics import probability_itm
from synth_options.distribution.percentiles import Samples, as_sample_array
from synth_options.errors import InvalidInputError
from synth_options.validation import (
    require_finite,
    require_non_negative,
    require_option_kind,
    require_positive,
)

DEFAULT_EDGE_THRESHOLD = 0.05
HIGH_VOL_RATIO = 1.2
LOW_VOL_RATIO = 0.8


def synth_price(
    samples: Samples,
    strike: float,
    option_kind: str,
    risk_free_rate: float = 0.0,
    time_to_expiry: float = 0.0,
) -> float:
    """Discounted equal-weight mean payoff of one option over the sample."""
    require_option_kind(option_kind)
    strike = require_positive("strike", strike)
    risk_free_rate = require_finite("risk_free_rate", risk_free_rate)
    time_to_expiry = require_non_negative("time_to_expiry", time_to_expiry)
    values = as_sample_array(samples)
    if values.size == 0:
        raise InvalidInputError("Distribution sample set is empty")

    if option_kind == "call":
        payoffs = np.maximum(values - strike, 0.0)
    else:
        payoffs = np.maximum(strike - values, 0.0)
    return float(np.mean(payoffs)) * math.exp(-risk_free_rate * time_to_expiry)


def recommend(edge_pct: float, threshold: float = DEFAULT_EDGE_THRESHOLD) -> str:
    """'BUY' when the model value beats the price by more than threshold, 'SELL' below it."""
    if edge_pct > threshold:
        return "BUY"
    if edge_pct < -threshold:
        return "SELL"
    return "FAIR"


@dataclass(frozen=True)
class StrikeComparison:
    """
    One option priced both ways.

    Attributes
    ----------
    reference_price : float
        Market price when supplied, otherwise the Black-Scholes price
    edge : float
        synth_price - reference_price
    edge_pct : float
        edge / reference_price (0 when the reference price is 0)
    implied_vol : float | None
        Volatility implied by the market price. None when no price was
        given or the solver did not converge on it.
    implied_vol_converged : bool | None
        Convergence status of the implied volatility solve, None when no
        solve was attempted
    """

    strike: float
    option_kind: str
    synth_price: float
    bs_price: float
    reference_price: float
    synth_prob_itm: float
    bs_prob_itm: float
    edge: float
    edge_pct: float
    implied_vol: float | None
    implied_vol_converged: bool | None
    recommendation: str

    def to_dict(self) -> dict:
        return asdict(self)


def compare_strike(
    samples: Samples,
    params: MarketParameters,
    option_kind: str,
    *,
    market_price: float | None = None,
    edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    iv_options: Mapping[str, float] | None = None,
) -> StrikeComparison:
    """
    Compare the distribution value of one option with its Black-Scholes value.

    Parameters
    ----------
    samples : PercentileDistribution | sequence of float
        Forecast of the settlement price at expiry
    params : MarketParameters
        Black-Scholes inputs for the option
    option_kind : str
        'call' or 'put'
    market_price : float | None
        Quoted price to compare against instead of the Black-Scholes price
    edge_threshold : float
        Relative edge needed for a BUY or SELL recommendation
    iv_options : Mapping | None
        Extra keyword options for the implied volatility solver
    """
    bs_value = bs_price(params, option_kind)
    synth_value = synth_price(
        samples, params.strike, option_kind, params.risk_free_rate, params.time_to_expiry
    )

    implied = converged = None
    if market_price is not None:
        reference = require_non_negative("market_price", market_price)
        if params.time_to_expiry > 0:
            solved = solve_implied_vol(reference, params, option_kind, **(iv_options or {}))
            converged = solved.converged
            implied = solved.sigma if converged else None
    else:
        reference = bs_value

    edge = synth_value - reference
    edge_pct = edge / reference if reference > 0 else 0.0

    return StrikeComparison(
        strike=params.strike,
        option_kind=option_kind,
        synth_price=synth_value,
        bs_price=bs_value,
        reference_price=reference,
        synth_prob_itm=probability_itm(samples, params.strike, option_kind),
        bs_prob_itm=bs_probability_itm(params, option_kind),
        edge=edge,
        edge_pct=edge_pct,
        implied_vol=implied,
        implied_vol_converged=converged,
        recommendation=recommend(edge_pct, edge_threshold),
    )


@dataclass(frozen=True)
class ChainRow:
    strike: float
    call: StrikeComparison
    put: StrikeComparison

    def to_dict(self) -> dict:
        return {"strike": self.strike, "call": self.call.to_dict(), "put": self.put.to_dict()}


def option_chain(
    samples: Samples,
    params: MarketParameters,
    strikes: Iterable[float],
    *,
    market_prices: Mapping[float, tuple[float | None, float | None]] | None = None,
    edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    iv_options: Mapping[str, float] | None = None,
) -> list[ChainRow]:
    """
    Build call and put comparisons for each strike.

    ``params.strike`` is replaced by each strike in turn. ``market_prices``
    maps a strike to its (call, put) quotes; missing quotes fall back to the
    Black-Scholes price.
    """
    quotes = market_prices or {}
    rows = []
    for strike in sorted(strikes):
        strike_params = params.with_strike(strike)
        call_quote, put_quote = quotes.get(strike, (None, None))
        rows.append(
            ChainRow(
                strike=strike_params.strike,
                call=compare_strike(
                    samples, strike_params, "call", market_price=call_quote,
                    edge_threshold=edge_threshold, iv_options=iv_options,
                ),
                put=compare_strike(
                    samples, strike_params, "put", market_price=put_quote,
                    edge_threshold=edge_threshold, iv_options=iv_options,
                ),
            )
        )
    return rows


def vol_regime(forward_vol: float, realized_vol: float) -> str:
    """
    Classify forecast volatility against realized volatility.

    'HIGH' above 1.2x realized, 'LOW' below 0.8x, otherwise 'NORMAL'.
    """
    forward_vol = require_non_negative("forward_vol", forward_vol)
    realized_vol = require_positive("realized_vol", realized_vol)
    ratio = forward_vol / realized_vol
    if ratio > HIGH_VOL_RATIO:
        return "HIGH"
    if ratio < LOW_VOL_RATIO:
        return "LOW"
    return "NORMAL"
