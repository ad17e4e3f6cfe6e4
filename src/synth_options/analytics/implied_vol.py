"""
Implied volatility solver for European options.

Uses Newton-Raphson on the Black-Scholes price with the unscaled vega as
the derivative, clamping sigma into a bounded range after every step.
"""

import math

from synth_options.analytics.black_scholes import bs_price, bs_vega_raw
from synth_options.analytics.types import ImpliedVolResult, MarketParameters
from synth_options.errors import InvalidInputError, NumericalNonConvergenceError
from synth_options.logging_config import get_logger
from synth_options.validation import (
    require_int,
    require_non_negative,
    require_option_kind,
    require_positive,
)

logger = get_logger(__name__)

MIN_VEGA = 1e-10


def solve_implied_vol(
    market_price: float,
    params: MarketParameters,
    option_kind: str,
    *,
    initial_guess: float = 0.5,
    tol: float = 1e-6,
    max_iter: int = 100,
    sigma_min: float = 0.001,
    sigma_max: float = 2.0,
) -> ImpliedVolResult:
    """
    Solve for σ such that BS(params with σ, option_kind) = market_price.

    Parameters
    ----------
    market_price : float
        Observed option price (must be >= 0)
    params : MarketParameters
        Market inputs; the volatility field is ignored. Time to expiry must
        be > 0.
    option_kind : str
        'call' or 'put'
    initial_guess : float, optional
        Starting volatility (default: 0.5)
    tol : float, optional
        Absolute price tolerance for convergence (default: 1e-6)
    max_iter : int, optional
        Maximum number of Newton steps (default: 100)
    sigma_min, sigma_max : float, optional
        Bounds sigma is clamped into after each update (default: [0.001, 2.0])

    Returns
    -------
    ImpliedVolResult
        Final sigma with its convergence status. When the solver stops
        early because vega vanished, or runs out of iterations, ``sigma`` is
        the last estimate and ``converged`` is False.
    """
    require_option_kind(option_kind)
    market_price = require_non_negative("market_price", market_price)
    tol = require_positive("tol", tol)
    sigma_min = require_positive("sigma_min", sigma_min)
    sigma_max = require_positive("sigma_max", sigma_max)
    initial_guess = require_positive("initial_guess", initial_guess)
    if sigma_max <= sigma_min:
        raise InvalidInputError("sigma_max must be greater than sigma_min")
    max_iter = require_int("max_iter", max_iter, minimum=1)
    if params.time_to_expiry <= 0:
        raise InvalidInputError("Implied volatility requires time_to_expiry > 0")

    sigma = min(max(initial_guess, sigma_min), sigma_max)
    error = math.inf

    for iteration in range(1, max_iter + 1):
        trial = params.with_volatility(sigma)
        error = bs_price(trial, option_kind) - market_price

        if abs(error) < tol:
            return ImpliedVolResult(sigma, True, iteration, error)

        vega = bs_vega_raw(trial)
        if abs(vega) < MIN_VEGA:
            logger.debug(
                "Vega %.3e below %.0e at sigma=%.6f, stopping Newton iterations",
                vega, MIN_VEGA, sigma,
            )
            return ImpliedVolResult(sigma, False, iteration, error)

        sigma = min(max(sigma - error / vega, sigma_min), sigma_max)

    error = bs_price(params.with_volatility(sigma), option_kind) - market_price
    converged = abs(error) < tol
    if not converged:
        logger.warning(
            "Implied volatility did not converge after %d iterations "
            "(sigma=%.6f, price error=%.6g, target=%.6f)",
            max_iter, sigma, error, market_price,
        )
    return ImpliedVolResult(sigma, converged, max_iter, error)


def implied_vol(
    market_price: float,
    params: MarketParameters,
    option_kind: str,
    *,
    strict: bool = False,
    **solver_options,
) -> float:
    """
    Compute implied volatility as a bare number.

    The result is best effort: without ``strict`` a failed solve still
    returns the last estimate. With ``strict=True`` a failed solve raises
    ``NumericalNonConvergenceError`` carrying the full result.

    Accepts the same keyword options as ``solve_implied_vol``.
    """
    result = solve_implied_vol(market_price, params, option_kind, **solver_options)
    if strict and not result.converged:
        raise NumericalNonConvergenceError(
            f"Implied volatility did not converge after {result.iterations} iterations: "
            f"sigma={result.sigma:.6f}, price error={result.price_error:.6g}",
            result,
        )
    return result.sigma
