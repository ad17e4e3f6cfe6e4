"""
Parameter and result types for the pricing engine.
"""

from dataclasses import dataclass, replace
from typing import Literal

from synth_options.validation import (
    require_finite,
    require_non_negative,
    require_positive,
)

OptionKind = Literal["call", "put"]


@dataclass(frozen=True)
class MarketParameters:
    """
    Inputs of a Black-Scholes valuation.

    Attributes
    ----------
    spot : float
        Current price of the underlying (must be > 0)
    strike : float
        Strike price (must be > 0)
    time_to_expiry : float
        Time to expiry in years (must be >= 0; 0 is the expiry instant)
    risk_free_rate : float
        Annualized continuously compounded risk-free rate
    volatility : float
        Annualized volatility as a fraction (must be >= 0)
    """

    spot: float
    strike: float
    time_to_expiry: float
    risk_free_rate: float
    volatility: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "spot", require_positive("spot", self.spot))
        object.__setattr__(self, "strike", require_positive("strike", self.strike))
        object.__setattr__(
            self, "time_to_expiry", require_non_negative("time_to_expiry", self.time_to_expiry)
        )
        object.__setattr__(
            self, "risk_free_rate", require_finite("risk_free_rate", self.risk_free_rate)
        )
        object.__setattr__(self, "volatility", require_non_negative("volatility", self.volatility))

    def with_volatility(self, volatility: float) -> "MarketParameters":
        """Return a copy of these parameters with a different volatility."""
        return replace(self, volatility=volatility)

    def with_strike(self, strike: float) -> "MarketParameters":
        """Return a copy of these parameters with a different strike."""
        return replace(self, strike=strike)

    @property
    def moneyness(self) -> float:
        """Spot over strike."""
        return self.spot / self.strike


@dataclass(frozen=True)
class Greeks:
    """
    Black-Scholes sensitivities of one option.

    Attributes
    ----------
    delta : float
        dV/dS
    gamma : float
        d²V/dS²
    vega : float
        Price change for a 1 percentage point rise in volatility
    theta : float
        Price change per calendar day (usually negative)
    rho : float
        Price change for a 1 percentage point rise in the rate
    """

    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float

    def __repr__(self) -> str:
        return (
            f"Greeks(delta={self.delta:.6f}, gamma={self.gamma:.6f}, "
            f"vega={self.vega:.6f}, theta={self.theta:.6f}, rho={self.rho:.6f})"
        )


@dataclass(frozen=True)
class ImpliedVolResult:
    """
    Outcome of an implied volatility solve.

    Attributes
    ----------
    sigma : float
        Final volatility estimate
    converged : bool
        True when the price error fell below the tolerance
    iterations : int
        Number of Newton steps evaluated
    price_error : float
        Model price at ``sigma`` minus the target price
    """

    sigma: float
    converged: bool
    iterations: int
    price_error: float
