"""
Multi-leg option strategies and their payoff at expiry.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

import numpy as np

from synth_options.errors import InvalidInputError
from synth_options.validation import (
    require_non_negative,
    require_option_kind,
    require_position,
    require_positive,
)

Position = Literal["long", "short"]

DEFAULT_BREAKEVEN_RESOLUTION = 200


@dataclass(frozen=True)
class OptionLeg:
    """
    One leg of a strategy.

    Quantity is always positive; direction is carried by ``position``.

    Attributes
    ----------
    option_kind : str
        'call' or 'put'
    strike : float
        Strike price (must be > 0)
    quantity : float
        Number of contracts (must be > 0)
    position : str
        'long' (bought) or 'short' (sold)
    entry_price : float
        Premium paid or received per contract (must be >= 0)
    """

    option_kind: str
    strike: float
    quantity: float = 1.0
    position: Position = "long"
    entry_price: float = 0.0

    def __post_init__(self) -> None:
        require_option_kind(self.option_kind)
        require_position(self.position)
        object.__setattr__(self, "strike", require_positive("strike", self.strike))
        object.__setattr__(self, "quantity", require_positive("quantity", self.quantity))
        object.__setattr__(
            self, "entry_price", require_non_negative("entry_price", self.entry_price)
        )

    @property
    def sign(self) -> int:
        """+1 for long legs, -1 for short legs."""
        return 1 if self.position == "long" else -1

    def intrinsic(self, price: float) -> float:
        if self.option_kind == "call":
            return max(price - self.strike, 0.0)
        return max(self.strike - price, 0.0)

    def pnl_at(self, price: float) -> float:
        """P&L of this leg if the underlying settles at ``price``."""
        return self.sign * self.quantity * (self.intrinsic(price) - self.entry_price)

    def to_dict(self) -> dict[str, Any]:
        return {
            "option_kind": self.option_kind,
            "strike": self.strike,
            "quantity": self.quantity,
            "position": self.position,
            "entry_price": self.entry_price,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OptionLeg":
        try:
            return cls(
                option_kind=data["option_kind"],
                strike=data["strike"],
                quantity=data.get("quantity", 1.0),
                position=data.get("position", "long"),
                entry_price=data.get("entry_price", 0.0),
            )
        except KeyError as e:
            raise InvalidInputError(f"Option leg is missing field {e}") from e


@dataclass(frozen=True)
class Strategy:
    """
    Ordered, immutable collection of option legs.

    Leg order only matters for display; payoffs are sums over legs.
    """

    legs: tuple[OptionLeg, ...]
    name: str = field(default="")

    def __post_init__(self) -> None:
        legs = tuple(self.legs)
        if not legs:
            raise InvalidInputError("A strategy needs at least one leg")
        for leg in legs:
            if not isinstance(leg, OptionLeg):
                raise InvalidInputError(f"Strategy legs must be OptionLeg instances, got {leg!r}")
        object.__setattr__(self, "legs", legs)

    @property
    def strikes(self) -> list[float]:
        """Distinct strikes in ascending order."""
        return sorted({leg.strike for leg in self.legs})

    @property
    def net_premium(self) -> float:
        """Premium paid at entry (positive for a net debit, negative for a credit)."""
        return sum(leg.sign * leg.quantity * leg.entry_price for leg in self.legs)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "legs": [leg.to_dict() for leg in self.legs]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Strategy":
        legs = data.get("legs")
        if not isinstance(legs, Sequence) or isinstance(legs, str):
            raise InvalidInputError("Strategy requires a 'legs' list")
        return cls(tuple(OptionLeg.from_dict(leg) for leg in legs), name=data.get("name", ""))

    def __len__(self) -> int:
        return len(self.legs)

    def __iter__(self) -> Iterator[OptionLeg]:
        return iter(self.legs)


def payoff_at(strategy: Strategy, price_at_expiry: float) -> float:
    """
    Total P&L of ``strategy`` if the underlying settles at ``price_at_expiry``.

    Each leg contributes sign * quantity * (intrinsic - entry_price).
    """
    price = require_non_negative("price_at_expiry", price_at_expiry)
    return sum(leg.pnl_at(price) for leg in strategy.legs)


def payoff_curve(strategy: Strategy, prices: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Vectorised ``payoff_at`` over an array of settlement prices.

    Parameters
    ----------
    strategy : Strategy
        Strategy to evaluate
    prices : array-like
        Settlement prices (finite, >= 0)

    Returns
    -------
    np.ndarray
        P&L at each price, same shape as ``prices``
    """
    grid = np.asarray(prices, dtype=float)
    if not np.all(np.isfinite(grid)) or np.any(grid < 0):
        raise InvalidInputError("Settlement prices must be finite and non-negative")

    total = np.zeros_like(grid)
    for leg in strategy.legs:
        if leg.option_kind == "call":
            intrinsic = np.maximum(grid - leg.strike, 0.0)
        else:
            intrinsic = np.maximum(leg.strike - grid, 0.0)
        total += leg.sign * leg.quantity * (intrinsic - leg.entry_price)
    return total


def price_grid(
    price_range: tuple[float, float], resolution: int = DEFAULT_BREAKEVEN_RESOLUTION
) -> np.ndarray:
    """Evenly spaced settlement prices covering ``price_range`` inclusive."""
    low, high = price_range
    low = require_non_negative("price range low", low)
    high = require_positive("price range high", high)
    if high <= low:
        raise InvalidInputError(f"Price range must be increasing, got [{low}, {high}]")
    if int(resolution) != resolution or resolution < 2:
        raise InvalidInputError(f"Resolution must be an integer >= 2, got {resolution}")
    return np.linspace(low, high, int(resolution))


def iter_breakevens(
    strategy: Strategy,
    price_range: tuple[float, float],
    resolution: int = DEFAULT_BREAKEVEN_RESOLUTION,
) -> Iterator[float]:
    """
    Lazily yield the prices where the strategy P&L crosses zero.

    The range is sampled at ``resolution`` evenly spaced prices. A breakeven
    is reported wherever the P&L changes strict sign between consecutive
    non-zero evaluations, located by linear interpolation between the two
    grid points. When the P&L lands exactly on zero at a grid point between
    the sign change, that grid point is reported instead. A lone zero on the
    first or last grid point counts as a breakeven at that end of the range.
    Flat zero stretches that do not change sign are not breakevens.
    """
    grid = price_grid(price_range, resolution)
    pnl = payoff_curve(strategy, grid)

    last_price = last_pnl = None
    first_zero = None
    zero_run = 0
    for price, value in zip(grid.tolist(), pnl.tolist()):
        if value == 0.0:
            if first_zero is None:
                first_zero = price
            zero_run += 1
            continue
        if last_pnl is None:
            if zero_run == 1:
                yield first_zero
        elif (last_pnl < 0) != (value < 0):
            if first_zero is not None:
                yield first_zero
            else:
                yield last_price + (price - last_price) * (-last_pnl) / (value - last_pnl)
        last_price, last_pnl = price, value
        first_zero = None
        zero_run = 0

    # range closes on a lone zero
    if zero_run == 1 and last_pnl is not None:
        yield first_zero


def find_breakevens(
    strategy: Strategy,
    price_range: tuple[float, float],
    resolution: int = DEFAULT_BREAKEVEN_RESOLUTION,
) -> list[float]:
    """
    Ascending list of breakeven prices inside ``price_range``.

    See ``iter_breakevens`` for how crossings are detected.
    """
    return list(iter_breakevens(strategy, price_range, resolution))


def combine(strategies: Iterable[Strategy], name: str = "") -> Strategy:
    """Concatenate the legs of several strategies into one."""
    legs = tuple(leg for strategy in strategies for leg in strategy.legs)
    return Strategy(legs, name=name)
