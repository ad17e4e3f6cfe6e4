"""
Position-level helpers: calendar expiries and aggregated Greeks.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone

from synth_options.analytics.black_scholes import bs_greeks
from synth_options.analytics.types import Greeks, MarketParameters
from synth_options.errors import InvalidInputError
from synth_options.validation import require_finite, require_option_kind, require_position

DAYS_PER_JULIAN_YEAR = 365.25
SECONDS_PER_DAY = 86400.0


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def years_to_expiry(
    expiry: datetime | date | str,
    reference_date: datetime | None = None,
) -> float:
    """Convert an expiry to time in years using 365.25-day years.

    Parameters
    ----------
    expiry : datetime | date | str
        Expiry instant. Dates and ``YYYY-MM-DD`` strings mean midnight UTC;
        naive datetimes are read as UTC.
    reference_date : datetime | None, optional
        Valuation instant. If None, uses the current UTC time.

    Returns
    -------
    float
        Time to expiry in years. Zero at the expiry instant.

    Raises
    ------
    InvalidInputError
        If the expiry cannot be parsed or lies before the reference date.

    Examples
    --------
    >>> from datetime import datetime
    >>> round(years_to_expiry("2026-01-01", datetime(2025, 1, 1)), 6)
    0.999316
    """
    if isinstance(expiry, str):
        try:
            expiry = datetime.strptime(expiry, "%Y-%m-%d")
        except ValueError as e:
            raise InvalidInputError(
                f"Invalid expiry format '{expiry}'. Expected YYYY-MM-DD."
            ) from e
    elif not isinstance(expiry, datetime):
        if not isinstance(expiry, date):
            raise InvalidInputError(f"Expiry must be a date, datetime or string, got {expiry!r}")
        expiry = datetime(expiry.year, expiry.month, expiry.day)

    if reference_date is None:
        reference_date = datetime.now(timezone.utc)

    seconds = (_as_utc(expiry) - _as_utc(reference_date)).total_seconds()
    if seconds < 0:
        raise InvalidInputError(
            f"Expiry {expiry.isoformat()} is before the reference date {reference_date.isoformat()}"
        )
    return seconds / (SECONDS_PER_DAY * DAYS_PER_JULIAN_YEAR)


@dataclass(frozen=True)
class OptionPosition:
    """
    A held option with the market inputs used to value it.

    Attributes
    ----------
    params : MarketParameters
        Black-Scholes inputs of the contract
    option_kind : str
        'call' or 'put'
    quantity : float
        Number of contracts (finite)
    position : str
        'long' or 'short'
    """

    params: MarketParameters
    option_kind: str
    quantity: float = 1.0
    position: str = "long"

    def __post_init__(self) -> None:
        require_option_kind(self.option_kind)
        require_position(self.position)
        object.__setattr__(self, "quantity", require_finite("quantity", self.quantity))

    @property
    def signed_quantity(self) -> float:
        return self.quantity if self.position == "long" else -self.quantity


def position_greeks(position: OptionPosition) -> Greeks:
    """Greeks of one position: per-contract Greeks times the signed quantity."""
    unit = bs_greeks(position.params, position.option_kind)
    size = position.signed_quantity
    return Greeks(
        delta=unit.delta * size,
        gamma=unit.gamma * size,
        vega=unit.vega * size,
        theta=unit.theta * size,
        rho=unit.rho * size,
    )


def portfolio_greeks(positions: Iterable[OptionPosition]) -> Greeks:
    """Sum of the position Greeks. An empty portfolio has all-zero Greeks."""
    delta = gamma = vega = theta = rho = 0.0
    for position in positions:
        if not isinstance(position, OptionPosition):
            raise InvalidInputError(f"Expected OptionPosition, got {type(position).__name__}")
        greeks = position_greeks(position)
        delta += greeks.delta
        gamma += greeks.gamma
        vega += greeks.vega
        theta += greeks.theta
        rho += greeks.rho
    return Greeks(delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)
