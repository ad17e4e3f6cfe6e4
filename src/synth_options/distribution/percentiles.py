"""
Empirical percentile forecasts of an asset price at a fixed horizon.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from synth_options.errors import InvalidInputError
from synth_options.validation import require_finite, require_positive

DEFAULT_REQUIRED_RANKS = (5.0, 50.0, 95.0)


@dataclass(frozen=True)
class PercentilePoint:
    """One (percentile rank, price) pair of a forecast."""

    rank: float
    value: float


class PercentileDistribution:
    """
    Ordered sequence of (rank, value) pairs.

    Ranks lie strictly inside (0, 100) and strictly increase; values are
    positive prices that never decrease with rank. At least two points are
    required. Instances are immutable.

    Parameters
    ----------
    points : Iterable[PercentilePoint | tuple[float, float]]
        Points in ascending rank order
    """

    def __init__(self, points: Iterable[PercentilePoint | tuple[float, float]]):
        parsed = []
        for point in points:
            rank, value = (point.rank, point.value) if isinstance(point, PercentilePoint) else point
            rank = require_finite("percentile rank", rank)
            if not 0.0 < rank < 100.0:
                raise InvalidInputError(f"Percentile rank must lie in (0, 100), got {rank}")
            parsed.append(PercentilePoint(rank, require_positive(f"value at rank {rank:g}", value)))

        if len(parsed) < 2:
            raise InvalidInputError(
                f"A percentile distribution needs at least 2 points, got {len(parsed)}"
            )

        for prev, curr in zip(parsed, parsed[1:]):
            if curr.rank <= prev.rank:
                raise InvalidInputError(
                    f"Percentile ranks must be strictly increasing: {prev.rank:g} then {curr.rank:g}"
                )
            if curr.value < prev.value:
                raise InvalidInputError(
                    f"Percentile values must not decrease with rank: "
                    f"p{prev.rank:g}={prev.value:g} > p{curr.rank:g}={curr.value:g}"
                )

        self._points = tuple(parsed)
        self._ranks = np.array([p.rank for p in parsed], dtype=float)
        self._values = np.array([p.value for p in parsed], dtype=float)
        self._ranks.flags.writeable = False
        self._values.flags.writeable = False

    @classmethod
    def from_mapping(cls, percentiles: Mapping[str | float, float]) -> "PercentileDistribution":
        """
        Build a distribution from a provider mapping such as ``{"5": 81900, "50": 87200}``.

        Keys may be numeric strings or numbers and come in any order.
        """
        try:
            pairs = [(float(rank), value) for rank, value in percentiles.items()]
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Percentile keys must be numeric: {e}") from e
        return cls(sorted(pairs, key=lambda pair: pair[0]))

    @classmethod
    def from_records(cls, records: Sequence[Mapping[str, float]]) -> "PercentileDistribution":
        """Build a distribution from ``[{"percentile": 5, "value": 81900}, ...]``."""
        try:
            pairs = [(float(r["percentile"]), r["value"]) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed percentile record: {e}") from e
        return cls(sorted(pairs, key=lambda pair: pair[0]))

    @property
    def points(self) -> tuple[PercentilePoint, ...]:
        return self._points

    @property
    def ranks(self) -> np.ndarray:
        """Read-only array of percentile ranks."""
        return self._ranks

    @property
    def values(self) -> np.ndarray:
        """Read-only array of prices in rank order."""
        return self._values

    @property
    def median(self) -> float:
        """The 50th percentile, interpolated when it is not sampled."""
        return self.value_at(50.0)

    def value_at(self, rank: float) -> float:
        """
        Price at ``rank``, linearly interpolated between sampled ranks.

        Raises
        ------
        InvalidInputError
            If ``rank`` lies outside the sampled rank range.
        """
        rank = require_finite("rank", rank)
        if rank < self._ranks[0] or rank > self._ranks[-1]:
            raise InvalidInputError(
                f"Rank {rank:g} is outside the sampled range "
                f"[{self._ranks[0]:g}, {self._ranks[-1]:g}]"
            )
        return float(np.interp(rank, self._ranks, self._values))

    def has_rank(self, rank: float) -> bool:
        return bool(np.any(self._ranks == float(rank)))

    def require_ranks(self, ranks: Iterable[float] = DEFAULT_REQUIRED_RANKS) -> "PercentileDistribution":
        """
        Check that every rank in ``ranks`` is sampled exactly.

        Returns self so the check can be chained at an input boundary.
        """
        missing = [float(r) for r in ranks if not self.has_rank(r)]
        if missing:
            listed = ", ".join(f"p{r:g}" for r in missing)
            raise InvalidInputError(f"Percentile distribution is missing required ranks: {listed}")
        return self

    def to_mapping(self) -> dict[str, float]:
        """Inverse of ``from_mapping`` with ranks rendered like the provider does."""
        return {f"{p.rank:g}": p.value for p in self._points}

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PercentileDistribution):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return (
            f"PercentileDistribution(n={len(self)}, "
            f"p{self._ranks[0]:g}={self._values[0]:g}, p{self._ranks[-1]:g}={self._values[-1]:g})"
        )


Samples = PercentileDistribution | Sequence[float] | np.ndarray


def as_sample_array(samples: Samples) -> np.ndarray:
    """
    Return the sample prices as a float array.

    A ``PercentileDistribution`` contributes its values; any other sequence
    is treated as raw prices and must hold finite positive numbers. An
    empty input gives an empty array.
    """
    if isinstance(samples, PercentileDistribution):
        return np.array(samples.values, dtype=float)
    try:
        values = np.asarray(samples, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Samples must be numeric prices: {e}") from e
    if values.size and not np.all(np.isfinite(values)):
        raise InvalidInputError("Samples must be finite")
    if values.size and np.any(values <= 0):
        raise InvalidInputError("Samples must be positive prices")
    return values
