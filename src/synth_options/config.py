"""
Configuration for analytics defaults.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from synth_options.errors import InvalidInputError
from synth_options.validation import require_finite, require_int, require_positive


@dataclass
class AnalyticsConfig:
    """
    Defaults applied by the CLI and by callers that pass a config around.

    Attributes
    ----------
    risk_free_rate : float
        Annualized rate used when none is given
    breakeven_resolution : int
        Number of grid points in breakeven and payoff scans
    iv_initial_guess : float
        Starting volatility of the Newton solver
    iv_tolerance : float
        Price tolerance of the Newton solver
    iv_max_iterations : int
        Newton iteration cap
    iv_sigma_min, iv_sigma_max : float
        Clamp range of the Newton solver
    edge_threshold : float
        Relative edge for BUY/SELL recommendations
    required_ranks : list[float]
        Percentile ranks an input distribution must contain
    """

    risk_free_rate: float = 0.05
    breakeven_resolution: int = 200
    iv_initial_guess: float = 0.5
    iv_tolerance: float = 1e-6
    iv_max_iterations: int = 100
    iv_sigma_min: float = 0.001
    iv_sigma_max: float = 2.0
    edge_threshold: float = 0.05
    required_ranks: list[float] = field(default_factory=lambda: [5.0, 50.0, 95.0])

    def __post_init__(self) -> None:
        self.risk_free_rate = require_finite("risk_free_rate", self.risk_free_rate)
        self.breakeven_resolution = require_int(
            "breakeven_resolution", self.breakeven_resolution, minimum=2
        )
        self.iv_initial_guess = require_positive("iv_initial_guess", self.iv_initial_guess)
        self.iv_tolerance = require_positive("iv_tolerance", self.iv_tolerance)
        self.iv_max_iterations = require_int("iv_max_iterations", self.iv_max_iterations, minimum=1)
        self.iv_sigma_min = require_positive("iv_sigma_min", self.iv_sigma_min)
        self.iv_sigma_max = require_positive("iv_sigma_max", self.iv_sigma_max)
        self.edge_threshold = require_positive("edge_threshold", self.edge_threshold)
        if self.iv_sigma_max <= self.iv_sigma_min:
            raise InvalidInputError("iv_sigma_max must be greater than iv_sigma_min")
        self.required_ranks = self._check_ranks(self.required_ranks)

    @staticmethod
    def _check_ranks(ranks: Any) -> list[float]:
        if isinstance(ranks, str) or not isinstance(ranks, (list, tuple)):
            raise InvalidInputError(f"required_ranks must be a list of percentile ranks, got {ranks!r}")
        checked = [require_finite("required_ranks entry", rank) for rank in ranks]
        for rank in checked:
            if not 0 < rank < 100:
                raise InvalidInputError(f"required_ranks entries must lie in (0, 100), got {rank}")
        return checked

    def iv_options(self) -> dict[str, float]:
        """Keyword arguments for ``solve_implied_vol``."""
        return {
            "initial_guess": self.iv_initial_guess,
            "tol": self.iv_tolerance,
            "max_iter": self.iv_max_iterations,
            "sigma_min": self.iv_sigma_min,
            "sigma_max": self.iv_sigma_max,
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyticsConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidInputError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: Path | str | None = None) -> AnalyticsConfig:
    """
    Load configuration from a JSON file, or return defaults when path is None.
    """
    if path is None:
        return AnalyticsConfig()
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config file {path} must contain a JSON object")
    return AnalyticsConfig.from_dict(data)
