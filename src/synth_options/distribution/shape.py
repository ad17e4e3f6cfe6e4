"""
Shape and tail statistics of an empirical price distribution.

The sample is treated as equally weighted points. Percentiles use the
nearest-rank index ``floor(n * p)`` with no interpolation.
"""

import math
from dataclasses import asdict, dataclass

import numpy as np

from synth_options.distribution.percentiles import Samples, as_sample_array
from synth_options.errors import DegenerateDistributionError, InvalidInputError
from synth_options.logging_config import get_logger
from synth_options.validation import require_positive

logger = get_logger(__name__)

TAIL_FRACTION = 0.05
NORMAL_SKEW_BAND = 0.1
NORMAL_TAIL_RATIO = 2.5
FAT_TAIL_FACTOR = 1.2


@dataclass(frozen=True)
class DistributionAnalysis:
    """
    Shape summary of a distribution relative to the current price.

    Attributes
    ----------
    skewness : float
        Population skewness (third standardized moment, divisor n)
    tail_ratio : float
        p95 / max(p5, 1)
    max_drawdown : float
        max(0, (mean - min) / current_price)
    max_upside : float
        max(0, (max - mean) / current_price)
    iqr_pct : float
        (p75 - p25) / median
    var95 : float
        (p5 - mean) / mean
    cvar95 : float
        (mean of the lowest ceil(5% n) samples - mean) / mean
    """

    skewness: float
    tail_ratio: float
    max_drawdown: float
    max_upside: float
    iqr_pct: float
    var95: float
    cvar95: float

    @classmethod
    def neutral(cls) -> "DistributionAnalysis":
        """Result used for empty or single-point samples."""
        return cls(
            skewness=0.0,
            tail_ratio=1.0,
            max_drawdown=0.0,
            max_upside=0.0,
            iqr_pct=0.0,
            var95=0.0,
            cvar95=0.0,
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _nearest_rank(sorted_values: np.ndarray, fraction: float) -> float:
    return float(sorted_values[math.floor(len(sorted_values) * fraction)])


def analyze_shape(
    samples: Samples, current_price: float, *, strict: bool = False
) -> DistributionAnalysis:
    """
    Compute skew, tail and risk statistics of a price sample.

    Parameters
    ----------
    samples : PercentileDistribution | sequence of float
        Price sample; order does not matter
    current_price : float
        Reference price used to normalise drawdown and upside (must be > 0)
    strict : bool, optional
        If True, fewer than 2 samples raise ``DegenerateDistributionError``
        instead of returning ``DistributionAnalysis.neutral()``

    Returns
    -------
    DistributionAnalysis
    """
    current_price = require_positive("current_price", current_price)
    values = np.sort(as_sample_array(samples))
    n = len(values)

    if n < 2:
        if strict:
            raise DegenerateDistributionError(
                f"Shape analysis needs at least 2 samples, got {n}"
            )
        logger.debug("Degenerate sample of size %d, returning neutral analysis", n)
        return DistributionAnalysis.neutral()

    mean = float(np.mean(values))
    if n % 2 == 0:
        median = float((values[n // 2 - 1] + values[n // 2]) / 2)
    else:
        median = float(values[n // 2])

    std = math.sqrt(float(np.mean((values - mean) ** 2)))
    skewness = float(np.mean(((values - mean) / std) ** 3)) if std > 0 else 0.0

    p5 = _nearest_rank(values, 0.05)
    p25 = _nearest_rank(values, 0.25)
    p75 = _nearest_rank(values, 0.75)
    p95 = _nearest_rank(values, 0.95)

    tail_count = math.ceil(n * TAIL_FRACTION)
    tail_mean = float(np.mean(values[:tail_count]))

    return DistributionAnalysis(
        skewness=skewness,
        tail_ratio=p95 / max(p5, 1.0),
        max_drawdown=max(0.0, (mean - float(values[0])) / current_price),
        max_upside=max(0.0, (float(values[-1]) - mean) / current_price),
        iqr_pct=(p75 - p25) / median,
        var95=(p5 - mean) / mean,
        cvar95=(tail_mean - mean) / mean,
    )


@dataclass(frozen=True)
class HistogramBin:
    low: float
    high: float
    count: int

    @property
    def midpoint(self) -> float:
        return 0.5 * (self.low + self.high)


def histogram(samples: Samples, n_bins: int = 20) -> list[HistogramBin]:
    """
    Equal-width histogram of the sample between its min and max.

    Bins are half-open except the last, which also holds the maximum.
    """
    if int(n_bins) != n_bins or n_bins < 1:
        raise InvalidInputError(f"n_bins must be a positive integer, got {n_bins}")
    values = as_sample_array(samples)
    if values.size == 0:
        raise InvalidInputError("Cannot build a histogram of an empty sample")

    counts, edges = np.histogram(values, bins=int(n_bins))
    return [
        HistogramBin(float(edges[i]), float(edges[i + 1]), int(counts[i]))
        for i in range(len(counts))
    ]


@dataclass(frozen=True)
class ShapeProfile:
    """Qualitative reading of a ``DistributionAnalysis`` against a normal curve."""

    skew: str
    fat_tails: bool


def classify_shape(analysis: DistributionAnalysis) -> ShapeProfile:
    """
    Label skew as 'left', 'right' or 'symmetric' and flag fat tails.

    Skew counts as asymmetric beyond ±0.1; tails are fat when the tail
    ratio exceeds 1.2 times the normal reference of 2.5.
    """
    if analysis.skewness < -NORMAL_SKEW_BAND:
        skew = "left"
    elif analysis.skewness > NORMAL_SKEW_BAND:
        skew = "right"
    else:
        skew = "symmetric"
    return ShapeProfile(skew, analysis.tail_ratio > NORMAL_TAIL_RATIO * FAT_TAIL_FACTOR)
