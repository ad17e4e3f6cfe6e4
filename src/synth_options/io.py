"""
I/O utilities for percentile payloads, strategies and results.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from synth_options.distribution.percentiles import DEFAULT_REQUIRED_RANKS, PercentileDistribution
from synth_options.distribution.strategy import Strategy
from synth_options.errors import InvalidInputError
from synth_options.validation import require_positive


def _read_json(path: Path | str) -> Any:
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON in {path}: {e}") from e


def parse_percentiles(
    payload: dict[str, Any],
    required_ranks: Iterable[float] = DEFAULT_REQUIRED_RANKS,
) -> tuple[PercentileDistribution, float]:
    """
    Convert a provider payload into a distribution and its current price.

    ``percentiles`` may be a mapping of rank to price or a list of
    ``{"percentile": ..., "value": ...}`` records. Every rank in
    ``required_ranks`` must be present. The current price comes from
    ``current_price`` and falls back to the median.
    """
    raw = payload.get("percentiles")
    if isinstance(raw, dict):
        distribution = PercentileDistribution.from_mapping(raw)
    elif isinstance(raw, list):
        distribution = PercentileDistribution.from_records(raw)
    else:
        raise InvalidInputError("Payload requires a 'percentiles' mapping or list")
    distribution.require_ranks(required_ranks)

    current = payload.get("current_price")
    if current is None:
        current = distribution.median
    return distribution, require_positive("current_price", current)


def load_percentiles(
    path: Path | str,
    required_ranks: Iterable[float] = DEFAULT_REQUIRED_RANKS,
) -> tuple[PercentileDistribution, float]:
    """Load a percentile payload from a JSON file. See ``parse_percentiles``."""
    payload = _read_json(path)
    if not isinstance(payload, dict):
        raise InvalidInputError(f"{path} must contain a JSON object")
    return parse_percentiles(payload, required_ranks)


def load_strategy(path: Path | str) -> Strategy:
    """Load a strategy written as ``{"name": ..., "legs": [...]}``."""
    payload = _read_json(path)
    if not isinstance(payload, dict):
        raise InvalidInputError(f"{path} must contain a JSON object")
    return Strategy.from_dict(payload)


def save_results(payload: dict[str, Any], path: Path | str) -> Path:
    """Write a JSON result payload, creating parent directories."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w") as f:
        json.dump(payload, f, indent=2)
    return out_path
