"""
Shared fixtures: a BTC-style 24h percentile forecast.
"""

import json
import logging

import pytest

from synth_options.distribution.percentiles import PercentileDistribution

BTC_PERCENTILES = {
    "0.5": 78100, "2.5": 80500, "5": 81900, "10": 83200,
    "15": 84000, "20": 84600, "25": 85100, "30": 85500,
    "35": 85900, "40": 86300, "45": 86700, "50": 87200,
    "55": 87700, "60": 88200, "65": 88700, "70": 89300,
    "75": 90000, "80": 90800, "85": 91800, "90": 93200,
    "95": 95400, "97.5": 97800, "99.5": 102500,
}

BTC_SPOT = 87420.0


@pytest.fixture
def btc_distribution() -> PercentileDistribution:
    return PercentileDistribution.from_mapping(BTC_PERCENTILES)


@pytest.fixture
def btc_payload_file(tmp_path):
    path = tmp_path / "btc_percentiles.json"
    path.write_text(json.dumps({
        "asset": "BTC",
        "timeframe": "24h",
        "current_price": BTC_SPOT,
        "percentiles": BTC_PERCENTILES,
    }))
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo ``setup_logging`` so caplog sees package records in every test."""
    yield
    logger = logging.getLogger("synth_options")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
