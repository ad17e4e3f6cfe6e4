"""
Tests for PercentileDistribution construction and validation.
"""

import numpy as np
import pytest

from synth_options.distribution.percentiles import (
    PercentileDistribution,
    PercentilePoint,
    as_sample_array,
)
from synth_options.errors import InvalidInputError


class TestConstruction:
    def test_from_mapping_sorts_numerically(self):
        dist = PercentileDistribution.from_mapping({"50": 100.0, "10": 90.0, "2.5": 80.0, "97.5": 120.0})
        assert dist.ranks.tolist() == [2.5, 10.0, 50.0, 97.5]
        assert dist.values.tolist() == [80.0, 90.0, 100.0, 120.0]

    def test_from_records(self):
        dist = PercentileDistribution.from_records([
            {"percentile": 95, "value": 110.0},
            {"percentile": 5, "value": 90.0},
            {"percentile": 50, "value": 100.0},
        ])
        assert dist.points[0] == PercentilePoint(5.0, 90.0)
        assert len(dist) == 3

    def test_btc_fixture(self, btc_distribution):
        assert len(btc_distribution) == 23
        assert btc_distribution.median == 87200
        assert btc_distribution.values[0] == 78100

    def test_to_mapping_round_trip(self, btc_distribution):
        mapping = btc_distribution.to_mapping()
        assert mapping["0.5"] == 78100
        assert PercentileDistribution.from_mapping(mapping) == btc_distribution

    def test_equal_adjacent_values_allowed(self):
        dist = PercentileDistribution([(25, 100.0), (50, 100.0), (75, 101.0)])
        assert dist.values.tolist() == [100.0, 100.0, 101.0]

    def test_arrays_are_read_only(self, btc_distribution):
        with pytest.raises(ValueError):
            btc_distribution.values[0] = 1.0


class TestValidation:
    @pytest.mark.parametrize("points", [
        [(50, 100.0)],  # too few
        [],
        [(0, 90.0), (50, 100.0)],  # rank at 0
        [(50, 100.0), (100, 110.0)],  # rank at 100
        [(50, 100.0), (50, 101.0)],  # duplicate rank
        [(60, 100.0), (50, 101.0)],  # ranks out of order
        [(25, 101.0), (75, 100.0)],  # decreasing price
        [(25, -1.0), (75, 100.0)],  # negative price
        [(25, 0.0), (75, 100.0)],  # zero price
        [(25, float("nan")), (75, 100.0)],
    ])
    def test_rejects_invalid_points(self, points):
        with pytest.raises(InvalidInputError):
            PercentileDistribution(points)

    def test_rejects_non_numeric_keys(self):
        with pytest.raises(InvalidInputError, match="numeric"):
            PercentileDistribution.from_mapping({"p5": 90.0, "p95": 110.0})

    def test_require_ranks(self, btc_distribution):
        assert btc_distribution.require_ranks() is btc_distribution
        sparse = PercentileDistribution.from_mapping({"5": 90.0, "95": 110.0})
        with pytest.raises(InvalidInputError, match="p50"):
            sparse.require_ranks()


class TestLookup:
    def test_value_at_interpolates(self):
        dist = PercentileDistribution([(10, 90.0), (50, 100.0), (90, 120.0)])
        assert dist.value_at(30) == pytest.approx(95.0)
        assert dist.value_at(90) == 120.0

    def test_median_interpolated_when_not_sampled(self):
        dist = PercentileDistribution([(25, 90.0), (75, 110.0)])
        assert dist.median == pytest.approx(100.0)

    def test_value_at_outside_range(self):
        dist = PercentileDistribution([(10, 90.0), (90, 120.0)])
        with pytest.raises(InvalidInputError, match="outside"):
            dist.value_at(95)


class TestSampleArray:
    def test_accepts_plain_sequence(self):
        values = as_sample_array([3.0, 1.0, 2.0])
        assert isinstance(values, np.ndarray)
        assert values.tolist() == [3.0, 1.0, 2.0]

    def test_empty_sequence(self):
        assert as_sample_array([]).size == 0

    def test_distribution_values_are_copied(self, btc_distribution):
        values = as_sample_array(btc_distribution)
        values[0] = 1.0
        assert btc_distribution.values[0] == 78100

    @pytest.mark.parametrize("samples", [[1.0, -2.0], [0.0], [1.0, float("inf")], ["a"]])
    def test_rejects_bad_samples(self, samples):
        with pytest.raises(InvalidInputError):
            as_sample_array(samples)
