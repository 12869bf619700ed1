"""Tests for descriptive statistics functions."""

import math

import pytest

from procmon_analytics.core.statistics import mean, percentile, stddev, z_score


def closed_form_stddev(values):
    m = sum(values) / len(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


class TestMean:
    """Test mean."""

    def test_empty_is_zero(self):
        """Test empty input yields zero."""
        assert mean([]) == 0.0

    def test_mean(self):
        """Test arithmetic mean."""
        assert mean([1, 2, 3, 4]) == pytest.approx(2.5)

    def test_single_value(self):
        """Test a single value is its own mean."""
        assert mean([7]) == pytest.approx(7.0)


class TestStddev:
    """Test population standard deviation."""

    def test_fewer_than_two_samples(self):
        """Test degenerate inputs return zero."""
        assert stddev([]) == 0.0
        assert stddev([42]) == 0.0

    def test_population_formula(self):
        """Test division by N rather than N-1."""
        assert stddev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    @pytest.mark.parametrize("values", [
        [1, 2],
        [10, 10, 1000],
        [0, 0, 0, 1],
        [3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5],
        [1_000_000_001, 1_000_000_002, 1_000_000_003],
    ])
    def test_matches_closed_form(self, values):
        """Test agreement with the closed-form population formula."""
        assert stddev(values) == pytest.approx(closed_form_stddev(values), rel=1e-9)

    def test_identical_values(self):
        """Test identical values have zero deviation."""
        assert stddev([5, 5, 5, 5]) == 0.0


class TestZScore:
    """Test z-score."""

    def test_z_score(self):
        """Test positive z-score."""
        assert z_score(10, 5, 2.5) == pytest.approx(2.0)

    def test_negative_z_score(self):
        """Test negative z-score."""
        assert z_score(0, 5, 2.5) == pytest.approx(-2.0)

    def test_zero_stddev(self):
        """Test no division by zero."""
        assert z_score(100, 5, 0) == 0.0


class TestPercentile:
    """Test nearest-rank percentile."""

    def test_empty_is_zero(self):
        """Test empty input yields zero."""
        assert percentile([], 50) == 0.0

    @pytest.mark.parametrize("p,expected", [
        (0, 15),
        (5, 15),
        (30, 20),
        (40, 20),
        (50, 35),
        (100, 50),
    ])
    def test_nearest_rank(self, p, expected):
        """Test nearest-rank selection."""
        assert percentile([15, 20, 35, 40, 50], p) == expected

    def test_unsorted_input(self):
        """Test values are sorted before ranking."""
        assert percentile([50, 15, 40, 20, 35], 50) == 35

    def test_input_not_modified(self):
        """Test the input sequence is left unsorted."""
        values = [3, 1, 2]
        percentile(values, 50)
        assert values == [3, 1, 2]
