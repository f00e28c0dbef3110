import math
import random

import pytest

from core.stats import (
    EmptyInputError,
    compute_iqr,
    compute_kurtosis,
    compute_mad,
    compute_median,
    compute_skewness,
    compute_summary_stats,
    format_stat,
    quantile,
    welford,
)

SCENARIO = [
    1.2, -0.5, 0.3, 2.1, -1.0, 0.8, -0.3, 1.5, 0.2, -0.7,
    1.1, 0.4, -0.9, 1.8, 0.1, -0.4, 1.3, 0.6, -0.2, 0.9,
]


def test_scenario_summary():
    stats = compute_summary_stats(SCENARIO)
    assert stats.count == 20
    assert stats.mean == pytest.approx(0.415, abs=1e-3)
    assert stats.min == -1.0
    assert stats.max == 2.1
    assert stats.median == stats.p50


def test_percentiles_are_ordered():
    rng = random.Random(7)
    for n in (1, 2, 5, 37, 500):
        sample = [rng.gauss(0.0, 1.0) for _ in range(n)]
        s = compute_summary_stats(sample)
        assert s.min <= s.p5 <= s.p25 <= s.median <= s.p75 <= s.p95 <= s.max


def test_empty_sample_raises():
    with pytest.raises(EmptyInputError):
        compute_summary_stats([])
    # EmptyInputError 是 ValueError 的子类
    with pytest.raises(ValueError):
        compute_summary_stats([])


def test_non_numeric_sample_raises():
    with pytest.raises(ValueError):
        compute_summary_stats([1.0, "abc"])


def test_summary_does_not_mutate_input():
    sample = [3.0, 1.0, 2.0]
    compute_summary_stats(sample)
    assert sample == [3.0, 1.0, 2.0]


def test_welford_matches_textbook_and_is_stable():
    mean, variance, m2 = welford([1.0, 2.0, 3.0, 4.0])
    assert mean == pytest.approx(2.5)
    assert variance == pytest.approx(5.0 / 3.0)
    assert m2 == pytest.approx(5.0)

    shifted = [1e9 + x for x in (1.0, 2.0, 3.0, 4.0)]
    _, variance_shifted, _ = welford(shifted)
    assert variance_shifted == pytest.approx(5.0 / 3.0, abs=1e-6)

    assert welford([5.0]) == (5.0, 0.0, 0.0)


def test_quantile_interpolation_and_edges():
    data = [1.0, 2.0, 3.0, 4.0]
    assert quantile(data, 0.5) == pytest.approx(2.5)
    assert quantile(data, 0.25) == pytest.approx(1.75)
    assert quantile(data, 0.0) == 1.0
    assert quantile(data, -0.3) == 1.0
    assert quantile(data, 1.0) == 4.0
    assert math.isnan(quantile([], 0.5))


def test_median_iqr_mad():
    assert compute_median([1.0, 2.0, 3.0]) == 2.0
    assert compute_median([1.0, 2.0, 3.0, 4.0]) == 2.5
    assert compute_iqr([1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.5)
    assert compute_mad([1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.0)
    assert compute_mad([1.0, 2.0, 3.0, 10.0], center=2.5) == pytest.approx(2.5)


def test_higher_moments_guarded_branches():
    assert compute_skewness([1.0, 2.0], 1.5, 0.7) == 0.0
    assert compute_kurtosis([1.0, 2.0, 3.0], 2.0, 1.0) == 0.0
    assert compute_skewness([1.0, 1.0, 1.0], 1.0, 0.0) == 0.0


def test_symmetric_sample_has_zero_skewness():
    sample = [-3.0, -1.0, 0.0, 1.0, 3.0]
    s = compute_summary_stats(sample)
    assert s.skewness == pytest.approx(0.0, abs=1e-12)


def test_format_stat():
    assert format_stat(float("nan")) == "N/A"
    assert format_stat(float("inf")) == "N/A"
    assert format_stat(1234567.0) == "1.235e+06"
    assert format_stat(0.0001) == "1.000e-04"
    assert format_stat(0.5) == "0.5000"
    assert format_stat(0.0) == "0.0000"
    assert format_stat(1.23456, decimals=2) == "1.23"
