import math
import random

import pytest

from core.stats import (
    EmptyInputError,
    compute_cvar,
    compute_downside_deviation,
    compute_hill_index,
    compute_left_tail_index,
    compute_max_drawdown,
    compute_risk_profile,
    compute_sortino_ratio,
    compute_tail_metrics,
    compute_var,
    interpret_hill_index,
)
from core.utils import generate_sample_data


def test_hill_indices_are_nan_for_small_samples():
    data = sorted(float(i) for i in range(1, 11))
    assert math.isnan(compute_hill_index(data))
    assert math.isnan(compute_left_tail_index(data))


def test_var99_is_at_least_var95():
    for distribution in ("normal", "t", "mixture"):
        metrics = compute_tail_metrics(generate_sample_data(distribution, 1000, seed=4))
        assert metrics.var99 >= metrics.var95
        assert metrics.cvar95 >= metrics.var95


def test_var_and_cvar_values():
    data = [float(i) for i in range(-50, 50)]
    assert compute_var(data, 0.95) == pytest.approx(-quantile_ref(data, 0.05))
    # ⌊0.05 * 100⌋ = 5 个最差观测的均值取负
    assert compute_cvar(data, 0.95) == pytest.approx(48.0)
    # 尾部下标为 0 时只剩最差的一个点
    assert compute_cvar([-3.0, 1.0, 2.0], 0.95) == 3.0


def quantile_ref(data, p):
    index = p * (len(data) - 1)
    lower = math.floor(index)
    return data[lower] + (data[lower + 1] - data[lower]) * (index - lower)


def test_hill_index_on_pareto_tail():
    rng = random.Random(9)
    # Pareto(α=2)，理论 γ = 1/α = 0.5
    sample = sorted((1.0 - rng.random()) ** -0.5 for _ in range(2000))
    gamma = compute_hill_index(sample)
    assert math.isfinite(gamma)
    assert 0.3 < gamma < 0.7
    assert interpret_hill_index(gamma) != "数据不足"


def test_left_tail_index_needs_negative_tail():
    positive = sorted(1.0 + i * 0.01 for i in range(200))
    assert math.isnan(compute_left_tail_index(positive))
    negative = sorted(-x for x in positive)
    assert compute_left_tail_index(negative) > 0


def test_interpret_hill_index():
    assert interpret_hill_index(float("nan")) == "数据不足"
    assert interpret_hill_index(0.6) == "极厚尾（类 Pareto）"
    assert interpret_hill_index(0.01) == "极薄尾（接近正态）"


def test_max_drawdown():
    result = compute_max_drawdown([0.1, -0.5, 0.2])
    # 净值路径 [1, 1.1, 0.55, 0.66]
    assert result.max_drawdown == pytest.approx(0.55)
    assert result.max_drawdown_percent == pytest.approx(0.5)
    assert result.peak_index == 1
    assert result.trough_index == 2


def test_max_drawdown_edge_cases():
    empty = compute_max_drawdown([])
    assert (empty.max_drawdown, empty.max_drawdown_percent) == (0.0, 0.0)
    assert (empty.peak_index, empty.trough_index) == (-1, -1)

    rising = compute_max_drawdown([0.01, 0.02, 0.03])
    assert rising.max_drawdown_percent == 0.0


def test_downside_deviation_and_sortino():
    data = [-0.1, 0.2, -0.3, 0.4]
    # 只累加低于阈值的平方，但分母为全样本量
    assert compute_downside_deviation(data) == pytest.approx(math.sqrt(0.1 / 4))
    assert compute_sortino_ratio(data) == pytest.approx(0.05 / math.sqrt(0.1 / 4))

    assert compute_downside_deviation([0.1, 0.2, 0.3]) == 0.0
    assert compute_sortino_ratio([0.1, 0.2, 0.3]) == 0.0


def test_risk_profile_bundle():
    data = generate_sample_data("t", 500, seed=12)
    profile = compute_risk_profile(data, threshold=0.0)
    assert profile.downside_deviation == pytest.approx(compute_downside_deviation(data))
    assert profile.sortino_ratio == pytest.approx(compute_sortino_ratio(data))
    assert profile.drawdown == compute_max_drawdown(data)
    assert "left_tail_index" in profile.to_dict()


def test_tail_metrics_reject_empty_sample():
    with pytest.raises(EmptyInputError):
        compute_tail_metrics([])


def test_tail_metrics_does_not_mutate_input():
    data = [0.3, -0.2, 0.1, -0.5]
    compute_tail_metrics(data)
    assert data == [0.3, -0.2, 0.1, -0.5]
