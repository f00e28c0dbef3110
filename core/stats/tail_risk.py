"""
尾部风险指标：历史 VaR / CVaR、Hill 尾部指数、最大回撤、下行偏差与 Sortino 比率。

约定：
- 输入视为收益率序列，损失取正号（loss convention）：VaR / CVaR 为正数表示亏损；
- 所有排序都在副本上进行，不修改调用方的原始样本；
- 数据量不足以估计 Hill 指数时返回 NaN（“无法计算”的约定结果，而非异常）。
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

from ._common import EmptyInputError, _to_float_list
from .descriptive import quantile

_HILL_MIN_K = 5
_HILL_FLOOR_K = 20
_HILL_MAX_FRACTION = 0.2


@dataclass(frozen=True)
class TailMetrics:
    """
    尾部风险指标汇总。

    字段说明：
    - var95 / var99: 95% / 99% 置信水平下的历史 VaR；
    - cvar95 / cvar99: 对应的条件 VaR（预期损失）；
    - hill_index: 右尾 Hill 指数 γ，数据不足时为 NaN。
    """

    var95: float
    var99: float
    cvar95: float
    cvar99: float
    hill_index: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class DrawdownResult:
    """
    最大回撤结果。

    - max_drawdown: 峰值与谷值之间的绝对差（基于从 1 开始的累计净值）；
    - max_drawdown_percent: 相对峰值的最大回撤比例；
    - peak_index / trough_index: 峰值、谷值在累计净值路径中的下标
      （路径长度 n+1，下标 0 为初始净值 1）；空样本时为 -1。
    """

    max_drawdown: float
    max_drawdown_percent: float
    peak_index: int
    trough_index: int


@dataclass(frozen=True)
class RiskProfile:
    """收益序列的补充风险画像：左尾指数、最大回撤、下行偏差、Sortino 比率。"""

    left_tail_index: float
    drawdown: DrawdownResult
    downside_deviation: float
    sortino_ratio: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def compute_var(sorted_values: Sequence[float], confidence: float) -> float:
    """
    历史法 VaR：取 (1 - confidence) 分位数并取负号。

    例如 VaR(95%) = -P5，即以 95% 的把握损失不会超过该值。
    """
    return -quantile(sorted_values, 1.0 - confidence)


def compute_cvar(sorted_values: Sequence[float], confidence: float) -> float:
    """
    条件 VaR（Expected Shortfall）：尾部样本均值取负号。

    - 尾部下标 k = ⌊(1 - confidence) * n⌋，对排序后前 k 个值（严格位于 VaR 下标之前）取均值；
    - k == 0 时只剩最差的一个点，结果为 -min。
    """
    n = len(sorted_values)
    var_index = math.floor((1.0 - confidence) * n)
    if var_index == 0:
        return -sorted_values[0]
    return -sum(sorted_values[:var_index]) / var_index


def _hill_k(n: int) -> int:
    """尾部样本数 k = max(⌊√n⌋, ⌊0.05n⌋, 20)，且不超过 ⌊0.2n⌋。"""
    k = max(int(math.floor(math.sqrt(n))), int(math.floor(0.05 * n)), _HILL_FLOOR_K)
    return min(k, int(math.floor(n * _HILL_MAX_FRACTION)))


def compute_hill_index(sorted_values: Sequence[float]) -> float:
    """
    右尾 Hill 指数 γ（越大尾部越厚）。

    γ = mean(ln(x_(n-k+i) / threshold))，threshold 为自顶向下第 k 个值。
    k < 5 或阈值非正（对数无定义）时返回 NaN。
    """
    n = len(sorted_values)
    k = _hill_k(n)
    if k < _HILL_MIN_K:
        return float("nan")

    threshold = sorted_values[n - k]
    if threshold <= 0:
        return float("nan")

    total = 0.0
    for i in range(n - k, n):
        total += math.log(sorted_values[i] / threshold)
    return total / k


def compute_left_tail_index(sorted_values: Sequence[float]) -> float:
    """
    左尾 Hill 指数：对下尾取负后套用同样的 k 规则。

    只累加取负后为正的值；k < 5 或阈值非正时返回 NaN。
    """
    n = len(sorted_values)
    k = _hill_k(n)
    if k < _HILL_MIN_K:
        return float("nan")

    threshold = -sorted_values[k - 1]
    if threshold <= 0:
        return float("nan")

    total = 0.0
    for i in range(k):
        val = -sorted_values[i]
        if val > 0:
            total += math.log(val / threshold)
    return total / k


def interpret_hill_index(gamma: float) -> str:
    """将 Hill 指数翻译为尾部厚度的文字描述。"""
    if math.isnan(gamma):
        return "数据不足"
    if gamma > 0.5:
        return "极厚尾（类 Pareto）"
    if gamma > 0.3:
        return "很厚的尾部（金融数据常见）"
    if gamma > 0.15:
        return "中等厚尾"
    if gamma > 0.05:
        return "薄尾"
    return "极薄尾（接近正态）"


def compute_max_drawdown(values: Sequence[float]) -> DrawdownResult:
    """
    基于收益率序列计算最大回撤。

    - 累计净值路径从 1 开始，依次乘以 (1 + r_i)，长度为 n+1；
    - 跟踪截至当前的峰值，记录相对峰值的最大回撤比例及对应的峰、谷下标；
    - 空样本返回全 0，下标为 -1。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    if not data:
        return DrawdownResult(0.0, 0.0, -1, -1)

    path: List[float] = [1.0]
    cumulative = 1.0
    for r in data:
        cumulative *= 1.0 + r
        path.append(cumulative)

    max_dd = 0.0
    max_dd_pct = 0.0
    peak_idx = 0
    trough_idx = 0
    running_max = path[0]
    running_max_idx = 0

    for i in range(1, len(path)):
        if path[i] > running_max:
            running_max = path[i]
            running_max_idx = i

        dd = running_max - path[i]
        dd_pct = dd / running_max if running_max != 0 else 0.0
        if dd_pct > max_dd_pct:
            max_dd_pct = dd_pct
            max_dd = dd
            peak_idx = running_max_idx
            trough_idx = i

    return DrawdownResult(
        max_drawdown=max_dd,
        max_drawdown_percent=max_dd_pct,
        peak_index=peak_idx,
        trough_index=trough_idx,
    )


def compute_downside_deviation(values: Sequence[float], threshold: float = 0.0) -> float:
    """
    下行偏差（半偏差）。

    只对低于 threshold 的观测累加 (x - threshold)²，但分母为全样本量 n，
    再开方；没有任何低于阈值的观测时返回 0。
    """
    data = _to_float_list(values, "values")
    shortfalls = [(x - threshold) ** 2 for x in data if x < threshold]
    if not shortfalls:
        return 0.0
    return math.sqrt(sum(shortfalls) / len(data))


def compute_sortino_ratio(values: Sequence[float], threshold: float = 0.0) -> float:
    """Sortino 比率 (mean - threshold) / 下行偏差；下行偏差为 0 时返回 0。"""
    data = _to_float_list(values, "values")
    mean = sum(data) / len(data)
    downside = compute_downside_deviation(data, threshold)
    return (mean - threshold) / downside if downside > 0 else 0.0


def compute_tail_metrics(values: Sequence[float]) -> TailMetrics:
    """
    计算 VaR / CVaR（95%、99%）与右尾 Hill 指数。

    异常：
    - EmptyInputError: 样本为空。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    if not data:
        raise EmptyInputError("无法对空样本计算尾部风险指标。")

    data_sorted = sorted(data)
    return TailMetrics(
        var95=compute_var(data_sorted, 0.95),
        var99=compute_var(data_sorted, 0.99),
        cvar95=compute_cvar(data_sorted, 0.95),
        cvar99=compute_cvar(data_sorted, 0.99),
        hill_index=compute_hill_index(data_sorted),
    )


def compute_risk_profile(values: Sequence[float], threshold: float = 0.0) -> RiskProfile:
    """汇总左尾指数、最大回撤、下行偏差与 Sortino 比率。"""
    data = _to_float_list(values, "values")
    return RiskProfile(
        left_tail_index=compute_left_tail_index(sorted(data)),
        drawdown=compute_max_drawdown(data),
        downside_deviation=compute_downside_deviation(data, threshold),
        sortino_ratio=compute_sortino_ratio(data, threshold),
    )
