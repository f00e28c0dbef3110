"""
描述性统计：均值 / 方差（Welford 单遍算法）、分位数、偏度与超额峰度。

约定：
- 方差、标准差均为样本口径（除以 n - 1）；
- 分位数使用线性插值，要求输入已排序；
- 样本过小无法估计偏度 / 峰度时返回 0，而不是抛异常。
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ._common import EmptyInputError, _to_float_list


@dataclass(frozen=True)
class SummaryStats:
    """
    样本的描述性统计汇总。

    字段说明：
    - count: 样本量 n；
    - mean / variance / std_dev: 均值、样本方差（n-1 为分母）、标准差；
    - median: 中位数（与 p50 相同）；
    - skewness: 偏差校正后的样本偏度；
    - kurtosis: 偏差校正后的超额峰度（正态分布为 0）；
    - min / max: 最小值、最大值；
    - p5 / p25 / p50 / p75 / p95: 线性插值分位数。
    """

    count: int
    mean: float
    variance: float
    std_dev: float
    median: float
    skewness: float
    kurtosis: float
    min: float
    max: float
    p5: float
    p25: float
    p50: float
    p75: float
    p95: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def welford(values: Iterable[float]) -> Tuple[float, float, float]:
    """
    单遍递推（Welford 算法）计算均值与样本方差。

    与“平方和减去和的平方”的朴素公式相比，该递推不会在
    “数值量级大、相对波动小”的数据上出现灾难性抵消。

    返回：
    - (mean, variance, m2)：variance 使用 n-1 作分母，n <= 1 时为 0；
      m2 为离差平方和。
    """
    n = 0
    mean = 0.0
    m2 = 0.0
    for x in values:
        n += 1
        delta = x - mean
        mean += delta / n
        m2 += delta * (x - mean)

    variance = m2 / (n - 1) if n > 1 else 0.0
    return mean, variance, m2


def quantile(sorted_values: Sequence[float], p: float) -> float:
    """
    基于已排序数据的线性插值分位数。

    规则：index = p * (n - 1)，在 floor / ceil 两个位置之间线性插值；
    p <= 0 返回最小值，p >= 1 返回最大值，空序列返回 NaN。
    """
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    if p <= 0:
        return sorted_values[0]
    if p >= 1:
        return sorted_values[-1]

    index = p * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    weight = index - lower

    lo_val = sorted_values[lower]
    hi_val = sorted_values[upper]
    # 写成 lo + (hi - lo) * w 并截断，保证结果落在 [lo, hi] 内、分位数单调
    value = lo_val + (hi_val - lo_val) * weight
    return min(max(value, lo_val), hi_val)


def compute_median(sorted_values: Sequence[float]) -> float:
    """已排序数据的中位数；空序列返回 NaN。"""
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    if n % 2 == 1:
        return sorted_values[n // 2]
    mid = n // 2
    return (sorted_values[mid - 1] + sorted_values[mid]) / 2.0


def compute_iqr(sorted_values: Sequence[float]) -> float:
    """四分位距 Q75 - Q25。"""
    return quantile(sorted_values, 0.75) - quantile(sorted_values, 0.25)


def compute_mad(values: Sequence[float], center: Optional[float] = None) -> float:
    """
    平均绝对离差 mean(|x - center|)。

    参数：
    - values: 样本；
    - center: 中心位置，默认取算术均值（Laplace 拟合时传入中位数）。
    """
    data = _to_float_list(values, "values")
    c = sum(data) / len(data) if center is None else center
    return sum(abs(x - c) for x in data) / len(data)


def compute_skewness(values: Sequence[float], mean: float, std_dev: float) -> float:
    """
    样本偏度（三阶标准矩），带小样本偏差校正因子 sqrt(n(n-1)) / (n-2)。

    n < 3 或 std_dev == 0 时返回 0。
    """
    n = len(values)
    if n < 3 or std_dev == 0:
        return 0.0

    m3 = 0.0
    for x in values:
        z = (x - mean) / std_dev
        m3 += z * z * z

    correction = math.sqrt(n * (n - 1)) / (n - 2)
    return (m3 / n) * correction


def compute_kurtosis(values: Sequence[float], mean: float, std_dev: float) -> float:
    """
    样本超额峰度（四阶标准矩减去参考值），正态分布时约为 0。

    校正公式：(n-1) / ((n-2)(n-3)) * ((n+1) * m4 - 3(n-1))，
    其中 m4 为标准化四阶矩。n < 4 或 std_dev == 0 时返回 0。
    """
    n = len(values)
    if n < 4 or std_dev == 0:
        return 0.0

    m4 = 0.0
    for x in values:
        z = (x - mean) / std_dev
        m4 += z * z * z * z
    m4 /= n

    correction1 = (n - 1) / ((n - 2) * (n - 3))
    correction2 = (n + 1) * m4 - 3 * (n - 1)
    return correction1 * correction2


def compute_summary_stats(values: Sequence[float]) -> SummaryStats:
    """
    计算样本的完整描述性统计。

    参数：
    - values: 有限实数样本（调用方负责过滤 NaN / inf）。

    返回：
    - SummaryStats。

    异常：
    - EmptyInputError: 样本为空。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    n = len(data)
    if n == 0:
        raise EmptyInputError("无法对空样本计算描述性统计。")

    mean, variance, _ = welford(data)
    std_dev = math.sqrt(variance)

    # 排序在副本上进行，不修改调用方数据
    data_sorted: List[float] = sorted(data)
    median = quantile(data_sorted, 0.5)

    return SummaryStats(
        count=n,
        mean=mean,
        variance=variance,
        std_dev=std_dev,
        median=median,
        skewness=compute_skewness(data, mean, std_dev),
        kurtosis=compute_kurtosis(data, mean, std_dev),
        min=data_sorted[0],
        max=data_sorted[-1],
        p5=quantile(data_sorted, 0.05),
        p25=quantile(data_sorted, 0.25),
        p50=median,
        p75=quantile(data_sorted, 0.75),
        p95=quantile(data_sorted, 0.95),
    )


def format_stat(value: float, decimals: int = 4) -> str:
    """
    将统计量格式化为展示用字符串。

    - 非有限值（NaN / inf）显示为 "N/A"；
    - |value| > 1e6 或 0 < |value| < 1e-3 时使用科学计数法（3 位小数）；
    - 其余按 decimals 位小数输出。
    """
    if value is None or not math.isfinite(value):
        return "N/A"
    if abs(value) > 1e6 or (abs(value) < 1e-3 and value != 0):
        return f"{value:.3e}"
    return f"{value:.{decimals}f}"
