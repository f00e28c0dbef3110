"""
时间序列诊断：ACF / PACF、滚动统计、AR(1) 拟合与简化版单位根检验。

约定：
- 自协方差、方差一律以 n 作分母（不是 n-1）；
- ACF / PACF 的显著性阈值为 ±1.96/√n（95% 近似置信带）；
- 数据量不足时 AR(1) 与单位根检验返回 NaN 哨兵值，不影响其他指标的计算。
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ._common import EmptyInputError, _to_float_list, safe_divide

# Dickey-Fuller 参考临界值（约 n=100，1% / 5% / 10%）与对应的离散 p 值档位
_DF_CRITICAL_VALUES = (-3.51, -2.89, -2.58)
_DF_P_BUCKETS = (0.005, 0.03, 0.08, 0.15)


@dataclass(frozen=True)
class ACFPoint:
    """单个滞后阶上的相关系数及是否超出 95% 置信带。"""

    lag: int
    value: float
    significant: bool


@dataclass(frozen=True)
class AR1Fit:
    """
    AR(1) 模型 r_t = c + φ r_{t-1} + ε_t 的 OLS 结果。

    - phi: 斜率 φ；
    - t_stat: φ 的 t 统计量（基于残差方差的标准误）；
    - r_squared: 拟合优度；
    - stationary: |φ| < 1。
    """

    phi: float
    t_stat: float
    r_squared: float
    stationary: bool


@dataclass(frozen=True)
class UnitRootTest:
    """
    简化 Dickey-Fuller 检验结果。

    - statistic: Δx_t 对 x_{t-1} 回归斜率的 t 统计量；
    - p_value: 查表得到的离散 p 值（0.005 / 0.03 / 0.08 / 0.15）；
    - classification: "stationary" / "marginal" / "non-stationary"。
    """

    statistic: float
    p_value: float
    classification: str


@dataclass(frozen=True)
class TimeSeriesDiagnostics:
    """时间序列诊断汇总。"""

    acf: List[ACFPoint]
    pacf: List[ACFPoint]
    rolling_mean: List[float]
    rolling_std: List[float]
    squared_returns: List[float]
    ar1: AR1Fit
    unit_root: UnitRootTest
    max_lag: int = 20
    rolling_window: int = 20

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _confidence_bound(n: int) -> float:
    return 1.96 / math.sqrt(n)


def _acf_values(data: Sequence[float], max_lag: int) -> List[float]:
    n = len(data)
    mean = sum(data) / n
    variance = sum((x - mean) ** 2 for x in data) / n

    values: List[float] = []
    for lag in range(1, min(max_lag, n - 1) + 1):
        covariance = 0.0
        for t in range(lag, n):
            covariance += (data[t] - mean) * (data[t - lag] - mean)
        covariance /= n
        # 零方差序列：相关系数按 0 处理
        values.append(safe_divide(covariance, variance))
    return values


def compute_acf(values: Sequence[float], max_lag: int = 20) -> List[ACFPoint]:
    """
    样本自相关函数，滞后阶 1..min(max_lag, n-1)。

    参数：
    - values: 时间序列（按时间顺序）；
    - max_lag: 最大滞后阶。
    """
    data = _to_float_list(values, "values")
    bound = _confidence_bound(len(data))
    return [
        ACFPoint(lag=lag, value=value, significant=abs(value) > bound)
        for lag, value in enumerate(_acf_values(data, max_lag), start=1)
    ]


def compute_pacf(values: Sequence[float], max_lag: int = 20) -> List[ACFPoint]:
    """
    偏自相关函数，Levinson-Durbin 递推。

    - PACF(1) = ACF(1)；
    - 对 k >= 2：φ_kk = (ρ_k - Σ_j φ_{k-1,j} ρ_{k-j}) / (1 - Σ_j φ_{k-1,j} ρ_j)，
      φ_{k,j} = φ_{k-1,j} - φ_kk φ_{k-1,k-j}。
    """
    data = _to_float_list(values, "values")
    rho = _acf_values(data, max_lag)
    if not rho:
        return []

    bound = _confidence_bound(len(data))
    pacf: List[ACFPoint] = [ACFPoint(lag=1, value=rho[0], significant=abs(rho[0]) > bound)]

    phi_prev: List[float] = [rho[0]]
    for k in range(2, len(rho) + 1):
        numerator = rho[k - 1]
        denominator = 1.0
        for j in range(1, k):
            numerator -= phi_prev[j - 1] * rho[k - 1 - j]
            denominator -= phi_prev[j - 1] * rho[j - 1]

        phi_kk = safe_divide(numerator, denominator)

        phi_new = [phi_prev[j] - phi_kk * phi_prev[k - 2 - j] for j in range(k - 1)]
        phi_new.append(phi_kk)
        phi_prev = phi_new

        pacf.append(ACFPoint(lag=k, value=phi_kk, significant=abs(phi_kk) > bound))

    return pacf


def compute_rolling_stats(values: Sequence[float], window: int) -> Tuple[List[float], List[float]]:
    """
    固定窗口的滚动均值与滚动标准差（总体标准差，分母为 window）。

    返回：
    - (rolling_mean, rolling_std)，长度均为 max(n - window + 1, 0)。
    """
    if window <= 0:
        raise ValueError(f"window 必须为正整数，当前为: {window}")
    data = _to_float_list(values, "values", allow_empty=True)

    rolling_mean: List[float] = []
    rolling_std: List[float] = []
    for end in range(window, len(data) + 1):
        chunk = data[end - window:end]
        mean = sum(chunk) / window
        variance = sum((x - mean) ** 2 for x in chunk) / window
        rolling_mean.append(mean)
        rolling_std.append(math.sqrt(variance))
    return rolling_mean, rolling_std


def compute_squared_returns(values: Sequence[float]) -> List[float]:
    """平方收益序列，用于观察波动聚集。"""
    return [x * x for x in _to_float_list(values, "values", allow_empty=True)]


def _simple_ols(
    x: Sequence[float],
    y: Sequence[float],
) -> Optional[Tuple[float, float, float]]:
    """
    一元 OLS y = a + b x。

    返回：
    - (slope, t_stat, r_squared)；x 无波动时返回 None。
      残差自由度为 m - 2，m <= 2 时 t_stat 为 NaN；y 无波动时 r_squared 为 NaN。
    """
    m = len(x)
    mx = sum(x) / m
    my = sum(y) / m

    sxx = 0.0
    sxy = 0.0
    for xi, yi in zip(x, y):
        dx = xi - mx
        sxx += dx * dx
        sxy += dx * (yi - my)

    if sxx == 0.0:
        return None

    slope = sxy / sxx
    intercept = my - slope * mx

    ssr = sum((yi - intercept - slope * xi) ** 2 for xi, yi in zip(x, y))
    sst = sum((yi - my) ** 2 for yi in y)

    if m > 2:
        se = math.sqrt(ssr / (m - 2) / sxx)
        if se > 0:
            t_stat = slope / se
        else:
            t_stat = math.copysign(math.inf, slope) if slope != 0 else float("nan")
    else:
        t_stat = float("nan")

    r_squared = 1.0 - ssr / sst if sst > 0 else float("nan")
    return slope, t_stat, r_squared


def fit_ar1(values: Sequence[float]) -> AR1Fit:
    """
    AR(1) 拟合：r_t 对 r_{t-1} 做 OLS。

    n < 3 或滞后序列无波动时返回 NaN 哨兵（stationary=False）。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    nan = float("nan")
    if len(data) < 3:
        return AR1Fit(phi=nan, t_stat=nan, r_squared=nan, stationary=False)

    ols = _simple_ols(data[:-1], data[1:])
    if ols is None:
        return AR1Fit(phi=nan, t_stat=nan, r_squared=nan, stationary=False)

    phi, t_stat, r_squared = ols
    return AR1Fit(phi=phi, t_stat=t_stat, r_squared=r_squared, stationary=abs(phi) < 1)


def _df_p_value(statistic: float) -> float:
    """按固定临界值把 t 统计量映射到离散 p 值档位。"""
    for critical, p_value in zip(_DF_CRITICAL_VALUES, _DF_P_BUCKETS):
        if statistic < critical:
            return p_value
    return _DF_P_BUCKETS[-1]


def _classify_stationarity(p_value: float) -> str:
    if p_value < 0.05:
        return "stationary"
    if p_value < 0.10:
        return "marginal"
    return "non-stationary"


def adf_test(values: Sequence[float]) -> UnitRootTest:
    """
    简化 Dickey-Fuller 单位根检验（H0：存在单位根，即非平稳）。

    - Δx_t 对 x_{t-1} 做 OLS，取斜率的 t 统计量；
    - 与固定参考临界值 -3.51 / -2.89 / -2.58 比较，映射为离散 p 值
      0.005 / 0.03 / 0.08 / 0.15（粗粒度查表，不是连续 p 值）；
    - p < 0.05 为 "stationary"，p < 0.10 为 "marginal"，否则 "non-stationary"；
    - n < 4 或统计量无法计算时返回 NaN，分类记为 "marginal"。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    nan = float("nan")
    if len(data) < 4:
        return UnitRootTest(statistic=nan, p_value=nan, classification="marginal")

    lagged = data[:-1]
    diff = [data[t] - data[t - 1] for t in range(1, len(data))]

    ols = _simple_ols(lagged, diff)
    if ols is None or math.isnan(ols[1]):
        return UnitRootTest(statistic=nan, p_value=nan, classification="marginal")

    statistic = ols[1]
    p_value = _df_p_value(statistic)
    return UnitRootTest(
        statistic=statistic,
        p_value=p_value,
        classification=_classify_stationarity(p_value),
    )


def compute_time_series_diagnostics(
    values: Sequence[float],
    max_lag: int = 20,
    rolling_window: int = 20,
) -> TimeSeriesDiagnostics:
    """
    汇总全部时间序列诊断。

    参数：
    - values: 时间序列；
    - max_lag: ACF / PACF 的最大滞后阶，默认 20；
    - rolling_window: 滚动窗口长度，默认 20。

    异常：
    - EmptyInputError: 样本为空。
    """
    data = _to_float_list(values, "values", allow_empty=True)
    if not data:
        raise EmptyInputError("无法对空序列计算时间序列诊断。")

    rolling_mean, rolling_std = compute_rolling_stats(data, rolling_window)
    return TimeSeriesDiagnostics(
        acf=compute_acf(data, max_lag),
        pacf=compute_pacf(data, max_lag),
        rolling_mean=rolling_mean,
        rolling_std=rolling_std,
        squared_returns=compute_squared_returns(data),
        ar1=fit_ar1(data),
        unit_root=adf_test(data),
        max_lag=max_lag,
        rolling_window=rolling_window,
    )
