"""
正态性 / 拟合优度假设检验：Jarque-Bera、Kolmogorov-Smirnov、Anderson-Darling、Shapiro-Wilk。

设计目标：
- 仅实现纯统计学算法，不包含任何业务逻辑；
- 每个检验只依赖 core.stats 的特殊函数与描述统计，互不调用，
  结论（p 值与是否拒绝）可以按各自公式独立复现；
- 原假设 H0 均为“样本来自（拟合出的）正态分布”。
"""

import math
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

from ._common import _to_float_list, clamp
from .descriptive import compute_kurtosis, compute_skewness, welford
from .special_functions import chi2_cdf, norm_cdf

# 估计参数情形下，正态分布 Anderson-Darling 检验的临界值表（显著性水平 -> 临界值）
_AD_CRITICAL_VALUES = {
    0.15: 0.576,
    0.10: 0.656,
    0.05: 0.787,
    0.025: 0.918,
    0.01: 1.092,
}
_AD_PHI_EPS = 1e-10
_AD_P_VALUE_VERTEX = 5.709 / (2 * 0.0186)

_KS_MAX_TERMS = 100
_KS_TERM_EPS = 1e-10

_SW_MIN_N = 3
_SW_MAX_N = 5000

_NORMALITY_TESTS = {
    "Jarque-Bera",
    "Kolmogorov-Smirnov",
    "Anderson-Darling",
    "Shapiro-Wilk",
}


@dataclass(frozen=True)
class StatisticalTest:
    """
    单个假设检验的结果。

    字段说明：
    - name: 检验名称；
    - statistic: 检验统计量；
    - p_value: p 值，位于 [0, 1]；
    - reject_null: 在 alpha 水平下是否拒绝原假设；
    - alpha: 显著性水平。
    """

    name: str
    statistic: float
    p_value: float
    reject_null: bool
    alpha: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def jarque_bera_test(
    values: Sequence[float],
    skewness: Optional[float] = None,
    kurtosis: Optional[float] = None,
    alpha: float = 0.05,
) -> StatisticalTest:
    """
    Jarque-Bera 正态性检验。

    统计量：JB = (n/6) * (S² + K²/4)，S 为样本偏度，K 为超额峰度；
    H0 下 JB 近似服从自由度为 2 的卡方分布，p = 1 - F_χ²(JB; 2)。

    参数：
    - values: 样本；
    - skewness / kurtosis: 可直接传入已算好的偏度与超额峰度（如来自 SummaryStats），
      未传入时按 descriptive 模块的偏差校正公式现算；
    - alpha: 显著性水平，默认 0.05。
    """
    data = _to_float_list(values, "values")
    n = len(data)

    if skewness is None or kurtosis is None:
        mean, variance, _ = welford(data)
        std_dev = math.sqrt(variance)
        if skewness is None:
            skewness = compute_skewness(data, mean, std_dev)
        if kurtosis is None:
            kurtosis = compute_kurtosis(data, mean, std_dev)

    jb = (n / 6.0) * (skewness ** 2 + kurtosis ** 2 / 4.0)
    p_value = clamp(1.0 - chi2_cdf(jb, 2), 0.0, 1.0)

    return StatisticalTest(
        name="Jarque-Bera",
        statistic=jb,
        p_value=p_value,
        reject_null=p_value < alpha,
        alpha=alpha,
    )


def _ks_asymptotic_p_value(d: float, n: int) -> float:
    """
    Kolmogorov 分布的渐近 p 值。

    λ = (√n + 0.12 + 0.11/√n) * D，
    p = 2 Σ_{k=1}^{100} (-1)^{k-1} exp(-2k²λ²)，某一项绝对值小于 1e-10 时提前停止，
    结果截断到 [0, 1]。若 λ 过小导致 100 项内级数未收敛，按惯例返回 1。
    """
    sqrt_n = math.sqrt(n)
    lam = (sqrt_n + 0.12 + 0.11 / sqrt_n) * d

    total = 0.0
    converged = False
    for k in range(1, _KS_MAX_TERMS + 1):
        term = 2.0 * (-1.0) ** (k - 1) * math.exp(-2.0 * k * k * lam * lam)
        total += term
        if abs(term) < _KS_TERM_EPS:
            converged = True
            break

    if not converged:
        return 1.0
    return clamp(total, 0.0, 1.0)


def kolmogorov_smirnov_test(
    values: Sequence[float],
    mu: float,
    sigma: float,
    alpha: float = 0.05,
) -> StatisticalTest:
    """
    单样本 Kolmogorov-Smirnov 检验（对照拟合出的 N(mu, sigma²)）。

    对排序后的第 i 个点（i 从 0 开始）：
    - D+ = max((i+1)/n - Φ(z_i))；
    - D- = max(Φ(z_i) - i/n)；
    D = max(D+, D-)，p 值使用渐近 Kolmogorov 分布。

    异常：
    - ValueError: sigma <= 0。
    """
    data = _to_float_list(values, "values")
    if not sigma > 0:
        raise ValueError(f"sigma 必须为正数，当前为: {sigma}")

    n = len(data)
    data_sorted = sorted(data)

    d_plus = 0.0
    d_minus = 0.0
    for i, x in enumerate(data_sorted):
        theoretical = norm_cdf((x - mu) / sigma)
        d_plus = max(d_plus, (i + 1) / n - theoretical)
        d_minus = max(d_minus, theoretical - i / n)

    d = max(d_plus, d_minus)
    p_value = _ks_asymptotic_p_value(d, n)

    return StatisticalTest(
        name="Kolmogorov-Smirnov",
        statistic=d,
        p_value=p_value,
        reject_null=p_value < alpha,
        alpha=alpha,
    )


def _ad_critical_value(alpha: float) -> float:
    """取临界值表中与 alpha 最接近的一档。"""
    nearest = min(_AD_CRITICAL_VALUES, key=lambda level: abs(level - alpha))
    return _AD_CRITICAL_VALUES[nearest]


def _ad_p_value(a2: float) -> float:
    """调整后 A² 的经验 p 值近似（四段式），截断到 [0, 1]。"""
    if a2 < 0.2:
        p_value = 1.0 - math.exp(-13.436 + 101.14 * a2 - 223.73 * a2 * a2)
    elif a2 < 0.34:
        p_value = 1.0 - math.exp(-8.318 + 42.796 * a2 - 59.938 * a2 * a2)
    elif a2 < 0.6:
        p_value = math.exp(0.9177 - 4.279 * a2 - 1.38 * a2 * a2)
    else:
        # 二次项在抛物线顶点之后会让 p 值回升，超过顶点按顶点处取值
        a2 = min(a2, _AD_P_VALUE_VERTEX)
        p_value = math.exp(1.2937 - 5.709 * a2 + 0.0186 * a2 * a2)
    return clamp(p_value, 0.0, 1.0)


def anderson_darling_test(
    values: Sequence[float],
    mu: float,
    sigma: float,
    alpha: float = 0.05,
) -> StatisticalTest:
    """
    Anderson-Darling 正态性检验（对尾部偏离比 KS 更敏感）。

    - A² = -n - (1/n) Σ_{i=1}^{n} (2i-1) [ln Φ(z_i) + ln(1 - Φ(z_{n+1-i}))]，
      z 为排序后的标准化值，Φ 截断在 [1e-10, 1-1e-10] 内以避免 ln(0)；
    - 估计参数修正：A²* = A² (1 + 0.75/n + 2.25/n²)，报告的统计量即 A²*；
    - 是否拒绝：A²* 超过临界值（alpha=0.05 时为 0.787）；
    - p 值：按 A²* 大小分四段的经验公式近似。

    异常：
    - ValueError: sigma <= 0。
    """
    data = _to_float_list(values, "values")
    if not sigma > 0:
        raise ValueError(f"sigma 必须为正数，当前为: {sigma}")

    n = len(data)
    cdf = [
        clamp(norm_cdf((x - mu) / sigma), _AD_PHI_EPS, 1.0 - _AD_PHI_EPS)
        for x in sorted(data)
    ]

    total = 0.0
    for i in range(n):
        total += (2 * (i + 1) - 1) * (math.log(cdf[i]) + math.log(1.0 - cdf[n - 1 - i]))

    a2 = -n - total / n
    a2_adjusted = a2 * (1.0 + 0.75 / n + 2.25 / (n * n))

    return StatisticalTest(
        name="Anderson-Darling",
        statistic=a2_adjusted,
        p_value=_ad_p_value(a2_adjusted),
        reject_null=a2_adjusted > _ad_critical_value(alpha),
        alpha=alpha,
    )


def _shapiro_wilk_coefficient(_i: int, n: int) -> float:
    # 简化：所有系数统一取 1/√n，而非查表得到的精确系数
    return 1.0 / math.sqrt(n)


def shapiro_wilk_test(
    values: Sequence[float],
    alpha: float = 0.05,
) -> Optional[StatisticalTest]:
    """
    Shapiro-Wilk 正态性检验（近似版）。

    已知限制：
    - 系数 a_i 统一近似为 1/√n，并非标准的查表系数，因此 W 与 p 值都只是粗略近似，
      数值上不等同于标准 Shapiro-Wilk 检验；
    - 仅在 3 <= n <= 5000 时计算，否则返回 None（不产生结果）；
    - 样本离差平方和为 0 时同样返回 None。

    计算：
    - W = (Σ_{i<⌊n/2⌋} a_i (x_(n-1-i) - x_(i)))² / SS_total；
    - z = (-ln(1-W) - 1) / sqrt(2/n)，p = 1 - Φ(z)。
    """
    data = _to_float_list(values, "values")
    n = len(data)
    if n < _SW_MIN_N or n > _SW_MAX_N:
        return None

    data_sorted = sorted(data)
    mean = sum(data) / n
    ss_total = sum((x - mean) ** 2 for x in data)
    if ss_total == 0:
        return None

    numerator = 0.0
    for i in range(n // 2):
        a_i = _shapiro_wilk_coefficient(i + 1, n)
        numerator += a_i * (data_sorted[n - 1 - i] - data_sorted[i])

    w = numerator ** 2 / ss_total

    if w >= 1.0:
        z = math.inf
    else:
        z = (-math.log(1.0 - w) - 1.0) / math.sqrt(2.0 / n)
    p_value = clamp(1.0 - norm_cdf(z), 0.0, 1.0)

    return StatisticalTest(
        name="Shapiro-Wilk",
        statistic=w,
        p_value=p_value,
        reject_null=p_value < alpha,
        alpha=alpha,
    )


def interpret_test(test: StatisticalTest) -> str:
    """将检验结论翻译为一句话说明（便于报表展示）。"""
    level = f"{test.alpha * 100:g}%"
    p_text = f"p = {test.p_value:.4f}"
    if test.name in _NORMALITY_TESTS:
        if test.reject_null:
            return f"在 {level} 显著性水平下拒绝正态性假设（{p_text}）"
        return f"在 {level} 显著性水平下不能拒绝正态性假设（{p_text}）"

    if test.reject_null:
        return f"拒绝原假设（{p_text}）"
    return f"不能拒绝原假设（{p_text}）"
