"""
分布拟合工具（Normal / Laplace / Student-t 的极大似然估计与模型比较）。

设计目标：
- 仅实现通用统计学层面的参数估计与模型比较逻辑；
- 不依赖 SciPy，密度函数、优化器均来自 core.stats 内部实现；
- 所有 fit_* 函数都是纯函数：输入样本不会被修改，返回不可变的拟合结果。

约定：
- Normal: 闭式 MLE，均值 + 总体方差（分母为 n）；
- Laplace: 位置 = 中位数，尺度 b = 相对中位数的平均绝对离差；
- Student-t: 位置 / 尺度取 Normal MLE 作为初值，自由度 ν 在 [2, 50] 上
  用黄金分割搜索最大化标准化样本的对数似然，再按 t 分布方差关系修正尺度；
- 模型比较：AIC = 2k - 2lnL，BIC = k ln(n) - 2lnL，按 AIC 升序排列。
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple, Union

from ._common import _to_float_list
from .descriptive import compute_mad, compute_median
from .optimize import golden_section_search
from .special_functions import laplace_pdf, norm_pdf, t_pdf

# 自由度搜索区间与精度
_NU_LOWER = 2.0
_NU_UPPER = 50.0
_NU_TOL = 0.1
# 密度非正时的对数似然惩罚项，保证搜索过程中目标函数始终有限
_INVALID_PDF_PENALTY = -1e10


@dataclass(frozen=True)
class NormalFit:
    """正态分布拟合结果：mu 为均值，sigma 为标准差。"""

    mu: float
    sigma: float

    name = "Normal"
    num_params = 2

    @property
    def params(self) -> Dict[str, float]:
        return {"mu": self.mu, "sigma": self.sigma}

    def pdf(self, x: float) -> float:
        return normal_pdf(x, self.mu, self.sigma)


@dataclass(frozen=True)
class LaplaceFit:
    """Laplace 分布拟合结果：mu 为位置（中位数），b 为尺度。"""

    mu: float
    b: float

    name = "Laplace"
    num_params = 2

    @property
    def params(self) -> Dict[str, float]:
        return {"mu": self.mu, "b": self.b}

    def pdf(self, x: float) -> float:
        return laplace_dist_pdf(x, self.mu, self.b)


@dataclass(frozen=True)
class StudentTFit:
    """Student-t 分布拟合结果：mu 位置，sigma 尺度，nu 自由度（保留 1 位小数）。"""

    mu: float
    sigma: float
    nu: float

    name = "Student-t"
    num_params = 3

    @property
    def params(self) -> Dict[str, float]:
        return {"mu": self.mu, "sigma": self.sigma, "nu": self.nu}

    def pdf(self, x: float) -> float:
        return student_t_pdf(x, self.mu, self.sigma, self.nu)


DistributionFit = Union[NormalFit, LaplaceFit, StudentTFit]


@dataclass(frozen=True)
class ModelComparison:
    """单个候选分布的信息准则。"""

    name: str
    log_likelihood: float
    aic: float
    bic: float


def normal_pdf(x: float, mu: float, sigma: float) -> float:
    """N(mu, sigma²) 的概率密度。"""
    if sigma <= 0:
        return float("nan")
    return norm_pdf((x - mu) / sigma) / sigma


def laplace_dist_pdf(x: float, mu: float, b: float) -> float:
    """Laplace(mu, b) 的概率密度。"""
    return laplace_pdf(x, mu, b)


def student_t_pdf(x: float, mu: float, sigma: float, nu: float) -> float:
    """位置-尺度形式的 Student-t 概率密度。"""
    if sigma <= 0:
        return float("nan")
    return t_pdf((x - mu) / sigma, nu) / sigma


def _normal_mle(data: Sequence[float]) -> Tuple[float, float]:
    n = len(data)
    mu = sum(data) / n
    variance = sum((x - mu) ** 2 for x in data) / n
    return mu, math.sqrt(variance)


def fit_normal(values: Sequence[float]) -> NormalFit:
    """
    正态分布极大似然估计。

    返回：
    - NormalFit(mu=样本均值, sigma=总体标准差，分母为 n)。
    """
    data = _to_float_list(values, "values")
    mu, sigma = _normal_mle(data)
    return NormalFit(mu=mu, sigma=sigma)


def fit_laplace(values: Sequence[float]) -> LaplaceFit:
    """
    Laplace 分布极大似然估计。

    返回：
    - LaplaceFit(mu=样本中位数, b=相对中位数的平均绝对离差)。
    """
    data = _to_float_list(values, "values")
    mu = compute_median(sorted(data))
    b = compute_mad(data, center=mu)
    return LaplaceFit(mu=mu, b=b)


def fit_student_t(values: Sequence[float]) -> StudentTFit:
    """
    Student-t 分布参数估计。

    步骤：
    1. 以 Normal MLE 的 (mu, sigma) 作为位置 / 尺度初值，并将样本标准化；
    2. 以 ν ∈ [2, 50]、精度 0.1 做黄金分割搜索，最小化标准化样本在 t(ν) 下的负对数似然；
       某点密度 <= 0 时以 -1e10 计入对数似然，保证目标函数有限；
    3. ν > 2 时按 Var = σ²ν/(ν-2) 修正尺度：σ_refined = σ * sqrt((ν-2)/ν)；
    4. 报告的 ν 四舍五入到 1 位小数。

    异常：
    - ValueError: 样本标准差为 0（无法标准化）。
    """
    data = _to_float_list(values, "values")
    mu, sigma = _normal_mle(data)
    if sigma == 0:
        raise ValueError("样本标准差为 0，无法拟合 Student-t 分布。")

    standardized = [(x - mu) / sigma for x in data]

    def negative_log_likelihood(nu: float) -> float:
        ll = 0.0
        for z in standardized:
            pdf = t_pdf(z, nu)
            if pdf > 0:
                ll += math.log(pdf)
            else:
                ll += _INVALID_PDF_PENALTY
        return -ll

    nu = golden_section_search(negative_log_likelihood, _NU_LOWER, _NU_UPPER, _NU_TOL)

    sigma_refined = sigma * math.sqrt((nu - 2.0) / nu) if nu > 2.0 else sigma

    return StudentTFit(mu=mu, sigma=sigma_refined, nu=round(nu, 1))


def fit_all(values: Sequence[float]) -> Tuple[NormalFit, LaplaceFit, StudentTFit]:
    """依次拟合三种候选分布，返回 (normal, laplace, student_t)。"""
    data = _to_float_list(values, "values")
    return fit_normal(data), fit_laplace(data), fit_student_t(data)


def compute_log_likelihood(
    values: Sequence[float],
    pdf: Callable[[float], float],
) -> float:
    """
    计算样本在给定密度下的对数似然。

    任一数据点的密度 <= 0（或为 NaN）时立即返回 -inf。
    """
    ll = 0.0
    for x in values:
        density = pdf(x)
        if density > 0:
            ll += math.log(density)
        else:
            return -math.inf
    return ll


def compute_aic(log_likelihood: float, num_params: int) -> float:
    """AIC = 2k - 2lnL。"""
    return 2 * num_params - 2 * log_likelihood


def compute_bic(log_likelihood: float, num_params: int, sample_size: int) -> float:
    """BIC = k ln(n) - 2lnL。"""
    return num_params * math.log(sample_size) - 2 * log_likelihood


def compare_distributions(
    values: Sequence[float],
    fits: Sequence[DistributionFit],
) -> List[ModelComparison]:
    """
    对多个拟合结果按 AIC 做模型比较。

    参数：
    - values: 用于拟合的原始样本；
    - fits: 拟合结果列表（NormalFit / LaplaceFit / StudentTFit 任意组合）。

    返回：
    - ModelComparison 列表，按 AIC 升序（越小越好）。
      参数个数 k：Normal / Laplace 为 2，Student-t 为 3。
    """
    data = _to_float_list(values, "values")
    n = len(data)

    results: List[ModelComparison] = []
    for fit in fits:
        ll = compute_log_likelihood(data, fit.pdf)
        results.append(
            ModelComparison(
                name=fit.name,
                log_likelihood=ll,
                aic=compute_aic(ll, fit.num_params),
                bic=compute_bic(ll, fit.num_params, n),
            )
        )

    results.sort(key=lambda r: r.aic)
    return results
