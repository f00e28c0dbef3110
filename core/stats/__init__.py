"""
core.stats: 统计学底层（特殊函数、描述统计、分布拟合、正态性检验、尾部风险、时间序列诊断）

本模块仅提供通用统计学算法，不包含任何业务逻辑，也不做任何 I/O 或日志输出。
"""

from ._common import EmptyInputError, clamp, safe_divide
from .descriptive import (
    SummaryStats,
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
from .fit import (
    DistributionFit,
    LaplaceFit,
    ModelComparison,
    NormalFit,
    StudentTFit,
    compare_distributions,
    compute_aic,
    compute_bic,
    compute_log_likelihood,
    fit_all,
    fit_laplace,
    fit_normal,
    fit_student_t,
    laplace_dist_pdf,
    normal_pdf,
    student_t_pdf,
)
from .hypothesis_test import (
    StatisticalTest,
    anderson_darling_test,
    interpret_test,
    jarque_bera_test,
    kolmogorov_smirnov_test,
    shapiro_wilk_test,
)
from .optimize import golden_section_search
from .special_functions import (
    beta_inc,
    chi2_cdf,
    erf,
    erf_inv,
    erfc,
    gamma,
    gamma_inc,
    laplace_pdf,
    log_gamma,
    norm_cdf,
    norm_inv,
    norm_pdf,
    t_cdf,
    t_inv,
    t_pdf,
)
from .tail_risk import (
    DrawdownResult,
    RiskProfile,
    TailMetrics,
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
from .time_series import (
    ACFPoint,
    AR1Fit,
    TimeSeriesDiagnostics,
    UnitRootTest,
    adf_test,
    compute_acf,
    compute_pacf,
    compute_rolling_stats,
    compute_squared_returns,
    compute_time_series_diagnostics,
    fit_ar1,
)

__all__ = [
    "EmptyInputError",
    "clamp",
    "safe_divide",
    # special functions
    "erf",
    "erfc",
    "erf_inv",
    "norm_cdf",
    "norm_pdf",
    "norm_inv",
    "log_gamma",
    "gamma",
    "beta_inc",
    "gamma_inc",
    "t_cdf",
    "t_pdf",
    "t_inv",
    "chi2_cdf",
    "laplace_pdf",
    "golden_section_search",
    # descriptive
    "SummaryStats",
    "welford",
    "quantile",
    "compute_median",
    "compute_iqr",
    "compute_mad",
    "compute_skewness",
    "compute_kurtosis",
    "compute_summary_stats",
    "format_stat",
    # fitting
    "DistributionFit",
    "NormalFit",
    "LaplaceFit",
    "StudentTFit",
    "ModelComparison",
    "fit_normal",
    "fit_laplace",
    "fit_student_t",
    "fit_all",
    "normal_pdf",
    "laplace_dist_pdf",
    "student_t_pdf",
    "compute_log_likelihood",
    "compute_aic",
    "compute_bic",
    "compare_distributions",
    # hypothesis tests
    "StatisticalTest",
    "jarque_bera_test",
    "kolmogorov_smirnov_test",
    "anderson_darling_test",
    "shapiro_wilk_test",
    "interpret_test",
    # tail risk
    "TailMetrics",
    "DrawdownResult",
    "RiskProfile",
    "compute_var",
    "compute_cvar",
    "compute_hill_index",
    "compute_left_tail_index",
    "compute_max_drawdown",
    "compute_downside_deviation",
    "compute_sortino_ratio",
    "compute_tail_metrics",
    "compute_risk_profile",
    "interpret_hill_index",
    # time series
    "ACFPoint",
    "AR1Fit",
    "UnitRootTest",
    "TimeSeriesDiagnostics",
    "compute_acf",
    "compute_pacf",
    "compute_rolling_stats",
    "compute_squared_returns",
    "fit_ar1",
    "adf_test",
    "compute_time_series_diagnostics",
]
