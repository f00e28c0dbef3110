"""
modules.diagnostics.diagnostics_engine: 收益率分布诊断的编排层。

只负责样本校验、按顺序调用 core.stats 中的各项算法并组装 AnalysisResult，
不做任何文件读写。
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

from core.logger import get_logger
from core.stats import (
    LaplaceFit,
    ModelComparison,
    NormalFit,
    RiskProfile,
    StatisticalTest,
    StudentTFit,
    SummaryStats,
    TailMetrics,
    TimeSeriesDiagnostics,
    anderson_darling_test,
    compare_distributions,
    compute_risk_profile,
    compute_summary_stats,
    compute_tail_metrics,
    compute_time_series_diagnostics,
    fit_all,
    jarque_bera_test,
    kolmogorov_smirnov_test,
    shapiro_wilk_test,
)
from core.utils.sample_parser import validate_sample
from .config_schema import DiagnosticsConfig

_logger = get_logger(__name__)

# 低于该样本量时仍然分析，但提示结果可靠性有限
_SMALL_SAMPLE_SIZE = 10


class SampleValidationError(ValueError):
    """样本未通过校验（点数过少、取值完全相同、含 NaN / inf）时抛出。"""


@dataclass
class AnalysisResult:
    """
    单个样本的完整诊断结果。

    字段说明：
    - summary: 描述性统计；
    - normal_fit / laplace_fit / t_fit: 三种候选分布的拟合结果；
    - model_ranking: 按 AIC 升序排列的模型比较；
    - jarque_bera / kolmogorov_smirnov / anderson_darling: 正态性检验；
    - shapiro_wilk: Shapiro-Wilk 检验，样本量超出 [3, 5000] 时为 None；
    - tails: VaR / CVaR / Hill 指数；
    - risk_profile: 左尾指数、最大回撤、下行偏差、Sortino 比率；
    - time_series: ACF / PACF、滚动统计、AR(1)、单位根检验。
    """

    summary: SummaryStats
    normal_fit: NormalFit
    laplace_fit: LaplaceFit
    t_fit: StudentTFit
    model_ranking: List[ModelComparison]
    jarque_bera: StatisticalTest
    kolmogorov_smirnov: StatisticalTest
    anderson_darling: StatisticalTest
    shapiro_wilk: Optional[StatisticalTest]
    tails: TailMetrics
    risk_profile: RiskProfile
    time_series: TimeSeriesDiagnostics

    @property
    def normality_tests(self) -> List[StatisticalTest]:
        """已产生结果的正态性检验列表（跳过为 None 的 Shapiro-Wilk）。"""
        tests = [self.jarque_bera, self.kolmogorov_smirnov, self.anderson_darling, self.shapiro_wilk]
        return [t for t in tests if t is not None]

    @property
    def best_model(self) -> str:
        return self.model_ranking[0].name

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        # asdict 不处理 ClassVar，这里补上分布名称与参数，方便序列化后识别
        for key in ("normal_fit", "laplace_fit", "t_fit"):
            fit = getattr(self, key)
            result[key] = {"name": fit.name, **fit.params}
        return result


def _coerce_sample(sample: Iterable[float]) -> List[float]:
    try:
        return [float(v) for v in sample]
    except TypeError as exc:
        raise SampleValidationError("样本必须是可迭代的数值序列。") from exc
    except ValueError as exc:
        raise SampleValidationError("样本中存在无法转换为浮点数的元素。") from exc


def _log_sentinels(result: AnalysisResult) -> None:
    """对“无法计算”的哨兵结果给出 WARNING，便于排查。"""
    if result.shapiro_wilk is None:
        _logger.warning("Shapiro-Wilk 检验仅支持 3 <= n <= 5000，本次未计算。")
    if math.isnan(result.tails.hill_index):
        _logger.warning("样本量不足或右尾阈值非正，Hill 指数未计算。")
    if math.isnan(result.risk_profile.left_tail_index):
        _logger.warning("样本量不足或左尾阈值非正，左尾指数未计算。")
    if math.isnan(result.time_series.ar1.phi):
        _logger.warning("AR(1) 拟合所需数据不足，结果为 NaN。")
    if math.isnan(result.time_series.unit_root.statistic):
        _logger.warning("单位根检验所需数据不足，结果为 NaN。")


def run_diagnostics(
    sample: Iterable[float],
    config: Optional[DiagnosticsConfig] = None,
) -> AnalysisResult:
    """
    运行收益率分布诊断的主入口。

    流程：
    1. 样本校验（validate_sample + 配置中的最小样本量）；
    2. 描述性统计；
    3. Normal / Laplace / Student-t 拟合，并按 AIC 排序；
    4. 正态性检验：JB 复用描述统计中的偏度 / 峰度，KS 与 AD 对照 Normal 拟合，
       Shapiro-Wilk 可能为 None；
    5. 尾部风险指标与风险画像；
    6. 时间序列诊断。

    各项指标相互独立：某一项返回 NaN / None 哨兵时，其余指标照常计算。

    参数：
    - sample: 收益率样本（按时间顺序）；
    - config: DiagnosticsConfig，为空时使用全默认配置。

    返回：
    - AnalysisResult。

    异常：
    - SampleValidationError: 样本不满足分析前提。
    """
    cfg = config or DiagnosticsConfig()
    analysis = cfg.analysis

    data = _coerce_sample(sample)
    valid, error = validate_sample(data)
    if not valid:
        raise SampleValidationError(error)
    if len(data) < analysis.min_sample_size:
        raise SampleValidationError(
            f"样本量 {len(data)} 低于配置的最小样本量 {analysis.min_sample_size}。"
        )
    if len(data) < _SMALL_SAMPLE_SIZE:
        _logger.warning("仅有 %d 个数据点，结果可能不可靠。", len(data))

    _logger.info("开始诊断，样本量 n=%d，alpha=%s。", len(data), analysis.alpha)

    summary = compute_summary_stats(data)
    if summary.std_dev == 0:
        # 极小量级的样本方差可能下溢为 0，后续分布拟合无法进行
        raise SampleValidationError("样本标准差为 0（数值下溢），无法进行分布拟合。")

    _logger.info("拟合 Normal / Laplace / Student-t 分布。")
    normal_fit, laplace_fit, t_fit = fit_all(data)
    model_ranking = compare_distributions(data, [normal_fit, laplace_fit, t_fit])

    _logger.info("执行正态性检验。")
    alpha = analysis.alpha
    jb = jarque_bera_test(data, summary.skewness, summary.kurtosis, alpha=alpha)
    ks = kolmogorov_smirnov_test(data, normal_fit.mu, normal_fit.sigma, alpha=alpha)
    ad = anderson_darling_test(data, normal_fit.mu, normal_fit.sigma, alpha=alpha)
    sw = shapiro_wilk_test(data, alpha=alpha)

    _logger.info("计算尾部风险与时间序列诊断。")
    tails = compute_tail_metrics(data)
    risk_profile = compute_risk_profile(data, analysis.downside_threshold)
    time_series = compute_time_series_diagnostics(
        data,
        max_lag=analysis.max_lag,
        rolling_window=analysis.rolling_window,
    )

    result = AnalysisResult(
        summary=summary,
        normal_fit=normal_fit,
        laplace_fit=laplace_fit,
        t_fit=t_fit,
        model_ranking=model_ranking,
        jarque_bera=jb,
        kolmogorov_smirnov=ks,
        anderson_darling=ad,
        shapiro_wilk=sw,
        tails=tails,
        risk_profile=risk_profile,
        time_series=time_series,
    )
    _log_sentinels(result)
    _logger.info("诊断完成，AIC 最优模型：%s。", result.best_model)
    return result
