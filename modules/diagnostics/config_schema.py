"""
modules.diagnostics.config_schema: 诊断配置的结构定义与校验。

YAML 由 core.utils.config_loader.load_yaml 读取为 dict，
再经 load_diagnostics_config 填充默认值并校验取值范围。
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass
class AnalysisConfig:
    """
    统计分析参数。

    说明：
    - alpha: 各项正态性检验的显著性水平，取值 (0, 1)；
    - max_lag: ACF / PACF 的最大滞后阶；
    - rolling_window: 滚动均值 / 标准差的窗口长度；
    - downside_threshold: 下行偏差与 Sortino 比率的目标收益率（MAR）；
    - min_sample_size: 允许进入分析的最小样本量，低于此值直接报错。
    """

    alpha: float = 0.05
    max_lag: int = 20
    rolling_window: int = 20
    downside_threshold: float = 0.0
    min_sample_size: int = 3


@dataclass
class InputConfig:
    """
    输入数据配置。

    说明：
    - column: 表格文件中样本所在列名；为空时取第一个数值列。
    """

    column: Optional[str] = None


@dataclass
class ReportConfig:
    """
    报表输出配置。

    说明：
    - excel_path: 默认的 Excel 输出路径；为空时只在命令行预览，不落盘。
    """

    excel_path: Optional[str] = None


@dataclass
class DiagnosticsConfig:
    """收益率分布诊断的整体配置对象。"""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    input: InputConfig = field(default_factory=InputConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def _section(raw_config: Mapping[str, Any], key: str) -> Dict[str, Any]:
    section = raw_config.get(key) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"配置项 {key} 必须是映射结构，当前为: {type(section).__name__}")
    return dict(section)


def _positive_int(value: Any, key: str, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} 必须为整数，当前为: {value!r}")
    if value < minimum:
        raise ValueError(f"{key} 必须 >= {minimum}，当前为: {value}")
    return value


def _optional_str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{key} 必须为非空字符串，当前为: {value!r}")
    return value


def load_diagnostics_config(raw_config: Mapping[str, Any]) -> DiagnosticsConfig:
    """
    从字典（通常由 YAML 解析而来）构建 DiagnosticsConfig 对象，并做基础校验与默认值填充。

    期望的配置结构大致为（示例）：

    - analysis:
        alpha: 0.05
        max_lag: 20
        rolling_window: 20
        downside_threshold: 0.0
        min_sample_size: 3
    - input:
        column: "daily_return"
    - report:
        excel_path: "output/diagnostics.xlsx"

    缺少的配置段 / 字段使用默认值；空字典得到全默认配置。
    取值非法时抛出 ValueError，错误信息为中文并指明出错的配置项。
    """
    if raw_config is None:
        raw_config = {}

    analysis_raw = _section(raw_config, "analysis")
    defaults = AnalysisConfig()

    alpha_raw = analysis_raw.get("alpha", defaults.alpha)
    try:
        alpha = float(alpha_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"analysis.alpha 必须为数值，当前为: {alpha_raw!r}") from exc
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"analysis.alpha 必须位于 (0, 1) 区间，当前为: {alpha}")

    threshold_raw = analysis_raw.get("downside_threshold", defaults.downside_threshold)
    try:
        downside_threshold = float(threshold_raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"analysis.downside_threshold 必须为数值，当前为: {threshold_raw!r}"
        ) from exc
    if not math.isfinite(downside_threshold):
        raise ValueError(f"analysis.downside_threshold 必须为有限值，当前为: {downside_threshold}")

    analysis = AnalysisConfig(
        alpha=alpha,
        max_lag=_positive_int(analysis_raw.get("max_lag", defaults.max_lag), "analysis.max_lag"),
        rolling_window=_positive_int(
            analysis_raw.get("rolling_window", defaults.rolling_window),
            "analysis.rolling_window",
        ),
        downside_threshold=downside_threshold,
        min_sample_size=_positive_int(
            analysis_raw.get("min_sample_size", defaults.min_sample_size),
            "analysis.min_sample_size",
        ),
    )

    input_raw = _section(raw_config, "input")
    report_raw = _section(raw_config, "report")

    return DiagnosticsConfig(
        analysis=analysis,
        input=InputConfig(column=_optional_str(input_raw.get("column"), "input.column")),
        report=ReportConfig(
            excel_path=_optional_str(report_raw.get("excel_path"), "report.excel_path"),
        ),
    )
