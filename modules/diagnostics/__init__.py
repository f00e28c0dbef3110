"""
modules.diagnostics: 收益率分布诊断模块。

对外提供：
- load_diagnostics_config: 从 YAML 字典构建 DiagnosticsConfig；
- run_diagnostics: 对单个样本执行完整诊断（描述统计、分布拟合、正态性检验、尾部风险、时间序列）。
"""

from .config_schema import (
    AnalysisConfig,
    DiagnosticsConfig,
    InputConfig,
    ReportConfig,
    load_diagnostics_config,
)
from .diagnostics_engine import AnalysisResult, SampleValidationError, run_diagnostics

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "DiagnosticsConfig",
    "InputConfig",
    "ReportConfig",
    "SampleValidationError",
    "load_diagnostics_config",
    "run_diagnostics",
]
