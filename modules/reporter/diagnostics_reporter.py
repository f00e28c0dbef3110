"""
modules.reporter.diagnostics_reporter: 把 AnalysisResult 整理为 DataFrame，并写出 Excel 报表。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from core.logger import get_logger
from core.stats import StatisticalTest, format_stat, interpret_hill_index, interpret_test
from modules.diagnostics.diagnostics_engine import AnalysisResult

_logger = get_logger(__name__)

SHEET_ORDER = ("Summary", "Fits", "Tests", "Tails", "ACF_PACF", "TimeSeries")

_SUMMARY_LABELS = {
    "count": "样本量",
    "mean": "均值",
    "variance": "方差",
    "std_dev": "标准差",
    "median": "中位数",
    "skewness": "偏度",
    "kurtosis": "超额峰度",
    "min": "最小值",
    "max": "最大值",
    "p5": "P5",
    "p25": "P25",
    "p50": "P50",
    "p75": "P75",
    "p95": "P95",
}


def _ensure_directory(path: Path) -> None:
    """确保目录存在，如不存在则递归创建。"""
    path.mkdir(parents=True, exist_ok=True)


def _metric_rows(section: str, items: List[Tuple[str, float]]) -> List[Dict[str, Any]]:
    return [
        {"section": section, "metric": name, "value": value, "display": format_stat(value)}
        for name, value in items
    ]


def _build_summary_table(result: AnalysisResult) -> pd.DataFrame:
    """
    总览表：描述统计 + AR(1) + 单位根检验 + 最优模型。

    输出列：section / metric / value / display（display 为格式化后的展示字符串）。
    """
    summary = result.summary.to_dict()
    rows = _metric_rows(
        "描述统计",
        [(_SUMMARY_LABELS.get(k, k), float(v)) for k, v in summary.items()],
    )

    ar1 = result.time_series.ar1
    rows += _metric_rows(
        "AR(1)",
        [("phi", ar1.phi), ("t_stat", ar1.t_stat), ("r_squared", ar1.r_squared)],
    )
    rows.append(
        {"section": "AR(1)", "metric": "stationary", "value": float(ar1.stationary),
         "display": "是" if ar1.stationary else "否"}
    )

    unit_root = result.time_series.unit_root
    rows += _metric_rows(
        "单位根检验",
        [("statistic", unit_root.statistic), ("p_value", unit_root.p_value)],
    )
    rows.append(
        {"section": "单位根检验", "metric": "classification", "value": float("nan"),
         "display": unit_root.classification}
    )

    best = result.model_ranking[0]
    rows.append(
        {"section": "模型比较", "metric": "best_model", "value": best.aic,
         "display": best.name}
    )
    return pd.DataFrame(rows, columns=["section", "metric", "value", "display"])


def _build_fits_table(result: AnalysisResult) -> pd.DataFrame:
    """分布拟合表：每个候选分布一行，按 AIC 升序，附参数与排名。"""
    fits = {
        fit.name: fit for fit in (result.normal_fit, result.laplace_fit, result.t_fit)
    }
    rows: List[Dict[str, Any]] = []
    for rank, comparison in enumerate(result.model_ranking, start=1):
        fit = fits[comparison.name]
        rows.append(
            {
                "rank": rank,
                "model": comparison.name,
                "params": ", ".join(f"{k}={format_stat(v)}" for k, v in fit.params.items()),
                "num_params": fit.num_params,
                "log_likelihood": comparison.log_likelihood,
                "aic": comparison.aic,
                "bic": comparison.bic,
            }
        )
    return pd.DataFrame(rows)


def _test_row(name: str, test: Optional[StatisticalTest], alpha: float) -> Dict[str, Any]:
    if test is None:
        return {
            "test": name,
            "statistic": float("nan"),
            "p_value": float("nan"),
            "reject_null": None,
            "alpha": alpha,
            "conclusion": "未计算（样本量超出适用范围）",
        }
    return {
        "test": test.name,
        "statistic": test.statistic,
        "p_value": test.p_value,
        "reject_null": test.reject_null,
        "alpha": test.alpha,
        "conclusion": interpret_test(test),
    }


def _build_tests_table(result: AnalysisResult) -> pd.DataFrame:
    """正态性检验表：JB / KS / AD / SW 各一行，SW 未计算时保留占位行。"""
    alpha = result.jarque_bera.alpha
    rows = [
        _test_row("Jarque-Bera", result.jarque_bera, alpha),
        _test_row("Kolmogorov-Smirnov", result.kolmogorov_smirnov, alpha),
        _test_row("Anderson-Darling", result.anderson_darling, alpha),
        _test_row("Shapiro-Wilk", result.shapiro_wilk, alpha),
    ]
    return pd.DataFrame(rows)


def _build_tails_table(result: AnalysisResult) -> pd.DataFrame:
    """尾部风险表：VaR / CVaR / Hill 指数 + 风险画像。"""
    tails = result.tails
    profile = result.risk_profile
    drawdown = profile.drawdown

    rows = _metric_rows(
        "尾部风险",
        [
            ("VaR 95%", tails.var95),
            ("VaR 99%", tails.var99),
            ("CVaR 95%", tails.cvar95),
            ("CVaR 99%", tails.cvar99),
            ("Hill 指数（右尾）", tails.hill_index),
        ],
    )
    rows.append(
        {"section": "尾部风险", "metric": "右尾厚度", "value": tails.hill_index,
         "display": interpret_hill_index(tails.hill_index)}
    )
    rows += _metric_rows(
        "风险画像",
        [
            ("左尾指数", profile.left_tail_index),
            ("最大回撤", drawdown.max_drawdown),
            ("最大回撤比例", drawdown.max_drawdown_percent),
            ("峰值下标", float(drawdown.peak_index)),
            ("谷值下标", float(drawdown.trough_index)),
            ("下行偏差", profile.downside_deviation),
            ("Sortino 比率", profile.sortino_ratio),
        ],
    )
    return pd.DataFrame(rows, columns=["section", "metric", "value", "display"])


def _build_acf_table(result: AnalysisResult) -> pd.DataFrame:
    """ACF / PACF 表：按滞后阶对齐，显著性基于 ±1.96/√n。"""
    ts = result.time_series
    pacf_by_lag = {p.lag: p for p in ts.pacf}
    rows: List[Dict[str, Any]] = []
    for point in ts.acf:
        partial = pacf_by_lag.get(point.lag)
        rows.append(
            {
                "lag": point.lag,
                "acf": point.value,
                "acf_significant": point.significant,
                "pacf": partial.value if partial else float("nan"),
                "pacf_significant": partial.significant if partial else False,
            }
        )
    return pd.DataFrame(
        rows, columns=["lag", "acf", "acf_significant", "pacf", "pacf_significant"]
    )


def _build_time_series_table(result: AnalysisResult) -> pd.DataFrame:
    """
    逐期序列表：平方收益 + 滚动均值 / 标准差。

    滚动统计对齐到窗口的最后一期，窗口未满的期数为 NaN。
    """
    ts = result.time_series
    n = len(ts.squared_returns)
    offset = ts.rolling_window - 1

    rolling_mean = [float("nan")] * n
    rolling_std = [float("nan")] * n
    for i, (m, s) in enumerate(zip(ts.rolling_mean, ts.rolling_std)):
        rolling_mean[i + offset] = m
        rolling_std[i + offset] = s

    return pd.DataFrame(
        {
            "t": list(range(1, n + 1)),
            "squared_return": ts.squared_returns,
            "rolling_mean": rolling_mean,
            "rolling_std": rolling_std,
        }
    )


def build_report_tables(result: AnalysisResult) -> Dict[str, pd.DataFrame]:
    """
    将诊断结果整理为若干张 DataFrame（sheet 名 -> 表）。

    输出：
    - 字典，键依次为 "Summary" / "Fits" / "Tests" / "Tails" / "ACF_PACF" / "TimeSeries"。
    """
    return {
        "Summary": _build_summary_table(result),
        "Fits": _build_fits_table(result),
        "Tests": _build_tests_table(result),
        "Tails": _build_tails_table(result),
        "ACF_PACF": _build_acf_table(result),
        "TimeSeries": _build_time_series_table(result),
    }


def generate_diagnostics_report(
    result: AnalysisResult,
    output_path: str | Path,
) -> Dict[str, Any]:
    """
    生成分布诊断 Excel 报表。

    输入：
    - result: run_diagnostics 返回的 AnalysisResult；
    - output_path: xlsx 文件保存路径，父目录不存在时自动创建。

    输出：
    - 字典，包含：
      - "excel_path": 生成的 Excel 文件路径（字符串）；
      - "sheets": 写入的 sheet 名列表。
    """
    excel_path = Path(output_path)
    if excel_path.suffix.lower() != ".xlsx":
        raise ValueError(f"报表文件必须为 .xlsx 格式，当前为：{excel_path.name}")
    _ensure_directory(excel_path.parent)

    tables = build_report_tables(result)
    _logger.info("写入 Excel 报表：%s", excel_path)

    with pd.ExcelWriter(excel_path, engine="xlsxwriter") as writer:
        for sheet_name in SHEET_ORDER:
            df = tables[sheet_name]
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            worksheet = writer.sheets[sheet_name]
            # 列宽按表头长度粗略设置，避免中文标题被截断
            for idx, col in enumerate(df.columns):
                worksheet.set_column(idx, idx, max(12, len(str(col)) + 4))

    return {"excel_path": str(excel_path), "sheets": list(SHEET_ORDER)}
