"""
scripts.run_diagnostics

收益率分布诊断入口：读取样本文件与配置，运行完整诊断，打印预览，并可选生成 Excel 报表。
对外提供调用函数 run_diagnostics_report(data_path, output_path?, column?, config_path?) -> dict。
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Optional

# 将项目根目录加入 sys.path，保证从命令行直接运行脚本时可以 import modules/core
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from core.logger import get_logger
from core.stats import format_stat
from core.utils import DataLoader, load_yaml
from modules.diagnostics import load_diagnostics_config, run_diagnostics
from modules.reporter import generate_diagnostics_report

_logger = get_logger("scripts.run_diagnostics")


def run_diagnostics_report(
    data_path: str,
    output_path: Optional[str] = None,
    column: Optional[str] = None,
    config_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    读取样本并运行诊断，按需写出 Excel 报表，返回预览信息。

    输入：
    - data_path: 样本文件路径（csv / txt / xlsx，由 core.utils.DataLoader 读取）；
    - output_path: 可选，报表 Excel 保存路径；未传时使用配置 report.excel_path，仍为空则不落盘；
    - column: 可选，样本所在列名；未传时使用配置 input.column，仍为空则取第一个数值列；
    - config_path: 可选，诊断配置 YAML 路径；未传则使用 configs/diagnostics.yaml（不存在时用默认配置）。

    输出：
    - 字典，包含：
      - "n": 样本量；
      - "best_model": AIC 最优的分布；
      - "result": AnalysisResult 对象；
      - "excel_path": 报表路径（未生成时为 None）；
      - "sheets": 报表 sheet 名列表（未生成时为空列表）。
    """
    if config_path is None:
        cfg_path = _PROJECT_ROOT / "configs" / "diagnostics.yaml"
        raw_config = load_yaml(cfg_path) if cfg_path.exists() else {}
    else:
        raw_config = load_yaml(config_path)
    config = load_diagnostics_config(raw_config)

    sample_column = column or config.input.column
    sample = DataLoader().read_sample(Path(data_path), column=sample_column)
    _logger.info("已读取样本 %d 条：%s", len(sample), data_path)

    result = run_diagnostics(sample, config)

    excel_target = output_path or config.report.excel_path
    excel_path: Optional[str] = None
    sheets = []
    if excel_target:
        outputs = generate_diagnostics_report(result, excel_target)
        excel_path = outputs["excel_path"]
        sheets = outputs["sheets"]

    return {
        "n": result.summary.count,
        "best_model": result.best_model,
        "result": result,
        "excel_path": excel_path,
        "sheets": sheets,
    }


def main() -> None:
    """命令行入口：接收数据路径，可选报表输出路径与列名，调用 run_diagnostics_report 并打印预览。"""
    if len(sys.argv) < 2:
        print("用法: python scripts/run_diagnostics.py <数据路径> [报表输出路径.xlsx] [列名]")
        print("示例: python scripts/run_diagnostics.py data/returns.csv")
        print("示例: python scripts/run_diagnostics.py data/returns.csv outputs/diagnostics.xlsx daily_return")
        sys.exit(1)
    data_path = sys.argv[1]
    output_path = sys.argv[2] if len(sys.argv) > 2 and sys.argv[2].strip() else None
    column = sys.argv[3] if len(sys.argv) > 3 and sys.argv[3].strip() else None

    preview = run_diagnostics_report(data_path=data_path, output_path=output_path, column=column)
    result = preview["result"]
    summary = result.summary

    print("分布诊断完成，预览：")
    print(f"  n: {preview['n']}")
    print(f"  mean: {format_stat(summary.mean)}  std: {format_stat(summary.std_dev)}")
    print(f"  skewness: {format_stat(summary.skewness)}  kurtosis: {format_stat(summary.kurtosis)}")
    print(f"  best_model (AIC): {preview['best_model']}")
    for test in result.normality_tests:
        verdict = "拒绝正态" if test.reject_null else "不拒绝正态"
        print(f"  {test.name}: p={format_stat(test.p_value)} -> {verdict}")
    print(f"  VaR95: {format_stat(result.tails.var95)}  CVaR95: {format_stat(result.tails.cvar95)}")
    print(f"  unit_root: {result.time_series.unit_root.classification}")
    if preview["excel_path"]:
        print(f"  excel_path: {preview['excel_path']}")
        print(f"  sheets: {preview['sheets']}")


if __name__ == "__main__":
    main()
