"""
modules.reporter: 报表输出模块。

当前提供：
- build_report_tables: 将诊断结果整理为按 sheet 划分的 DataFrame；
- generate_diagnostics_report: 将上述表格写入 Excel 报表。
"""

from .diagnostics_reporter import build_report_tables, generate_diagnostics_report

__all__ = ["build_report_tables", "generate_diagnostics_report"]
