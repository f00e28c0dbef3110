# core.utils: 通用工具（文件读取、样本解析与校验、配置加载等）
# 禁止引用 modules 下的任何内容

from core.utils.config_loader import load_yaml
from core.utils.file_io import DataLoader
from core.utils.sample_parser import (
    ParseResult,
    generate_sample_data,
    parse_csv,
    parse_text,
    validate_sample,
)

__all__ = [
    "DataLoader",
    "ParseResult",
    "generate_sample_data",
    "load_yaml",
    "parse_csv",
    "parse_text",
    "validate_sample",
]
