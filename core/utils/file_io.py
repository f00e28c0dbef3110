# core/utils/file_io.py
# 样本文件读取：表格文件 -> DataFrame -> 单列有限数值样本

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from core.logger import get_logger

_logger = get_logger(__name__)

_DEFAULT_ENCODINGS = ("utf-8", "gbk", "gb18030")


class DataLoader:
    """
    样本数据加载器。

    - .csv / .txt 走 pd.read_csv，并按 encodings 顺序做编码回退；
    - .xlsx / .xls 走 pd.read_excel（xlsx 需要 openpyxl）；
    - read_sample() 在 read_data() 的基础上抽取一列，只保留有限数值。

    Input:
        encodings: 文本文件的编码尝试顺序，默认 utf-8 -> gbk -> gb18030。
    """

    def __init__(self, encodings: Optional[Sequence[str]] = None) -> None:
        self._encodings: List[str] = list(encodings or _DEFAULT_ENCODINGS)
        self._readers: Dict[str, Callable[..., pd.DataFrame]] = {
            ".csv": self._read_text_table,
            ".txt": self._read_text_table,
            ".xlsx": pd.read_excel,
            ".xls": pd.read_excel,
        }

    @property
    def supported_suffixes(self) -> List[str]:
        return sorted(self._readers)

    def read_data(self, file_path: str | Path, **kwargs: Any) -> pd.DataFrame:
        """
        按后缀读取整张表，kwargs 原样透传给 pandas（sep、sheet_name、header 等）。

        异常：
        - FileNotFoundError: 文件不存在；
        - ValueError: 后缀不受支持，或所有编码都无法解码。
        """
        path = Path(file_path)
        if not path.is_file():
            msg = f"文件不存在，请检查路径：{path.absolute()}"
            _logger.error(msg)
            raise FileNotFoundError(msg)

        reader = self._readers.get(path.suffix.lower())
        if reader is None:
            msg = (
                f"不支持的文件格式：{path.suffix or '(无后缀)'}。"
                f"当前支持：{', '.join(self.supported_suffixes)}。"
            )
            _logger.error(msg)
            raise ValueError(msg)

        df = reader(path, **kwargs)
        _logger.info("已读取 %s：%d 行 x %d 列", path.name, len(df), len(df.columns))
        return df

    def read_sample(
        self,
        file_path: str | Path,
        column: Optional[str] = None,
        **kwargs: Any,
    ) -> List[float]:
        """
        读取文件中的一列作为收益率样本。

        Input:
            file_path: 文件路径；
            column: 样本列名，None 时取第一个数值型列；
            **kwargs: 透传给 read_data。
        Output:
            List[float]: 按原始行序排列的有限数值；空单元格、文本、NaN / inf 均被丢弃。
        """
        df = self.read_data(file_path, **kwargs)
        column = self._resolve_column(df, column, Path(file_path).name)

        values = pd.to_numeric(df[column], errors="coerce").tolist()
        sample = [float(v) for v in values if math.isfinite(v)]

        dropped = len(values) - len(sample)
        if dropped:
            _logger.warning("列 %s 中有 %d 个空值或非数值单元格已被忽略。", column, dropped)
        return sample

    @staticmethod
    def _resolve_column(df: pd.DataFrame, column: Optional[str], file_name: str) -> str:
        if column is not None:
            if column not in df.columns:
                msg = f"{file_name} 中不存在列 {column}，可选列：{', '.join(map(str, df.columns))}"
                _logger.error(msg)
                raise ValueError(msg)
            return column

        for candidate in df.columns:
            if pd.api.types.is_numeric_dtype(df[candidate]):
                _logger.info("未指定列名，使用第一个数值列：%s", candidate)
                return candidate
        msg = f"{file_name} 中没有数值型列，请通过 column 指定样本列。"
        _logger.error(msg)
        raise ValueError(msg)

    def _read_text_table(self, path: Path, **kwargs: Any) -> pd.DataFrame:
        """依次尝试各编码读取文本表格；调用方显式传入的 encoding 排在最前。"""
        encodings = list(self._encodings)
        if "encoding" in kwargs:
            encodings.insert(0, kwargs.pop("encoding"))

        last_error: Optional[Exception] = None
        for enc in encodings:
            try:
                return pd.read_csv(path, encoding=enc, **kwargs)
            except UnicodeError as exc:
                _logger.debug("编码 %s 解码失败，尝试下一个：%s", enc, path.name)
                last_error = exc

        msg = f"使用编码 {encodings} 均无法正确解码文件：{path.absolute()}"
        _logger.error(msg)
        raise ValueError(msg) from last_error
