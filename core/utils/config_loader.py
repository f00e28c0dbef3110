"""
core.utils.config_loader: 读取 YAML 配置为 dict，结构校验交给 modules 下各自的 config_schema。

禁止引用 modules 下的任何内容。
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from core.logger import get_logger

_logger = get_logger(__name__)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    读取 YAML 配置文件。

    返回：
    - 顶层映射对应的 dict；空文件、只有注释或顶层不是映射时返回 {}。

    异常：
    - FileNotFoundError: 文件不存在；
    - yaml.YAMLError: 语法错误，原样抛出。
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        msg = f"YAML 文件不存在：{cfg_path}"
        _logger.error(msg)
        raise FileNotFoundError(msg)

    content = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    if content is None:
        return {}
    if not isinstance(content, dict):
        _logger.warning("YAML 顶层不是映射（%s），按空配置处理：%s", type(content).__name__, cfg_path)
        return {}
    return content
