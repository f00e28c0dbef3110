"""
core.logger: 项目统一日志入口。

约定：
- 所有模块通过 get_logger(__name__) 获取 logger，不直接调用 logging.basicConfig；
- 日志级别由环境变量 DIAGNOSTICS_LOG_LEVEL 控制，默认 INFO；
- 处理器只在项目根 logger 上挂载一次，重复调用不会产生重复输出；
- 禁止引用 modules 下的任何内容。
"""

from __future__ import annotations

import logging
import os

_ROOT_LOGGER_NAME = "diagnostics"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LEVEL_ENV_VAR = "DIAGNOSTICS_LOG_LEVEL"


def _configure_root() -> logging.Logger:
    """
    初始化项目根 logger（幂等）。

    输出：
        已配置好的根 logger。
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    level_name = os.getenv(_LEVEL_ENV_VAR, "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    # 不向 Python 全局 root logger 冒泡，避免与宿主程序的配置重复打印
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """
    获取挂在项目根 logger 之下的子 logger。

    输入：
        name: 通常传 __name__，如 "modules.diagnostics.diagnostics_engine"。
    输出：
        logging.Logger，名称形如 "diagnostics.modules.diagnostics.diagnostics_engine"。
    """
    _configure_root()
    if name == _ROOT_LOGGER_NAME or name.startswith(_ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
