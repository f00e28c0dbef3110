"""
一维优化工具：黄金分割搜索。

当前仅用于 Student-t 分布自由度 ν 的极大似然标定（目标函数视为单峰）。
"""

import math
from typing import Callable

_PHI = (1.0 + math.sqrt(5.0)) / 2.0
_RESPHI = 2.0 - _PHI


def golden_section_search(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float = 1e-5,
) -> float:
    """
    在区间 [a, b] 上用黄金分割法最小化单峰函数 f。

    参数：
    - f: 目标函数（求最小值）；
    - a, b: 搜索区间端点，顺序不限；
    - tol: 区间宽度收敛阈值，必须为正数。

    返回：
    - 最终区间的中点。

    注意：
    - 每次迭代区间按黄金比例几何收缩，因此一定会终止；
    - 仅对区间内单峰的目标函数有意义，非单峰时结果不作保证（不做检测）。
    """
    if not tol > 0:
        raise ValueError(f"tol 必须为正数，当前为: {tol}")
    if a > b:
        a, b = b, a

    x1 = a + _RESPHI * (b - a)
    x2 = b - _RESPHI * (b - a)
    f1 = f(x1)
    f2 = f(x2)

    while abs(b - a) > tol:
        if f1 < f2:
            b = x2
            x2 = x1
            f2 = f1
            x1 = a + _RESPHI * (b - a)
            f1 = f(x1)
        else:
            a = x1
            x1 = x2
            f1 = f2
            x2 = b - _RESPHI * (b - a)
            f2 = f(x2)

    return (a + b) / 2.0
