"""
core.stats 内部共用的小工具：输入转换、异常类型与安全数值运算。

仅供 core.stats 内部模块使用，不对外暴露业务语义。
"""

from typing import Iterable, List


class EmptyInputError(ValueError):
    """样本为空时抛出的前置条件异常（继承 ValueError，便于上层统一捕获）。"""


def _to_float_list(
    values: Iterable[float],
    name: str,
    allow_empty: bool = False,
) -> List[float]:
    """
    将任意可迭代对象转换为 float 列表，并做基础校验。

    参数：
    - values: 输入序列；
    - name: 参数名称，用于报错信息；
    - allow_empty: 是否允许空序列，默认不允许。

    说明：
    - 返回的是新列表，后续排序等操作不会修改调用方的原始数据。
    """
    try:
        data = [float(v) for v in values]
    except TypeError as exc:
        raise ValueError(f"{name} 必须是可迭代的数值序列。") from exc
    except ValueError as exc:
        raise ValueError(f"{name} 中存在无法转换为浮点数的元素。") from exc

    if not data and not allow_empty:
        raise EmptyInputError(f"{name} 不能为空。")
    return data


def safe_divide(num: float, den: float) -> float:
    """安全除法：分母为 0 时返回 0。"""
    return 0.0 if den == 0 else num / den


def clamp(value: float, lower: float, upper: float) -> float:
    """将 value 截断到 [lower, upper] 区间。"""
    return max(lower, min(upper, value))
