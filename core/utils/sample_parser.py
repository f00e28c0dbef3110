"""
core.utils.sample_parser: 从粘贴文本 / CSV 文本中提取数值样本，样本合法性校验，以及合成样本生成。

说明：
- 仅做分词与校验，不做任何统计计算；
- 数值解析按“前缀”规则：token 开头能读出的最长合法浮点数即为该 token 的值
  （如 "1.5%" 清洗后为 "1.5"，"3e" 读作 3.0），读不出数值的 token 计为无效。
"""

import math
import random
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

# 只保留数字、空白以及 . , - + e E
_DISALLOWED_CHARS = re.compile(r"[^\d\s.,\-+eE]")
_TOKEN_SEPARATORS = re.compile(r"[\s,]+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_SMALL_SAMPLE_WARNING_SIZE = 10
_MIN_VALID_SAMPLE_SIZE = 3

SUPPORTED_DISTRIBUTIONS = ("normal", "t", "laplace", "mixture")


@dataclass
class ParseResult:
    """
    文本解析结果。

    - success: 是否提取到至少一个数值；
    - data: 提取出的数值；
    - error: 失败原因，或成功时的提示信息（样本过小 / 忽略了多少个无效 token），无提示时为 None。
    """

    success: bool
    data: List[float] = field(default_factory=list)
    error: Optional[str] = None


def _parse_float_prefix(token: str) -> Optional[float]:
    match = _FLOAT_PREFIX.match(token)
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def _small_sample_warning(n: int) -> str:
    return f"警告：仅有 {n} 个数据点，结果可能不可靠。"


def parse_text(text: str) -> ParseResult:
    """
    从粘贴文本中提取数值（逗号、空格、换行、制表符分隔均可）。

    规则：
    - 空文本或纯空白：失败，提示“输入为空”；
    - 先把非数值字符替换为空格，再按空白 / 逗号切分；
    - 一个数值都没有：失败；
    - 少于 10 个数值：成功，但附带小样本警告；
    - 否则成功；若有被忽略的 token，在 error 中给出数量。
    """
    if not text or not text.strip():
        return ParseResult(success=False, error="输入为空")

    cleaned = _DISALLOWED_CHARS.sub(" ", text).strip()
    tokens = [t for t in _TOKEN_SEPARATORS.split(cleaned) if t]

    numbers: List[float] = []
    ignored = 0
    for token in tokens:
        value = _parse_float_prefix(token)
        if value is None:
            ignored += 1
        else:
            numbers.append(value)

    if not numbers:
        return ParseResult(success=False, error="输入中没有找到有效数值")

    if len(numbers) < _SMALL_SAMPLE_WARNING_SIZE:
        return ParseResult(success=True, data=numbers, error=_small_sample_warning(len(numbers)))

    return ParseResult(
        success=True,
        data=numbers,
        error=f"已忽略 {ignored} 个无效 token" if ignored else None,
    )


def parse_csv(text: str) -> ParseResult:
    """
    解析 CSV 文本：逐行按逗号切分，所有能解析为有限浮点数的单元格都会被保留。

    表头等非数值单元格会被自然跳过；不区分列。
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if not lines:
        return ParseResult(success=False, error="CSV 内容为空")

    numbers: List[float] = []
    for line in lines:
        for cell in line.split(","):
            value = _parse_float_prefix(cell.strip())
            if value is not None:
                numbers.append(value)

    if not numbers:
        return ParseResult(success=False, error="CSV 中没有找到有效数值")

    if len(numbers) < _SMALL_SAMPLE_WARNING_SIZE:
        return ParseResult(success=True, data=numbers, error=_small_sample_warning(len(numbers)))

    return ParseResult(success=True, data=numbers)


def validate_sample(data: Sequence[float]) -> Tuple[bool, Optional[str]]:
    """
    校验样本能否进入统计分析。

    返回：
    - (True, None) 表示通过；
    - (False, 原因) 表示不通过：样本为空、少于 3 个点、全部取值相同、含 NaN / inf。
    """
    if len(data) == 0:
        return False, "没有提供数据"

    if len(data) < _MIN_VALID_SAMPLE_SIZE:
        return False, f"统计分析至少需要 {_MIN_VALID_SAMPLE_SIZE} 个数据点"

    if all(x == data[0] for x in data):
        return False, "所有取值完全相同，没有可分析的波动"

    if any(not math.isfinite(x) for x in data):
        return False, "数据中包含无效数值（NaN 或 Infinity）"

    return True, None


def _box_muller(rng: random.Random) -> float:
    u1 = 1.0 - rng.random()  # (0, 1]，避免 log(0)
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def _student_t(rng: random.Random, df: int) -> float:
    z = _box_muller(rng)
    chi_sq = sum(_box_muller(rng) ** 2 for _ in range(df))
    return z / math.sqrt(chi_sq / df)


def _laplace(rng: random.Random, mu: float, b: float) -> float:
    u = rng.random() - 0.5
    return mu - b * math.copysign(1.0, u) * math.log(1.0 - 2.0 * abs(u))


def generate_sample_data(
    distribution: str,
    n: int = 1000,
    seed: Optional[int] = None,
) -> List[float]:
    """
    生成合成样本，用于演示与测试。

    参数：
    - distribution: "normal"（N(0,1)，Box-Muller）、"t"（自由度 5，正态 / 卡方比值法）、
      "laplace"（Laplace(0,1)，逆 CDF）、"mixture"（80% N(0,1) + 20% N(0,25)）；
    - n: 样本量；
    - seed: 随机种子，给定时结果可复现。
    """
    if distribution not in SUPPORTED_DISTRIBUTIONS:
        raise ValueError(
            f"不支持的分布类型：{distribution}，可选：{', '.join(SUPPORTED_DISTRIBUTIONS)}"
        )
    if n < 0:
        raise ValueError(f"n 不能为负数，当前为: {n}")

    rng = random.Random(seed)
    data: List[float] = []
    for _ in range(n):
        if distribution == "normal":
            data.append(_box_muller(rng))
        elif distribution == "t":
            data.append(_student_t(rng, 5))
        elif distribution == "laplace":
            data.append(_laplace(rng, 0.0, 1.0))
        else:
            scale = 1.0 if rng.random() < 0.8 else 5.0
            data.append(_box_muller(rng) * scale)
    return data
