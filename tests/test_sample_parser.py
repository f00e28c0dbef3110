import math

import pytest

from core.utils import generate_sample_data, parse_csv, parse_text, validate_sample


def test_parse_text_empty_input():
    for text in ("", "   \n\t "):
        result = parse_text(text)
        assert not result.success
        assert result.data == []
        assert result.error == "输入为空"


def test_parse_text_without_numbers():
    result = parse_text("abc xyz")
    assert not result.success
    assert result.data == []


def test_parse_text_small_sample_warning():
    result = parse_text("1, 2, 3")
    assert result.success
    assert result.data == [1.0, 2.0, 3.0]
    assert "3" in result.error


def test_parse_text_mixed_delimiters_and_symbols():
    text = "1.5%\t-2.5, $3\n4e-2 +5 6 7 8 9 10"
    result = parse_text(text)
    assert result.success
    assert result.data == [1.5, -2.5, 3.0, 0.04, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]
    assert result.error is None


def test_parse_text_counts_ignored_tokens():
    result = parse_text("1 2 3 4 5 6 7 8 9 10 - .")
    assert result.success
    assert len(result.data) == 10
    assert result.error == "已忽略 2 个无效 token"


def test_parse_csv_skips_headers():
    text = "date,ret\n2024-01-02,0.01\n2024-01-03,-0.02\n\n"
    result = parse_csv(text)
    assert result.success
    # 日期单元格按前缀读成 2024，与逐单元格提取的规则一致
    assert result.data == [2024.0, 0.01, 2024.0, -0.02]


def test_parse_csv_keeps_every_numeric_cell():
    rows = ["value,flag"] + [f"{i},x" for i in range(12)]
    result = parse_csv("\n".join(rows))
    assert result.success
    assert result.data == [float(i) for i in range(12)]
    assert result.error is None


def test_parse_csv_failures():
    assert not parse_csv("").success
    assert not parse_csv("a,b\nc,d").success


def test_validate_sample():
    assert validate_sample([]) == (False, "没有提供数据")
    assert not validate_sample([1.0, 2.0])[0]
    assert not validate_sample([1.0, 1.0, 1.0])[0]
    assert not validate_sample([1.0, 2.0, math.inf])[0]
    assert not validate_sample([1.0, 2.0, math.nan])[0]
    assert validate_sample([1.0, 2.0, 3.0]) == (True, None)


@pytest.mark.parametrize("distribution", ["normal", "t", "laplace", "mixture"])
def test_generate_sample_data_is_reproducible(distribution):
    first = generate_sample_data(distribution, 200, seed=42)
    second = generate_sample_data(distribution, 200, seed=42)
    assert first == second
    assert len(first) == 200
    assert all(math.isfinite(x) for x in first)


def test_generate_sample_data_mixture_is_wider_than_normal():
    normal = generate_sample_data("normal", 4000, seed=1)
    mixture = generate_sample_data("mixture", 4000, seed=1)
    var_normal = sum(x * x for x in normal) / len(normal)
    var_mixture = sum(x * x for x in mixture) / len(mixture)
    # 理论方差分别为 1 与 0.8 + 0.2 * 25 = 5.8
    assert var_normal == pytest.approx(1.0, abs=0.15)
    assert var_mixture == pytest.approx(5.8, abs=1.0)


def test_generate_sample_data_rejects_unknown_distribution():
    with pytest.raises(ValueError):
        generate_sample_data("cauchy", 10)
    with pytest.raises(ValueError):
        generate_sample_data("normal", -1)
