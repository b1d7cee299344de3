import sys
import os
import random
from datetime import date
from itertools import product

import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from logic import (
    Hexagram,
    YaoLine,
    ZhouyiCalculator,
    decode_hexagram,
    encode_hexagram,
    get_changed_hexagram,
    get_hexagram_info,
)


def make_lines(totals):
    return tuple(YaoLine.from_sum(total, position) for position, total in enumerate(totals, start=1))


def test_line_from_coin_sum():
    old_yin = YaoLine.from_sum(3, 1)
    assert not old_yin.is_yang and old_yin.is_old
    old_yang = YaoLine.from_sum(6, 3)
    assert old_yang.is_yang and old_yang.is_old
    assert not YaoLine.from_sum(4, 2).is_yang
    assert YaoLine.from_sum(5, 2).is_yang
    assert old_yin.name == "初六"
    assert old_yang.name == "九三"
    assert YaoLine.from_sum(5, 6).name == "上九"


def test_line_rejects_bad_values():
    with pytest.raises(ValueError):
        YaoLine.from_sum(7, 1)
    with pytest.raises(ValueError):
        YaoLine.from_sum(4, 0)


def test_encode_is_a_bijection():
    numbers = set()
    for bits in product([False, True], repeat=6):
        lines = make_lines([5 if bit else 4 for bit in bits])
        numbers.add(encode_hexagram(lines))
    assert numbers == set(range(1, 65))


def test_decode_round_trip_and_bounds():
    assert decode_hexagram(1) == (1, 1)
    assert decode_hexagram(64) == (8, 8)
    assert decode_hexagram(21) == (3, 5)
    for n in (0, 65, -3):
        with pytest.raises(ValueError):
            decode_hexagram(n)


def test_all_yin_and_all_yang():
    assert encode_hexagram(make_lines([4] * 6)) == 1
    assert encode_hexagram(make_lines([5] * 6)) == 64
    assert get_hexagram_info(1)["name"] == "坤为地"
    assert get_hexagram_info(64)["name"] == "乾为天"


def test_sequence_number_differs_from_king_wen_order():
    assert get_hexagram_info(1)["king_wen"] == 2
    assert get_hexagram_info(64)["king_wen"] == 1
    assert get_hexagram_info(1)["name"] != "乾为天"


def test_encode_requires_six_lines():
    with pytest.raises(ValueError):
        encode_hexagram(make_lines([4, 5, 4]))


def test_changing_line_scenario():
    hexagram = Hexagram(make_lines([3, 4, 5, 4, 5, 4]))
    assert hexagram.lower_index == 5
    assert hexagram.upper_index == 3
    assert hexagram.number == 21
    assert get_hexagram_info(21)["name"] == "水山蹇"

    assert hexagram.changing_lines == [1]
    assert hexagram.changed_number == 22
    assert get_hexagram_info(22)["name"] == "水火既济"
    # only the first line differs
    assert hexagram.binary == "001010"
    assert hexagram.changed_binary == "101010"


def test_no_changing_line_means_no_changed_hexagram():
    lines = make_lines([4, 5, 4, 5, 5, 4])
    assert get_changed_hexagram(lines) is None
    hexagram = Hexagram(lines)
    assert hexagram.to_dict()["future_hex"] is None
    assert not hexagram.has_change


def test_seeded_cast_is_reproducible():
    first = ZhouyiCalculator(random.Random(42)).cast_hexagram()
    second = ZhouyiCalculator(random.Random(42)).cast_hexagram()
    assert first == second
    assert [line.position for line in first.lines] == [1, 2, 3, 4, 5, 6]
    for line in first.lines:
        assert len(line.coins) == 3
        assert sum(line.coins) == line.total
        assert 3 <= line.total <= 6


def test_meihua_from_birth_date():
    hexagram = ZhouyiCalculator().cast_meihua(date(1990, 6, 15))
    # 上卦 (1990+6)%8+1=5 艮，下卦 (6+15)%8+1=6 离，动爻 (1990+15)%6+1=2
    assert (hexagram.upper_index, hexagram.lower_index) == (5, 6)
    assert hexagram.number == 38
    assert get_hexagram_info(38)["name"] == "山火贲"
    assert hexagram.changing_lines == [2]
    assert get_hexagram_info(hexagram.changed_number)["name"] == "山天大畜"


def test_format_display():
    calc = ZhouyiCalculator()
    text = calc.format_hexagram_display(Hexagram(make_lines([3, 4, 5, 4, 5, 4])))
    assert "【本卦】水山蹇" in text
    assert "【变卦】水火既济" in text
    assert "第1爻: ⚋ 老阴 (动爻)" in text

    still = calc.format_hexagram_display(Hexagram(make_lines([4] * 6)))
    assert "无动爻" in still
