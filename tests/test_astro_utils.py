import sys
import os
from datetime import date

import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from astro_utils import (
    DAILY_HOROSCOPES,
    DEFAULT_HOROSCOPE,
    RISING_SIGN_HINT,
    RISING_SIGN_INVALID,
    get_astrology_chart,
    get_compatible_numbers,
    get_daily_horoscope,
    get_expression_number,
    get_life_path_number,
    get_moon_sign,
    get_numerology_reading,
    get_personality_number,
    get_rising_sign,
    get_soul_urge_number,
    get_sun_sign,
    get_today_number,
    reduce_to_single_digit,
)


@pytest.mark.parametrize("day,sign", [
    (date(2000, 1, 1), "capricorn"),
    (date(2000, 1, 20), "aquarius"),
    (date(2000, 3, 20), "pisces"),
    (date(2000, 3, 21), "aries"),
    (date(1990, 6, 15), "gemini"),
    (date(2000, 12, 25), "capricorn"),
])
def test_sun_sign(day, sign):
    assert get_sun_sign(day)["id"] == sign


def test_moon_sign_approximation():
    # 年内第1天 -> 1%30/2.5 = 0
    assert get_moon_sign(date(2024, 1, 1))["id"] == "aries"
    # 第30天 -> 0
    assert get_moon_sign(date(2024, 1, 30))["id"] == "aries"
    # 第29天 -> int(29/2.5) = 11
    assert get_moon_sign(date(2024, 1, 29))["id"] == "pisces"


def test_rising_sign():
    assert get_rising_sign(None) == {"sign": None, "note": RISING_SIGN_HINT}
    assert get_rising_sign("25:00")["note"] == RISING_SIGN_INVALID
    assert get_rising_sign("abc")["note"] == RISING_SIGN_INVALID
    assert get_rising_sign("00:30")["sign"]["id"] == "aries"
    assert get_rising_sign("13:00")["sign"]["id"] == "libra"


def test_astrology_chart():
    chart = get_astrology_chart(date(1990, 6, 15), "08:00")
    assert chart["sun_sign"]["name"] == "双子座"
    # 480 // 120 = 4
    assert chart["rising_sign"]["id"] == "leo"
    assert chart["rising_note"] is None
    assert "风象" in chart["element_description"]


def test_daily_horoscope_by_sign_and_weekday():
    monday, sunday = date(2026, 6, 1), date(2026, 6, 7)
    assert get_daily_horoscope("aries", monday).startswith("今天适合开展新项目")
    assert get_daily_horoscope("leo", monday) == "魅力四射，适合展示才华或领导团队。"
    assert get_daily_horoscope("cancer", sunday) == "休息充电，为新一周做准备。"
    assert all(len(texts) == 7 for texts in DAILY_HOROSCOPES.values())
    assert len(DAILY_HOROSCOPES) == 12
    assert get_daily_horoscope("ophiuchus", monday) == DEFAULT_HOROSCOPE


def test_astrology_chart_includes_daily_horoscope():
    chart = get_astrology_chart(date(1990, 6, 15), today=date(2026, 6, 1))
    assert chart["daily_horoscope"] == "思维活跃，适合学习和沟通，发表观点。"


def test_reduce_keeps_master_numbers():
    assert reduce_to_single_digit(29) == 11
    assert reduce_to_single_digit(29, keep_master=False) == 2
    assert reduce_to_single_digit(7) == 7


def test_life_path_and_today_number():
    assert get_life_path_number(1990, 6, 15) == 4
    assert get_life_path_number(1990, 4, 15) == 11
    assert get_today_number(date(2026, 6, 1)) == 8


def test_name_numbers():
    assert get_expression_number("abc") == 6
    assert get_soul_urge_number("abc") == 1
    assert get_personality_number("abc") == 5
    assert get_expression_number("A-b C") == 6


def test_compatible_numbers():
    assert get_compatible_numbers(4) == [2, 4, 8]
    assert get_compatible_numbers(11) == [1, 2, 3, 5, 7, 9, 11]
    assert get_compatible_numbers(22) == [1, 2, 3, 4, 6, 8, 22]
    assert get_compatible_numbers(0) == [0]


def test_compatible_numbers_returns_a_copy():
    get_compatible_numbers(2).append(99)
    assert get_compatible_numbers(2) == [2, 4, 8]


def test_numerology_reading():
    reading = get_numerology_reading(date(1990, 6, 15))
    assert reading["life_path"]["number"] == 4
    assert reading["life_path"]["compatible"] == [2, 4, 8]
    assert reading["birthday"]["number"] == 15
    assert "expression" not in reading

    named = get_numerology_reading(date(1990, 6, 15), "abc")
    assert named["expression"]["number"] == 6
