import sys
import os
from datetime import date

import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ganzhi_data import InvalidTokenError
from logic import (
    DateOutOfRangeError,
    FourPillars,
    GanZhi,
    LunarCalendarAdapter,
    LunarDate,
    SexagenaryCalendar,
    calculate_bazi,
    get_today_ganzhi,
)


class FakeAdapter:
    """Fixed lunar data: 2024 year of the dragon, first month, first day."""

    def __init__(self, lunar):
        self.lunar = lunar
        self.calls = []

    def resolve(self, day):
        self.calls.append(day)
        return self.lunar


FAKE_LUNAR = LunarDate(year=2024, month=1, day=1, year_zodiac="龙", month_zodiac="虎", day_zodiac="鸡")


def test_pillar_formulas_with_fixed_lunar_data():
    calendar = SexagenaryCalendar(FakeAdapter(FAKE_LUNAR))
    pillars = calendar.get_four_pillars(date(2024, 2, 10))

    # year (2024-4)%10=0 甲, month (1*2+2+0)%10=4 戊, day (1+6)%10=7 辛, hour (7*2+0)%10=4 戊
    assert pillars.year == GanZhi("甲", "辰")
    assert pillars.month == GanZhi("戊", "寅")
    assert pillars.day == GanZhi("辛", "酉")
    assert pillars.hour == GanZhi("戊", "子")
    assert pillars.day_master == "辛"


def test_hour_stem_follows_day_stem():
    calendar = SexagenaryCalendar(FakeAdapter(FAKE_LUNAR))
    pillars = calendar.get_four_pillars(date(2024, 2, 10), hour_branch="午")
    assert pillars.hour == GanZhi("甲", "午")


def test_invalid_hour_branch():
    calendar = SexagenaryCalendar(FakeAdapter(FAKE_LUNAR))
    with pytest.raises(InvalidTokenError):
        calendar.get_four_pillars(date(2024, 2, 10), hour_branch="甲")


def test_leap_month_is_used_as_plain_month():
    leap = LunarDate(year=2023, month=2, day=10, year_zodiac="兔", month_zodiac="兔", day_zodiac="鼠")
    pillars = SexagenaryCalendar(FakeAdapter(leap)).get_four_pillars(date(2023, 4, 1))
    # (2023-4)%10=9 癸; (2*2+2+9)%10=5 己
    assert pillars.year.full == "癸卯"
    assert pillars.month.stem == "己"


def test_pillar_parity_flag_and_nayin():
    assert GanZhi("甲", "子").is_valid
    assert GanZhi("甲", "子").nayin == "海中金"
    mismatched = GanZhi("乙", "子")
    assert not mismatched.is_valid
    assert mismatched.nayin is None


def test_ganzhi_rejects_unknown_tokens():
    with pytest.raises(InvalidTokenError):
        GanZhi("子", "甲")


def test_four_pillars_text_and_dict():
    pillars = FourPillars(GanZhi("庚", "午"), GanZhi("壬", "午"), GanZhi("甲", "子"), GanZhi("甲", "子"))
    assert str(pillars) == "年柱: 庚午  月柱: 壬午  日柱: 甲子  时柱: 甲子"
    data = pillars.to_dict()
    assert data["day_master"] == "甲"
    assert data["day_master_wuxing"] == "木"
    assert data["year_pillar"]["nayin"] == "路旁土"


@pytest.mark.parametrize("day,year_pillar", [
    (date(1990, 6, 15), "庚午"),
    (date(2000, 8, 1), "庚辰"),
    (date(2026, 6, 1), "丙午"),
])
def test_real_calendar_year_pillar(day, year_pillar):
    pillars = SexagenaryCalendar().get_four_pillars(day)
    assert pillars.year.full == year_pillar


@pytest.mark.parametrize("day", [date(1900, 7, 1), date(1985, 3, 3), date(2024, 11, 30), date(2100, 6, 6)])
def test_year_and_hour_pillars_keep_parity(day):
    calendar = SexagenaryCalendar()
    for branch in ("子", "丑", "午", "亥"):
        pillars = calendar.get_four_pillars(day, hour_branch=branch)
        assert pillars.year.is_valid
        assert pillars.hour.is_valid
        assert pillars.hour.branch == branch


def test_day_ganzhi_matches_day_pillar():
    calendar = SexagenaryCalendar()
    day = date(2025, 5, 20)
    assert calendar.get_day_ganzhi(day) == calendar.get_four_pillars(day).day
    assert get_today_ganzhi(day) == calendar.get_day_ganzhi(day)


def test_real_day_pillar_outside_the_sixty():
    # 2025-03-15 为农历二月十六：日干取丙，实际日支为未，阴阳不配
    day = SexagenaryCalendar().get_day_ganzhi(date(2025, 3, 15))
    assert day.stem == "丙"
    assert day.is_valid is False
    assert day.nayin is None

    payload = day.to_dict()
    assert payload["is_valid"] is False
    assert payload["nayin"] is None
    assert payload["full"] == day.stem + day.branch


def test_out_of_range_year():
    with pytest.raises(DateOutOfRangeError):
        LunarCalendarAdapter().resolve(date(1899, 12, 31))
    with pytest.raises(DateOutOfRangeError):
        SexagenaryCalendar().get_four_pillars(date(2101, 1, 1))


def test_calculate_bazi():
    bazi_str, pillars = calculate_bazi(1990, 6, 15, 12)
    assert pillars.year.full == "庚午"
    assert pillars.hour.branch == "午"
    assert bazi_str.startswith("年柱: 庚午")

    _, no_hour = calculate_bazi(1990, 6, 15)
    assert no_hour.hour.branch == "子"


def test_calculate_bazi_invalid_date():
    with pytest.raises(DateOutOfRangeError):
        calculate_bazi(2023, 2, 30)
