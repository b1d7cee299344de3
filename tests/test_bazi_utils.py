import sys
import os
import random
from datetime import date

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bazi_utils import (
    FORTUNE_STICKS,
    TAI_SUI_REMEDIES,
    build_analysis_prompt,
    build_daily_prompt,
    build_oracle_prompt,
    compose_daily_fortune,
    draw_fortune_stick,
    draw_hexagram_svg,
    get_tai_sui_details,
    get_tai_sui_remedies,
    get_tai_sui_zodiacs,
)
from logic import FourPillars, GanZhi, Hexagram, YaoLine
from text_utils import truncate_prompt

TODAY_PILLARS = FourPillars(
    year=GanZhi("丙", "午"),
    month=GanZhi("甲", "午"),
    day=GanZhi("庚", "申"),
    hour=GanZhi("丙", "子"),
)
BIRTH = date(1990, 6, 15)
TODAY = date(2026, 6, 1)


def make_hexagram(totals):
    return Hexagram(tuple(YaoLine.from_sum(t, i) for i, t in enumerate(totals, start=1)))


def test_daily_fortune_fire_against_metal():
    fortune = compose_daily_fortune("丙", TODAY_PILLARS, BIRTH, TODAY)

    scores = {item["dimension"]: item["score"] for item in fortune["radar"]}
    assert scores == {"wealth": 70, "career": 50, "love": 50, "health": 50, "creativity": 50}
    wealth = next(item for item in fortune["radar"] if item["dimension"] == "wealth")
    assert wealth["label"] == "财富"
    assert "财星" in wealth["note"]

    assert fortune["relation"]["overcomes"] is True
    assert fortune["today_ganzhi"] == "庚申"
    assert "庚申" in fortune["eastern"]
    assert "丙午" in fortune["eastern"]
    assert fortune["energy"] == 65


def test_daily_fortune_keyword_and_quote_indices():
    fortune = compose_daily_fortune("丙", TODAY_PILLARS, BIRTH, TODAY)
    # 庚=6, 申=8, 生日 15 -> (6+8+15)%8 = 5
    assert fortune["keyword"] == "沉潜"
    # (6+8)//2 % 3 = 1
    assert fortune["quote"].startswith("喧嚣之中")


def test_daily_fortune_booster_and_avoidance():
    fortune = compose_daily_fortune("丙", TODAY_PILLARS, BIRTH, TODAY)
    assert fortune["booster"] == {
        "color": "白色、金色、灰色",
        "number": "8",
        "direction": "西",
        "item": "羽毛书签",
    }
    assert fortune["avoidance"] == ["忌穿红色 - 丙午年火气本已偏旺"]


def test_metal_day_master_on_fire_day():
    pillars = FourPillars(GanZhi("丙", "午"), GanZhi("甲", "午"), GanZhi("丙", "寅"), GanZhi("戊", "子"))
    fortune = compose_daily_fortune("庚", pillars, BIRTH, TODAY)
    assert fortune["relation"]["is_overcome_by"] is True
    assert "官杀" in fortune["eastern"]
    assert any(item.startswith("忌与人正面口角") for item in fortune["avoidance"])
    assert any(item.startswith("忌熬夜") for item in fortune["avoidance"])
    assert any(item.startswith("忌冲动决策") for item in fortune["avoidance"])


def test_western_text_mentions_sign_and_numbers():
    fortune = compose_daily_fortune("丙", TODAY_PILLARS, BIRTH, TODAY)
    assert "双子座" in fortune["western"]
    assert "生命灵数4" in fortune["western"]


def test_tai_sui_for_horse_year():
    assert get_tai_sui_zodiacs("午") == ["马", "鼠", "牛", "兔"]
    kinds = [item["type"] for item in get_tai_sui_details("午")]
    assert kinds == ["值太岁", "冲太岁", "害太岁", "破太岁"]


def test_tai_sui_for_rat_year():
    assert get_tai_sui_zodiacs("子") == ["鼠", "马", "羊", "鸡"]


def test_tai_sui_remedies():
    assert get_tai_sui_remedies("鼠", "午") == TAI_SUI_REMEDIES["冲太岁"]
    assert get_tai_sui_remedies("龙", "午") == ["保持心态平和"]


def test_fortune_stick_seed_and_rng():
    assert draw_fortune_stick(seed=0)["number"] == 1
    assert draw_fortune_stick(seed=len(FORTUNE_STICKS) + 1)["number"] == 2
    first = draw_fortune_stick(rng=random.Random(3))
    second = draw_fortune_stick(rng=random.Random(3))
    assert first == second
    assert first in FORTUNE_STICKS


def test_analysis_prompt_keeps_chart_inside_truncation():
    pillars = FourPillars(GanZhi("庚", "午"), GanZhi("壬", "午"), GanZhi("甲", "子"), GanZhi("甲", "子"))
    prompt = truncate_prompt(build_analysis_prompt(pillars, BIRTH, "女"))
    assert "庚午 壬午 甲子 甲子" in prompt
    assert "日主：甲（木）" in prompt
    assert "海中金" in prompt
    assert "生肖：马" in prompt


def test_oracle_prompt():
    pillars = FourPillars(GanZhi("庚", "午"), GanZhi("壬", "午"), GanZhi("甲", "子"), GanZhi("甲", "子"))
    prompt = build_oracle_prompt("这次面试能过吗？", make_hexagram([3, 4, 5, 4, 5, 4]), pillars)
    assert "这次面试能过吗？" in prompt
    assert "本卦：水山蹇" in prompt
    assert "变卦：水火既济" in prompt
    assert "动爻：1" in prompt

    still = build_oracle_prompt("问", make_hexagram([4] * 6), pillars)
    assert "六爻皆静" in still


def test_daily_prompt():
    fortune = compose_daily_fortune("丙", TODAY_PILLARS, BIRTH, TODAY)
    prompt = build_daily_prompt(fortune, "丙")
    assert "流日：庚申" in prompt
    assert "财富70" in prompt


def test_hexagram_svg():
    svg = draw_hexagram_svg(make_hexagram([5, 5, 5, 4, 4, 4]))
    assert svg.startswith("<svg")
    assert svg.count("<rect") == 9
    assert "#c0392b" not in svg

    moving = draw_hexagram_svg(make_hexagram([6, 4, 4, 4, 4, 4]))
    assert "#c0392b" in moving
