"""
Fortune Oracle Logic Module.
Contains the sexagenary calendar, five-element relation engine and I Ching casting.
"""
import random
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from lunar_python import Solar

from ganzhi_data import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    WUXING,
    check_wuxing,
    get_branch_index,
    get_branch_wuxing,
    get_stem_index,
    get_stem_wuxing,
    hour_to_branch,
    is_valid_ganzhi,
    NAYIN_MAP,
    zodiac_to_branch,
)
from zhouyi_data import HEXAGRAM_BY_TRIGRAMS, TRIGRAMS, YAO_POSITION_NAMES


class DateOutOfRangeError(ValueError):
    """Raised when the lunar calendar adapter cannot resolve a date."""


# ================== 农历适配器 ==================

@dataclass(frozen=True)
class LunarDate:
    """农历日期及年/月/日生肖"""
    year: int
    month: int
    day: int
    year_zodiac: str
    month_zodiac: str
    day_zodiac: str


class LunarCalendarAdapter:
    """基于 lunar_python 的公历转农历适配器"""

    MIN_YEAR = 1900
    MAX_YEAR = 2100

    def resolve(self, day: date) -> LunarDate:
        if not self.MIN_YEAR <= day.year <= self.MAX_YEAR:
            raise DateOutOfRangeError(
                f"{day.isoformat()} 超出支持范围 ({self.MIN_YEAR}-{self.MAX_YEAR})"
            )
        try:
            lunar = Solar.fromYmd(day.year, day.month, day.day).getLunar()
            return LunarDate(
                year=lunar.getYear(),
                # 闰月在 lunar_python 中为负数，这里只取月份序号
                month=abs(lunar.getMonth()),
                day=lunar.getDay(),
                year_zodiac=lunar.getYearShengXiao(),
                month_zodiac=lunar.getMonthShengXiao(),
                day_zodiac=lunar.getDayShengXiao(),
            )
        except Exception as e:
            raise DateOutOfRangeError(f"无法解析农历日期 {day.isoformat()}: {e}") from e


# ================== 干支与四柱 ==================

@dataclass(frozen=True)
class GanZhi:
    """一柱干支"""
    stem: str
    branch: str

    def __post_init__(self):
        get_stem_index(self.stem)
        get_branch_index(self.branch)

    @property
    def full(self) -> str:
        return self.stem + self.branch

    @property
    def stem_index(self) -> int:
        return get_stem_index(self.stem)

    @property
    def branch_index(self) -> int:
        return get_branch_index(self.branch)

    @property
    def is_valid(self) -> bool:
        return is_valid_ganzhi(self.stem, self.branch)

    @property
    def nayin(self) -> Optional[str]:
        # 阴阳不配的干支不在六十甲子中，没有纳音
        return NAYIN_MAP.get(self.full)

    def to_dict(self) -> dict:
        return {
            "gan": self.stem,
            "zhi": self.branch,
            "full": self.full,
            "gan_wuxing": get_stem_wuxing(self.stem),
            "zhi_wuxing": get_branch_wuxing(self.branch),
            "nayin": self.nayin,
            "is_valid": self.is_valid,
        }

    def __str__(self):
        return self.full


@dataclass(frozen=True)
class FourPillars:
    """四柱八字"""
    year: GanZhi
    month: GanZhi
    day: GanZhi
    hour: GanZhi

    @property
    def day_master(self) -> str:
        return self.day.stem

    def as_list(self) -> List[GanZhi]:
        return [self.year, self.month, self.day, self.hour]

    def to_dict(self) -> dict:
        return {
            "year_pillar": self.year.to_dict(),
            "month_pillar": self.month.to_dict(),
            "day_pillar": self.day.to_dict(),
            "hour_pillar": self.hour.to_dict(),
            "day_master": self.day_master,
            "day_master_wuxing": get_stem_wuxing(self.day_master),
        }

    def __str__(self):
        return f"年柱: {self.year}  月柱: {self.month}  日柱: {self.day}  时柱: {self.hour}"


class SexagenaryCalendar:
    """干支历 - 公历日期转四柱"""

    def __init__(self, adapter: Optional[LunarCalendarAdapter] = None):
        self.adapter = adapter or LunarCalendarAdapter()

    def get_four_pillars(self, day: date, hour_branch: Optional[str] = None) -> FourPillars:
        """
        计算四柱

        :param day: 公历日期
        :param hour_branch: 时辰地支，未知时取子时
        :return: FourPillars
        """
        if hour_branch is None:
            hour_branch = EARTHLY_BRANCHES[0]
        hour_branch_index = get_branch_index(hour_branch)

        lunar = self.adapter.resolve(day)

        year_stem_index = (lunar.year - 4) % 10
        month_stem_index = (lunar.month * 2 + 2 + year_stem_index) % 10
        day_stem_index = (lunar.day + 6) % 10
        # 五鼠遁：日干定子时起干
        hour_stem_index = (day_stem_index * 2 + hour_branch_index) % 10

        return FourPillars(
            year=GanZhi(HEAVENLY_STEMS[year_stem_index], zodiac_to_branch(lunar.year_zodiac)),
            month=GanZhi(HEAVENLY_STEMS[month_stem_index], zodiac_to_branch(lunar.month_zodiac)),
            day=GanZhi(HEAVENLY_STEMS[day_stem_index], zodiac_to_branch(lunar.day_zodiac)),
            hour=GanZhi(HEAVENLY_STEMS[hour_stem_index], hour_branch),
        )

    def get_day_ganzhi(self, day: date) -> GanZhi:
        """某日的日柱干支 (流日)"""
        lunar = self.adapter.resolve(day)
        return GanZhi(HEAVENLY_STEMS[(lunar.day + 6) % 10], zodiac_to_branch(lunar.day_zodiac))


_CALENDAR = SexagenaryCalendar()


def calculate_bazi(year: int, month: int, day: int, hour: Optional[int] = None) -> Tuple[str, FourPillars]:
    """
    Calculate Bazi (Four Pillars of Destiny) from a given date and clock hour.

    Returns:
        tuple: (bazi_str, pillars)
            - bazi_str: Formatted string with four pillars
            - pillars: FourPillars value
    """
    try:
        birth_date = date(year, month, day)
    except ValueError as e:
        raise DateOutOfRangeError(f"无效日期 {year}-{month}-{day}: {e}") from e

    hour_branch = hour_to_branch(hour) if hour is not None else None
    pillars = _CALENDAR.get_four_pillars(birth_date, hour_branch)
    return str(pillars), pillars


def get_today_ganzhi(today: Optional[date] = None) -> GanZhi:
    """今日干支"""
    return _CALENDAR.get_day_ganzhi(today or date.today())


# ================== 五行生克 ==================

@dataclass(frozen=True)
class WuxingRelation:
    """a 相对于 b 的生克关系"""
    generates: bool = False
    overcomes: bool = False
    is_generated_by: bool = False
    is_overcome_by: bool = False
    is_same: bool = False

    def to_dict(self) -> dict:
        return {
            "generates": self.generates,
            "overcomes": self.overcomes,
            "is_generated_by": self.is_generated_by,
            "is_overcome_by": self.is_overcome_by,
            "is_same": self.is_same,
        }


RELATION_FLAGS = ("generates", "overcomes", "is_generated_by", "is_overcome_by", "is_same")

# 能量雷达权重表
SCORE_WEIGHTS = {
    "wealth": {"generates": 15, "overcomes": 20, "is_generated_by": -10, "is_overcome_by": -25, "is_same": 0},
    "career": {"generates": 20, "overcomes": 0, "is_generated_by": 0, "is_overcome_by": -15, "is_same": 0},
    "love": {"generates": 0, "overcomes": 0, "is_generated_by": 0, "is_overcome_by": 0, "is_same": 15},
    "health": {"generates": -15, "overcomes": 0, "is_generated_by": 0, "is_overcome_by": -20, "is_same": 0},
    "creativity": {"generates": 20, "overcomes": 0, "is_generated_by": 0, "is_overcome_by": 0, "is_same": 0},
}

DIMENSION_LABELS = {
    "wealth": "财富",
    "career": "事业",
    "love": "感情",
    "health": "健康",
    "creativity": "灵感",
}

# 今日能量值：日主与流日天干、日主与流日地支
ENERGY_STEM_WEIGHTS = {"generates": 20, "overcomes": 15, "is_generated_by": -20, "is_overcome_by": -25}
ENERGY_BRANCH_WEIGHTS = {"generates": 10, "is_overcome_by": -15}


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    return int(min(high, max(low, round(value))))


class WuxingRelationCalculator:
    """五行生克关系计算器"""

    def __init__(self):
        # 相生：Key 生 Value
        self.producing_map = {WUXING[i]: WUXING[(i + 1) % 5] for i in range(5)}
        # 相克：Key 克 Value (隔一位)
        self.controlling_map = {WUXING[i]: WUXING[(i + 2) % 5] for i in range(5)}

    def relate(self, a: str, b: str) -> WuxingRelation:
        """
        计算 a 对 b 的关系

        :param a: 五行 (如 '火')
        :param b: 五行 (如 '金')
        """
        check_wuxing(a)
        check_wuxing(b)
        if a == b:
            return WuxingRelation(is_same=True)
        return WuxingRelation(
            generates=self.producing_map[a] == b,
            overcomes=self.controlling_map[a] == b,
            is_generated_by=self.producing_map[b] == a,
            is_overcome_by=self.controlling_map[b] == a,
        )

    def weight_of(self, relation: WuxingRelation, weights: Dict[str, float]) -> float:
        """未截断的加权和 Σ 权重 × 标志"""
        return sum(weight for flag, weight in weights.items() if getattr(relation, flag))

    def weighted_sum(self, baseline: float, relation: WuxingRelation, weights: Dict[str, float]) -> int:
        return clamp_score(baseline + self.weight_of(relation, weights))

    def score(self, baseline: float, relation: WuxingRelation, weights: Optional[dict] = None) -> Dict[str, int]:
        """
        能量雷达：每个维度 clamp(baseline + Σ 权重 × 标志, 0, 100)
        """
        weights = weights or SCORE_WEIGHTS
        return {
            dimension: self.weighted_sum(baseline, relation, dim_weights)
            for dimension, dim_weights in weights.items()
        }


_WUXING_CALC = WuxingRelationCalculator()


def calculate_wuxing_score(day_stem: str, current_stem: str, baseline: int = 50) -> Dict[str, int]:
    """日主五行对流日天干五行的五维得分"""
    relation = _WUXING_CALC.relate(get_stem_wuxing(day_stem), get_stem_wuxing(current_stem))
    return _WUXING_CALC.score(baseline, relation)


def calculate_energy_score(day_stem: str, current_stem: str, current_branch: str, baseline: int = 50) -> int:
    """今日能量值 (0-100)"""
    day_wx = get_stem_wuxing(day_stem)
    stem_relation = _WUXING_CALC.relate(day_wx, get_stem_wuxing(current_stem))
    branch_relation = _WUXING_CALC.relate(day_wx, get_branch_wuxing(current_branch))
    score = (
        baseline
        + _WUXING_CALC.weight_of(stem_relation, ENERGY_STEM_WEIGHTS)
        + _WUXING_CALC.weight_of(branch_relation, ENERGY_BRANCH_WEIGHTS)
    )
    return clamp_score(score)


# ================== 周易起卦 ==================

@dataclass(frozen=True)
class YaoLine:
    """
    一爻。三枚铜钱：字=2，背=1
    3=老阴(动)，4=少阴，5=少阳，6=老阳(动)
    """
    position: int
    is_yang: bool
    is_old: bool
    total: int
    coins: Tuple[int, ...] = field(default=(), compare=False)

    @classmethod
    def from_sum(cls, total: int, position: int, coins: Tuple[int, ...] = ()) -> "YaoLine":
        if total not in (3, 4, 5, 6):
            raise ValueError(f"三枚铜钱之和必须在 3-6 之间: {total}")
        if not 1 <= position <= 6:
            raise ValueError(f"爻位必须在 1-6 之间: {position}")
        return cls(position=position, is_yang=total >= 5, is_old=total in (3, 6), total=total, coins=coins)

    @property
    def label(self) -> str:
        if self.is_old:
            return "⚊ 老阳 (动爻)" if self.is_yang else "⚋ 老阴 (动爻)"
        return "⚊ 少阳" if self.is_yang else "⚋ 少阴"

    @property
    def name(self) -> str:
        """爻名，如 初九、六二"""
        number = "九" if self.is_yang else "六"
        pos = YAO_POSITION_NAMES[self.position - 1]
        if self.position == 1:
            return f"初{number}"
        if self.position == 6:
            return f"上{number}"
        return f"{number}{pos}"


def _trigram_value(lines: Sequence[YaoLine]) -> int:
    # 上爻为最高位
    value = 0
    for offset, line in enumerate(lines):
        if line.is_yang:
            value += 1 << offset
    return value


def encode_hexagram(lines: Sequence[YaoLine]) -> int:
    """六爻 -> 卦序号 (1-64)：(上卦-1)*8 + 下卦"""
    if len(lines) != 6:
        raise ValueError(f"一卦必须有六爻，实际 {len(lines)}")
    lower_index = _trigram_value(lines[:3]) + 1
    upper_index = _trigram_value(lines[3:]) + 1
    return (upper_index - 1) * 8 + lower_index


def decode_hexagram(number: int) -> Tuple[int, int]:
    """卦序号 -> (上卦序号, 下卦序号)，均为 1-8"""
    if not 1 <= number <= 64:
        raise ValueError(f"卦序号必须在 1-64 之间: {number}")
    return (number - 1) // 8 + 1, (number - 1) % 8 + 1


def get_changed_lines(lines: Sequence[YaoLine]) -> List[YaoLine]:
    """动爻阴阳互变，爻位与动爻标记保持不变"""
    return [replace(line, is_yang=not line.is_yang) if line.is_old else line for line in lines]


def get_changed_hexagram(lines: Sequence[YaoLine]) -> Optional[int]:
    """变卦序号；没有动爻时返回 None"""
    if not any(line.is_old for line in lines):
        return None
    return encode_hexagram(get_changed_lines(lines))


def _format_trigram(index: int) -> str:
    name, _, nature, symbol, _, _ = TRIGRAMS[index - 1]
    return f"{symbol} {name}({nature})"


def get_hexagram_info(number: int) -> dict:
    """
    根据卦序号获取卦象信息

    序号按上下卦二进制编码排列，与文王卦序不同：
    1 为坤为地 (文王第2卦)，64 为乾为天 (文王第1卦)。

    Returns:
        dict: number, king_wen, name, short, meaning, upper_trigram, lower_trigram
    """
    upper_index, lower_index = decode_hexagram(number)
    upper_name = TRIGRAMS[upper_index - 1][0]
    lower_name = TRIGRAMS[lower_index - 1][0]
    king_wen, full_name, short_name, _, _, meaning = HEXAGRAM_BY_TRIGRAMS[(upper_name, lower_name)]
    return {
        "number": number,
        "king_wen": king_wen,
        "name": full_name,
        "short": short_name,
        "meaning": meaning,
        "upper_index": upper_index,
        "lower_index": lower_index,
        "upper_trigram": _format_trigram(upper_index),
        "lower_trigram": _format_trigram(lower_index),
        "upper_element": TRIGRAMS[upper_index - 1][4],
        "lower_element": TRIGRAMS[lower_index - 1][4],
    }


@dataclass(frozen=True)
class Hexagram:
    """六爻卦，lines 从初爻到上爻"""
    lines: Tuple[YaoLine, ...]

    def __post_init__(self):
        if len(self.lines) != 6:
            raise ValueError(f"一卦必须有六爻，实际 {len(self.lines)}")

    @property
    def number(self) -> int:
        return encode_hexagram(self.lines)

    @property
    def upper_index(self) -> int:
        return decode_hexagram(self.number)[0]

    @property
    def lower_index(self) -> int:
        return decode_hexagram(self.number)[1]

    @property
    def changed_number(self) -> Optional[int]:
        return get_changed_hexagram(self.lines)

    @property
    def changing_lines(self) -> List[int]:
        return [line.position for line in self.lines if line.is_old]

    @property
    def has_change(self) -> bool:
        return bool(self.changing_lines)

    @property
    def binary(self) -> str:
        """二进制字符串，从初爻到上爻"""
        return "".join("1" if line.is_yang else "0" for line in self.lines)

    @property
    def changed_binary(self) -> Optional[str]:
        if not self.has_change:
            return None
        return "".join("1" if line.is_yang else "0" for line in get_changed_lines(self.lines))

    def to_dict(self) -> dict:
        original = get_hexagram_info(self.number)
        changed_number = self.changed_number
        future = get_hexagram_info(changed_number) if changed_number is not None else None
        return {
            "number": self.number,
            "original_hex": original["name"],
            "original_meaning": original["meaning"],
            "original_binary": self.binary,
            "upper_index": original["upper_index"],
            "lower_index": original["lower_index"],
            "upper_trigram": original["upper_trigram"],
            "lower_trigram": original["lower_trigram"],
            "changed_number": changed_number,
            "future_hex": future["name"] if future else None,
            "future_meaning": future["meaning"] if future else None,
            "future_binary": self.changed_binary,
            "changing_lines": self.changing_lines,
            "has_change": self.has_change,
            "lines": [
                {
                    "position": line.position,
                    "total": line.total,
                    "coins": list(line.coins),
                    "is_yang": line.is_yang,
                    "is_old": line.is_old,
                    "name": line.name,
                }
                for line in self.lines
            ],
            "details": [f"第{line.position}爻: {line.label}" for line in self.lines],
        }


class ZhouyiCalculator:
    """周易起卦计算器 - 金钱课起卦法"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.random = rng or random.Random()

    def toss_line(self, position: int) -> YaoLine:
        """模拟投掷三枚铜钱：字为2，背为1"""
        coins = tuple(self.random.choice([1, 2]) for _ in range(3))
        return YaoLine.from_sum(sum(coins), position, coins)

    def cast_hexagram(self) -> Hexagram:
        """
        模拟金钱课起卦 (3枚硬币摇6次)，从初爻摇到上爻
        """
        return Hexagram(tuple(self.toss_line(i) for i in range(1, 7)))

    def encode(self, lines: Sequence[YaoLine]) -> int:
        return encode_hexagram(lines)

    def decode(self, number: int) -> Tuple[int, int]:
        return decode_hexagram(number)

    def changed_hexagram(self, lines: Sequence[YaoLine]) -> Optional[int]:
        return get_changed_hexagram(lines)

    def cast_meihua(self, birth_date: date) -> Hexagram:
        """
        梅花易数：以出生年月日起卦
        上卦 = (年+月) % 8 + 1，下卦 = (月+日) % 8 + 1，动爻 = (年+日) % 6 + 1
        """
        y, m, d = birth_date.year, birth_date.month, birth_date.day
        upper_index = (y + m) % 8 + 1
        lower_index = (m + d) % 8 + 1
        moving = (y + d) % 6 + 1

        bits = []
        for index in (lower_index, upper_index):
            value = index - 1
            bits.extend(bool(value >> offset & 1) for offset in range(3))

        lines = []
        for position, is_yang in enumerate(bits, start=1):
            if position == moving:
                total = 6 if is_yang else 3
            else:
                total = 5 if is_yang else 4
            lines.append(YaoLine.from_sum(total, position))
        return Hexagram(tuple(lines))

    def format_hexagram_display(self, hexagram: Hexagram) -> str:
        """
        格式化卦象显示

        Args:
            hexagram: cast_hexagram() 返回的结果

        Returns:
            str: 格式化的卦象文本
        """
        result = hexagram.to_dict()
        lines = []
        lines.append("═══ 周易起卦结果 ═══\n")
        lines.append(f"【本卦】{result['original_hex']}")
        lines.append(f"   卦义：{result['original_meaning']}")
        lines.append(f"   上卦：{result['upper_trigram']}")
        lines.append(f"   下卦：{result['lower_trigram']}")

        if result["has_change"]:
            lines.append(f"\n【动爻】第 {', '.join(map(str, result['changing_lines']))} 爻")
            lines.append(f"\n【变卦】{result['future_hex']}")
            lines.append(f"   卦义：{result['future_meaning']}")
        else:
            lines.append("\n【动爻】无动爻（六爻皆静）")

        lines.append("\n--- 逐爻详情 ---")
        for detail in result["details"]:
            lines.append(detail)

        return "\n".join(lines)
