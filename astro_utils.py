"""
西方占星与生命灵数工具。
月亮星座与上升星座为简化估算，不做星历计算。
"""
import re
from datetime import date
from typing import Optional

# 十二星座 (白羊座起)
# 格式：(id, 中文名, 英文名, 元素, 性质, 起始月, 起始日)
ZODIAC_SIGNS = [
    ("aries", "白羊座", "Aries", "火", "开创", 3, 21),
    ("taurus", "金牛座", "Taurus", "土", "固定", 4, 20),
    ("gemini", "双子座", "Gemini", "风", "变动", 5, 21),
    ("cancer", "巨蟹座", "Cancer", "水", "开创", 6, 21),
    ("leo", "狮子座", "Leo", "火", "固定", 7, 23),
    ("virgo", "处女座", "Virgo", "土", "变动", 8, 23),
    ("libra", "天秤座", "Libra", "风", "开创", 9, 23),
    ("scorpio", "天蝎座", "Scorpio", "水", "固定", 10, 23),
    ("sagittarius", "射手座", "Sagittarius", "火", "变动", 11, 22),
    ("capricorn", "摩羯座", "Capricorn", "土", "开创", 12, 22),
    ("aquarius", "水瓶座", "Aquarius", "风", "固定", 1, 20),
    ("pisces", "双鱼座", "Pisces", "水", "变动", 2, 19),
]

ELEMENT_DESCRIPTIONS = {
    "火": "火象星座充满热情和活力，喜欢冒险和挑战。",
    "土": "土象星座稳重务实，追求安全感和实际成果。",
    "风": "风象星座善于沟通和思考，追求自由和变化。",
    "水": "水象星座情感丰富，直觉敏锐，重视人际关系。",
}

# 每日运势，周一至周日
DAILY_HOROSCOPES = {
    "aries": (
        "今天适合开展新项目，您的领导能力会得到充分发挥。", "能量充沛，但注意控制冲动情绪，三思而后行。",
        "思维清晰，适合处理复杂问题，与人合作顺利。", "运气不错，可能遇到意外惊喜或机会。",
        "人际关系运佳，适合社交和团队活动。", "适合休息和反思，为下周做准备。", "放松心情，享受家庭时光。",
    ),
    "taurus": (
        "今天适合处理财务事务，投资理财有望获得收益。", "工作稳定，但需要耐心等待机会。",
        "艺术灵感迸发，适合创作或欣赏艺术。", "与他人合作愉快，可能结识新朋友。",
        "财运不错，可以考虑小额投资。", "享受美食和放松时光，与朋友聚会。", "适合亲近自然，感受宁静。",
    ),
    "gemini": (
        "思维活跃，适合学习和沟通，发表观点。", "可能出现分歧，保持开放心态倾听他人。",
        "创意丰富，适合写作或演讲。", "旅行或短途出行可能带来好运。",
        "社交活跃，容易结识新朋友。", "适合多样化的活动，保持灵活性。", "需要独处时间整理思绪。",
    ),
    "cancer": (
        "家庭事务需要关注，与亲人共度时光。", "情绪波动较大，需要自我调节。",
        "直觉得到增强，适合处理需要洞察力的事。", "工作中有新机会，把握当下。",
        "回忆过去，思考未来方向。", "享受家庭温暖，烹饪或装饰家居。", "休息充电，为新一周做准备。",
    ),
    "leo": (
        "魅力四射，适合展示才华或领导团队。", "注意控制自我中心倾向，多倾听他人。",
        "创意和娱乐活动带来好运。", "事业发展顺利，有晋升或加薪机会。",
        "社交活动频繁，享受被关注的感觉。", "适合娱乐和放松，展示自我。", "反思自我，设定新目标。",
    ),
    "virgo": (
        "工作细节需要注意，避免小错误。", "健康和自我照顾成为焦点。",
        "分析和学习能力增强，适合研究。", "服务他人带来满足感和好运。",
        "整理和清洁带来好心情和好运。", "放松方式可以是有条理的活动。", "规划下周工作和生活。",
    ),
    "libra": (
        "人际关系运佳，适合社交活动。", "需要做决定时，避免过度犹豫。",
        "艺术和美感带来愉悦和好运。", "合作和合伙事务顺利。",
        "恋爱运提升，适合约会。", "享受艺术、音乐或美好事物。", "思考人生平衡和价值观。",
    ),
    "scorpio": (
        "情感加深，与重要的人分享感受。", "专注目标，不被干扰所动。",
        "洞察力增强，适合深入研究。", "权力和影响力提升，注意使用方式。",
        "财务或情感议题需要诚实面对。", "需要独处和反思时间。", "释放情感，拥抱深层自我。",
    ),
    "sagittarius": (
        "冒险精神旺盛，考虑旅行或学习新事物。", "保持开放心态，接受新观点。",
        "与外国人或不同文化的人交流顺利。", "乐观态度感染他人，适合团队合作。",
        "哲学或精神层面的思考带来启发。", "户外活动或旅行带来好运。", "反思人生意义和目标。",
    ),
    "capricorn": (
        "工作努力得到认可，职业发展顺利。", "责任重大，需要合理分配时间。",
        "保持耐心，循序渐进达成目标。", "长辈或权威人物可能提供帮助。",
        "财务计划和管理运佳。", "工作与休息需要平衡。", "反思成就和未来规划。",
    ),
    "aquarius": (
        "创意和独特的想法带来好运。", "朋友和社交网络带来支持。",
        "关注社会议题，参与公益活动。", "科技或新领域带来机会。",
        "保持独立思考，不随波逐流。", "与志同道合的人交流互动。", "独处时间有助于创新思考。",
    ),
    "pisces": (
        "情感丰富，适合创作或艺术表达。", "需要设定界限，避免过度付出。",
        "直觉增强，适合需要洞察力的事情。", "梦境或想象力带来启示。",
        "人际关系运佳，适合表达情感。", "需要休息和放松时间。", "亲近自然或水边，放松心灵。",
    ),
}
DEFAULT_HOROSCOPE = "今天是美好的一天，保持积极心态！"

RISING_SIGN_HINT = "上升星座需要准确的出生时间才能计算。请输入出生时间以获得更精确的结果。"
RISING_SIGN_INVALID = "请输入有效的出生时间（格式：HH:MM）"

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

# 字母数值 (毕达哥拉斯对照表)
LETTER_VALUES = {chr(ord("a") + i): i % 9 + 1 for i in range(26)}
VOWELS = set("aeiou")
MASTER_NUMBERS = (11, 22, 33)

LIFE_PATH_MEANINGS = {
    1: "独立、创新、领袖",
    2: "合作、平衡、外交",
    3: "创意、表达、社交",
    4: "稳定、勤奋、务实",
    5: "自由、冒险、变化",
    6: "责任、和谐、家庭",
    7: "灵性、探索、分析",
    8: "权力、成就、物质",
    9: "人道、智慧、终结",
    11: "直觉、灵感、启迪",
    22: "实干、宏图、成就",
    33: "慈悲、奉献、疗愈",
}

# 相合灵数
COMPATIBLE_NUMBERS = {
    1: [1, 3, 5, 7, 9],
    2: [2, 4, 8],
    3: [1, 3, 5, 9],
    4: [2, 4, 8],
    5: [1, 3, 5, 7, 9],
    6: [2, 4, 6, 8],
    7: [1, 3, 5, 7, 9],
    8: [2, 4, 6, 8],
    9: [1, 3, 5, 7, 9],
    11: [1, 2, 3, 5, 7, 9, 11],
    22: [1, 2, 3, 4, 6, 8, 22],
    33: [1, 3, 5, 7, 9, 33],
}


def _sign_dict(sign) -> dict:
    sign_id, chinese, english, element, quality, start_month, start_day = sign
    return {
        "id": sign_id,
        "name": chinese,
        "english": english,
        "element": element,
        "quality": quality,
        "start": f"{start_month:02d}-{start_day:02d}",
    }


def get_sun_sign(day: date) -> dict:
    """按日期线性查找太阳星座"""
    key = (day.month, day.day)
    current = None
    for sign in sorted(ZODIAC_SIGNS, key=lambda s: (s[5], s[6])):
        if (sign[5], sign[6]) <= key:
            current = sign
    # 1月1日至水瓶座开始前仍属摩羯座
    if current is None:
        current = next(s for s in ZODIAC_SIGNS if s[0] == "capricorn")
    return _sign_dict(current)


def get_moon_sign(day: date) -> dict:
    """简化月亮星座：年内天数对 30 取余，约 2.5 天换一个星座"""
    day_of_year = day.timetuple().tm_yday
    index = int((day_of_year % 30) / 2.5)
    return _sign_dict(ZODIAC_SIGNS[index % 12])


def get_rising_sign(birth_time: Optional[str]) -> dict:
    """
    简化上升星座：每两小时换一个星座

    :param birth_time: "HH:MM"，可为空
    :return: {"sign": dict 或 None, "note": 提示文本或 None}
    """
    if not birth_time:
        return {"sign": None, "note": RISING_SIGN_HINT}

    match = _TIME_RE.match(birth_time)
    if not match:
        return {"sign": None, "note": RISING_SIGN_INVALID}
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return {"sign": None, "note": RISING_SIGN_INVALID}

    index = (hours * 60 + minutes) // 120 % 12
    return {"sign": _sign_dict(ZODIAC_SIGNS[index]), "note": None}


def get_daily_horoscope(sign_id: str, day: date) -> str:
    """按星座与星期取当日运势 (周一为 0)"""
    if sign_id not in DAILY_HOROSCOPES:
        return DEFAULT_HOROSCOPE
    return DAILY_HOROSCOPES[sign_id][day.weekday()]


def get_astrology_chart(birth_date: date, birth_time: Optional[str] = None, today: Optional[date] = None) -> dict:
    rising = get_rising_sign(birth_time)
    sun = get_sun_sign(birth_date)
    return {
        "sun_sign": sun,
        "moon_sign": get_moon_sign(birth_date),
        "rising_sign": rising["sign"],
        "rising_note": rising["note"],
        "element_description": ELEMENT_DESCRIPTIONS[sun["element"]],
        "daily_horoscope": get_daily_horoscope(sun["id"], today or date.today()),
    }


# ================== 生命灵数 ==================

def digit_sum(number: int) -> int:
    return sum(int(ch) for ch in str(abs(number)))


def reduce_to_single_digit(number: int, keep_master: bool = True) -> int:
    """逐位相加直到个位数；keep_master 时保留 11/22/33"""
    result = number
    while result > 9 and not (keep_master and result in MASTER_NUMBERS):
        result = digit_sum(result)
    return result


def get_life_path_number(year: int, month: int, day: int) -> int:
    return reduce_to_single_digit(year + month + day)


def get_today_number(day: date) -> int:
    """今日灵数频率：YYYYMMDD 各位相加至个位"""
    return reduce_to_single_digit(digit_sum(int(day.strftime("%Y%m%d"))), keep_master=False)


def get_compatible_numbers(number: int) -> list:
    """相合灵数；表外的数只与自身相合"""
    return list(COMPATIBLE_NUMBERS.get(number, [number]))


def _letters(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower())


def get_expression_number(name: str) -> int:
    return reduce_to_single_digit(sum(LETTER_VALUES[ch] for ch in _letters(name)))


def get_soul_urge_number(name: str) -> int:
    return reduce_to_single_digit(sum(LETTER_VALUES[ch] for ch in _letters(name) if ch in VOWELS))


def get_personality_number(name: str) -> int:
    return reduce_to_single_digit(sum(LETTER_VALUES[ch] for ch in _letters(name) if ch not in VOWELS))


def get_numerology_reading(birth_date: date, name: str = "") -> dict:
    """完整灵数解读"""
    life_path = get_life_path_number(birth_date.year, birth_date.month, birth_date.day)
    reading = {
        "life_path": {
            "number": life_path,
            "meaning": LIFE_PATH_MEANINGS.get(life_path, ""),
            "compatible": get_compatible_numbers(life_path),
        },
        "birthday": {"number": birth_date.day},
    }
    if _letters(name):
        for key, func in (
            ("expression", get_expression_number),
            ("soul_urge", get_soul_urge_number),
            ("personality", get_personality_number),
        ):
            number = func(name)
            reading[key] = {"number": number, "meaning": LIFE_PATH_MEANINGS.get(number, "")}
    return reading
