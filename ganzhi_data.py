"""
干支基础数据 - 天干、地支、五行、纳音等静态查表。
"""


class InvalidTokenError(ValueError):
    """Raised when a stem/branch/element token is outside its fixed enumeration."""


# 天干
HEAVENLY_STEMS = ["甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸"]

# 地支
EARTHLY_BRANCHES = ["子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥"]

# 五行 (按相生顺序排列：木生火、火生土、土生金、金生水、水生木)
WUXING = ["木", "火", "土", "金", "水"]

WUXING_PINYIN = {"木": "Wood", "火": "Fire", "土": "Earth", "金": "Metal", "水": "Water"}

# 地支本气藏干
HIDDEN_STEMS = {
    "子": "癸", "丑": "己", "寅": "甲", "卯": "乙",
    "辰": "戊", "巳": "丙", "午": "丁", "未": "己",
    "申": "庚", "酉": "辛", "戌": "戊", "亥": "壬",
}

# 六十甲子纳音表
NAYIN_MAP = {
    "甲子": "海中金", "乙丑": "海中金",
    "丙寅": "炉中火", "丁卯": "炉中火",
    "戊辰": "大林木", "己巳": "大林木",
    "庚午": "路旁土", "辛未": "路旁土",
    "壬申": "剑锋金", "癸酉": "剑锋金",
    "甲戌": "山头火", "乙亥": "山头火",
    "丙子": "涧下水", "丁丑": "涧下水",
    "戊寅": "城头土", "己卯": "城头土",
    "庚辰": "白蜡金", "辛巳": "白蜡金",
    "壬午": "杨柳木", "癸未": "杨柳木",
    "甲申": "泉中水", "乙酉": "泉中水",
    "丙戌": "屋上土", "丁亥": "屋上土",
    "戊子": "霹雳火", "己丑": "霹雳火",
    "庚寅": "松柏木", "辛卯": "松柏木",
    "壬辰": "长流水", "癸巳": "长流水",
    "甲午": "沙中金", "乙未": "沙中金",
    "丙申": "山下火", "丁酉": "山下火",
    "戊戌": "平地木", "己亥": "平地木",
    "庚子": "壁上土", "辛丑": "壁上土",
    "壬寅": "金箔金", "癸卯": "金箔金",
    "甲辰": "覆灯火", "乙巳": "覆灯火",
    "丙午": "天河水", "丁未": "天河水",
    "戊申": "大驿土", "己酉": "大驿土",
    "庚戌": "钗钏金", "辛亥": "钗钏金",
    "壬子": "桑柘木", "癸丑": "桑柘木",
    "甲寅": "大溪水", "乙卯": "大溪水",
    "丙辰": "沙中土", "丁巳": "沙中土",
    "戊午": "天上火", "己未": "天上火",
    "庚申": "石榴木", "辛酉": "石榴木",
    "壬戌": "大海水", "癸亥": "大海水",
}

# 生肖 (与地支一一对应)
ZODIAC_ANIMALS = ["鼠", "牛", "虎", "兔", "龙", "蛇", "马", "羊", "猴", "鸡", "狗", "猪"]
ZODIAC_TO_BRANCH = dict(zip(ZODIAC_ANIMALS, EARTHLY_BRANCHES))
BRANCH_TO_ZODIAC = dict(zip(EARTHLY_BRANCHES, ZODIAC_ANIMALS))

# 十二时辰
SHICHEN_NAMES = [
    "子时 (23:00-00:59)", "丑时 (01:00-02:59)", "寅时 (03:00-04:59)", "卯时 (05:00-06:59)",
    "辰时 (07:00-08:59)", "巳时 (09:00-10:59)", "午时 (11:00-12:59)", "未时 (13:00-14:59)",
    "申时 (15:00-16:59)", "酉时 (17:00-18:59)", "戌时 (19:00-20:59)", "亥时 (21:00-22:59)",
]

# 幸运色 (按天干)
LUCKY_COLORS_BY_STEM = {
    "甲": ["青色", "绿色", "蓝色"],
    "乙": ["青色", "绿色", "黑色"],
    "丙": ["红色", "紫色", "白色"],
    "丁": ["红色", "紫色", "银色"],
    "戊": ["黄色", "棕色", "金色"],
    "己": ["黄色", "棕色", "白色"],
    "庚": ["白色", "金色", "灰色"],
    "辛": ["白色", "金色", "银色"],
    "壬": ["蓝色", "黑色", "青色"],
    "癸": ["蓝色", "黑色", "银色"],
}

# 幸运方位
LUCKY_DIRECTIONS = {
    "甲": "东", "乙": "东", "丙": "南", "丁": "南",
    "戊": "中", "己": "中", "庚": "西", "辛": "西",
    "壬": "北", "癸": "北",
}


def get_stem_index(stem: str) -> int:
    """获取天干索引 (0-9)"""
    try:
        return HEAVENLY_STEMS.index(stem)
    except ValueError:
        raise InvalidTokenError(f"未知天干: {stem!r}") from None


def get_branch_index(branch: str) -> int:
    """获取地支索引 (0-11)"""
    try:
        return EARTHLY_BRANCHES.index(branch)
    except ValueError:
        raise InvalidTokenError(f"未知地支: {branch!r}") from None


def check_wuxing(element: str) -> str:
    """校验五行名称，返回原值"""
    if element not in WUXING:
        raise InvalidTokenError(f"未知五行: {element!r}")
    return element


def get_stem_wuxing(stem: str) -> str:
    """天干五行：两干一行，甲乙木、丙丁火……"""
    return WUXING[(get_stem_index(stem) // 2) % 5]


def get_branch_wuxing(branch: str) -> str:
    """地支五行：取本气藏干的五行"""
    get_branch_index(branch)
    return get_stem_wuxing(HIDDEN_STEMS[branch])


def is_valid_ganzhi(stem: str, branch: str) -> bool:
    """阳干配阳支、阴干配阴支才构成六十甲子之一"""
    return (get_stem_index(stem) - get_branch_index(branch)) % 2 == 0


def get_nayin(ganzhi: str) -> str:
    """
    获取纳音五行

    :param ganzhi: 两个字的干支，如 "甲子"
    :return: 纳音名称，如 "海中金"
    """
    if len(ganzhi) != 2:
        raise InvalidTokenError(f"干支必须是两个字: {ganzhi!r}")
    stem, branch = ganzhi[0], ganzhi[1]
    if not is_valid_ganzhi(stem, branch):
        raise InvalidTokenError(f"{ganzhi} 不在六十甲子之中")
    return NAYIN_MAP[ganzhi]


def zodiac_to_branch(animal: str) -> str:
    """生肖转地支，如 '马' -> '午'"""
    if animal not in ZODIAC_TO_BRANCH:
        raise InvalidTokenError(f"未知生肖: {animal!r}")
    return ZODIAC_TO_BRANCH[animal]


def get_zodiac(branch: str) -> str:
    """地支转生肖"""
    get_branch_index(branch)
    return BRANCH_TO_ZODIAC[branch]


def hour_to_branch(hour: int) -> str:
    """
    钟点转时辰地支。子时跨日：23点与0点都属子时。

    :param hour: 0-23
    """
    if not isinstance(hour, int) or not 0 <= hour <= 23:
        raise InvalidTokenError(f"小时必须在 0-23 之间: {hour!r}")
    return EARTHLY_BRANCHES[((hour + 1) // 2) % 12]


def get_lucky_colors(stem: str) -> list:
    """按天干取幸运色"""
    get_stem_index(stem)
    return list(LUCKY_COLORS_BY_STEM[stem])


def get_lucky_direction(stem: str) -> str:
    """按天干取幸运方位"""
    get_stem_index(stem)
    return LUCKY_DIRECTIONS[stem]
