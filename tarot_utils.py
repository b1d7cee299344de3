"""
塔罗牌工具 - 78 张牌表、抽牌与牌阵
"""
import random
from typing import List, Optional, Sequence

# 大阿卡纳 (22张)
# 格式：(英文名, 中文名, 元素, 正位, 逆位)
MAJOR_ARCANA = [
    ("The Fool", "愚人", "Air", "新的开始、天真无邪、自由自在", "冲动、盲目冒险、缺乏计划"),
    ("The Magician", "魔术师", "Mercury", "创造力、技能、意志力", "操纵、欺骗、潜能未用"),
    ("The High Priestess", "女祭司", "Moon", "直觉、智慧、潜意识", "流于表面、忽视直觉、困惑"),
    ("The Empress", "皇后", "Venus", "丰盛、母性、创造力", "依赖、空虚、创造受阻"),
    ("The Emperor", "皇帝", "Aries", "权威、秩序、稳定", "专横、僵化、缺乏自律"),
    ("The Hierophant", "教皇", "Taurus", "传统、教导、信仰", "反叛、打破常规、另辟蹊径"),
    ("The Lovers", "恋人", "Gemini", "爱情、和谐、选择", "失和、价值观不合、沟通不畅"),
    ("The Chariot", "战车", "Cancer", "胜利、意志力、克服障碍", "冲动好斗、方向迷失、能量受阻"),
    ("Strength", "力量", "Leo", "勇气、耐心、内在力量", "软弱、自我怀疑、用力过猛"),
    ("The Hermit", "隐士", "Virgo", "内省、指引、灵性寻求", "孤立、孤独、退缩"),
    ("Wheel of Fortune", "命运之轮", "Jupiter", "命运、转变、机遇", "厄运、抗拒变化、停滞"),
    ("Justice", "正义", "Libra", "公正、平衡、责任", "不公、不诚实、逃避责任"),
    ("The Hanged Man", "倒吊人", "Water", "暂停、牺牲、新的视角", "拖延、无谓牺牲、止步不前"),
    ("Death", "死神", "Scorpio", "转变、结束、重生", "抗拒改变、停滞、害怕结束"),
    ("Temperance", "节制", "Sagittarius", "平衡、调和、耐心", "过度、失衡、急躁"),
    ("The Devil", "恶魔", "Capricorn", "欲望、束缚、沉迷", "挣脱束缚、觉醒、康复"),
    ("The Tower", "塔", "Mars", "突变、破坏、觉醒", "侥幸避祸、害怕改变、抗拒"),
    ("The Star", "星星", "Aquarius", "希望、灵感、疗愈", "绝望、失去信心、枯竭"),
    ("The Moon", "月亮", "Pisces", "直觉、幻觉、梦境", "释放恐惧、真相浮现、走出迷惘"),
    ("The Sun", "太阳", "Sun", "成功、活力、喜悦", "暂时低落、看不清方向、挫折"),
    ("Judgment", "审判", "Pluto", "觉醒、复活、内心召唤", "自我怀疑、忽视召唤、内疚"),
    ("The World", "世界", "Saturn", "完成、成就、新循环", "未竟之事、缺乏收尾、停滞"),
]

# 小阿卡纳：四组花色 × 十四张
# 格式：(英文花色, 中文花色, 元素, 主题)
SUITS = [
    ("Wands", "权杖", "Fire", "行动与热情"),
    ("Cups", "圣杯", "Water", "情感与关系"),
    ("Swords", "宝剑", "Air", "思想与冲突"),
    ("Pentacles", "金币", "Earth", "物质与财富"),
]

# 格式：(英文, 中文, 正位, 逆位)
RANKS = [
    ("Ace", "一", "新的开端", "时机未到"),
    ("Two", "二", "抉择与平衡", "犹豫不决"),
    ("Three", "三", "合作与成长", "协作受阻"),
    ("Four", "四", "稳定与守成", "固步自封"),
    ("Five", "五", "冲突与挑战", "走出困境"),
    ("Six", "六", "和谐与给予", "失衡与依赖"),
    ("Seven", "七", "坚持与考验", "动摇与放弃"),
    ("Eight", "八", "专注与推进", "分心与拖延"),
    ("Nine", "九", "接近圆满", "焦虑与缺失"),
    ("Ten", "十", "周期完成", "负担过重"),
    ("Page", "侍从", "学习与消息", "不够成熟"),
    ("Knight", "骑士", "行动与追求", "鲁莽或停滞"),
    ("Queen", "皇后", "包容与掌控", "情绪失控"),
    ("King", "国王", "权威与成熟", "专断与滥权"),
]


def _build_deck() -> List[dict]:
    deck = []
    for card_id, (name, name_cn, element, upright, reversed_meaning) in enumerate(MAJOR_ARCANA):
        deck.append({
            "id": card_id,
            "name": name,
            "name_cn": name_cn,
            "suit": "Major",
            "element": element,
            "upright": upright,
            "reversed_meaning": reversed_meaning,
        })
    for suit, suit_cn, element, theme in SUITS:
        for rank, rank_cn, upright, reversed_meaning in RANKS:
            deck.append({
                "id": len(deck),
                "name": f"{rank} of {suit}",
                "name_cn": f"{suit_cn}{rank_cn}",
                "suit": suit,
                "element": element,
                "upright": f"{theme}：{upright}",
                "reversed_meaning": f"{theme}：{reversed_meaning}",
            })
    return deck


TAROT_CARDS = _build_deck()

# 牌阵位置
SPREAD_POSITIONS = {
    "daily": [("今日卡", "今日能量指引")],
    "three_card": [
        ("过去", "过去的经历与影响"),
        ("现在", "当前的状况与挑战"),
        ("未来", "未来的可能性与建议"),
    ],
}


def get_card_by_id(card_id: int) -> Optional[dict]:
    if 0 <= card_id < len(TAROT_CARDS):
        return dict(TAROT_CARDS[card_id])
    return None


def draw_tarot_cards(count: int, exclude_ids: Sequence[int] = (), rng: Optional[random.Random] = None) -> List[dict]:
    """
    不放回抽牌，每张牌独立决定正逆位

    :param count: 抽牌张数
    :param exclude_ids: 已抽过、需排除的牌
    :param rng: 随机源，默认模块级 random
    """
    rng = rng or random
    excluded = set(exclude_ids)
    available = [card for card in TAROT_CARDS if card["id"] not in excluded]
    if not 0 < count <= len(available):
        raise ValueError(f"抽牌张数必须在 1-{len(available)} 之间: {count}")

    drawn = []
    for card in rng.sample(available, count):
        is_reversed = rng.random() > 0.5
        drawn.append(dict(
            card,
            is_reversed=is_reversed,
            meaning=card["reversed_meaning"] if is_reversed else card["upright"],
        ))
    return drawn


def draw_tarot_spread(spread: str = "daily", exclude_ids: Sequence[int] = (), rng: Optional[random.Random] = None) -> List[dict]:
    """按牌阵抽牌，并标注每张牌的位置"""
    if spread not in SPREAD_POSITIONS:
        raise ValueError(f"未知牌阵: {spread}")
    positions = SPREAD_POSITIONS[spread]
    cards = draw_tarot_cards(len(positions), exclude_ids, rng)
    for card, (label, description) in zip(cards, positions):
        card["position"] = label
        card["position_description"] = description
    return cards
