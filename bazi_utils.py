"""
运势文案工具类 - 每日运势、太岁、求签、Prompt 构建、卦象绘图
"""
import random
from datetime import date
from typing import List, Optional

import svgwrite

from astro_utils import LIFE_PATH_MEANINGS, get_life_path_number, get_sun_sign, get_today_number
from ganzhi_data import (
    BRANCH_TO_ZODIAC,
    EARTHLY_BRANCHES,
    get_branch_index,
    get_lucky_colors,
    get_lucky_direction,
    get_stem_index,
    get_stem_wuxing,
    zodiac_to_branch,
)
from logic import (
    DIMENSION_LABELS,
    FourPillars,
    Hexagram,
    WuxingRelationCalculator,
    calculate_energy_score,
    get_hexagram_info,
)


class DailyFortuneComposer:
    """
    每日运势生成器 - 把八字、流日、星座与灵数拼成可读文案
    """

    def __init__(self):
        self.wuxing_calc = WuxingRelationCalculator()

        self.keywords = ["官星修剪", "秩序重建", "定心养性", "静水深流", "破局", "沉潜", "蓄势", "绸缪"]

        self.quotes = [
            "火烈则木焦，金裁则木成。今日的寂静与规矩是你最好的护身符。",
            "喧嚣之中，让自己成为那潭静水，以不变应万变。",
            "唯有守住内心的秩序，方能在流年起伏中雕琢出栋梁之才。",
        ]

        # 各维度在不同生克关系下的点评，未命中时用 default
        self.radar_notes = {
            "wealth": {
                "overcomes": "我克者为财，今日财星显现，可主动争取",
                "is_overcome_by": "财星受制，不宜大额投资",
                "default": "财富平稳，注意守财",
            },
            "career": {
                "generates": "才华外露，适合展示成果",
                "is_overcome_by": "官杀压身，职场宜低调",
                "default": "稳步推进，专注核心项目",
            },
            "love": {
                "is_same": "同气相求，人际关系顺畅",
                "default": "感情平稳，多些耐心与倾听",
            },
            "health": {
                "generates": "泄气较重，注意休息",
                "is_overcome_by": "受克之日，注意身体信号",
                "default": "状态平稳，注意作息",
            },
            "creativity": {
                "generates": "食伤泄秀，灵感充沛，适合创作",
                "default": "创意一般，务实为佳",
            },
        }

        # 元素对应的开运小物
        self.lucky_items = {"火": "金属饰品", "水": "水晶球", "风": "羽毛书签", "土": "机械表"}

        # 五行对应颜色，用于"忌穿"提示
        self.element_colors = {"木": "绿色", "火": "红色", "土": "黄色", "金": "白色", "水": "黑色"}

    def _eastern_text(self, day_stem: str, day_wx: str, today_gz: str, today_wx: str, year_gz: str, relation) -> str:
        prefix = f"今日{today_gz}，{today_wx}气当令。对你的{day_stem}{day_wx}而言，"
        if relation.is_overcome_by:
            body = f"{today_wx}克{day_wx}，是官杀临身之日。压力与约束并存，宜守规矩、稳扎稳打。"
        elif relation.generates:
            body = f"{day_wx}生{today_wx}，是食伤泄秀之日。创意灵感丰富，适合表达与创作，但要注意说话分寸。"
        elif relation.overcomes:
            body = f"{day_wx}克{today_wx}，是财星显现之日。机会在前，但需量力而行，注意财务压力。"
        elif relation.is_generated_by:
            body = f"{today_wx}生{day_wx}，是印星扶身之日。易得贵人相助，适合学习与沉淀。"
        else:
            body = f"同为{day_wx}气，是比劫同行之日。宜与朋友合作，避免意气之争。"
        return prefix + body + f"身处{year_gz}之年，宜静心养性，不宜冒进。"

    def _western_text(self, birth_date: date, today: date) -> str:
        sign = get_sun_sign(birth_date)
        life_path = get_life_path_number(birth_date.year, birth_date.month, birth_date.day)
        today_number = get_today_number(today)
        if sign["element"] == "水":
            mood = "情绪较为敏感"
        elif sign["element"] == "火":
            mood = "行动力充沛"
        else:
            mood = "思维活跃"
        return (
            f"你的太阳星座是{sign['name']}（{sign['element']}象{sign['quality']}）。今日星象显示{mood}。\n\n"
            f"生命灵数{life_path}（{LIFE_PATH_MEANINGS.get(life_path, '')}），"
            f"今日灵数频率为{today_number}（{LIFE_PATH_MEANINGS.get(today_number, '')}）。"
        )

    def _radar(self, relation) -> List[dict]:
        scores = self.wuxing_calc.score(50, relation)
        radar = []
        for dimension, score in scores.items():
            notes = self.radar_notes[dimension]
            note = next(
                (text for flag, text in notes.items() if flag != "default" and getattr(relation, flag)),
                notes["default"],
            )
            radar.append({
                "dimension": dimension,
                "label": DIMENSION_LABELS[dimension],
                "score": score,
                "note": note,
            })
        return radar

    def _avoidance(self, day_wx: str, today_wx: str, year_gz: str, relation) -> List[str]:
        avoidance = []
        if today_wx == "火" and day_wx == "金":
            avoidance.append("忌与人正面口角 - 火旺遇金日，一句话说错可能毁掉关系")
            avoidance.append("忌剧烈运动 - 金木相克，关节易受伤")
        if day_wx == "金":
            avoidance.append("忌熬夜 - 金日耗肝血，晚11点前入睡")
        if relation.is_overcome_by:
            avoidance.append("忌冲动决策 - 官杀当令，约束为主")
        year_wx = get_stem_wuxing(year_gz[0])
        avoidance.append(f"忌穿{self.element_colors[year_wx]} - {year_gz}年{year_wx}气本已偏旺")
        return avoidance

    def compose(self, day_stem: str, today_pillars: FourPillars, birth_date: date, today: date) -> dict:
        """
        生成中西合璧的每日运势

        :param day_stem: 用户日主天干
        :param today_pillars: 今日四柱 (取年柱与日柱)
        :param birth_date: 出生日期
        :param today: 当天日期
        :return: dict 包含 eastern / western / radar / booster / avoidance / quote / keyword / energy
        """
        today_gz = today_pillars.day
        year_gz = today_pillars.year.full
        day_wx = get_stem_wuxing(day_stem)
        today_wx = get_stem_wuxing(today_gz.stem)
        relation = self.wuxing_calc.relate(day_wx, today_wx)

        stem_index = get_stem_index(today_gz.stem)
        branch_index = get_branch_index(today_gz.branch)

        sign = get_sun_sign(birth_date)
        booster = {
            "color": "、".join(get_lucky_colors(today_gz.stem)),
            "number": str(get_today_number(today)),
            "direction": get_lucky_direction(today_gz.stem),
            "item": self.lucky_items.get(sign["element"], "机械表"),
        }

        return {
            "today_ganzhi": today_gz.full,
            "relation": relation.to_dict(),
            "eastern": self._eastern_text(day_stem, day_wx, today_gz.full, today_wx, year_gz, relation),
            "western": self._western_text(birth_date, today),
            "radar": self._radar(relation),
            "booster": booster,
            "avoidance": self._avoidance(day_wx, today_wx, year_gz, relation),
            "quote": self.quotes[((stem_index + branch_index) // 2) % len(self.quotes)],
            "keyword": self.keywords[(stem_index + branch_index + birth_date.day) % len(self.keywords)],
            "energy": calculate_energy_score(day_stem, today_gz.stem, today_gz.branch),
        }


_DAILY_COMPOSER = DailyFortuneComposer()


def compose_daily_fortune(day_stem: str, today_pillars: FourPillars, birth_date: date, today: date) -> dict:
    return _DAILY_COMPOSER.compose(day_stem, today_pillars, birth_date, today)


# ================== 太岁 ==================

# 地支六害、六破
_HARM_PAIRS = [("子", "未"), ("丑", "午"), ("寅", "巳"), ("卯", "辰"), ("申", "亥"), ("酉", "戌")]
_BREAK_PAIRS = [("子", "酉"), ("丑", "辰"), ("寅", "亥"), ("卯", "午"), ("巳", "申"), ("未", "戌")]

TAI_SUI_REMEDIES = {
    "值太岁": ["佩戴本命护身符", "保持低调", "多行善积德"],
    "冲太岁": ["避免冒险投资", "出行注意安全", "家中放置化解吉物"],
    "害太岁": ["谨防小人", "谨言慎行", "多静心"],
    "破太岁": ["避免与人争执", "理财求稳", "保持平和心态"],
}


def _pair_partner(branch: str, pairs) -> str:
    for a, b in pairs:
        if branch == a:
            return b
        if branch == b:
            return a
    raise ValueError(f"{branch} 不在配对表中")


def get_tai_sui_details(year_branch: str) -> List[dict]:
    """当年犯太岁的生肖及类型：值、冲、害、破"""
    index = get_branch_index(year_branch)
    branches = [
        ("值太岁", year_branch),
        ("冲太岁", EARTHLY_BRANCHES[(index + 6) % 12]),
        ("害太岁", _pair_partner(year_branch, _HARM_PAIRS)),
        ("破太岁", _pair_partner(year_branch, _BREAK_PAIRS)),
    ]
    return [{"type": kind, "zodiac": BRANCH_TO_ZODIAC[branch]} for kind, branch in branches]


def get_tai_sui_zodiacs(year_branch: str) -> List[str]:
    return [item["zodiac"] for item in get_tai_sui_details(year_branch)]


def get_tai_sui_remedies(zodiac: str, year_branch: str) -> List[str]:
    """犯太岁化解建议，不犯太岁时给出通用建议"""
    zodiac_to_branch(zodiac)
    for item in get_tai_sui_details(year_branch):
        if item["zodiac"] == zodiac:
            return list(TAI_SUI_REMEDIES[item["type"]])
    return ["保持心态平和"]


# ================== 求签 ==================

FORTUNE_STICKS = [
    {"number": 1, "title": "上上签", "content": "吉人自有天相，大吉大利", "advice": "今日诸事皆宜，可放手去做"},
    {"number": 2, "title": "上签", "content": "春风得意，马到成功", "advice": "努力必有回报，坚持下去"},
    {"number": 3, "title": "中上", "content": "稳扎稳打，步步高升", "advice": "循序渐进，不可急躁"},
    {"number": 4, "title": "中签", "content": "平平稳稳，无忧无虑", "advice": "保持现状，静心养性"},
    {"number": 5, "title": "中下", "content": "小人作祟，需加防范", "advice": "谨言慎行，避免冲突"},
    {"number": 6, "title": "下签", "content": "困难重重，需待时机", "advice": "不宜妄动，静待时机"},
    {"number": 7, "title": "下下签", "content": "危机四伏，步步惊心", "advice": "退避三舍，保守为上"},
    {"number": 8, "title": "上签", "content": "贵人相助，好事将近", "advice": "把握机遇，乘势而为"},
]


def draw_fortune_stick(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> dict:
    """抽签；给定 seed 时结果固定"""
    if seed is not None:
        return dict(FORTUNE_STICKS[seed % len(FORTUNE_STICKS)])
    return dict((rng or random).choice(FORTUNE_STICKS))


# ================== Prompt 构建 ==================

def build_analysis_prompt(pillars: FourPillars, birth_date: date, gender: str = "未知", western_zodiac: str = "") -> str:
    """
    构建八字综合分析的 Prompt。数据放在最前面，叙事服务只保留前 600 字。
    """
    zodiac = BRANCH_TO_ZODIAC[pillars.year.branch]
    nayin = pillars.day.nayin or "未知"
    return f"""请为以下八字生成专业的命理分析报告，使用 Markdown，## 标记章节。

出生：{birth_date.year}年{birth_date.month}月{birth_date.day}日
性别：{gender}
生肖：{zodiac}
星座：{western_zodiac or get_sun_sign(birth_date)['name']}
八字：{pillars.year} {pillars.month} {pillars.day} {pillars.hour}
日主：{pillars.day_master}（{get_stem_wuxing(pillars.day_master)}），日柱纳音：{nayin}

章节：
## 一、日主分析
## 二、五行平衡
## 三、优势与挑战
## 四、事业与财运
## 五、流年展望
## 六、幸运元素（颜色、数字、方位、贵人属相）
## 七、个人建议（5条）

语气温暖客观，遇到刑冲请用"磨合"代替"克死"，不要编造八字以外的数据。"""


def build_oracle_prompt(user_question: str, hexagram: Hexagram, pillars: FourPillars) -> str:
    """
    构建【命卜合参】的 Prompt：成败看卦，策略看命

    :param user_question: 用户的问题
    :param hexagram: 起卦结果
    :param pillars: 案主四柱
    """
    original = get_hexagram_info(hexagram.number)
    changed = hexagram.changed_number
    future = get_hexagram_info(changed)["name"] if changed is not None else "无（六爻皆静）"
    moving = "、".join(map(str, hexagram.changing_lines)) or "无"

    return f"""你是精通《周易》六爻与《子平八字》的国学大师。
用户提问："{user_question}"
本卦：{original['name']}（{original['meaning']}）
变卦：{future}
动爻：{moving}
日主：{pillars.day_master}（{get_stem_wuxing(pillars.day_master)}），八字：{pillars.year} {pillars.month} {pillars.day} {pillars.hour}

成败吉凶以卦象为准，应对策略以八字为准。
输出：1. 大师直断（50字内）；2. 卦象天机（解释本卦、变卦与动爻）；3. 命理锦囊（1-2条行动建议）。
遇到凶卦侧重如何避险，给予希望，严禁制造恐慌。总字数不超过800字。"""


def build_daily_prompt(fortune: dict, day_stem: str) -> str:
    """把每日运势结构化结果转为润色用 Prompt"""
    radar = "，".join(f"{item['label']}{item['score']}" for item in fortune["radar"])
    return f"""请把以下每日运势数据润色成一段300字以内的温暖寄语：
日主：{day_stem}，流日：{fortune['today_ganzhi']}，能量值：{fortune['energy']}
关键词：{fortune['keyword']}
能量雷达：{radar}
开运：{fortune['booster']['color']}，方位{fortune['booster']['direction']}，数字{fortune['booster']['number']}
避坑：{'；'.join(fortune['avoidance'])}"""


# ================== 卦象绘图 ==================

def draw_hexagram_svg(hexagram: Hexagram) -> str:
    """
    绘制六爻卦象的 SVG 图，动爻以红色标出

    :param hexagram: Hexagram (lines 从初爻到上爻)
    :return: SVG 字符串
    """
    dwg = svgwrite.Drawing(size=(100, 120))

    for i, line in enumerate(hexagram.lines):
        y = 100 - i * 18  # 从下往上画
        color = "#c0392b" if line.is_old else "black"
        if line.is_yang:  # 阳爻 (一条长线)
            dwg.add(dwg.rect(insert=(10, y), size=(80, 10), fill=color))
        else:  # 阴爻 (两条短线，中间断开)
            dwg.add(dwg.rect(insert=(10, y), size=(35, 10), fill=color))
            dwg.add(dwg.rect(insert=(55, y), size=(35, 10), fill=color))

    return dwg.tostring()
