"""
周易静态数据 - 八卦与六十四卦 (文王卦序)。
"""

# 八卦，按三爻二进制值排列：阳爻为1，上爻为最高位
# 例如 震☳ 只有初爻为阳 -> 001 -> 1；艮☶ 只有上爻为阳 -> 100 -> 4
# 格式：(卦名, 拼音, 自然象, 符号, 五行, 卦德)
TRIGRAMS = [
    ("坤", "Kun", "地", "☷", "土", "柔顺"),
    ("震", "Zhen", "雷", "☳", "木", "震动"),
    ("坎", "Kan", "水", "☵", "水", "陷险"),
    ("兑", "Dui", "泽", "☱", "金", "喜悦"),
    ("艮", "Gen", "山", "☶", "土", "止静"),
    ("离", "Li", "火", "☲", "火", "光明"),
    ("巽", "Xun", "风", "☴", "木", "顺入"),
    ("乾", "Qian", "天", "☰", "金", "刚健"),
]

TRIGRAM_VALUE_BY_NAME = {info[0]: value for value, info in enumerate(TRIGRAMS)}

# 六十四卦 (文王卦序)
# 格式：(序号, 全名, 简称, 上卦, 下卦, 卦义)
KING_WEN_HEXAGRAMS = [
    (1, "乾为天", "乾", "乾", "乾", "刚健中正，自强不息"),
    (2, "坤为地", "坤", "坤", "坤", "柔顺厚德，载物含弘"),
    (3, "水雷屯", "屯", "坎", "震", "初生艰难，屯难聚积"),
    (4, "山水蒙", "蒙", "艮", "坎", "启蒙教育，以正养正"),
    (5, "水天需", "需", "坎", "乾", "等待时机，饮食宴乐"),
    (6, "天水讼", "讼", "乾", "坎", "争讼纠纷，终凶戒惧"),
    (7, "地水师", "师", "坤", "坎", "兴师动众，正义之战"),
    (8, "水地比", "比", "坎", "坤", "亲近辅助，择善而从"),
    (9, "风天小畜", "小畜", "巽", "乾", "小有蓄积，以待时机"),
    (10, "天泽履", "履", "乾", "兑", "履道坦坦，素履之往"),
    (11, "地天泰", "泰", "坤", "乾", "天地交通，通泰安宁"),
    (12, "天地否", "否", "乾", "坤", "阴阳不交，闭塞不通"),
    (13, "天火同人", "同人", "乾", "离", "志同道合，和同于人"),
    (14, "火天大有", "大有", "离", "乾", "日丽中天，万物繁盛"),
    (15, "地山谦", "谦", "坤", "艮", "谦虚谨慎，有终吉祥"),
    (16, "雷地豫", "豫", "震", "坤", "欢乐豫悦，骄纵灾祸"),
    (17, "泽雷随", "随", "兑", "震", "随机应变，和悦相随"),
    (18, "山风蛊", "蛊", "艮", "巽", "蛊惑振救，整治腐败"),
    (19, "地泽临", "临", "坤", "兑", "居高临下，教民保民"),
    (20, "风地观", "观", "巽", "坤", "观察审视，神道设教"),
    (21, "火雷噬嗑", "噬嗑", "离", "震", "咬合惩治，明罚敕法"),
    (22, "山火贲", "贲", "艮", "离", "装饰文饰，实质为本"),
    (23, "山地剥", "剥", "艮", "坤", "剥落衰败，以静制动"),
    (24, "地雷复", "复", "坤", "震", "一阳来复，回归正道"),
    (25, "天雷无妄", "无妄", "乾", "震", "真实无妄，顺应自然"),
    (26, "山天大畜", "大畜", "艮", "乾", "大有蓄积，刚健笃实"),
    (27, "山雷颐", "颐", "艮", "震", "颐养正道，自求口实"),
    (28, "泽风大过", "大过", "兑", "巽", "大为过度，非常行事"),
    (29, "坎为水", "坎", "坎", "坎", "重重险阻，习坎行险"),
    (30, "离为火", "离", "离", "离", "光明美丽，附着依托"),
    (31, "泽山咸", "咸", "兑", "艮", "感应交流，男女相感"),
    (32, "雷风恒", "恒", "震", "巽", "恒久不变，守恒持正"),
    (33, "天山遁", "遁", "乾", "艮", "隐退避让，保全实力"),
    (34, "雷天大壮", "大壮", "震", "乾", "阳盛壮大，非礼弗履"),
    (35, "火地晋", "晋", "离", "坤", "光明上进，顺畅发展"),
    (36, "地火明夷", "明夷", "坤", "离", "光明受损，晦暗艰贞"),
    (37, "风火家人", "家人", "巽", "离", "家庭家道，利女正固"),
    (38, "火泽睽", "睽", "离", "兑", "乖违背离，同异相成"),
    (39, "水山蹇", "蹇", "坎", "艮", "艰难险阻，见险而止"),
    (40, "雷水解", "解", "震", "坎", "解除险难，缓和舒解"),
    (41, "山泽损", "损", "艮", "兑", "减损奉献，损下益上"),
    (42, "风雷益", "益", "巽", "震", "增益利益，损上益下"),
    (43, "泽天夬", "夬", "兑", "乾", "决断果敢，刚决柔和"),
    (44, "天风姤", "姤", "乾", "巽", "邂逅相遇，阴柔渐长"),
    (45, "泽地萃", "萃", "兑", "坤", "聚集汇合，顺应时势"),
    (46, "地风升", "升", "坤", "巽", "上升进步，柔顺谦虚"),
    (47, "泽水困", "困", "兑", "坎", "困境受阻，坚守正道"),
    (48, "水风井", "井", "坎", "巽", "井养不穷，往来无咎"),
    (49, "泽火革", "革", "兑", "离", "变革更新，顺天应人"),
    (50, "火风鼎", "鼎", "离", "巽", "革故鼎新，稳定发展"),
    (51, "震为雷", "震", "震", "震", "震动奋起，戒惧修省"),
    (52, "艮为山", "艮", "艮", "艮", "止而不进，知止则吉"),
    (53, "风山渐", "渐", "巽", "艮", "渐进发展，循序前进"),
    (54, "雷泽归妹", "归妹", "震", "兑", "少女出嫁，不可勉强"),
    (55, "雷火丰", "丰", "震", "离", "丰盛盈满，明以动之"),
    (56, "火山旅", "旅", "离", "艮", "羁旅在外，谨慎小心"),
    (57, "巽为风", "巽", "巽", "巽", "谦逊柔顺，渗透前进"),
    (58, "兑为泽", "兑", "兑", "兑", "欢悦和悦，以诚相待"),
    (59, "风水涣", "涣", "巽", "坎", "涣散离散，拯救团聚"),
    (60, "水泽节", "节", "坎", "兑", "节制调节，适可而止"),
    (61, "风泽中孚", "中孚", "巽", "兑", "内心诚信，豚鱼吉祥"),
    (62, "雷山小过", "小过", "震", "艮", "小事过度，谨慎行事"),
    (63, "水火既济", "既济", "坎", "离", "事已成就，守成谨慎"),
    (64, "火水未济", "未济", "离", "坎", "事未成就，小心谨慎"),
]

# (上卦名, 下卦名) -> 文王卦条目
HEXAGRAM_BY_TRIGRAMS = {
    (entry[3], entry[4]): entry for entry in KING_WEN_HEXAGRAMS
}

# 爻位名称
YAO_POSITION_NAMES = ["初", "二", "三", "四", "五", "上"]
