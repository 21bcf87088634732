"""
抽卡错误类型
"""


class GachaError(Exception):
    """抽卡数据完整性错误的基类"""


class InvalidRarityError(GachaError):
    """抽中的稀有度在卡池中没有对应条目"""

    def __init__(self, rarity):
        self.rarity = rarity
        super().__init__(f'"{rarity}" 不是卡池中有效的稀有度')


class RarityWithNoDataError(GachaError):
    """稀有度条目存在，但卡池为空"""

    def __init__(self, rarity):
        self.rarity = rarity
        super().__init__(f'稀有度 "{rarity}" 的卡池没有数据')


class RarityRangeError(GachaError):
    """随机数没有落在任何稀有度区间内（不应发生）"""

    def __init__(self, roll: float):
        self.roll = roll
        super().__init__(f"未知错误: 随机数 '{roll}' 没有命中任何稀有度区间")
