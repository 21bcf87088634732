"""
抽卡配置类
"""
from dataclasses import dataclass, field
from typing import List, Tuple

from rarity import Rarity, default_rarities


@dataclass
class GachaConfig:
    """抽卡配置"""
    # 剩余抽数
    chances: int = 100

    # 保底机制
    pity: int = 10  # 第10抽小保底必出SR
    hard_pity: int = 50  # 第50抽大保底必出SSR

    # 基础概率（按声明顺序累加成区间）
    rarities: List[Tuple[Rarity, float]] = field(default_factory=default_rarities)

    def __post_init__(self):
        self.rarities = [(Rarity.parse(r), float(rate)) for r, rate in self.rarities]

        if self.chances < 0:
            raise ValueError("抽数不能为负")
        if self.pity < 0 or self.hard_pity < 0:
            raise ValueError("保底阈值不能为负")
        for rarity, rate in self.rarities:
            if rate < 0:
                raise ValueError(f"稀有度 {rarity} 的权重不能为负")

    def to_dict(self) -> dict:
        """转为普通字典，便于写入结果文件"""
        return {
            'chances': self.chances,
            'pity': self.pity,
            'hard_pity': self.hard_pity,
            'rarities': [(str(r), rate) for r, rate in self.rarities],
        }
