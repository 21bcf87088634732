"""
稀有度与加权稀有度表
"""
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import List, Sequence, Tuple

from errors import RarityRangeError


@total_ordering
class Rarity(Enum):
    """稀有度（SSR > SR > R > N）"""
    SSR = "SSR"
    SR = "SR"
    R = "R"
    N = "N"

    @property
    def rank(self) -> int:
        """排序用的等级，越大越稀有；与抽取概率无关"""
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self):
        return self.value

    @classmethod
    def best(cls) -> "Rarity":
        """最高稀有度（大保底必出）"""
        return max(cls)

    @classmethod
    def runner_up(cls) -> "Rarity":
        """仅次于最高稀有度的一档（小保底必出）"""
        return sorted(cls, reverse=True)[1]

    @classmethod
    def parse(cls, value) -> "Rarity":
        """接受 Rarity 或其名称（不区分大小写）"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"未知的稀有度: {value!r}") from None


_RANKS = {Rarity.SSR: 3, Rarity.SR: 2, Rarity.R: 1, Rarity.N: 0}

# 稀有度表: [(稀有度, 权重), ...]，权重之和不必为 1
RarityTable = Sequence[Tuple[Rarity, float]]


@dataclass(frozen=True)
class RarityRange:
    """半开区间 [start, end)"""
    start: float
    end: float

    def contains(self, x: float) -> bool:
        return self.start <= x < self.end

    @property
    def length(self) -> float:
        return self.end - self.start


def default_rarities() -> List[Tuple[Rarity, float]]:
    """默认稀有度表"""
    return [
        (Rarity.SSR, 0.05),
        (Rarity.SR, 0.2),
        (Rarity.R, 0.4),
        (Rarity.N, 0.35),
    ]


def rarity_range(rarities: RarityTable) -> List[Tuple[Rarity, RarityRange]]:
    """
    按声明顺序把权重累加成连续区间
    第 i 个区间 = [前 i 个权重之和, 前 i+1 个权重之和)
    权重为 0 的稀有度得到空区间，永远抽不到
    """
    ranges = []
    total = 0.0
    for rarity, rate in rarities:
        lo = total
        hi = lo + rate
        ranges.append((rarity, RarityRange(lo, hi)))
        total = hi
    return ranges


def total_weight(rarities: RarityTable) -> float:
    """权重总和（与 rarity_range 同样的累加顺序，保证等于最后一个区间的 end）"""
    total = 0.0
    for _, rate in rarities:
        total += rate
    return total


def pick_rarity(ranges: Sequence[Tuple[Rarity, RarityRange]], roll: float) -> Rarity:
    """
    返回第一个包含 roll 的区间对应的稀有度
    落在边界上的 roll 属于以该边界为下界的区间
    """
    for rarity, rg in ranges:
        if rg.contains(roll):
            return rarity
    raise RarityRangeError(roll)
