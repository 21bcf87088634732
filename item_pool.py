"""
卡池物品
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from rarity import Rarity, RarityTable


@dataclass(frozen=True)
class GachaItem:
    """可抽取的物品"""
    name: str
    rarity: Rarity


# 卡池: 稀有度 -> 物品列表
ItemPool = Dict[Rarity, List[GachaItem]]


def make_items(rarity: Rarity, count: int, prefix: Optional[str] = None) -> List[GachaItem]:
    """生成 count 个占位物品，命名为 "{prefix}-{i}"，prefix 默认为稀有度名"""
    rarity = Rarity.parse(rarity)
    prefix = prefix if prefix is not None else str(rarity)
    return [GachaItem(f"{prefix}-{i}", rarity) for i in range(count)]


def build_pool(items: Iterable[GachaItem]) -> ItemPool:
    """按稀有度分组，保持输入顺序"""
    pool: ItemPool = {}
    for item in items:
        pool.setdefault(item.rarity, []).append(item)
    return pool


def missing_rarities(pool: ItemPool, rarities: RarityTable) -> List[Rarity]:
    """权重为正、但卡池中缺失或为空的稀有度"""
    missing = []
    for rarity, rate in rarities:
        if rate > 0 and not pool.get(rarity) and rarity not in missing:
            missing.append(rarity)
    return missing
