"""
核心抽卡系统
"""
import random
import threading
from typing import List, Optional

from config import GachaConfig
from errors import InvalidRarityError, RarityWithNoDataError
from item_pool import GachaItem, ItemPool
from pool_state import PityState
from rarity import Rarity, RarityTable, pick_rarity, rarity_range, total_weight


class GachaSystem:
    """抽卡系统"""

    def __init__(self, config: Optional[GachaConfig] = None, data: Optional[ItemPool] = None,
                 rng: Optional[random.Random] = None, verbose: bool = False):
        config = config if config is not None else GachaConfig()
        self._chances = config.chances
        self._pity = PityState(config.pity, config.hard_pity)
        self._rarities = tuple(config.rarities)
        self._data = _copy_pool(data or {})
        self.rng = rng
        self.verbose = verbose
        # 整个 pull 是一个临界区：抽取、计数器和抽数必须一起更新
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: GachaConfig, data: ItemPool, **kwargs) -> "GachaSystem":
        return cls(config, data, **kwargs)

    @property
    def chances(self) -> int:
        """剩余抽数"""
        return self._chances

    @property
    def pity_state(self) -> PityState:
        """保底状态的副本"""
        return self._pity.copy()

    @property
    def rarities(self) -> RarityTable:
        return self._rarities

    @property
    def data(self) -> ItemPool:
        return _copy_pool(self._data)

    def pulls_until_soft_pity(self) -> Optional[int]:
        return self._pity.pulls_until_soft_pity()

    def pulls_until_hard_pity(self) -> Optional[int]:
        return self._pity.pulls_until_hard_pity()

    def configure(self, rarities: Optional[RarityTable] = None, data: Optional[ItemPool] = None,
                  pity: Optional[int] = None, hard_pity: Optional[int] = None):
        """
        在两次 pull 之间整体替换稀有度表、卡池或保底阈值
        保底计数和剩余抽数保持不变
        """
        # 先全部校验，再一起替换；任何一项不合法都不改动现有配置
        new_rarities = None
        if rarities is not None:
            # 借用 GachaConfig 做同样的校验
            new_rarities = tuple(GachaConfig(rarities=list(rarities)).rarities)
        new_data = _copy_pool(data) if data is not None else None
        if (pity is not None and pity < 0) or (hard_pity is not None and hard_pity < 0):
            raise ValueError("保底阈值不能为负")

        with self._lock:
            if new_rarities is not None:
                self._rarities = new_rarities
            if new_data is not None:
                self._data = new_data
            if pity is not None:
                self._pity.soft_threshold = pity
            if hard_pity is not None:
                self._pity.hard_threshold = hard_pity

    def add_chances(self, num: int):
        """补充抽数"""
        if num < 0:
            raise ValueError("补充的抽数不能为负")
        with self._lock:
            self._chances += num

    def pull(self, num: int) -> List[GachaItem]:
        """
        连续抽取 num 次，超过剩余抽数时只抽剩余的部分
        返回: 按抽取顺序排列的物品列表

        某一抽失败时整批中止并抛出异常，之前已经成功的抽取不回滚
        """
        if num < 0:
            raise ValueError("抽数不能为负")

        with self._lock:
            rng = self.rng if self.rng is not None else random.Random()
            result = []
            num_limit = min(num, self._chances)

            # 稀有度表在一批抽取中不变，区间只需计算一次
            ranges = rarity_range(self._rarities)
            gen_limit = total_weight(self._rarities)

            for _ in range(num_limit):
                forced = self._pity.check()
                if forced is not None:
                    pull_result = forced
                    if self.verbose:
                        print(f"pity hit, you got a: {pull_result} item")
                else:
                    f = rng.random() * gen_limit
                    pull_result = pick_rarity(ranges, f)
                    if self.verbose:
                        print(f"rolled: {f}, you got a: {pull_result} item")
                result.append(self._gacha_by_rarity(pull_result, rng))

            return result

    def _gacha_by_rarity(self, rarity: Rarity, rng: random.Random) -> GachaItem:
        """从指定稀有度的卡池中等概率抽一个物品，成功后才更新计数器"""
        if rarity not in self._data:
            raise InvalidRarityError(rarity)
        pool = self._data[rarity]
        if not pool:
            raise RarityWithNoDataError(rarity)
        item = rng.choice(pool)

        self._chances -= 1
        self._pity.record(rarity)
        return item

    def describe(self) -> str:
        """稀有度表概要"""
        gen_limit = total_weight(self._rarities)
        lines = [f"rarities: {[(str(r), rate) for r, rate in self._rarities]}"]
        for rarity, rg in rarity_range(self._rarities):
            share = rg.length / gen_limit if gen_limit > 0 else 0.0
            count = len(self._data.get(rarity, []))
            lines.append(f"  • {rarity}: [{rg.start:.4f}, {rg.end:.4f}) 占比 {share * 100:.2f}%，物品 {count} 个")
        return "\n".join(lines)


def _copy_pool(data: ItemPool) -> ItemPool:
    return {Rarity.parse(rarity): list(items) for rarity, items in data.items()}
