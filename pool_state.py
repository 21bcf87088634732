"""
保底状态类
"""
from typing import Optional

from rarity import Rarity


class PityState:
    """保底计数器"""
    def __init__(self, soft_threshold: int = 0, hard_threshold: int = 0):
        self.soft_streak = 0  # 距上次出 SR 及以上的抽数（小保底）
        self.hard_streak = 0  # 距上次出 SSR 的抽数（大保底）
        self.soft_threshold = soft_threshold  # 第几抽触发小保底，0 表示关闭
        self.hard_threshold = hard_threshold  # 第几抽触发大保底，0 表示关闭

    def check(self) -> Optional[Rarity]:
        """
        判断下一抽是否触发保底
        返回: 被保底锁定的稀有度；未触发返回 None

        大保底优先于小保底，两者都不再随机
        """
        if self.hard_streak + 1 == self.hard_threshold:
            return Rarity.best()
        if self.soft_streak + 1 == self.soft_threshold:
            return Rarity.runner_up()
        return None

    def record(self, rarity: Rarity):
        """抽到物品后更新计数器"""
        if rarity >= Rarity.best():
            self.hard_streak = 0
            self.soft_streak = 0
        elif rarity >= Rarity.runner_up():
            self.hard_streak += 1
            self.soft_streak = 0
        else:
            self.hard_streak += 1
            self.soft_streak += 1

    def pulls_until_soft_pity(self) -> Optional[int]:
        """距离小保底还有几抽（含触发的那一抽）"""
        return _pulls_until(self.soft_streak, self.soft_threshold)

    def pulls_until_hard_pity(self) -> Optional[int]:
        """距离大保底还有几抽（含触发的那一抽）"""
        return _pulls_until(self.hard_streak, self.hard_threshold)

    def copy(self) -> "PityState":
        state = PityState(self.soft_threshold, self.hard_threshold)
        state.soft_streak = self.soft_streak
        state.hard_streak = self.hard_streak
        return state

    def __repr__(self):
        return (f"PityState(soft_streak={self.soft_streak}, hard_streak={self.hard_streak}, "
                f"soft_threshold={self.soft_threshold}, hard_threshold={self.hard_threshold})")


def _pulls_until(streak: int, threshold: int) -> Optional[int]:
    # 计数已经越过阈值时（例如中途调低阈值）保底不会再触发
    if threshold <= 0 or streak >= threshold:
        return None
    return threshold - streak
