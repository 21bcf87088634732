"""
蒙特卡洛分析器
"""
import random
from typing import List, Dict, Optional

import numpy as np

from config import GachaConfig
from item_pool import ItemPool
from rarity import Rarity
from simulator_core import GachaSystem


class MonteCarloAnalyzer:
    """蒙特卡洛分析器 - 统计实际出货率与保底触发情况"""

    def __init__(self, config: GachaConfig, data: ItemPool, iterations: int = 10000,
                 seed: Optional[int] = None):
        self.config = config
        self.data = data
        self.iterations = iterations
        self.seed = seed

    def simulate(self, pulls_per_run: Optional[int] = None) -> List[Dict]:
        """
        用新的抽卡系统模拟多次，每次把抽数抽完（或抽 pulls_per_run 次）
        返回: [{
            'rarity_counts': 各稀有度数量,
            'first_ssr_at': 第一次出 SSR 是第几抽（没出为 None）,
            'soft_pity_hits': 小保底触发次数,
            'hard_pity_hits': 大保底触发次数,
            'chances_left': 剩余抽数
        }, ...]
        """
        if pulls_per_run is None:
            pulls_per_run = self.config.chances
        rng = random.Random(self.seed)
        results = []

        print(f"正在模拟抽卡，共 {self.iterations} 次，每次 {pulls_per_run} 抽...")

        for i in range(self.iterations):
            if (i + 1) % 1000 == 0:
                print(f"进度: {i + 1}/{self.iterations}")

            system = GachaSystem(self.config, self.data, rng=rng)
            results.append(self._run_once(system, pulls_per_run))

        return results

    def _run_once(self, system: GachaSystem, pulls_per_run: int) -> Dict:
        rarity_counts = {str(r): 0 for r in Rarity}
        first_ssr_at = None
        soft_pity_hits = 0
        hard_pity_hits = 0

        # 逐抽进行，以便在抽取前观察保底是否触发
        for pull_idx in range(1, pulls_per_run + 1):
            if system.chances == 0:
                break
            forced = system.pity_state.check()
            items = system.pull(1)
            item = items[0]

            if forced is Rarity.best():
                hard_pity_hits += 1
            elif forced is Rarity.runner_up():
                soft_pity_hits += 1

            rarity_counts[str(item.rarity)] += 1
            if item.rarity is Rarity.best() and first_ssr_at is None:
                first_ssr_at = pull_idx

        return {
            'rarity_counts': rarity_counts,
            'first_ssr_at': first_ssr_at,
            'soft_pity_hits': soft_pity_hits,
            'hard_pity_hits': hard_pity_hits,
            'chances_left': system.chances,
        }

    def summarize(self, results: List[Dict]) -> Dict:
        """汇总统计"""
        assert results, "没有模拟结果"

        total_pulls = sum(sum(r['rarity_counts'].values()) for r in results)
        rarity_rates = {}
        for rarity in Rarity:
            count = sum(r['rarity_counts'][str(rarity)] for r in results)
            rarity_rates[str(rarity)] = count / total_pulls if total_pulls > 0 else 0.0

        first_ssr = np.array([r['first_ssr_at'] for r in results if r['first_ssr_at'] is not None])
        hard_hits = np.array([r['hard_pity_hits'] for r in results])
        soft_hits = np.array([r['soft_pity_hits'] for r in results])

        summary = {
            'runs': len(results),
            'total_pulls': total_pulls,
            'rarity_rates': rarity_rates,
            'ssr_runs': int(first_ssr.size),
            'soft_pity_mean': float(np.mean(soft_hits)),
            'hard_pity_mean': float(np.mean(hard_hits)),
            'hard_pity_run_rate': float(np.mean(hard_hits > 0)),
        }
        if first_ssr.size > 0:
            summary.update({
                'first_ssr_mean': float(np.mean(first_ssr)),
                'first_ssr_median': float(np.median(first_ssr)),
                'first_ssr_p25': float(np.percentile(first_ssr, 25)),
                'first_ssr_p75': float(np.percentile(first_ssr, 75)),
                'first_ssr_p90': float(np.percentile(first_ssr, 90)),
                'first_ssr_max': int(np.max(first_ssr)),
            })
        return summary

    def print_results(self, results: List[Dict]):
        """打印模拟结果"""
        summary = self.summarize(results)

        print("\n" + "=" * 60)
        print("【模拟结果】")
        print("=" * 60)
        print(f"\n模拟次数: {summary['runs']}")
        print(f"总抽数: {summary['total_pulls']}")

        print(f"\n实际出货率:")
        for rarity, rate in summary['rarity_rates'].items():
            print(f"  {rarity}: {rate * 100:.2f}%")

        print(f"\n首个SSR所需抽数 (出过SSR的 {summary['ssr_runs']} 次):")
        if summary['ssr_runs'] > 0:
            print(f"  平均值: {summary['first_ssr_mean']:.2f} 抽")
            print(f"  中位数: {summary['first_ssr_median']:.0f} 抽")
            print(f"  25%分位数: {summary['first_ssr_p25']:.0f} 抽")
            print(f"  75%分位数: {summary['first_ssr_p75']:.0f} 抽")
            print(f"  90%分位数: {summary['first_ssr_p90']:.0f} 抽")
            print(f"  最大值: {summary['first_ssr_max']} 抽")

        print(f"\n保底触发:")
        print(f"  小保底平均次数: {summary['soft_pity_mean']:.2f}")
        print(f"  大保底平均次数: {summary['hard_pity_mean']:.2f}")
        print(f"  触发过大保底的比例: {summary['hard_pity_run_rate'] * 100:.2f}%")

        print("\n" + "=" * 60 + "\n")
