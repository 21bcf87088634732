"""
抽卡保底系统 - 主程序入口

运行此文件以演示抽卡并执行蒙特卡洛分析

核心规则：
1. 稀有度按声明顺序把权重累加成区间，随机数落在哪个区间就出哪个稀有度
2. 小保底：连续 pity-1 抽没出 SR 及以上，下一抽必出 SR
3. 大保底：连续 hard_pity-1 抽没出 SSR，下一抽必出 SSR（优先于小保底）
4. 出 SSR 清空两个计数器；出 SR 只清空小保底计数器
5. 连抽次数超过剩余抽数时，只抽剩余的部分
"""


import pickle
from config import GachaConfig
from item_pool import make_items, missing_rarities
from monte_carlo_analyzer import MonteCarloAnalyzer
from rarity import Rarity
from simulator_core import GachaSystem


def demo_pool():
    """演示用卡池"""
    return {
        Rarity.SSR: make_items(Rarity.SSR, 2),
        Rarity.SR: make_items(Rarity.SR, 3),
        Rarity.R: make_items(Rarity.R, 4),
        Rarity.N: make_items(Rarity.N, 3),
    }


def main():
    """主函数"""
    config = GachaConfig()
    data = demo_pool()

    print("=" * 60)
    print("抽卡保底系统")
    print("=" * 60)
    print("\n当前规则:")
    print(f"  • 抽数: {config.chances}抽")
    print(f"  • 小保底: 第{config.pity}抽必出SR")
    print(f"  • 大保底: 第{config.hard_pity}抽必出SSR")

    missing = missing_rarities(data, config.rarities)
    if missing:
        print(f"警告: 以下稀有度在卡池中没有物品: {', '.join(str(r) for r in missing)}")

    system = GachaSystem(config, data)
    print()
    print(system.describe())

    # ========== 演示抽卡 ==========
    print("\n" + "=" * 60)
    print("演示抽卡")
    print("=" * 60)

    single = system.pull(1)
    print(f"\n单抽: {[item.name for item in single]}")

    ten = system.pull(10)
    print(f"十连: {[item.name for item in ten]}")
    print(f"剩余抽数: {system.chances}")
    print(f"距离小保底: {system.pulls_until_soft_pity()}抽")
    print(f"距离大保底: {system.pulls_until_hard_pity()}抽")

    # ========== 蒙特卡洛分析 ==========
    analyzer = MonteCarloAnalyzer(config, data, iterations=5000)
    results = analyzer.simulate()
    analyzer.print_results(results)

    # ========== 保存模拟结果 ==========
    print("=" * 60)
    print("保存模拟结果")
    print("=" * 60)

    simulation_results = {
        'results': results,
        'summary': analyzer.summarize(results),
        'config': config.to_dict(),
    }

    output_file = 'simulation_results.pkl'
    with open(output_file, 'wb') as f:
        pickle.dump(simulation_results, f)

    print(f"\n✓ 模拟结果已保存至: {output_file}")
    print(f"  模拟次数: {len(results)}")
    print(f"\n提示: 运行 'python visualizer.py' 生成可视化图表")


if __name__ == "__main__":
    main()
