"""
数据可视化模块
用于生成抽卡模拟结果的图表

独立运行: python visualizer.py
需要先运行 main.py 生成 simulation_results.pkl
"""

import pickle
import os
import sys
import warnings

import matplotlib
from matplotlib import font_manager
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from typing import List, Dict

# 图表标签是中文，按顺序挑第一个已安装的字体
CJK_FONT_CANDIDATES = (
    'Noto Sans CJK SC', 'Source Han Sans SC', 'Microsoft YaHei', 'SimHei',
    'PingFang SC', 'Hiragino Sans GB', 'Arial Unicode MS',
)

# 稀有度配色
RARITY_COLORS = {
    'SSR': '#D62728',   # 红色
    'SR': '#9467BD',    # 紫色
    'R': '#1F77B4',     # 蓝色
    'N': '#7F7F7F',     # 灰色
    'palette': ['#1F77B4', '#FF7F0E', '#2CA02C', '#D62728', '#9467BD', '#8C564B']
}


def find_cjk_font():
    """返回第一个已安装的中文字体名，没有则返回 None"""
    installed = {f.name for f in font_manager.fontManager.ttflist}
    for name in CJK_FONT_CANDIDATES:
        if name in installed:
            return name
    return None


def setup_plot_style():
    """统一图表风格"""
    sns.set_theme(style="whitegrid", context="paper", font_scale=1.2,
                  palette=RARITY_COLORS['palette'])

    font_name = find_cjk_font()
    if font_name is None:
        warnings.warn("未找到可用的中文字体，图表文字可能显示为方框")
    else:
        matplotlib.rcParams['font.sans-serif'] = [font_name, 'DejaVu Sans']
    matplotlib.rcParams.update({
        'axes.unicode_minus': False,
        'figure.dpi': 150,
        'savefig.dpi': 300,
        'axes.facecolor': '#f9fafb',
        'axes.edgecolor': '#e5e7eb',
        'grid.color': '#e5e7eb',
        'grid.linestyle': '--',
        'grid.alpha': 0.8,
    })


setup_plot_style()


def style_axes(ax):
    """去掉上、右边框，网格置于底层"""
    sns.despine(ax=ax)
    ax.tick_params(labelsize=10)
    ax.set_axisbelow(True)


class GachaVisualizer:
    """抽卡结果可视化器"""

    def __init__(self):
        self.colors = RARITY_COLORS

    def plot_rarity_rates(self, results: List[Dict], config: Dict, save_path: str = None) -> str:
        """
        绘制配置概率与实际出货率对比图
        config['rarities']: [(稀有度名, 权重), ...]
        """
        fig, ax = plt.subplots(figsize=(10, 6))
        style_axes(ax)

        rarity_names = list(results[0]['rarity_counts'].keys())
        x = np.arange(len(rarity_names))
        width = 0.35

        total_pulls = sum(sum(r['rarity_counts'].values()) for r in results)
        observed = [
            sum(r['rarity_counts'][name] for r in results) / total_pulls * 100 if total_pulls > 0 else 0
            for name in rarity_names
        ]

        # 同一稀有度重复出现时只有第一个有效
        weights = {}
        for name, rate in config['rarities']:
            weights.setdefault(name, rate)
        gen_limit = sum(rate for _, rate in config['rarities'])
        configured = [weights.get(name, 0) / gen_limit * 100 if gen_limit > 0 else 0 for name in rarity_names]

        ax.bar(x - width/2, configured, width, label='配置概率',
               color='#7F7F7F', alpha=0.85, edgecolor='white', linewidth=1.5)
        bars = ax.bar(x + width/2, observed, width, label='实际出货率',
                      color=[self.colors.get(name, '#1F77B4') for name in rarity_names],
                      alpha=0.85, edgecolor='white', linewidth=1.5)

        # 在条上标注具体数字
        for bar in bars:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width()/2., height,
                    f'{height:.1f}%',
                    ha='center', va='bottom', fontsize=10, fontweight='bold')

        ax.set_xlabel('稀有度', fontsize=13, fontweight='bold')
        ax.set_ylabel('概率 (%)', fontsize=13, fontweight='bold')
        ax.set_title(f'配置概率 vs 实际出货率 (小保底{config["pity"]}抽 / 大保底{config["hard_pity"]}抽)',
                     fontsize=15, fontweight='bold', pad=20)
        ax.set_xticks(x)
        ax.set_xticklabels(rarity_names, fontsize=11)
        ax.legend(fontsize=11, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()

        save_path = save_path or 'rarity_rates.png'
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"图表已保存至: {save_path}")
        plt.close()
        return save_path

    def plot_first_ssr_distribution(self, results: List[Dict], config: Dict, save_path: str = None) -> str:
        """
        绘制首个SSR所需抽数的分布直方图，标注大保底位置
        """
        fig, ax = plt.subplots(figsize=(12, 6))
        style_axes(ax)

        first_ssr = [r['first_ssr_at'] for r in results if r['first_ssr_at'] is not None]

        if first_ssr:
            upper = max(first_ssr)
            bins = np.arange(1, upper + 2)
            sns.histplot(first_ssr, bins=bins, stat='percent', color=self.colors['SSR'],
                         alpha=0.75, edgecolor='white', ax=ax)
            ax.axvline(x=np.mean(first_ssr), color='black', linestyle='--', linewidth=1.5,
                       alpha=0.7, label=f'平均值 {np.mean(first_ssr):.1f}抽')
        else:
            ax.text(0.5, 0.5, '没有抽到SSR', ha='center', va='center', transform=ax.transAxes, fontsize=14)

        if config['hard_pity'] > 0:
            ax.axvline(x=config['hard_pity'], color='orange', linestyle='--', linewidth=1.5,
                       alpha=0.8, label=f'大保底 {config["hard_pity"]}抽')

        ax.set_xlabel('首个SSR所需抽数', fontsize=13, fontweight='bold')
        ax.set_ylabel('出现概率 (%)', fontsize=13, fontweight='bold')
        ax.set_title(f'首个SSR抽数分布 ({len(results)}次模拟)', fontsize=15, fontweight='bold', pad=20)
        if ax.get_legend_handles_labels()[0]:
            ax.legend(fontsize=11, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()

        save_path = save_path or 'first_ssr_distribution.png'
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"图表已保存至: {save_path}")
        plt.close()
        return save_path

    def generate_all_plots(self, results: List[Dict], config: Dict, output_dir: str = '.') -> List[str]:
        """生成所有可视化图表"""
        print("\n" + "=" * 60)
        print("正在生成可视化图表...")
        print("=" * 60)

        print("\n[1/2] 生成出货率对比图...")
        rates_path = self.plot_rarity_rates(results, config, os.path.join(output_dir, 'rarity_rates.png'))

        print("\n[2/2] 生成首个SSR抽数分布图...")
        ssr_path = self.plot_first_ssr_distribution(
            results, config, os.path.join(output_dir, 'first_ssr_distribution.png'))

        print("\n所有图表生成完成！")
        return [rates_path, ssr_path]


def load_simulation_results(file_path: str = 'simulation_results.pkl') -> dict:
    """
    加载模拟结果

    返回: {
        'results': List[Dict],
        'config': Dict
    }
    """
    if not os.path.exists(file_path):
        print(f"错误: 找不到模拟结果文件 '{file_path}'")
        print("请先运行 'python main.py' 生成模拟数据")
        sys.exit(1)

    print(f"正在加载模拟结果: {file_path}")

    with open(file_path, 'rb') as f:
        results = pickle.load(f)

    print(f"✓ 成功加载数据")
    print(f"  模拟次数: {len(results['results'])}")

    return results


def main():
    """主函数：独立运行可视化模块"""
    print("=" * 60)
    print("抽卡保底系统 - 数据可视化工具")
    print("=" * 60)

    loaded = load_simulation_results()
    results = loaded['results']
    config = loaded['config']

    print("\n模拟配置:")
    print(f"  • 抽数: {config['chances']}抽")
    print(f"  • 小保底: {config['pity']}抽")
    print(f"  • 大保底: {config['hard_pity']}抽")
    print(f"  • 稀有度权重: {config['rarities']}")

    visualizer = GachaVisualizer()
    visualizer.generate_all_plots(results, config)

    print("\n" + "=" * 60)
    print("可视化完成！")
    print("=" * 60)


if __name__ == "__main__":
    main()
