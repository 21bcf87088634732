import itertools
import random
import threading
import time

import pytest

from config import GachaConfig
from errors import InvalidRarityError, RarityRangeError, RarityWithNoDataError
from item_pool import make_items
from pool_state import PityState
from rarity import Rarity
from simulator_core import GachaSystem


def make_system(data, chances=10, pity=0, hard_pity=0, rarities=None, seed=7, **kwargs):
    config = GachaConfig(chances=chances, pity=pity, hard_pity=hard_pity)
    if rarities is not None:
        config = GachaConfig(chances=chances, pity=pity, hard_pity=hard_pity, rarities=rarities)
    return GachaSystem(config, data, rng=random.Random(seed), **kwargs)


def test_pull(data, rarities):
    gacha = make_system(data, chances=11, rarities=rarities)
    res = gacha.pull(1)
    assert len(res) == 1

    ten_pull_res = gacha.pull(10)
    assert len(ten_pull_res) == 10
    assert gacha.chances == 0


def test_saturating_pull(data, rarities):
    gacha = make_system(data, chances=8, rarities=rarities)
    res = gacha.pull(1000)
    assert len(res) == 8
    assert gacha.chances == 0


@pytest.mark.parametrize("chances, num", [(0, 5), (5, 0), (3, 3), (4, 9), (9, 4)])
def test_count_bound(data, rarities, chances, num):
    gacha = make_system(data, chances=chances, rarities=rarities)
    assert len(gacha.pull(num)) == min(num, chances)
    assert gacha.chances == chances - min(num, chances)


def test_empty_budget_yields_nothing(data, rarities):
    gacha = make_system(data, chances=2, rarities=rarities)
    gacha.pull(2)
    assert gacha.pull(5) == []
    assert gacha.chances == 0


def test_budget_decreases_by_items_drawn(data, rarities):
    gacha = make_system(data, chances=30, rarities=rarities)
    before = gacha.chances
    for num in (1, 10, 4, 100):
        res = gacha.pull(num)
        assert before - gacha.chances == len(res)
        before = gacha.chances


def test_items_come_from_selected_pool(data, rarities):
    gacha = make_system(data, chances=50, rarities=rarities)
    for item in gacha.pull(50):
        assert item in data[item.rarity]


def test_negative_pull_rejected(data):
    gacha = make_system(data)
    with pytest.raises(ValueError):
        gacha.pull(-1)


@pytest.mark.parametrize("seed", range(20))
def test_soft_pity_no_ssr(data, seed):
    gacha = make_system(data, pity=1, hard_pity=80, seed=seed, rarities=[
        (Rarity.SSR, 0.00),
        (Rarity.SR, 0.001),
        (Rarity.R, 0.5),
        (Rarity.N, 0.5),
    ])
    has_sr = gacha.pull(1)
    assert has_sr[0].rarity is Rarity.SR


def test_soft_pity_ignores_weights(data):
    gacha = make_system(data, pity=1, hard_pity=80, rarities=[
        (Rarity.SSR, 0.001),
        (Rarity.SR, 0.0),
        (Rarity.R, 0.5),
        (Rarity.N, 0.5),
    ])
    has_sr = gacha.pull(1)
    assert has_sr[0].rarity is Rarity.SR


@pytest.mark.parametrize("ssr_rate", [0.1, 0.0])
def test_hard_pity(data, ssr_rate):
    gacha = make_system(data, pity=10, hard_pity=1, rarities=[
        (Rarity.SSR, ssr_rate),
        (Rarity.SR, 0.3),
        (Rarity.R, 0.3),
        (Rarity.N, 0.3),
    ])
    has_ssr = gacha.pull(1)
    assert has_ssr[0].rarity is Rarity.SSR


def test_soft_and_hard_pity_together(data):
    gacha = make_system(data, chances=100, pity=10, hard_pity=80, rarities=[
        (Rarity.SSR, 0.0),
        (Rarity.SR, 0.0),
        (Rarity.R, 0.5),
        (Rarity.N, 0.5),
    ])

    first_nine = gacha.pull(9)
    assert all(item.rarity in (Rarity.R, Rarity.N) for item in first_nine)

    tenth = gacha.pull(1)
    assert tenth[0].rarity is Rarity.SR

    middle = gacha.pull(69)
    sr_positions = [i for i, item in enumerate(middle) if item.rarity is Rarity.SR]
    # 第 20, 30, ..., 70 抽
    assert sr_positions == [9, 19, 29, 39, 49, 59]
    assert all(item.rarity is not Rarity.SSR for item in middle)

    eightieth = gacha.pull(1)
    assert eightieth[0].rarity is Rarity.SSR
    assert gacha.chances == 100 - 80

    state = gacha.pity_state
    assert (state.soft_streak, state.hard_streak) == (0, 0)


def test_missing_rarity_aborts_batch(data):
    del data[Rarity.SR]
    gacha = make_system(data, chances=10, pity=3, rarities=[(Rarity.R, 1.0)])

    with pytest.raises(InvalidRarityError) as excinfo:
        gacha.pull(5)
    assert excinfo.value.rarity is Rarity.SR
    # 前两抽已经成功，不回滚
    assert gacha.chances == 8
    assert gacha.pity_state.soft_streak == 2


def test_empty_rarity_pool_aborts_batch(data):
    data[Rarity.SSR] = []
    gacha = make_system(data, chances=10, hard_pity=1)

    with pytest.raises(RarityWithNoDataError) as excinfo:
        gacha.pull(1)
    assert excinfo.value.rarity is Rarity.SSR
    assert gacha.chances == 10
    assert gacha.pity_state.hard_streak == 0


def test_all_zero_weights_without_pity_fails(data):
    gacha = make_system(data, rarities=[(Rarity.SSR, 0.0), (Rarity.N, 0.0)])
    with pytest.raises(RarityRangeError):
        gacha.pull(1)
    assert gacha.chances == 10


def test_configure_between_batches(data):
    gacha = make_system(data, chances=20, rarities=[(Rarity.N, 1.0)])
    assert all(item.rarity is Rarity.N for item in gacha.pull(5))

    gacha.configure(rarities=[(Rarity.R, 1.0)])
    assert all(item.rarity is Rarity.R for item in gacha.pull(5))

    gacha.configure(hard_pity=gacha.pity_state.hard_streak + 1)
    assert gacha.pull(1)[0].rarity is Rarity.SSR
    assert gacha.chances == 9


def test_configure_rejects_negative_weight(data):
    gacha = make_system(data)
    with pytest.raises(ValueError):
        gacha.configure(rarities=[(Rarity.N, -1.0)])


def test_configured_pool_is_copied(data):
    gacha = make_system(data, rarities=[(Rarity.N, 1.0)])
    data[Rarity.N].clear()
    assert len(gacha.pull(1)) == 1


def test_add_chances(data, rarities):
    gacha = make_system(data, chances=0, rarities=rarities)
    assert gacha.pull(3) == []
    gacha.add_chances(3)
    assert len(gacha.pull(3)) == 3
    with pytest.raises(ValueError):
        gacha.add_chances(-1)


def test_pity_state_is_read_only_copy(data, rarities):
    gacha = make_system(data, rarities=[(Rarity.N, 1.0)], pity=10, hard_pity=50)
    gacha.pull(4)
    state = gacha.pity_state
    state.soft_streak = 0
    assert gacha.pity_state.soft_streak == 4
    assert gacha.pulls_until_soft_pity() == 6
    assert gacha.pulls_until_hard_pity() == 46


def test_same_seed_same_result(data, rarities):
    first = make_system(data, chances=30, rarities=rarities, seed=3).pull(30)
    second = make_system(data, chances=30, rarities=rarities, seed=3).pull(30)
    assert first == second


def test_default_rng(data, rarities):
    gacha = GachaSystem(GachaConfig(chances=5, rarities=rarities), data)
    assert len(gacha.pull(5)) == 5


def test_verbose_prints_each_roll(data, capsys):
    gacha = make_system(data, chances=3, pity=2, rarities=[(Rarity.N, 1.0)], verbose=True)
    gacha.pull(3)
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[0].startswith("rolled: ")
    assert out[0].endswith("you got a: N item")
    assert out[1] == "pity hit, you got a: SR item"


def test_describe_lists_rarities(data, rarities):
    text = make_system(data, rarities=rarities).describe()
    assert "SSR" in text
    assert "[0.0500, 0.4000)" in text


def test_pull_default_config():
    data = {r: make_items(r, 1) for r in Rarity}
    gacha = GachaSystem(data=data)
    assert gacha.chances == 100
    assert gacha.pity_state.soft_threshold == 10
    assert gacha.pity_state.hard_threshold == 50
    assert len(gacha.pull(100)) == 100


def test_from_config(data):
    gacha = GachaSystem.from_config(GachaConfig(chances=3, rarities=[(Rarity.R, 1.0)]), data,
                                    rng=random.Random(1))
    assert [item.rarity for item in gacha.pull(5)] == [Rarity.R] * 3
    assert gacha.rarities == ((Rarity.R, 1.0),)
    assert gacha.data[Rarity.R] == data[Rarity.R]


def test_failed_configure_changes_nothing(data):
    gacha = make_system(data, pity=10, hard_pity=50, rarities=[(Rarity.N, 1.0)])
    new_data = {Rarity.R: make_items(Rarity.R, 1)}

    with pytest.raises(ValueError):
        gacha.configure(rarities=[(Rarity.R, 1.0)], data=new_data, pity=-1, hard_pity=30)
    with pytest.raises(ValueError):
        gacha.configure(rarities=[(Rarity.R, -1.0)], pity=5)

    assert gacha.rarities == ((Rarity.N, 1.0),)
    assert gacha.data == data
    state = gacha.pity_state
    assert (state.soft_threshold, state.hard_threshold) == (10, 50)


def test_budget_only_spent_through_pull(data):
    gacha = make_system(data, chances=0)
    assert not hasattr(gacha, "gacha_by_rarity")
    assert gacha.pull(1) == []
    assert gacha.chances == 0


class SlowRandom(random.Random):
    """每次取随机数时让出线程，放大并发交错"""

    def random(self):
        time.sleep(0.001)
        return super().random()


def test_concurrent_pulls_are_atomic(data):
    config = GachaConfig(chances=20, pity=3, hard_pity=7, rarities=[(Rarity.N, 1.0)])
    gacha = GachaSystem(config, data, rng=SlowRandom(11))

    batches = []
    batches_lock = threading.Lock()
    start = threading.Barrier(4)

    def worker():
        start.wait()
        items = gacha.pull(10)
        with batches_lock:
            batches.append(items)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(len(b) for b in batches) == 20
    assert gacha.chances == 0

    def replay(order):
        state = PityState(3, 7)
        for batch in order:
            for item in batch:
                expected = state.check() or Rarity.N
                if item.rarity is not expected:
                    return None
                state.record(item.rarity)
        return state

    # 每批必须整体连续执行：总能找到一个批次顺序，逐抽重放与实际结果一致
    final = gacha.pity_state
    matches = [
        state for state in (replay(order) for order in itertools.permutations(batches))
        if state is not None
    ]
    assert matches
    assert any((s.soft_streak, s.hard_streak) == (final.soft_streak, final.hard_streak) for s in matches)
