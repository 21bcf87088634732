import random

import matplotlib
import pytest

matplotlib.use("Agg")

from item_pool import make_items  # noqa: E402
from rarity import Rarity  # noqa: E402


RARITIES = [
    (Rarity.SSR, 0.05),
    (Rarity.N, 0.35),
    (Rarity.R, 0.4),
    (Rarity.SR, 0.2),
]


@pytest.fixture
def rarities():
    return list(RARITIES)


@pytest.fixture
def data():
    return {
        Rarity.SSR: make_items(Rarity.SSR, 2),
        Rarity.SR: make_items(Rarity.SR, 3),
        Rarity.R: make_items(Rarity.R, 4),
        Rarity.N: make_items(Rarity.N, 3),
    }


@pytest.fixture
def rng():
    return random.Random(20240601)
