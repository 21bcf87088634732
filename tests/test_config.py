import pytest

from config import GachaConfig
from rarity import Rarity


def test_defaults():
    config = GachaConfig()
    assert config.chances == 100
    assert config.pity == 10
    assert config.hard_pity == 50
    assert [r for r, _ in config.rarities] == [Rarity.SSR, Rarity.SR, Rarity.R, Rarity.N]


def test_rarity_names_are_parsed():
    config = GachaConfig(rarities=[("ssr", 1), ("N", 2)])
    assert config.rarities == [(Rarity.SSR, 1.0), (Rarity.N, 2.0)]


@pytest.mark.parametrize("kwargs", [
    {'chances': -1},
    {'pity': -1},
    {'hard_pity': -1},
    {'rarities': [(Rarity.N, -0.1)]},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        GachaConfig(**kwargs)


def test_to_dict():
    config = GachaConfig(chances=5, rarities=[(Rarity.SR, 1.0)])
    assert config.to_dict() == {
        'chances': 5,
        'pity': 10,
        'hard_pity': 50,
        'rarities': [('SR', 1.0)],
    }


def test_unknown_rarity_name_is_a_config_error():
    with pytest.raises(ValueError):
        GachaConfig(rarities=[("UR", 1.0)])
