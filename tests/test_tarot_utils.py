import sys
import os
import random

import pytest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tarot_utils import (
    SPREAD_POSITIONS,
    TAROT_CARDS,
    draw_tarot_cards,
    draw_tarot_spread,
    get_card_by_id,
)


def test_deck_layout():
    assert len(TAROT_CARDS) == 78
    assert [card["id"] for card in TAROT_CARDS] == list(range(78))
    assert sum(card["suit"] == "Major" for card in TAROT_CARDS) == 22
    assert get_card_by_id(0)["name_cn"] == "愚人"
    assert get_card_by_id(21)["name_cn"] == "世界"
    assert get_card_by_id(22)["name_cn"] == "权杖一"
    assert get_card_by_id(35)["name"] == "King of Wands"
    assert get_card_by_id(77)["name_cn"] == "金币国王"
    assert get_card_by_id(78) is None


def test_suit_elements():
    elements = {card["suit"]: card["element"] for card in TAROT_CARDS if card["suit"] != "Major"}
    assert elements == {"Wands": "Fire", "Cups": "Water", "Swords": "Air", "Pentacles": "Earth"}


def test_seeded_draw_is_reproducible():
    first = draw_tarot_cards(3, rng=random.Random(42))
    second = draw_tarot_cards(3, rng=random.Random(42))
    assert first == second


def test_draw_without_replacement():
    cards = draw_tarot_cards(78, rng=random.Random(1))
    assert sorted(card["id"] for card in cards) == list(range(78))


def test_reversed_flag_selects_meaning():
    for card in draw_tarot_cards(20, rng=random.Random(5)):
        expected = card["reversed_meaning"] if card["is_reversed"] else card["upright"]
        assert card["meaning"] == expected


def test_excluded_cards_are_never_drawn():
    excluded = list(range(70))
    cards = draw_tarot_cards(8, exclude_ids=excluded, rng=random.Random(3))
    assert sorted(card["id"] for card in cards) == list(range(70, 78))


def test_draw_does_not_mutate_deck():
    draw_tarot_cards(5, rng=random.Random(9))
    assert all("is_reversed" not in card for card in TAROT_CARDS)


@pytest.mark.parametrize("count,exclude", [(0, ()), (79, ()), (3, range(76))])
def test_draw_count_out_of_range(count, exclude):
    with pytest.raises(ValueError):
        draw_tarot_cards(count, exclude_ids=exclude, rng=random.Random(0))


def test_three_card_spread_positions():
    cards = draw_tarot_spread("three_card", rng=random.Random(11))
    assert [card["position"] for card in cards] == ["过去", "现在", "未来"]
    assert len({card["id"] for card in cards}) == 3

    daily = draw_tarot_spread("daily", rng=random.Random(11))
    assert daily[0]["position"] == SPREAD_POSITIONS["daily"][0][0]


def test_unknown_spread():
    with pytest.raises(ValueError):
        draw_tarot_spread("celtic_cross")
