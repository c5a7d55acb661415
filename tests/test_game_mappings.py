import pytest

from mascotmadness.brackets import FINAL_FOUR
from mascotmadness.game_mappings import (
    ROUND_ORDERS,
    collect_game_ids,
    merge_game_mappings,
    ordered_regions,
    parse_round_number,
    points_per_win,
    slot_index,
)


def test_parse_round_number():
    assert parse_round_number("round_1") == 1
    assert parse_round_number("round_12") == 12
    for label in ["round", "round_", "final", "round_x", "round_0", "round_00"]:
        with pytest.raises(ValueError):
            parse_round_number(label)


def test_points_per_win():
    """Points double each round; Final Four games are scaled by 16"""
    assert [points_per_win("east", r) for r in range(1, 5)] == [10, 20, 40, 80]
    assert points_per_win(FINAL_FOUR, 1) == 160
    assert points_per_win(FINAL_FOUR, 2) == 320


def test_perfect_bracket_total():
    """A perfect bracket is worth 1920 points"""
    region_total = sum(
        len(ROUND_ORDERS[r]) * points_per_win("east", r) for r in ROUND_ORDERS
    )
    final_four_total = 2 * points_per_win(FINAL_FOUR, 1) + points_per_win(FINAL_FOUR, 2)
    assert 4 * region_total + final_four_total == 1920


def test_slot_index():
    assert [slot_index("east", 1, i) for i in range(8)] == [0, 6, 4, 2, 3, 5, 7, 1]
    assert [slot_index("east", 2, i) for i in range(4)] == [0, 3, 2, 1]
    assert [slot_index(FINAL_FOUR, 1, i) for i in range(2)] == [0, 1]
    assert slot_index("east", 1, 1, round_orders={1: [1, 0]}) == 0

    with pytest.raises(ValueError):
        slot_index("east", 5, 0)
    with pytest.raises(ValueError):
        slot_index("east", 4, 1)


def test_ordered_regions_puts_final_four_last():
    mapping = {FINAL_FOUR: {}, "east": {}, "west": {}}
    assert [name for name, _ in ordered_regions(mapping)] == ["east", "west", FINAL_FOUR]
    assert [name for name, _ in ordered_regions({"south": {}})] == ["south"]


def test_collect_game_ids():
    mapping = {
        "east": {"round_1": ["g1", None, "g2"], "round_2": [None]},
        FINAL_FOUR: {"round_1": ["g3", ""]},
    }
    assert collect_game_ids(mapping) == ["g1", "g2", "g3"]


def test_merge_game_mappings():
    """New rounds replace old ones; everything else is kept"""
    existing = {"east": {"round_1": ["a"], "round_2": ["b"]}}
    new = {"east": {"round_1": ["c"]}, "west": {"round_1": ["d"]}}

    merged = merge_game_mappings(existing, new)

    assert merged == {
        "east": {"round_1": ["c"], "round_2": ["b"]},
        "west": {"round_1": ["d"]},
    }
    assert existing == {"east": {"round_1": ["a"], "round_2": ["b"]}}
    assert merge_game_mappings(None, new) == new
