#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   game_mappings.py
@Time    :   2025/03/16
@Version :   0.1.0
@Desc    :   Helpers for the region -> round -> game id mapping
"""

import copy
from typing import Dict, List, Optional, Tuple

from mascotmadness.brackets import FINAL_FOUR

# Mapping position -> bracket slot for each geographic round. The scoreboard
# lists a round's games in a different sequence than the bracket shows them.
ROUND_ORDERS = {
    1: [0, 6, 4, 2, 3, 5, 7, 1],
    2: [0, 3, 2, 1],
    3: [0, 1],
    4: [0],
}

GameMapping = Dict[str, Dict[str, List[Optional[str]]]]


def parse_round_number(round_label: str) -> int:
    """Extract N from a "round_N" label"""
    prefix, _, number = round_label.partition("_")
    if prefix != "round" or not number.isdigit() or int(number) < 1:
        raise ValueError(
            f"Round label must look like 'round_N' with N >= 1, got {round_label!r}"
        )
    return int(number)


def points_per_win(region: str, round_number: int) -> int:
    """
    Points for a correct pick. Geographic rounds are worth 10, 20, 40, 80;
    Final Four games are scaled by 16 so a perfect bracket totals 1920.
    """
    points = 10 * 2 ** (round_number - 1)
    return points * 16 if region == FINAL_FOUR else points


def slot_index(
    region: str,
    round_number: int,
    position: int,
    round_orders: Optional[Dict[int, List[int]]] = None,
) -> int:
    """Bracket slot shown for the game at `position` in a round's id list"""
    if region == FINAL_FOUR:
        return position
    order = (ROUND_ORDERS if round_orders is None else round_orders).get(round_number)
    if order is None or position >= len(order):
        raise ValueError(
            f"No slot order for position {position} of round {round_number} in {region}"
        )
    return order[position]


def ordered_regions(mapping: GameMapping) -> List[Tuple[str, Dict[str, List[Optional[str]]]]]:
    """Mapping items with the Final Four moved to the end"""
    regions = [(name, rounds) for name, rounds in mapping.items() if name != FINAL_FOUR]
    if FINAL_FOUR in mapping:
        regions.append((FINAL_FOUR, mapping[FINAL_FOUR]))
    return regions


def collect_game_ids(mapping: GameMapping) -> List[str]:
    """All mapped game ids in mapping order, skipping unassigned games"""
    return [
        game_id
        for rounds in mapping.values()
        for game_ids in rounds.values()
        for game_id in game_ids
        if game_id
    ]


def merge_game_mappings(existing: Optional[GameMapping], new: GameMapping) -> GameMapping:
    """
    Merge a partial mapping update into the stored mapping. A round present
    in `new` replaces that round's ids; other rounds and regions are kept.
    """
    merged = copy.deepcopy(existing) if existing else {}
    for region, rounds in new.items():
        merged.setdefault(region, {})
        for round_label, game_ids in rounds.items():
            merged[region][round_label] = list(game_ids)
    return merged
