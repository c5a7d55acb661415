#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   leaderboard.py
@Time    :   2025/03/17
@Version :   0.1.0
@Desc    :   Leaderboard ordering with shared ranks for tied scores
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional, Tuple, Union

import pandas as pd

COLUMNS = ["bracket_id", "display_name", "score", "max_score", "champion", "rank"]


@dataclass
class LeaderboardEntry:
    """A published bracket's standing; rank is filled in by rank_leaderboard"""

    bracket_id: str
    display_name: str = ""
    score: Optional[int] = 0
    max_score: Optional[int] = None
    champion: Optional[str] = None
    rank: Optional[int] = None


def rank_leaderboard(
    entries: Iterable[Union[LeaderboardEntry, Tuple[str, int]]]
) -> pd.DataFrame:
    """
    Sort entries by score and assign competition ranks.

    Tied scores share a rank and the next entry takes its 1-based position,
    so scores [200, 150, 150, 100] rank as [1, 2, 2, 4]. Entries with equal
    scores keep their input order. A missing score counts as 0.

    Args:
        entries: LeaderboardEntry objects or (bracket_id, score) pairs

    Returns:
        DataFrame with one row per entry, best score first
    """
    rows = []
    for entry in entries:
        if not isinstance(entry, LeaderboardEntry):
            bracket_id, score = entry
            entry = LeaderboardEntry(bracket_id=bracket_id, score=score)
        rows.append(asdict(entry))

    leaderboard = pd.DataFrame(rows, columns=COLUMNS)
    if leaderboard.empty:
        return leaderboard

    leaderboard["score"] = leaderboard["score"].fillna(0).astype(int)
    leaderboard = leaderboard.sort_values(
        "score", ascending=False, kind="mergesort", ignore_index=True
    )
    leaderboard["rank"] = (
        leaderboard["score"].rank(method="min", ascending=False).astype(int)
    )
    return leaderboard
