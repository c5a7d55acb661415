import numpy as np
import pandas as pd

from mascotmadness.leaderboard import COLUMNS, LeaderboardEntry, rank_leaderboard


def competition_ranks(sorted_scores):
    """Reference ranking: ties share a rank, the next rank is the position"""
    ranks = []
    for i, score in enumerate(sorted_scores):
        if i > 0 and score == sorted_scores[i - 1]:
            ranks.append(ranks[-1])
        else:
            ranks.append(i + 1)
    return ranks


def test_tied_ranks():
    """Tied entries share a rank and the next rank skips ahead"""
    leaderboard = rank_leaderboard([("a", 150), ("b", 200), ("c", 100), ("d", 150)])

    assert leaderboard["score"].tolist() == [200, 150, 150, 100]
    assert leaderboard["rank"].tolist() == [1, 2, 2, 4]
    assert leaderboard["bracket_id"].tolist() == ["b", "a", "d", "c"]


def test_ranking_property():
    """Random score lists always get competition ranks"""
    rng = np.random.default_rng(42)
    for _ in range(200):
        n_entries = int(rng.integers(1, 30))
        scores = rng.integers(0, 8, size=n_entries) * 10
        entries = [(f"bracket_{i}", int(s)) for i, s in enumerate(scores)]

        leaderboard = rank_leaderboard(entries)
        sorted_scores = leaderboard["score"].tolist()

        assert sorted_scores == sorted(scores.tolist(), reverse=True)
        assert leaderboard["rank"].tolist() == competition_ranks(sorted_scores)
        assert leaderboard["rank"].iloc[0] == 1


def test_entries_keep_details():
    entries = [
        LeaderboardEntry("u1", "Chalk", score=320, max_score=1600, champion="duke"),
        LeaderboardEntry("u2", "Upsets", score=None, max_score=900, champion="yale"),
        LeaderboardEntry("u3", "Also Chalk", score=320, max_score=1500, champion="duke"),
    ]
    leaderboard = rank_leaderboard(entries)

    assert list(leaderboard.columns) == COLUMNS
    assert leaderboard["display_name"].tolist() == ["Chalk", "Also Chalk", "Upsets"]
    assert leaderboard["score"].tolist() == [320, 320, 0]
    assert leaderboard["rank"].tolist() == [1, 1, 3]
    assert leaderboard["max_score"].tolist() == [1600, 1500, 900]


def test_empty_leaderboard():
    leaderboard = rank_leaderboard([])
    assert isinstance(leaderboard, pd.DataFrame)
    assert leaderboard.empty
    assert list(leaderboard.columns) == COLUMNS
