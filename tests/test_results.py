import pytest

from mascotmadness.results import (
    GameResult,
    chunk_game_ids,
    fetch_results_in_chunks,
    parse_score,
    results_from_records,
)


@pytest.fixture
def stored_record():
    return {
        "gameId": "6300001",
        "homeTeam": "duke",
        "awayTeam": "mt-st-mary-ny",
        "homeScore": "93",
        "awayScore": "49",
        "winner": "duke",
        "loser": "mt-st-mary-ny",
        "status": "FINAL",
        "gameDate": "03-21-2025",
    }


def test_game_result_from_dict(stored_record):
    result = GameResult.from_dict(stored_record)

    assert result.game_id == "6300001"
    assert result.home_score == 93
    assert result.is_final
    assert result.winner_score == 93
    assert result.loser_score == 49
    assert GameResult.from_dict(result.to_dict()) == result


def test_away_winner_scores():
    result = GameResult("1", "duke", "unc", 60, 71, winner="unc", loser="duke")
    assert result.winner_score == 71
    assert result.loser_score == 60


def test_undecided_game():
    """A game without a flagged winner is not final"""
    result = GameResult.from_dict({"gameId": "2", "homeTeam": "a", "awayTeam": "b", "winner": None})
    assert not result.is_final
    assert result.winner_score is None
    assert result.loser_score is None


def test_parse_score():
    assert parse_score("71") == 71
    assert parse_score(64) == 64
    assert parse_score("") is None
    assert parse_score(None) is None
    assert parse_score("--") is None


def test_results_from_records(stored_record):
    by_id = results_from_records({"6300001": stored_record})
    assert list(by_id) == ["6300001"]

    newer = dict(stored_record, homeScore="95")
    by_list = results_from_records([stored_record, newer])
    assert len(by_list) == 1
    assert by_list["6300001"].home_score == 95

    keyed_only = dict(stored_record)
    del keyed_only["gameId"]
    assert results_from_records({"6300001": keyed_only})["6300001"].winner == "duke"


def test_chunk_game_ids():
    ids = [f"g{i}" for i in range(65)]
    chunks = chunk_game_ids(ids)
    assert [len(c) for c in chunks] == [30, 30, 5]
    assert sum(chunks, []) == ids
    assert chunk_game_ids([]) == []
    with pytest.raises(ValueError):
        chunk_game_ids(ids, 0)


def test_fetch_results_in_chunks():
    """Every chunk is fetched and merged; a failing chunk is skipped"""
    ids = [f"g{i}" for i in range(70)]
    calls = []

    def fetch_chunk(chunk):
        calls.append(chunk)
        if "g31" in chunk:
            raise RuntimeError("query failed")
        return [
            {"gameId": game_id, "homeTeam": "a", "awayTeam": "b", "winner": "a", "loser": "b"}
            for game_id in chunk
        ]

    results = fetch_results_in_chunks(ids, fetch_chunk)

    assert len(calls) == 3
    assert all(len(chunk) <= 30 for chunk in calls)
    assert set(results) == {f"g{i}" for i in range(30)} | {f"g{i}" for i in range(60, 70)}
    assert all(isinstance(r, GameResult) for r in results.values())
