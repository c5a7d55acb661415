#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   results.py
@Time    :   2025/03/16
@Version :   0.1.0
@Desc    :   Normalized game results and batched result loading
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

# Largest id list the result store accepts in a single query
RESULT_CHUNK_SIZE = 30


@dataclass(frozen=True)
class GameResult:
    """
    One game as reported by the NCAA scoreboard. Team names use the feed's
    SEO naming (e.g. "north-carolina-st").

    winner and loser stay None until the feed flags a winner.
    """

    game_id: str
    home_team: str
    away_team: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    winner: Optional[str] = None
    loser: Optional[str] = None
    status: Optional[str] = None
    game_date: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return bool(self.winner)

    @property
    def winner_score(self) -> Optional[int]:
        if not self.is_final:
            return None
        return self.home_score if self.winner == self.home_team else self.away_score

    @property
    def loser_score(self) -> Optional[int]:
        if not self.is_final:
            return None
        return self.away_score if self.winner == self.home_team else self.home_score

    def to_dict(self) -> Dict:
        return {
            "gameId": self.game_id,
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
            "winner": self.winner,
            "loser": self.loser,
            "status": self.status,
            "gameDate": self.game_date,
        }

    @classmethod
    def from_dict(cls, data: Mapping, game_id: Optional[str] = None) -> "GameResult":
        return cls(
            game_id=str(data.get("gameId") or game_id),
            home_team=data.get("homeTeam", ""),
            away_team=data.get("awayTeam", ""),
            home_score=parse_score(data.get("homeScore")),
            away_score=parse_score(data.get("awayScore")),
            winner=data.get("winner") or None,
            loser=data.get("loser") or None,
            status=data.get("status"),
            game_date=data.get("gameDate"),
        )


def parse_score(value: Union[int, str, None]) -> Optional[int]:
    """Scores arrive as strings from the feed and are blank before tip-off"""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric score {value!r}")
        return None


def results_from_records(
    records: Union[Mapping[str, Mapping], Iterable[Mapping]]
) -> Dict[str, GameResult]:
    """
    Build a game id -> GameResult map from stored records.

    Accepts either a mapping keyed by game id or a sequence of records.
    A later record with the same id replaces the earlier one.
    """
    if isinstance(records, Mapping):
        items = [(game_id, record) for game_id, record in records.items()]
    else:
        items = [(None, record) for record in records]

    results = {}
    for game_id, record in items:
        result = record if isinstance(record, GameResult) else GameResult.from_dict(record, game_id)
        results[result.game_id] = result
    return results


def chunk_game_ids(game_ids: List[str], size: int = RESULT_CHUNK_SIZE) -> List[List[str]]:
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [game_ids[i : i + size] for i in range(0, len(game_ids), size)]


def fetch_results_in_chunks(
    game_ids: List[str],
    fetch_chunk: Callable[[List[str]], Union[Mapping[str, Mapping], Iterable[Mapping]]],
    size: int = RESULT_CHUNK_SIZE,
) -> Dict[str, GameResult]:
    """
    Load results for many game ids through a store that limits query size.

    Every chunk is attempted before returning so scoring never sees a
    half-filled result map. A failing chunk is logged and skipped.

    Args:
        game_ids: Game ids to look up
        fetch_chunk: Called with at most `size` ids, returns their stored records
        size: Maximum ids per call

    Returns:
        Merged game id -> GameResult map
    """
    chunks = chunk_game_ids(game_ids, size)
    logger.info(f"Fetching results for {len(game_ids)} games in {len(chunks)} queries")

    results: Dict[str, GameResult] = {}
    for chunk in chunks:
        logger.debug(f"Fetching chunk: {chunk}")
        try:
            records = fetch_chunk(chunk)
        except Exception as e:
            logger.warning(f"Failed to fetch results for {len(chunk)} games: {e}")
            continue
        results.update(results_from_records(records))

    logger.info(f"Retrieved {len(results)} game results")
    return results
