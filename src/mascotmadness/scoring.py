#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   scoring.py
@Time    :   2025/03/17
@Version :   0.1.0
@Desc    :   Answer-key construction and round-weighted bracket scoring
"""

import argparse
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from mascotmadness.brackets import FINAL_FOUR, Bracket
from mascotmadness.game_mappings import (
    GameMapping,
    ordered_regions,
    parse_round_number,
    points_per_win,
    slot_index,
)
from mascotmadness.leaderboard import LeaderboardEntry, rank_leaderboard
from mascotmadness.results import GameResult, results_from_records
from mascotmadness.team_names import NameResolver

logger = logging.getLogger(__name__)


class BracketDataError(ValueError):
    """A user bracket is missing data the game mapping expects."""

    def __init__(
        self,
        message: str,
        bracket_id: Optional[str] = None,
        region: Optional[str] = None,
        round_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.bracket_id = bracket_id
        self.region = region
        self.round_number = round_number


@dataclass(frozen=True)
class CorrectGame:
    """
    One game of the answer key. Team names are internal keys; everything is
    blank (with null scores) until the game is decided.
    """

    winner: str = ""
    loser: str = ""
    team1: str = ""
    team2: str = ""
    winner_score: Optional[int] = None
    loser_score: Optional[int] = None
    game_id: str = ""

    def to_dict(self) -> Dict:
        return {
            "winner": self.winner,
            "loser": self.loser,
            "team1": self.team1,
            "team2": self.team2,
            "winnerScore": self.winner_score,
            "loserScore": self.loser_score,
            "gameId": self.game_id,
        }


def build_correct_bracket(
    mapping: GameMapping,
    results: Mapping[str, GameResult],
    resolver: Optional[NameResolver] = None,
    round_orders: Optional[Dict[int, List[int]]] = None,
    last_updated: Optional[datetime] = None,
) -> Dict:
    """
    Lay actual results out in bracket slot order.

    Args:
        mapping: region -> "round_N" -> game ids in scoreboard order
        results: game id -> GameResult
        resolver: Converts scoreboard names back to internal keys
        round_orders: Override for the scoreboard -> slot reordering
        last_updated: Timestamp to record; defaults to now (UTC)

    Returns:
        {"regions": region -> "round_N" -> list of game dicts, "lastUpdated": ISO timestamp}
    """
    resolver = resolver or NameResolver()
    regions = {}

    for region, rounds in ordered_regions(mapping):
        regions[region] = {}
        for round_label, game_ids in rounds.items():
            round_number = parse_round_number(round_label)
            targets = [
                slot_index(region, round_number, i, round_orders)
                for i in range(len(game_ids))
            ]
            games = [CorrectGame()] * (max(targets) + 1 if targets else 0)

            decided = 0
            for game_id, target in zip(game_ids, targets):
                result = results.get(game_id) if game_id else None
                if result is None or not result.is_final:
                    games[target] = CorrectGame(game_id=game_id or "")
                    continue

                decided += 1
                games[target] = CorrectGame(
                    winner=resolver.reverse(result.winner),
                    loser=resolver.reverse(result.loser),
                    team1=resolver.reverse(result.home_team),
                    team2=resolver.reverse(result.away_team),
                    winner_score=result.winner_score,
                    loser_score=result.loser_score,
                    game_id=game_id,
                )

            logger.debug(
                f"{region} round {round_number}: {decided}/{len(game_ids)} games decided "
                f"({points_per_win(region, round_number)} points each)"
            )
            regions[region][round_label] = [game.to_dict() for game in games]

    last_updated = last_updated or datetime.now(timezone.utc)
    return {"regions": regions, "lastUpdated": last_updated.isoformat()}


def _round_picks(
    region_data: Dict, round_number: int, bracket_id: str, region: str
) -> List[Optional[Dict]]:
    """Picks stored for one round; the round must exist even if its slots are empty"""
    rounds = region_data["bracket"]
    if isinstance(rounds, list):
        picks = rounds[round_number] if round_number < len(rounds) else None
    elif isinstance(rounds, dict):
        picks = rounds.get(str(round_number), rounds.get(round_number))
    else:
        raise BracketDataError(
            f"Malformed bracket data for region {region} in bracket {bracket_id}",
            bracket_id=bracket_id,
            region=region,
            round_number=round_number,
        )

    if not picks or not isinstance(picks, list):
        raise BracketDataError(
            f"Missing picks for round {round_number} of region {region} "
            f"in bracket {bracket_id}",
            bracket_id=bracket_id,
            region=region,
            round_number=round_number,
        )
    return picks


def calculate_bracket_score(
    bracket: Union[Bracket, Dict],
    mapping: GameMapping,
    results: Mapping[str, GameResult],
    year: Union[int, str],
    gender: str = "men",
    resolver: Optional[NameResolver] = None,
    round_orders: Optional[Dict[int, List[int]]] = None,
    bracket_id: Optional[str] = None,
) -> Dict[str, int]:
    """
    Score one bracket against the games played so far.

    A correct pick earns the round's points. maxScore adds the points still
    reachable: picks for undecided games whose team has not already lost.
    The result depends only on the inputs, so rescoring is idempotent.

    Args:
        bracket: Bracket or its stored document ({"bracket": {region: state}, ...})
        mapping: region -> "round_N" -> game ids in scoreboard order
        results: game id -> GameResult
        year: Tournament year, for play-in resolution
        gender: "men" or "women"
        resolver: Converts picks to scoreboard names
        round_orders: Override for the scoreboard -> slot reordering
        bracket_id: Identifier used in logs and errors

    Returns:
        {"score": int, "maxScore": int}

    Raises:
        BracketDataError: If the bracket lacks a region or round named in the
            mapping, or holds a malformed region or pick
    """
    resolver = resolver or NameResolver()
    data = bracket.to_dict() if isinstance(bracket, Bracket) else bracket
    bracket_id = bracket_id or data.get("name") or "<unnamed>"
    user_regions = data.get("bracket") or {}

    score = 0
    max_score = 0
    losing_teams = set()

    for region, rounds in ordered_regions(mapping):
        region_data = user_regions.get(region)
        if not isinstance(region_data, dict) or "bracket" not in region_data:
            raise BracketDataError(
                f"Missing bracket data for region {region} in bracket {bracket_id}",
                bracket_id=bracket_id,
                region=region,
            )

        for round_label, game_ids in rounds.items():
            round_number = parse_round_number(round_label)
            points = points_per_win(region, round_number)
            picks = _round_picks(region_data, round_number, bracket_id, region)
            round_score = 0
            round_max = 0

            for i, game_id in enumerate(game_ids):
                user_game_idx = slot_index(region, round_number, i, round_orders)
                pick = picks[user_game_idx] if user_game_idx < len(picks) else None

                result = results.get(game_id) if game_id else None
                decided = result is not None and result.is_final
                if decided:
                    losing_teams.add(result.loser)

                # An empty slot can never be right
                if not pick:
                    continue
                if not isinstance(pick, dict) or not pick.get("name"):
                    raise BracketDataError(
                        f"Malformed pick in slot {user_game_idx} of round {round_number}, "
                        f"region {region} in bracket {bracket_id}",
                        bracket_id=bracket_id,
                        region=region,
                        round_number=round_number,
                    )
                pick_name = resolver.resolve(pick["name"], year, gender)

                if not decided:
                    if pick_name not in losing_teams:
                        round_max += points
                    continue

                if pick_name == result.winner:
                    round_score += points
                    round_max += points

            score += round_score
            max_score += round_max
            logger.debug(
                f"Score for {bracket_id} in {region} round {round_number}: "
                f"{round_score}, Max: {round_max}"
            )

    return {"score": score, "maxScore": max_score}


def score_brackets(
    brackets: Mapping[str, Optional[Union[Bracket, Dict]]],
    mapping: GameMapping,
    results: Mapping[str, GameResult],
    year: Union[int, str],
    gender: str = "men",
    resolver: Optional[NameResolver] = None,
    round_orders: Optional[Dict[int, List[int]]] = None,
    max_workers: int = 4,
) -> Dict[str, Dict[str, int]]:
    """
    Score many brackets in parallel against the same mapping and results.

    Brackets are independent of each other. A missing document or a bracket
    with malformed data is logged and left out of the returned scores.

    Returns:
        bracket id -> {"score", "maxScore"}
    """
    resolver = resolver or NameResolver()

    def score_one(item):
        bracket_id, bracket = item
        if bracket is None:
            logger.warning(f"Bracket data missing for bracket ID: {bracket_id}")
            return bracket_id, None
        try:
            scores = calculate_bracket_score(
                bracket,
                mapping,
                results,
                year,
                gender,
                resolver=resolver,
                round_orders=round_orders,
                bracket_id=bracket_id,
            )
        except BracketDataError as e:
            logger.error(f"Skipping bracket {bracket_id}: {e}")
            return bracket_id, None
        logger.info(
            f"Bracket {bracket_id} - Score: {scores['score']}, Max: {scores['maxScore']}"
        )
        return bracket_id, scores

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        scored = list(executor.map(score_one, brackets.items()))

    return {bracket_id: scores for bracket_id, scores in scored if scores is not None}


def _champion_name(document: Dict) -> Optional[str]:
    final_four = (document.get("bracket") or {}).get(FINAL_FOUR) or {}
    champion = final_four.get("champion")
    return champion["name"] if champion else None


def main():
    """Score a set of stored brackets and print the leaderboard"""
    parser = argparse.ArgumentParser(description="Score Mascot Madness brackets")
    parser.add_argument(
        "--brackets", type=str, required=True, help="JSON file of bracket id -> bracket document"
    )
    parser.add_argument(
        "--mappings", type=str, required=True, help="JSON file of region -> round -> game ids"
    )
    parser.add_argument(
        "--results", type=str, required=True, help="JSON file of game id -> game result"
    )
    parser.add_argument("--year", type=int, default=datetime.now().year, help="Tournament year")
    parser.add_argument(
        "--women", action="store_true", help="Score the women's tournament instead of men's"
    )
    parser.add_argument(
        "--names", type=str, default=None, help="JSON file overriding team name tables"
    )
    parser.add_argument(
        "--correct", type=str, default=None, help="Write the answer key to this JSON file"
    )
    parser.add_argument("--workers", type=int, default=4, help="Parallel scoring workers")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    gender = "women" if args.women else "men"
    resolver = NameResolver.from_json(args.names) if args.names else NameResolver()
    brackets = json.loads(Path(args.brackets).read_text())
    mapping = json.loads(Path(args.mappings).read_text())
    results = results_from_records(json.loads(Path(args.results).read_text()))
    logger.info(
        f"Scoring {len(brackets)} {gender} brackets for {args.year} "
        f"against {len(results)} games"
    )

    if args.correct:
        correct = build_correct_bracket(mapping, results, resolver)
        Path(args.correct).write_text(json.dumps(correct, indent=2))
        logger.info(f"Saved correct bracket to {args.correct}")

    scores = score_brackets(
        brackets, mapping, results, args.year, gender, resolver, max_workers=args.workers
    )
    leaderboard = rank_leaderboard(
        LeaderboardEntry(
            bracket_id=bracket_id,
            display_name=brackets[bracket_id].get("name", ""),
            score=bracket_scores["score"],
            max_score=bracket_scores["maxScore"],
            champion=_champion_name(brackets[bracket_id]),
        )
        for bracket_id, bracket_scores in scores.items()
    )
    print("\nLeaderboard:")
    print(leaderboard.to_string(index=False))


if __name__ == "__main__":
    main()
