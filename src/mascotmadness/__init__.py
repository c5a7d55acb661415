"""
mascotmadness - Bracket engine and scoring for a March Madness mascot game.

This package provides:
- Pick-by-pick bracket construction for each region and the Final Four
- Translation between internal team keys and NCAA scoreboard names
- Game results pulled from the NCAA scoreboard feed (no affiliation)
- An answer-key bracket built from actual results
- Round-weighted scoring with maximum-possible-score tracking
- Leaderboard ranking with shared ranks for ties

Main components:
- Team, Region, Bracket: Bracket state and pick progression
- NameResolver: Team name conversion and play-in resolution
- GameResult, NCAAScoreboard: Game results and their ingestion
- build_correct_bracket, calculate_bracket_score, score_brackets: Scoring
- rank_leaderboard: Leaderboard ordering
"""

from .brackets import FINAL_FOUR, Bracket, Region, Team
from .game_mappings import ROUND_ORDERS, collect_game_ids, merge_game_mappings
from .leaderboard import LeaderboardEntry, rank_leaderboard
from .ncaa_scraper import NCAAScoreboard, parse_scoreboard
from .results import GameResult, fetch_results_in_chunks, results_from_records
from .scoring import (
    BracketDataError,
    CorrectGame,
    build_correct_bracket,
    calculate_bracket_score,
    score_brackets,
)
from .team_names import NameResolver

__version__ = "0.1.0"

# List of public objects that should be available when using "from mascotmadness import *"
__all__ = [
    # Bracket engine
    "FINAL_FOUR",
    "Team",
    "Region",
    "Bracket",
    # Names and results
    "NameResolver",
    "GameResult",
    "NCAAScoreboard",
    "parse_scoreboard",
    "results_from_records",
    "fetch_results_in_chunks",
    # Scoring
    "ROUND_ORDERS",
    "collect_game_ids",
    "merge_game_mappings",
    "BracketDataError",
    "CorrectGame",
    "build_correct_bracket",
    "calculate_bracket_score",
    "score_brackets",
    # Leaderboard
    "LeaderboardEntry",
    "rank_leaderboard",
]
