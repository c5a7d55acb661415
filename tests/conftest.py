import numpy as np
import pytest

from mascotmadness.brackets import FINAL_FOUR, Bracket
from mascotmadness.game_mappings import ROUND_ORDERS
from mascotmadness.results import GameResult
from mascotmadness.team_names import NameResolver

YEAR = 2025
REGION_ORDER = ["east", "west", "south", "midwest"]


def complete_bracket(bracket, choose):
    """Fill every region, then the Final Four, picking with choose(matchup)"""
    for region_name in bracket.region_order + [FINAL_FOUR]:
        matchup = bracket.regions[region_name].get_current_matchup()
        while matchup is not None:
            bracket.select_winner(region_name, choose(matchup))
            matchup = bracket.regions[region_name].get_current_matchup()
    return bracket


def build_mapping_and_results(actual, resolver, year=YEAR):
    """
    Turn a completed bracket into the game mapping and scoreboard results
    that would have produced it. Final Four is listed first on purpose.
    """
    mapping = {}
    results = {}
    for region_name in [FINAL_FOUR] + actual.region_order:
        region = actual.regions[region_name]
        mapping[region_name] = {}
        for round_num in range(1, len(region.bracket)):
            game_ids = []
            for i in range(len(region.bracket[round_num])):
                slot = i if region_name == FINAL_FOUR else ROUND_ORDERS[round_num][i]
                home = region.bracket[round_num - 1][2 * slot]
                away = region.bracket[round_num - 1][2 * slot + 1]
                winner = region.bracket[round_num][slot]
                loser = away if winner == home else home

                game_id = f"{region_name}-{round_num}-{i}"
                home_name = resolver.resolve(home.name, year)
                away_name = resolver.resolve(away.name, year)
                results[game_id] = GameResult(
                    game_id=game_id,
                    home_team=home_name,
                    away_team=away_name,
                    home_score=75 if winner == home else 60,
                    away_score=75 if winner == away else 60,
                    winner=resolver.resolve(winner.name, year),
                    loser=resolver.resolve(loser.name, year),
                    status="FINAL",
                )
                game_ids.append(game_id)
            mapping[region_name][f"round_{round_num}"] = game_ids
    return mapping, results


@pytest.fixture
def resolver():
    return NameResolver()


@pytest.fixture
def regions_data():
    """Sixteen team keys per region, ordered by seed"""
    return {
        region: [f"{region}_{seed}" for seed in range(1, 17)] for region in REGION_ORDER
    }


@pytest.fixture
def empty_bracket(regions_data, resolver):
    return Bracket.initialize(YEAR, regions_data, REGION_ORDER, resolver=resolver, name="Empty")


@pytest.fixture
def actual_bracket(regions_data, resolver):
    """A completed bracket with random winners, standing in for real results"""
    rng = np.random.default_rng(2025)
    bracket = Bracket.initialize(YEAR, regions_data, REGION_ORDER, resolver=resolver, name="Actual")
    return complete_bracket(bracket, lambda matchup: matchup[rng.integers(2)])


@pytest.fixture
def tournament(actual_bracket, resolver):
    """Game mapping and results matching actual_bracket"""
    return build_mapping_and_results(actual_bracket, resolver)
