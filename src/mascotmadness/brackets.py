#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   brackets.py
@Time    :   2025/03/14
@Version :   0.1.0
@Desc    :   Pick-by-pick single-elimination bracket engine
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from mascotmadness.team_names import NameResolver

logger = logging.getLogger(__name__)

FINAL_FOUR = "final_four"

# First round pairing order by field size; index i plays teams[n - 1 - i]
MATCHUP_ORDERS = {
    16: [0, 7, 3, 4, 2, 5, 1, 6],
    4: [0, 1],
}

# Region position in the region order -> Final Four round 0 slot
FINAL_FOUR_SLOTS = {0: 0, 1: 2, 2: 3, 3: 1}


@dataclass(frozen=True)
class Team:
    """
    Represents one tournament entrant.

    Attributes:
        name: Canonical team key, lowercase and underscore-separated.
            May be a composite play-in key such as "texas_or_xavier".
        seed: Tournament seed (1-16)

    Two teams are equal when their names match.

    Raises:
        ValueError: If seed is not between 1 and 16 or name is empty
    """

    name: str
    seed: int = field(compare=False)

    def __post_init__(self):
        """Validate team attributes after initialization"""
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Team name must be a non-empty string")

        if not isinstance(self.seed, int) or self.seed < 1 or self.seed > 16:
            raise ValueError(
                f"Seed must be an integer between 1 and 16, got {self.seed}"
            )

    def to_dict(self) -> Dict:
        return {"name": self.name, "seed": self.seed}

    @classmethod
    def from_dict(
        cls,
        data: Optional[Dict],
        year: Optional[Union[int, str]] = None,
        resolver: Optional[NameResolver] = None,
        gender: str = "men",
    ) -> Optional["Team"]:
        """Rebuild a team from its stored form, resolving play-in keys for the year."""
        if not data:
            return None
        name = data["name"]
        if year is not None:
            name = (resolver or NameResolver()).apply_first_four(name, year, gender)
        return cls(name=name, seed=int(data["seed"]))


class Region:
    """
    One single-elimination sub-bracket, either a geographic region or the
    Final Four.

    bracket[0] holds the seeded lineup and every later round is half the
    length of the one before it, ending with the single champion slot.
    Picks are made one matchup at a time in round order.
    """

    def __init__(self, name: str):
        self.name = name
        self.bracket: List[List[Optional[Team]]] = []
        self.current_matchup_index = 0
        self.round_index = 0
        self.champion: Optional[Team] = None
        self.n_picks = 0
        self.total_picks = 3 if name == FINAL_FOUR else 15

    def __repr__(self):
        return (
            f"Region(name={self.name!r}, round_index={self.round_index}, "
            f"current_matchup_index={self.current_matchup_index}, "
            f"n_picks={self.n_picks}/{self.total_picks})"
        )

    def seed(self, teams: List[Optional[Team]]):
        """
        Build round 0 from teams ordered by seed and allocate empty later rounds.

        Args:
            teams: 16 teams for a geographic region (seed 1 first), or 4
                entries for the Final Four (usually all None until the
                region champions are known)
        """
        if len(teams) not in MATCHUP_ORDERS:
            raise ValueError(
                f"Region {self.name} must be seeded with 16 or 4 teams, got {len(teams)}"
            )

        n_teams = len(teams)
        lineup = []
        for i in MATCHUP_ORDERS[n_teams]:
            lineup.append(teams[i])
            lineup.append(teams[n_teams - 1 - i])

        self.bracket = [lineup]
        for round_num in range(1, int(np.log2(n_teams)) + 1):
            self.bracket.append([None] * (n_teams // 2**round_num))

        self.total_picks = n_teams - 1
        self.current_matchup_index = 0
        self.round_index = 0
        self.champion = None
        self.n_picks = 0

    def get_current_matchup(self) -> Optional[Tuple[Team, Team]]:
        """Return the two teams awaiting a pick, or None when nothing is pickable"""
        if self.champion is not None or self.round_index >= len(self.bracket):
            return None

        current_round = self.bracket[self.round_index]
        team1 = current_round[self.current_matchup_index]
        team2 = current_round[self.current_matchup_index + 1]
        if team1 is None or team2 is None:
            return None
        return team1, team2

    def select_winner(self, winner: Team, strict: bool = False):
        """
        Record the pick for the current matchup and move to the next one.

        Args:
            winner: Team advancing from the current matchup
            strict: Reject teams that are not in the current matchup. Off by
                default so a caller can overwrite a slot directly.

        Raises:
            ValueError: If the region already has a champion, or in strict
                mode when winner is not one of the two teams being decided
        """
        if self.champion is not None:
            raise ValueError(f"Region {self.name} already has a champion")

        if strict:
            matchup = self.get_current_matchup()
            if matchup is None or winner not in matchup:
                raise ValueError(
                    f"{winner.name} is not in the current {self.name} matchup "
                    f"(round {self.round_index}, slot {self.current_matchup_index})"
                )

        self.n_picks += 1
        self.bracket[self.round_index + 1][self.current_matchup_index // 2] = winner

        if self.current_matchup_index + 2 < len(self.bracket[self.round_index]):
            self.current_matchup_index += 2
        else:
            self._advance_round()

    def _advance_round(self):
        self.round_index += 1
        self.current_matchup_index = 0
        if self.round_index == len(self.bracket) - 1:
            self.champion = self.bracket[self.round_index][0]
            logger.debug(f"{self.name} champion: {self.champion.name}")

    def get_champion(self) -> Optional[Team]:
        return self.champion

    def get_progress(self) -> Tuple[int, int]:
        return self.n_picks, self.total_picks

    def reset(self):
        """Clear every pick while keeping the seeded lineup"""
        for round_slots in self.bracket[1:]:
            for i in range(len(round_slots)):
                round_slots[i] = None
        self.current_matchup_index = 0
        self.round_index = 0
        self.champion = None
        self.n_picks = 0

    def add_team(self, team: Team, region_idx: int):
        """Place a region champion into the Final Four lineup"""
        self.bracket[0][self._final_four_slot(region_idx)] = team

    def clear_slot(self, region_idx: int):
        """Remove a region champion from the Final Four, invalidating its picks"""
        self.bracket[0][self._final_four_slot(region_idx)] = None
        self.reset()

    def _final_four_slot(self, region_idx: int) -> int:
        if region_idx not in FINAL_FOUR_SLOTS:
            raise ValueError(f"Region index must be between 0 and 3, got {region_idx}")
        if not self.bracket:
            raise ValueError(f"Region {self.name} has not been seeded")
        return FINAL_FOUR_SLOTS[region_idx]

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "bracket": {
                str(round_num): [team.to_dict() if team else None for team in slots]
                for round_num, slots in enumerate(self.bracket)
            },
            "currentMatchupIndex": self.current_matchup_index,
            "roundIndex": self.round_index,
            "champion": self.champion.to_dict() if self.champion else None,
            "nPicks": self.n_picks,
            "totalPicks": self.total_picks,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict,
        year: Optional[Union[int, str]] = None,
        resolver: Optional[NameResolver] = None,
        gender: str = "men",
    ) -> "Region":
        region = cls(data["name"])
        rounds = sorted(data["bracket"].items(), key=lambda item: int(item[0]))
        region.bracket = [
            [Team.from_dict(team, year, resolver, gender) for team in slots]
            for _, slots in rounds
        ]
        region.current_matchup_index = data["currentMatchupIndex"]
        region.round_index = data["roundIndex"]
        region.champion = Team.from_dict(data.get("champion"), year, resolver, gender)
        region.n_picks = data["nPicks"]
        region.total_picks = data["totalPicks"]
        return region


class Bracket:
    """
    One entrant's full tournament: a Region per geographic region plus the
    Final Four region fed by their champions.

    Args:
        regions: Region name -> Region, including FINAL_FOUR
        region_order: Geographic region names in bracket order; a region's
            position decides its Final Four slot
        name: Bracket display name
        owner_id: Opaque identity of the owner
        published: Whether the bracket is entered on the leaderboard
        contributors: Opaque identities of other editors
    """

    def __init__(
        self,
        regions: Dict[str, Region],
        region_order: List[str],
        name: str = "",
        owner_id: Optional[str] = None,
        published: bool = False,
        contributors: Optional[Iterable[str]] = None,
    ):
        if FINAL_FOUR not in regions:
            raise ValueError(f"Bracket is missing the {FINAL_FOUR} region")
        missing = [r for r in region_order if r not in regions]
        if missing:
            raise ValueError(f"Bracket is missing regions: {', '.join(missing)}")

        self.regions = regions
        self.region_order = list(region_order)
        self.name = name
        self.owner_id = owner_id
        self.published = published
        self.contributors = set(contributors or [])

    @classmethod
    def initialize(
        cls,
        year: Union[int, str],
        regions_data: Dict[str, List[str]],
        region_order: List[str],
        first_four_mapping: Optional[Dict[str, str]] = None,
        resolver: Optional[NameResolver] = None,
        gender: str = "men",
        **kwargs,
    ) -> "Bracket":
        """
        Build an empty bracket for a tournament.

        Args:
            year: Tournament year
            regions_data: Region name -> 16 team keys ordered by seed
            region_order: Region names in bracket order
            first_four_mapping: Play-in winners for this tournament; falls
                back to the resolver's table for the year
            resolver: Name resolver holding the play-in tables
            gender: "men" or "women"
            **kwargs: Passed through to Bracket (name, owner_id, ...)
        """
        resolver = resolver or NameResolver()
        regions = {}
        for region_name in region_order:
            if region_name not in regions_data:
                raise ValueError(f"No teams provided for region {region_name}")
            teams = [
                Team(
                    resolver.apply_first_four(team_name, year, gender, first_four_mapping),
                    seed,
                )
                for seed, team_name in enumerate(regions_data[region_name], start=1)
            ]
            regions[region_name] = Region(region_name)
            regions[region_name].seed(teams)

        regions[FINAL_FOUR] = Region(FINAL_FOUR)
        regions[FINAL_FOUR].seed([None, None, None, None])
        return cls(regions, region_order, **kwargs)

    @property
    def final_four(self) -> Region:
        return self.regions[FINAL_FOUR]

    @property
    def champion(self) -> Optional[Team]:
        return self.final_four.get_champion()

    @property
    def is_complete(self) -> bool:
        return self.champion is not None

    def progress(self) -> Tuple[int, int]:
        picks = sum(region.n_picks for region in self.regions.values())
        total = sum(region.total_picks for region in self.regions.values())
        return picks, total

    def select_winner(
        self, region_name: str, winner: Team, strict: bool = False
    ) -> Optional[Team]:
        """
        Pick a winner in one region and feed a newly crowned region champion
        into the Final Four.

        Returns:
            The region's champion once decided, otherwise None
        """
        region = self.regions[region_name]
        region.select_winner(winner, strict=strict)

        champion = region.get_champion()
        if champion is not None and region_name != FINAL_FOUR:
            self.final_four.add_team(champion, self.region_order.index(region_name))
            logger.debug(f"{champion.name} advances from {region_name} to the Final Four")
        return champion

    def reset_region(self, region_name: str):
        """Redo a region from scratch, pulling its champion out of the Final Four"""
        self.regions[region_name].reset()
        if region_name != FINAL_FOUR:
            self.final_four.clear_slot(self.region_order.index(region_name))

    def copy(self) -> "Bracket":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict:
        return {
            "bracket": {name: region.to_dict() for name, region in self.regions.items()},
            "regionOrder": list(self.region_order),
            "name": self.name,
            "ownerUid": self.owner_id,
            "published": self.published,
            "contributors": sorted(self.contributors),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict,
        year: Optional[Union[int, str]] = None,
        region_order: Optional[List[str]] = None,
        resolver: Optional[NameResolver] = None,
        gender: str = "men",
    ) -> "Bracket":
        """Rebuild a bracket from its stored document"""
        resolver = resolver or NameResolver()
        regions = {
            name: Region.from_dict(region_data, year, resolver, gender)
            for name, region_data in data["bracket"].items()
            if region_data is not None
        }
        if region_order is None:
            region_order = data.get("regionOrder") or [
                name for name in regions if name != FINAL_FOUR
            ]
        return cls(
            regions,
            region_order,
            name=data.get("name", ""),
            owner_id=data.get("ownerUid"),
            published=data.get("published", False),
            contributors=data.get("contributors"),
        )
