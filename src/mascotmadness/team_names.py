#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   team_names.py
@Time    :   2025/03/14
@Version :   0.1.0
@Desc    :   Translation between internal team keys and NCAA scoreboard names
"""

import copy
import json
import re
from pathlib import Path
from typing import Dict, Optional, Union

# Exceptions to the underscore -> hyphen naming convention
SPECIAL_NCAA_NAMES = {
    "central_connecticut_state": "central-conn-st",
    "charleston": "col-of-charleston",
    "csu_fullerton": "cal-st-fullerton",
    "eastern_kentucky": "eastern-ky",
    "east_washington": "eastern-wash",
    "florida_atlantic": "fla-atlantic",
    "grambling_state": "grambling",
    "little_rock": "ualr",
    "louisiana": "la-lafayette",
    "mcneese": "mcneese-st",
    "miami": "miami-fl",
    "mount_saint_marys": "mt-st-mary-ny",
    "nc_state": "north-carolina-st",
    "northern_iowa": "uni",
    "northern_kentucky": "northern-ky",
    "omaha": "neb-omaha",
    "saint_francis_u": "st-francis-pa",
    "saint_johns": "st-johns-ny",
    "saint_marys": "st-marys-ca",
    "saint_peters": "st-peters",
    "sam_houston": "sam-houston-st",
    "south_florida": "south-fla",
    "southeast_missouri_state": "southeast-mo-st",
    "texas_a&m_cc": "am-corpus-chris",
    "texas_a&m": "texas-am",
    "ucsb": "uc-santa-barbara",
    "usc": "southern-california",
    "western_kentucky": "western-ky",
}

# Play-in ("First Four") winners by gender and year
FIRST_FOUR_MAPPING = {
    "men": {
        "2024": {},
        "2025": {
            "san_diego_state_or_north_carolina": "north_carolina",
            "alabama_state_or_saint_francis_u": "alabama_state",
            "american_or_mount_saint_marys": "mount_saint_marys",
            "texas_or_xavier": "xavier",
        },
    },
    "women": {},
}


class NameResolver:
    """
    Resolves internal team keys (e.g. "alabama_state") to the NCAA feed's
    SEO names (e.g. "alabama-st") and back.

    Resolution never fails: names without an override fall back to the
    algorithmic conversion.

    Args:
        special_names: Internal key -> NCAA name overrides
        first_four: gender -> year -> {composite play-in key: winning key}
    """

    def __init__(
        self,
        special_names: Optional[Dict[str, str]] = None,
        first_four: Optional[Dict[str, Dict[str, Dict[str, str]]]] = None,
    ):
        self.special_names = dict(
            SPECIAL_NCAA_NAMES if special_names is None else special_names
        )
        self.first_four = copy.deepcopy(
            FIRST_FOUR_MAPPING if first_four is None else first_four
        )
        self.reverse_special_names = {
            ncaa_name: key for key, ncaa_name in self.special_names.items()
        }

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "NameResolver":
        """Load override tables from a JSON file with optional
        "specialNcaaNames" and "firstFourMapping" keys."""
        data = json.loads(Path(path).read_text())
        return cls(
            special_names=data.get("specialNcaaNames"),
            first_four=data.get("firstFourMapping"),
        )

    def first_four_for(self, year: Union[int, str], gender: str = "men") -> Dict[str, str]:
        return self.first_four.get(gender, {}).get(str(year), {})

    def apply_first_four(
        self,
        team_name: str,
        year: Union[int, str],
        gender: str = "men",
        mapping: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Substitute a composite play-in key with its winner.

        An explicit mapping (a tournament's own play-in table) takes
        precedence over the configured table for the year.
        """
        if mapping is None:
            mapping = self.first_four_for(year, gender)
        return mapping.get(team_name) or team_name

    def resolve(self, team_name: str, year: Union[int, str], gender: str = "men") -> str:
        """Convert an internal team key to the NCAA scoreboard name."""
        if not team_name:
            return ""

        team_name = self.apply_first_four(team_name, year, gender)
        mapped_name = self.special_names.get(team_name, team_name)

        # Substring match on purpose: "statesboro" would also become "stsboro"
        return re.sub("state", "st", mapped_name.replace("_", "-"), flags=re.IGNORECASE)

    def reverse(self, ncaa_name: Optional[str]) -> str:
        """Best-effort conversion of an NCAA scoreboard name back to an internal key."""
        if not ncaa_name:
            return ""

        if ncaa_name in self.reverse_special_names:
            return self.reverse_special_names[ncaa_name]

        name = re.sub(r"-st$", "_state", ncaa_name)
        name = name.replace("-st-", "_state_")
        return name.replace("-", "_")
