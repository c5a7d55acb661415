#!/usr/bin/env python
# -*-coding:utf-8 -*-
"""
@File    :   ncaa_scraper.py
@Time    :   2025/03/16
@Version :   0.1.0
@Desc    :   Game results from the NCAA scoreboard feed (no affiliation)
"""

import argparse
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
from zoneinfo import ZoneInfo

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mascotmadness.results import GameResult, parse_score

logger = logging.getLogger(__name__)

SCOREBOARD_URL = "https://data.ncaa.com/casablanca/scoreboard"
SPORTS = {"men": "basketball-men", "women": "basketball-women"}
RETRY_STATUSES = (429, 500, 502, 503, 504)


class NCAAScoreboard:
    """
    Pulls daily scoreboards and normalizes them into GameResults.

    Args:
        cache_dir: Optional directory for saved daily scoreboards
        cache_ttl: Seconds a cached scoreboard stays valid
        base_url: Scoreboard endpoint root
    """

    def __init__(
        self,
        cache_dir: Optional[str] = None,
        cache_ttl: float = 300,
        base_url: str = SCOREBOARD_URL,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache_ttl = cache_ttl
        self.cache_dir = Path(cache_dir) if cache_dir else None
        if self.cache_dir:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Session for the scoreboard host; throttled and 5xx responses are retried with backoff"""
        retries = Retry(
            total=5,
            backoff_factor=0.5,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=["GET"],
        )
        session = requests.Session()
        session.headers.update({"Accept": "application/json"})
        session.mount("https://", HTTPAdapter(max_retries=retries))
        return session

    def _cache_path(self, cache_key: str) -> Optional[Path]:
        return self.cache_dir / f"{cache_key}.json" if self.cache_dir else None

    def _load_cached_scoreboard(self, cache_key: str) -> Optional[Dict]:
        """Scoreboard saved less than cache_ttl seconds ago, if there is one"""
        path = self._cache_path(cache_key)
        if path is None or not path.exists():
            return None

        entry = json.loads(path.read_text())
        fetched_at = datetime.fromisoformat(entry["fetchedAt"])
        if (datetime.now() - fetched_at).total_seconds() >= self.cache_ttl:
            logger.debug(f"Cached scoreboard {cache_key} is stale")
            return None
        logger.debug(f"Using cached scoreboard {cache_key}")
        return entry["payload"]

    def _save_scoreboard(self, cache_key: str, url: str, payload: Dict):
        path = self._cache_path(cache_key)
        if path is None:
            return
        entry = {"fetchedAt": datetime.now().isoformat(), "url": url, "payload": payload}
        path.write_text(json.dumps(entry))

    def _request_scoreboard(self, url: str, delay: float = 0.1) -> Dict:
        """
        Download one day's scoreboard document.

        Pauses for `delay` seconds after a successful request so pulling
        several tournament days in a row stays gentle on the feed. Request
        failures are logged with the URL and re-raised.
        """
        try:
            response = self.session.get(url)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Scoreboard request failed for {url}: {e}")
            raise
        time.sleep(delay)
        return json.loads(response.text)

    def scoreboard_url(self, date: Optional[str] = None, gender: str = "men") -> str:
        """
        Args:
            date: Game date as YYYY-MM-DD or YYYY/MM/DD; defaults to today
                in Pacific time, when tournament days are scheduled
            gender: "men" or "women"
        """
        if gender not in SPORTS:
            raise ValueError(f"Gender must be one of {list(SPORTS)}, got {gender!r}")
        if date is None:
            target = datetime.now(ZoneInfo("America/Los_Angeles"))
        else:
            target = datetime.strptime(date.replace("/", "-"), "%Y-%m-%d")
        return f"{self.base_url}/{SPORTS[gender]}/d1/{target:%Y/%m/%d}/scoreboard.json"

    def fetch_scoreboard(self, date: Optional[str] = None, gender: str = "men") -> Dict:
        """Raw scoreboard payload for one day, served from the cache while it is fresh"""
        url = self.scoreboard_url(date, gender)
        # e.g. scoreboard_basketball-men_d1_2025_03_20
        day_path = url.split("/scoreboard/")[-1].rsplit("/", 1)[0]
        cache_key = "scoreboard_" + day_path.replace("/", "_")

        cached = self._load_cached_scoreboard(cache_key)
        if cached is not None:
            return cached

        logger.info(f"Fetching NCAA {gender} scoreboard: {url}")
        payload = self._request_scoreboard(url)
        self._save_scoreboard(cache_key, url, payload)
        return payload

    def get_results(self, date: Optional[str] = None, gender: str = "men") -> Dict[str, GameResult]:
        return parse_scoreboard(self.fetch_scoreboard(date, gender))


def parse_scoreboard(payload: Dict) -> Dict[str, GameResult]:
    """Normalize a raw scoreboard payload into game id -> GameResult"""
    results = {}
    for entry in payload.get("games", []):
        game = entry["game"]
        home, away = game["home"], game["away"]
        home_name = home["names"]["seo"]
        away_name = away["names"]["seo"]

        winner = loser = None
        if home.get("winner"):
            winner, loser = home_name, away_name
        elif away.get("winner"):
            winner, loser = away_name, home_name

        game_id = str(game["gameID"])
        results[game_id] = GameResult(
            game_id=game_id,
            home_team=home_name,
            away_team=away_name,
            home_score=parse_score(home.get("score")),
            away_score=parse_score(away.get("score")),
            winner=winner,
            loser=loser,
            status=game.get("currentPeriod"),
            game_date=game.get("startDate"),
        )
    logger.debug(f"Parsed {len(results)} games from scoreboard")
    return results


def main():
    parser = argparse.ArgumentParser(description="Pull NCAA tournament game results")
    parser.add_argument("--date", type=str, default=None, help="Game date (YYYY-MM-DD)")
    parser.add_argument(
        "--women", action="store_true", help="Use women's basketball instead of men's"
    )
    parser.add_argument("--output", type=str, default=None, help="Write results to JSON file")
    parser.add_argument("--cache_dir", type=str, default=None, help="Response cache directory")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    scoreboard = NCAAScoreboard(cache_dir=args.cache_dir)
    results = scoreboard.get_results(args.date, "women" if args.women else "men")
    records = {game_id: result.to_dict() for game_id, result in results.items()}

    if args.output:
        Path(args.output).write_text(json.dumps(records, indent=2))
        logger.info(f"Saved {len(records)} games to {args.output}")
    else:
        print(json.dumps(records, indent=2))


if __name__ == "__main__":
    main()
