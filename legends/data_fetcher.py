"""Sleeper API data fetching using requests."""

import logging
import time
from collections.abc import Callable
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .analytics import build_week_snapshot
from .constants import PLAYER_CACHE_TTL_SECONDS, SLEEPER_BASE_URL
from .models import WeekSnapshot
from .schemas import (
    SleeperBracketMatchup,
    SleeperLeague,
    SleeperMatchup,
    SleeperRoster,
    SleeperTradedPick,
    SleeperUser,
)

logger = logging.getLogger('legends.data_fetcher')

REQUEST_TIMEOUT = 20


def make_session() -> requests.Session:
    """Session with retries and backoff for transient errors (GET only)."""
    session = requests.Session()
    session.headers.update({'User-Agent': 'legends-dashboard/1.0'})
    retry = Retry(
        total=5,
        connect=3,
        read=3,
        backoff_factor=0.5,
        status_forcelist=(408, 429, 500, 502, 503, 504),
        allowed_methods=('GET',),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session


class PlayerDirectoryCache:
    """
    Time-stamped cache for the league-wide player directory.

    The directory is large (every NFL player) and changes slowly, so it is
    kept for ``ttl_seconds``. The cache is owned and passed around by the
    caller; nothing is stored at module level.
    """

    def __init__(
        self,
        ttl_seconds: float = PLAYER_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._players: Optional[dict[str, dict]] = None
        self._loaded_at: Optional[float] = None

    @property
    def loaded_at(self) -> Optional[float]:
        return self._loaded_at

    def is_fresh(self) -> bool:
        if self._players is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < self.ttl_seconds

    def get(self, loader: Callable[[], dict[str, dict]]) -> dict[str, dict]:
        """Return cached players, calling ``loader`` when empty or expired."""
        if not self.is_fresh():
            logger.info('Refreshing player directory')
            self._players = loader()
            self._loaded_at = self._clock()
        return self._players  # type: ignore[return-value]

    def invalidate(self) -> None:
        self._players = None
        self._loaded_at = None


class SleeperFetcher:
    """Fetches league snapshots from the Sleeper API."""

    def __init__(
        self,
        league_id: str,
        base_url: str = SLEEPER_BASE_URL,
        session: Optional[requests.Session] = None,
        league: Optional[SleeperLeague] = None,
    ):
        self.league_id = league_id
        self.base_url = base_url.rstrip('/')
        self.session = session or make_session()
        self._league: Optional[SleeperLeague] = league

    def get_json(self, path: str) -> Any:
        """
        GET ``base_url + path`` and return decoded JSON.

        Raises:
            requests.HTTPError: On a non-2xx response (after retries)
        """
        url = f'{self.base_url}{path}'
        logger.debug(f'GET {url}')
        response = self.session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    @property
    def league(self) -> SleeperLeague:
        """Lazy load league metadata."""
        if self._league is None:
            self._league = SleeperLeague.model_validate(self.get_json(f'/league/{self.league_id}'))
        return self._league

    def data_league_id(self) -> str:
        """
        League id to read data from.

        Before the new season's draft, the current league has no games yet,
        so the previous season's league is used instead.
        """
        league = self.league
        if league.status == 'pre_draft' and league.previous_league_id:
            logger.info(f'League {league.league_id} is pre-draft, using {league.previous_league_id}')
            return league.previous_league_id
        return league.league_id

    def league_history(self) -> list[SleeperLeague]:
        """
        Walk the previous_league_id chain back from this league.

        Stops at a league with no previous id, or at an id already visited.

        Returns:
            Leagues newest first, starting with this one
        """
        leagues = [self.league]
        seen = {self.league.league_id}
        previous = self.league.previous_league_id
        while previous and previous not in seen:
            seen.add(previous)
            league = SleeperLeague.model_validate(self.get_json(f'/league/{previous}'))
            logger.debug(f'League {previous} is season {league.season}')
            leagues.append(league)
            previous = league.previous_league_id
        return leagues

    def for_league(self, league: SleeperLeague) -> 'SleeperFetcher':
        """Fetcher for another league, sharing this session."""
        return SleeperFetcher(league.league_id, base_url=self.base_url, session=self.session, league=league)

    def regular_season_weeks(self) -> int:
        """Weeks before the playoffs start (0 if the league has no playoff week)."""
        start = self.league.settings.playoff_week_start
        return max(0, start - 1) if start else 0

    def users(self) -> list[SleeperUser]:
        return [SleeperUser.model_validate(u) for u in self.get_json(f'/league/{self.league_id}/users') or []]

    def rosters(self) -> list[SleeperRoster]:
        return [SleeperRoster.model_validate(r) for r in self.get_json(f'/league/{self.league_id}/rosters') or []]

    def matchups(self, week: int) -> list[SleeperMatchup]:
        data = self.get_json(f'/league/{self.league_id}/matchups/{week}') or []
        return [SleeperMatchup.model_validate(m) for m in data]

    def weekly_snapshots(self, num_weeks: Optional[int] = None) -> list[WeekSnapshot]:
        """Snapshots for weeks 1..num_weeks (default: the regular season)."""
        if num_weeks is None:
            num_weeks = self.regular_season_weeks()
        return [build_week_snapshot(self.matchups(week)) for week in range(1, num_weeks + 1)]

    def traded_picks(self) -> list[SleeperTradedPick]:
        data = self.get_json(f'/league/{self.league_id}/traded_picks') or []
        return [SleeperTradedPick.model_validate(tp) for tp in data]

    def winners_bracket(self) -> list[SleeperBracketMatchup]:
        data = self.get_json(f'/league/{self.league_id}/winners_bracket') or []
        return [SleeperBracketMatchup.model_validate(m) for m in data]

    def losers_bracket(self) -> list[SleeperBracketMatchup]:
        data = self.get_json(f'/league/{self.league_id}/losers_bracket') or []
        return [SleeperBracketMatchup.model_validate(m) for m in data]

    def players(self, cache: PlayerDirectoryCache) -> dict[str, dict]:
        """Player directory keyed by player id, served from ``cache``."""
        return cache.get(lambda: self.get_json('/players/nfl'))
