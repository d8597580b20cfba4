"""League snapshots: everything the reports need for one season.

A snapshot is loaded either from a directory of saved Sleeper responses or
live through SleeperFetcher. Directory layout::

    league.json
    users.json
    rosters.json
    matchups/week_1.json ... week_N.json
    traded_picks.json        (optional)
    winners_bracket.json     (optional)
    losers_bracket.json      (optional)

A history directory holds one such directory per season (any names).
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .analytics import build_week_snapshot
from .data_fetcher import SleeperFetcher
from .models import TeamSeason, WeekSnapshot
from .schemas import (
    SleeperBracketMatchup,
    SleeperLeague,
    SleeperMatchup,
    SleeperRoster,
    SleeperTradedPick,
    SleeperUser,
)
from .standings import build_team_seasons
from .utils import load_json, load_json_list

logger = logging.getLogger('legends.snapshot')

WEEK_FILE_RE = re.compile(r'^week_(\d+)\.json$')


@dataclass
class LeagueSnapshot:
    league: SleeperLeague
    users: list[SleeperUser]
    rosters: list[SleeperRoster]
    weeks: list[WeekSnapshot] = field(default_factory=list)
    traded_picks: list[SleeperTradedPick] = field(default_factory=list)
    winners_bracket: list[SleeperBracketMatchup] = field(default_factory=list)
    losers_bracket: list[SleeperBracketMatchup] = field(default_factory=list)

    @property
    def teams(self) -> list[TeamSeason]:
        return build_team_seasons(self.rosters, self.users)

    @property
    def roster_ids(self) -> list[int]:
        return [r.roster_id for r in self.rosters]


def _load_weeks(matchups_dir: Path, max_week: int | None) -> list[WeekSnapshot]:
    week_files = {}
    if matchups_dir.is_dir():
        for path in matchups_dir.iterdir():
            match = WEEK_FILE_RE.match(path.name)
            if match:
                week_files[int(match.group(1))] = path

    if not week_files:
        return []

    last_week = max(week_files) if max_week is None else max_week
    weeks = []
    for week_num in range(1, last_week + 1):
        path = week_files.get(week_num)
        if path is None:
            logger.debug(f'No matchup file for week {week_num}, treating as unplayed')
            weeks.append({})
            continue
        weeks.append(build_week_snapshot(load_json_list(path, SleeperMatchup)))
    return weeks


def _load_optional_list(path: Path, schema) -> list:
    if not path.exists():
        logger.debug(f'Optional snapshot file missing: {path}')
        return []
    return load_json_list(path, schema)


def load_snapshot(snapshot_dir: str | Path) -> LeagueSnapshot:
    """
    Load a saved league snapshot.

    Weeks run from 1 to the last regular-season week (playoff_week_start - 1)
    when the league settings say so, else to the highest saved week.

    Args:
        snapshot_dir: Directory laid out as in the module docstring

    Returns:
        LeagueSnapshot

    Raises:
        FileNotFoundError: If league.json, users.json or rosters.json is missing
        ValueError: If a file fails schema validation
    """
    snapshot_dir = Path(snapshot_dir)

    league = load_json(snapshot_dir / 'league.json', schema=SleeperLeague)
    playoff_start = league.settings.playoff_week_start
    max_week = playoff_start - 1 if playoff_start else None

    return LeagueSnapshot(
        league=league,
        users=load_json_list(snapshot_dir / 'users.json', SleeperUser),
        rosters=load_json_list(snapshot_dir / 'rosters.json', SleeperRoster),
        weeks=_load_weeks(snapshot_dir / 'matchups', max_week),
        traded_picks=_load_optional_list(snapshot_dir / 'traded_picks.json', SleeperTradedPick),
        winners_bracket=_load_optional_list(snapshot_dir / 'winners_bracket.json', SleeperBracketMatchup),
        losers_bracket=_load_optional_list(snapshot_dir / 'losers_bracket.json', SleeperBracketMatchup),
    )


def fetch_snapshot(league_id: str, fetcher: SleeperFetcher | None = None) -> LeagueSnapshot:
    """
    Fetch a snapshot live from Sleeper.

    Follows the pre-draft fallback: a league that has not drafted yet is
    read from its previous season.
    """
    fetcher = fetcher or SleeperFetcher(league_id)
    data_id = fetcher.data_league_id()
    if data_id != fetcher.league_id:
        fetcher = SleeperFetcher(data_id, base_url=fetcher.base_url, session=fetcher.session)
    return _fetch_season(fetcher)


def _fetch_season(fetcher: SleeperFetcher) -> LeagueSnapshot:
    return LeagueSnapshot(
        league=fetcher.league,
        users=fetcher.users(),
        rosters=fetcher.rosters(),
        weeks=fetcher.weekly_snapshots(),
        traded_picks=fetcher.traded_picks(),
        winners_bracket=fetcher.winners_bracket(),
        losers_bracket=fetcher.losers_bracket(),
    )


def fetch_history(league_id: str, fetcher: SleeperFetcher | None = None) -> list[LeagueSnapshot]:
    """
    Fetch every season of a league live, following previous_league_id.

    Returns:
        One snapshot per season, oldest first
    """
    fetcher = fetcher or SleeperFetcher(league_id)
    leagues = fetcher.league_history()
    logger.info(f'Found {len(leagues)} seasons for league {fetcher.league_id}')

    history = [_fetch_season(fetcher.for_league(league)) for league in leagues]
    return sorted(history, key=lambda s: s.league.season)


def load_history(history_dir: str | Path) -> list[LeagueSnapshot]:
    """
    Load saved snapshots for several seasons.

    Every subdirectory of ``history_dir`` holding a league.json is one
    season, laid out as in the module docstring.

    Returns:
        One snapshot per season, oldest first

    Raises:
        FileNotFoundError: If ``history_dir`` holds no season directories
    """
    history_dir = Path(history_dir)
    season_dirs = (
        sorted(p for p in history_dir.iterdir() if (p / 'league.json').exists())
        if history_dir.is_dir() else []
    )
    if not season_dirs:
        raise FileNotFoundError(f'No season snapshots under {history_dir}')

    history = [load_snapshot(p) for p in season_dirs]
    return sorted(history, key=lambda s: s.league.season)
