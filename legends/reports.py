"""Assemble JSON-ready report payloads from a league snapshot."""

import logging
from collections.abc import Sequence
from typing import Any

from .analytics import count_played_weeks
from .brackets import parse_bracket, resolve_brackets
from .config import tier_cutoffs_for
from .draft_picks import compute_pick_capital, future_seasons, resolve_draft_pick_ownership
from .power_rankings import apply_previous_ranks, compute_league_insights, compute_league_power_rankings
from .records import (
    compute_all_time_standings,
    compute_champion_history,
    compute_league_records,
    compute_season_awards,
    pair_matchups,
    rebuild_team_records,
)
from .schemas import LeagueConfig
from .snapshot import LeagueSnapshot
from .standings import build_standings
from .utils import to_jsonable
from .validators import validate_bracket, validate_rankings, validate_traded_picks, validate_week_snapshot

logger = logging.getLogger('legends.reports')

REPORTS = ('power-rankings', 'standings', 'brackets', 'draft-picks', 'records')
HISTORY_REPORT = 'history'


def _log_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        logger.warning(warning)


def _playoff_teams(snapshot: LeagueSnapshot, config: LeagueConfig) -> int:
    return snapshot.league.settings.playoff_teams or config.playoff_teams


def power_rankings_report(snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """Power rankings with week-over-week movement and league insights."""
    for week_num, week in enumerate(snapshot.weeks, 1):
        _log_warnings(validate_week_snapshot(week, week_num))

    # Unplayed weeks at the end of the season do not count as a week of movement
    played = snapshot.weeks[:count_played_weeks(snapshot.weeks)]

    teams = snapshot.teams
    tiers = tier_cutoffs_for(config, len(teams))
    rankings = compute_league_power_rankings(teams, played, tiers, config.recent_form_window)
    if len(played) > 1:
        earlier = played[:-1]
        previous = compute_league_power_rankings(
            rebuild_team_records(teams, earlier), earlier, tiers, config.recent_form_window
        )
        apply_previous_ranks(rankings, previous)
    _log_warnings(validate_rankings(rankings))

    insights = compute_league_insights(rankings)
    return {
        'season': snapshot.league.season,
        'weeks': len(played),
        'rankings': [{**to_jsonable(r), 'movement': r.movement} for r in rankings],
        'insights': {key: r.roster_id if r else None for key, r in insights.items()},
    }


def standings_report(snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """Standings with final placements attached once the brackets are decided."""
    result = resolve_brackets(snapshot.winners_bracket, snapshot.losers_bracket, _playoff_teams(snapshot, config))
    standings = build_standings(snapshot.teams, result.placements)
    return {
        'season': snapshot.league.season,
        'playoff_teams': _playoff_teams(snapshot, config),
        'standings': to_jsonable(standings),
    }


def brackets_report(snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """Resolved brackets. Falls back to the standings leader for display when undecided."""
    _log_warnings(validate_bracket(parse_bracket(snapshot.winners_bracket), 'winners'))
    _log_warnings(validate_bracket(parse_bracket(snapshot.losers_bracket), 'losers'))

    result = resolve_brackets(snapshot.winners_bracket, snapshot.losers_bracket, _playoff_teams(snapshot, config))
    payload = to_jsonable(result)
    payload['season'] = snapshot.league.season
    payload['decided'] = result.champion_id is not None
    if result.champion_id is None:
        standings = build_standings(snapshot.teams)
        payload['standings_leader_id'] = standings[0].team.roster_id if standings else None
    return payload


def draft_picks_report(snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """Future pick ownership and per-team pick capital."""
    roster_ids = snapshot.roster_ids
    _log_warnings(validate_traded_picks(snapshot.traded_picks, roster_ids))

    seasons = future_seasons(snapshot.league.season, config.future_seasons)
    picks = resolve_draft_pick_ownership(snapshot.traded_picks, roster_ids, seasons, config.draft_rounds)
    capital = compute_pick_capital(picks, roster_ids)
    return {
        'seasons': seasons,
        'rounds': config.draft_rounds,
        'picks': [{**to_jsonable(p), 'status': p.status} for p in picks],
        'capital': [
            {
                'roster_id': c.roster_id,
                'total_owned': c.total_owned,
                'total_traded_away': c.total_traded_away,
                'total_acquired': c.total_acquired,
                'owns_own_first': c.owns_own_first,
                'picks': [{**to_jsonable(p), 'status': p.status_for(c.roster_id)} for p in c.picks],
            }
            for c in capital
        ],
    }


def records_report(snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """Season records and awards from paired matchups."""
    teams = snapshot.teams
    season = snapshot.league.season
    pairs = pair_matchups(snapshot.weeks, teams, season)
    return {
        'season': season,
        'games': len(pairs),
        'records': to_jsonable(compute_league_records(pairs)),
        'awards': to_jsonable(compute_season_awards(teams, snapshot.weeks, season)),
    }


def history_report(history: Sequence[LeagueSnapshot]) -> dict[str, Any]:
    """Champions, all-time standings and all-time records across seasons."""
    champions = compute_champion_history(history)
    standings = compute_all_time_standings(history, champions)
    pairs = [
        pair
        for season in history
        for pair in pair_matchups(season.weeks, season.teams, season.league.season)
    ]
    return {
        'seasons': [season.league.season for season in history],
        'champions': to_jsonable(champions),
        'all_time_standings': [{**to_jsonable(s), 'win_pct': s.win_pct} for s in standings],
        'records': to_jsonable(compute_league_records(pairs)),
    }


REPORT_BUILDERS = {
    'power-rankings': power_rankings_report,
    'standings': standings_report,
    'brackets': brackets_report,
    'draft-picks': draft_picks_report,
    'records': records_report,
}


def build_report(name: str, snapshot: LeagueSnapshot, config: LeagueConfig) -> dict[str, Any]:
    """
    Build a named report.

    Raises:
        KeyError: If ``name`` is not one of REPORTS
    """
    return REPORT_BUILDERS[name](snapshot, config)
