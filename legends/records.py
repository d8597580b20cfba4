"""League records, head-to-head history and multi-season history."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Optional

from .brackets import get_champion_roster_id, get_runner_up_roster_id, parse_bracket
from .constants import DEFAULT_PLAYOFF_TEAMS
from .models import (
    AllTimeStanding,
    ChampionEntry,
    HeadToHeadGame,
    HeadToHeadRecord,
    LeagueRecord,
    MatchupPair,
    SeasonAward,
    SeasonResult,
    TeamSeason,
    WeekSnapshot,
)
from .snapshot import LeagueSnapshot
from .standings import build_standings

logger = logging.getLogger('legends.records')


def pair_matchups(
    weeks: Sequence[WeekSnapshot],
    teams: Iterable[TeamSeason],
    season: str,
    first_week: int = 1,
) -> list[MatchupPair]:
    """
    Pair up the two teams of each matchup group, week by week.

    Groups without exactly one opponent (byes, null matchup ids) are skipped,
    as are rosters missing from ``teams``.

    Args:
        weeks: Week snapshots in week order
        teams: Team records for the season
        season: Season label stored on each pair
        first_week: Week number of ``weeks[0]``

    Returns:
        MatchupPair list in week order
    """
    team_map = {t.roster_id: t for t in teams}
    pairs = []

    for offset, week in enumerate(weeks):
        groups: dict[int, list[int]] = {}
        for roster_id, entry in week.items():
            if entry.matchup_id is not None:
                groups.setdefault(entry.matchup_id, []).append(roster_id)

        for _, roster_ids in sorted(groups.items()):
            if len(roster_ids) != 2:
                continue
            a, b = roster_ids
            if a not in team_map or b not in team_map:
                continue
            pairs.append(
                MatchupPair(
                    season=season,
                    week=first_week + offset,
                    team1=team_map[a],
                    team1_score=week[a].points,
                    team2=team_map[b],
                    team2_score=week[b].points,
                )
            )

    return pairs


def _longest_streaks(pairs: Sequence[MatchupPair]) -> tuple[tuple[int, str, str], tuple[int, str, str]]:
    """Longest (win, loss) streak as (length, team name, season it ended)."""
    results: dict[str, list[tuple[str, int, str, str]]] = {}
    for pair in pairs:
        if pair.team1_score == 0 and pair.team2_score == 0:
            continue
        for team, own, other in (
            (pair.team1, pair.team1_score, pair.team2_score),
            (pair.team2, pair.team2_score, pair.team1_score),
        ):
            outcome = 'W' if own > other else 'L' if own < other else 'T'
            key = team.owner_id or team.team_name
            results.setdefault(key, []).append((pair.season, pair.week, outcome, team.team_name))

    best_win = (0, '', '')
    best_loss = (0, '', '')
    for games in results.values():
        games.sort(key=lambda g: (g[0], g[1]))
        run_type, run_len = None, 0
        for season, _week, outcome, team_name in games:
            if outcome == 'T':
                # Ties end both kinds of streak
                run_type, run_len = None, 0
                continue
            run_len = run_len + 1 if outcome == run_type else 1
            run_type = outcome
            if run_type == 'W' and run_len > best_win[0]:
                best_win = (run_len, team_name, season)
            if run_type == 'L' and run_len > best_loss[0]:
                best_loss = (run_len, team_name, season)

    return best_win, best_loss


def compute_league_records(pairs: Sequence[MatchupPair]) -> list[LeagueRecord]:
    """
    Extract notable records from a set of games.

    Produces (when data allows): highest and lowest non-zero weekly score,
    biggest blowout, closest game with a non-zero margin, longest win streak
    and longest losing streak.

    Args:
        pairs: Games from one or more seasons

    Returns:
        List of LeagueRecord in the order above
    """
    records = []

    scores = []
    for pair in pairs:
        scores.append((pair.team1_score, pair.team1.team_name, pair))
        scores.append((pair.team2_score, pair.team2.team_name, pair))
    scores = [s for s in scores if s[0] > 0]

    if scores:
        high = max(scores, key=lambda s: s[0])
        records.append(
            LeagueRecord(
                label='Highest Weekly Score',
                value=f'{high[0]:.2f}',
                team=high[1],
                season=high[2].season,
                numeric_value=high[0],
                week=high[2].week,
            )
        )
        low = min(scores, key=lambda s: s[0])
        records.append(
            LeagueRecord(
                label='Lowest Weekly Score',
                value=f'{low[0]:.2f}',
                team=low[1],
                season=low[2].season,
                numeric_value=low[0],
                week=low[2].week,
            )
        )

    played = [p for p in pairs if p.team1_score > 0 and p.team2_score > 0]

    def _summary(pair: MatchupPair) -> str:
        if pair.team1_score > pair.team2_score:
            return f'{pair.team1.team_name} over {pair.team2.team_name}'
        return f'{pair.team2.team_name} over {pair.team1.team_name}'

    if played:
        blowout = max(played, key=lambda p: p.margin)
        records.append(
            LeagueRecord(
                label='Biggest Blowout',
                value=f'{blowout.margin:.2f} pts',
                team=_summary(blowout),
                season=blowout.season,
                numeric_value=blowout.margin,
                week=blowout.week,
            )
        )
        decided = [p for p in played if p.margin > 0]
        if decided:
            closest = min(decided, key=lambda p: p.margin)
            records.append(
                LeagueRecord(
                    label='Closest Game',
                    value=f'{closest.margin:.2f} pts',
                    team=_summary(closest),
                    season=closest.season,
                    numeric_value=closest.margin,
                    week=closest.week,
                )
            )

    (win_len, win_team, win_season), (loss_len, loss_team, loss_season) = _longest_streaks(pairs)
    if win_len:
        records.append(
            LeagueRecord(
                label='Longest Win Streak',
                value=f'{win_len} games',
                team=win_team,
                season=win_season,
                numeric_value=win_len,
            )
        )
    if loss_len:
        records.append(
            LeagueRecord(
                label='Longest Losing Streak',
                value=f'{loss_len} games',
                team=loss_team,
                season=loss_season,
                numeric_value=loss_len,
            )
        )

    return records


def compute_head_to_head(owner1_id: str, owner2_id: str, pairs: Iterable[MatchupPair]) -> HeadToHeadRecord:
    """
    Head-to-head history between two managers.

    Args:
        owner1_id: First manager's user id
        owner2_id: Second manager's user id
        pairs: Games to search

    Returns:
        HeadToHeadRecord with wins, ties, points and game log
    """
    record = HeadToHeadRecord(owner1_id=owner1_id, owner2_id=owner2_id)

    for pair in pairs:
        ids = (pair.team1.owner_id, pair.team2.owner_id)
        if ids == (owner1_id, owner2_id):
            score1, score2 = pair.team1_score, pair.team2_score
        elif ids == (owner2_id, owner1_id):
            score1, score2 = pair.team2_score, pair.team1_score
        else:
            continue

        record.owner1_points += score1
        record.owner2_points += score2
        if score1 > score2:
            record.owner1_wins += 1
            winner = owner1_id
        elif score2 > score1:
            record.owner2_wins += 1
            winner = owner2_id
        else:
            record.ties += 1
            winner = 'Tie'

        record.games.append(
            HeadToHeadGame(season=pair.season, week=pair.week, score1=score1, score2=score2, winner=winner)
        )

    return record


def rebuild_team_records(teams: Sequence[TeamSeason], weeks: Sequence[WeekSnapshot]) -> list[TeamSeason]:
    """
    Recompute each team's record and points from weekly games.

    Roster totals from Sleeper always cover the season so far. This rebuilds
    them as of the last week in ``weeks``, e.g. to rank the league one week
    earlier. Games where neither side scored are unplayed and skipped.

    Matchup payloads carry no per-week potential points, so potential points
    are scaled to keep each team's season-long efficiency.

    Args:
        teams: Team records for the season
        weeks: Week snapshots to count, in week order

    Returns:
        One TeamSeason per team, in input order, with streak cleared
    """
    totals = {t.roster_id: {'wins': 0, 'losses': 0, 'ties': 0, 'pf': 0.0, 'pa': 0.0} for t in teams}

    for pair in pair_matchups(weeks, teams, ''):
        if pair.team1_score <= 0 and pair.team2_score <= 0:
            continue
        for team, own, other in (
            (pair.team1, pair.team1_score, pair.team2_score),
            (pair.team2, pair.team2_score, pair.team1_score),
        ):
            t = totals[team.roster_id]
            t['pf'] += own
            t['pa'] += other
            if own > other:
                t['wins'] += 1
            elif own < other:
                t['losses'] += 1
            else:
                t['ties'] += 1

    rebuilt = []
    for team in teams:
        t = totals[team.roster_id]
        efficiency = team.points_for / team.potential_points if team.potential_points else 0.0
        rebuilt.append(
            replace(
                team,
                wins=t['wins'],
                losses=t['losses'],
                ties=t['ties'],
                points_for=t['pf'],
                points_against=t['pa'],
                potential_points=t['pf'] / efficiency if efficiency else 0.0,
                streak='',
            )
        )
    return rebuilt


def compute_champion_history(history: Iterable[LeagueSnapshot]) -> list[ChampionEntry]:
    """
    Champion and runner-up of every completed season.

    Seasons that are not complete, or whose championship is undecided, are
    left out.

    Args:
        history: One snapshot per season

    Returns:
        ChampionEntry list, oldest season first
    """
    entries = []

    for season in history:
        if season.league.status != 'complete':
            continue
        winners = parse_bracket(season.winners_bracket)
        champion_id = get_champion_roster_id(winners)
        if champion_id is None:
            logger.warning(f'Season {season.league.season} is complete but has no champion')
            continue

        teams = {t.roster_id: t for t in season.teams}
        champion = teams.get(champion_id)
        runner_up_id = get_runner_up_roster_id(winners)
        runner_up = teams.get(runner_up_id) if runner_up_id is not None else None

        entry = ChampionEntry(
            season=season.league.season,
            league_id=season.league.league_id,
            champion_id=champion_id,
            champion_name=champion.team_name if champion else f'Team {champion_id}',
            champion_avatar=champion.avatar if champion else None,
            champion_record=f'{champion.wins}-{champion.losses}' if champion else '',
        )
        if runner_up_id is not None:
            entry.runner_up_id = runner_up_id
            entry.runner_up_name = runner_up.team_name if runner_up else f'Team {runner_up_id}'
            entry.runner_up_avatar = runner_up.avatar if runner_up else None
        entries.append(entry)

    return sorted(entries, key=lambda e: e.season)


def compute_all_time_standings(
    history: Iterable[LeagueSnapshot],
    champions: Optional[Iterable[ChampionEntry]] = None,
) -> list[AllTimeStanding]:
    """
    Career totals per manager across seasons.

    Managers are keyed by user id, so a manager who changes rosters or team
    names between seasons stays one entry. Each season's finish is the
    regular-season standings rank; a finish inside the league's playoff spots
    counts as a playoff appearance. Pre-draft seasons and rosters without a
    manager are skipped.

    Args:
        history: One snapshot per season
        champions: Champion history (computed from ``history`` when omitted)

    Returns:
        AllTimeStanding list by total wins, then total points for
    """
    history = sorted(history, key=lambda s: s.league.season)
    if champions is None:
        champions = compute_champion_history(history)
    champion_by_season = {c.season: c.champion_id for c in champions}

    managers: dict[str, AllTimeStanding] = {}

    for season in history:
        league = season.league
        if league.status == 'pre_draft':
            continue
        playoff_teams = league.settings.playoff_teams or DEFAULT_PLAYOFF_TEAMS
        user_ids = {u.user_id for u in season.users}

        for entry in build_standings(season.teams):
            team = entry.team
            if not team.owner_id or team.owner_id not in user_ids:
                continue

            manager = managers.setdefault(team.owner_id, AllTimeStanding(team.owner_id, team.display_name))
            # Name and avatar follow the most recent season
            manager.display_name = team.display_name
            manager.avatar = team.avatar

            manager.seasons_played += 1
            manager.total_wins += team.wins
            manager.total_losses += team.losses
            manager.total_ties += team.ties
            manager.total_points_for += team.points_for
            manager.total_points_against += team.points_against
            if champion_by_season.get(league.season) == team.roster_id:
                manager.championships += 1
            if entry.rank <= playoff_teams:
                manager.playoff_appearances += 1
            if manager.best_finish is None or entry.rank < manager.best_finish:
                manager.best_finish = entry.rank

            manager.season_results.append(
                SeasonResult(
                    season=league.season,
                    wins=team.wins,
                    losses=team.losses,
                    points_for=team.points_for,
                    points_against=team.points_against,
                    finish=entry.rank,
                )
            )

    return sorted(managers.values(), key=lambda m: (-m.total_wins, -m.total_points_for))


def compute_season_awards(
    teams: Sequence[TeamSeason],
    weeks: Sequence[WeekSnapshot],
    season: str,
    first_week: int = 1,
) -> list[SeasonAward]:
    """
    Season superlatives.

    Best Offense and Worst Offense go by points per game, Point Collector to
    the highest single-week score. Close Call and Biggest Blowout go to the
    winners of the narrowest (non-zero margin) and widest games.

    Args:
        teams: Team records for the season
        weeks: Week snapshots in week order
        season: Season label
        first_week: Week number of ``weeks[0]``

    Returns:
        SeasonAward list in the order above, skipping awards with no data
    """
    awards = []
    team_map = {t.roster_id: t for t in teams}

    def _ppg(team: TeamSeason) -> float:
        return team.points_for / team.games if team.games else 0.0

    by_ppg = sorted(teams, key=lambda t: -_ppg(t))
    if by_ppg:
        best, worst = by_ppg[0], by_ppg[-1]
        awards.append(SeasonAward('Best Offense', best.team_name, f'{_ppg(best):.1f} PPG'))
        awards.append(SeasonAward('Worst Offense', worst.team_name, f'{_ppg(worst):.1f} PPG'))

    top: Optional[tuple[float, int, int]] = None
    for offset, week in enumerate(weeks):
        for roster_id, entry in week.items():
            if entry.points > 0 and (top is None or entry.points > top[0]):
                top = (entry.points, roster_id, first_week + offset)
    if top is not None:
        points, roster_id, week_num = top
        name = team_map[roster_id].team_name if roster_id in team_map else f'Team {roster_id}'
        awards.append(SeasonAward('Point Collector', name, f'{points:.2f} pts', week=week_num))

    played = [
        p for p in pair_matchups(weeks, teams, season, first_week)
        if p.team1_score > 0 and p.team2_score > 0
    ]

    def _winner(pair: MatchupPair) -> str:
        return pair.team1.team_name if pair.team1_score > pair.team2_score else pair.team2.team_name

    decided = [p for p in played if p.margin > 0]
    if decided:
        closest = min(decided, key=lambda p: p.margin)
        awards.append(SeasonAward('Close Call', _winner(closest), f'Won by {closest.margin:.2f}', week=closest.week))
        blowout = max(decided, key=lambda p: p.margin)
        awards.append(SeasonAward('Biggest Blowout', _winner(blowout), f'Won by {blowout.margin:.2f}', week=blowout.week))

    return awards
