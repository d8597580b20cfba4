"""Team records and regular-season standings."""

from collections.abc import Iterable, Sequence

from .models import BracketPlacement, StandingsEntry, TeamSeason
from .schemas import SleeperRoster, SleeperUser


def _with_decimal(whole: float | None, decimal: float | None) -> float:
    """Sleeper splits points into an integer part and hundredths."""
    return (whole or 0) + (decimal or 0) / 100


def build_team_seasons(
    rosters: Iterable[SleeperRoster], users: Iterable[SleeperUser]
) -> list[TeamSeason]:
    """
    Join rosters with their managers.

    Team name falls back to the manager's display name, then 'Team <id>'.
    Display name falls back to the username, then 'Unknown'.

    Args:
        rosters: League rosters
        users: League users

    Returns:
        One TeamSeason per roster, in roster order
    """
    user_map = {u.user_id: u for u in users}

    teams = []
    for roster in rosters:
        user = user_map.get(roster.owner_id) if roster.owner_id else None
        metadata = (user.metadata or {}) if user else {}
        display_name = (user.display_name or user.username) if user else None
        settings = roster.settings

        teams.append(
            TeamSeason(
                roster_id=roster.roster_id,
                owner_id=roster.owner_id or '',
                display_name=display_name or 'Unknown',
                team_name=metadata.get('team_name') or display_name or f'Team {roster.roster_id}',
                avatar=user.avatar if user else None,
                wins=settings.wins,
                losses=settings.losses,
                ties=settings.ties,
                points_for=_with_decimal(settings.fpts, settings.fpts_decimal),
                points_against=_with_decimal(settings.fpts_against, settings.fpts_against_decimal),
                potential_points=_with_decimal(settings.ppts, settings.ppts_decimal),
                streak=str((roster.metadata or {}).get('streak') or ''),
            )
        )
    return teams


def build_standings(
    teams: Sequence[TeamSeason], placements: Sequence[BracketPlacement] = ()
) -> list[StandingsEntry]:
    """
    Order teams by wins, then points for.

    Args:
        teams: Team records
        placements: Optional final bracket placements to attach

    Returns:
        Standings entries with rank 1..N
    """
    placed = placement_map(placements)
    ordered = sorted(teams, key=lambda t: (-t.wins, -t.points_for))
    return [
        StandingsEntry(team=team, rank=i + 1, placement=placed.get(team.roster_id))
        for i, team in enumerate(ordered)
    ]


def placement_map(placements: Iterable[BracketPlacement]) -> dict[int, int]:
    """Map roster id -> final placement."""
    return {p.roster_id: p.placement for p in placements}
