"""Sanity checks for fetched snapshots and computed rankings.

These never raise. Each returns a list of warning messages (empty if the
data looks fine) so callers can log them and carry on with the defaults the
analytics modules already apply.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from .models import BracketMatchup, BracketSlotRef, PowerRanking, WeekSnapshot
from .schemas import SleeperTradedPick


def validate_week_snapshot(week: WeekSnapshot, week_num: int) -> list[str]:
    """
    Check one week of matchup data.

    Checks:
    - No matchup group holds more than two teams
    - No negative scores

    Args:
        week: Week snapshot
        week_num: Week number (for messages)

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []

    group_sizes = Counter(e.matchup_id for e in week.values() if e.matchup_id is not None)
    for matchup_id, size in sorted(group_sizes.items()):
        if size > 2:
            warnings.append(f'Week {week_num}: matchup {matchup_id} has {size} teams (max 2)')

    for roster_id, entry in sorted(week.items()):
        if entry.points < 0:
            warnings.append(f'Week {week_num}: roster {roster_id} has negative score {entry.points:.2f}')

    return warnings


def validate_bracket(bracket: Sequence[BracketMatchup], name: str = 'winners') -> list[str]:
    """
    Check a parsed bracket.

    Checks:
    - Matchup ids are unique
    - Slot references point at matchups that exist
    - A recorded winner/loser is one of the matchup's literal teams

    Args:
        bracket: Parsed bracket matchups
        name: Bracket name (for messages)

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []

    id_counts = Counter(m.matchup_id for m in bracket)
    for matchup_id, count in sorted(id_counts.items()):
        if count > 1:
            warnings.append(f'{name} bracket: matchup id {matchup_id} appears {count} times')

    for matchup in bracket:
        for slot in (matchup.team1, matchup.team2):
            if isinstance(slot, BracketSlotRef) and slot.matchup_id not in id_counts:
                warnings.append(
                    f'{name} bracket: matchup {matchup.matchup_id} references unknown matchup {slot.matchup_id}'
                )

        literal = {s for s in (matchup.team1, matchup.team2) if isinstance(s, int)}
        if len(literal) == 2:
            for label, roster_id in (('winner', matchup.winner), ('loser', matchup.loser)):
                if roster_id is not None and roster_id not in literal:
                    warnings.append(
                        f'{name} bracket: matchup {matchup.matchup_id} {label} {roster_id} did not play in it'
                    )

    return warnings


def validate_traded_picks(traded_picks: Iterable[SleeperTradedPick], roster_ids: Iterable[int]) -> list[str]:
    """
    Check the traded-picks ledger against the league's rosters.

    Checks:
    - Original team and owner are known rosters
    - Each (season, round, original team) appears once

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []
    known = set(roster_ids)
    seen = set()

    for tp in traded_picks:
        key = (tp.season, tp.round, tp.roster_id)
        if tp.roster_id not in known:
            warnings.append(f'{tp.season} round {tp.round}: unknown original roster {tp.roster_id}')
        if tp.owner_id not in known:
            warnings.append(f'{tp.season} round {tp.round}: unknown owner roster {tp.owner_id}')
        if key in seen:
            warnings.append(f'{tp.season} round {tp.round}: pick of roster {tp.roster_id} listed twice')
        seen.add(key)

    return warnings


def validate_rankings(rankings: Sequence[PowerRanking]) -> list[str]:
    """
    Check computed power rankings for internal consistency.

    Checks:
    - Ranks run 1..N with no gaps or repeats
    - Win percentages lie in [0, 1], luck in [-1, 1]
    - Consistency rating lies in [0, 100]

    Returns:
        List of warning messages (empty if valid)
    """
    warnings = []

    ranks = sorted(r.rank for r in rankings)
    if ranks != list(range(1, len(rankings) + 1)):
        warnings.append(f'Ranks are not 1..{len(rankings)}: {ranks}')

    for r in rankings:
        m = r.metrics
        if not 0 <= m.x_win_pct <= 1:
            warnings.append(f'{r.team_name} xWin% out of range: {m.x_win_pct:.3f}')
        if not 0 <= m.actual_win_pct <= 1:
            warnings.append(f'{r.team_name} win% out of range: {m.actual_win_pct:.3f}')
        if not -1 <= m.luck_index <= 1:
            warnings.append(f'{r.team_name} luck index out of range: {m.luck_index:.3f}')
        if not 0 <= m.consistency.rating <= 100:
            warnings.append(f'{r.team_name} consistency rating out of range: {m.consistency.rating:.1f}')

    return warnings
