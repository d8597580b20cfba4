"""Playoff bracket resolution.

Sleeper returns each bracket (winners and losers/consolation) as a flat list
of matchups. A team slot is either a roster id or a reference to the winner
or loser of an earlier matchup. Matchups carry a placement code ``p`` when
their result decides final positions:

- Winners bracket: p=1 decides 1st/2nd, p=3 decides 3rd/4th, p=5 decides 5th/6th
- Losers bracket: p=1 decides the first placement after the playoff teams
  (7th/8th with six playoff teams), p=3 the next two (9th/10th)
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Literal, Optional

from .constants import (
    DEFAULT_PLAYOFF_TEAMS,
    LOSERS_PLACEMENT_OFFSETS,
    LOSERS_ROUND_LABELS,
    WINNERS_PLACEMENT_CODES,
    WINNERS_ROUND_LABELS,
)
from .models import (
    BracketMatchup,
    BracketMatchupDisplay,
    BracketPlacement,
    BracketResult,
    BracketRound,
    BracketSlot,
    BracketSlotRef,
)
from .schemas import BracketRef, SleeperBracketMatchup

logger = logging.getLogger('legends.brackets')

BracketType = Literal['winners', 'losers']


def _parse_slot(value: int | BracketRef | None, from_ref: BracketRef | None) -> BracketSlot:
    if isinstance(value, int):
        return value
    ref = value if value is not None else from_ref
    if ref is None:
        return None
    if ref.w is not None:
        return BracketSlotRef(kind='w', matchup_id=ref.w)
    if ref.l is not None:
        return BracketSlotRef(kind='l', matchup_id=ref.l)
    return None


def parse_bracket(raw: Iterable[SleeperBracketMatchup]) -> list[BracketMatchup]:
    """
    Convert Sleeper bracket entries into BracketMatchup records.

    A slot given as ``{'w': 3}`` in ``t1``/``t2``, or as ``t1_from`` /
    ``t2_from`` alongside a null ``t1``/``t2``, becomes a BracketSlotRef.

    Args:
        raw: Validated bracket entries

    Returns:
        List of BracketMatchup in the input order
    """
    return [
        BracketMatchup(
            round=m.r,
            matchup_id=m.m,
            team1=_parse_slot(m.t1, m.t1_from),
            team2=_parse_slot(m.t2, m.t2_from),
            winner=m.w,
            loser=m.l,
            placement=m.p,
        )
        for m in raw
    ]


def index_bracket(bracket: Sequence[BracketMatchup]) -> dict[int, BracketMatchup]:
    """Map matchup id -> matchup (first occurrence wins)."""
    index: dict[int, BracketMatchup] = {}
    for matchup in bracket:
        index.setdefault(matchup.matchup_id, matchup)
    return index


def resolve_slot(slot: BracketSlot, index: dict[int, BracketMatchup]) -> Optional[int]:
    """
    Resolve a team slot to a roster id.

    References are followed a single level: the referenced matchup's
    recorded winner or loser is returned as-is, None while undecided.

    Args:
        slot: Roster id, reference, or None
        index: Matchups keyed by id (from index_bracket)

    Returns:
        Roster id, or None if empty, undecided or the reference is dangling
    """
    if slot is None or isinstance(slot, int):
        return slot

    target = index.get(slot.matchup_id)
    if target is None:
        logger.warning(f'Bracket slot references unknown matchup {slot.matchup_id}')
        return None
    return target.winner if slot.kind == 'w' else target.loser


def round_label(round_num: int, max_round: int, bracket_type: BracketType = 'winners') -> str:
    """
    Label a round by its distance from the final round.

    The last round is always 'Finals'. In the winners bracket the two rounds
    before it are 'Semifinals' and 'Quarterfinals'. Any other round is
    'Round N'.
    """
    labels = WINNERS_ROUND_LABELS if bracket_type == 'winners' else LOSERS_ROUND_LABELS
    return labels.get(max_round - round_num, f'Round {round_num}')


def build_bracket_rounds(
    bracket: Sequence[BracketMatchup], bracket_type: BracketType = 'winners'
) -> list[BracketRound]:
    """
    Group matchups by round with resolved team slots, for display.

    Args:
        bracket: Parsed matchups for one bracket
        bracket_type: 'winners' or 'losers' (affects round labels)

    Returns:
        Rounds sorted ascending; empty list for an empty bracket
    """
    if not bracket:
        return []

    index = index_bracket(bracket)
    max_round = max(m.round for m in bracket)

    rounds: dict[int, BracketRound] = {}
    for matchup in bracket:
        if matchup.round not in rounds:
            rounds[matchup.round] = BracketRound(
                round=matchup.round,
                label=round_label(matchup.round, max_round, bracket_type),
            )
        rounds[matchup.round].matchups.append(
            BracketMatchupDisplay(
                matchup_id=matchup.matchup_id,
                team1_id=resolve_slot(matchup.team1, index),
                team2_id=resolve_slot(matchup.team2, index),
                winner_id=matchup.winner,
                loser_id=matchup.loser,
                placement=matchup.placement,
            )
        )

    return [rounds[r] for r in sorted(rounds)]


def resolve_bracket_placements(
    winners_bracket: Sequence[BracketMatchup],
    losers_bracket: Sequence[BracketMatchup],
    playoff_teams: int = DEFAULT_PLAYOFF_TEAMS,
) -> list[BracketPlacement]:
    """
    Resolve final placements from both brackets.

    Only decided matchups (winner and loser both set) with a known placement
    code contribute. Losers-bracket codes are offset by the number of
    playoff teams.

    Args:
        winners_bracket: Parsed winners bracket
        losers_bracket: Parsed losers/consolation bracket
        playoff_teams: Number of teams in the winners bracket

    Returns:
        Placements sorted by position
    """
    placements = []

    for matchup in winners_bracket:
        if matchup.winner is None or matchup.loser is None:
            continue
        positions = WINNERS_PLACEMENT_CODES.get(matchup.placement)
        if positions:
            placements.append(BracketPlacement(roster_id=matchup.winner, placement=positions[0]))
            placements.append(BracketPlacement(roster_id=matchup.loser, placement=positions[1]))

    for matchup in losers_bracket:
        if matchup.winner is None or matchup.loser is None:
            continue
        offsets = LOSERS_PLACEMENT_OFFSETS.get(matchup.placement)
        if offsets:
            placements.append(
                BracketPlacement(roster_id=matchup.winner, placement=playoff_teams + offsets[0])
            )
            placements.append(
                BracketPlacement(roster_id=matchup.loser, placement=playoff_teams + offsets[1])
            )

    return sorted(placements, key=lambda p: p.placement)


def _championship(winners_bracket: Sequence[BracketMatchup]) -> Optional[BracketMatchup]:
    return next((m for m in winners_bracket if m.placement == 1), None)


def get_champion_roster_id(winners_bracket: Sequence[BracketMatchup]) -> Optional[int]:
    """Winner of the championship (p=1) matchup, None if not tagged or undecided."""
    championship = _championship(winners_bracket)
    return championship.winner if championship else None


def get_runner_up_roster_id(winners_bracket: Sequence[BracketMatchup]) -> Optional[int]:
    """Loser of the championship (p=1) matchup, None if not tagged or undecided."""
    championship = _championship(winners_bracket)
    return championship.loser if championship else None


def resolve_brackets(
    winners_raw: Iterable[SleeperBracketMatchup],
    losers_raw: Iterable[SleeperBracketMatchup],
    playoff_teams: int = DEFAULT_PLAYOFF_TEAMS,
) -> BracketResult:
    """
    Resolve both brackets for one season.

    Args:
        winners_raw: Winners bracket entries
        losers_raw: Losers bracket entries
        playoff_teams: Number of playoff teams

    Returns:
        BracketResult with labelled rounds, placements, champion and runner-up
    """
    winners = parse_bracket(winners_raw)
    losers = parse_bracket(losers_raw)

    champion_id = get_champion_roster_id(winners)
    if champion_id is None:
        logger.debug('No decided championship matchup; champion not available')

    return BracketResult(
        winners_rounds=build_bracket_rounds(winners, 'winners'),
        losers_rounds=build_bracket_rounds(losers, 'losers'),
        placements=resolve_bracket_placements(winners, losers, playoff_teams),
        champion_id=champion_id,
        runner_up_id=get_runner_up_roster_id(winners),
    )
