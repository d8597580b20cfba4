"""Draft pick ownership resolver.

Applies the league's traded-picks ledger to every future pick. The ledger
already holds the final owner of each traded pick, so no trade history is
replayed: a pick is either still with its original team or with the owner
recorded in the ledger.
"""

import logging
from collections.abc import Iterable, Sequence

from .constants import DEFAULT_DRAFT_ROUNDS, DEFAULT_FUTURE_SEASONS
from .models import DraftPickOwnership, TeamPickCapital
from .schemas import SleeperTradedPick

logger = logging.getLogger('legends.draft_picks')

PickKey = tuple[str, int, int]  # (season, round, original roster id)


def index_traded_picks(traded_picks: Iterable[SleeperTradedPick]) -> dict[PickKey, int]:
    """
    Map (season, round, original roster id) -> current owner.

    If the ledger lists the same pick twice, the first record wins.
    """
    ledger: dict[PickKey, int] = {}
    for tp in traded_picks:
        key = (tp.season, tp.round, tp.roster_id)
        if key in ledger:
            logger.debug(f'Duplicate traded pick {key}, keeping owner {ledger[key]}')
            continue
        ledger[key] = tp.owner_id
    return ledger


def resolve_draft_pick_ownership(
    traded_picks: Iterable[SleeperTradedPick],
    roster_ids: Sequence[int],
    seasons: Sequence[str],
    max_rounds: int = DEFAULT_DRAFT_ROUNDS,
) -> list[DraftPickOwnership]:
    """
    Resolve current ownership of every future pick.

    Args:
        traded_picks: The league's traded-picks ledger
        roster_ids: Every team in the league
        seasons: Draft seasons to resolve (e.g. ['2026', '2027', '2028'])
        max_rounds: Rounds per draft (default: 4 for rookie drafts)

    Returns:
        One record per (season, round, team), ordered by season, round, team
    """
    ledger = index_traded_picks(traded_picks)

    picks = []
    for season in seasons:
        season = str(season)
        for round_num in range(1, max_rounds + 1):
            for original_id in roster_ids:
                owner = ledger.get((season, round_num, original_id), original_id)
                picks.append(
                    DraftPickOwnership(
                        season=season,
                        round=round_num,
                        original_roster_id=original_id,
                        current_owner_id=owner,
                    )
                )

    moved = sum(1 for p in picks if p.moved)
    logger.debug(f'Resolved {len(picks)} picks across {len(seasons)} seasons ({moved} moved)')
    return picks


def compute_pick_capital(
    picks: Sequence[DraftPickOwnership], roster_ids: Sequence[int]
) -> list[TeamPickCapital]:
    """
    Summarize pick capital per team.

    ``owns_own_first`` is True only when the team still holds every one of
    its own first-round picks in ``picks`` (False when there are none).

    Args:
        picks: Output of resolve_draft_pick_ownership
        roster_ids: Teams to summarize

    Returns:
        One TeamPickCapital per roster id, in the given order
    """
    capital = []
    for roster_id in roster_ids:
        owned = [p for p in picks if p.current_owner_id == roster_id]
        own_picks = [p for p in picks if p.original_roster_id == roster_id]
        own_firsts = [p for p in own_picks if p.round == 1]

        capital.append(
            TeamPickCapital(
                roster_id=roster_id,
                total_owned=len(owned),
                total_traded_away=sum(1 for p in own_picks if p.moved),
                total_acquired=sum(1 for p in owned if p.moved),
                owns_own_first=bool(own_firsts) and all(not p.moved for p in own_firsts),
                picks=owned,
            )
        )
    return capital


def future_seasons(current_season: str | int, count: int = DEFAULT_FUTURE_SEASONS) -> list[str]:
    """The ``count`` seasons after ``current_season``, as strings."""
    start = int(current_season)
    return [str(start + i) for i in range(1, count + 1)]
