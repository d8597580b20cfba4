"""Composite power score, ranking and tiering for a league season.

Weights: 30% avg PF + 20% xWin% + 15% recent form + 15% efficiency
+ 10% consistency + 10% strength of schedule. Each metric is min-max
normalized to 0-100 across the league before weighting. A tougher schedule
(higher average opponent score) earns a slightly higher score.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from .analytics import (
    average,
    compute_all_play_record,
    compute_all_sos,
    compute_consistency,
    compute_efficiency,
    compute_luck_index,
    compute_median_record,
    compute_recent_form,
    compute_x_win_pct,
    extract_weekly_scores,
)
from .constants import (
    BUBBLE_COUNT,
    BUBBLE_FRACTION,
    CONTENDER_COUNT,
    CONTENDER_FRACTION,
    NORMALIZED_MIDPOINT,
    POWER_SCORE_WEIGHTS,
    RECENT_FORM_WINDOW,
    TIER_BUBBLE,
    TIER_CONTENDER,
    TIER_REBUILDING,
)
from .models import PowerMetrics, PowerRanking, StrengthOfSchedule, TeamSeason, WeekSnapshot

logger = logging.getLogger('legends.power_rankings')

METRIC_NAMES = tuple(POWER_SCORE_WEIGHTS)


@dataclass(frozen=True)
class TierCutoffs:
    """
    Rank cutoffs for tiers: ranks 1..contender are contenders, the next
    ``bubble`` ranks are bubble teams and the rest are rebuilding.
    """
    contender: int = CONTENDER_COUNT
    bubble: int = BUBBLE_COUNT

    @classmethod
    def scaled(
        cls,
        num_teams: int,
        contender_fraction: float = CONTENDER_FRACTION,
        bubble_fraction: float = BUBBLE_FRACTION,
    ) -> 'TierCutoffs':
        """
        Derive cutoffs from league size.

        ``bubble_fraction`` is the share of the league ranked bubble or
        better. The defaults give 3 / 4 for a ten-team league.
        """
        contender = int(contender_fraction * num_teams + 0.5)
        bubble_end = int(bubble_fraction * num_teams + 0.5)
        return cls(contender=contender, bubble=max(0, bubble_end - contender))

    def tier_for(self, rank: int) -> str:
        if rank <= self.contender:
            return TIER_CONTENDER
        if rank <= self.contender + self.bubble:
            return TIER_BUBBLE
        return TIER_REBUILDING


def normalize(value: float, low: float, high: float) -> float:
    """Scale ``value`` to 0-100 within [low, high]; 50 when the range is empty."""
    if high == low:
        return NORMALIZED_MIDPOINT
    return (value - low) / (high - low) * 100


def _metric_values(metrics: PowerMetrics) -> dict[str, float]:
    return {
        'avg_pf': metrics.avg_pf,
        'x_win_pct': metrics.x_win_pct,
        'recent_form': metrics.recent_form.avg,
        'efficiency': metrics.efficiency,
        'consistency': metrics.consistency.rating,
        'sos': metrics.sos.avg_opponent_ppg,
    }


def compute_league_ranges(all_metrics: Sequence[PowerMetrics]) -> dict[str, tuple[float, float]]:
    """
    Min and max of each scored metric across the league.

    Args:
        all_metrics: Metric bundles for every team

    Returns:
        Dict mapping metric name -> (min, max); (0, 0) when there are no teams
    """
    ranges = {}
    values = [_metric_values(m) for m in all_metrics]
    for name in METRIC_NAMES:
        column = [v[name] for v in values]
        ranges[name] = (min(column), max(column)) if column else (0.0, 0.0)
    return ranges


def compute_power_components(
    metrics: PowerMetrics, ranges: dict[str, tuple[float, float]]
) -> dict[str, float]:
    """Normalized 0-100 value of each scored metric for one team."""
    values = _metric_values(metrics)
    return {name: normalize(values[name], *ranges[name]) for name in METRIC_NAMES}


def compute_power_score(metrics: PowerMetrics, ranges: dict[str, tuple[float, float]]) -> float:
    """
    Weighted composite power score for one team.

    Args:
        metrics: The team's metric bundle
        ranges: League-wide (min, max) per metric from compute_league_ranges

    Returns:
        Power score on a 0-100 scale
    """
    components = compute_power_components(metrics, ranges)
    return sum(components[name] * POWER_SCORE_WEIGHTS[name] for name in METRIC_NAMES)


def assign_tiers(rankings: list[PowerRanking], tiers: Optional[TierCutoffs] = None) -> None:
    """Sort by power score (stable on ties) and assign rank and tier in place."""
    tiers = tiers or TierCutoffs()
    rankings.sort(key=lambda r: -r.power_score)
    for i, ranking in enumerate(rankings):
        ranking.rank = i + 1
        ranking.tier = tiers.tier_for(ranking.rank)


def compute_league_power_rankings(
    teams: Sequence[TeamSeason],
    weeks: Sequence[WeekSnapshot],
    tiers: Optional[TierCutoffs] = None,
    recent_form_window: int = RECENT_FORM_WINDOW,
) -> list[PowerRanking]:
    """
    Compute full power rankings for a league season.

    Args:
        teams: Every team in the league
        weeks: Regular-season week snapshots, in week order
        tiers: Tier cutoffs (default: 3 contenders, 4 bubble, rest rebuilding)
        recent_form_window: Weeks used for recent form (at most 3)

    Returns:
        Rankings sorted best first, ranks 1..N without gaps
    """
    roster_ids = [t.roster_id for t in teams]
    sos_map = compute_all_sos(weeks, roster_ids)

    team_metrics = []
    for team in teams:
        scores = extract_weekly_scores(team.roster_id, weeks)
        all_play = compute_all_play_record(team.roster_id, weeks)
        avg_pf = average(scores)
        x_win_pct = compute_x_win_pct(all_play)

        metrics = PowerMetrics(
            avg_pf=avg_pf,
            x_win_pct=x_win_pct,
            luck_index=compute_luck_index(team.actual_win_pct, x_win_pct),
            actual_win_pct=team.actual_win_pct,
            sos=sos_map.get(team.roster_id, StrengthOfSchedule(rank=len(teams))),
            efficiency=compute_efficiency(team.points_for, team.potential_points),
            consistency=compute_consistency(scores),
            recent_form=compute_recent_form(scores, avg_pf, recent_form_window),
        )
        team_metrics.append((team, scores, all_play, metrics))

    ranges = compute_league_ranges([m for _, _, _, m in team_metrics])

    rankings = []
    for team, scores, all_play, metrics in team_metrics:
        components = compute_power_components(metrics, ranges)
        power_score = sum(components[name] * POWER_SCORE_WEIGHTS[name] for name in METRIC_NAMES)
        rankings.append(
            PowerRanking(
                roster_id=team.roster_id,
                team_name=team.team_name,
                display_name=team.display_name,
                avatar=team.avatar,
                rank=0,  # assigned after sorting
                power_score=power_score,
                tier=TIER_BUBBLE,  # assigned after sorting
                metrics=metrics,
                record={'wins': team.wins, 'losses': team.losses, 'ties': team.ties},
                all_play_record=all_play,
                weekly_scores=scores,
                median_record=compute_median_record(team.roster_id, weeks),
                components=components,
            )
        )

    assign_tiers(rankings, tiers)
    logger.debug(f'Ranked {len(rankings)} teams over {len(weeks)} weeks')
    return rankings


def apply_previous_ranks(
    current: list[PowerRanking], previous: Sequence[PowerRanking]
) -> list[PowerRanking]:
    """
    Copy each team's rank from an earlier ranking run into previous_rank.

    Typically ``previous`` is computed on every week except the latest one.
    Teams missing from ``previous`` keep previous_rank None.
    """
    previous_ranks = {r.roster_id: r.rank for r in previous}
    for ranking in current:
        ranking.previous_rank = previous_ranks.get(ranking.roster_id)
    return current


def compute_league_insights(rankings: Sequence[PowerRanking]) -> dict[str, Optional[PowerRanking]]:
    """
    Pick out the notable teams for the insights panel.

    Returns:
        Dict with luckiest, unluckiest, most_consistent, most_volatile,
        hardest_schedule and easiest_schedule (each None with no rankings)
    """
    keys = (
        'luckiest',
        'unluckiest',
        'most_consistent',
        'most_volatile',
        'hardest_schedule',
        'easiest_schedule',
    )
    if not rankings:
        return {key: None for key in keys}

    return {
        'luckiest': max(rankings, key=lambda r: r.metrics.luck_index),
        'unluckiest': min(rankings, key=lambda r: r.metrics.luck_index),
        'most_consistent': max(rankings, key=lambda r: r.metrics.consistency.rating),
        'most_volatile': min(rankings, key=lambda r: r.metrics.consistency.rating),
        'hardest_schedule': min(rankings, key=lambda r: r.metrics.sos.rank),
        'easiest_schedule': max(rankings, key=lambda r: r.metrics.sos.rank),
    }
