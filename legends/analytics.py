"""Per-team metric calculators for power rankings.

Every function here works on week snapshots (``roster_id -> MatchupEntry``)
and follows the same rule: a team that is missing from a week, or scored 0
that week, had no valid game. Those weeks are left out of averages, all-play
comparisons and schedule strength so bye weeks and unplayed weeks do not drag
rate statistics down. Empty inputs produce neutral values, never errors.
"""

import logging
import math
from collections.abc import Iterable, Sequence

from .constants import (
    CONSISTENCY_CV_SCALE,
    RECENT_FORM_WEIGHTS,
    RECENT_FORM_WINDOW,
    TREND_THRESHOLD,
)
from .models import (
    AllPlayRecord,
    ConsistencyMetrics,
    MatchupEntry,
    MedianRecord,
    RecentForm,
    StrengthOfSchedule,
    WeekSnapshot,
)
from .schemas import SleeperMatchup

logger = logging.getLogger('legends.analytics')


def build_week_snapshot(matchups: Iterable[SleeperMatchup]) -> WeekSnapshot:
    """
    Convert one week of Sleeper matchup entries into a snapshot.

    Args:
        matchups: Matchup entries for a single week

    Returns:
        Dict mapping roster_id -> MatchupEntry
    """
    snapshot: WeekSnapshot = {}
    for m in matchups:
        if m.roster_id in snapshot:
            logger.debug(f'Duplicate matchup entry for roster {m.roster_id}, keeping last')
        snapshot[m.roster_id] = MatchupEntry(matchup_id=m.matchup_id, points=float(m.points or 0))
    return snapshot


def count_played_weeks(weeks: Sequence[WeekSnapshot]) -> int:
    """
    Number of weeks up to and including the last week anyone scored.

    Snapshots cover the whole regular season, so mid-season the tail is
    unplayed weeks (missing or all-zero). Gaps before the last played week
    are kept.
    """
    for week_num in range(len(weeks), 0, -1):
        if any(entry.points > 0 for entry in weeks[week_num - 1].values()):
            return week_num
    return 0


def _valid_points(week: WeekSnapshot, roster_id: int) -> float | None:
    entry = week.get(roster_id)
    if entry is None or entry.points <= 0:
        return None
    return entry.points


def extract_weekly_scores(roster_id: int, weeks: Sequence[WeekSnapshot]) -> list[float]:
    """
    Pull a team's scores out of a season's weekly snapshots.

    Weeks where the team is absent or scored 0 are skipped.

    Args:
        roster_id: Team to extract
        weeks: Week snapshots in week order

    Returns:
        Positive scores in week order (may be empty)
    """
    scores = []
    for week in weeks:
        points = _valid_points(week, roster_id)
        if points is not None:
            scores.append(points)
    return scores


def compute_all_play_record(roster_id: int, weeks: Sequence[WeekSnapshot]) -> AllPlayRecord:
    """
    Compare each week's score against every other team that played that week.

    Args:
        roster_id: Team to evaluate
        weeks: Week snapshots

    Returns:
        AllPlayRecord with wins/losses/ties and win fraction (0 if no games)
    """
    wins = losses = ties = 0

    for week in weeks:
        points = _valid_points(week, roster_id)
        if points is None:
            continue

        for other_id, other in week.items():
            if other_id == roster_id or other.points <= 0:
                continue
            if points > other.points:
                wins += 1
            elif points < other.points:
                losses += 1
            else:
                ties += 1

    total = wins + losses + ties
    return AllPlayRecord(wins=wins, losses=losses, ties=ties, pct=wins / total if total else 0.0)


def compute_x_win_pct(all_play: AllPlayRecord) -> float:
    """Expected win percentage is the all-play win fraction."""
    return all_play.pct


def compute_luck_index(actual_win_pct: float, x_win_pct: float) -> float:
    """Actual minus expected win percentage. Positive = lucky."""
    return actual_win_pct - x_win_pct


def compute_strength_of_schedule(roster_id: int, weeks: Sequence[WeekSnapshot]) -> float:
    """
    Average score of the opponents a team actually faced.

    Only weeks where both the team and its paired opponent (same matchup_id,
    different roster) have a valid score count.

    Args:
        roster_id: Team to evaluate
        weeks: Week snapshots

    Returns:
        Average opponent points per game (0 if no opponents found)
    """
    opponent_scores = []

    for week in weeks:
        if _valid_points(week, roster_id) is None:
            continue
        matchup_id = week[roster_id].matchup_id
        if matchup_id is None:
            continue

        for other_id, other in week.items():
            if other_id != roster_id and other.matchup_id == matchup_id:
                if other.points > 0:
                    opponent_scores.append(other.points)
                break

    if not opponent_scores:
        return 0.0
    return sum(opponent_scores) / len(opponent_scores)


def compute_all_sos(
    weeks: Sequence[WeekSnapshot], roster_ids: Sequence[int]
) -> dict[int, StrengthOfSchedule]:
    """
    Compute schedule strength for every team and rank them league-wide.

    Rank 1 faced the highest average opponent score. Equal averages are
    ordered by roster id.

    Args:
        weeks: Week snapshots
        roster_ids: All teams in the league

    Returns:
        Dict mapping roster_id -> StrengthOfSchedule
    """
    values = [(rid, compute_strength_of_schedule(rid, weeks)) for rid in roster_ids]
    values.sort(key=lambda v: (-v[1], v[0]))

    return {
        rid: StrengthOfSchedule(avg_opponent_ppg=avg, rank=i + 1)
        for i, (rid, avg) in enumerate(values)
    }


def compute_efficiency(fpts: float, ppts: float) -> float:
    """Actual points over optimal-lineup potential points (0 without potential)."""
    if ppts == 0:
        return 0.0
    return fpts / ppts


def compute_consistency(weekly_scores: Sequence[float]) -> ConsistencyMetrics:
    """
    Standard deviation, coefficient of variation and a 0-100 rating.

    Uses the population standard deviation. No scores counts as no variance
    (rating 100).

    Args:
        weekly_scores: A team's valid scores

    Returns:
        ConsistencyMetrics
    """
    if not weekly_scores:
        return ConsistencyMetrics(std_dev=0.0, cv=0.0, rating=100.0)

    n = len(weekly_scores)
    avg = sum(weekly_scores) / n
    variance = sum((s - avg) ** 2 for s in weekly_scores) / n
    std_dev = math.sqrt(variance)
    cv = (std_dev / avg) * 100 if avg > 0 else 0.0
    rating = max(0.0, min(100.0, 100 - cv * CONSISTENCY_CV_SCALE))

    return ConsistencyMetrics(std_dev=std_dev, cv=cv, rating=rating)


def compute_recent_form(
    weekly_scores: Sequence[float],
    season_avg: float,
    window_size: int = RECENT_FORM_WINDOW,
) -> RecentForm:
    """
    Recency-weighted average of the last few scores and its trend.

    Weights are 0.5 / 0.3 / 0.2 from the most recent week back, rescaled to
    sum to 1 when fewer weeks are available. The trend is 'up' or 'down' when
    the weighted average differs from the season average by more than 3%.

    Args:
        weekly_scores: A team's valid scores, oldest first
        season_avg: The team's season average
        window_size: Number of recent weeks to use (at most 3)

    Returns:
        RecentForm
    """
    if not weekly_scores:
        return RecentForm(avg=0.0, trend='flat')

    window = max(1, min(window_size, len(RECENT_FORM_WEIGHTS)))
    recent = list(weekly_scores[-window:])
    weights = RECENT_FORM_WEIGHTS[:len(recent)]
    total_weight = sum(weights)

    # recent[-1] is the most recent week and takes weights[0]
    weighted_avg = sum(
        score * (weight / total_weight) for score, weight in zip(reversed(recent), weights)
    )

    diff = weighted_avg - season_avg
    threshold = season_avg * TREND_THRESHOLD
    if diff > threshold:
        trend = 'up'
    elif diff < -threshold:
        trend = 'down'
    else:
        trend = 'flat'

    return RecentForm(avg=weighted_avg, trend=trend)


def compute_median_record(roster_id: int, weeks: Sequence[WeekSnapshot]) -> MedianRecord:
    """
    Count weeks a team scored above / at-or-below that week's league median.

    Args:
        roster_id: Team to evaluate
        weeks: Week snapshots

    Returns:
        MedianRecord
    """
    above = below = 0

    for week in weeks:
        active = sorted(e.points for e in week.values() if e.points > 0)
        if not active:
            continue

        mid = len(active) // 2
        if len(active) % 2 == 0:
            median = (active[mid - 1] + active[mid]) / 2
        else:
            median = active[mid]

        points = _valid_points(week, roster_id)
        if points is None:
            continue
        if points > median:
            above += 1
        else:
            below += 1

    return MedianRecord(above=above, below=below)


def average(scores: Sequence[float]) -> float:
    """Arithmetic mean, 0 for no scores."""
    return sum(scores) / len(scores) if scores else 0.0
