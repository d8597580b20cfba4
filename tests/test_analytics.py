"""Unit tests for per-team metric calculators."""

import pytest

from legends.analytics import (
    average,
    build_week_snapshot,
    compute_all_play_record,
    compute_all_sos,
    compute_consistency,
    compute_efficiency,
    compute_luck_index,
    compute_median_record,
    compute_recent_form,
    compute_strength_of_schedule,
    compute_x_win_pct,
    count_played_weeks,
    extract_weekly_scores,
)
from legends.models import MatchupEntry
from legends.schemas import SleeperMatchup


def week(*entries):
    """Build a week snapshot from (roster_id, matchup_id, points) tuples."""
    return {rid: MatchupEntry(matchup_id=mid, points=pts) for rid, mid, pts in entries}


@pytest.fixture
def four_team_weeks():
    """Two weeks of a four-team league. Team 4 had a bye in week 2."""
    return [
        week((1, 1, 120.0), (2, 1, 100.0), (3, 2, 90.0), (4, 2, 110.0)),
        week((1, 1, 95.0), (3, 1, 105.0), (2, 2, 130.0), (4, None, 0.0)),
    ]


class TestWeekSnapshot:
    """Tests for converting Sleeper matchups into snapshots."""

    def test_builds_entries_by_roster(self):
        """Test that each matchup becomes an entry keyed by roster id."""
        matchups = [
            SleeperMatchup(roster_id=1, matchup_id=1, points=101.5),
            SleeperMatchup(roster_id=2, matchup_id=1, points=99.2),
        ]
        snapshot = build_week_snapshot(matchups)
        assert snapshot == {
            1: MatchupEntry(matchup_id=1, points=101.5),
            2: MatchupEntry(matchup_id=1, points=99.2),
        }

    def test_null_points_become_zero(self):
        """Test that unplayed weeks (null points) are stored as 0."""
        snapshot = build_week_snapshot([SleeperMatchup(roster_id=7, matchup_id=None, points=None)])
        assert snapshot[7].points == 0.0
        assert snapshot[7].matchup_id is None


class TestPlayedWeeks:
    """Tests for counting weeks played so far."""

    def test_trailing_unplayed_weeks_dropped(self, four_team_weeks):
        """Test that empty and all-zero weeks after the last game are not counted."""
        unplayed = week((1, 1, 0.0), (2, 1, 0.0))
        assert count_played_weeks(four_team_weeks + [unplayed, {}, {}]) == 2

    def test_gap_before_last_played_week_kept(self, four_team_weeks):
        """Test that a missing week in the middle still counts."""
        assert count_played_weeks([four_team_weeks[0], {}, four_team_weeks[1]]) == 3

    def test_nothing_played(self):
        """Test a season that has not started."""
        assert count_played_weeks([{}, {}]) == 0
        assert count_played_weeks([]) == 0


class TestWeeklyScores:
    """Tests for extracting a team's valid weekly scores."""

    def test_skips_zero_and_missing_weeks(self, four_team_weeks):
        """Test that bye weeks and absent weeks are left out."""
        assert extract_weekly_scores(4, four_team_weeks) == [110.0]
        assert extract_weekly_scores(1, four_team_weeks) == [120.0, 95.0]
        assert extract_weekly_scores(99, four_team_weeks) == []

    def test_average_of_empty(self):
        """Test that the average of no scores is 0."""
        assert average([]) == 0.0
        assert average([100.0, 110.0]) == 105.0


class TestAllPlay:
    """Tests for the all-play record."""

    def test_record_counts(self, four_team_weeks):
        """Test wins/losses against every other valid score each week."""
        record = compute_all_play_record(1, four_team_weeks)
        # Week 1: 120 beats 100, 90, 110. Week 2: 95 loses to 105, 130 (team 4 idle)
        assert (record.wins, record.losses, record.ties) == (3, 2, 0)
        assert record.pct == pytest.approx(0.6)

    def test_ties_counted(self):
        """Test that equal scores count as all-play ties."""
        record = compute_all_play_record(1, [week((1, 1, 100.0), (2, 1, 100.0), (3, 2, 80.0))])
        assert (record.wins, record.losses, record.ties) == (1, 0, 1)

    def test_no_valid_weeks(self):
        """Test that a team with no valid weeks gets an empty record."""
        record = compute_all_play_record(1, [week((1, 1, 0.0), (2, 1, 100.0))])
        assert (record.wins, record.losses, record.ties, record.pct) == (0, 0, 0, 0.0)

    def test_game_count_matches_opponents(self, four_team_weeks):
        """Test that each valid week adds one game per other valid team."""
        for roster_id in (1, 2, 3, 4):
            record = compute_all_play_record(roster_id, four_team_weeks)
            expected = 0
            for w in four_team_weeks:
                entry = w.get(roster_id)
                if entry is None or entry.points <= 0:
                    continue
                expected += sum(1 for rid, e in w.items() if rid != roster_id and e.points > 0)
            assert record.wins + record.losses + record.ties == expected

    def test_expected_win_pct_and_luck(self, four_team_weeks):
        """Test that xWin% stays in [0, 1] and luck in [-1, 1]."""
        for roster_id in (1, 2, 3, 4):
            x_win = compute_x_win_pct(compute_all_play_record(roster_id, four_team_weeks))
            assert 0.0 <= x_win <= 1.0
            for actual in (0.0, 0.5, 1.0):
                assert -1.0 <= compute_luck_index(actual, x_win) <= 1.0

    def test_luck_sign(self):
        """Test that outperforming expectation is positive luck."""
        assert compute_luck_index(0.8, 0.5) == pytest.approx(0.3)
        assert compute_luck_index(0.2, 0.5) == pytest.approx(-0.3)


class TestStrengthOfSchedule:
    """Tests for schedule strength and its league ranking."""

    def test_average_opponent_score(self, four_team_weeks):
        """Test that only the paired opponent's score counts."""
        assert compute_strength_of_schedule(1, four_team_weeks) == pytest.approx((100.0 + 105.0) / 2)
        assert compute_strength_of_schedule(4, four_team_weeks) == pytest.approx(90.0)

    def test_no_opponents(self):
        """Test that a team with no paired opponent gets 0."""
        assert compute_strength_of_schedule(1, [week((1, None, 100.0), (2, None, 90.0))]) == 0.0
        assert compute_strength_of_schedule(1, []) == 0.0

    def test_opponent_with_zero_ignored(self):
        """Test that an opponent without a valid score is not counted."""
        assert compute_strength_of_schedule(1, [week((1, 1, 100.0), (2, 1, 0.0))]) == 0.0

    def test_rank_hardest_first(self, four_team_weeks):
        """Test that rank 1 faced the highest average opponent score."""
        sos = compute_all_sos(four_team_weeks, [1, 2, 3, 4])
        ranks = sorted(sos, key=lambda rid: sos[rid].rank)
        averages = [sos[rid].avg_opponent_ppg for rid in ranks]
        assert averages == sorted(averages, reverse=True)
        assert sorted(s.rank for s in sos.values()) == [1, 2, 3, 4]

    def test_equal_schedules_ordered_by_roster_id(self):
        """Test that tied schedule strength is broken by roster id."""
        weeks = [week((3, 1, 100.0), (1, 1, 100.0))]
        sos = compute_all_sos(weeks, [3, 1])
        assert sos[1].rank == 1
        assert sos[3].rank == 2


class TestEfficiency:
    """Tests for lineup efficiency."""

    def test_ratio(self):
        """Test actual over potential points."""
        assert compute_efficiency(900.0, 1000.0) == pytest.approx(0.9)

    def test_no_potential_points(self):
        """Test that missing potential points gives 0 instead of dividing by zero."""
        assert compute_efficiency(900.0, 0.0) == 0.0


class TestConsistency:
    """Tests for consistency metrics."""

    def test_constant_scores(self):
        """Test that identical scores are perfectly consistent."""
        metrics = compute_consistency([100.0, 100.0, 100.0])
        assert metrics.std_dev == 0.0
        assert metrics.cv == 0.0
        assert metrics.rating == 100.0

    def test_empty_scores(self):
        """Test that no scores is treated as no variance."""
        metrics = compute_consistency([])
        assert (metrics.std_dev, metrics.cv, metrics.rating) == (0.0, 0.0, 100.0)

    def test_population_std_dev(self):
        """Test std dev, CV and rating for a varied sequence."""
        metrics = compute_consistency([90.0, 110.0])
        assert metrics.std_dev == pytest.approx(10.0)
        assert metrics.cv == pytest.approx(10.0)
        assert metrics.rating == pytest.approx(50.0)

    def test_rating_clamped(self):
        """Test that very volatile scoring bottoms out at 0."""
        assert compute_consistency([10.0, 190.0]).rating == 0.0


class TestRecentForm:
    """Tests for recency-weighted form."""

    def test_weights_most_recent_highest(self):
        """Test that the newest week carries weight 0.5."""
        form = compute_recent_form([80.0, 90.0, 100.0], 90.0)
        assert form.avg == pytest.approx(93.0)
        assert form.trend == 'up'

    def test_only_last_three_weeks(self):
        """Test that older weeks fall out of the window."""
        form = compute_recent_form([10.0, 80.0, 90.0, 100.0], 90.0)
        assert form.avg == pytest.approx(93.0)

    def test_trend_down(self):
        """Test a drop of more than 3% is 'down'."""
        assert compute_recent_form([100.0, 90.0, 80.0], 90.0).trend == 'down'

    def test_trend_flat_within_threshold(self):
        """Test that a change within 3% is 'flat'."""
        assert compute_recent_form([100.0, 100.0, 100.0], 99.0).trend == 'flat'

    def test_short_history_rescaled(self):
        """Test that weights are rescaled when fewer weeks are available."""
        form = compute_recent_form([80.0, 100.0], 90.0)
        assert form.avg == pytest.approx(100.0 * 0.5 / 0.8 + 80.0 * 0.3 / 0.8)

    def test_window_size(self):
        """Test that a single-week window uses only the latest score."""
        assert compute_recent_form([80.0, 90.0, 100.0], 90.0, window_size=1).avg == pytest.approx(100.0)

    def test_empty(self):
        """Test that no scores gives a flat zero form."""
        form = compute_recent_form([], 0.0)
        assert (form.avg, form.trend) == (0.0, 'flat')


class TestMedianRecord:
    """Tests for the weekly median record."""

    def test_above_and_below(self, four_team_weeks):
        """Test comparisons against each week's median of valid scores."""
        # Week 1 median 105: 120 above. Week 2 median 105 (95, 105, 130): 95 below
        record = compute_median_record(1, four_team_weeks)
        assert (record.above, record.below) == (1, 1)

    def test_bye_week_not_counted(self, four_team_weeks):
        """Test that a week without a valid score is skipped."""
        record = compute_median_record(4, four_team_weeks)
        assert record.above + record.below == 1
