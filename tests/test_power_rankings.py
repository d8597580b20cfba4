"""Unit tests for the composite power score and tiering."""

import pytest

from legends.models import MatchupEntry, TeamSeason
from legends.power_rankings import (
    TierCutoffs,
    apply_previous_ranks,
    compute_league_insights,
    compute_league_power_rankings,
    compute_league_ranges,
    compute_power_score,
    normalize,
)


def make_team(roster_id, wins=0, losses=0, points_for=0.0, potential_points=0.0):
    return TeamSeason(
        roster_id=roster_id,
        owner_id=f'user{roster_id}',
        display_name=f'Manager {roster_id}',
        team_name=f'Team {roster_id}',
        wins=wins,
        losses=losses,
        points_for=points_for,
        potential_points=potential_points,
    )


@pytest.fixture
def league():
    """Ten teams, three weeks. Higher roster ids score more."""
    teams = [
        make_team(rid, wins=rid % 4, losses=3 - rid % 4, points_for=300.0 + rid * 10, potential_points=400.0)
        for rid in range(1, 11)
    ]
    weeks = []
    for w in range(3):
        weeks.append({
            rid: MatchupEntry(matchup_id=(rid + 1) // 2, points=80.0 + rid * 5 + w * (rid % 3))
            for rid in range(1, 11)
        })
    return teams, weeks


class TestNormalize:
    """Tests for min-max normalization."""

    def test_scales_to_0_100(self):
        """Test that the range maps to 0..100."""
        assert normalize(10.0, 10.0, 20.0) == 0.0
        assert normalize(15.0, 10.0, 20.0) == 50.0
        assert normalize(20.0, 10.0, 20.0) == 100.0

    def test_empty_range_is_midpoint(self):
        """Test that an empty range gives 50 instead of dividing by zero."""
        assert normalize(7.0, 7.0, 7.0) == 50.0


class TestPowerScore:
    """Tests for the composite power score."""

    def test_identical_avg_pf_component_is_50(self):
        """Test that a league with equal scoring gets 50 for avg PF everywhere."""
        teams = [make_team(rid) for rid in (1, 2, 3, 4)]
        weeks = [{rid: MatchupEntry(matchup_id=(rid + 1) // 2, points=100.0) for rid in (1, 2, 3, 4)}]
        rankings = compute_league_power_rankings(teams, weeks)
        assert all(r.components['avg_pf'] == 50.0 for r in rankings)

    def test_all_equal_league_scores_50(self):
        """Test that identical teams all score exactly 50."""
        teams = [make_team(rid) for rid in (1, 2)]
        weeks = [{1: MatchupEntry(1, 100.0), 2: MatchupEntry(1, 100.0)}]
        rankings = compute_league_power_rankings(teams, weeks)
        assert [r.power_score for r in rankings] == [pytest.approx(50.0), pytest.approx(50.0)]

    def test_score_matches_weighted_components(self, league):
        """Test that the power score is the weighted sum of its components."""
        teams, weeks = league
        rankings = compute_league_power_rankings(teams, weeks)
        ranges = compute_league_ranges([r.metrics for r in rankings])
        for r in rankings:
            assert compute_power_score(r.metrics, ranges) == pytest.approx(r.power_score)
            assert 0.0 <= r.power_score <= 100.0

    def test_ranges_empty_league(self):
        """Test that no teams gives zero ranges."""
        ranges = compute_league_ranges([])
        assert ranges['avg_pf'] == (0.0, 0.0)


class TestRankings:
    """Tests for league-wide ranking."""

    def test_ranks_are_dense_and_sorted(self, league):
        """Test ranks 1..N ordered by descending power score."""
        teams, weeks = league
        rankings = compute_league_power_rankings(teams, weeks)
        assert [r.rank for r in rankings] == list(range(1, 11))
        scores = [r.power_score for r in rankings]
        assert scores == sorted(scores, reverse=True)

    def test_default_tiers_ten_teams(self, league):
        """Test 3 contenders, 4 bubble teams and 3 rebuilding."""
        teams, weeks = league
        tiers = [r.tier for r in compute_league_power_rankings(teams, weeks)]
        assert tiers == ['contender'] * 3 + ['bubble'] * 4 + ['rebuilding'] * 3

    def test_idempotent(self, league):
        """Test that running twice on the same input gives identical results."""
        teams, weeks = league
        first = compute_league_power_rankings(teams, weeks)
        second = compute_league_power_rankings(teams, weeks)
        assert [(r.roster_id, r.rank, r.power_score) for r in first] == [
            (r.roster_id, r.rank, r.power_score) for r in second
        ]

    def test_record_and_weekly_scores(self, league):
        """Test that each ranking carries its record and scores."""
        teams, weeks = league
        ranking = next(r for r in compute_league_power_rankings(teams, weeks) if r.roster_id == 5)
        assert ranking.record == {'wins': 1, 'losses': 2, 'ties': 0}
        assert len(ranking.weekly_scores) == 3
        assert ranking.metrics.efficiency == pytest.approx(350.0 / 400.0)

    def test_no_weeks(self):
        """Test that a league with no games still ranks every team."""
        rankings = compute_league_power_rankings([make_team(1), make_team(2)], [])
        assert [r.rank for r in rankings] == [1, 2]
        assert all(r.metrics.avg_pf == 0.0 for r in rankings)

    def test_equal_scores_keep_input_order(self):
        """Test that teams with equal power scores keep their input order."""
        rankings = compute_league_power_rankings([make_team(3), make_team(1), make_team(2)], [])
        assert [r.roster_id for r in rankings] == [3, 1, 2]
        assert [r.rank for r in rankings] == [1, 2, 3]

    def test_identical_weeks_keep_input_order(self):
        """Test input order survives when every team posts the same scores."""
        teams = [make_team(rid, wins=1, losses=1, points_for=200.0, potential_points=250.0) for rid in (3, 1, 4, 2)]
        weeks = [
            {3: MatchupEntry(1, 100.0), 1: MatchupEntry(1, 100.0), 4: MatchupEntry(2, 100.0), 2: MatchupEntry(2, 100.0)},
            {3: MatchupEntry(1, 100.0), 4: MatchupEntry(1, 100.0), 1: MatchupEntry(2, 100.0), 2: MatchupEntry(2, 100.0)},
        ]
        rankings = compute_league_power_rankings(teams, weeks)
        assert len({r.power_score for r in rankings}) == 1
        assert [r.roster_id for r in rankings] == [3, 1, 4, 2]


class TestTierCutoffs:
    """Tests for tier boundaries."""

    def test_fixed_cutoffs(self):
        """Test the default 3 / 4 boundaries."""
        tiers = TierCutoffs()
        assert [tiers.tier_for(rank) for rank in (1, 3, 4, 7, 8)] == [
            'contender', 'contender', 'bubble', 'bubble', 'rebuilding'
        ]

    def test_scaled_ten_teams_matches_fixed(self):
        """Test that scaling preserves the ten-team behaviour."""
        assert TierCutoffs.scaled(10) == TierCutoffs(contender=3, bubble=4)

    def test_scaled_larger_league(self):
        """Test that a twelve-team league gets proportionally more contenders."""
        assert TierCutoffs.scaled(12) == TierCutoffs(contender=4, bubble=4)


class TestMovementAndInsights:
    """Tests for week-over-week movement and insights."""

    def test_previous_ranks(self, league):
        """Test that movement is previous rank minus current rank."""
        teams, weeks = league
        current = compute_league_power_rankings(teams, weeks)
        previous = compute_league_power_rankings(teams, weeks[:1])
        apply_previous_ranks(current, previous)
        prev_map = {r.roster_id: r.rank for r in previous}
        for r in current:
            assert r.previous_rank == prev_map[r.roster_id]
            assert r.movement == prev_map[r.roster_id] - r.rank

    def test_no_previous_rank(self, league):
        """Test that a team without a previous ranking shows no movement."""
        teams, weeks = league
        current = compute_league_power_rankings(teams, weeks)
        apply_previous_ranks(current, [])
        assert all(r.previous_rank is None and r.movement == 0 for r in current)

    def test_insights(self, league):
        """Test that insights pick the extremes."""
        teams, weeks = league
        rankings = compute_league_power_rankings(teams, weeks)
        insights = compute_league_insights(rankings)
        assert insights['hardest_schedule'].metrics.sos.rank == 1
        assert insights['easiest_schedule'].metrics.sos.rank == 10
        assert insights['luckiest'].metrics.luck_index == max(r.metrics.luck_index for r in rankings)
        assert insights['most_volatile'].metrics.consistency.rating == min(
            r.metrics.consistency.rating for r in rankings
        )

    def test_insights_empty(self):
        """Test that an empty league has no insights."""
        insights = compute_league_insights([])
        assert set(insights) == {
            'luckiest', 'unluckiest', 'most_consistent', 'most_volatile', 'hardest_schedule', 'easiest_schedule'
        }
        assert all(v is None for v in insights.values())
