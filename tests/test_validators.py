"""Unit tests for validation functions."""

from legends.models import (
    AllPlayRecord,
    BracketMatchup,
    BracketSlotRef,
    ConsistencyMetrics,
    MatchupEntry,
    PowerMetrics,
    PowerRanking,
    RecentForm,
    StrengthOfSchedule,
)
from legends.schemas import SleeperTradedPick
from legends.validators import (
    validate_bracket,
    validate_rankings,
    validate_traded_picks,
    validate_week_snapshot,
)


def make_ranking(roster_id, rank, x_win_pct=0.5, luck_index=0.0, rating=80.0):
    metrics = PowerMetrics(
        avg_pf=100.0,
        x_win_pct=x_win_pct,
        luck_index=luck_index,
        actual_win_pct=0.5,
        sos=StrengthOfSchedule(avg_opponent_ppg=100.0, rank=rank),
        efficiency=0.9,
        consistency=ConsistencyMetrics(std_dev=10.0, cv=10.0, rating=rating),
        recent_form=RecentForm(avg=100.0, trend='flat'),
    )
    return PowerRanking(
        roster_id=roster_id,
        team_name=f'Team {roster_id}',
        display_name=f'Manager {roster_id}',
        avatar=None,
        rank=rank,
        power_score=50.0,
        tier='bubble',
        metrics=metrics,
        record={'wins': 1, 'losses': 1, 'ties': 0},
        all_play_record=AllPlayRecord(),
    )


class TestWeekValidation:
    """Tests for week snapshot validation."""

    def test_valid_week(self):
        """Test that a normal week passes."""
        week = {1: MatchupEntry(1, 100.0), 2: MatchupEntry(1, 90.0), 3: MatchupEntry(None, 0.0)}
        assert validate_week_snapshot(week, 1) == []

    def test_oversized_matchup(self):
        """Test a matchup group with three teams."""
        week = {1: MatchupEntry(1, 100.0), 2: MatchupEntry(1, 90.0), 3: MatchupEntry(1, 80.0)}
        warnings = validate_week_snapshot(week, 4)
        assert warnings == ['Week 4: matchup 1 has 3 teams (max 2)']

    def test_negative_score(self):
        """Test that a negative score is flagged."""
        warnings = validate_week_snapshot({1: MatchupEntry(1, -5.0)}, 2)
        assert len(warnings) == 1
        assert 'roster 1 has negative score -5.00' in warnings[0]


class TestBracketValidation:
    """Tests for bracket validation."""

    def test_valid_bracket(self):
        """Test that a consistent bracket passes."""
        bracket = [
            BracketMatchup(round=1, matchup_id=1, team1=1, team2=2, winner=1, loser=2),
            BracketMatchup(round=2, matchup_id=2, team1=BracketSlotRef('w', 1), team2=3, winner=3, loser=1),
        ]
        assert validate_bracket(bracket) == []

    def test_duplicate_ids(self):
        """Test that a repeated matchup id is flagged."""
        bracket = [
            BracketMatchup(round=1, matchup_id=1, team1=1, team2=2),
            BracketMatchup(round=1, matchup_id=1, team1=3, team2=4),
        ]
        assert validate_bracket(bracket, 'losers') == ['losers bracket: matchup id 1 appears 2 times']

    def test_unknown_reference(self):
        """Test a slot pointing at a missing matchup."""
        bracket = [BracketMatchup(round=2, matchup_id=3, team1=BracketSlotRef('w', 9), team2=1)]
        warnings = validate_bracket(bracket)
        assert warnings == ['winners bracket: matchup 3 references unknown matchup 9']

    def test_winner_not_in_matchup(self):
        """Test a recorded winner who was not one of the two teams."""
        bracket = [BracketMatchup(round=1, matchup_id=1, team1=1, team2=2, winner=5, loser=2)]
        warnings = validate_bracket(bracket)
        assert warnings == ['winners bracket: matchup 1 winner 5 did not play in it']


class TestTradedPickValidation:
    """Tests for traded-pick ledger validation."""

    def test_valid_ledger(self):
        """Test that known rosters and unique picks pass."""
        ledger = [SleeperTradedPick(season='2026', round=1, roster_id=1, owner_id=2)]
        assert validate_traded_picks(ledger, [1, 2]) == []

    def test_unknown_rosters(self):
        """Test that unknown original team and owner are both flagged."""
        ledger = [SleeperTradedPick(season='2026', round=1, roster_id=7, owner_id=8)]
        warnings = validate_traded_picks(ledger, [1, 2])
        assert len(warnings) == 2
        assert 'unknown original roster 7' in warnings[0]
        assert 'unknown owner roster 8' in warnings[1]

    def test_duplicate_pick(self):
        """Test that a pick listed twice is flagged."""
        ledger = [
            SleeperTradedPick(season='2026', round=1, roster_id=1, owner_id=2),
            SleeperTradedPick(season='2026', round=1, roster_id=1, owner_id=2),
        ]
        warnings = validate_traded_picks(ledger, [1, 2])
        assert warnings == ['2026 round 1: pick of roster 1 listed twice']


class TestRankingValidation:
    """Tests for power ranking validation."""

    def test_valid_rankings(self):
        """Test that dense ranks and in-range metrics pass."""
        assert validate_rankings([make_ranking(1, 1), make_ranking(2, 2)]) == []

    def test_rank_gap(self):
        """Test that ranks with a gap are flagged."""
        warnings = validate_rankings([make_ranking(1, 1), make_ranking(2, 3)])
        assert warnings == ['Ranks are not 1..2: [1, 3]']

    def test_out_of_range_metrics(self):
        """Test out-of-range xWin%, luck and consistency."""
        warnings = validate_rankings([make_ranking(1, 1, x_win_pct=1.2, luck_index=-1.5, rating=120.0)])
        assert len(warnings) == 3
        assert 'xWin% out of range' in warnings[0]
        assert 'luck index out of range' in warnings[1]
        assert 'consistency rating out of range' in warnings[2]
