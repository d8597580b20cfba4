"""Data models for the league analytics engine."""

from dataclasses import dataclass, field
from typing import Literal, Optional

from .constants import PICK_ACQUIRED, PICK_OWNS_OWN, PICK_TRADED_AWAY

Trend = Literal['up', 'down', 'flat']
Tier = Literal['contender', 'bubble', 'rebuilding']


@dataclass(frozen=True)
class TeamSeason:
    """One team's season snapshot (roster joined with its manager)."""
    roster_id: int
    owner_id: str
    display_name: str
    team_name: str
    avatar: Optional[str] = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    potential_points: float = 0.0
    streak: str = ''

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def actual_win_pct(self) -> float:
        """Wins over games played; ties count as non-wins."""
        return self.wins / self.games if self.games else 0.0


@dataclass(frozen=True)
class MatchupEntry:
    """A team's matchup group and score for one week."""
    matchup_id: Optional[int]
    points: float


# roster_id -> MatchupEntry for a single week
WeekSnapshot = dict[int, MatchupEntry]


@dataclass
class AllPlayRecord:
    wins: int = 0
    losses: int = 0
    ties: int = 0
    pct: float = 0.0


@dataclass
class StrengthOfSchedule:
    avg_opponent_ppg: float = 0.0
    rank: int = 0  # 1 = hardest schedule


@dataclass
class ConsistencyMetrics:
    std_dev: float = 0.0
    cv: float = 0.0  # lower = more consistent
    rating: float = 100.0  # 0-100, higher = more consistent


@dataclass
class RecentForm:
    avg: float = 0.0
    trend: Trend = 'flat'


@dataclass
class MedianRecord:
    above: int = 0
    below: int = 0


@dataclass
class PowerMetrics:
    """Per-team metric bundle feeding the composite power score."""
    avg_pf: float
    x_win_pct: float
    luck_index: float
    actual_win_pct: float
    sos: StrengthOfSchedule
    efficiency: float
    consistency: ConsistencyMetrics
    recent_form: RecentForm


@dataclass
class PowerRanking:
    """A ranked team with its metrics and normalized score components."""
    roster_id: int
    team_name: str
    display_name: str
    avatar: Optional[str]
    rank: int
    power_score: float
    tier: Tier
    metrics: PowerMetrics
    record: dict[str, int]
    all_play_record: AllPlayRecord
    weekly_scores: list[float] = field(default_factory=list)
    median_record: MedianRecord = field(default_factory=MedianRecord)
    components: dict[str, float] = field(default_factory=dict)
    previous_rank: Optional[int] = None

    @property
    def movement(self) -> int:
        """Places gained since the previous ranking (positive = moved up)."""
        if self.previous_rank is None:
            return 0
        return self.previous_rank - self.rank


@dataclass(frozen=True)
class BracketSlotRef:
    """Reference to the winner ('w') or loser ('l') of another matchup."""
    kind: Literal['w', 'l']
    matchup_id: int


# A bracket slot is a roster id, a reference, or empty (not yet seeded)
BracketSlot = int | BracketSlotRef | None


@dataclass(frozen=True)
class BracketMatchup:
    round: int
    matchup_id: int
    team1: BracketSlot = None
    team2: BracketSlot = None
    winner: Optional[int] = None
    loser: Optional[int] = None
    placement: Optional[int] = None


@dataclass
class BracketPlacement:
    roster_id: int
    placement: int  # 1 = champion, 2 = runner-up, ...


@dataclass
class BracketMatchupDisplay:
    matchup_id: int
    team1_id: Optional[int]
    team2_id: Optional[int]
    winner_id: Optional[int]
    loser_id: Optional[int]
    placement: Optional[int] = None


@dataclass
class BracketRound:
    round: int
    label: str
    matchups: list[BracketMatchupDisplay] = field(default_factory=list)


@dataclass
class BracketResult:
    """Resolved winners and consolation brackets for one season."""
    winners_rounds: list[BracketRound]
    losers_rounds: list[BracketRound]
    placements: list[BracketPlacement]
    champion_id: Optional[int]
    runner_up_id: Optional[int]


@dataclass(frozen=True)
class DraftPickOwnership:
    """
    Ownership of one future pick.

    The pick is either retained by its original team or moved to another
    owner. Which label a moved pick gets depends on whose page it is shown
    on, so that choice is left to ``status_for``.
    """
    season: str
    round: int
    original_roster_id: int
    current_owner_id: int

    @property
    def moved(self) -> bool:
        return self.current_owner_id != self.original_roster_id

    @property
    def status(self) -> str:
        """Status from the original team's point of view."""
        return PICK_TRADED_AWAY if self.moved else PICK_OWNS_OWN

    def status_for(self, roster_id: int) -> Optional[str]:
        """Status from ``roster_id``'s point of view, or None if unrelated."""
        if not self.moved:
            return PICK_OWNS_OWN if roster_id == self.original_roster_id else None
        if roster_id == self.current_owner_id:
            return PICK_ACQUIRED
        if roster_id == self.original_roster_id:
            return PICK_TRADED_AWAY
        return None


@dataclass
class TeamPickCapital:
    roster_id: int
    total_owned: int
    total_traded_away: int
    total_acquired: int
    owns_own_first: bool
    picks: list[DraftPickOwnership] = field(default_factory=list)


@dataclass
class StandingsEntry:
    team: TeamSeason
    rank: int
    placement: Optional[int] = None  # final bracket placement, when decided


@dataclass(frozen=True)
class MatchupPair:
    """Both sides of one regular-season game."""
    season: str
    week: int
    team1: TeamSeason
    team1_score: float
    team2: TeamSeason
    team2_score: float

    @property
    def margin(self) -> float:
        return abs(self.team1_score - self.team2_score)


@dataclass
class LeagueRecord:
    label: str
    value: str
    team: str
    season: str
    numeric_value: float
    week: Optional[int] = None


@dataclass
class HeadToHeadGame:
    season: str
    week: int
    score1: float
    score2: float
    winner: str  # owner id or 'Tie'


@dataclass
class HeadToHeadRecord:
    owner1_id: str
    owner2_id: str
    owner1_wins: int = 0
    owner2_wins: int = 0
    ties: int = 0
    owner1_points: float = 0.0
    owner2_points: float = 0.0
    games: list[HeadToHeadGame] = field(default_factory=list)

    @property
    def total_games(self) -> int:
        return self.owner1_wins + self.owner2_wins + self.ties

    @property
    def owner1_avg(self) -> float:
        return self.owner1_points / self.total_games if self.total_games else 0.0

    @property
    def owner2_avg(self) -> float:
        return self.owner2_points / self.total_games if self.total_games else 0.0


@dataclass
class ChampionEntry:
    """Champion and runner-up of one completed season."""
    season: str
    league_id: str
    champion_id: int
    champion_name: str
    champion_avatar: Optional[str]
    champion_record: str
    runner_up_id: Optional[int] = None
    runner_up_name: Optional[str] = None
    runner_up_avatar: Optional[str] = None


@dataclass
class SeasonResult:
    season: str
    wins: int
    losses: int
    points_for: float
    points_against: float
    finish: int


@dataclass
class AllTimeStanding:
    """A manager's totals across every season they played."""
    owner_id: str
    display_name: str
    avatar: Optional[str] = None
    seasons_played: int = 0
    total_wins: int = 0
    total_losses: int = 0
    total_ties: int = 0
    total_points_for: float = 0.0
    total_points_against: float = 0.0
    championships: int = 0
    playoff_appearances: int = 0
    best_finish: Optional[int] = None
    season_results: list[SeasonResult] = field(default_factory=list)

    @property
    def win_pct(self) -> float:
        games = self.total_wins + self.total_losses + self.total_ties
        return self.total_wins / games if games else 0.0


@dataclass
class SeasonAward:
    category: str
    team: str
    value: str
    week: Optional[int] = None
