"""Pydantic schemas for Sleeper payloads and the league config file."""

from pydantic import BaseModel, Field, field_validator, model_validator


class SleeperUser(BaseModel):
    """League member as returned by /league/{id}/users."""

    user_id: str
    username: str | None = None
    display_name: str | None = None
    avatar: str | None = None
    metadata: dict | None = None

    class Config:
        extra = 'allow'


class RosterSettings(BaseModel):
    """Season totals stored on a roster."""

    wins: int = 0
    losses: int = 0
    ties: int = 0
    fpts: float = 0
    fpts_decimal: float | None = None
    fpts_against: float | None = None
    fpts_against_decimal: float | None = None
    ppts: float | None = None
    ppts_decimal: float | None = None

    class Config:
        extra = 'allow'


class SleeperRoster(BaseModel):
    """Roster as returned by /league/{id}/rosters."""

    roster_id: int
    owner_id: str | None = None
    players: list[str] | None = None
    settings: RosterSettings = Field(default_factory=RosterSettings)
    metadata: dict | None = None

    class Config:
        extra = 'allow'


class SleeperMatchup(BaseModel):
    """One team's entry in /league/{id}/matchups/{week}."""

    roster_id: int
    matchup_id: int | None = None
    points: float | None = 0.0

    @field_validator('points')
    @classmethod
    def default_missing_points(cls, v):
        """Unplayed weeks come back with null points."""
        return 0.0 if v is None else v

    class Config:
        extra = 'allow'


class SleeperTradedPick(BaseModel):
    """Entry in /league/{id}/traded_picks."""

    season: str
    round: int = Field(..., ge=1)
    roster_id: int
    owner_id: int
    previous_owner_id: int | None = None

    @field_validator('season', mode='before')
    @classmethod
    def season_as_string(cls, v):
        """Sleeper sends seasons as strings, older exports as ints."""
        return str(v)

    class Config:
        extra = 'allow'


class BracketRef(BaseModel):
    """Forward reference to the winner (w) or loser (l) of another matchup."""

    w: int | None = None
    l: int | None = None  # noqa: E741

    class Config:
        extra = 'allow'


class SleeperBracketMatchup(BaseModel):
    """Entry in /league/{id}/winners_bracket or losers_bracket."""

    r: int = Field(..., ge=1)
    m: int
    t1: int | BracketRef | None = None
    t2: int | BracketRef | None = None
    w: int | None = None
    l: int | None = None  # noqa: E741
    p: int | None = None
    t1_from: BracketRef | None = None
    t2_from: BracketRef | None = None

    class Config:
        extra = 'allow'


class LeagueSettings(BaseModel):
    """Subset of league settings the dashboard reads."""

    num_teams: int | None = None
    playoff_teams: int | None = None
    playoff_week_start: int | None = None
    draft_rounds: int | None = None

    class Config:
        extra = 'allow'


class SleeperLeague(BaseModel):
    """League as returned by /league/{id}."""

    league_id: str
    name: str = ''
    status: str = 'in_season'
    season: str
    previous_league_id: str | None = None
    settings: LeagueSettings = Field(default_factory=LeagueSettings)

    @field_validator('season', mode='before')
    @classmethod
    def season_as_string(cls, v):
        return str(v)

    class Config:
        extra = 'allow'


class TierSettings(BaseModel):
    """Power ranking tier boundaries."""

    scale_with_league_size: bool = False
    contender_count: int = Field(3, ge=0)
    bubble_count: int = Field(4, ge=0)
    contender_fraction: float = Field(0.3, ge=0, le=1)
    bubble_fraction: float = Field(0.7, ge=0, le=1)

    @model_validator(mode='after')
    def check_fraction_order(self):
        """Bubble cutoff must not sit above the contender cutoff."""
        if self.bubble_fraction < self.contender_fraction:
            raise ValueError(
                f'bubble_fraction ({self.bubble_fraction}) must be >= '
                f'contender_fraction ({self.contender_fraction})'
            )
        return self

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """Dashboard configuration settings."""

    league_id: str = Field(..., min_length=1)
    playoff_teams: int = Field(6, ge=2, le=16)
    draft_rounds: int = Field(4, ge=1, le=10)
    future_seasons: int = Field(3, ge=1, le=5)
    recent_form_window: int = Field(3, ge=1, le=3)
    tiers: TierSettings = Field(default_factory=TierSettings)

    class Config:
        extra = 'forbid'
