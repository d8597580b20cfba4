from .models import (
    TeamSeason,
    MatchupEntry,
    PowerMetrics,
    PowerRanking,
    BracketMatchup,
    BracketResult,
    DraftPickOwnership,
    TeamPickCapital,
)
from .analytics import (
    build_week_snapshot,
    extract_weekly_scores,
    count_played_weeks,
    compute_all_play_record,
    compute_x_win_pct,
    compute_luck_index,
    compute_strength_of_schedule,
    compute_all_sos,
    compute_efficiency,
    compute_consistency,
    compute_recent_form,
    compute_median_record,
)
from .power_rankings import (
    TierCutoffs,
    normalize,
    compute_power_score,
    compute_league_power_rankings,
    compute_league_insights,
    apply_previous_ranks,
)
from .brackets import (
    parse_bracket,
    resolve_slot,
    resolve_bracket_placements,
    get_champion_roster_id,
    get_runner_up_roster_id,
    build_bracket_rounds,
    resolve_brackets,
)
from .draft_picks import (
    resolve_draft_pick_ownership,
    compute_pick_capital,
    future_seasons,
)
from .standings import build_team_seasons, build_standings
from .records import (
    pair_matchups,
    compute_league_records,
    compute_head_to_head,
    rebuild_team_records,
    compute_champion_history,
    compute_all_time_standings,
    compute_season_awards,
)
from .data_fetcher import SleeperFetcher, PlayerDirectoryCache
from .snapshot import LeagueSnapshot, load_snapshot, fetch_snapshot, load_history, fetch_history

__all__ = [
    # Models
    'TeamSeason',
    'MatchupEntry',
    'PowerMetrics',
    'PowerRanking',
    'BracketMatchup',
    'BracketResult',
    'DraftPickOwnership',
    'TeamPickCapital',
    # Per-team metrics
    'build_week_snapshot',
    'extract_weekly_scores',
    'count_played_weeks',
    'compute_all_play_record',
    'compute_x_win_pct',
    'compute_luck_index',
    'compute_strength_of_schedule',
    'compute_all_sos',
    'compute_efficiency',
    'compute_consistency',
    'compute_recent_form',
    'compute_median_record',
    # Power rankings
    'TierCutoffs',
    'normalize',
    'compute_power_score',
    'compute_league_power_rankings',
    'compute_league_insights',
    'apply_previous_ranks',
    # Brackets
    'parse_bracket',
    'resolve_slot',
    'resolve_bracket_placements',
    'get_champion_roster_id',
    'get_runner_up_roster_id',
    'build_bracket_rounds',
    'resolve_brackets',
    # Draft picks
    'resolve_draft_pick_ownership',
    'compute_pick_capital',
    'future_seasons',
    # Standings and records
    'build_team_seasons',
    'build_standings',
    'pair_matchups',
    'compute_league_records',
    'compute_head_to_head',
    'rebuild_team_records',
    'compute_champion_history',
    'compute_all_time_standings',
    'compute_season_awards',
    # Data fetching
    'SleeperFetcher',
    'PlayerDirectoryCache',
    'LeagueSnapshot',
    'load_snapshot',
    'fetch_snapshot',
    'load_history',
    'fetch_history',
]
