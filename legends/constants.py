"""Constants and weights for the league analytics engine."""

# Composite power score weights (sum to 1.0)
POWER_SCORE_WEIGHTS = {
    'avg_pf': 0.30,
    'x_win_pct': 0.20,
    'recent_form': 0.15,
    'efficiency': 0.15,
    'consistency': 0.10,
    'sos': 0.10,
}

# Normalized value used when every team shares the same metric value
NORMALIZED_MIDPOINT = 50.0

# Recent form: most recent week first
RECENT_FORM_WEIGHTS = (0.5, 0.3, 0.2)
RECENT_FORM_WINDOW = 3
TREND_THRESHOLD = 0.03

# Consistency rating = 100 - CONSISTENCY_CV_SCALE * CV, clamped to [0, 100]
CONSISTENCY_CV_SCALE = 5.0

# Tier cutoffs by rank (documented ten-team behaviour)
CONTENDER_COUNT = 3
BUBBLE_COUNT = 4
CONTENDER_FRACTION = 0.3
BUBBLE_FRACTION = 0.7

TIER_CONTENDER = 'contender'
TIER_BUBBLE = 'bubble'
TIER_REBUILDING = 'rebuilding'

# Bracket placement codes
WINNERS_PLACEMENT_CODES = {1: (1, 2), 3: (3, 4), 5: (5, 6)}
LOSERS_PLACEMENT_OFFSETS = {1: (1, 2), 3: (3, 4)}
DEFAULT_PLAYOFF_TEAMS = 6

# Round labels by distance from the last round
WINNERS_ROUND_LABELS = {0: 'Finals', 1: 'Semifinals', 2: 'Quarterfinals'}
LOSERS_ROUND_LABELS = {0: 'Finals'}

# Draft picks
DEFAULT_DRAFT_ROUNDS = 4
DEFAULT_FUTURE_SEASONS = 3

PICK_OWNS_OWN = 'owns_own'
PICK_ACQUIRED = 'acquired'
PICK_TRADED_AWAY = 'traded_away'

# Sleeper API
SLEEPER_BASE_URL = 'https://api.sleeper.app/v1'
PLAYER_CACHE_TTL_SECONDS = 24 * 60 * 60
