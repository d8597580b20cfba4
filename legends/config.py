"""Dashboard configuration management."""

from functools import lru_cache
from pathlib import Path

from .power_rankings import TierCutoffs
from .schemas import LeagueConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'league_config.json'


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> LeagueConfig:
    """
    Load and validate a league configuration file (uncached).

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file has an invalid structure
    """
    return load_json(path, schema=LeagueConfig)


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load.

    Returns:
        LeagueConfig object with validated settings

    Example:
        from legends.config import get_config
        config = get_config()
        print(f'League: {config.league_id}')
    """
    return load_config(DEFAULT_CONFIG_PATH)


def tier_cutoffs_for(config: LeagueConfig, num_teams: int) -> TierCutoffs:
    """
    Build power ranking tier cutoffs from config.

    With ``scale_with_league_size`` the cutoffs are fractions of the league
    size; otherwise the fixed counts are used.
    """
    tiers = config.tiers
    if tiers.scale_with_league_size:
        return TierCutoffs.scaled(num_teams, tiers.contender_fraction, tiers.bubble_fraction)
    return TierCutoffs(contender=tiers.contender_count, bubble=tiers.bubble_count)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime.
    """
    get_config.cache_clear()
