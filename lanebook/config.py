"""Statistics configuration management."""

from functools import lru_cache
from pathlib import Path

from .schemas import StatsConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'stats_config.json'


@lru_cache(maxsize=1)
def get_config() -> StatsConfig:
    """
    Load statistics configuration from data/stats_config.json.

    Configuration is cached after first load. The computing functions never
    call this themselves; pass the result as their ``config`` argument.

    Raises:
        FileNotFoundError: If stats_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        config = get_config()
        stats = calculate_team_stats(games, config=config)
        balances, settlements = settle_ledger(expenses, config=config)
        setup_logging(config=config)
    """
    return load_json(CONFIG_PATH, schema=StatsConfig)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
