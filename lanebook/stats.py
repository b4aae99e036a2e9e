"""Player and team statistics aggregation."""

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .models import PlayerStats, TeamStats
from .schemas import GameRecord, Player, StatsConfig
from .scoring import game_metrics

logger = logging.getLogger('lanebook.stats')


def round_half_away(value: float, places: int = 1) -> float:
    """
    Round to ``places`` decimals, halves away from zero (2.25 -> 2.3, -2.25 -> -2.3).

    Goes through the shortest decimal repr so 2.675 is treated as written,
    not as its binary approximation.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Linear-interpolated percentile of an ascending sequence.

    Args:
        sorted_values: Values sorted ascending
        p: Fraction between 0 and 1 (0.2 for the 20th percentile)

    Returns:
        Interpolated value, or 0.0 for an empty sequence
    """
    if not sorted_values:
        return 0.0
    index = (len(sorted_values) - 1) * p
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])
    weight = index - lower
    return sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * weight


def played_at(game: GameRecord) -> datetime:
    """Submission time, falling back to midnight of the day played."""
    if game.submitted_at is not None:
        moment = game.submitted_at
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
        return moment
    return datetime.combine(game.date_played, time.min)


def season_games(games: Iterable[GameRecord], season: Optional[str] = None) -> list[GameRecord]:
    """Games from one season; every game when ``season`` is None."""
    if season is None:
        return list(games)
    return [game for game in games if game.season == season]


def sort_games(games: Iterable[GameRecord]) -> list[GameRecord]:
    """Oldest first. Games with equal timestamps keep their input order."""
    return sorted(games, key=played_at)


def _typical_range(scores: list[int], config: StatsConfig) -> tuple[float, float]:
    window = sorted(scores[-config.typical_window:])
    if len(window) >= config.typical_min_games:
        return (
            percentile(window, config.typical_low_percentile),
            percentile(window, config.typical_high_percentile),
        )
    # Too few games for percentiles to mean anything
    return float(window[0]), float(window[-1])


def _fold_games(games: list[GameRecord], config: StatsConfig) -> dict:
    """Reduce a non-empty list of games to the shared Stats fields."""
    ordered = sort_games(games)
    count = len(ordered)
    scores = [game.total_score for game in ordered]
    metrics = [game_metrics(game) for game in ordered]

    typical_low, typical_high = _typical_range(scores, config)
    typical_low = round_half_away(typical_low)
    typical_high = round_half_away(typical_high)

    recent = scores[-config.recent_window:]
    above = sum(1 for score in scores if score > config.score_threshold)

    return {
        'games_played': count,
        'average_score': round_half_away(sum(scores) / count),
        'strike_percentage': round_half_away(sum(m.strike_percentage for m in metrics) / count),
        'spare_percentage': round_half_away(sum(m.spare_percentage for m in metrics) / count),
        'floor': min(scores),
        'ceiling': max(scores),
        'typical_low': typical_low,
        'typical_high': typical_high,
        'consistency_range': round_half_away(typical_high - typical_low),
        'recent_average': round_half_away(sum(recent) / len(recent)),
        'average_tenth_frame': round_half_away(sum(m.tenth_frame_pins for m in metrics) / count),
        'games_above_200': above,
        'games_above_200_percentage': round_half_away(above / count * 100),
    }


def calculate_player_stats(
    games: Iterable[GameRecord],
    player_id: Optional[str] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> PlayerStats:
    """
    Calculate a player's statistics.

    Args:
        games: The player's games, or all games when ``player_id`` is given
        player_id: Optional id to filter ``games`` by
        config: Policy thresholds (default: built-in constants)
        season: Only count games from this season (default: all)

    Returns:
        PlayerStats, all zero when the player has no games
    """
    config = config or StatsConfig()
    player_games = season_games(games, season)
    if player_id is not None:
        player_games = [game for game in player_games if game.player_id == player_id]

    if not player_games:
        return PlayerStats(player_id=player_id)

    logger.debug(f'Aggregating {len(player_games)} games for player {player_id}')
    return PlayerStats(player_id=player_id, **_fold_games(player_games, config))


def calculate_all_player_stats(
    games: Iterable[GameRecord],
    players: Iterable[Player],
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> dict[str, PlayerStats]:
    """Statistics for every player, keyed by player id in roster order."""
    games = season_games(games, season)
    return {
        player.id: calculate_player_stats(games, player_id=player.id, config=config)
        for player in players
    }


def calculate_team_stats(
    games: Iterable[GameRecord],
    players: Optional[Iterable[Player]] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> TeamStats:
    """
    Calculate team-wide statistics over current roster games.

    Games with no player id (player removed) are excluded so the numbers
    reflect current team performance. When ``players`` is given, games of
    deactivated players are excluded too.
    """
    config = config or StatsConfig()
    active_ids = None
    if players is not None:
        active_ids = {player.id for player in players if player.is_active}

    games = season_games(games, season)
    active_games = [
        game
        for game in games
        if game.player_id is not None and (active_ids is None or game.player_id in active_ids)
    ]
    logger.debug(f'Team stats: {len(active_games)} of {len(games)} games from active players')

    if not active_games:
        return TeamStats()

    player_count = len({game.player_id for game in active_games})
    return TeamStats(player_count=player_count, **_fold_games(active_games, config))
