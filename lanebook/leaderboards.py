"""Leaderboards built from a snapshot of games."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import polars as pl

from .constants import UNKNOWN_PLAYER
from .schemas import GameRecord, Player, StatsConfig
from .scoring import tenth_frame_pins
from .stats import round_half_away, season_games

logger = logging.getLogger('lanebook.leaderboards')

GAMES_SCHEMA = {
    'order': pl.Int64,
    'player_id': pl.Utf8,
    'session_id': pl.Utf8,
    'date_played': pl.Date,
    'total_score': pl.Int64,
    'tenth_frame_pins': pl.Int64,
}


@dataclass
class RankedGame:
    """A single game with its player's display name."""
    game: GameRecord
    player_name: str


@dataclass
class SessionTotal:
    """Combined score of every game in one team session."""
    session_id: str
    date_played: Optional[date]
    total_sum: int
    player_ids: list[str] = field(default_factory=list)
    games: list[GameRecord] = field(default_factory=list)


@dataclass
class PlayerAverage:
    """A player's average for some per-game value."""
    player_id: str
    player_name: str
    average: float


def games_frame(games: Sequence[GameRecord]) -> pl.DataFrame:
    """
    Build a DataFrame with one row per game.

    ``order`` is the game's index in ``games`` so rows map back to records.
    """
    rows = [
        {
            'order': index,
            'player_id': game.player_id,
            'session_id': game.session_id,
            'date_played': game.date_played,
            'total_score': game.total_score,
            'tenth_frame_pins': tenth_frame_pins(game),
        }
        for index, game in enumerate(games)
    ]
    return pl.DataFrame(rows, schema=GAMES_SCHEMA)


def top_individual_games(
    games: Iterable[GameRecord],
    players: Iterable[Player],
    limit: Optional[int] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> list[RankedGame]:
    """
    Highest single games.

    Games whose player was removed are left out. Equal scores keep input order.
    """
    config = config or StatsConfig()
    if limit is None:
        limit = config.top_games_limit
    games = season_games(games, season)
    names = {player.id: player.name for player in players}

    top = (
        games_frame(games)
        .filter(pl.col('player_id').is_not_null())
        .sort('total_score', descending=True, maintain_order=True)
        .head(limit)
    )
    return [
        RankedGame(game=games[row['order']], player_name=names.get(row['player_id'], UNKNOWN_PLAYER))
        for row in top.iter_rows(named=True)
    ]


def top_team_sum_games(
    games: Iterable[GameRecord],
    limit: Optional[int] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> list[SessionTotal]:
    """
    Best team sessions by combined score.

    Games are grouped by ``session_id``; games without a session are not
    team games and are ignored. Games of removed players still count so
    historical team totals stay accurate.
    """
    config = config or StatsConfig()
    if limit is None:
        limit = config.top_sessions_limit
    games = season_games(games, season)

    sessions = (
        games_frame(games)
        .filter(pl.col('session_id').is_not_null())
        .group_by('session_id', maintain_order=True)
        .agg(
            pl.col('date_played').first(),
            pl.col('total_score').sum().alias('total_sum'),
            pl.col('player_id').drop_nulls().alias('player_ids'),
            pl.col('order').alias('orders'),
        )
        .sort('total_sum', descending=True, maintain_order=True)
        .head(limit)
    )
    logger.debug(f'Ranked {sessions.height} team sessions from {len(games)} games')

    return [
        SessionTotal(
            session_id=row['session_id'],
            date_played=row['date_played'],
            total_sum=row['total_sum'],
            player_ids=list(row['player_ids']),
            games=[games[order] for order in row['orders']],
        )
        for row in sessions.iter_rows(named=True)
    ]


def _top_player_averages(
    games: list[GameRecord],
    players: Iterable[Player],
    column: str,
    limit: int,
) -> list[PlayerAverage]:
    averages = (
        games_frame(games)
        .filter(pl.col('player_id').is_not_null())
        .group_by('player_id')
        .agg(pl.col(column).mean().alias('average'))
    )
    by_player = dict(zip(averages['player_id'].to_list(), averages['average'].to_list()))

    # Roster order first so ties are stable
    results = [
        PlayerAverage(
            player_id=player.id,
            player_name=player.name,
            average=round_half_away(by_player[player.id]),
        )
        for player in players
        if player.is_active and player.id in by_player
    ]
    results.sort(key=lambda entry: entry.average, reverse=True)
    return results[:limit]


def top_individual_averages(
    games: Iterable[GameRecord],
    players: Iterable[Player],
    limit: Optional[int] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> list[PlayerAverage]:
    """Best average score per active player, players without games omitted."""
    config = config or StatsConfig()
    if limit is None:
        limit = config.top_averages_limit
    return _top_player_averages(season_games(games, season), players, 'total_score', limit)


def top_tenth_frame_averages(
    games: Iterable[GameRecord],
    players: Iterable[Player],
    limit: Optional[int] = None,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> list[PlayerAverage]:
    """Best average 10th frame pins per active player."""
    config = config or StatsConfig()
    if limit is None:
        limit = config.top_averages_limit
    return _top_player_averages(season_games(games, season), players, 'tenth_frame_pins', limit)
