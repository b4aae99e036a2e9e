"""Weekly team report: one Monday-Sunday week compared with the week before."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

import polars as pl

from .constants import REPORT_TOP_PLAYERS
from .leaderboards import SessionTotal, games_frame
from .models import TeamStats
from .schemas import GameRecord, Player, StatsConfig
from .scoring import game_metrics
from .stats import calculate_team_stats, played_at, round_half_away, season_games

logger = logging.getLogger('lanebook.reports')


@dataclass
class PlayerWeek:
    """One player's games in the report week."""
    player_id: str
    player_name: str
    games: int
    average: float
    best: int
    strike_percentage: float
    spare_percentage: float


@dataclass
class WeeklyReport:
    """Team summary for one week and its change from the previous week."""
    week_start: date
    week_end: date
    games: list[GameRecord] = field(default_factory=list)
    team_stats: TeamStats = field(default_factory=TeamStats)
    previous_team_stats: TeamStats = field(default_factory=TeamStats)
    has_previous_week: bool = False
    average_delta: float = 0.0
    strike_delta: float = 0.0
    spare_delta: float = 0.0
    best_session: Optional[SessionTotal] = None
    players: list[PlayerWeek] = field(default_factory=list)  # by average, best first
    top_players: list[PlayerWeek] = field(default_factory=list)
    strike_leader: Optional[PlayerWeek] = None
    spare_leader: Optional[PlayerWeek] = None
    sessions: list[SessionTotal] = field(default_factory=list)  # chronological
    session_scores: dict[str, list[Optional[int]]] = field(default_factory=dict)

    @property
    def session_totals(self) -> list[int]:
        return [session.total_sum for session in self.sessions]


def week_range(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def default_report_week(games: Iterable[GameRecord], today: date) -> date:
    """
    Week to open the report on.

    The current week if it has games, otherwise the latest earlier week
    with games, otherwise the current week.
    """
    current_start, _ = week_range(today)
    latest = None
    for game in games:
        start, _ = week_range(game.date_played)
        if start > current_start:
            continue
        if latest is None or start > latest:
            latest = start
    return latest or current_start


def _games_in_week(games: list[GameRecord], start: date) -> list[GameRecord]:
    _, end = week_range(start)
    return [game for game in games if start <= game.date_played <= end]


def _session_key(game: GameRecord, index: int) -> str:
    # Solo games form their own one-game session
    return game.session_id or game.id or f'game-{index}'


def _week_frame(games: list[GameRecord]) -> pl.DataFrame:
    metrics = [game_metrics(game) for game in games]
    return games_frame(games).with_columns(
        pl.Series('session_key', [_session_key(g, i) for i, g in enumerate(games)], dtype=pl.Utf8),
        pl.Series('played_at', [played_at(game) for game in games], dtype=pl.Datetime),
        pl.Series('strike_percentage', [m.strike_percentage for m in metrics], dtype=pl.Float64),
        pl.Series('spare_percentage', [m.spare_percentage for m in metrics], dtype=pl.Float64),
    )


def _week_sessions(frame: pl.DataFrame, games: list[GameRecord]) -> list[SessionTotal]:
    sessions = (
        frame.group_by('session_key', maintain_order=True)
        .agg(
            pl.col('played_at').min().alias('first_played'),
            pl.col('date_played').first(),
            pl.col('total_score').sum().alias('total_sum'),
            pl.col('player_id').drop_nulls().alias('player_ids'),
            pl.col('order').alias('orders'),
        )
        .sort('first_played', maintain_order=True)
    )
    return [
        SessionTotal(
            session_id=row['session_key'],
            date_played=row['date_played'],
            total_sum=row['total_sum'],
            player_ids=list(row['player_ids']),
            games=[games[order] for order in row['orders']],
        )
        for row in sessions.iter_rows(named=True)
    ]


def _week_players(frame: pl.DataFrame, players: Iterable[Player]) -> list[PlayerWeek]:
    per_player = (
        frame.filter(pl.col('player_id').is_not_null())
        .group_by('player_id')
        .agg(
            pl.col('total_score').count().alias('games'),
            pl.col('total_score').mean().alias('average'),
            pl.col('total_score').max().alias('best'),
            pl.col('strike_percentage').mean(),
            pl.col('spare_percentage').mean(),
        )
    )
    by_player = {row['player_id']: row for row in per_player.iter_rows(named=True)}

    rows = [
        PlayerWeek(
            player_id=player.id,
            player_name=player.name,
            games=by_player[player.id]['games'],
            average=round_half_away(by_player[player.id]['average']),
            best=by_player[player.id]['best'],
            strike_percentage=round_half_away(by_player[player.id]['strike_percentage']),
            spare_percentage=round_half_away(by_player[player.id]['spare_percentage']),
        )
        for player in players
        if player.id in by_player
    ]
    # Stable: equal averages keep roster order
    rows.sort(key=lambda row: row.average, reverse=True)
    return rows


def _session_scores(
    games: list[GameRecord],
    sessions: list[SessionTotal],
    rows: list[PlayerWeek],
) -> dict[str, list[Optional[int]]]:
    """Each player's score per session column; a player's first game in a session counts."""
    position = {session.session_id: column for column, session in enumerate(sessions)}
    scores = {row.player_id: [None] * len(sessions) for row in rows}
    for index, game in enumerate(games):
        if game.player_id not in scores:
            continue
        column = position[_session_key(game, index)]
        if scores[game.player_id][column] is None:
            scores[game.player_id][column] = game.total_score
    return scores


def weekly_report(
    games: Iterable[GameRecord],
    players: Iterable[Player],
    week_start: date,
    config: Optional[StatsConfig] = None,
    season: Optional[str] = None,
) -> WeeklyReport:
    """
    Build the report for the week containing ``week_start``.

    Team figures follow calculate_team_stats (removed players' games are
    left out); session totals include every game played that week. Deltas
    are this week minus the previous week and are only meaningful when
    ``has_previous_week`` is True.

    Args:
        games: All games (filtered to the two weeks here)
        players: Roster used for names and per-player rows
        week_start: Any day in the report week
        config: Policy thresholds (default: built-in constants)
        season: Only count games from this season (default: all)

    Returns:
        WeeklyReport, with empty sections when the week has no games
    """
    config = config or StatsConfig()
    players = list(players)
    games = season_games(games, season)
    start, end = week_range(week_start)

    week_games = _games_in_week(games, start)
    previous_games = _games_in_week(games, start - timedelta(days=7))

    team_stats = calculate_team_stats(week_games, config=config)
    previous_stats = calculate_team_stats(previous_games, config=config)

    report = WeeklyReport(
        week_start=start,
        week_end=end,
        games=week_games,
        team_stats=team_stats,
        previous_team_stats=previous_stats,
        has_previous_week=bool(week_games) and bool(previous_games),
        average_delta=round_half_away(team_stats.average_score - previous_stats.average_score),
        strike_delta=round_half_away(team_stats.strike_percentage - previous_stats.strike_percentage),
        spare_delta=round_half_away(team_stats.spare_percentage - previous_stats.spare_percentage),
    )
    logger.debug(f'Week of {start}: {len(week_games)} games, {len(previous_games)} the week before')
    if not week_games:
        return report

    frame = _week_frame(week_games)
    report.sessions = _week_sessions(frame, week_games)
    # First session wins ties
    report.best_session = max(report.sessions, key=lambda session: session.total_sum)

    report.players = _week_players(frame, players)
    report.top_players = report.players[:REPORT_TOP_PLAYERS]
    if report.players:
        report.strike_leader = max(report.players, key=lambda row: row.strike_percentage)
        report.spare_leader = max(report.players, key=lambda row: row.spare_percentage)
    report.session_scores = _session_scores(week_games, report.sessions, report.players)
    return report
