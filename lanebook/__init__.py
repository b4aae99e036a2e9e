from .models import (
    TenthFrameResult,
    GameMetrics,
    Stats,
    PlayerStats,
    TeamStats,
    Settlement,
    ComparisonMetric,
    HeadToHead,
)
from .schemas import GameRecord, Player, Expense, SplitMethod, StatsConfig
from .notation import (
    ErrorKind,
    CheckStatus,
    FrameShape,
    NotationCheck,
    NotationError,
    TenthFrame,
    parse_tenth_frame,
    validate_tenth_frame_notation,
    derive_tenth_frame_result,
)
from .scoring import strike_percentage, spare_percentage, tenth_frame_pins, game_metrics
from .stats import (
    calculate_player_stats,
    calculate_all_player_stats,
    calculate_team_stats,
    percentile,
    round_half_away,
    season_games,
)
from .ledger import (
    calculate_balances,
    plan_settlements,
    settle_ledger,
    settlement_to_expense,
)
from .leaderboards import (
    top_individual_games,
    top_team_sum_games,
    top_individual_averages,
    top_tenth_frame_averages,
)
from .head_to_head import compare_players, metric_winner
from .reports import PlayerWeek, WeeklyReport, default_report_week, week_range, weekly_report

__all__ = [
    # Models
    'TenthFrameResult',
    'GameMetrics',
    'Stats',
    'PlayerStats',
    'TeamStats',
    'Settlement',
    'ComparisonMetric',
    'HeadToHead',
    # Input records
    'GameRecord',
    'Player',
    'Expense',
    'SplitMethod',
    'StatsConfig',
    # 10th frame notation
    'ErrorKind',
    'CheckStatus',
    'FrameShape',
    'NotationCheck',
    'NotationError',
    'TenthFrame',
    'parse_tenth_frame',
    'validate_tenth_frame_notation',
    'derive_tenth_frame_result',
    # Per-game metrics
    'strike_percentage',
    'spare_percentage',
    'tenth_frame_pins',
    'game_metrics',
    # Aggregation
    'calculate_player_stats',
    'calculate_all_player_stats',
    'calculate_team_stats',
    'percentile',
    'round_half_away',
    'season_games',
    # Ledger
    'calculate_balances',
    'plan_settlements',
    'settle_ledger',
    'settlement_to_expense',
    # Leaderboards
    'top_individual_games',
    'top_team_sum_games',
    'top_individual_averages',
    'top_tenth_frame_averages',
    # Head-to-head
    'compare_players',
    'metric_winner',
    # Weekly report
    'PlayerWeek',
    'WeeklyReport',
    'default_report_week',
    'week_range',
    'weekly_report',
]
