"""Data models for lanebook results."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TenthFrameResult:
    """Totals derived from a tenth frame notation string."""
    strikes_opened: int = 0  # 1 when the frame opened with a strike
    spares_closed: int = 0  # 1 when any rack in the frame was spared
    pins_knocked: int = 0


@dataclass(frozen=True)
class GameMetrics:
    """Per-game percentages used by the aggregators."""
    strike_percentage: float = 0.0
    spare_percentage: float = 0.0
    tenth_frame_pins: int = 0


@dataclass
class Stats:
    """Aggregate statistics over a set of games."""
    games_played: int = 0
    average_score: float = 0.0
    strike_percentage: float = 0.0
    spare_percentage: float = 0.0
    floor: int = 0  # lowest score, all-time
    ceiling: int = 0  # highest score, all-time
    typical_low: float = 0.0
    typical_high: float = 0.0
    consistency_range: float = 0.0
    recent_average: float = 0.0
    average_tenth_frame: float = 0.0
    games_above_200: int = 0
    games_above_200_percentage: float = 0.0


@dataclass
class PlayerStats(Stats):
    """Statistics for a single player."""
    player_id: Optional[str] = None


@dataclass
class TeamStats(Stats):
    """Statistics across all currently active players."""
    player_count: int = 0


@dataclass(frozen=True)
class Settlement:
    """A single payer -> payee transfer."""
    from_id: str
    to_id: str
    amount: float


@dataclass
class ComparisonMetric:
    """One row of a head-to-head comparison."""
    id: str
    label: str
    a_value: float
    b_value: float
    winner: str  # 'a', 'b' or 'tie'
    counts_for_score: bool = True


@dataclass
class HeadToHead:
    """Full head-to-head comparison between two players."""
    metrics: list[ComparisonMetric] = field(default_factory=list)
    a_wins: int = 0
    b_wins: int = 0
    ties: int = 0

    @property
    def leader(self) -> str:
        if self.a_wins == self.b_wins:
            return 'tie'
        return 'a' if self.a_wins > self.b_wins else 'b'
