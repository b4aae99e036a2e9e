"""Pydantic schemas for input records and configuration."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    COUNTED_FRAMES,
    LOG_LEVEL,
    LOG_LEVELS,
    PERFECT_GAME,
    RECENT_WINDOW,
    SCORE_THRESHOLD,
    SETTLEMENT_EPSILON,
    TOP_AVERAGES_LIMIT,
    TOP_GAMES_LIMIT,
    TOP_SESSIONS_LIMIT,
    TYPICAL_HIGH_PERCENTILE,
    TYPICAL_LOW_PERCENTILE,
    TYPICAL_MIN_GAMES,
    TYPICAL_WINDOW,
)
from .notation import normalize_notation, validate_tenth_frame_notation


class Player(BaseModel):
    """Team member. Deactivated players keep their game history."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team_id: str | None = None
    deactivated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None

    class Config:
        extra = 'forbid'
        frozen = True


class GameRecord(BaseModel):
    """
    A submitted game.

    Frames 1-9 are recorded as strike and spare counts; the 10th frame is
    kept as its literal notation. ``total_score`` is the score of record for
    the whole game. ``player_id`` is None once the player has been removed.
    """

    id: str | None = None
    player_id: str | None = None
    date_played: date
    submitted_at: datetime | None = None
    total_score: int = Field(..., ge=0)
    strike_count: int = Field(..., ge=0, le=COUNTED_FRAMES)
    spare_count: int = Field(..., ge=0, le=COUNTED_FRAMES)
    tenth_frame: str
    session_id: str | None = None
    season: str | None = None

    @field_validator('tenth_frame')
    @classmethod
    def validate_tenth_frame(cls, v):
        """Only complete, legal 10th frames can be stored."""
        check = validate_tenth_frame_notation(v)
        if not check.complete:
            raise ValueError(f'Invalid 10th frame {v!r}: {check.message}')
        return normalize_notation(v)

    @model_validator(mode='after')
    def validate_frame_counts(self):
        """Ensure strikes and spares fit in frames 1-9."""
        if self.strike_count + self.spare_count > COUNTED_FRAMES:
            raise ValueError('Strikes + spares cannot exceed 9 frames')
        return self

    class Config:
        extra = 'forbid'
        frozen = True


class SplitMethod(str, Enum):
    """How an expense is divided among its participants."""

    EQUAL = 'equal'
    WEIGHTED_BY_COUNT = 'games'
    FIXED_AMOUNTS = 'custom'


class Expense(BaseModel):
    """Shared expense paid by one participant."""

    id: str | None = None
    name: str | None = None
    amount: float = Field(..., gt=0)
    payer_id: str = Field(..., min_length=1)
    participant_ids: list[str] = Field(..., min_length=1)
    split_method: SplitMethod = SplitMethod.EQUAL
    count_by_participant: dict[str, int] | None = None
    amount_by_participant: dict[str, float] | None = None
    date_added: date | None = None

    @field_validator('participant_ids')
    @classmethod
    def validate_participants(cls, v):
        """Ensure nobody is listed twice."""
        seen = set()
        duplicates = set()
        for participant in v:
            if participant in seen:
                duplicates.add(participant)
            seen.add(participant)
        if duplicates:
            raise ValueError(f'Duplicate participants: {", ".join(sorted(duplicates))}')
        return v

    @field_validator('count_by_participant')
    @classmethod
    def validate_counts(cls, v):
        if v is not None:
            for participant, count in v.items():
                if count < 0:
                    raise ValueError(f'Negative count for {participant}: {count}')
        return v

    @field_validator('amount_by_participant')
    @classmethod
    def validate_amounts(cls, v):
        if v is not None:
            for participant, amount in v.items():
                if amount < 0:
                    raise ValueError(f'Negative amount for {participant}: {amount}')
        return v

    @model_validator(mode='after')
    def validate_split_weights(self):
        """Weighted and fixed splits need their per-participant figures."""
        if self.split_method is SplitMethod.WEIGHTED_BY_COUNT:
            if not self.count_by_participant:
                raise ValueError('Split by games requires count_by_participant')
            if sum(self.count_by_participant.values()) <= 0:
                raise ValueError('Split by games requires at least one game')
        elif self.split_method is SplitMethod.FIXED_AMOUNTS:
            if not self.amount_by_participant:
                raise ValueError('Custom split requires amount_by_participant')
        return self

    class Config:
        extra = 'forbid'
        frozen = True


class StatsConfig(BaseModel):
    """Statistics, ledger and logging settings."""

    score_threshold: int = Field(SCORE_THRESHOLD, ge=0, le=PERFECT_GAME)
    recent_window: int = Field(RECENT_WINDOW, ge=1)
    typical_window: int = Field(TYPICAL_WINDOW, ge=1)
    typical_min_games: int = Field(TYPICAL_MIN_GAMES, ge=1)
    typical_low_percentile: float = Field(TYPICAL_LOW_PERCENTILE, ge=0, le=1)
    typical_high_percentile: float = Field(TYPICAL_HIGH_PERCENTILE, ge=0, le=1)
    settlement_epsilon: float = Field(SETTLEMENT_EPSILON, ge=0)
    top_games_limit: int = Field(TOP_GAMES_LIMIT, ge=1)
    top_sessions_limit: int = Field(TOP_SESSIONS_LIMIT, ge=1)
    top_averages_limit: int = Field(TOP_AVERAGES_LIMIT, ge=1)
    log_level: str = LOG_LEVEL

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept standard level names in any case."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'Unknown log level: {v}. Use one of {", ".join(LOG_LEVELS)}')
        return level

    @model_validator(mode='after')
    def validate_percentiles(self):
        """Ensure the typical band is not inverted."""
        if self.typical_low_percentile > self.typical_high_percentile:
            raise ValueError(
                f'typical_low_percentile ({self.typical_low_percentile}) exceeds '
                f'typical_high_percentile ({self.typical_high_percentile})'
            )
        return self

    class Config:
        extra = 'forbid'
