"""Tenth frame notation grammar.

The tenth frame is written as one to three symbols, one per ball:

    X     strike
    /     spare (knocks down whatever is still standing on the rack)
    -     miss
    0-9   pin count

Examples: ``X9/``, ``9/8``, ``72``, ``XXX``, ``X-5``. Input is
case-insensitive and surrounding whitespace is ignored.

A rack is fresh at the start of the frame and again after a strike or a
spare. Legality is decided ball by ball against the current rack, and every
complete frame falls into one of the ``FrameShape`` members. Prefixes that
can still be completed legally are reported as incomplete rather than
invalid so forms can validate while the user is typing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    MAX_TENTH_FRAME_BALLS,
    MISS,
    NOTATION_ALPHABET,
    PINS_PER_RACK,
    SPARE,
    STRIKE,
)
from .models import TenthFrameResult

logger = logging.getLogger('lanebook.notation')


class ErrorKind(str, Enum):
    """Reasons a notation string is not (yet) a complete tenth frame."""

    # Incomplete: still typing
    EMPTY = 'empty'
    MISSING_SECOND_BALL = 'missing_second_ball'
    MISSING_REQUIRED_THIRD_BALL = 'missing_required_third_ball'
    # Invalid: cannot be completed legally
    INVALID_CHARACTER = 'invalid_character'
    MISPLACED_SPARE = 'misplaced_spare'
    SPARE_AFTER_STRIKE = 'spare_after_strike'
    SPARE_AFTER_STRIKE_AND_MISS = 'spare_after_strike_and_miss'
    STRIKE_AFTER_NON_STRIKE_SECOND_BALL = 'strike_after_non_strike_second_ball'
    STRIKE_AFTER_PARTIAL_KNOCKDOWN = 'strike_after_partial_knockdown'
    THIRD_BALL_AFTER_DOUBLE_MISS = 'third_ball_after_double_miss'
    THIRD_BALL_AFTER_NON_SPARE_OPEN = 'third_ball_after_non_spare_open'
    PIN_SUM_EXCEEDS_TEN = 'pin_sum_exceeds_ten'
    TOO_MANY_BALLS = 'too_many_balls'


class CheckStatus(str, Enum):
    COMPLETE = 'complete'
    INCOMPLETE = 'incomplete'
    INVALID = 'invalid'


class FrameShape(str, Enum):
    """Closed set of legal tenth frames. A miss counts as a number."""

    STRIKE_STRIKE_STRIKE = 'strike_strike_strike'
    STRIKE_STRIKE_NUMBER = 'strike_strike_number'
    STRIKE_NUMBER_SPARE = 'strike_number_spare'
    STRIKE_NUMBER_NUMBER = 'strike_number_number'
    OPEN_SPARE_BONUS = 'open_spare_bonus'
    OPEN_OPEN = 'open_open'
    IN_PROGRESS = 'in_progress'


@dataclass(frozen=True)
class Ball:
    """A single delivery and the pins it knocked down."""
    symbol: str
    pins: int

    @property
    def is_strike(self) -> bool:
        return self.symbol == STRIKE

    @property
    def is_spare(self) -> bool:
        return self.symbol == SPARE

    @property
    def is_miss(self) -> bool:
        return self.symbol == MISS


@dataclass(frozen=True)
class NotationCheck:
    """Verdict for a notation string."""
    status: CheckStatus
    error: Optional[ErrorKind] = None
    message: str = ''

    @property
    def valid(self) -> bool:
        """True unless the string can never become a legal frame."""
        return self.status is not CheckStatus.INVALID

    @property
    def complete(self) -> bool:
        return self.status is CheckStatus.COMPLETE


@dataclass(frozen=True)
class TenthFrame:
    """Parsed tenth frame: the balls read so far, the shape and the verdict."""
    notation: str
    balls: tuple[Ball, ...]
    shape: FrameShape
    check: NotationCheck

    def result(self) -> TenthFrameResult:
        """Totals for the balls delivered; a strike is worth 10 in every slot."""
        return TenthFrameResult(
            strikes_opened=1 if self.balls and self.balls[0].is_strike else 0,
            spares_closed=1 if any(ball.is_spare for ball in self.balls) else 0,
            pins_knocked=sum(ball.pins for ball in self.balls),
        )


class NotationError(ValueError):
    """Raised when deriving totals from a notation the grammar rejects."""

    def __init__(self, notation: str, check: NotationCheck):
        super().__init__(f'Invalid tenth frame notation {notation!r}: {check.message}')
        self.notation = notation
        self.check = check


_COMPLETE = NotationCheck(CheckStatus.COMPLETE)


def normalize_notation(notation: Optional[str]) -> str:
    """Upper-case the notation and strip surrounding whitespace."""
    return (notation or '').strip().upper()


def _frame_length(balls: list[Ball]) -> int:
    """Number of balls the frame allows given the balls read so far."""
    if not balls or balls[0].is_strike:
        return MAX_TENTH_FRAME_BALLS
    if len(balls) >= 2 and balls[1].is_spare:
        return MAX_TENTH_FRAME_BALLS
    return 2


def _invalid(error: ErrorKind, message: str) -> NotationCheck:
    return NotationCheck(CheckStatus.INVALID, error, message)


def _extra_ball(balls: list[Ball]) -> NotationCheck:
    if len(balls) >= MAX_TENTH_FRAME_BALLS:
        return _invalid(
            ErrorKind.TOO_MANY_BALLS,
            f'The 10th frame has at most {MAX_TENTH_FRAME_BALLS} balls',
        )
    if all(ball.pins == 0 for ball in balls):
        return _invalid(
            ErrorKind.THIRD_BALL_AFTER_DOUBLE_MISS,
            'No third ball allowed when both first two balls are misses',
        )
    return _invalid(
        ErrorKind.THIRD_BALL_AFTER_NON_SPARE_OPEN,
        "No third ball allowed when first two balls don't result in a strike or spare",
    )


def _scan(normalized: str) -> tuple[list[Ball], NotationCheck]:
    """Read balls left to right, stopping at the first illegal symbol."""
    balls: list[Ball] = []
    standing = PINS_PER_RACK
    fresh = True

    for index, symbol in enumerate(normalized):
        if symbol not in NOTATION_ALPHABET:
            return balls, _invalid(
                ErrorKind.INVALID_CHARACTER,
                f"Invalid character '{symbol}'. Use X, 0-9, /, or -",
            )
        if index >= _frame_length(balls):
            return balls, _extra_ball(balls)

        previous = balls[-1] if balls else None

        if symbol == STRIKE:
            if not fresh:
                if previous.is_miss:
                    return balls, _invalid(
                        ErrorKind.STRIKE_AFTER_NON_STRIKE_SECOND_BALL,
                        'Cannot have a strike right after a miss on the same rack',
                    )
                return balls, _invalid(
                    ErrorKind.STRIKE_AFTER_PARTIAL_KNOCKDOWN,
                    f'Cannot have a strike after {previous.pins} pins on the same rack',
                )
            balls.append(Ball(STRIKE, PINS_PER_RACK))
            standing, fresh = PINS_PER_RACK, True

        elif symbol == SPARE:
            if fresh:
                if previous is not None and previous.is_strike:
                    return balls, _invalid(
                        ErrorKind.SPARE_AFTER_STRIKE,
                        'Cannot have a spare right after a strike in the 10th frame',
                    )
                return balls, _invalid(
                    ErrorKind.MISPLACED_SPARE,
                    'A spare must follow a pin count or a miss on the same rack',
                )
            if previous.is_miss and balls[0].is_strike:
                return balls, _invalid(
                    ErrorKind.SPARE_AFTER_STRIKE_AND_MISS,
                    'Cannot have a spare on third ball after missing second ball',
                )
            balls.append(Ball(SPARE, standing))
            standing, fresh = PINS_PER_RACK, True

        else:
            pins = 0 if symbol == MISS else int(symbol)
            if not fresh and pins > standing:
                knocked = PINS_PER_RACK - standing + pins
                return balls, _invalid(
                    ErrorKind.PIN_SUM_EXCEEDS_TEN,
                    f'Cannot knock down {knocked} pins with 2 balls (max {PINS_PER_RACK})',
                )
            balls.append(Ball(symbol, pins))
            if fresh:
                standing, fresh = standing - pins, False
            else:
                # Two balls close the rack
                standing, fresh = PINS_PER_RACK, True

    needed = _frame_length(balls)
    if len(balls) >= needed:
        return balls, _COMPLETE
    if not balls:
        return balls, NotationCheck(
            CheckStatus.INCOMPLETE, ErrorKind.EMPTY, '10th frame notation is required'
        )
    if len(balls) == 1:
        return balls, NotationCheck(
            CheckStatus.INCOMPLETE, ErrorKind.MISSING_SECOND_BALL, 'Second ball is required'
        )
    return balls, NotationCheck(
        CheckStatus.INCOMPLETE,
        ErrorKind.MISSING_REQUIRED_THIRD_BALL,
        'Third ball is required after a strike or spare',
    )


def _classify(balls: list[Ball]) -> FrameShape:
    first, second = balls[0], balls[1]
    if first.is_strike:
        third = balls[2]
        if second.is_strike:
            if third.is_strike:
                return FrameShape.STRIKE_STRIKE_STRIKE
            return FrameShape.STRIKE_STRIKE_NUMBER
        if third.is_spare:
            return FrameShape.STRIKE_NUMBER_SPARE
        return FrameShape.STRIKE_NUMBER_NUMBER
    if second.is_spare:
        return FrameShape.OPEN_SPARE_BONUS
    return FrameShape.OPEN_OPEN


def parse_tenth_frame(notation: Optional[str]) -> TenthFrame:
    """
    Parse a tenth frame notation string.

    Never raises. For invalid input the returned frame holds the balls read
    before the offending symbol and an INVALID check.

    Args:
        notation: Raw notation (e.g., "x9/", " 72 ")

    Returns:
        TenthFrame with balls, shape and verdict
    """
    normalized = normalize_notation(notation)
    balls, check = _scan(normalized)
    shape = _classify(balls) if check.complete else FrameShape.IN_PROGRESS
    return TenthFrame(notation=normalized, balls=tuple(balls), shape=shape, check=check)


def validate_tenth_frame_notation(notation: Optional[str]) -> NotationCheck:
    """
    Validate tenth frame notation for impossible combinations.

    Returns a check instead of raising so callers can show the reason inline.
    ``check.valid`` is also True for legal prefixes such as ``X``;
    ``check.complete`` tells whether the frame is finished.

    Example:
        check = validate_tenth_frame_notation('X/')
        check.error  # ErrorKind.SPARE_AFTER_STRIKE
    """
    check = parse_tenth_frame(notation).check
    if not check.valid:
        logger.debug(f'Rejected tenth frame {notation!r}: {check.error.value}')
    return check


def derive_tenth_frame_result(notation: Optional[str]) -> TenthFrameResult:
    """
    Derive strike/spare flags and pin total from a tenth frame.

    Legal prefixes are scored from the balls delivered so far.

    Raises:
        NotationError: If the notation can never be a legal frame
    """
    frame = parse_tenth_frame(notation)
    if not frame.check.valid:
        raise NotationError(frame.notation, frame.check)
    return frame.result()
