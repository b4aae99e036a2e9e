"""Per-game metrics derived from a game record and its tenth frame."""

from .constants import COUNTED_FRAMES, TOTAL_FRAMES
from .models import GameMetrics, TenthFrameResult
from .notation import derive_tenth_frame_result
from .schemas import GameRecord


def tenth_frame_result(game: GameRecord) -> TenthFrameResult:
    """Parse the game's tenth frame notation."""
    return derive_tenth_frame_result(game.tenth_frame)


def game_metrics(game: GameRecord) -> GameMetrics:
    """
    Strike %, spare % and 10th frame pins for one game.

    Strike %: strikes out of 10 frames. A tenth frame counts once however
    many strikes it holds.

    Spare %: spares out of spare opportunities. Frames 1-9 offer one per
    non-strike frame; the 10th frame always offers exactly one (balls 1+2
    or balls 2+3).
    """
    tenth = tenth_frame_result(game)
    strikes = game.strike_count + tenth.strikes_opened
    spares = game.spare_count + tenth.spares_closed
    opportunities = (COUNTED_FRAMES - game.strike_count) + 1
    return GameMetrics(
        strike_percentage=strikes * 100 / TOTAL_FRAMES,
        spare_percentage=spares * 100 / opportunities if opportunities > 0 else 0.0,
        tenth_frame_pins=tenth.pins_knocked,
    )


def strike_percentage(game: GameRecord) -> float:
    """Calculate strike percentage for a game."""
    return game_metrics(game).strike_percentage


def spare_percentage(game: GameRecord) -> float:
    """Calculate spare percentage for a game."""
    return game_metrics(game).spare_percentage


def tenth_frame_pins(game: GameRecord) -> int:
    """Pins knocked down in the 10th frame."""
    return tenth_frame_result(game).pins_knocked
