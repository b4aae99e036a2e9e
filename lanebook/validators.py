"""Validation functions for game submissions, expenses and balances."""

import logging
from collections.abc import Iterable
from typing import Optional

from .constants import COUNTED_FRAMES, MAX_TENTH_FRAME_PINS, PERFECT_GAME, SETTLEMENT_EPSILON
from .notation import derive_tenth_frame_result, validate_tenth_frame_notation
from .schemas import Expense, GameRecord, SplitMethod

logger = logging.getLogger('lanebook.validators')


def validate_game_fields(
    total_score: Optional[int],
    strike_count: Optional[int],
    spare_count: Optional[int],
    tenth_frame: Optional[str],
) -> list[str]:
    """
    Validate raw game form input before a GameRecord is built.

    Checks:
    - Total score between 0 and 300
    - Strikes and spares in frames 1-9 between 0 and 9
    - Strikes + spares fit in 9 frames
    - 10th frame notation complete and legal

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if total_score is None or not 0 <= total_score <= PERFECT_GAME:
        errors.append(f'Total score must be between 0 and {PERFECT_GAME}')

    if strike_count is None or not 0 <= strike_count <= COUNTED_FRAMES:
        errors.append(f'Strikes in frames 1-9 must be between 0 and {COUNTED_FRAMES}')

    if spare_count is None or not 0 <= spare_count <= COUNTED_FRAMES:
        errors.append(f'Spares in frames 1-9 must be between 0 and {COUNTED_FRAMES}')

    if strike_count is not None and spare_count is not None:
        if strike_count + spare_count > COUNTED_FRAMES:
            errors.append('Strikes + spares cannot exceed 9 frames')

    check = validate_tenth_frame_notation(tenth_frame)
    if not check.complete:
        errors.append(check.message)

    return errors


def validate_game(game: GameRecord) -> list[str]:
    """
    Check that a stored game is plausible.

    Sanity checks:
    - Score not above a perfect game
    - A 300 needs nine strikes and XXX
    - Nine strikes with a low score

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    label = game.id or f'{game.player_id} on {game.date_played}'

    if game.total_score > PERFECT_GAME:
        warnings.append(f'{label} scored {game.total_score} (above a perfect game)')
        return warnings

    tenth = derive_tenth_frame_result(game.tenth_frame)
    if game.total_score == PERFECT_GAME:
        if game.strike_count != COUNTED_FRAMES or tenth.pins_knocked != MAX_TENTH_FRAME_PINS:
            warnings.append(
                f'{label} scored {PERFECT_GAME} with {game.strike_count} strikes '
                f'and {game.tenth_frame} in the 10th (not a perfect game)'
            )
    elif game.strike_count == COUNTED_FRAMES and game.total_score < 240:
        # Nine strikes in a row are worth at least 240 through frame 9
        warnings.append(
            f'{label} has {COUNTED_FRAMES} strikes but scored only {game.total_score}'
        )

    return warnings


def validate_all_games(games: Iterable[GameRecord]) -> tuple[list[str], list[str]]:
    """
    Validate every game in a snapshot.

    Returns:
        Tuple of (errors, warnings)
        - errors: Duplicate game ids
        - warnings: Implausible games to review
    """
    errors: list[str] = []
    warnings: list[str] = []
    seen = set()

    for game in games:
        if game.id is not None:
            if game.id in seen:
                errors.append(f'Duplicate game id: {game.id}')
            seen.add(game.id)
        warnings.extend(validate_game(game))

    for warning in warnings:
        logger.warning(warning)
    return errors, warnings


def validate_expense(expense: Expense, participant_ids: Optional[Iterable[str]] = None) -> list[str]:
    """
    Check that an expense is internally consistent.

    Sanity checks:
    - Custom amounts add up to the expense amount (within a cent)
    - Game counts only for listed participants
    - Payer and participants are known (when participant_ids is given)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    label = expense.name or expense.id or 'Expense'

    if expense.split_method is SplitMethod.FIXED_AMOUNTS and expense.amount_by_participant:
        split_total = sum(expense.amount_by_participant.values())
        if abs(split_total - expense.amount) > SETTLEMENT_EPSILON:
            warnings.append(
                f'{label} custom split ({split_total:.2f}) != amount ({expense.amount:.2f})'
            )

    if expense.split_method is SplitMethod.WEIGHTED_BY_COUNT and expense.count_by_participant:
        strangers = sorted(set(expense.count_by_participant) - set(expense.participant_ids))
        if strangers:
            warnings.append(f'{label} has game counts for non-participants: {", ".join(strangers)}')

    if participant_ids is not None:
        known = set(participant_ids)
        if expense.payer_id not in known:
            warnings.append(f'{label} paid by unknown participant {expense.payer_id}')
        unknown = sorted(set(expense.participant_ids) - known)
        if unknown:
            warnings.append(f'{label} split with unknown participants: {", ".join(unknown)}')

    return warnings


def validate_all_expenses(
    expenses: Iterable[Expense],
    participant_ids: Optional[Iterable[str]] = None,
) -> tuple[list[str], list[str]]:
    """
    Validate every expense in a ledger.

    Returns:
        Tuple of (errors, warnings)
        - errors: Duplicate expense ids
        - warnings: Inconsistent splits or unknown participants
    """
    errors: list[str] = []
    warnings: list[str] = []
    known = list(participant_ids) if participant_ids is not None else None
    seen = set()

    for expense in expenses:
        if expense.id is not None:
            if expense.id in seen:
                errors.append(f'Duplicate expense id: {expense.id}')
            seen.add(expense.id)
        warnings.extend(validate_expense(expense, known))

    for warning in warnings:
        logger.warning(warning)
    return errors, warnings


def validate_ledger(balances: dict[str, float]) -> list[str]:
    """
    Check that balances net to zero.

    Custom splits that don't add up leave money unaccounted for, which
    settlement cannot reconcile.

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    net = sum(balances.values())
    if abs(net) > SETTLEMENT_EPSILON:
        warnings.append(f'Balances sum to {net:.2f} instead of 0.00')
    return warnings
