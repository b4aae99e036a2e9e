"""Expense ledger: net balances and settlement transfers."""

import logging
from collections.abc import Iterable
from typing import Optional

from .constants import SETTLEMENT_EPSILON, SETTLEMENT_EXPENSE_NAME
from .models import Settlement
from .schemas import Expense, SplitMethod, StatsConfig

logger = logging.getLogger('lanebook.ledger')


def expense_shares(expense: Expense) -> dict[str, float]:
    """
    How much each participant owes for one expense.

    - equal: amount divided evenly among ``participant_ids``
    - games: amount weighted by ``count_by_participant``
    - custom: ``amount_by_participant`` as given (not required to add up)
    """
    if expense.split_method is SplitMethod.EQUAL:
        per_person = expense.amount / len(expense.participant_ids)
        return {participant: per_person for participant in expense.participant_ids}

    if expense.split_method is SplitMethod.WEIGHTED_BY_COUNT:
        counts = expense.count_by_participant or {}
        total_count = sum(counts.values())
        return {
            participant: expense.amount * count / total_count
            for participant, count in counts.items()
        }

    return dict(expense.amount_by_participant or {})


def calculate_balances(
    expenses: Iterable[Expense],
    participant_ids: Iterable[str] = (),
) -> dict[str, float]:
    """
    Net balance per participant over the full expense history.

    Positive means the participant is owed money, negative means they owe.
    Always recomputed from scratch so edits and deletions never drift.

    Args:
        expenses: Every expense in the ledger
        participant_ids: Known participants (start at 0 even with no expenses)

    Returns:
        Dict of participant id -> balance, known participants first
    """
    balances: dict[str, float] = {participant: 0.0 for participant in participant_ids}
    count = 0

    for expense in expenses:
        count += 1
        # Person who paid gets credited
        balances[expense.payer_id] = balances.get(expense.payer_id, 0.0) + expense.amount
        for participant, share in expense_shares(expense).items():
            balances[participant] = balances.get(participant, 0.0) - share

    logger.debug(f'Computed balances for {len(balances)} participants from {count} expenses')
    return balances


def plan_settlements(
    balances: dict[str, float],
    epsilon: float = SETTLEMENT_EPSILON,
) -> list[Settlement]:
    """
    Suggest payments that bring every balance back to zero.

    Greedy heuristic, not a minimum-transaction solver: repeatedly pays the
    largest remaining creditor from the largest remaining debtor. Produces
    at most ``creditors + debtors - 1`` transfers. Balances within
    ``epsilon`` of zero count as settled. Ties keep balance order.

    Args:
        balances: Output of calculate_balances()
        epsilon: Settlement tolerance (default: one cent)

    Returns:
        List of Settlement transfers, debtor -> creditor
    """
    creditors = [[pid, amount] for pid, amount in balances.items() if amount > epsilon]
    debtors = [[pid, -amount] for pid, amount in balances.items() if amount < -epsilon]

    # Largest first; sort is stable so equal amounts keep insertion order
    creditors.sort(key=lambda entry: entry[1], reverse=True)
    debtors.sort(key=lambda entry: entry[1], reverse=True)

    settlements: list[Settlement] = []
    creditor_index = 0
    debtor_index = 0

    while creditor_index < len(creditors) and debtor_index < len(debtors):
        creditor = creditors[creditor_index]
        debtor = debtors[debtor_index]

        amount = min(creditor[1], debtor[1])
        # Transfers are whole cents; float crumbs never become a 0.00 payment
        if round(amount, 2) > 0:
            settlements.append(
                Settlement(from_id=debtor[0], to_id=creditor[0], amount=round(amount, 2))
            )

        creditor[1] -= amount
        debtor[1] -= amount

        if round(creditor[1], 2) <= epsilon:
            creditor_index += 1
        if round(debtor[1], 2) <= epsilon:
            debtor_index += 1

    logger.debug(
        f'Planned {len(settlements)} settlements for '
        f'{len(creditors)} creditors and {len(debtors)} debtors'
    )
    return settlements


def settle_ledger(
    expenses: Iterable[Expense],
    participant_ids: Iterable[str] = (),
    config: Optional[StatsConfig] = None,
) -> tuple[dict[str, float], list[Settlement]]:
    """
    Balances and suggested settlements in one call.

    The settlement tolerance is ``config.settlement_epsilon``
    (default: one cent).
    """
    config = config or StatsConfig()
    balances = calculate_balances(expenses, participant_ids)
    return balances, plan_settlements(balances, epsilon=config.settlement_epsilon)


def settlement_to_expense(settlement: Settlement, expense_id: Optional[str] = None) -> Expense:
    """
    Record a made payment as a ledger expense.

    The debtor "pays" a custom split owed entirely by the creditor, which
    moves both balances toward zero on the next recomputation.
    """
    return Expense(
        id=expense_id,
        name=SETTLEMENT_EXPENSE_NAME,
        amount=settlement.amount,
        payer_id=settlement.from_id,
        participant_ids=[settlement.to_id],
        split_method=SplitMethod.FIXED_AMOUNTS,
        amount_by_participant={settlement.to_id: settlement.amount},
    )
