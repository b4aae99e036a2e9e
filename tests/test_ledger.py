"""Unit tests for ledger balances and settlement planning."""

import pytest
from pydantic import ValidationError

from lanebook.ledger import (
    calculate_balances,
    expense_shares,
    plan_settlements,
    settle_ledger,
    settlement_to_expense,
)
from lanebook.models import Settlement
from lanebook.schemas import Expense, SplitMethod, StatsConfig


def equal_expense(amount, payer, participants, **kwargs):
    return Expense(amount=amount, payer_id=payer, participant_ids=participants, **kwargs)


class TestExpenseSchema:
    """Tests for Expense validation."""

    def test_default_split_is_equal(self):
        """Test split method defaults to equal."""
        assert equal_expense(30, 'A', ['A', 'B']).split_method is SplitMethod.EQUAL

    def test_amount_must_be_positive(self):
        """Test zero amounts are rejected."""
        with pytest.raises(ValidationError):
            equal_expense(0, 'A', ['A'])

    def test_participants_required(self):
        """Test an expense needs at least one participant."""
        with pytest.raises(ValidationError):
            equal_expense(10, 'A', [])

    def test_duplicate_participants(self):
        """Test a participant can't be listed twice."""
        with pytest.raises(ValidationError) as exc_info:
            equal_expense(10, 'A', ['A', 'B', 'A'])
        assert 'Duplicate participants: A' in str(exc_info.value)

    def test_weighted_requires_counts(self):
        """Test split by games needs game counts."""
        with pytest.raises(ValidationError):
            equal_expense(10, 'A', ['A', 'B'], split_method='games')

    def test_weighted_requires_positive_total(self):
        """Test split by games with zero games is rejected."""
        with pytest.raises(ValidationError):
            equal_expense(
                10, 'A', ['A', 'B'], split_method='games', count_by_participant={'A': 0, 'B': 0}
            )

    def test_negative_count_rejected(self):
        """Test negative game counts are rejected."""
        with pytest.raises(ValidationError):
            equal_expense(
                10, 'A', ['A', 'B'], split_method='games', count_by_participant={'A': 3, 'B': -1}
            )

    def test_fixed_requires_amounts(self):
        """Test custom split needs per-participant amounts."""
        with pytest.raises(ValidationError):
            equal_expense(10, 'A', ['A', 'B'], split_method=SplitMethod.FIXED_AMOUNTS)


class TestBalances:
    """Tests for calculate_balances."""

    def test_equal_split_three_players(self):
        """Test $30 paid by A, split equally among A, B, C."""
        balances = calculate_balances([equal_expense(30, 'A', ['A', 'B', 'C'])])
        assert balances == {'A': 20.0, 'B': -10.0, 'C': -10.0}

    def test_weighted_by_games(self):
        """Test $60 split 1:2:3 by games played."""
        expense = equal_expense(
            60,
            'A',
            ['A', 'B', 'C'],
            split_method=SplitMethod.WEIGHTED_BY_COUNT,
            count_by_participant={'A': 1, 'B': 2, 'C': 3},
        )
        balances = calculate_balances([expense])
        assert balances['A'] == pytest.approx(50.0)
        assert balances['B'] == pytest.approx(-20.0)
        assert balances['C'] == pytest.approx(-30.0)

    def test_fixed_amounts_trusted_as_is(self):
        """Test custom amounts are debited even when they don't add up."""
        expense = equal_expense(
            50,
            'B',
            ['A', 'C'],
            split_method=SplitMethod.FIXED_AMOUNTS,
            amount_by_participant={'A': 20, 'C': 25},
        )
        assert calculate_balances([expense]) == {'B': 50.0, 'A': -20.0, 'C': -25.0}

    def test_known_participants_start_at_zero(self):
        """Test participants with no expenses still appear."""
        balances = calculate_balances([equal_expense(20, 'A', ['A', 'B'])], ['A', 'B', 'D'])
        assert balances == {'A': 10.0, 'B': -10.0, 'D': 0.0}

    def test_no_expenses(self):
        """Test an empty ledger is all zeros."""
        assert calculate_balances([], ['A', 'B']) == {'A': 0.0, 'B': 0.0}

    def test_recomputed_from_scratch(self):
        """Test removing an expense is reflected without residue."""
        first = equal_expense(30, 'A', ['A', 'B', 'C'], id='e1')
        second = equal_expense(12, 'B', ['A', 'B'], id='e2')
        with_both = calculate_balances([first, second], ['A', 'B', 'C'])
        assert with_both == {'A': 14.0, 'B': -4.0, 'C': -10.0}
        assert calculate_balances([first], ['A', 'B', 'C']) == {'A': 20.0, 'B': -10.0, 'C': -10.0}

    def test_shares_for_equal_split(self):
        """Test expense_shares divides evenly."""
        assert expense_shares(equal_expense(9, 'A', ['A', 'B', 'C'])) == {
            'A': 3.0,
            'B': 3.0,
            'C': 3.0,
        }


class TestSettlements:
    """Tests for plan_settlements."""

    def test_two_debtors_pay_creditor(self):
        """Test A +20, B -10, C -10 gives two $10 transfers to A."""
        settlements = plan_settlements({'A': 20.0, 'B': -10.0, 'C': -10.0})
        assert settlements == [
            Settlement(from_id='B', to_id='A', amount=10.0),
            Settlement(from_id='C', to_id='A', amount=10.0),
        ]

    def test_tie_break_by_insertion_order(self):
        """Test equal debts are settled in balance order."""
        settlements = plan_settlements({'C': -10.0, 'B': -10.0, 'A': 20.0})
        assert [s.from_id for s in settlements] == ['C', 'B']
        assert all(s.to_id == 'A' and s.amount == 10.0 for s in settlements)

    def test_largest_first(self):
        """Test the largest debtor pays first."""
        settlements = plan_settlements({'A': 50.0, 'B': -20.0, 'C': -30.0})
        assert settlements == [
            Settlement(from_id='C', to_id='A', amount=30.0),
            Settlement(from_id='B', to_id='A', amount=20.0),
        ]

    def test_split_debt_across_creditors(self):
        """Test one debtor paying two creditors."""
        settlements = plan_settlements({'A': 25.0, 'B': 15.0, 'C': -40.0})
        assert settlements == [
            Settlement(from_id='C', to_id='A', amount=25.0),
            Settlement(from_id='C', to_id='B', amount=15.0),
        ]

    def test_below_epsilon_is_settled(self):
        """Test sub-cent balances need no transfers."""
        assert plan_settlements({'A': 0.005, 'B': -0.004, 'C': -0.001}) == []

    def test_empty(self):
        """Test no balances gives no settlements."""
        assert plan_settlements({}) == []

    def test_transfer_count_bound(self):
        """Test at most creditors + debtors - 1 transfers."""
        balances = {'A': 40.0, 'B': 25.0, 'C': 5.0, 'D': -30.0, 'E': -22.5, 'F': -17.5}
        settlements = plan_settlements(balances)
        assert len(settlements) <= 3 + 3 - 1
        assert all(s.amount > 0 for s in settlements)
        assert sum(s.amount for s in settlements) == pytest.approx(70.0)

    def test_settlements_zero_every_balance(self):
        """Test applying the transfers reconciles the ledger."""
        balances = {'A': 40.0, 'B': 25.0, 'C': 5.0, 'D': -30.0, 'E': -22.5, 'F': -17.5}
        remaining = dict(balances)
        for settlement in plan_settlements(balances):
            remaining[settlement.from_id] += settlement.amount
            remaining[settlement.to_id] -= settlement.amount
        assert all(abs(amount) < 0.01 for amount in remaining.values())

    def test_zero_epsilon_terminates(self):
        """Test exact settlement with no tolerance."""
        settlements = plan_settlements({'A': 10.0, 'B': -10.0}, epsilon=0)
        assert settlements == [Settlement(from_id='B', to_id='A', amount=10.0)]

    def test_float_crumbs_never_become_zero_transfers(self):
        """Test sub-cent leftovers with no tolerance produce no 0.00 payments."""
        settlements = plan_settlements({'A': 10.000000001, 'B': -10.0, 'C': -1e-9}, epsilon=0)
        assert settlements == [Settlement(from_id='B', to_id='A', amount=10.0)]
        assert all(s.amount > 0 for s in settlements)

    def test_thirds_settle_in_whole_cents(self):
        """Test a three-way split of $10 settles with positive cent amounts."""
        balances = calculate_balances([equal_expense(10, 'A', ['A', 'B', 'C'])])
        settlements = plan_settlements(balances, epsilon=0)
        assert [(s.from_id, s.to_id, s.amount) for s in settlements] == [
            ('B', 'A', 3.33),
            ('C', 'A', 3.33),
        ]


class TestSettleLedger:
    """Tests for the end-to-end ledger helpers."""

    def test_settle_ledger(self):
        """Test balances and settlements from expenses in one call."""
        balances, settlements = settle_ledger([equal_expense(30, 'A', ['A', 'B', 'C'])])
        assert balances == {'A': 20.0, 'B': -10.0, 'C': -10.0}
        assert len(settlements) == 2

    def test_settle_ledger_uses_config_epsilon(self):
        """Test the settlement tolerance comes from config."""
        expenses = [equal_expense(0.3, 'A', ['A', 'B', 'C'])]
        _, default_plan = settle_ledger(expenses)
        assert len(default_plan) == 2
        _, loose_plan = settle_ledger(expenses, config=StatsConfig(settlement_epsilon=0.5))
        assert loose_plan == []

    def test_recording_settlements_clears_balances(self):
        """Test settlement payments recorded as expenses bring balances to zero."""
        expenses = [
            equal_expense(90, 'A', ['A', 'B', 'C']),
            equal_expense(30, 'B', ['B', 'C']),
        ]
        balances, settlements = settle_ledger(expenses, ['A', 'B', 'C'])
        assert balances == {'A': 60.0, 'B': -15.0, 'C': -45.0}

        payments = [settlement_to_expense(s, expense_id=f's{i}') for i, s in enumerate(settlements)]
        final = calculate_balances(expenses + payments, ['A', 'B', 'C'])
        assert all(abs(amount) < 0.01 for amount in final.values())
        assert plan_settlements(final) == []

    def test_settlement_expense_shape(self):
        """Test a settlement becomes a custom split paid by the debtor."""
        expense = settlement_to_expense(Settlement(from_id='B', to_id='A', amount=12.5))
        assert expense.name == 'Settlement Payment'
        assert expense.payer_id == 'B'
        assert expense.participant_ids == ['A']
        assert expense.split_method is SplitMethod.FIXED_AMOUNTS
        assert expense.amount_by_participant == {'A': 12.5}
