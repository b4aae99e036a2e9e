"""Unit tests for validation functions."""

from lanebook.schemas import Expense, SplitMethod
from lanebook.validators import (
    validate_all_expenses,
    validate_all_games,
    validate_expense,
    validate_game,
    validate_game_fields,
    validate_ledger,
)


class TestGameFieldValidation:
    """Tests for raw game form validation."""

    def test_valid_submission(self):
        """Test a normal game passes all checks."""
        assert validate_game_fields(187, 5, 3, 'X9/') == []

    def test_score_out_of_range(self):
        """Test score above 300 is rejected."""
        errors = validate_game_fields(301, 5, 3, '72')
        assert errors == ['Total score must be between 0 and 300']

    def test_missing_score(self):
        """Test a missing score is rejected."""
        assert 'Total score must be between 0 and 300' in validate_game_fields(None, 5, 3, '72')

    def test_counts_out_of_range(self):
        """Test strike and spare counts are limited to 0-9."""
        errors = validate_game_fields(150, 10, -1, '72')
        assert 'Strikes in frames 1-9 must be between 0 and 9' in errors
        assert 'Spares in frames 1-9 must be between 0 and 9' in errors

    def test_too_many_marks(self):
        """Test strikes + spares above 9 is rejected."""
        errors = validate_game_fields(150, 6, 4, '72')
        assert errors == ['Strikes + spares cannot exceed 9 frames']

    def test_incomplete_tenth_frame(self):
        """Test a still-typing notation blocks submission."""
        errors = validate_game_fields(150, 3, 3, 'X9')
        assert len(errors) == 1
        assert 'Third ball' in errors[0]

    def test_invalid_tenth_frame(self):
        """Test an impossible notation reports its reason."""
        errors = validate_game_fields(150, 3, 3, 'X/')
        assert len(errors) == 1
        assert 'spare' in errors[0].lower()

    def test_empty_tenth_frame(self):
        """Test the 10th frame is required."""
        assert '10th frame notation is required' in validate_game_fields(150, 3, 3, '')


class TestGameSanity:
    """Tests for stored game sanity warnings."""

    def test_normal_game(self, make_game):
        """Test an ordinary game has no warnings."""
        assert validate_game(make_game()) == []

    def test_above_perfect(self, make_game):
        """Test scores above 300 are flagged."""
        warnings = validate_game(make_game(total_score=320, id='g1'))
        assert len(warnings) == 1
        assert 'g1 scored 320' in warnings[0]

    def test_fake_perfect_game(self, make_game):
        """Test a 300 without all strikes is flagged."""
        warnings = validate_game(make_game(total_score=300, strike_count=8, spare_count=1))
        assert len(warnings) == 1
        assert 'not a perfect game' in warnings[0]

    def test_real_perfect_game(self, make_game):
        """Test a true 300 is fine."""
        game = make_game(total_score=300, strike_count=9, spare_count=0, tenth_frame='XXX')
        assert validate_game(game) == []

    def test_nine_strikes_low_score(self, make_game):
        """Test nine strikes can't score under 240."""
        game = make_game(total_score=200, strike_count=9, spare_count=0, tenth_frame='--')
        warnings = validate_game(game)
        assert len(warnings) == 1
        assert '9 strikes' in warnings[0]

    def test_all_games(self, make_game):
        """Test batch validation reports duplicates and warnings."""
        games = [
            make_game(id='g1'),
            make_game(id='g1'),
            make_game(id='g2', total_score=350),
        ]
        errors, warnings = validate_all_games(games)
        assert errors == ['Duplicate game id: g1']
        assert len(warnings) == 1


class TestExpenseValidation:
    """Tests for expense sanity checks."""

    def test_valid_equal_expense(self):
        """Test a simple equal split has no warnings."""
        expense = Expense(amount=30, payer_id='A', participant_ids=['A', 'B', 'C'])
        assert validate_expense(expense, ['A', 'B', 'C']) == []

    def test_custom_split_mismatch(self):
        """Test custom amounts that don't add up are flagged."""
        expense = Expense(
            name='Lane fee',
            amount=50,
            payer_id='B',
            participant_ids=['A', 'C'],
            split_method=SplitMethod.FIXED_AMOUNTS,
            amount_by_participant={'A': 20, 'C': 25},
        )
        warnings = validate_expense(expense)
        assert warnings == ['Lane fee custom split (45.00) != amount (50.00)']

    def test_counts_for_non_participants(self):
        """Test game counts for people outside the split are flagged."""
        expense = Expense(
            amount=30,
            payer_id='A',
            participant_ids=['A', 'B'],
            split_method=SplitMethod.WEIGHTED_BY_COUNT,
            count_by_participant={'A': 2, 'B': 1, 'Z': 1},
        )
        warnings = validate_expense(expense)
        assert len(warnings) == 1
        assert 'Z' in warnings[0]

    def test_unknown_participants(self):
        """Test payer and participants outside the roster are flagged."""
        expense = Expense(amount=30, payer_id='Q', participant_ids=['A', 'R'])
        warnings = validate_expense(expense, ['A', 'B'])
        assert len(warnings) == 2
        assert 'unknown participant Q' in warnings[0]
        assert 'R' in warnings[1]

    def test_all_expenses(self):
        """Test batch validation reports duplicate ids."""
        expenses = [
            Expense(id='e1', amount=10, payer_id='A', participant_ids=['A', 'B']),
            Expense(id='e1', amount=20, payer_id='B', participant_ids=['A', 'B']),
        ]
        errors, warnings = validate_all_expenses(expenses, ['A', 'B'])
        assert errors == ['Duplicate expense id: e1']
        assert warnings == []


class TestLedgerValidation:
    """Tests for validate_ledger."""

    def test_balanced(self):
        """Test balances summing to zero pass."""
        assert validate_ledger({'A': 20.0, 'B': -10.0, 'C': -10.0}) == []

    def test_unbalanced(self):
        """Test balances that don't net out are flagged."""
        assert validate_ledger({'B': 50.0, 'A': -20.0, 'C': -25.0}) == [
            'Balances sum to 5.00 instead of 0.00'
        ]
