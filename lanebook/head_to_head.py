"""Head-to-head comparison of two players' statistics."""

from .constants import TIE_TOLERANCE
from .models import ComparisonMetric, HeadToHead, Stats

# (id, label, stats attribute, counts toward the tally)
METRICS = [
    ('games_played', 'Games Played', 'games_played', False),
    ('average', 'Average', 'average_score', True),
    ('high', 'High Game', 'ceiling', True),
    ('best_low', 'Best Low Game', 'floor', True),
    ('strike', 'Strike %', 'strike_percentage', True),
    ('spare', 'Spare %', 'spare_percentage', True),
    ('recent_10', 'Last 10 Average', 'recent_average', True),
    ('tenth_frame', '10th Frame Average', 'average_tenth_frame', True),
    ('games_200', 'Games Above 200', 'games_above_200', True),
]


def metric_winner(a: float, b: float, inverse: bool = False) -> str:
    """'a', 'b' or 'tie'. With ``inverse`` the lower value wins."""
    if abs(a - b) < TIE_TOLERANCE:
        return 'tie'
    if inverse:
        return 'a' if a < b else 'b'
    return 'a' if a > b else 'b'


def compare_players(stats_a: Stats, stats_b: Stats) -> HeadToHead:
    """
    Compare two players metric by metric.

    Higher is better for every metric, including the lowest game. Games
    played is shown but does not score.
    """
    result = HeadToHead()
    for metric_id, label, attribute, counts in METRICS:
        a_value = getattr(stats_a, attribute)
        b_value = getattr(stats_b, attribute)
        winner = metric_winner(a_value, b_value)
        result.metrics.append(
            ComparisonMetric(
                id=metric_id,
                label=label,
                a_value=a_value,
                b_value=b_value,
                winner=winner,
                counts_for_score=counts,
            )
        )
        if not counts:
            continue
        if winner == 'a':
            result.a_wins += 1
        elif winner == 'b':
            result.b_wins += 1
        else:
            result.ties += 1
    return result
