"""Shared fixtures for lanebook tests."""

from datetime import date, datetime, timedelta

import pytest

from lanebook.schemas import GameRecord, Player


@pytest.fixture
def make_game():
    """Factory for GameRecord with sensible defaults."""

    def _make_game(
        total_score=150,
        strike_count=3,
        spare_count=3,
        tenth_frame='72',
        player_id='p1',
        day=1,
        date_played=None,
        **kwargs,
    ):
        if date_played is None:
            date_played = date(2025, 1, 1) + timedelta(days=day - 1)
        return GameRecord(
            player_id=player_id,
            date_played=date_played,
            total_score=total_score,
            strike_count=strike_count,
            spare_count=spare_count,
            tenth_frame=tenth_frame,
            **kwargs,
        )

    return _make_game


@pytest.fixture
def roster():
    """Three active players and one deactivated player."""
    return [
        Player(id='p1', name='Alice'),
        Player(id='p2', name='Bruno'),
        Player(id='p3', name='Chen'),
        Player(id='p4', name='Dana', deactivated_at=datetime(2025, 3, 1)),
    ]
