"""Tests for collision-checked identifier generation."""

import random

import pytest

from quizengine.config import IdConfig
from quizengine.errors import IdentifierExhausted
from quizengine.ids import PLAYER_ID_ALPHABET, IdGenerator


def test_session_id_skips_taken_values():
    ids = IdGenerator(IdConfig(session_id_limit=2, max_attempts=200), rng=random.Random(0))

    assert ids.session_id({0}) == 1
    assert ids.session_id({1}) == 0


def test_session_id_gives_up_when_space_is_full():
    ids = IdGenerator(IdConfig(session_id_limit=1, max_attempts=5), rng=random.Random(0))

    assert ids.session_id(set()) == 0
    with pytest.raises(IdentifierExhausted):
        ids.session_id({0})


def test_player_id_shape():
    ids = IdGenerator(IdConfig(player_id_length=6), rng=random.Random(0))

    player_id = ids.player_id(set())

    assert len(player_id) == 6
    assert set(player_id) <= set(PLAYER_ID_ALPHABET)


def test_game_ids_are_seeded_and_unique():
    first = IdGenerator(rng=random.Random(5)).game_id(set())
    again = IdGenerator(rng=random.Random(5)).game_id(set())
    other = IdGenerator(rng=random.Random(5)).game_id({first})

    assert first == again
    assert other != first
    assert len(first) == 32
