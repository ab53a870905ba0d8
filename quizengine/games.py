from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .errors import AlreadyExists, Forbidden, InvalidPatch
from .models import Game, Question
from .state import DomainState

IMMUTABLE_FIELDS = ("game_id", "owner", "active")


async def create_game(
    state: DomainState,
    email: str,
    name: str,
    questions: Iterable[Question] = (),
    game_id: Optional[str] = None,
) -> Game:
    if email not in state.accounts:
        raise Forbidden("Unknown account")
    if game_id is None:
        game_id = state.ids.game_id(state.games)
    elif game_id in state.games:
        raise AlreadyExists("Game already exists")
    game = Game(game_id=game_id, owner=email, name=name, questions=list(questions))
    state.games[game_id] = game
    await state.flush()
    return game.model_copy(deep=True)


def list_games_owned_by(state: DomainState, email: str) -> List[Game]:
    return [game.model_copy(deep=True) for game in state.games.values() if game.owner == email]


def get_game(state: DomainState, email: str, game_id: str) -> Game:
    assert_owns_game(state, email, game_id)
    return state.games[game_id].model_copy(deep=True)


async def update_game(state: DomainState, email: str, game_id: str, patch: Mapping[str, Any]) -> Game:
    assert_owns_game(state, email, game_id)
    game = state.games[game_id]
    for field_name in IMMUTABLE_FIELDS:
        if field_name in patch and patch[field_name] != getattr(game, field_name):
            raise InvalidPatch(f"Cannot change {field_name}")
    if "questions" in patch and has_started_session(state, game_id):
        raise InvalidPatch("Cannot change questions once a session has started")
    merged: Dict[str, Any] = {**game.model_dump(), **patch}
    try:
        updated = Game.model_validate(merged)
    except ValidationError as exc:
        raise InvalidPatch(f"Invalid game data: {exc.error_count()} error(s)") from exc
    state.games[game_id] = updated
    await state.flush()
    return updated.model_copy(deep=True)


def assert_owns_game(state: DomainState, email: str, game_id: str) -> None:
    game = state.games.get(game_id)
    if game is None or game.owner != email:
        raise Forbidden("Not your game")


def assert_owns_session(state: DomainState, email: str, session_id: int) -> None:
    session = state.sessions.get(session_id)
    game = state.games.get(session.game_id) if session is not None else None
    if game is None or game.owner != email:
        raise Forbidden("Not your session")


def has_started_session(state: DomainState, game_id: str) -> bool:
    return any(session.game_id == game_id and session.is_started for session in state.sessions.values())
