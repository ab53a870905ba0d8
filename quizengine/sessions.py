from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Union

from .errors import InvalidGame, InvalidMutation, InvalidSession, SessionNotActive, UnknownPlayer
from .models import (
    Game,
    GameMutation,
    MutationResult,
    Player,
    QuestionView,
    Session,
    SessionStatus,
    SessionSummary,
)
from .state import DomainState


def get_session(state: DomainState, session_id: int) -> Session:
    session = state.sessions.get(session_id)
    if session is None:
        raise InvalidSession()
    return session


def session_and_game(state: DomainState, session_id: int) -> Tuple[Session, Game]:
    session = get_session(state, session_id)
    game = state.games.get(session.game_id)
    if game is None:
        raise InvalidGame()
    return session, game


async def start_game(state: DomainState, game_id: str) -> int:
    game = state.games.get(game_id)
    if game is None:
        raise InvalidGame()
    session_id = state.ids.session_id(state.sessions)
    state.sessions[session_id] = Session(game_id=game_id)
    game.active = session_id
    await state.flush()
    return session_id


async def advance_question(state: DomainState, session_id: int) -> int:
    session, game = session_and_game(state, session_id)
    question_count = len(game.questions)
    if session.is_ended(question_count):
        raise SessionNotActive("Session has already ended")
    session.position += 1
    if session.is_ended(question_count):
        close_session(session_id, session, game)
    else:
        session.iso_time_last_question_started = state.clock()
    await state.flush()
    return session.position


async def end_session(state: DomainState, session_id: int) -> int:
    session, game = session_and_game(state, session_id)
    question_count = len(game.questions)
    if session.is_ended(question_count):
        return session.position
    session.position = question_count
    close_session(session_id, session, game)
    await state.flush()
    return session.position


def close_session(session_id: int, session: Session, game: Game) -> None:
    session.iso_time_last_question_started = None
    if game.active == session_id:
        game.active = None


async def mutate_game(state: DomainState, game_id: str, mutation: Union[GameMutation, str]) -> MutationResult:
    try:
        mutation = GameMutation(mutation)
    except ValueError:
        raise InvalidMutation() from None
    if mutation is GameMutation.START:
        session_id = await start_game(state, game_id)
        return MutationResult(status="started", session_id=session_id, position=-1)

    game = state.games.get(game_id)
    if game is None:
        raise InvalidGame()
    if game.active is None:
        raise SessionNotActive("Game has no active session")
    session_id = game.active
    if mutation is GameMutation.ADVANCE:
        position = await advance_question(state, session_id)
        return MutationResult(status="advanced", session_id=session_id, position=position)
    position = await end_session(state, session_id)
    return MutationResult(status="ended", session_id=session_id, position=position)


async def join_session(state: DomainState, session_id: int, name: str) -> str:
    session = get_session(state, session_id)
    player_id = state.ids.player_id(session.players)
    session.players[player_id] = Player(name=name)
    await state.flush()
    return player_id


def get_current_question(state: DomainState, session_id: int, player_id: Optional[str] = None) -> Optional[QuestionView]:
    session, game = session_and_game(state, session_id)
    if not session.is_started:
        return None
    if session.is_ended(len(game.questions)):
        raise SessionNotActive("Session has ended")
    question = game.questions[session.position]
    return QuestionView(
        question_id=question.question_id,
        text=question.text,
        duration=question.duration,
        answers=[answer.text for answer in question.answers],
        started_at=session.iso_time_last_question_started,
    )


async def submit_answers(state: DomainState, session_id: int, player_id: str, answer_ids: Sequence[int]) -> None:
    if session_id not in state.sessions:
        raise SessionNotActive()
    session, game = session_and_game(state, session_id)
    if not session.is_active(len(game.questions)):
        raise SessionNotActive()
    player = session.players.get(player_id)
    if player is None:
        if not state.play.allow_unknown_players:
            raise UnknownPlayer()
        player = session.players[player_id] = Player()
    player.answers[session.position] = list(answer_ids)
    await state.flush()


def get_answers(state: DomainState, session_id: int, player_id: str) -> Dict[int, List[int]]:
    session = state.sessions.get(session_id)
    if session is None or player_id not in session.players:
        return {}
    return {position: list(ids) for position, ids in session.players[player_id].answers.items()}


def session_status(state: DomainState, session_id: int, player_id: Optional[str] = None) -> SessionStatus:
    session, game = session_and_game(state, session_id)
    return SessionStatus(started=session.is_started, ended=session.is_ended(len(game.questions)))


def session_results(state: DomainState, session_id: int) -> Dict[str, Player]:
    session = get_session(state, session_id)
    return {player_id: player.model_copy(deep=True) for player_id, player in session.players.items()}


def session_summary(state: DomainState, session_id: int) -> SessionSummary:
    session, game = session_and_game(state, session_id)
    question_count = len(game.questions)
    return SessionSummary(
        session_id=session_id,
        game_id=session.game_id,
        position=session.position,
        question_count=question_count,
        started=session.is_started,
        ended=session.is_ended(question_count),
        players=list(session.players),
    )
