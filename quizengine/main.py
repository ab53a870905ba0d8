from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import accounts, games, sessions
from .config import configure_logging, load_config
from .errors import AccessError, EngineError, InputError, PersistenceError
from .ids import IdGenerator
from .models import Game, MutationResult, Player, Question, QuestionView, SessionStatus, SessionSummary
from .state import DomainState
from .storage import build_store

root_path = Path(__file__).resolve().parent.parent
config = load_config(root_path)


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


class CreateGameRequest(BaseModel):
    name: str
    game_id: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)


class GamesResponse(BaseModel):
    games: List[Game]


class MutateRequest(BaseModel):
    mutation_type: str


class JoinRequest(BaseModel):
    name: str


class JoinResponse(BaseModel):
    player_id: str


class AnswerRequest(BaseModel):
    answer_ids: List[int]


def error_response(status_code: int, exc: EngineError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": exc.message, "code": exc.code.value})


def create_app(state: Optional[DomainState] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if state is not None:
            app.state.domain = state
            yield
            return
        configure_logging(config)
        store = build_store(config.storage)
        try:
            app.state.domain = await DomainState.hydrate(store, ids=IdGenerator(config.ids), play=config.play)
            yield
        finally:
            await store.close()

    app = FastAPI(title="Quiz Engine", lifespan=lifespan)
    if state is not None:
        app.state.domain = state

    @app.exception_handler(InputError)
    async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
        return error_response(400, exc)

    @app.exception_handler(AccessError)
    async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
        return error_response(403, exc)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        return error_response(503, exc)

    register_routes(app)
    return app


async def get_domain(request: Request) -> DomainState:
    return request.app.state.domain


async def current_admin(
    state: DomainState = Depends(get_domain),
    authorization: Optional[str] = Header(default=None),
) -> str:
    return accounts.resolve_identity(state, authorization)


def register_routes(app: FastAPI) -> None:
    @app.post("/admin/auth/register", response_model=TokenResponse)
    async def api_register(request: RegisterRequest, state: DomainState = Depends(get_domain)) -> TokenResponse:
        await accounts.register(state, request.email, request.password, request.name)
        return TokenResponse(token=accounts.issue_token(state, request.email))

    @app.post("/admin/auth/login", response_model=TokenResponse)
    async def api_login(request: LoginRequest, state: DomainState = Depends(get_domain)) -> TokenResponse:
        return TokenResponse(token=accounts.login(state, request.email, request.password))

    @app.post("/admin/auth/logout")
    async def api_logout(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
        accounts.logout(authorization)
        return {}

    @app.get("/admin/games", response_model=GamesResponse)
    async def api_list_games(
        email: str = Depends(current_admin), state: DomainState = Depends(get_domain)
    ) -> GamesResponse:
        return GamesResponse(games=games.list_games_owned_by(state, email))

    @app.post("/admin/games", response_model=Game)
    async def api_create_game(
        request: CreateGameRequest,
        email: str = Depends(current_admin),
        state: DomainState = Depends(get_domain),
    ) -> Game:
        return await games.create_game(state, email, request.name, request.questions, request.game_id)

    @app.get("/admin/games/{game_id}", response_model=Game)
    async def api_get_game(
        game_id: str, email: str = Depends(current_admin), state: DomainState = Depends(get_domain)
    ) -> Game:
        return games.get_game(state, email, game_id)

    @app.patch("/admin/games/{game_id}", response_model=Game)
    async def api_update_game(
        game_id: str,
        patch: Dict[str, Any],
        email: str = Depends(current_admin),
        state: DomainState = Depends(get_domain),
    ) -> Game:
        return await games.update_game(state, email, game_id, patch)

    @app.post("/admin/games/{game_id}/mutate", response_model=MutationResult)
    async def api_mutate_game(
        game_id: str,
        request: MutateRequest,
        email: str = Depends(current_admin),
        state: DomainState = Depends(get_domain),
    ) -> MutationResult:
        games.assert_owns_game(state, email, game_id)
        return await sessions.mutate_game(state, game_id, request.mutation_type)

    @app.get("/admin/session/{session_id}/status", response_model=SessionSummary)
    async def api_admin_session_status(
        session_id: int, email: str = Depends(current_admin), state: DomainState = Depends(get_domain)
    ) -> SessionSummary:
        games.assert_owns_session(state, email, session_id)
        return sessions.session_summary(state, session_id)

    @app.get("/admin/session/{session_id}/results", response_model=Dict[str, Player])
    async def api_admin_session_results(
        session_id: int, email: str = Depends(current_admin), state: DomainState = Depends(get_domain)
    ) -> Dict[str, Player]:
        games.assert_owns_session(state, email, session_id)
        return sessions.session_results(state, session_id)

    @app.post("/play/join/{session_id}", response_model=JoinResponse)
    async def api_join(session_id: int, request: JoinRequest, state: DomainState = Depends(get_domain)) -> JoinResponse:
        return JoinResponse(player_id=await sessions.join_session(state, session_id, request.name))

    @app.get("/play/{session_id}/{player_id}/status", response_model=SessionStatus)
    async def api_play_status(session_id: int, player_id: str, state: DomainState = Depends(get_domain)) -> SessionStatus:
        return sessions.session_status(state, session_id, player_id)

    @app.get("/play/{session_id}/{player_id}/question", response_model=Optional[QuestionView])
    async def api_play_question(
        session_id: int, player_id: str, state: DomainState = Depends(get_domain)
    ) -> Optional[QuestionView]:
        return sessions.get_current_question(state, session_id, player_id)

    @app.put("/play/{session_id}/{player_id}/answer")
    async def api_play_submit(
        session_id: int, player_id: str, request: AnswerRequest, state: DomainState = Depends(get_domain)
    ) -> Dict[str, Any]:
        await sessions.submit_answers(state, session_id, player_id, request.answer_ids)
        return {}

    @app.get("/play/{session_id}/{player_id}/answer")
    async def api_play_answers(
        session_id: int, player_id: str, state: DomainState = Depends(get_domain)
    ) -> Dict[int, List[int]]:
        return sessions.get_answers(state, session_id, player_id)

    @app.get("/play/{session_id}/{player_id}/results", response_model=Dict[str, Player])
    async def api_play_results(session_id: int, player_id: str, state: DomainState = Depends(get_domain)) -> Dict[str, Player]:
        return sessions.session_results(state, session_id)


app = create_app()
