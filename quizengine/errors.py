from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    ENGINE_ERROR = "ENGINE_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    ACCESS_DENIED = "ACCESS_DENIED"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_SESSION = "INVALID_SESSION"
    INVALID_GAME = "INVALID_GAME"
    SESSION_NOT_ACTIVE = "SESSION_NOT_ACTIVE"
    INVALID_MUTATION = "INVALID_MUTATION"
    INVALID_PATCH = "INVALID_PATCH"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    IDENTIFIER_EXHAUSTED = "IDENTIFIER_EXHAUSTED"


class EngineError(Exception):
    code: ErrorCode = ErrorCode.ENGINE_ERROR
    default_message = "Engine error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InputError(EngineError):
    code = ErrorCode.INVALID_INPUT
    default_message = "Invalid input"


class AccessError(EngineError):
    code = ErrorCode.ACCESS_DENIED
    default_message = "Access denied"


class AlreadyExists(InputError):
    code = ErrorCode.ALREADY_EXISTS
    default_message = "Already exists"


class InvalidSession(InputError):
    code = ErrorCode.INVALID_SESSION
    default_message = "Session not found"


class InvalidGame(InputError):
    code = ErrorCode.INVALID_GAME
    default_message = "Game not found"


class SessionNotActive(InputError):
    code = ErrorCode.SESSION_NOT_ACTIVE
    default_message = "Session not active"


class InvalidMutation(InputError):
    code = ErrorCode.INVALID_MUTATION
    default_message = "Invalid mutation type"


class InvalidPatch(InputError):
    code = ErrorCode.INVALID_PATCH
    default_message = "Invalid game data"


class UnknownPlayer(InputError):
    code = ErrorCode.UNKNOWN_PLAYER
    default_message = "Player not found in session"


class InvalidCredentials(AccessError):
    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid login credentials"


class Unauthenticated(AccessError):
    code = ErrorCode.UNAUTHENTICATED
    default_message = "Not authenticated"


class Forbidden(AccessError):
    code = ErrorCode.FORBIDDEN
    default_message = "Forbidden"


class PersistenceError(EngineError):
    code = ErrorCode.PERSISTENCE_FAILED
    default_message = "Writing to the durable store failed"


class IdentifierExhausted(EngineError):
    code = ErrorCode.IDENTIFIER_EXHAUSTED
    default_message = "Could not generate a unique identifier"
