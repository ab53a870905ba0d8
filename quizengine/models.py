from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GameMutation(str, Enum):
    START = "START"
    ADVANCE = "ADVANCE"
    END = "END"


class Account(BaseModel):
    password: str
    name: str


class AnswerOption(BaseModel):
    text: str
    correct: bool = False


class Question(BaseModel):
    question_id: str
    text: str
    duration: int = Field(gt=0)
    answers: List[AnswerOption] = Field(default_factory=list)


class Game(BaseModel):
    model_config = ConfigDict(extra="allow")

    game_id: str
    owner: str
    name: str = ""
    questions: List[Question] = Field(default_factory=list)
    active: Optional[int] = None


class Player(BaseModel):
    name: Optional[str] = None
    answers: Dict[int, List[int]] = Field(default_factory=dict)
    score: int = 0


class Session(BaseModel):
    game_id: str
    position: int = -1
    iso_time_last_question_started: Optional[datetime] = None
    players: Dict[str, Player] = Field(default_factory=dict)

    @property
    def is_started(self) -> bool:
        return self.position != -1

    def is_ended(self, question_count: int) -> bool:
        return self.position >= question_count

    def is_active(self, question_count: int) -> bool:
        return 0 <= self.position < question_count


class Snapshot(BaseModel):
    accounts: Dict[str, Account] = Field(default_factory=dict)
    games: Dict[str, Game] = Field(default_factory=dict)
    sessions: Dict[int, Session] = Field(default_factory=dict)


class QuestionView(BaseModel):
    question_id: str
    text: str
    duration: int
    answers: List[str]
    started_at: Optional[datetime] = None


class SessionStatus(BaseModel):
    started: bool
    ended: bool


class SessionSummary(BaseModel):
    session_id: int
    game_id: str
    position: int
    question_count: int
    started: bool
    ended: bool
    players: List[str] = Field(default_factory=list)


class MutationResult(BaseModel):
    status: str
    session_id: int
    position: int
