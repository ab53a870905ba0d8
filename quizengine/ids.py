from __future__ import annotations

import random
import string
import uuid
from typing import Callable, Container, Optional, TypeVar

from .config import IdConfig
from .errors import IdentifierExhausted

T = TypeVar("T")

PLAYER_ID_ALPHABET = string.ascii_lowercase + string.digits


class IdGenerator:
    def __init__(self, config: Optional[IdConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or IdConfig()
        self.rng = rng or random.Random()

    def session_id(self, existing: Container[int]) -> int:
        return self._draw(lambda: self.rng.randrange(self.config.session_id_limit), existing, "session")

    def player_id(self, existing: Container[str]) -> str:
        length = self.config.player_id_length
        return self._draw(lambda: "".join(self.rng.choices(PLAYER_ID_ALPHABET, k=length)), existing, "player")

    def game_id(self, existing: Container[str]) -> str:
        return self._draw(lambda: uuid.UUID(int=self.rng.getrandbits(128), version=4).hex, existing, "game")

    def _draw(self, make: Callable[[], T], existing: Container[T], kind: str) -> T:
        for _ in range(self.config.max_attempts):
            candidate = make()
            if candidate not in existing:
                return candidate
        raise IdentifierExhausted(
            f"Could not generate a unique {kind} id after {self.config.max_attempts} attempts"
        )
