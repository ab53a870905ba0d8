from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .config import PlayConfig
from .ids import IdGenerator
from .models import Account, Game, Session, Snapshot
from .serializer import WriteSerializer
from .storage import DurableStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DomainState:
    def __init__(
        self,
        store: DurableStore,
        serializer: Optional[WriteSerializer] = None,
        ids: Optional[IdGenerator] = None,
        clock: Callable[[], datetime] = utc_now,
        play: Optional[PlayConfig] = None,
    ) -> None:
        self.store = store
        self.serializer = serializer or WriteSerializer()
        self.ids = ids or IdGenerator()
        self.clock = clock
        self.play = play or PlayConfig()
        self.accounts: Dict[str, Account] = {}
        self.games: Dict[str, Game] = {}
        self.sessions: Dict[int, Session] = {}

    @classmethod
    async def hydrate(cls, store: DurableStore, **kwargs) -> "DomainState":
        state = cls(store, **kwargs)
        snapshot = await store.load()
        if snapshot is None:
            logger.warning(f"No snapshot found under {store.key}, initializing new state")
            await state.flush()
            return state
        state.accounts = dict(snapshot.accounts)
        state.games = dict(snapshot.games)
        state.sessions = dict(snapshot.sessions)
        logger.info(
            f"Loaded {len(state.accounts)} accounts, {len(state.games)} games, "
            f"{len(state.sessions)} sessions from {store.key}"
        )
        return state

    def snapshot(self) -> Snapshot:
        return Snapshot(accounts=self.accounts, games=self.games, sessions=self.sessions).model_copy(deep=True)

    async def flush(self) -> None:
        snapshot = self.snapshot()
        await self.serializer.run(lambda: self.store.store(snapshot))
