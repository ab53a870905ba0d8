from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_STORE_KEY = "bigbrain:data"


@dataclass(frozen=True)
class StorageConfig:
    backend: str = "redis"
    url: str = "redis://localhost:6379/0"
    key: str = DEFAULT_STORE_KEY


@dataclass(frozen=True)
class IdConfig:
    session_id_limit: int = 1_000_000
    player_id_length: int = 8
    max_attempts: int = 64


@dataclass(frozen=True)
class PlayConfig:
    allow_unknown_players: bool = True


@dataclass(frozen=True)
class EngineConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    ids: IdConfig = field(default_factory=IdConfig)
    play: PlayConfig = field(default_factory=PlayConfig)
    log_level: str = "INFO"


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_config(root: Path) -> EngineConfig:
    raw = load_yaml(root / "config" / "engine.yaml")
    storage = dict(raw.get("storage", {}) or {})
    if os.environ.get("QUIZENGINE_REDIS_URL"):
        storage["url"] = os.environ["QUIZENGINE_REDIS_URL"]
    if os.environ.get("QUIZENGINE_STORAGE_BACKEND"):
        storage["backend"] = os.environ["QUIZENGINE_STORAGE_BACKEND"]
    return EngineConfig(
        storage=StorageConfig(**storage),
        ids=IdConfig(**(raw.get("ids", {}) or {})),
        play=PlayConfig(**(raw.get("play", {}) or {})),
        log_level=str((raw.get("logging", {}) or {}).get("level", "INFO")).upper(),
    )


def configure_logging(config: EngineConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
