from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure ledger tables register with metadata
from .config import get_settings

SQLITE_PREFIX = "sqlite:///"


def _ensure_sqlite_dir(database_url: str) -> None:
    if not database_url.startswith(SQLITE_PREFIX):
        return
    location = database_url[len(SQLITE_PREFIX):]
    if location and location != ":memory:":
        Path(location).parent.mkdir(parents=True, exist_ok=True)


def create_engine_for_url(database_url: str) -> Engine:
    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        _ensure_sqlite_dir(database_url)
    return create_engine(database_url, echo=False, connect_args=connect_args)


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine_for_url(get_settings().database_url)
    return _engine


def set_engine(new_engine: Optional[Engine]) -> None:
    global _engine
    _engine = new_engine


def init_db() -> None:
    SQLModel.metadata.create_all(get_engine())


def get_session() -> Generator[Session, None, None]:
    with Session(get_engine()) as session:
        yield session
