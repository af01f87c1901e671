"""Generic key-value persistence for profiles and chat histories.

Values are stored as JSON text, so dicts, lists, strings and numbers round-trip
structurally. Semantics are deliberately thin: last write wins, no transactions,
no versioning, no TTL. `get` returns None for an absent key; every underlying
I/O or serialization failure raises StoreError, so callers can tell "absent"
from "failure".

Backends:
- InMemoryKVStore: process-local dict (dev, tests, STORE_BACKEND=memory)
- SqlKVStore: one SQLAlchemy table, SQLite by default or any DATABASE_URL
"""

import json
import os
import threading
from contextlib import nullcontext
from typing import Any, Optional

from sqlalchemy import Column, String, Text, create_engine, make_url, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from chefmate.utils.config import Config
from chefmate.utils.errors import StoreError
from chefmate.utils.logger import logger

PROFILE_PREFIX = "profile"
CHAT_PREFIX = "chat"


def namespaced_key(prefix: str, user_id: str) -> str:
    """Render a namespaced key, e.g. ("chat", "u1") -> "chat_u1"."""
    return f"{prefix}_{user_id}"


def _dumps(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise StoreError(f"Value for key '{key}' is not JSON-serializable: {e}") from e


def _loads(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise StoreError(f"Stored value for key '{key}' is corrupt: {e}") from e


class KVStore:
    """Interface shared by all backends."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources (no-op by default)."""


class InMemoryKVStore(KVStore):
    """Dict-backed store holding serialized JSON, safe to call from worker threads."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        return _loads(key, raw)

    def set(self, key: str, value: Any) -> None:
        raw = _dumps(key, value)
        with self._lock:
            self._data[key] = raw


Base = declarative_base()


class KVEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)


def _engine_options(database_url: str) -> dict:
    """In-memory SQLite lives in one connection, shared across worker threads."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


class SqlKVStore(KVStore):
    """SQLAlchemy-backed store: one row per key, value kept as JSON text."""

    def __init__(self, database_url: str) -> None:
        try:
            options = _engine_options(database_url)
            self.engine = create_engine(database_url, future=True, **options)
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to open key-value store: {e}") from e
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        # One shared connection: sessions must not interleave
        self._guard = threading.Lock() if options else nullcontext()

    def get(self, key: str) -> Optional[Any]:
        try:
            with self._guard, self.SessionLocal() as session:
                raw = session.execute(select(KVEntry.value).where(KVEntry.key == key)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read key '{key}': {e}") from e
        if raw is None:
            return None
        return _loads(key, raw)

    def set(self, key: str, value: Any) -> None:
        raw = _dumps(key, value)
        try:
            with self._guard, self.SessionLocal() as session:
                # merge() upserts by primary key
                session.merge(KVEntry(key=key, value=raw))
                session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to write key '{key}': {e}") from e

    def close(self) -> None:
        self.engine.dispose()


def create_kv_store(config: Config) -> KVStore:
    """Build the backend selected by STORE_BACKEND.

    Args:
        config: Application configuration.

    Returns:
        InMemoryKVStore for "memory", otherwise SqlKVStore on config.database_url.
    """
    if config.STORE_BACKEND == "memory":
        logger.info("Using in-memory key-value store (data is lost on restart)")
        return InMemoryKVStore()

    url = config.database_url
    if url.startswith("sqlite:///"):
        # SQLite needs the parent directory to exist
        db_dir = os.path.dirname(url[len("sqlite:///"):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        logger.info(f"Using SQLite key-value store: {url[len('sqlite:///'):]}")
    else:
        logger.info(f"Using SQL key-value store: {url.split('@')[1] if '@' in url else '...'}")
    return SqlKVStore(url)
