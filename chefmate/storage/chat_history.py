"""Append-only chat history per user, stored under `chat_<userId>`.

The whole history is one KV value (a JSON array of messages), so every append
is a read-modify-write of that array. Appends for the same user are serialized
with a per-user asyncio.Lock; without it two overlapping appends could both
read the old array and the slower write would drop the faster one's message.
Appends for different users use different locks and never wait on each other.
A lock is dropped once no append holds or waits on it.

Message ids are time-derived (epoch milliseconds) but bumped past the last id
in the history: id = max(now_ms, last_id + 1). Computed inside the lock, this
keeps ids strictly increasing and unique per user even for messages created
within the same millisecond.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError as SchemaError

from chefmate.models.models import Message
from chefmate.storage.kv_store import CHAT_PREFIX, KVStore, namespaced_key
from chefmate.utils.errors import StoreError, ValidationError
from chefmate.utils.logger import logger

VALID_ROLES = ("user", "assistant")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class ChatHistoryStore:
    """Per-user chat history backed by a KVStore.

    Args:
        store: Key-value backend.
        max_messages: Retention limit per user; oldest messages are dropped on
            append once exceeded. 0 keeps everything.
    """

    def __init__(self, store: KVStore, max_messages: int = 0) -> None:
        self.store = store
        self.max_messages = max_messages
        # user_id -> (lock, number of appends holding or waiting on it)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _user_lock(self, user_id: str):
        lock, users = self._locks.get(user_id, (None, 0))
        lock = lock or asyncio.Lock()
        self._locks[user_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[user_id]
            if users == 1:
                del self._locks[user_id]
            else:
                self._locks[user_id] = (lock, users - 1)

    async def append_message(
        self,
        user_id: Optional[str],
        text: Optional[str],
        role: Optional[str],
        recipe: Optional[Any] = None,
    ) -> Message:
        """Append one message to a user's history and return it.

        Raises:
            ValidationError: If user_id, text or role is missing, or role is not
                "user"/"assistant". Nothing is written.
            StoreError: If the history cannot be read or written.
        """
        if not user_id or not text or not role:
            raise ValidationError("Missing required fields")
        if role not in VALID_ROLES:
            raise ValidationError(f"Invalid message type '{role}', expected one of {', '.join(VALID_ROLES)}")

        key = namespaced_key(CHAT_PREFIX, user_id)
        async with self._user_lock(user_id):
            history = await self._read(key)

            last_id = history[-1].id if history else 0
            message = Message(
                id=max(_now_ms(), last_id + 1),
                text=text,
                role=role,
                timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                recipe=recipe,
            )
            history.append(message)

            if self.max_messages and len(history) > self.max_messages:
                dropped = len(history) - self.max_messages
                history = history[dropped:]
                logger.debug(
                    f"Retention: dropped {dropped} oldest message(s) for user_id={user_id}", extra={"user_id": user_id}
                )

            payload = [item.model_dump() for item in history]
            await asyncio.to_thread(self.store.set, key, payload)

        logger.debug(f"Appended {role} message id={message.id} for user_id={user_id}", extra={"user_id": user_id})
        return message

    async def load_history(self, user_id: str) -> list[Message]:
        """Load a user's full history in append order.

        Returns an empty list if the user has no history. A store failure on
        this read path is logged and treated as an empty history.
        """
        if not user_id:
            return []
        try:
            return await self._read(namespaced_key(CHAT_PREFIX, user_id))
        except StoreError as e:
            logger.warning(
                f"Failed to load chat history for user_id={user_id}, returning empty history: {e}",
                extra={"user_id": user_id},
            )
            return []

    async def _read(self, key: str) -> list[Message]:
        data = await asyncio.to_thread(self.store.get, key)
        if not data:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Stored history under '{key}' is not a list")
        try:
            return [Message.model_validate(item) for item in data]
        except SchemaError as e:
            raise StoreError(f"Stored history under '{key}' is invalid: {e}") from e
