"""Profile persistence: one UserProfile record per user under `profile_<userId>`."""

import asyncio
from typing import Optional

from pydantic import ValidationError as SchemaError

from chefmate.models.models import UserProfile
from chefmate.storage.kv_store import PROFILE_PREFIX, KVStore, namespaced_key
from chefmate.utils.errors import NotFoundError, StoreError, ValidationError
from chefmate.utils.logger import logger


class ProfileStore:
    """Thin wrapper over a KVStore for user profiles."""

    def __init__(self, store: KVStore) -> None:
        self.store = store

    async def save_profile(self, user_id: Optional[str], profile: Optional[UserProfile]) -> None:
        """Persist a profile, replacing any previous one.

        Raises:
            ValidationError: If user_id or profile is missing (nothing is written).
            StoreError: If the write fails.
        """
        if not user_id or not str(user_id).strip() or profile is None:
            raise ValidationError("Missing userId or profile data")

        key = namespaced_key(PROFILE_PREFIX, user_id)
        await asyncio.to_thread(self.store.set, key, profile.to_storage())
        logger.info(f"Saved profile for user_id={user_id}", extra={"user_id": user_id})

    async def load_profile(self, user_id: str) -> UserProfile:
        """Load a user's profile.

        Raises:
            NotFoundError: If the user has no profile yet (expected for new users).
            StoreError: If the read fails or the stored record is unreadable.
        """
        if not user_id:
            raise NotFoundError("Profile not found")

        data = await asyncio.to_thread(self.store.get, namespaced_key(PROFILE_PREFIX, user_id))
        if not data:
            logger.debug(f"No profile stored for user_id={user_id}", extra={"user_id": user_id})
            raise NotFoundError("Profile not found")

        try:
            return UserProfile.model_validate(data)
        except SchemaError as e:
            raise StoreError(f"Stored profile for user_id={user_id} is invalid: {e}") from e
