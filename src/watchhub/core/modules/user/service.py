from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from watchhub.core.core import Service
from watchhub.core.modules.user.models import User, UserProfile
from watchhub.errors import ConflictError, NotFoundError
from watchhub.utils import now

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages user records keyed by public key."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        await self._collection.create_index([("public_key", 1)], unique=True)

    async def get_user(self, user_id: UUID) -> User:
        user = User.from_mongo(await self._collection.find_one({"_id": user_id}))
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user_by_public_key(self, public_key: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"public_key": public_key}))

    async def create_user(self, public_key: str, namespace: str, profile: UserProfile) -> User:
        """Create a user for a public key.

        The existence check only short-circuits the common case; the unique
        index decides when two registrations race.
        """
        if await self.find_user_by_public_key(public_key) is not None:
            raise ConflictError("A user with this public key already exists")

        created_at = now()
        user = User(
            namespace=namespace,
            public_key=public_key,
            profile=profile,
            permissions=[],
            created_at=created_at,
            last_logged_in=created_at,
        )
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError("A user with this public key already exists") from e

        logger.info("user_registered", user_id=str(user.id), namespace=namespace)
        return user

    async def touch_last_logged_in(self, user_id: UUID) -> User:
        document = await self._collection.find_one_and_update(
            {"_id": user_id},
            {"$set": {"last_logged_in": now()}},
            return_document=ReturnDocument.AFTER,
        )
        user = User.from_mongo(document)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def update_profile(self, user_id: UUID, profile: UserProfile) -> User:
        document = await self._collection.find_one_and_update(
            {"_id": user_id},
            {"$set": {"profile": profile.model_dump()}},
            return_document=ReturnDocument.AFTER,
        )
        user = User.from_mongo(document)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user
