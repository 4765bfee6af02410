from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from watchhub.core.core import Service
from watchhub.core.modules.session.models import DEVICE_MAX_LENGTH, SESSION_TTL, Session
from watchhub.errors import MissingUserAgentError, ValidationError
from watchhub.utils import now

logger = structlog.get_logger(__name__)


def _check_device(device: str) -> None:
    if not 1 <= len(device) <= DEVICE_MAX_LENGTH:
        raise ValidationError(f"Device name must be between 1 and {DEVICE_MAX_LENGTH} characters")


class SessionService(Service):
    """Stores device sessions and slides their expiry on use.

    Ownership checks for revocation and renaming are the caller's job; this
    service trusts that the mutation was authorized.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user", 1)])
        await self._collection.create_index([("expires_at", 1)])

    async def get_session(self, session_id: UUID) -> Session | None:
        """Return the session if it exists and has not expired.

        Expired and unknown sessions are both None; callers cannot tell them apart.
        """
        session = Session.from_mongo(await self._collection.find_one({"_id": session_id}))
        if session is None or session.is_expired(now()):
            return None
        return session

    async def get_session_and_bump(self, session_id: UUID) -> Session | None:
        """Resolve a live session and restart its 21 day window from now."""
        if await self.get_session(session_id) is None:
            return None

        accessed_at = now()
        # The expiry filter makes the bump conditional, a session that lapsed
        # between the read and the write is not revived.
        document = await self._collection.find_one_and_update(
            {"_id": session_id, "expires_at": {"$gte": accessed_at}},
            {"$set": {"accessed_at": accessed_at, "expires_at": accessed_at + SESSION_TTL}},
            return_document=ReturnDocument.AFTER,
        )
        return Session.from_mongo(document)

    async def make_session(self, user_id: UUID, device: str, user_agent: str | None) -> Session:
        if not user_agent:
            raise MissingUserAgentError
        _check_device(device)

        created_at = now()
        session = Session(
            user=user_id,
            device=device,
            user_agent=user_agent,
            created_at=created_at,
            accessed_at=created_at,
            expires_at=created_at + SESSION_TTL,
        )
        await self._collection.insert_one(session.to_mongo())
        logger.info("session_created", session_id=str(session.id), user_id=str(user_id))
        return session

    async def find_session(self, session_id: UUID) -> Session | None:
        """Raw lookup ignoring expiry, for ownership checks on mutations."""
        return Session.from_mongo(await self._collection.find_one({"_id": session_id}))

    async def get_user_sessions(self, user_id: UUID) -> list[Session]:
        """List the user's sessions that have not expired, oldest first."""
        cursor = self._collection.find({"user": user_id, "expires_at": {"$gte": now()}}).sort("created_at", 1)
        return await Session.list_cursor(cursor)

    async def update_device(self, session_id: UUID, device: str) -> Session | None:
        _check_device(device)
        document = await self._collection.find_one_and_update(
            {"_id": session_id},
            {"$set": {"device": device}},
            return_document=ReturnDocument.AFTER,
        )
        return Session.from_mongo(document)

    async def delete_session(self, session_id: UUID) -> bool:
        result = await self._collection.delete_one({"_id": session_id})
        if result.deleted_count:
            logger.info("session_deleted", session_id=str(session_id))
        return result.deleted_count > 0
