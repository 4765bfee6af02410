import secrets
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from watchhub.core.core import Service
from watchhub.core.crypto import verify_signature
from watchhub.core.modules.challenge.models import CHALLENGE_TTL, ChallengeCode
from watchhub.errors import ChallengeError, ChallengeErrorKind
from watchhub.utils import now

logger = structlog.get_logger(__name__)


class ChallengeService(Service):
    """Issues and consumes single-use challenge codes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("challenge_codes")

    async def on_start(self) -> None:
        await self._collection.create_index([("code", 1)], unique=True)
        await self._collection.create_index([("expires_at", 1)])

    async def create_challenge_code(self, flow: str, auth_type: str) -> ChallengeCode:
        created_at = now()
        challenge = ChallengeCode(
            code=secrets.token_urlsafe(32),
            flow=flow,
            auth_type=auth_type,
            created_at=created_at,
            expires_at=created_at + CHALLENGE_TTL,
        )
        await self._collection.insert_one(challenge.to_mongo())
        logger.debug("challenge_created", flow=flow, auth_type=auth_type)
        return challenge

    async def verify_challenge_code(self, code: str, public_key: str, signature: str, flow: str, auth_type: str) -> None:
        """Check the signed code and consume it.

        Checks run cheapest first: lookup, flow, expiry, then the signature.
        A failed attempt leaves the code in place so its holder can retry
        until it expires. Raises ChallengeError.
        """
        challenge = ChallengeCode.from_mongo(await self._collection.find_one({"code": code}))
        if challenge is None:
            raise self._reject(ChallengeErrorKind.NOT_FOUND, flow)

        if challenge.flow != flow or challenge.auth_type != auth_type:
            raise self._reject(ChallengeErrorKind.FLOW_MISMATCH, flow)

        if challenge.expires_at < now():
            raise self._reject(ChallengeErrorKind.EXPIRED, flow)

        if not verify_signature(code.encode("utf-8"), public_key, signature):
            raise self._reject(ChallengeErrorKind.INVALID_SIGNATURE, flow)

        # Conditional delete: of two racing requests only one removes the document
        result = await self._collection.delete_one({"_id": challenge.id})
        if result.deleted_count == 0:
            raise self._reject(ChallengeErrorKind.NOT_FOUND, flow)

        logger.debug("challenge_consumed", flow=flow, auth_type=auth_type)

    @staticmethod
    def _reject(kind: ChallengeErrorKind, flow: str) -> ChallengeError:
        logger.info("challenge_rejected", kind=kind.value, flow=flow)
        return ChallengeError(kind)
