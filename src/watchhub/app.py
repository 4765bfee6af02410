from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

import structlog
from pymongo import AsyncMongoClient

from watchhub.config import Config
from watchhub.core.core import Core
from watchhub.core.crypto import derive_public_key, normalize_public_key
from watchhub.core.modules.auth.models import AuthResult
from watchhub.core.modules.challenge.models import AuthType, ChallengeCode, ChallengeFlow
from watchhub.core.modules.session.models import Session
from watchhub.core.modules.user.models import User, UserProfile
from watchhub.errors import AuthenticationError, AuthErrorKind, MissingUserAgentError, NotFoundError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, resolves the caller before delegating to Core."""

    def __init__(self, config: Config, mongo_client: AsyncMongoClient[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, mongo_client)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def get_current_session(self, authorization: str | None) -> Session:
        """Resolve and bump the session behind an Authorization header."""
        return await self._core.services.auth.get_current_session(authorization)

    # === Registration ===
    async def start_registration(
        self, captcha_token: str | None, auth_type: str = AuthType.MNEMONIC
    ) -> ChallengeCode:
        """Issue a registration challenge after the optional captcha check."""
        await self._core.services.captcha.ensure_valid(captcha_token)
        return await self._core.services.challenge.create_challenge_code(ChallengeFlow.REGISTRATION, auth_type)

    async def complete_registration(
        self,
        public_key: str,
        code: str,
        signature: str,
        namespace: str,
        device: str,
        profile: UserProfile,
        user_agent: str | None,
        auth_type: str = AuthType.MNEMONIC,
    ) -> AuthResult:
        """Consume the signed challenge, create the user and open its first session."""
        if not user_agent:
            raise MissingUserAgentError
        public_key = normalize_public_key(public_key)
        await self._core.services.challenge.verify_challenge_code(
            code, public_key, signature, ChallengeFlow.REGISTRATION, auth_type
        )
        user = await self._core.services.user.create_user(public_key, namespace, profile)
        return await self._open_session(user, device, user_agent)

    # === Login ===
    async def start_login(self, public_key: str, auth_type: str = AuthType.MNEMONIC) -> ChallengeCode:
        public_key = normalize_public_key(public_key)
        if await self._core.services.user.find_user_by_public_key(public_key) is None:
            raise AuthenticationError("User cannot be found", kind=AuthErrorKind.UNKNOWN_USER)
        return await self._core.services.challenge.create_challenge_code(ChallengeFlow.LOGIN, auth_type)

    async def complete_login(
        self,
        public_key: str,
        code: str,
        signature: str,
        device: str,
        user_agent: str | None,
        auth_type: str = AuthType.MNEMONIC,
    ) -> AuthResult:
        if not user_agent:
            raise MissingUserAgentError
        public_key = normalize_public_key(public_key)
        await self._core.services.challenge.verify_challenge_code(
            code, public_key, signature, ChallengeFlow.LOGIN, auth_type
        )
        user = await self._core.services.user.find_user_by_public_key(public_key)
        if user is None:
            raise AuthenticationError("User cannot be found", kind=AuthErrorKind.UNKNOWN_USER)
        user = await self._core.services.user.touch_last_logged_in(user.id)
        return await self._open_session(user, device, user_agent)

    def derive_public_key(self, mnemonic: str) -> str:
        """Public key a client would derive from the given mnemonic."""
        return derive_public_key(mnemonic)

    # === Current user ===
    async def get_current_user(self, authorization: str | None) -> tuple[User, Session]:
        session = await self.get_current_session(authorization)
        try:
            user = await self._core.services.user.get_user(session.user)
        except NotFoundError as e:
            raise NotFoundError("User not found") from e
        return user, session

    async def update_user_profile(self, authorization: str | None, user_id: UUID, profile: UserProfile) -> User:
        session = await self.get_current_session(authorization)
        self._core.services.auth.ensure_owner(session, user_id, "Cannot modify other users")
        user = await self._core.services.user.update_profile(user_id, profile)
        logger.info("user_profile_updated", user_id=str(user_id))
        return user

    # === Sessions ===
    async def get_user_sessions(self, authorization: str | None, user_id: UUID) -> tuple[list[Session], Session]:
        """List the user's live sessions along with the caller's own session."""
        session = await self.get_current_session(authorization)
        self._core.services.auth.ensure_owner(session, user_id, "Cannot access sessions for other users")
        return await self._core.services.session.get_user_sessions(user_id), session

    async def update_session(
        self, authorization: str | None, session_id: UUID, device: str | None
    ) -> tuple[Session, Session]:
        """Rename a session owned by the caller. Returns the target and the caller's session."""
        current = await self.get_current_session(authorization)
        target = await self._core.services.session.find_session(session_id)
        if target is None:
            raise NotFoundError("Session cannot be found")
        self._core.services.auth.ensure_owner(current, target.user, "Cannot edit sessions other than your own")

        if device:
            updated = await self._core.services.session.update_device(session_id, device)
            if updated is None:
                raise NotFoundError("Session cannot be found")
            target = updated
        if target.id == current.id:
            current = target
        return target, current

    async def delete_session(self, authorization: str | None, session_id: UUID) -> None:
        """Revoke a session owned by the caller. Deleting an unknown session is a no-op."""
        current = await self.get_current_session(authorization)
        target = await self._core.services.session.find_session(session_id)
        if target is None:
            return
        self._core.services.auth.ensure_owner(current, target.user, "Cannot delete sessions you do not own")
        await self._core.services.session.delete_session(session_id)

    # === Private helpers ===
    async def _open_session(self, user: User, device: str, user_agent: str | None) -> AuthResult:
        session = await self._core.services.session.make_session(user.id, device, user_agent)
        token = self._core.services.auth.make_session_token(session)
        return AuthResult(user=user, session=session, token=token)
