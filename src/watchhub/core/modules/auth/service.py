from uuid import UUID

import structlog

from watchhub.core.core import Service
from watchhub.core.modules.session.models import Session
from watchhub.errors import AccessDeniedError, AuthenticationError, AuthErrorKind

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "bearer"


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the credentials from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        return None
    return token


class AuthService(Service):
    """Resolves bearer tokens to live sessions for request handlers."""

    async def get_current_session(self, authorization: str | None) -> Session:
        """Resolve the caller's session from the Authorization header and bump it.

        Every failure is an AuthenticationError with the same message; the kind
        is only for logs.
        """
        token = parse_bearer_token(authorization)
        if token is None:
            raise self._reject(AuthErrorKind.MISSING_CREDENTIALS)

        payload = self.core.token_codec.decode(token)
        if payload is None:
            raise self._reject(AuthErrorKind.INVALID_TOKEN)

        session = await self.core.services.session.get_session_and_bump(payload.sid)
        if session is None:
            raise self._reject(AuthErrorKind.SESSION_NOT_FOUND)

        return session

    def make_session_token(self, session: Session) -> str:
        return self.core.token_codec.encode(session.id)

    @staticmethod
    def ensure_owner(session: Session, user_id: UUID, message: str = "Permission denied") -> None:
        """Ensure the authenticated session belongs to the given user."""
        if session.user != user_id:
            raise AccessDeniedError(message)

    @staticmethod
    def _reject(kind: AuthErrorKind) -> AuthenticationError:
        logger.debug("authentication_rejected", kind=kind.value)
        return AuthenticationError("Unauthorized", kind=kind)
