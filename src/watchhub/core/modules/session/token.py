"""Bearer token codec.

The token is an HS256 JWT whose only claim is the session id. It carries no
expiry of its own: validity is decided by the session record it points at.
"""

from uuid import UUID

import jwt
import structlog

from watchhub.core.modules.session.models import TokenPayload
from watchhub.errors import ConfigurationError

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"


class TokenCodec:
    """Signs and verifies session tokens with a server-held secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError("Session token secret is not configured")
        self._secret = secret

    def encode(self, session_id: UUID) -> str:
        return jwt.encode({"sid": str(session_id)}, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> TokenPayload | None:
        """Return the payload, or None when the token is forged, malformed or uses another algorithm."""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
            return TokenPayload.model_validate(claims)
        except jwt.InvalidTokenError as e:
            logger.debug("token_rejected", reason=type(e).__name__)
            return None
        except ValueError:
            # Signature was fine but the sid claim is missing or not a UUID
            logger.debug("token_rejected", reason="invalid_payload")
            return None
