"""Single-use challenge codes for public-key authentication."""

from datetime import datetime, timedelta
from enum import StrEnum

from watchhub.core.db import MongoModel

CHALLENGE_TTL = timedelta(minutes=10)


class ChallengeFlow(StrEnum):
    """Use case a challenge was issued for. A code only satisfies its own flow."""

    REGISTRATION = "registration"
    LOGIN = "login"


class AuthType(StrEnum):
    MNEMONIC = "mnemonic"


class ChallengeCode(MongoModel):
    """Nonce the client must sign to prove key possession.

    Indexed on code - unique, expires_at.
    """

    code: str
    flow: str
    auth_type: str
    created_at: datetime
    expires_at: datetime
