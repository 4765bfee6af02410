"""Session management models."""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from watchhub.core.db import MongoModel

# Sliding window: every successful lookup pushes expires_at this far past accessed_at
SESSION_TTL = timedelta(days=21)

DEVICE_MAX_LENGTH = 500


class Session(MongoModel):
    """Device-bound authentication grant.

    Indexed on user, expires_at.
    """

    user: UUID
    device: str
    user_agent: str
    created_at: datetime
    accessed_at: datetime
    expires_at: datetime

    def is_expired(self, at: datetime) -> bool:
        return self.expires_at < at


class TokenPayload(BaseModel):
    """Claims carried by a session bearer token."""

    sid: UUID


class SessionView(BaseModel):
    """Session information (API representation)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(..., description="Session ID")
    user: UUID = Field(..., description="Owning user ID")
    created_at: datetime
    accessed_at: datetime
    expires_at: datetime
    device: str = Field(..., description="Device label chosen by the client")
    user_agent: str
    current: bool | None = Field(None, description="Whether this is the session making the request")

    @classmethod
    def from_domain(cls, session: Session, current_session_id: UUID | None = None) -> "SessionView":
        return cls(
            id=session.id,
            user=session.user,
            created_at=session.created_at,
            accessed_at=session.accessed_at,
            expires_at=session.expires_at,
            device=session.device,
            user_agent=session.user_agent,
            current=None if current_session_id is None else session.id == current_session_id,
        )
