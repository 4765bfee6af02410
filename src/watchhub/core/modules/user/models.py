from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from watchhub.core.db import MongoModel


class UserProfile(BaseModel):
    """Avatar shown next to the user's name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    icon: str
    color_a: str
    color_b: str


class User(MongoModel):
    """User identity anchored by an Ed25519 public key.

    Indexed on public_key - unique.
    """

    namespace: str
    public_key: str  # URL-safe base64, unpadded
    profile: UserProfile
    permissions: list[str] = []  # Opaque to the auth layer
    created_at: datetime
    last_logged_in: datetime


class UserView(BaseModel):
    """User account information (API representation)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(..., description="User ID")
    public_key: str = Field(..., description="Ed25519 public key, URL-safe base64")
    namespace: str
    profile: UserProfile
    permissions: list[str]

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            public_key=user.public_key,
            namespace=user.namespace,
            profile=user.profile,
            permissions=user.permissions,
        )
