"""Shared request/response shapes. JSON keys are camelCase on the wire."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from watchhub.core.modules.auth.models import AuthResult
from watchhub.core.modules.session.models import SessionView
from watchhub.core.modules.user.models import UserView


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChallengeResponse(CamelModel):
    challenge: str = Field(..., description="Code the client must sign with its private key")


class AuthResponse(CamelModel):
    """Response to a completed registration or login."""

    user: UserView
    session: SessionView
    token: str = Field(..., description="Bearer token for subsequent requests")

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(
            user=UserView.from_domain(result.user),
            session=SessionView.from_domain(result.session),
            token=result.token,
        )


class CurrentUserResponse(CamelModel):
    user: UserView
    session: SessionView
