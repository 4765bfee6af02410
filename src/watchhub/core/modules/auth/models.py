from pydantic import BaseModel

from watchhub.core.modules.session.models import Session
from watchhub.core.modules.user.models import User


class AuthResult(BaseModel):
    """Outcome of a completed registration or login."""

    user: User
    session: Session
    token: str
