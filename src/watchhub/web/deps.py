from typing import Annotated, cast

from fastapi import Depends, Header, Request

from watchhub.app import App


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_authorization(authorization: Annotated[str | None, Header()] = None) -> str | None:
    """Raw Authorization header, resolved into a session by the App on each call."""
    return authorization


async def get_user_agent(user_agent: Annotated[str | None, Header()] = None) -> str | None:
    return user_agent


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthorizationDep = Annotated[str | None, Depends(get_authorization)]
UserAgentDep = Annotated[str | None, Depends(get_user_agent)]
