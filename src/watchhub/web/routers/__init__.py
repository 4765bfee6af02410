from watchhub.web.routers.auth import router as auth_router
from watchhub.web.routers.meta import router as meta_router
from watchhub.web.routers.sessions import router as sessions_router
from watchhub.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "meta_router",
    "sessions_router",
    "users_router",
]
