"""Unauthenticated endpoints describing this backend instance."""

from fastapi import APIRouter

from watchhub.web.deps import AppDep
from watchhub.web.schemas import CamelModel

router = APIRouter(tags=["meta"])


class MetaResponse(CamelModel):
    name: str
    description: str
    version: str
    has_captcha: bool
    captcha_client_key: str


@router.get("/", summary="Liveness message", operation_id="getIndex")
async def index(app: AppDep) -> dict[str, str]:
    return {"message": f"Backend is working as expected (v{app.config.version})"}


@router.get(
    "/meta",
    summary="Instance metadata",
    description="Name, version and captcha settings the frontend needs before registering.",
    operation_id="getMeta",
)
async def get_meta(app: AppDep) -> MetaResponse:
    config = app.config
    return MetaResponse(
        name=config.meta_name,
        description=config.meta_description,
        version=config.version,
        has_captcha=config.captcha,
        captcha_client_key=config.captcha_client_key,
    )
