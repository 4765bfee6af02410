from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Endpoints reachable without a bearer token
PUBLIC_ENDPOINTS = {
    ("GET", "/"),
    ("GET", "/meta"),
    ("GET", "/health"),
    ("POST", "/auth/register/start"),
    ("POST", "/auth/register/complete"),
    ("POST", "/auth/login/start"),
    ("POST", "/auth/login/complete"),
    ("POST", "/auth/derive-public-key"),
}


def set_custom_openapi(app: FastAPI, version: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="WatchHub API",
            version=version,
            summary="Accounts, sessions and sync for the WatchHub player",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session token returned by register/login complete",
            },
        }
        openapi_schema["security"] = [{"BearerAuth": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str | None = Field(None, description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Unauthorized", "type": "authentication_error"},
                {"message": "Invalid challenge code", "type": "authentication_error"},
                {"message": "A user with this public key already exists", "type": "conflict"},
            ]
        }
    }
