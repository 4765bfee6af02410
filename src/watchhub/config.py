from pydantic import field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    crypto_secret: str  # HS256 key for session tokens, the server refuses to start without it
    cors_origins: list[str] = []
    meta_name: str = ""
    meta_description: str = ""
    version: str = "0.1.0"
    captcha: bool = False  # Require a captcha token on registration start
    captcha_client_key: str = ""  # Public site key handed to the frontend via /meta
    captcha_secret_key: str = ""
    captcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "WATCHHUB_",
        "extra": "ignore",
    }

    @field_validator("crypto_secret")
    @classmethod
    def _require_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("crypto_secret must not be empty")
        return value
