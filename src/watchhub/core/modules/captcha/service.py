import httpx
import structlog

from watchhub.core.core import Service
from watchhub.errors import AuthenticationError, AuthErrorKind

logger = structlog.get_logger(__name__)

VERIFY_TIMEOUT = 10.0


class CaptchaService(Service):
    """Verifies registration captcha tokens against the provider's siteverify endpoint."""

    _client: httpx.AsyncClient | None = None

    @property
    def enabled(self) -> bool:
        return self.core.config.captcha

    async def on_start(self) -> None:
        if self.enabled:
            self._client = httpx.AsyncClient(timeout=VERIFY_TIMEOUT)

    async def on_stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ensure_valid(self, captcha_token: str | None) -> None:
        """Raise AuthenticationError unless captcha is disabled or the token is accepted."""
        if not self.enabled:
            return
        if not captcha_token:
            raise AuthenticationError("Captcha token is required", kind=AuthErrorKind.CAPTCHA_FAILED)

        client = self._client or httpx.AsyncClient(timeout=VERIFY_TIMEOUT)
        try:
            response = await client.post(
                self.core.config.captcha_verify_url,
                data={"secret": self.core.config.captcha_secret_key, "response": captcha_token},
            )
            response.raise_for_status()
            success = bool(response.json().get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("captcha_verify_failed", error=str(e))
            success = False
        finally:
            if client is not self._client:
                await client.aclose()

        if not success:
            raise AuthenticationError("Invalid captcha token", kind=AuthErrorKind.CAPTCHA_FAILED)
