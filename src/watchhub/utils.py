import base64
from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def b64url_to_bytes(value: str) -> bytes:
    """Decode URL-safe base64 with or without padding."""
    normalized = value.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized, validate=True)


def bytes_to_b64url(data: bytes) -> str:
    """Encode bytes as URL-safe base64 with padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")
