"""Ed25519 primitives for public-key authentication.

Keys and signatures travel as URL-safe base64 without padding. PyNaCl expects
raw bytes, so everything is normalized through ``b64url_to_bytes`` first.
"""

import hashlib

import structlog
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from watchhub.errors import ValidationError
from watchhub.utils import b64url_to_bytes, bytes_to_b64url

logger = structlog.get_logger(__name__)

MNEMONIC_SALT = b"mnemonic"
MNEMONIC_ITERATIONS = 2048
SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32


def verify_signature(message: bytes, public_key: str, signature: str) -> bool:
    """Check a detached Ed25519 signature.

    Returns False for any failure, including undecodable base64 and keys of the
    wrong length, so a bad signature looks the same as malformed input.
    """
    try:
        verify_key = VerifyKey(b64url_to_bytes(public_key))
        verify_key.verify(message, b64url_to_bytes(signature))
    except BadSignatureError:
        return False
    except Exception as e:  # noqa: BLE001
        logger.debug("signature_input_rejected", error_type=type(e).__name__)
        return False
    return True


def normalize_public_key(public_key: str) -> str:
    """Canonical unpadded URL-safe form of a public key, the form users are stored under.

    Padded, standard-alphabet and URL-safe spellings of one key all map to the same string.
    """
    try:
        raw = b64url_to_bytes(public_key)
    except ValueError as e:
        raise ValidationError("Invalid public key") from e
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise ValidationError("Invalid public key")
    return bytes_to_b64url(raw)


def signing_key_from_mnemonic(mnemonic: str) -> SigningKey:
    """Derive the deterministic key pair clients generate from a passphrase."""
    seed = hashlib.pbkdf2_hmac("sha256", mnemonic.encode("utf-8"), MNEMONIC_SALT, MNEMONIC_ITERATIONS, SEED_LENGTH)
    return SigningKey(seed)


def derive_public_key(mnemonic: str) -> str:
    return bytes_to_b64url(bytes(signing_key_from_mnemonic(mnemonic).verify_key))
