"""Tests for session token encoding."""

from uuid import uuid4

import jwt
import pytest
from jwt.utils import base64url_encode

from watchhub.core.modules.session.token import TokenCodec
from watchhub.errors import ConfigurationError

SECRET = "unit-test-secret-with-at-least-32-bytes!"


@pytest.fixture
def codec():
    return TokenCodec(SECRET)


class TestTokenCodec:
    def test_round_trip(self, codec):
        session_id = uuid4()
        payload = codec.decode(codec.encode(session_id))
        assert payload is not None
        assert payload.sid == session_id

    def test_payload_only_carries_sid(self, codec):
        token = codec.encode(uuid4())
        claims = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert set(claims) == {"sid"}
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_other_secret_rejected(self, codec):
        token = TokenCodec("another-secret-with-at-least-32-bytes!!").encode(uuid4())
        assert codec.decode(token) is None

    def test_altered_payload_rejected(self, codec):
        header, _, signature = codec.encode(uuid4()).split(".")
        forged_payload = base64url_encode(f'{{"sid":"{uuid4()}"}}'.encode()).decode()
        assert codec.decode(f"{header}.{forged_payload}.{signature}") is None

    def test_other_algorithm_rejected(self, codec):
        """A well-formed token signed with HS512 under the same secret is still refused."""
        token = jwt.encode({"sid": str(uuid4())}, SECRET, algorithm="HS512")
        assert codec.decode(token) is None

    def test_unsigned_token_rejected(self, codec):
        token = jwt.encode({"sid": str(uuid4())}, None, algorithm="none")
        assert codec.decode(token) is None

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_token_rejected(self, codec, token):
        assert codec.decode(token) is None

    def test_missing_sid_rejected(self, codec):
        assert codec.decode(jwt.encode({"user": "x"}, SECRET, algorithm="HS256")) is None

    def test_non_uuid_sid_rejected(self, codec):
        assert codec.decode(jwt.encode({"sid": "not-a-uuid"}, SECRET, algorithm="HS256")) is None

    def test_empty_secret_is_fatal(self):
        with pytest.raises(ConfigurationError):
            TokenCodec("")
