"""
Security Test Suite - Session Tokens

Tests that TokenService:
- Round-trips account id and role
- Rejects tampered, foreign-signed, expired and malformed tokens
- Rejects a token at exactly its expiry second
- Refuses to operate without a secret
"""

import time
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from ridewitus.domain.models import Role
from ridewitus.infrastructure.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    InvalidTokenError,
)
from ridewitus.infrastructure.security.tokens import TOKEN_TTL, TokenService


SECRET = "unit-test-secret-with-enough-bytes-for-hs256"


@pytest.fixture
def tokens():
    return TokenService(SECRET)


class TestTokenRoundTrip:

    def test_verify_returns_issued_identity(self, tokens):
        token = tokens.issue("acct-1", Role.MANAGER)
        identity = tokens.verify(token)
        assert identity.account_id == "acct-1"
        assert identity.role == Role.MANAGER

    def test_expiry_is_seven_days_after_issue(self, tokens):
        issued_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
        token = tokens.issue("acct-1", Role.USER, issued_at=issued_at)
        claims = jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})
        assert claims["exp"] - claims["iat"] == int(TOKEN_TTL.total_seconds())
        assert claims["role"] == "user"

    def test_uppercase_role_claim_is_normalized(self, tokens):
        now = int(time.time())
        token = jwt.encode(
            {"sub": "acct-1", "role": "ADMIN", "iat": now, "exp": now + 60},
            SECRET,
            algorithm="HS256",
        )
        assert tokens.verify(token).role == Role.ADMIN


class TestTokenRejection:

    def test_tampered_payload(self, tokens):
        token = tokens.issue("acct-1", Role.USER)
        header, payload, signature = token.split(".")
        forged_payload = jwt.utils.base64url_encode(
            b'{"sub":"acct-1","role":"admin","iat":1,"exp":99999999999}'
        ).decode()
        with pytest.raises(InvalidTokenError):
            tokens.verify(f"{header}.{forged_payload}.{signature}")

    def test_signed_with_other_secret(self, tokens):
        token = TokenService("another-secret-with-enough-bytes-for-hs256").issue("acct-1", Role.USER)
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_expired(self, tokens):
        issued_at = datetime.now(timezone.utc) - TOKEN_TTL - timedelta(minutes=1)
        token = tokens.issue("acct-1", Role.USER, issued_at=issued_at)
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_rejected_at_exact_expiry_second(self, tokens):
        # exp is the current whole second, so "now" is never before it
        now = int(time.time())
        token = jwt.encode(
            {"sub": "acct-1", "role": "user", "iat": now - 60, "exp": now},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    @pytest.mark.parametrize("token", ["", None, "not.a.jwt", "abc"])
    def test_malformed(self, tokens, token):
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_missing_role_claim(self, tokens):
        now = int(time.time())
        token = jwt.encode({"sub": "acct-1", "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            tokens.verify(token)

    def test_every_failure_is_an_authentication_error(self, tokens):
        with pytest.raises(AuthenticationError) as exc_info:
            tokens.verify("garbage")
        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN
        assert exc_info.value.status_code == 401


class TestMissingSecret:

    def test_issue_refuses(self):
        with pytest.raises(ConfigurationError):
            TokenService(None).issue("acct-1", Role.USER)

    def test_verify_refuses(self, tokens):
        token = tokens.issue("acct-1", Role.USER)
        with pytest.raises(InvalidTokenError):
            TokenService("").verify(token)
