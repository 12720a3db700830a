"""
Unit tests for password hashing.
"""

import threading
from unittest.mock import MagicMock

import pytest

from ridewitus.infrastructure.exceptions import HashingError, UpstreamError
from ridewitus.infrastructure.security.passwords import PasswordHasher, get_password_hasher


@pytest.fixture
def hasher():
    return get_password_hasher()


class TestPasswordHasher:

    async def test_verify_accepts_original_password(self, hasher):
        digest = await hasher.hash("correct-horse")
        assert await hasher.verify("correct-horse", digest) is True

    async def test_verify_rejects_other_password(self, hasher):
        digest = await hasher.hash("correct-horse")
        assert await hasher.verify("wrong-horse", digest) is False

    async def test_hashes_are_salted(self, hasher):
        assert await hasher.hash("same-password") != await hasher.hash("same-password")

    async def test_digest_is_bcrypt_at_cost_10(self, hasher):
        digest = await hasher.hash("correct-horse")
        assert digest.startswith("$2b$10$")
        assert "correct-horse" not in digest

    @pytest.mark.parametrize("digest", ["", "not-a-hash", "$2b$10$truncated"])
    async def test_malformed_digest_is_a_mismatch(self, hasher, digest):
        assert await hasher.verify("correct-horse", digest) is False

    async def test_empty_password_is_a_mismatch(self, hasher):
        digest = await hasher.hash("correct-horse")
        assert await hasher.verify("", digest) is False

    async def test_primitive_failure_raises_hashing_error(self):
        context = MagicMock()
        context.hash.side_effect = RuntimeError("backend unavailable")
        with pytest.raises(HashingError) as exc_info:
            await PasswordHasher(context).hash("correct-horse")
        assert isinstance(exc_info.value, UpstreamError)
        assert exc_info.value.status_code == 500


class TestOffLoopExecution:

    async def test_hash_and_verify_run_in_worker_thread(self):
        loop_thread = threading.get_ident()
        seen = []

        def record(*args):
            seen.append(threading.get_ident())
            return "digest" if len(args) == 1 else True

        context = MagicMock()
        context.hash.side_effect = record
        context.verify.side_effect = record
        hasher = PasswordHasher(context)

        assert await hasher.hash("correct-horse") == "digest"
        assert await hasher.verify("correct-horse", "digest") is True
        assert len(seen) == 2
        assert loop_thread not in seen
