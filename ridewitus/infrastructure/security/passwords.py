"""
Password hashing.

Salted bcrypt hashes through passlib at a fixed work factor. bcrypt is
CPU-bound, so hashing and verification run in a worker thread and never
hold up the event loop.
"""

import asyncio
import logging

from passlib.context import CryptContext

from ridewitus.infrastructure.exceptions import HashingError


logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


class PasswordHasher:
    """One-way hashing and verification of account passwords."""

    def __init__(self, context: CryptContext = pwd_context):
        self._context = context

    async def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            HashingError: If the underlying primitive fails.
        """
        try:
            return await asyncio.to_thread(self._context.hash, password)
        except Exception as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise HashingError("Failed to hash password", original_error=e)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash. Any failure is a mismatch."""
        if not password or not password_hash:
            return False
        try:
            return await asyncio.to_thread(self._context.verify, password, password_hash)
        except Exception as e:
            logger.warning(f"Password verification error treated as mismatch: {type(e).__name__}")
            return False


_password_hasher = PasswordHasher()


def get_password_hasher() -> PasswordHasher:
    """Get the shared password hasher."""
    return _password_hasher
