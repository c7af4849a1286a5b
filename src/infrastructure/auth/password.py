"""Argon2 password hashing.

Hashing is CPU bound, so both operations run in a worker thread to keep the
event loop responsive.
"""

import asyncio

import structlog
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from core.config import settings

logger = structlog.get_logger()


class Argon2PasswordHasher:
    """argon2id hasher for account passwords and group passwords."""

    def __init__(
        self,
        memory_cost: int = settings.password_memory_cost,
        time_cost: int = settings.password_time_cost,
        parallelism: int = settings.password_parallelism,
    ) -> None:
        self._hasher = PasswordHasher(
            memory_cost=memory_cost,
            time_cost=time_cost,
            parallelism=parallelism,
            hash_len=32,
            salt_len=16,
        )

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self._hasher.hash, password)

    async def verify(self, password_hash: str, password: str) -> bool:
        try:
            return await asyncio.to_thread(self._hasher.verify, password_hash, password)
        except VerificationError:
            return False
        except InvalidHashError:
            logger.warning("password_hash_unparseable")
            return False
