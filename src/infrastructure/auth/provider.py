"""Credential hashing protocol."""

from typing import Protocol


class IPasswordHasher(Protocol):
    """Protocol for password hashers used by accounts and group gates."""

    async def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Args:
            password: The plaintext password

        Returns:
            An encoded hash including its parameters and salt
        """
        ...

    async def verify(self, password_hash: str, password: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Returns:
            True on match, False on mismatch or a malformed hash
        """
        ...
