"""Common cryptographic utilities.
"""

from cryptography.hazmat.primitives import hashes


class CryptoUtils:
    """Utility class for cryptographic operations."""

    @staticmethod
    def hash_secret(secret: str) -> str:
        """One-way hash of an API secret, as expected by the broker (SHA-1 hex)."""
        digest = hashes.Hash(hashes.SHA1())  # noqa: S303
        digest.update(secret.encode())
        return digest.finalize().hex()
