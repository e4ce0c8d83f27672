"""Hashing utilities for passwords and reset tokens."""
import secrets
import bcrypt

from tocapi.constants import RESET_TOKEN_BYTES


def generate_reset_token() -> str:
    """
    Generate a new password reset code.

    Returns:
        Uppercase hex string (8 characters) from a cryptographically strong source
    """
    return secrets.token_hex(RESET_TOKEN_BYTES).upper()


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The password to hash
        rounds: Bcrypt cost factor

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: The password to verify
        password_hash: The stored bcrypt hash

    Returns:
        True if the password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


class BcryptPasswordHasher:
    """Password hasher collaborator backed by bcrypt."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return hash_password(password, rounds=self.rounds)

    def verify(self, password: str, password_hash: str) -> bool:
        return verify_password(password, password_hash)
