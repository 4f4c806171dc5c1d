"""Password policy and hashing."""

import hashlib
import secrets
import unicodedata

import bcrypt

from app.core.exceptions import PasswordPolicyError, PasswordViolation

MIN_PASSWORD_LENGTH = 8
DEFAULT_BCRYPT_ROUNDS = 12

# Compared against the lowercased candidate
COMMON_PASSWORDS = frozenset(
    {
        "password",
        "password1",
        "password1!",
        "password123",
        "123456",
        "12345678",
        "123456789",
        "qwerty",
        "qwerty123",
        "qwerty123!",
        "admin",
        "admin123",
        "letmein",
        "letmein1!",
        "welcome",
        "welcome1",
        "welcome1!",
        "iloveyou",
    }
)


def _is_special(char: str) -> bool:
    """Punctuation or symbol in the Unicode sense."""
    return unicodedata.category(char)[0] in ("P", "S")


def check_password(password: str) -> PasswordViolation | None:
    """
    Return the first policy violation of a password, or None.

    Checks run in a fixed order: length, denylist, then uppercase,
    lowercase, number and special character.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordViolation.TOO_SHORT

    if password.lower() in COMMON_PASSWORDS:
        return PasswordViolation.TOO_COMMON

    if not any(char.isupper() for char in password):
        return PasswordViolation.NO_UPPER
    if not any(char.islower() for char in password):
        return PasswordViolation.NO_LOWER
    if not any(char.isnumeric() for char in password):
        return PasswordViolation.NO_NUMBER
    if not any(_is_special(char) for char in password):
        return PasswordViolation.NO_SPECIAL

    return None


def validate_password(password: str) -> None:
    """Raise PasswordPolicyError for the first violated rule."""
    violation = check_password(password)
    if violation is not None:
        raise PasswordPolicyError(violation)


def _prepare_password(password: str) -> bytes:
    """Prepare password for bcrypt (handle >72 bytes)."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        # Hash long passwords with SHA256 first
        return hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
    return password_bytes


class PasswordHasher:
    """bcrypt hasher with a fixed work factor."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash(self, password: str) -> str:
        """
        Validate and hash a password.

        Every call uses a fresh salt, so two hashes of the same password
        differ.

        Raises:
            PasswordPolicyError: If the password violates the policy
        """
        validate_password(password)
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        try:
            return bcrypt.checkpw(
                _prepare_password(password),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            # Malformed stored hash
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one comparison's worth of work for an account that does not exist."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                secrets.token_bytes(16), bcrypt.gensalt(rounds=self.rounds)
            )
        bcrypt.checkpw(_prepare_password(password), self._dummy_hash)
        return False
