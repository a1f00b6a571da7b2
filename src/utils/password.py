"""
Password hashing utilities using bcrypt.
"""

from passlib.context import CryptContext

# Configure bcrypt for password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    """Hash a plain-text agent password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a login attempt against a stored hash.

    Malformed or empty hashes count as a mismatch rather than an error.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def password_needs_rehash(hashed_password: str) -> bool:
    """True if the hash was made with outdated bcrypt settings."""
    return pwd_context.needs_update(hashed_password)
