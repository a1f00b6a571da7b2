"""
JWT token management.

Tokens are stored in httpOnly cookies for security.
The administrator is not an agent row, so its subject is the literal "admin".
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from src.config import settings

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TYPE = "access"
COOKIE_NAME = "access_token"

ROLE_ADMIN = "admin"
ROLE_AGENT = "agent"
ADMIN_SUBJECT = "admin"


def create_access_token(
    subject: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        subject: Agent ID as a string, or "admin"
        role: "admin" or "agent"
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expire_hours)

    payload = {
        "sub": str(subject),
        "role": role,
        "exp": expire,
        "type": TOKEN_TYPE,
        "iat": datetime.now(timezone.utc),
    }

    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.

    Returns:
        Dict with 'role' and 'agent_id' (None for the administrator),
        or None if the token is invalid/expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None

    subject = payload.get("sub")
    role = payload.get("role")

    if role == ROLE_ADMIN and subject == ADMIN_SUBJECT:
        return {"role": ROLE_ADMIN, "agent_id": None}

    if role == ROLE_AGENT and subject and subject.isdigit():
        return {"role": ROLE_AGENT, "agent_id": int(subject)}

    return None


def get_token_from_cookie(request) -> Optional[str]:
    """Extract JWT token from httpOnly cookie."""
    return request.cookies.get(COOKIE_NAME)
