"""Authentication module."""

from src.auth.dependencies import (
    Principal,
    get_current_principal,
    get_current_principal_optional,
    require_admin,
    require_agent,
)
from src.auth.jwt import ROLE_ADMIN, ROLE_AGENT, create_access_token, verify_token

__all__ = [
    "Principal",
    "ROLE_ADMIN",
    "ROLE_AGENT",
    "create_access_token",
    "verify_token",
    "get_current_principal",
    "get_current_principal_optional",
    "require_admin",
    "require_agent",
]
