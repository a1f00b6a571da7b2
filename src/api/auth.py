"""
Authentication API endpoints.
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_agent_service
from src.auth.dependencies import Principal, get_current_principal_optional
from src.auth.jwt import ADMIN_SUBJECT, COOKIE_NAME, ROLE_ADMIN, ROLE_AGENT, create_access_token
from src.config import settings
from src.db import get_db
from src.models import AuditAction
from src.repositories import AgentRepository
from src.schemas.auth import AdminLoginRequest, LoginRequest, LoginResponse
from src.services.agents import AgentService
from src.utils.audit import get_client_ip, log_action
from src.utils.password import hash_password, password_needs_rehash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expire_hours * 3600,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    agents: AgentService = Depends(get_agent_service),
):
    """Authenticate an agent by email and set the JWT cookie."""
    agent = await agents.authenticate_agent(credentials.email, credentials.password)
    if not agent:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if password_needs_rehash(agent.password_hash):
        await AgentRepository(db).update_fields(
            agent.id, {"password_hash": hash_password(credentials.password)}
        )

    _set_token_cookie(response, create_access_token(str(agent.id), ROLE_AGENT))

    await log_action(
        db=db,
        actor_role=ROLE_AGENT,
        actor_id=agent.id,
        action=AuditAction.LOGIN,
        ip_address=get_client_ip(request),
    )
    await db.commit()

    logger.info(f"Agent {agent.id} logged in")
    return LoginResponse(
        success=True,
        message="Login successful",
        redirect_url="/panel",
        role=ROLE_AGENT,
    )


@router.post("/admin/login", response_model=LoginResponse)
async def admin_login(
    request: Request,
    response: Response,
    credentials: AdminLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate the administrator against the configured credentials."""
    username_ok = secrets.compare_digest(credentials.username, settings.admin_username)
    password_ok = secrets.compare_digest(credentials.password, settings.admin_password)
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    _set_token_cookie(response, create_access_token(ADMIN_SUBJECT, ROLE_ADMIN))

    await log_action(
        db=db,
        actor_role=ROLE_ADMIN,
        action=AuditAction.LOGIN,
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return LoginResponse(
        success=True,
        message="Login successful",
        redirect_url="/admin",
        role=ROLE_ADMIN,
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    principal: Optional[Principal] = Depends(get_current_principal_optional),
):
    """Clear JWT cookie and log out."""
    if principal:
        await log_action(
            db=db,
            actor_role=principal.role,
            actor_id=principal.agent_id,
            action=AuditAction.LOGOUT,
            ip_address=get_client_ip(request),
        )
        await db.commit()

    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    return {"success": True, "message": "Logged out"}


@router.get("/check-admin")
async def check_admin(
    principal: Optional[Principal] = Depends(get_current_principal_optional),
):
    """Tell the client whether the current cookie belongs to the administrator."""
    return {
        "authenticated": principal is not None,
        "is_admin": bool(principal and principal.is_admin),
    }
