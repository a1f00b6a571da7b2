"""Agent panel profile API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import Principal, require_agent
from src.config import settings
from src.db import get_db
from src.repositories import AgentRepository
from src.schemas.agent import AgentProfileResponse, PasswordChange
from src.services.promotion import remaining_to_promotion
from src.utils.password import hash_password, verify_password

router = APIRouter(prefix="/me")


@router.get("", response_model=AgentProfileResponse)
async def get_profile(
    principal: Principal = Depends(require_agent),
):
    """Current agent's record with progress toward L2."""
    agent = principal.agent
    threshold = settings.promotion_threshold

    return AgentProfileResponse(
        id=agent.id,
        name=agent.name,
        email=agent.email,
        level=agent.level,
        total_sales=agent.total_sales,
        agent_commission_percentage=agent.agent_commission_percentage,
        organization_commission_percentage=agent.organization_commission_percentage,
        created_at=agent.created_at,
        updated_at=agent.updated_at,
        promotion_threshold=threshold,
        remaining_to_promotion=remaining_to_promotion(agent.total_sales, threshold),
    )


@router.post("/password")
async def change_password(
    data: PasswordChange,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_agent),
):
    """Change own password."""
    if not verify_password(data.current_password, principal.agent.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    await AgentRepository(db).update_fields(
        principal.agent_id, {"password_hash": hash_password(data.new_password)}
    )
    await db.commit()

    return {"success": True, "message": "Password changed"}
