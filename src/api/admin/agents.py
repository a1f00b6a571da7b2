"""Admin agents API endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_agent_service, get_ledger_service
from src.auth.dependencies import Principal, require_admin
from src.db import get_db
from src.models import AuditAction
from src.schemas.agent import AgentCreate, AgentResponse, AgentUpdate, ConsistencyResponse
from src.services.agents import AgentService
from src.services.ledger import ConsistencyReport, SalesLedgerService
from src.utils.audit import get_client_ip, log_action

router = APIRouter(prefix="/agents")


def _consistency_response(report: ConsistencyReport) -> ConsistencyResponse:
    return ConsistencyResponse(
        agent_id=report.agent_id,
        recorded_total=report.recorded_total,
        ledger_total=report.ledger_total,
        drift=report.drift,
        consistent=report.consistent,
    )


@router.get("", response_model=list[AgentResponse])
async def list_agents(
    agents: AgentService = Depends(get_agent_service),
    admin: Principal = Depends(require_admin),
):
    """List all agents with their totals and commission split."""
    return await agents.list_agents()


@router.post("", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
async def create_agent(
    request: Request,
    data: AgentCreate,
    db: AsyncSession = Depends(get_db),
    agents: AgentService = Depends(get_agent_service),
    admin: Principal = Depends(require_admin),
):
    """Create a new agent account."""
    agent = await agents.create_agent(
        name=data.name,
        email=data.email,
        password=data.password,
        level=data.level,
        total_sales=data.total_sales,
        agent_commission_percentage=data.agent_commission_percentage,
        organization_commission_percentage=data.organization_commission_percentage,
    )

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.CREATE_AGENT,
        target_type="agent",
        target_id=agent.id,
        action_metadata={
            "email": agent.email,
            "split": [
                str(agent.agent_commission_percentage),
                str(agent.organization_commission_percentage),
            ],
        },
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return agent


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(
    agent_id: int,
    agents: AgentService = Depends(get_agent_service),
    admin: Principal = Depends(require_admin),
):
    """Get agent details."""
    return await agents.get_agent(agent_id)


@router.put("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    request: Request,
    agent_id: int,
    data: AgentUpdate,
    db: AsyncSession = Depends(get_db),
    agents: AgentService = Depends(get_agent_service),
    admin: Principal = Depends(require_admin),
):
    """Update agent account and commission split."""
    fields = data.model_dump(exclude_none=True)
    agent = await agents.update_agent(agent_id, fields)

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.UPDATE_AGENT,
        target_type="agent",
        target_id=agent_id,
        action_metadata=data.model_dump(mode="json", exclude_none=True, exclude={"password"}),
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return agent


@router.delete("/{agent_id}")
async def delete_agent(
    request: Request,
    agent_id: int,
    db: AsyncSession = Depends(get_db),
    agents: AgentService = Depends(get_agent_service),
    admin: Principal = Depends(require_admin),
):
    """Delete an agent. Their sales stay in the ledger."""
    await agents.delete_agent(agent_id)

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.DELETE_AGENT,
        target_type="agent",
        target_id=agent_id,
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return {"success": True, "message": "Agent deleted"}


@router.get("/{agent_id}/consistency", response_model=ConsistencyResponse)
async def check_agent_consistency(
    agent_id: int,
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Compare the agent's running total with the sum of their sales."""
    return _consistency_response(await ledger.check_consistency(agent_id))


@router.post("/{agent_id}/reconcile", response_model=ConsistencyResponse)
async def reconcile_agent(
    request: Request,
    agent_id: int,
    db: AsyncSession = Depends(get_db),
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Reset the agent's running total to the ledger sum. Returns the pre-fix report."""
    report = await ledger.reconcile_agent(agent_id)

    if not report.consistent:
        await log_action(
            db=db,
            actor_role=admin.role,
            action=AuditAction.RECONCILE_AGENT,
            target_type="agent",
            target_id=agent_id,
            action_metadata={
                "recorded_total": str(report.recorded_total),
                "ledger_total": str(report.ledger_total),
            },
            ip_address=get_client_ip(request),
        )
    await db.commit()

    return _consistency_response(report)
