"""Admin sales API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_ledger_service
from src.auth.dependencies import Principal, require_admin
from src.db import get_db
from src.models import AuditAction, SaleStatus
from src.schemas.sale import SaleCreate, SaleResponse, SalesSummaryResponse, SaleUpdate
from src.services.exceptions import ValidationError
from src.services.ledger import SalesLedgerService
from src.utils.audit import get_client_ip, log_action

router = APIRouter(prefix="/sales")


@router.get("", response_model=list[SaleResponse])
async def list_sales(
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
    agent_id: Optional[int] = Query(None),
    sale_status: Optional[SaleStatus] = Query(None, alias="status"),
):
    """List sales, newest first. Sales of deleted agents are included."""
    rows = await ledger.list_sales(agent_id=agent_id, status=sale_status)
    return [SaleResponse.from_sale(sale, agent) for sale, agent in rows]


@router.get("/summary", response_model=SalesSummaryResponse)
async def sales_summary(
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
    agent_id: Optional[int] = Query(None),
):
    """Revenue with its agent / organization commission split."""
    return SalesSummaryResponse.from_summary(await ledger.summarize(agent_id))


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Get a single sale."""
    return SaleResponse.from_sale(*await ledger.get_sale_with_agent(sale_id))


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def record_sale(
    request: Request,
    data: SaleCreate,
    db: AsyncSession = Depends(get_db),
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Record a sale for any agent."""
    if data.agent_id is None:
        raise ValidationError("agent_id is required")

    sale = await ledger.record_sale(
        agent_id=data.agent_id,
        customer_name=data.customer_name,
        product_name=data.product_name,
        amount=data.amount,
        sale_date=data.sale_date,
        notes=data.notes,
        status=data.status,
        description=data.description,
    )

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.RECORD_SALE,
        target_type="sale",
        target_id=sale.id,
        action_metadata={"agent_id": sale.agent_id, "amount": str(sale.amount)},
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return SaleResponse.from_sale(*await ledger.get_sale_with_agent(sale.id))


@router.put("/{sale_id}", response_model=SaleResponse)
async def edit_sale(
    request: Request,
    sale_id: int,
    data: SaleUpdate,
    db: AsyncSession = Depends(get_db),
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Edit a sale; commission and agent totals are re-derived."""
    sale = await ledger.edit_sale(sale_id, data.model_dump(exclude_unset=True))

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.EDIT_SALE,
        target_type="sale",
        target_id=sale_id,
        action_metadata=data.model_dump(mode="json", exclude_unset=True),
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return SaleResponse.from_sale(*await ledger.get_sale_with_agent(sale.id))


@router.delete("/{sale_id}")
async def delete_sale(
    request: Request,
    sale_id: int,
    db: AsyncSession = Depends(get_db),
    ledger: SalesLedgerService = Depends(get_ledger_service),
    admin: Principal = Depends(require_admin),
):
    """Delete a sale and take its amount off the agent's total."""
    sale = await ledger.delete_sale(sale_id)

    await log_action(
        db=db,
        actor_role=admin.role,
        action=AuditAction.DELETE_SALE,
        target_type="sale",
        target_id=sale_id,
        action_metadata={"agent_id": sale.agent_id, "amount": str(sale.amount)},
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return {"success": True, "message": "Sale deleted successfully"}
