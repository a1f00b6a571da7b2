"""Agent panel sales API endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_ledger_service
from src.auth.dependencies import Principal, require_agent
from src.db import get_db
from src.models import AuditAction
from src.schemas.sale import SaleCreate, SaleResponse, SalesSummaryResponse
from src.services.ledger import SalesLedgerService
from src.utils.audit import get_client_ip, log_action

router = APIRouter(prefix="/sales")


@router.get("", response_model=list[SaleResponse])
async def my_sales(
    ledger: SalesLedgerService = Depends(get_ledger_service),
    principal: Principal = Depends(require_agent),
):
    """The current agent's sales, newest first."""
    sales = await ledger.list_agent_sales(principal.agent_id)
    return [SaleResponse.from_sale(sale, principal.agent) for sale in sales]


@router.get("/summary", response_model=SalesSummaryResponse)
async def my_summary(
    ledger: SalesLedgerService = Depends(get_ledger_service),
    principal: Principal = Depends(require_agent),
):
    """The current agent's revenue and earnings."""
    return SalesSummaryResponse.from_summary(await ledger.summarize(principal.agent_id))


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def record_my_sale(
    request: Request,
    data: SaleCreate,
    db: AsyncSession = Depends(get_db),
    ledger: SalesLedgerService = Depends(get_ledger_service),
    principal: Principal = Depends(require_agent),
):
    """Record a sale for the current agent. Any agent_id in the body is ignored."""
    sale = await ledger.record_sale(
        agent_id=principal.agent_id,
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
        actor_role=principal.role,
        actor_id=principal.agent_id,
        action=AuditAction.RECORD_SALE,
        target_type="sale",
        target_id=sale.id,
        action_metadata={"amount": str(sale.amount)},
        ip_address=get_client_ip(request),
    )
    await db.commit()

    return SaleResponse.from_sale(sale, principal.agent)
