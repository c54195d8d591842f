"""
Payment API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fine_ledger.api.dependencies import get_actor
from fine_ledger.exceptions import FineLedgerError
from fine_ledger.models.base import get_db
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.payment import PaymentCreate, BulkSettlementCreate
from fine_ledger.schemas.violation import ViolationResponse
from fine_ledger.services.bulk_settlement import BulkSettlementAllocator
from fine_ledger.services.payment_recorder import PaymentRecorder

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=ViolationResponse, status_code=201)
def record_payment(
    request: PaymentCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Record a payment against one violation.

    Returns the violation with its reconciled status. A payment
    larger than the remaining balance is rejected.
    """
    service = PaymentRecorder(db)
    try:
        return service.apply(request, actor)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post(
    "/settle",
    response_model=list[ViolationResponse],
    status_code=201,
)
def settle_violations(
    request: BulkSettlementCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Settle several violations in full with one payment.

    total_amount must equal the sum of their remaining balances.
    """
    service = BulkSettlementAllocator(db)
    try:
        return service.settle(request, actor)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
