"""
Violation API endpoints.

The API layer is thin: it resolves the actor, lets Pydantic
validate the body, and maps ledger errors to status codes. All
business rules live in the services.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from fine_ledger.api.dependencies import get_actor, require_admin
from fine_ledger.exceptions import FineLedgerError
from fine_ledger.models.base import get_db
from fine_ledger.models.violation import Violation
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.payment import PaymentResponse
from fine_ledger.schemas.violation import (
    ViolationIssue,
    ViolationUpdate,
    ViolationResponse,
    ViolationDetailResponse,
)
from fine_ledger.services.fine_ledger import FineLedger
from fine_ledger.services.violation_admin import ViolationAdministration

router = APIRouter(prefix="/violations", tags=["Violations"])


def build_detail(ledger: FineLedger, violation: Violation) -> ViolationDetailResponse:
    """A violation with its payments, paid total and remaining balance."""
    payments = ledger.get_payments(violation.id)
    total_paid = sum(p.amount for p in payments)
    return ViolationDetailResponse(
        **ViolationResponse.model_validate(violation).model_dump(),
        plate_number=violation.vehicle.plate_number,
        vehicle_category=violation.vehicle.category,
        total_paid=total_paid,
        remaining_balance=violation.fine_amount - total_paid,
        payments=[PaymentResponse.model_validate(p) for p in payments],
    )


@router.post("", response_model=ViolationResponse, status_code=201)
def issue_violation(
    request: ViolationIssue,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Issue a violation against a plate.

    The vehicle is registered on first sight and the fine is
    fixed from its category.
    """
    service = FineLedger(db)
    try:
        return service.issue(request, actor)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{violation_id}", response_model=ViolationDetailResponse)
def get_violation(
    violation_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Get a violation together with its ledger."""
    service = FineLedger(db)
    try:
        return build_detail(service, service.get_violation(violation_id))
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{violation_id}/payments", response_model=list[PaymentResponse])
def get_violation_payments(
    violation_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Get all payments for a violation, oldest first."""
    service = FineLedger(db)
    try:
        return service.get_payments(violation_id)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.patch("/{violation_id}", response_model=ViolationResponse)
def update_violation(
    violation_id: int,
    request: ViolationUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Edit a violation's attachment, or confirm its status.

    A status that does not match the payments on record is
    rejected.
    """
    service = ViolationAdministration(db)
    try:
        return service.update(violation_id, request, actor)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.delete("/{violation_id}", status_code=204)
def delete_violation(
    violation_id: int,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a violation and all of its payments. ADMIN only."""
    service = ViolationAdministration(db)
    try:
        service.delete(violation_id, actor)
    except FineLedgerError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    return Response(status_code=204)
