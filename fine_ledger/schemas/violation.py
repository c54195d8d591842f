"""
Pydantic schemas for violation operations.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from fine_ledger.models.enums import (
    VehicleCategory,
    ViolationStatus,
    ViolationType,
)
from fine_ledger.schemas.payment import PaymentResponse


# --- Request Schemas ---

class ViolationIssue(BaseModel):
    """Request to issue a violation against a plate."""
    plate_number: str = Field(min_length=1, max_length=20)
    vehicle_category: VehicleCategory
    violation_type: ViolationType = ViolationType.TERMINAL_FEE
    issued_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("plate_number")
    @classmethod
    def normalize_plate(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("issued_at")
    @classmethod
    def as_naive_utc(cls, v: datetime) -> datetime:
        # Timestamps are stored as naive UTC
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class ViolationUpdate(BaseModel):
    """
    Administrative edit of a violation.

    Only fields that are explicitly sent are applied. A status
    may be sent, but it must agree with the payments on record.
    """
    attachment: str | None = Field(default=None, max_length=500)
    status: ViolationStatus | None = None


# --- Response Schemas ---

class ViolationResponse(BaseModel):
    id: int
    vehicle_id: int
    violation_type: ViolationType
    issued_at: datetime
    fine_amount: int
    status: ViolationStatus
    issued_by: str
    attachment: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ViolationDetailResponse(ViolationResponse):
    """A violation together with its ledger."""
    plate_number: str
    vehicle_category: VehicleCategory
    total_paid: int
    remaining_balance: int
    payments: list[PaymentResponse]
