"""
Pydantic schemas for payment operations.

Each operation has its own request variant, tagged by a literal
kind. Ids and amounts are strict integers, so "5", 5.0 and True
are rejected rather than coerced.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator


# --- Request Schemas ---

class PaymentCreate(BaseModel):
    """A single payment against one violation."""
    kind: Literal["single_payment"] = "single_payment"
    violation_id: int = Field(strict=True)
    amount: int = Field(gt=0, strict=True)


class BulkSettlementCreate(BaseModel):
    """
    One aggregate payment settling several violations in full.

    total_amount must equal the sum of the remaining balances of
    every listed violation.
    """
    kind: Literal["bulk_settlement"] = "bulk_settlement"
    violation_ids: list[Annotated[int, Field(strict=True)]] = Field(min_length=1)
    total_amount: int = Field(gt=0, strict=True)

    @field_validator("violation_ids")
    @classmethod
    def ids_must_be_unique(cls, v: list[int]) -> list[int]:
        if len(set(v)) != len(v):
            raise ValueError("violation_ids must not contain duplicates")
        return v


# --- Response Schemas ---

class PaymentResponse(BaseModel):
    id: int
    violation_id: int
    amount: int
    recorded_by: str
    created_at: datetime

    model_config = {"from_attributes": True}
