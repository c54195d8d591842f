"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from fine_ledger.models.base import Base
from fine_ledger.models.enums import (
    VehicleCategory,
    ViolationType,
    ViolationStatus,
    ActorRole,
    ActionType,
)
from fine_ledger.models.action import Action
from fine_ledger.models.vehicle import Vehicle
from fine_ledger.models.violation import Violation
from fine_ledger.models.payment import Payment

__all__ = [
    "Base",
    "VehicleCategory",
    "ViolationType",
    "ViolationStatus",
    "ActorRole",
    "ActionType",
    "Action",
    "Vehicle",
    "Violation",
    "Payment",
]
