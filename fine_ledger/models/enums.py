"""
Shared enumerations for database models.

Python enums mapped to database enums ensure that only valid
categories and statuses can be stored.
"""

import enum


class VehicleCategory(str, enum.Enum):
    """Vehicle class; determines the fine amount."""
    MULTICAB = "MULTICAB"
    VAN = "VAN"


class ViolationType(str, enum.Enum):
    TERMINAL_FEE = "TERMINAL_FEE"


class ViolationStatus(str, enum.Enum):
    """Settlement status derived from the payments of a violation."""
    UNPAID = "UNPAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"


class ActorRole(str, enum.Enum):
    ADMIN = "ADMIN"
    ENFORCER = "ENFORCER"


class ActionType(str, enum.Enum):
    """Kinds of audited mutations."""
    VIOLATION_ISSUED = "VIOLATION_ISSUED"
    VIOLATION_UPDATED = "VIOLATION_UPDATED"
    VIOLATION_DELETED = "VIOLATION_DELETED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    BULK_SETTLEMENT = "BULK_SETTLEMENT"
