"""Business logic services."""

from fine_ledger.services.reconciler import reconcile
from fine_ledger.services.audit_trail import AuditTrail
from fine_ledger.services.fine_ledger import FineLedger
from fine_ledger.services.payment_recorder import PaymentRecorder
from fine_ledger.services.bulk_settlement import BulkSettlementAllocator
from fine_ledger.services.violation_admin import ViolationAdministration

__all__ = [
    "reconcile",
    "AuditTrail",
    "FineLedger",
    "PaymentRecorder",
    "BulkSettlementAllocator",
    "ViolationAdministration",
]
