"""
Bulk settlement: one aggregate payment that settles several
violations in full.

The total must equal the exact sum of the remaining balances of
the targeted violations. Each violation receives a payment of its
own remaining balance, so no violation can ever be overpaid. The
targets are settled together or not at all.
"""

import logging

from sqlalchemy.orm import Session

from fine_ledger.exceptions import (
    AmountMismatchError,
    NotFoundError,
    ValidationError,
)
from fine_ledger.models.enums import ActionType
from fine_ledger.models.payment import Payment
from fine_ledger.models.violation import Violation
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.payment import BulkSettlementCreate
from fine_ledger.services.audit_trail import AuditTrail
from fine_ledger.services.fine_ledger import FineLedger
from fine_ledger.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


class BulkSettlementAllocator:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = FineLedger(db)
        self.audit = AuditTrail(db)

    def settle(
        self, request: BulkSettlementCreate, actor: Actor
    ) -> list[Violation]:
        """
        Settle every listed violation, returned in ascending id order.

        Raises NotFoundError if any id is unknown, ValidationError
        if any target is already fully paid, and AmountMismatchError
        if total_amount is not exactly what is owed.
        """
        violations = run_in_transaction(
            self.db, lambda: self._settle(request, actor)
        )
        logger.info(
            "Settled %d violations for %d by %s",
            len(violations), request.total_amount, actor.id,
        )
        return violations

    def _settle(
        self, request: BulkSettlementCreate, actor: Actor
    ) -> list[Violation]:
        violation_ids = sorted(request.violation_ids)
        violations = self.ledger.lock_violations(violation_ids)

        found = {v.id for v in violations}
        missing = [vid for vid in violation_ids if vid not in found]
        if missing:
            raise NotFoundError(f"Violations not found: {missing}")

        paid = self.ledger.paid_totals(violation_ids)
        remaining = {v.id: v.fine_amount - paid[v.id] for v in violations}

        settled = [vid for vid, balance in remaining.items() if balance <= 0]
        if settled:
            raise ValidationError(f"Violations already fully paid: {settled}")

        total_remaining = sum(remaining.values())
        if request.total_amount != total_remaining:
            logger.info(
                "Rejected settlement of %d: %d remaining across %s",
                request.total_amount, total_remaining, violation_ids,
            )
            raise AmountMismatchError(
                f"Total amount {request.total_amount} does not match "
                f"the remaining balance {total_remaining}"
            )

        for violation in violations:
            self.db.add(Payment(
                violation_id=violation.id,
                amount=remaining[violation.id],
                recorded_by=actor.id,
            ))
        self.db.flush()

        for violation in violations:
            old_status = violation.status
            new_status = self.ledger.refresh_status(violation)
            self.audit.record(
                actor.id,
                violation.id,
                ActionType.BULK_SETTLEMENT,
                f"Recorded full payment of {remaining[violation.id]} for "
                f"violation {violation.id} as part of a settlement of "
                f"{len(violations)} violations, status "
                f"{old_status.value} -> {new_status.value}",
            )
        self.db.flush()
        return violations
