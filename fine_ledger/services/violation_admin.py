"""
Administrative edits and removal of violations.

These paths bypass the payment flow, so they re-check the ledger
invariants themselves: a status can only be set to what the
payments on record already imply, and a deleted violation takes
all of its payments with it.
"""

import logging

from sqlalchemy.orm import Session

from fine_ledger.exceptions import ValidationError
from fine_ledger.models.enums import ActionType
from fine_ledger.models.violation import Violation
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.violation import ViolationUpdate
from fine_ledger.services.audit_trail import AuditTrail
from fine_ledger.services.fine_ledger import FineLedger
from fine_ledger.services.reconciler import reconcile
from fine_ledger.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


class ViolationAdministration:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = FineLedger(db)
        self.audit = AuditTrail(db)

    def update(
        self, violation_id: int, request: ViolationUpdate, actor: Actor
    ) -> Violation:
        """
        Apply an administrative edit.

        Raises ValidationError when nothing would change or when the
        requested status contradicts the violation's payments.
        """
        changes = request.model_fields_set
        if not changes:
            raise ValidationError("No fields to update")

        def operation() -> Violation:
            violation = self.ledger.lock_violation(violation_id)
            described = []

            if "status" in changes and request.status is not None:
                total_paid = self.ledger.paid_total(violation.id)
                expected = reconcile(violation.fine_amount, total_paid)
                if request.status != expected:
                    raise ValidationError(
                        f"Status {request.status.value} contradicts "
                        f"{total_paid} paid of {violation.fine_amount}; "
                        f"expected {expected.value}"
                    )
                described.append(f"status confirmed as {expected.value}")

            if "attachment" in changes:
                violation.attachment = request.attachment
                described.append(
                    f"attachment set to {request.attachment!r}"
                    if request.attachment else "attachment removed"
                )

            if not described:
                raise ValidationError("No fields to update")

            self.ledger.refresh_status(violation)
            self.audit.record(
                actor.id,
                violation.id,
                ActionType.VIOLATION_UPDATED,
                f"Updated violation {violation.id}: {', '.join(described)}",
            )
            self.db.flush()
            return violation

        violation = run_in_transaction(self.db, operation)
        logger.info("Violation %d updated by %s", violation.id, actor.id)
        return violation

    def delete(self, violation_id: int, actor: Actor) -> None:
        """
        Hard-delete a violation and all of its payments.

        Exactly one audit entry is written. The HTTP layer only
        lets ADMIN actors reach this method.
        """

        def operation() -> None:
            violation = self.ledger.lock_violation(violation_id)
            # Reload the collection so the cascade sees every payment
            self.db.expire(violation, ["payments"])
            payments = list(violation.payments)
            plate_number = violation.vehicle.plate_number

            self.db.delete(violation)
            self.db.flush()

            self.audit.record(
                actor.id,
                violation_id,
                ActionType.VIOLATION_DELETED,
                f"Deleted violation {violation_id} against {plate_number} "
                f"with {len(payments)} payments totalling "
                f"{sum(p.amount for p in payments)}",
            )

        run_in_transaction(self.db, operation)
        logger.info("Violation %d deleted by %s", violation_id, actor.id)
