"""
Payment recorder: applies one payment to one violation.

Each payment, in a single transaction:
1. Locks the violation and reads its paid total
2. Rejects the payment if it exceeds the remaining balance
3. Inserts the payment row
4. Recomputes the status from all payment rows
5. Appends one audit entry describing the status transition

Either all of it is committed or none of it is.
"""

import logging

from sqlalchemy.orm import Session

from fine_ledger.exceptions import OverpaymentError
from fine_ledger.models.enums import ActionType
from fine_ledger.models.payment import Payment
from fine_ledger.models.violation import Violation
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.payment import PaymentCreate
from fine_ledger.services.audit_trail import AuditTrail
from fine_ledger.services.fine_ledger import FineLedger
from fine_ledger.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


class PaymentRecorder:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = FineLedger(db)
        self.audit = AuditTrail(db)

    def apply(self, request: PaymentCreate, actor: Actor) -> Violation:
        """
        Record a payment and return the violation as committed.

        Raises NotFoundError for an unknown violation and
        OverpaymentError when the amount is larger than what is
        still owed. A concurrent payment on the same violation is
        detected before commit and the whole operation is retried
        once against fresh data.
        """
        violation = run_in_transaction(
            self.db, lambda: self._apply(request, actor)
        )
        logger.info(
            "Recorded payment of %d on violation %d by %s (%s)",
            request.amount, violation.id, actor.id, violation.status.value,
        )
        return violation

    def _apply(self, request: PaymentCreate, actor: Actor) -> Violation:
        violation = self.ledger.lock_violation(request.violation_id)
        remaining = violation.fine_amount - self.ledger.paid_total(violation.id)

        if request.amount > remaining:
            logger.info(
                "Rejected payment of %d on violation %d: remaining %d",
                request.amount, violation.id, remaining,
            )
            raise OverpaymentError(
                f"Payment of {request.amount} exceeds the remaining "
                f"balance of {remaining} for violation {violation.id}"
            )

        self.db.add(Payment(
            violation_id=violation.id,
            amount=request.amount,
            recorded_by=actor.id,
        ))
        self.db.flush()

        old_status = violation.status
        new_status = self.ledger.refresh_status(violation)

        self.audit.record(
            actor.id,
            violation.id,
            ActionType.PAYMENT_RECORDED,
            f"Recorded payment of {request.amount} for violation "
            f"{violation.id}, status {old_status.value} -> {new_status.value}",
        )
        self.db.flush()
        return violation
