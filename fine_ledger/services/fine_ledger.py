"""
Fine ledger: violations, their fixed fines, and their paid totals.

This service enforces:
1. Plates are well formed and identify exactly one vehicle
2. A fine amount is fixed from the vehicle category at issuance
3. A status is always the reconciled result of the payment rows
4. The paid total of a violation never exceeds its fine

Payment services read and lock violations through this service so
that every writer goes through the same reconciliation path.
"""

import logging
import re
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fine_ledger.exceptions import (
    ConcurrencyConflict,
    NotFoundError,
    ValidationError,
)
from fine_ledger.models.enums import (
    ActionType,
    VehicleCategory,
    ViolationStatus,
)
from fine_ledger.models.payment import Payment
from fine_ledger.models.vehicle import Vehicle
from fine_ledger.models.violation import Violation
from fine_ledger.schemas.actor import Actor
from fine_ledger.schemas.violation import ViolationIssue
from fine_ledger.services.audit_trail import AuditTrail
from fine_ledger.services.reconciler import reconcile
from fine_ledger.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


PLATE_PATTERN = re.compile(r"^[A-Z]{3}-[0-9]{4}$")

# Fine charged per violation, by vehicle category.
FINE_SCHEDULE: dict[VehicleCategory, int] = {
    VehicleCategory.MULTICAB: 20,
    VehicleCategory.VAN: 30,
}


class FineLedger:

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditTrail(db)

    # --- Issuance ---

    def issue(self, request: ViolationIssue, actor: Actor) -> Violation:
        """
        Issue a violation against a plate.

        The vehicle is created on first sight of its plate. The
        fine is taken from the stored vehicle category, so it is
        fixed here and never recomputed.
        """
        if not PLATE_PATTERN.match(request.plate_number):
            raise ValidationError(
                f"Invalid plate number '{request.plate_number}': "
                f"expected format LLL-DDDD (e.g. ABC-1234)"
            )

        def operation() -> Violation:
            vehicle = self._get_or_create_vehicle(
                request.plate_number, request.vehicle_category
            )
            violation = Violation(
                vehicle_id=vehicle.id,
                violation_type=request.violation_type,
                issued_at=request.issued_at,
                fine_amount=FINE_SCHEDULE[vehicle.category],
                status=ViolationStatus.UNPAID,
                issued_by=actor.id,
            )
            self.db.add(violation)
            self.db.flush()

            self.audit.record(
                actor.id,
                violation.id,
                ActionType.VIOLATION_ISSUED,
                f"Issued {violation.violation_type.value} violation "
                f"{violation.id} against {vehicle.plate_number} "
                f"with a fine of {violation.fine_amount}",
            )
            return violation

        violation = run_in_transaction(self.db, operation)
        logger.info(
            "Issued violation %d (fine %d) by %s",
            violation.id, violation.fine_amount, actor.id,
        )
        return violation

    def _get_or_create_vehicle(
        self, plate_number: str, category: VehicleCategory
    ) -> Vehicle:
        vehicle = self.get_vehicle_by_plate(plate_number)
        if vehicle:
            if vehicle.category != category:
                logger.warning(
                    "Plate %s is registered as %s; ignoring category %s",
                    plate_number, vehicle.category.value, category.value,
                )
            return vehicle

        vehicle = Vehicle(plate_number=plate_number, category=category)
        self.db.add(vehicle)
        try:
            self.db.flush()
        except IntegrityError as e:
            # Another request registered the same plate first
            raise ConcurrencyConflict(
                f"Vehicle {plate_number} was registered concurrently"
            ) from e
        return vehicle

    # --- Lookups ---

    def get_vehicle_by_plate(self, plate_number: str) -> Vehicle | None:
        return self.db.execute(
            select(Vehicle).where(Vehicle.plate_number == plate_number)
        ).scalar_one_or_none()

    def get_violation(self, violation_id: int) -> Violation:
        """Get a violation by ID."""
        violation = self.db.get(Violation, violation_id)
        if not violation:
            raise NotFoundError(f"Violation {violation_id} not found")
        return violation

    def get_payments(self, violation_id: int) -> list[Payment]:
        """Return all payments for a violation, oldest first."""
        self.get_violation(violation_id)
        payments = self.db.execute(
            select(Payment)
            .where(Payment.violation_id == violation_id)
            .order_by(Payment.id)
        ).scalars().all()
        return list(payments)

    def paid_total(self, violation_id: int) -> int:
        """
        Sum every payment recorded against a violation.

        The total is never stored; it is always derived from
        the payment rows.
        """
        total = self.db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(
                Payment.violation_id == violation_id
            )
        ).scalar()
        return int(total)

    def paid_totals(self, violation_ids: list[int]) -> dict[int, int]:
        """Paid total per violation, in one query."""
        rows = self.db.execute(
            select(Payment.violation_id, func.sum(Payment.amount))
            .where(Payment.violation_id.in_(violation_ids))
            .group_by(Payment.violation_id)
        ).all()
        totals = {violation_id: 0 for violation_id in violation_ids}
        totals.update({violation_id: int(total) for violation_id, total in rows})
        return totals

    def remaining_balance(self, violation_id: int) -> int:
        violation = self.get_violation(violation_id)
        return violation.fine_amount - self.paid_total(violation_id)

    # --- Locking and reconciliation (used inside a unit of work) ---

    def lock_violation(self, violation_id: int) -> Violation:
        """
        Load a violation for update.

        Takes a row lock where the database supports it and always
        refreshes the cached object, so the version read here is
        the one the final UPDATE is checked against.
        """
        violation = self.db.execute(
            select(Violation)
            .where(Violation.id == violation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not violation:
            raise NotFoundError(f"Violation {violation_id} not found")
        return violation

    def lock_violations(self, violation_ids: list[int]) -> list[Violation]:
        """
        Load several violations for update, in ascending id order.

        Every caller locks in the same order, so overlapping bulk
        settlements cannot deadlock. Missing ids are simply absent
        from the result.
        """
        violations = self.db.execute(
            select(Violation)
            .where(Violation.id.in_(violation_ids))
            .order_by(Violation.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()
        return list(violations)

    def refresh_status(self, violation: Violation) -> ViolationStatus:
        """
        Recompute a violation's status from its payment rows.

        Must run after new payments are flushed. Re-validates the
        paid total before anything is committed; a total above the
        fine or a backwards transition means another writer got in
        between, and the unit of work is aborted as a conflict.
        """
        total_paid = self.paid_total(violation.id)
        if total_paid > violation.fine_amount:
            raise ConcurrencyConflict(
                f"Violation {violation.id} would be overpaid "
                f"({total_paid} of {violation.fine_amount})"
            )

        new_status = reconcile(violation.fine_amount, total_paid)
        if new_status != violation.status and not violation.can_transition_to(new_status):
            raise ConcurrencyConflict(
                f"Violation {violation.id} cannot move from "
                f"{violation.status.value} to {new_status.value}"
            )

        violation.status = new_status
        # Always write the row so the version check runs, even
        # when the status itself is unchanged.
        violation.updated_at = datetime.utcnow()
        return new_status
