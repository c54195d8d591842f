"""
Tests for the FineLedger: issuance, vehicle registration,
and paid totals.
"""

import pytest
from sqlalchemy import select, func

from fine_ledger.exceptions import NotFoundError, ValidationError
from fine_ledger.models.action import Action
from fine_ledger.models.enums import (
    ActionType,
    VehicleCategory,
    ViolationStatus,
    ViolationType,
)
from fine_ledger.models.vehicle import Vehicle
from fine_ledger.schemas.violation import ViolationIssue
from fine_ledger.services.fine_ledger import FineLedger


def count(db_session, model):
    return db_session.execute(select(func.count()).select_from(model)).scalar()


class TestIssue:

    def test_multicab_fine_is_20(self, issue_violation):
        violation = issue_violation("ABC-1234", VehicleCategory.MULTICAB)

        assert violation.id is not None
        assert violation.fine_amount == 20
        assert violation.status == ViolationStatus.UNPAID
        assert violation.violation_type == ViolationType.TERMINAL_FEE
        assert violation.issued_by == "enforcer-1"

    def test_van_fine_is_30(self, issue_violation):
        violation = issue_violation("XYZ-9876", VehicleCategory.VAN)
        assert violation.fine_amount == 30

    def test_new_violation_has_no_payments(self, db_session, issue_violation):
        violation = issue_violation()
        ledger = FineLedger(db_session)

        assert ledger.paid_total(violation.id) == 0
        assert ledger.remaining_balance(violation.id) == 20
        assert ledger.get_payments(violation.id) == []

    def test_plate_is_normalized(self, db_session, issue_violation):
        violation = issue_violation("  abc-1234 ")
        assert violation.vehicle.plate_number == "ABC-1234"

    @pytest.mark.parametrize("plate", ["AB-1234", "ABCD-1234", "ABC1234", "123-ABCD"])
    def test_malformed_plate_rejected(self, db_session, enforcer, plate):
        ledger = FineLedger(db_session)
        with pytest.raises(ValidationError, match="Invalid plate number"):
            ledger.issue(
                ViolationIssue(
                    plate_number=plate,
                    vehicle_category=VehicleCategory.VAN,
                ),
                enforcer,
            )
        assert count(db_session, Vehicle) == 0

    def test_vehicle_reused_for_same_plate(self, db_session, issue_violation):
        first = issue_violation("ABC-1234")
        second = issue_violation("ABC-1234")

        assert first.vehicle_id == second.vehicle_id
        assert count(db_session, Vehicle) == 1

    def test_category_fixed_at_first_sight(self, db_session, issue_violation):
        issue_violation("ABC-1234", VehicleCategory.MULTICAB)
        second = issue_violation("ABC-1234", VehicleCategory.VAN)

        vehicle = FineLedger(db_session).get_vehicle_by_plate("ABC-1234")
        assert vehicle.category == VehicleCategory.MULTICAB
        assert second.fine_amount == 20

    def test_issue_is_audited(self, db_session, issue_violation):
        violation = issue_violation()

        actions = db_session.execute(select(Action)).scalars().all()
        assert len(actions) == 1
        assert actions[0].event_type == ActionType.VIOLATION_ISSUED
        assert actions[0].violation_id == violation.id
        assert actions[0].actor_id == "enforcer-1"
        assert "ABC-1234" in actions[0].description

    def test_timezone_aware_timestamp_stored_as_utc(self, db_session, enforcer):
        request = ViolationIssue(
            plate_number="ABC-1234",
            vehicle_category=VehicleCategory.VAN,
            issued_at="2025-03-14T20:00:00+08:00",
        )
        violation = FineLedger(db_session).issue(request, enforcer)

        assert violation.issued_at.tzinfo is None
        assert violation.issued_at.hour == 12


class TestLookups:

    def test_missing_violation_raises_not_found(self, db_session):
        ledger = FineLedger(db_session)
        with pytest.raises(NotFoundError, match="not found"):
            ledger.get_violation(999)

    def test_payments_of_missing_violation_raise_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            FineLedger(db_session).get_payments(999)

    def test_unknown_plate_returns_none(self, db_session):
        assert FineLedger(db_session).get_vehicle_by_plate("ZZZ-0000") is None

    def test_paid_totals_default_to_zero(self, db_session, issue_violation):
        a = issue_violation("ABC-1234")
        b = issue_violation("XYZ-9876")

        totals = FineLedger(db_session).paid_totals([a.id, b.id])
        assert totals == {a.id: 0, b.id: 0}
