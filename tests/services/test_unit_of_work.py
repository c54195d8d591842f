"""
Tests for the unit of work.

Every failure rolls the session back; storage errors come out as
ledger errors that never carry query text.
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from fine_ledger.exceptions import (
    ConcurrencyConflict,
    NotFoundError,
    PersistenceError,
)
from fine_ledger.models.enums import VehicleCategory
from fine_ledger.models.vehicle import Vehicle
from fine_ledger.services.unit_of_work import atomic, run_in_transaction


def vehicle_count(db_session):
    return db_session.execute(select(func.count()).select_from(Vehicle)).scalar()


def add_vehicle(db_session):
    db_session.add(Vehicle(plate_number="ABC-1234", category=VehicleCategory.VAN))
    db_session.flush()


class TestAtomic:

    def test_commits_on_success(self, db_session):
        with atomic(db_session):
            add_vehicle(db_session)

        assert vehicle_count(db_session) == 1

    def test_ledger_error_propagates_and_rolls_back(self, db_session):
        with pytest.raises(NotFoundError):
            with atomic(db_session):
                add_vehicle(db_session)
                raise NotFoundError("Violation 1 not found")

        assert vehicle_count(db_session) == 0

    def test_stale_version_becomes_conflict(self, db_session):
        with pytest.raises(ConcurrencyConflict):
            with atomic(db_session):
                add_vehicle(db_session)
                raise StaleDataError("UPDATE violations matched 0 rows")

        assert vehicle_count(db_session) == 0

    def test_locked_database_becomes_conflict(self, db_session):
        with pytest.raises(ConcurrencyConflict):
            with atomic(db_session):
                raise OperationalError(
                    "UPDATE violations SET status=?", ("PAID",),
                    Exception("database is locked"),
                )

    def test_other_storage_failure_hides_query(self, db_session):
        with pytest.raises(PersistenceError) as exc_info:
            with atomic(db_session):
                add_vehicle(db_session)
                raise OperationalError(
                    "INSERT INTO payments (amount) VALUES (?)", (5,),
                    Exception("disk I/O error"),
                )

        assert exc_info.value.to_dict() == {
            "kind": "PersistenceError",
            "message": "The ledger could not be updated",
        }
        assert vehicle_count(db_session) == 0

    def test_integrity_failure_becomes_persistence_error(self, db_session):
        with pytest.raises(PersistenceError):
            with atomic(db_session):
                raise IntegrityError(
                    "INSERT INTO vehicles", (), Exception("UNIQUE constraint failed")
                )


class TestRunInTransaction:

    def test_conflict_is_retried_once(self, db_session):
        attempts = []

        def operation():
            attempts.append(1)
            if len(attempts) == 1:
                raise ConcurrencyConflict("busy")
            return "done"

        assert run_in_transaction(db_session, operation, retries=1) == "done"
        assert len(attempts) == 2

    def test_conflict_surfaces_after_retries(self, db_session):
        attempts = []

        def operation():
            attempts.append(1)
            raise ConcurrencyConflict("busy")

        with pytest.raises(ConcurrencyConflict):
            run_in_transaction(db_session, operation, retries=1)
        assert len(attempts) == 2

    def test_persistence_error_is_not_retried(self, db_session):
        attempts = []

        def operation():
            attempts.append(1)
            raise OperationalError("SELECT 1", (), Exception("disk I/O error"))

        with pytest.raises(PersistenceError):
            run_in_transaction(db_session, operation, retries=3)
        assert len(attempts) == 1
