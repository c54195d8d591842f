"""
Violation model.

A violation carries a fine whose amount is fixed when it is
issued. Its status is never set freely: it is always the
reconciled result of the payments recorded against it.

The status has a state machine. Cumulative payments only grow,
so the status only moves forward.
"""

from datetime import datetime

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fine_ledger.models.base import Base
from fine_ledger.models.enums import ViolationStatus, ViolationType


VALID_TRANSITIONS: dict[ViolationStatus, set[ViolationStatus]] = {
    ViolationStatus.UNPAID: {
        ViolationStatus.PARTIALLY_PAID,
        ViolationStatus.PAID,
    },
    ViolationStatus.PARTIALLY_PAID: {ViolationStatus.PAID},
    ViolationStatus.PAID: set(),  # Terminal state
}


class Violation(Base):
    __tablename__ = "violations"
    __table_args__ = (
        CheckConstraint("fine_amount > 0", name="ck_violations_fine_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    vehicle_id: Mapped[int] = mapped_column(
        ForeignKey("vehicles.id"), nullable=False, index=True
    )
    violation_type: Mapped[ViolationType] = mapped_column(
        SAEnum(
            ViolationType,
            name="violation_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    issued_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    fine_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ViolationStatus] = mapped_column(
        SAEnum(
            ViolationStatus,
            name="violation_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=ViolationStatus.UNPAID,
    )
    issued_by: Mapped[str] = mapped_column(String(64), nullable=False)
    attachment: Mapped[str | None] = mapped_column(
        String(500), nullable=True, default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    # Optimistic concurrency counter. SQLAlchemy adds
    # "AND version = :expected" to every UPDATE and raises
    # StaleDataError when another transaction got there first.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    vehicle: Mapped["Vehicle"] = relationship(back_populates="violations")
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="violation",
        cascade="all, delete-orphan",
        order_by="Payment.id",
    )

    def can_transition_to(self, new_status: ViolationStatus) -> bool:
        """Check if a state transition is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return (
            f"<Violation {self.id} {self.violation_type.value} "
            f"{self.fine_amount} ({self.status.value})>"
        )
