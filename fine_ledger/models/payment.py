"""
Payment model.

A payment is one amount applied to one violation. Payments are
append-only: once written they are never modified. They are only
ever removed together with their violation.
"""

from datetime import datetime

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, CheckConstraint, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fine_ledger.exceptions import PersistenceError
from fine_ledger.models.base import Base


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    violation_id: Mapped[int] = mapped_column(
        ForeignKey("violations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    violation: Mapped["Violation"] = relationship(back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment {self.amount} on violation {self.violation_id}>"


@event.listens_for(Payment, "before_update")
def _reject_payment_update(mapper, connection, target):
    raise PersistenceError(
        f"Payment {target.id} is immutable and cannot be updated"
    )
