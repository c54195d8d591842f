"""
Action (audit trail) model.

Records every mutation of violation or payment state together with
the actor who caused it.
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Text, Enum as SAEnum, event
from sqlalchemy.orm import Mapped, mapped_column

from fine_ledger.exceptions import PersistenceError
from fine_ledger.models.base import Base
from fine_ledger.models.enums import ActionType


class Action(Base):
    """
    Immutable record of a mutating action.

    Audit entries are append-only. violation_id is not a foreign
    key: the entry written when a violation is deleted outlives it.
    """

    __tablename__ = "actions"

    id: Mapped[int] = mapped_column(primary_key=True)
    actor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    violation_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )
    event_type: Mapped[ActionType] = mapped_column(
        SAEnum(ActionType, name="action_type_enum", create_constraint=True),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Action {self.event_type.value} by {self.actor_id}>"


@event.listens_for(Action, "before_update")
def _reject_action_update(mapper, connection, target):
    raise PersistenceError(
        f"Audit entry {target.id} is append-only and cannot be updated"
    )
