"""
Audit trail service: the append-only log of mutating actions.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from fine_ledger.models.action import Action
from fine_ledger.models.enums import ActionType


class AuditTrail:
    """
    Writes audit entries into the caller's transaction.

    record() only adds and flushes; the entry is committed or
    rolled back together with the change it describes.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        actor_id: str,
        violation_id: int | None,
        event_type: ActionType,
        description: str,
        timestamp: datetime | None = None,
    ) -> Action:
        action = Action(
            actor_id=actor_id,
            violation_id=violation_id,
            event_type=event_type,
            description=description,
            created_at=timestamp or datetime.utcnow(),
        )
        self.db.add(action)
        self.db.flush()
        return action

    def for_violation(self, violation_id: int) -> list[Action]:
        """Return all entries for a violation, oldest first."""
        actions = self.db.execute(
            select(Action)
            .where(Action.violation_id == violation_id)
            .order_by(Action.id)
        ).scalars().all()
        return list(actions)
