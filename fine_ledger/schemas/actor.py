"""
The acting user, as resolved by the authenticating layer.
"""

from pydantic import BaseModel, Field

from fine_ledger.models.enums import ActorRole


class Actor(BaseModel):
    """Trusted identity passed into every mutating operation."""
    id: str = Field(min_length=1, max_length=64)
    role: ActorRole

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN
