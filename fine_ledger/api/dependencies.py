"""
Request-scoped dependencies shared by the API routers.

Authentication happens upstream. The gateway forwards the
authenticated user in trusted headers, which are turned into an
Actor here and handed to the services unchanged.
"""

from fastapi import Depends, Header, HTTPException

from fine_ledger.models.enums import ActorRole
from fine_ledger.schemas.actor import Actor


def get_actor(
    x_actor_id: str = Header(min_length=1, max_length=64),
    x_actor_role: ActorRole = Header(),
) -> Actor:
    return Actor(id=x_actor_id, role=x_actor_role)


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    """Only administrators may pass."""
    if not actor.is_admin:
        raise HTTPException(
            status_code=403,
            detail={
                "kind": "Forbidden",
                "message": "This action requires the ADMIN role",
            },
        )
    return actor
