"""Request Dependencies: caller identity and role/ownership guards.

Invariants:
    - Identity is resolved upstream and arrives as X-User-Id / X-User-Role headers;
      it is trusted, not authenticated, here
    - Missing or malformed identity -> 401; wrong role or not the owner -> 403
"""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from graphledger.core.domain_types import CallerContext, UserId, UserRole
from graphledger.core.errors import ForbiddenError
from graphledger.core.repository_protocols import ModelLike


async def get_caller(
    x_user_id: str | None = Header(None),
    x_user_role: str = Header(UserRole.USER.value),
) -> CallerContext:
    if not x_user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity")
    try:
        return CallerContext(
            user_id=UserId(UUID(x_user_id)), role=UserRole(x_user_role.lower()),
        )
    except ValueError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Malformed caller identity")


async def require_admin(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    if not caller.is_admin:
        raise ForbiddenError("Admin role required")
    return caller


def ensure_model_owner(model: ModelLike, caller: CallerContext) -> None:
    if model.owner_id != caller.user_id:
        raise ForbiddenError("Only the model owner can moderate weight changes")
