"""User Store: user rows, row locks and balance writes."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import UserId
from graphledger.models.user import User


class UserRepository:
    """SQL implementation of UserStore."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.lower()),
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, user_id: UserId) -> User | None:
        """SELECT ... FOR UPDATE: lock held until the transaction ends."""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, email: str, role: str) -> User:
        user = User(email=email.lower(), role=role, tokens=Decimal("0.00"))
        self.db.add(user)
        await self.db.flush()
        return user

    async def update_balance(
        self, user_id: UserId, tokens: Decimal, updated_at: datetime,
    ) -> int:
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(tokens=tokens, updated_at=updated_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
