"""Ledger Store: append-only token transactions."""

from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import UserId
from graphledger.core.token_amounts import quantize_tokens
from graphledger.models.token_transaction import TokenTransaction


class TokenTransactionRepository:
    """SQL implementation of LedgerStore. Insert and read only."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self, user_id: UserId, performer_id: UserId | None,
        previous_tokens: Decimal, new_tokens: Decimal, reason: str,
    ) -> TokenTransaction:
        entry = TokenTransaction(
            user_id=user_id,
            performer_id=performer_id,
            previous_tokens=previous_tokens,
            new_tokens=new_tokens,
            diff_tokens=quantize_tokens(new_tokens - previous_tokens),
            reason=reason,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def list_for_user(
        self, user_id: UserId, limit: int = 100,
    ) -> Sequence[TokenTransaction]:
        result = await self.db.execute(
            select(TokenTransaction)
            .where(TokenTransaction.user_id == user_id)
            .order_by(TokenTransaction.created_at.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def total_diff(self, user_id: UserId) -> Decimal:
        result = await self.db.execute(
            select(func.sum(TokenTransaction.diff_tokens))
            .where(TokenTransaction.user_id == user_id)
        )
        total = result.scalar_one()
        return quantize_tokens(Decimal(str(total))) if total is not None else Decimal("0.00")
