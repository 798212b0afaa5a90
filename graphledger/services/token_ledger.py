"""Token Ledger: atomic balance mutations with an append-only audit trail.

Invariants:
    - The user row is locked (SELECT ... FOR UPDATE) before the balance is read
    - Every balance change writes exactly one ledger row whose diff == new - previous
    - Balances never go below zero; amounts are 2-decimal Decimals
    - Invalid amounts are rejected before any write

Design Decisions:
    - recharge is set_absolute(previous + delta): a single write path for balances
    - Runs inside the caller's transaction when one is open, so model creation and
      execution debit atomically with their own writes
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import LedgerReason, UserId
from graphledger.core.errors import ConflictError, ResourceNotFoundError
from graphledger.core.repository_protocols import (
    LedgerStore, TokenTransactionLike, UserLike, UserStore,
)
from graphledger.core.token_amounts import (
    quantize_tokens, require_non_negative, require_positive,
)
from graphledger.infrastructure.database import transaction_scope
from graphledger.repositories.token_transaction_repository import (
    TokenTransactionRepository,
)
from graphledger.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceReceipt:
    previous_tokens: Decimal
    recharge_tokens: Decimal
    total_tokens: Decimal
    updated_at: datetime


@dataclass(frozen=True)
class LedgerReconciliation:
    """Balance vs. the sum of its ledger diffs."""
    balance: Decimal
    ledger_total: Decimal

    @property
    def consistent(self) -> bool:
        return self.balance == self.ledger_total


class TokenLedger:
    """Charges and credits user balances. Every mutation is ledgered."""

    def __init__(
        self, db: AsyncSession,
        users: UserStore | None = None, ledger: LedgerStore | None = None,
    ):
        self.db = db
        self.users = users or UserRepository(db)
        self.ledger = ledger or TokenTransactionRepository(db)

    async def lock_user(self, user_id: UserId) -> UserLike:
        """Row-lock the user for a read-check-write sequence."""
        user = await self.users.get_for_update(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def recharge(
        self, user_id: UserId, delta: object, performer_id: UserId | None,
        reason: LedgerReason = LedgerReason.ADMIN_RECHARGE,
    ) -> BalanceReceipt:
        amount = require_positive(delta, "tokens")
        async with transaction_scope(self.db):
            user = await self.lock_user(user_id)
            previous = quantize_tokens(Decimal(user.tokens))
            return await self._write(user_id, previous, previous + amount, performer_id, reason)

    async def set_absolute(
        self, user_id: UserId, new_balance: object, performer_id: UserId | None,
        reason: LedgerReason,
    ) -> BalanceReceipt:
        target = require_non_negative(new_balance, "tokens")
        async with transaction_scope(self.db):
            user = await self.lock_user(user_id)
            previous = quantize_tokens(Decimal(user.tokens))
            return await self._write(user_id, previous, target, performer_id, reason)

    async def recharge_by_email(
        self, email: str, delta: object, performer_id: UserId | None,
    ) -> BalanceReceipt:
        """Admin top-up addressed by email instead of id."""
        amount = require_positive(delta, "tokens")
        async with transaction_scope(self.db):
            user = await self.users.get_by_email(email)
            if user is None:
                raise ResourceNotFoundError("User", email)
            return await self.recharge(user.id, amount, performer_id)

    async def history(
        self, user_id: UserId, limit: int = 100,
    ) -> Sequence[TokenTransactionLike]:
        async with transaction_scope(self.db):
            if await self.users.get(user_id) is None:
                raise ResourceNotFoundError("User", str(user_id))
            return await self.ledger.list_for_user(user_id, limit)

    async def reconcile(self, user_id: UserId) -> LedgerReconciliation:
        async with transaction_scope(self.db):
            user = await self.users.get(user_id)
            if user is None:
                raise ResourceNotFoundError("User", str(user_id))
            total = await self.ledger.total_diff(user_id)
        result = LedgerReconciliation(
            balance=quantize_tokens(Decimal(user.tokens)), ledger_total=total,
        )
        if not result.consistent:
            logger.warning(
                f"Ledger drift: balance {result.balance} != ledger {result.ledger_total}",
                extra={"user_id": user_id},
            )
        return result

    async def _write(
        self, user_id: UserId, previous: Decimal, new: Decimal,
        performer_id: UserId | None, reason: LedgerReason,
    ) -> BalanceReceipt:
        new = quantize_tokens(new)
        updated_at = datetime.now(timezone.utc)
        if await self.users.update_balance(user_id, new, updated_at) != 1:
            raise ConflictError("Balance changed concurrently")
        await self.ledger.append(
            user_id, performer_id, previous, new, LedgerReason(reason).value,
        )
        diff = new - previous
        logger.info(
            f"Balance {previous} -> {new}",
            extra={
                "user_id": user_id, "performer_id": performer_id,
                "reason": LedgerReason(reason).value, "diff": str(diff),
            },
        )
        return BalanceReceipt(
            previous_tokens=previous, recharge_tokens=diff,
            total_tokens=new, updated_at=updated_at,
        )
