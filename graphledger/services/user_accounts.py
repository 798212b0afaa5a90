"""User Accounts: provisioning with an initial token grant, and profile reads."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.config import get_settings
from graphledger.core.domain_types import LedgerReason, UserId, UserRole
from graphledger.core.errors import ConflictError, ResourceNotFoundError
from graphledger.core.repository_protocols import UserLike, UserStore
from graphledger.core.token_amounts import require_non_negative
from graphledger.infrastructure.database import transaction_scope
from graphledger.repositories.user_repository import UserRepository
from graphledger.services.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


class UserAccountService:
    def __init__(
        self, db: AsyncSession,
        users: UserStore | None = None,
        ledger: TokenLedger | None = None,
        initial_tokens: object | None = None,
    ):
        self.db = db
        self.users = users or UserRepository(db)
        self.ledger = ledger or TokenLedger(db, users=self.users)
        grant = initial_tokens if initial_tokens is not None else get_settings().initial_user_tokens
        self.initial_tokens = require_non_negative(grant, "initial_user_tokens")

    async def provision_user(
        self, email: str, role: UserRole = UserRole.USER,
        performer_id: UserId | None = None,
    ) -> UserLike:
        """Create the user at 0 tokens, then ledger the seed grant if any."""
        async with transaction_scope(self.db):
            if await self.users.get_by_email(email):
                raise ConflictError(f"User '{email}' already exists")
            user = await self.users.create(email, UserRole(role).value)
            if self.initial_tokens > Decimal("0"):
                await self.ledger.set_absolute(
                    user.id, self.initial_tokens, performer_id, LedgerReason.SEED_GRANT,
                )
            user = await self.users.get(user.id)

        logger.info(
            f"User provisioned with role {UserRole(role).value}",
            extra={"user_id": user.id, "performer_id": performer_id},
        )
        return user

    async def profile(self, user_id: UserId) -> UserLike:
        async with transaction_scope(self.db):
            user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user
