"""TokenTransaction ORM: append-only ledger of balance mutations.

Invariants:
    - One row per balance change, written in the same transaction as the change
    - diff_tokens == new_tokens - previous_tokens
    - performer_id is NULL for system-initiated entries
    - Rows are never updated or deleted: replaying diffs reconstructs every balance
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class TokenTransaction(Base):
    """Ledger entry for one balance mutation."""
    __tablename__ = "token_transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    performer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    previous_tokens: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    new_tokens: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    diff_tokens: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    reason: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
