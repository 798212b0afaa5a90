"""WeightChangeRequest ORM: a moderated proposal to change one edge's weight.

Invariants:
    - status transitions: pending -> approved | rejected, exactly once
    - previous_weight / applied_weight / alpha_used populated only on approval
    - rejection_reason populated only on rejection
    - reviewer_id stays NULL until a decision is recorded

Design Decisions:
    - Decisions are conditional UPDATEs (WHERE status = 'pending'): the affected-row count
      is the concurrency check, no row lock is taken
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class WeightChangeRequest(Base):
    """Edge weight proposal awaiting (or carrying) a moderation decision."""
    __tablename__ = "weight_change_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    model_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("graph_models.id"), nullable=False,
    )
    requester_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    from_node: Mapped[str] = mapped_column(String(255), nullable=False)
    to_node: Mapped[str] = mapped_column(String(255), nullable=False)
    requested_weight: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default="pending",
    )
    reviewer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    previous_weight: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True,
    )
    applied_weight: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True,
    )
    alpha_used: Mapped[Decimal | None] = mapped_column(
        Numeric(3, 2), nullable=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
