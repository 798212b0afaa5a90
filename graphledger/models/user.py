"""User ORM: identity, role and token balance.

Invariants:
    - email is unique
    - tokens is NUMERIC(12,2) and never negative (CHECK constraint backs the ledger rule)
    - tokens changes only through services/token_ledger.py

Design Decisions:
    - role stored as plain string matching UserRole values: portable across SQLite/Postgres
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class User(Base):
    """Account that owns models and holds a token balance."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("tokens >= 0", name="tokens_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    role: Mapped[str] = mapped_column(
        String(10), nullable=False, default="user",
    )
    tokens: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00"),
    )
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
