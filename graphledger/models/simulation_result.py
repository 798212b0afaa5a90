"""SimulationResult ORM: one sampled weight of a sweep.

Invariants:
    - Append-only, one row per sampled weight
    - path_cost IS NULL exactly when path_found is false (no route at that weight)

Design Decisions:
    - Explicit path_found flag instead of a numeric infinity: NUMERIC columns cannot
      hold one portably
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, JSON, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class SimulationResult(Base):
    """Path outcome for a single tested weight."""
    __tablename__ = "simulation_results"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    simulation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("simulations.id"), nullable=False,
    )
    tested_weight: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    path: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    path_found: Mapped[bool] = mapped_column(Boolean, nullable=False)
    path_cost: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 4), nullable=True,
    )
    execution_time_ms: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    simulation: Mapped["Simulation"] = relationship(
        "Simulation", back_populates="results",
    )
