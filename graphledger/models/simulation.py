"""Simulation ORM: header of one weight sweep over a single edge.

Invariants:
    - Bound to the model version that was current when the sweep started
    - Immutable once inserted; results are appended in simulation_result.py
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class Simulation(Base):
    """Sweep header: edge under test and the [start, stop] / step bounds."""
    __tablename__ = "simulations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    model_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("graph_models.id"), nullable=False,
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    from_node: Mapped[str] = mapped_column(String(255), nullable=False)
    to_node: Mapped[str] = mapped_column(String(255), nullable=False)
    start_weight: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    stop_weight: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    step_weight: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    results: Mapped[list["SimulationResult"]] = relationship(
        "SimulationResult", back_populates="simulation",
        order_by="SimulationResult.tested_weight", lazy="selectin",
    )
