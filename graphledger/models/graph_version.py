"""GraphVersion ORM: immutable snapshot of a model's graph.

Invariants:
    - (model_id, version_number) is unique; numbers are gapless from 1
    - Rows are inserted, never updated or deleted
    - node_count/edge_count computed at insert time from the stored graph
    - alpha_used is set only when the version came from an approved weight change

Design Decisions:
    - JSON column for the adjacency map: the graph is read whole, never queried into
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    DateTime, ForeignKey, Integer, JSON, Numeric, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from graphledger.db.base import Base


class GraphVersion(Base):
    """Versioned graph snapshot."""
    __tablename__ = "graph_versions"
    __table_args__ = (
        UniqueConstraint(
            "model_id", "version_number", name="uq_graph_versions_model_version",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    model_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("graph_models.id"), nullable=False,
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    graph: Mapped[dict] = mapped_column(JSON, nullable=False)
    node_count: Mapped[int] = mapped_column(Integer, nullable=False)
    edge_count: Mapped[int] = mapped_column(Integer, nullable=False)
    alpha_used: Mapped[Decimal | None] = mapped_column(
        Numeric(3, 2), nullable=True,
    )
    creator_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
