"""Model Store: models, immutable versions and the current-version pointer."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import Graph, ModelId, UserId
from graphledger.models.graph_model import GraphModel
from graphledger.models.graph_version import GraphVersion


class ModelRepository:
    """SQL implementation of ModelStore. Versions are insert-only."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_model(self, model_id: ModelId) -> GraphModel | None:
        result = await self.db.execute(
            select(GraphModel).where(GraphModel.id == model_id),
        )
        return result.scalar_one_or_none()

    async def find_by_owner_and_name(
        self, owner_id: UserId, name: str,
    ) -> GraphModel | None:
        result = await self.db.execute(
            select(GraphModel)
            .where(GraphModel.owner_id == owner_id)
            .where(GraphModel.name == name)
        )
        return result.scalar_one_or_none()

    async def create_model(
        self, owner_id: UserId, name: str, description: str | None,
    ) -> GraphModel:
        model = GraphModel(
            owner_id=owner_id, name=name, description=description,
            current_version=1,
        )
        self.db.add(model)
        await self.db.flush()
        return model

    async def create_version(
        self, model_id: ModelId, version_number: int, graph: Graph,
        node_count: int, edge_count: int, alpha_used: Decimal | None,
        creator_id: UserId,
    ) -> GraphVersion:
        version = GraphVersion(
            model_id=model_id,
            version_number=version_number,
            graph=graph,
            node_count=node_count,
            edge_count=edge_count,
            alpha_used=alpha_used,
            creator_id=creator_id,
        )
        self.db.add(version)
        await self.db.flush()
        return version

    async def find_version(
        self, model_id: ModelId, version_number: int,
    ) -> GraphVersion | None:
        result = await self.db.execute(
            select(GraphVersion)
            .where(GraphVersion.model_id == model_id)
            .where(GraphVersion.version_number == version_number)
        )
        return result.scalar_one_or_none()

    async def find_latest_version(self, model_id: ModelId) -> GraphVersion | None:
        result = await self.db.execute(
            select(GraphVersion)
            .where(GraphVersion.model_id == model_id)
            .order_by(GraphVersion.version_number.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def advance_current_version(
        self, model_id: ModelId, expected: int, new: int,
    ) -> int:
        """Move the pointer only if it still reads `expected`."""
        result = await self.db.execute(
            update(GraphModel)
            .where(GraphModel.id == model_id)
            .where(GraphModel.current_version == expected)
            .values(current_version=new, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def list_versions(
        self, model_id: ModelId,
        from_date: datetime | None = None, to_date: datetime | None = None,
        node_count: int | None = None, edge_count: int | None = None,
    ) -> Sequence[GraphVersion]:
        query = select(GraphVersion).where(GraphVersion.model_id == model_id)
        if from_date:
            query = query.where(GraphVersion.created_at >= from_date)
        if to_date:
            query = query.where(GraphVersion.created_at <= to_date)
        if node_count is not None:
            query = query.where(GraphVersion.node_count == node_count)
        if edge_count is not None:
            query = query.where(GraphVersion.edge_count == edge_count)
        query = query.order_by(GraphVersion.version_number.desc())
        result = await self.db.execute(query)
        return result.scalars().all()
