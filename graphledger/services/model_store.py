"""Model & Version Store: paid model creation, paid execution, version reads.

Invariants:
    - A model and its version 1 are created in the same transaction as the owner's debit
    - Balance < cost raises InsufficientTokensError before any write
    - Execution charges only when a path is found; NoPathFoundError charges nothing
    - The latest version is the one current_version points to; a pointer with no row
      falls back to the highest version_number and logs a consistency warning

Design Decisions:
    - Cost comes from core/graph_cost.py on the version being operated on
    - Debits go through TokenLedger.set_absolute so they share its lock and ledger row
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import Graph, LedgerReason, ModelId, UserId
from graphledger.core.errors import (
    BadRequestError, ConflictError, InsufficientTokensError, NoPathFoundError,
    ResourceNotFoundError,
)
from graphledger.core.graph_cost import compute_graph_cost, has_node, validate_graph
from graphledger.core.path_engine import DijkstraPathEngine, PathEngine
from graphledger.core.repository_protocols import ModelLike, ModelStore, VersionLike
from graphledger.infrastructure.database import transaction_scope
from graphledger.repositories.model_repository import ModelRepository
from graphledger.services.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedModel:
    model: ModelLike
    version: VersionLike
    charged_tokens: Decimal
    remaining_tokens: Decimal


@dataclass(frozen=True)
class ExecutionResult:
    model_id: ModelId
    version_number: int
    path: list[str]
    cost: float
    execution_time_ms: float
    charged_tokens: Decimal
    remaining_tokens: Decimal


class ModelService:
    """Create, execute and read graph models and their immutable versions."""

    def __init__(
        self, db: AsyncSession,
        models: ModelStore | None = None,
        ledger: TokenLedger | None = None,
        engine: PathEngine | None = None,
    ):
        self.db = db
        self.models = models or ModelRepository(db)
        self.ledger = ledger or TokenLedger(db)
        self.engine = engine or DijkstraPathEngine()

    async def create_model_with_version(
        self, owner_id: UserId, name: str, description: str | None, graph: Graph,
    ) -> CreatedModel:
        error = validate_graph(graph)
        if error:
            raise BadRequestError(error, "INVALID_GRAPH")
        sizing = compute_graph_cost(graph)

        async with transaction_scope(self.db):
            if await self.models.find_by_owner_and_name(owner_id, name):
                raise ConflictError(f"Model '{name}' already exists")
            owner = await self.ledger.lock_user(owner_id)
            balance = Decimal(owner.tokens)
            if balance < sizing.cost:
                raise InsufficientTokensError(sizing.cost, balance)

            model = await self.models.create_model(owner_id, name, description)
            version = await self.models.create_version(
                model.id, 1, graph, sizing.nodes, sizing.edges, None, owner_id,
            )
            receipt = await self.ledger.set_absolute(
                owner_id, balance - sizing.cost, owner_id, LedgerReason.MODEL_CREATION,
            )

        logger.info(
            f"Model '{name}' created ({sizing.nodes} nodes, {sizing.edges} edges)",
            extra={"model_id": model.id, "user_id": owner_id, "version_number": 1},
        )
        return CreatedModel(
            model=model, version=version,
            charged_tokens=sizing.cost, remaining_tokens=receipt.total_tokens,
        )

    async def execute_model(
        self, model_id: ModelId, start: str, goal: str, user_id: UserId,
    ) -> ExecutionResult:
        async with transaction_scope(self.db):
            version = await self.get_latest_version(model_id)
            graph = version.graph
            for node in (start, goal):
                if not has_node(graph, node):
                    raise BadRequestError(f"Node '{node}' is not in the graph", "UNKNOWN_NODE")
            cost = compute_graph_cost(graph).cost

            user = await self.ledger.lock_user(user_id)
            balance = Decimal(user.tokens)
            if balance < cost:
                raise InsufficientTokensError(cost, balance)

            started = time.perf_counter()
            result = self.engine.find_path(graph, start, goal)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 4)
            if result is None:
                raise NoPathFoundError(start, goal)

            receipt = await self.ledger.set_absolute(
                user_id, balance - cost, user_id, LedgerReason.MODEL_EXECUTION,
            )

        logger.info(
            f"Executed {start} -> {goal}: cost {result.cost}",
            extra={
                "model_id": model_id, "user_id": user_id,
                "version_number": version.version_number,
            },
        )
        return ExecutionResult(
            model_id=model_id,
            version_number=version.version_number,
            path=result.path,
            cost=result.cost,
            execution_time_ms=elapsed_ms,
            charged_tokens=cost,
            remaining_tokens=receipt.total_tokens,
        )

    async def get_model(self, model_id: ModelId) -> ModelLike:
        async with transaction_scope(self.db):
            model = await self.models.get_model(model_id)
        if model is None:
            raise ResourceNotFoundError("Model", str(model_id))
        return model

    async def get_latest_version(self, model_id: ModelId) -> VersionLike:
        async with transaction_scope(self.db):
            model = await self.get_model(model_id)
            version = await self.models.find_version(model_id, model.current_version)
            if version is None:
                version = await self.models.find_latest_version(model_id)
                logger.warning(
                    f"current_version {model.current_version} has no row, "
                    f"using {version.version_number if version else None}",
                    extra={"model_id": model_id},
                )
        if version is None:
            raise ResourceNotFoundError("Version", f"{model_id}/latest")
        return version

    async def get_model_with_latest(
        self, model_id: ModelId,
    ) -> tuple[ModelLike, VersionLike]:
        async with transaction_scope(self.db):
            model = await self.get_model(model_id)
            version = await self.get_latest_version(model_id)
        return model, version

    async def list_versions(
        self, model_id: ModelId,
        from_date: datetime | None = None, to_date: datetime | None = None,
        node_count: int | None = None, edge_count: int | None = None,
    ) -> Sequence[VersionLike]:
        if from_date and to_date and from_date > to_date:
            raise BadRequestError("from_date must not be after to_date", "INVALID_DATE_RANGE")
        async with transaction_scope(self.db):
            await self.get_model(model_id)
            return await self.models.list_versions(
                model_id, from_date, to_date, node_count, edge_count,
            )
