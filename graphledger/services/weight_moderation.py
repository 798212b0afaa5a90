"""Weight-Change Moderation: pending requests, EMA-blended approvals, rejections.

Invariants:
    - A request is decided exactly once: the decision is a conditional UPDATE
      WHERE status = 'pending', and zero affected rows raises ConflictError
    - Approval never edits a version: it inserts version N+1 and advances the pointer
      from N to N+1 with a conditional update on N
    - Only the directed edge from_node -> to_node changes; the rest of the graph is shared
    - A rejection creates no version

Design Decisions:
    - Optimistic concurrency: the request row is the lock. Two concurrent approvals of
      the same request leave one winner; the loser sees Conflict and its version insert
      is rolled back with the rest of its transaction
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.config import get_settings
from graphledger.core.domain_types import ModelId, RequestId, RequestStatus, UserId
from graphledger.core.errors import BadRequestError, ConflictError, ResourceNotFoundError
from graphledger.core.graph_cost import edge_weight, has_edge, with_edge_weight
from graphledger.core.moderation_rules import blend_weight, can_transition, normalize_weight
from graphledger.core.repository_protocols import (
    ModelStore, WeightChangeLike, WeightChangeStore,
)
from graphledger.infrastructure.database import transaction_scope
from graphledger.repositories.model_repository import ModelRepository
from graphledger.repositories.weight_change_repository import WeightChangeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalResult:
    request_id: RequestId
    from_node: str
    to_node: str
    previous_weight: float
    new_weight: float
    alpha: float
    version_number: int


class WeightModerationService:
    """Request -> approve | reject workflow for single-edge weight changes."""

    def __init__(
        self, db: AsyncSession,
        alpha: float | None = None,
        models: ModelStore | None = None,
        requests: WeightChangeStore | None = None,
    ):
        self.db = db
        self.alpha = alpha if alpha is not None else get_settings().smoothing_alpha
        self.models = models or ModelRepository(db)
        self.requests = requests or WeightChangeRepository(db)

    async def create(
        self, model_id: ModelId, from_node: str, to_node: str,
        weight: float, requester_id: UserId,
    ) -> WeightChangeLike:
        normalized = normalize_weight(weight)
        if normalized is None:
            raise BadRequestError("weight must be a positive finite number", "INVALID_WEIGHT")

        async with transaction_scope(self.db):
            version = await self._current_version(model_id)
            if not has_edge(version.graph, from_node, to_node):
                raise BadRequestError(
                    f"Edge '{from_node}'->'{to_node}' does not exist", "UNKNOWN_EDGE",
                )
            request = await self.requests.create(
                model_id, requester_id, from_node, to_node, Decimal(str(normalized)),
            )

        logger.info(
            f"Weight change requested on {from_node}->{to_node}: {normalized}",
            extra={"model_id": model_id, "request_id": request.id, "user_id": requester_id},
        )
        return request

    async def approve(
        self, model_id: ModelId, request_id: RequestId, approver_id: UserId,
    ) -> ApprovalResult:
        async with transaction_scope(self.db):
            request = await self._pending_request(model_id, request_id, RequestStatus.APPROVED)
            version = await self._current_version(model_id)

            previous = edge_weight(version.graph, request.from_node, request.to_node)
            if previous is None:
                raise BadRequestError(
                    f"Edge '{request.from_node}'->'{request.to_node}' no longer exists",
                    "UNKNOWN_EDGE",
                )
            new_weight = blend_weight(previous, float(request.requested_weight), self.alpha)
            graph = with_edge_weight(version.graph, request.from_node, request.to_node, new_weight)

            decided = await self.requests.mark_approved(
                request_id, approver_id,
                Decimal(str(previous)), Decimal(str(new_weight)), Decimal(str(self.alpha)),
            )
            if decided != 1:
                raise ConflictError("Request was already decided")

            next_number = version.version_number + 1
            await self.models.create_version(
                model_id, next_number, graph, version.node_count, version.edge_count,
                Decimal(str(self.alpha)), approver_id,
            )
            advanced = await self.models.advance_current_version(
                model_id, version.version_number, next_number,
            )
            if advanced != 1:
                raise ConflictError("Model version changed concurrently")

        logger.info(
            f"Weight change approved: {request.from_node}->{request.to_node} "
            f"{previous} -> {new_weight}",
            extra={
                "model_id": model_id, "request_id": request_id,
                "user_id": approver_id, "version_number": next_number,
            },
        )
        return ApprovalResult(
            request_id=request_id,
            from_node=request.from_node,
            to_node=request.to_node,
            previous_weight=previous,
            new_weight=new_weight,
            alpha=self.alpha,
            version_number=next_number,
        )

    async def reject(
        self, model_id: ModelId, request_id: RequestId, reason: str, approver_id: UserId,
    ) -> WeightChangeLike:
        async with transaction_scope(self.db):
            await self._pending_request(model_id, request_id, RequestStatus.REJECTED)
            if await self.requests.mark_rejected(request_id, approver_id, reason) != 1:
                raise ConflictError("Request was already decided")
            request = await self.requests.get(request_id)

        logger.info(
            "Weight change rejected",
            extra={"model_id": model_id, "request_id": request_id, "user_id": approver_id},
        )
        return request

    async def list(
        self, model_id: ModelId, status: RequestStatus | None = None,
        from_date: datetime | None = None, to_date: datetime | None = None,
    ) -> Sequence[WeightChangeLike]:
        async with transaction_scope(self.db):
            if await self.models.get_model(model_id) is None:
                raise ResourceNotFoundError("Model", str(model_id))
            return await self.requests.list(model_id, status, from_date, to_date)

    async def _current_version(self, model_id: ModelId):
        model = await self.models.get_model(model_id)
        if model is None:
            raise ResourceNotFoundError("Model", str(model_id))
        version = await self.models.find_version(model_id, model.current_version)
        if version is None:
            raise ResourceNotFoundError("Version", f"{model_id}/{model.current_version}")
        return version

    async def _pending_request(
        self, model_id: ModelId, request_id: RequestId, target: RequestStatus,
    ) -> WeightChangeLike:
        request = await self.requests.get(request_id)
        if request is None or request.model_id != model_id:
            raise ResourceNotFoundError("WeightChangeRequest", str(request_id))
        if not can_transition(RequestStatus(request.status), target):
            raise ConflictError(f"Request is already {request.status}")
        return request
