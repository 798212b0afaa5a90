"""Weight-Change Routes: propose, list, and owner-only approve/reject.

Invariants:
    - Approve/reject check ownership and decide inside one transaction
    - A second decision on the same request answers 409
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.api.deps import ensure_model_owner, get_caller
from graphledger.core.domain_types import CallerContext, ModelId, RequestId, RequestStatus
from graphledger.infrastructure.database import get_db, transaction_scope
from graphledger.schemas.weight_change import (
    ApprovalResponse, WeightChangeCreate, WeightChangeReject, WeightChangeResponse,
)
from graphledger.services.model_store import ModelService
from graphledger.services.weight_moderation import WeightModerationService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/models/{model_id}/weight-changes", tags=["weight-changes"],
)


@router.post(
    "", response_model=WeightChangeResponse, status_code=status.HTTP_201_CREATED,
)
async def create_weight_change(
    model_id: UUID,
    body: WeightChangeCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    request = await WeightModerationService(db).create(
        ModelId(model_id), body.from_node, body.to_node, body.weight, caller.user_id,
    )
    return WeightChangeResponse.model_validate(request)


@router.get("", response_model=list[WeightChangeResponse])
async def list_weight_changes(
    model_id: UUID,
    status_filter: RequestStatus | None = Query(None, alias="status"),
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    requests = await WeightModerationService(db).list(
        ModelId(model_id), status_filter, from_date, to_date,
    )
    return [WeightChangeResponse.model_validate(r) for r in requests]


@router.post("/{request_id}/approve", response_model=ApprovalResponse)
async def approve_weight_change(
    model_id: UUID,
    request_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    async with transaction_scope(db):
        model = await ModelService(db).get_model(ModelId(model_id))
        ensure_model_owner(model, caller)
        result = await WeightModerationService(db).approve(
            ModelId(model_id), RequestId(request_id), caller.user_id,
        )
    return ApprovalResponse(
        request_id=result.request_id,
        from_node=result.from_node,
        to_node=result.to_node,
        previous_weight=result.previous_weight,
        new_weight=result.new_weight,
        alpha=result.alpha,
        version_number=result.version_number,
    )


@router.post("/{request_id}/reject", response_model=WeightChangeResponse)
async def reject_weight_change(
    model_id: UUID,
    request_id: UUID,
    body: WeightChangeReject,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    async with transaction_scope(db):
        model = await ModelService(db).get_model(ModelId(model_id))
        ensure_model_owner(model, caller)
        request = await WeightModerationService(db).reject(
            ModelId(model_id), RequestId(request_id), body.reason, caller.user_id,
        )
    return WeightChangeResponse.model_validate(request)
