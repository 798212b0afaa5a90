"""Model Routes: create, read, list versions and execute.

Invariants:
    - Creation and execution are charged to the caller inside the service transaction
    - Version listing filters are AND-combined
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.api.deps import get_caller
from graphledger.core.domain_types import CallerContext, ModelId
from graphledger.infrastructure.database import get_db
from graphledger.schemas.model import (
    ExecuteRequest, ExecuteResponse, ModelCreate, ModelCreateResponse,
    ModelDetailResponse, ModelResponse, VersionResponse,
)
from graphledger.services.model_store import ModelService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/models", tags=["models"])


@router.post(
    "", response_model=ModelCreateResponse, status_code=status.HTTP_201_CREATED,
)
async def create_model(
    body: ModelCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    created = await ModelService(db).create_model_with_version(
        caller.user_id, body.name, body.description, body.graph,
    )
    return ModelCreateResponse(
        model=ModelResponse.model_validate(created.model),
        latest_version=VersionResponse.model_validate(created.version),
        charged_tokens=created.charged_tokens,
        remaining_tokens=created.remaining_tokens,
    )


@router.get("/{model_id}", response_model=ModelDetailResponse)
async def get_model(
    model_id: UUID,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    model, version = await ModelService(db).get_model_with_latest(ModelId(model_id))
    return ModelDetailResponse(
        model=ModelResponse.model_validate(model),
        latest_version=VersionResponse.model_validate(version),
    )


@router.get("/{model_id}/versions", response_model=list[VersionResponse])
async def list_versions(
    model_id: UUID,
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
    node_count: int | None = Query(None, ge=0),
    edge_count: int | None = Query(None, ge=0),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    versions = await ModelService(db).list_versions(
        ModelId(model_id), from_date, to_date, node_count, edge_count,
    )
    return [VersionResponse.model_validate(v) for v in versions]


@router.post("/{model_id}/execute", response_model=ExecuteResponse)
async def execute_model(
    model_id: UUID,
    body: ExecuteRequest,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Shortest path on the current version, charged on success only."""
    result = await ModelService(db).execute_model(
        ModelId(model_id), body.start, body.goal, caller.user_id,
    )
    return ExecuteResponse(
        model_id=result.model_id,
        version_number=result.version_number,
        path=result.path,
        cost=result.cost,
        execution_time_ms=result.execution_time_ms,
        charged_tokens=result.charged_tokens,
        remaining_tokens=result.remaining_tokens,
    )
