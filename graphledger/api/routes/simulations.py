"""Simulation Routes: run a weight sweep on the current version."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.api.deps import get_caller
from graphledger.core.domain_types import CallerContext, ModelId
from graphledger.infrastructure.database import get_db
from graphledger.schemas.simulation import (
    SampleResponse, SimulationCreate, SimulationResponse,
)
from graphledger.services.simulation_engine import SimulationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/models/{model_id}/simulations", tags=["simulations"])


@router.post(
    "", response_model=SimulationResponse, status_code=status.HTTP_201_CREATED,
)
async def run_simulation(
    model_id: UUID,
    body: SimulationCreate,
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    outcome = await SimulationService(db).simulate(
        ModelId(model_id), body.from_node, body.to_node,
        body.start, body.stop, body.step, body.origin, body.goal,
        caller.user_id,
    )
    return SimulationResponse(
        simulation_id=outcome.simulation_id,
        version_number=outcome.version_number,
        results=[SampleResponse.from_sample(s) for s in outcome.results],
        best=SampleResponse.from_sample(outcome.best) if outcome.best else None,
    )
