"""Simulation Engine: persisted weight sweeps over one edge of the current version.

Invariants:
    - Bounds, step count and the target edge are validated before the header is written
    - The stored version is read once and never written; each sample works on a copy
    - A sample without a route is stored with path_found = False and path_cost = NULL
"""

import logging
import math
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.config import get_settings
from graphledger.core.domain_types import ModelId, SimulationId, UserId
from graphledger.core.errors import BadRequestError, ResourceNotFoundError
from graphledger.core.graph_cost import has_edge
from graphledger.core.path_engine import DijkstraPathEngine, PathEngine
from graphledger.core.repository_protocols import SimulationLike, SimulationStore
from graphledger.core.sweep import (
    SweepSample, count_sweep_steps, pick_best, run_sweep, sweep_weights,
    validate_sweep_bounds,
)
from graphledger.infrastructure.database import transaction_scope
from graphledger.repositories.simulation_repository import SimulationRepository
from graphledger.services.model_store import ModelService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationOutcome:
    simulation_id: SimulationId
    version_number: int
    results: list[SweepSample]
    best: SweepSample | None


class SimulationService:
    def __init__(
        self, db: AsyncSession,
        simulations: SimulationStore | None = None,
        models: ModelService | None = None,
        engine: PathEngine | None = None,
        max_steps: int | None = None,
    ):
        self.db = db
        self.simulations = simulations or SimulationRepository(db)
        self.engine = engine or DijkstraPathEngine()
        self.models = models or ModelService(db, engine=self.engine)
        self.max_steps = max_steps if max_steps is not None else get_settings().simulation_max_steps

    async def simulate(
        self, model_id: ModelId, from_node: str, to_node: str,
        start: float, stop: float, step: float,
        origin: str, goal: str, user_id: UserId,
    ) -> SimulationOutcome:
        error = validate_sweep_bounds(start, stop, step)
        if error:
            raise BadRequestError(error, "INVALID_SWEEP")
        steps = count_sweep_steps(start, stop, step)
        if steps > self.max_steps:
            raise BadRequestError(
                f"Sweep needs {steps} steps, limit is {self.max_steps}", "INVALID_SWEEP",
            )

        async with transaction_scope(self.db):
            version = await self.models.get_latest_version(model_id)
            if not has_edge(version.graph, from_node, to_node):
                raise BadRequestError(
                    f"Edge '{from_node}'->'{to_node}' does not exist", "UNKNOWN_EDGE",
                )
            simulation = await self.simulations.create_simulation(
                model_id, version.version_number, user_id,
                from_node, to_node, start, stop, step,
            )
            samples = run_sweep(
                version.graph, from_node, to_node, origin, goal,
                sweep_weights(start, stop, step), self.engine,
            )
            for sample in samples:
                await self.simulations.add_result(
                    simulation.id, sample.weight, sample.path,
                    sample.cost if sample.path_found else None,
                    sample.execution_time_ms,
                )

        best = pick_best(samples)
        logger.info(
            f"Simulation swept {len(samples)} weights on {from_node}->{to_node}, "
            f"best cost {best.cost if best and math.isfinite(best.cost) else None}",
            extra={
                "model_id": model_id, "simulation_id": simulation.id,
                "user_id": user_id, "version_number": version.version_number,
            },
        )
        return SimulationOutcome(
            simulation_id=simulation.id,
            version_number=version.version_number,
            results=samples,
            best=best,
        )

    async def get_simulation(self, simulation_id: SimulationId) -> SimulationLike:
        async with transaction_scope(self.db):
            simulation = await self.simulations.get_simulation(simulation_id)
        if simulation is None:
            raise ResourceNotFoundError("Simulation", str(simulation_id))
        return simulation
