"""Simulation Store: sweep headers and append-only per-weight results."""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import ModelId, SimulationId, UserId
from graphledger.models.simulation import Simulation
from graphledger.models.simulation_result import SimulationResult


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


class SimulationRepository:
    """SQL implementation of SimulationStore."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_simulation(
        self, model_id: ModelId, version_number: int, user_id: UserId,
        from_node: str, to_node: str, start: float, stop: float, step: float,
    ) -> Simulation:
        simulation = Simulation(
            model_id=model_id,
            version_number=version_number,
            user_id=user_id,
            from_node=from_node,
            to_node=to_node,
            start_weight=_to_decimal(start),
            stop_weight=_to_decimal(stop),
            step_weight=_to_decimal(step),
        )
        self.db.add(simulation)
        await self.db.flush()
        return simulation

    async def add_result(
        self, simulation_id: SimulationId, tested_weight: float, path: list[str],
        path_cost: float | None, execution_time_ms: float,
    ) -> None:
        self.db.add(SimulationResult(
            simulation_id=simulation_id,
            tested_weight=_to_decimal(tested_weight),
            path=list(path),
            path_found=path_cost is not None,
            path_cost=_to_decimal(path_cost) if path_cost is not None else None,
            execution_time_ms=_to_decimal(execution_time_ms),
        ))
        await self.db.flush()

    async def get_simulation(self, simulation_id: SimulationId) -> Simulation | None:
        result = await self.db.execute(
            select(Simulation).where(Simulation.id == simulation_id),
        )
        return result.scalar_one_or_none()
