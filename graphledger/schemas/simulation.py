"""Simulation Schemas: sweep request and per-weight results.

Invariants:
    - path_cost is None exactly when path_found is False (no infinity on the wire)
"""

from uuid import UUID

from pydantic import BaseModel, Field

from graphledger.core.sweep import SweepSample
from graphledger.schemas.graph import EdgeRef


class SimulationCreate(EdgeRef):
    start: float = Field(allow_inf_nan=False)
    stop: float = Field(allow_inf_nan=False)
    step: float = Field(gt=0, allow_inf_nan=False)
    origin: str = Field(min_length=1, max_length=255)
    goal: str = Field(min_length=1, max_length=255)


class SampleResponse(BaseModel):
    weight: float
    path: list[str]
    path_found: bool
    path_cost: float | None
    execution_time_ms: float

    @classmethod
    def from_sample(cls, sample: SweepSample) -> "SampleResponse":
        return cls(
            weight=sample.weight,
            path=sample.path,
            path_found=sample.path_found,
            path_cost=sample.cost if sample.path_found else None,
            execution_time_ms=sample.execution_time_ms,
        )


class SimulationResponse(BaseModel):
    simulation_id: UUID
    version_number: int
    results: list[SampleResponse]
    best: SampleResponse | None
