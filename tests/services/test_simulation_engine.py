"""Simulation Engine: persisted sweeps that never touch the stored version.

Tests:
    - start=1, stop=3, step=1 sweeps [1, 2, 3] and picks the cheapest
    - No-path samples are stored with path_found False and NULL cost
    - Invalid bounds, too many steps and unknown edges write nothing
"""

import math
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from graphledger.core.errors import BadRequestError, ResourceNotFoundError
from graphledger.models.simulation import Simulation
from graphledger.models.simulation_result import SimulationResult
from graphledger.services.model_store import ModelService
from graphledger.services.simulation_engine import SimulationService

GRAPH = {"A": {"B": 1.0, "C": 2.5}, "B": {"C": 1.0}, "C": {}}


async def _stored_rows(session_factory) -> tuple[int, int]:
    async with session_factory() as db:
        simulations = await db.scalar(select(func.count()).select_from(Simulation))
        results = await db.scalar(select(func.count()).select_from(SimulationResult))
    return simulations, results


@pytest.fixture
async def owner_and_model(session_factory, make_user):
    owner = await make_user(tokens=10)
    async with session_factory() as db:
        created = await ModelService(db).create_model_with_version(
            owner.id, "sweepable", None, GRAPH,
        )
    return owner, created.model


async def test_sweep_one_to_three(session_factory, owner_and_model):
    owner, model = owner_and_model

    async with session_factory() as db:
        outcome = await SimulationService(db).simulate(
            model.id, "A", "B", 1, 3, 1, "A", "C", owner.id,
        )

    assert [s.weight for s in outcome.results] == [1, 2, 3]
    assert [s.cost for s in outcome.results] == [2.0, 2.5, 2.5]
    assert outcome.best.weight == 1
    assert outcome.best.path == ["A", "B", "C"]
    assert outcome.version_number == 1


async def test_results_persisted(session_factory, owner_and_model):
    owner, model = owner_and_model
    async with session_factory() as db:
        outcome = await SimulationService(db).simulate(
            model.id, "A", "B", 1, 3, 1, "A", "C", owner.id,
        )

    async with session_factory() as db:
        stored = await SimulationService(db).get_simulation(outcome.simulation_id)
        assert stored.version_number == 1
        assert [float(r.tested_weight) for r in stored.results] == [1.0, 2.0, 3.0]
        assert all(r.path_found for r in stored.results)


async def test_base_version_not_mutated(session_factory, owner_and_model):
    owner, model = owner_and_model
    async with session_factory() as db:
        await SimulationService(db).simulate(
            model.id, "A", "B", 5, 7, 1, "A", "C", owner.id,
        )
    async with session_factory() as db:
        version = await ModelService(db).get_latest_version(model.id)
    assert version.graph == GRAPH
    assert version.version_number == 1


async def test_no_path_samples(session_factory, owner_and_model):
    owner, model = owner_and_model
    async with session_factory() as db:
        outcome = await SimulationService(db).simulate(
            model.id, "A", "B", 1, 2, 1, "C", "A", owner.id,
        )
    assert all(not s.path_found and s.cost == math.inf for s in outcome.results)

    async with session_factory() as db:
        stored = await SimulationService(db).get_simulation(outcome.simulation_id)
        assert all(r.path_cost is None and not r.path_found for r in stored.results)


@pytest.mark.parametrize("start,stop,step", [
    (1, 3, 0), (3, 1, 1), (1, 1, 1), (1, math.inf, 1), (0, 2, 1), (-3, -1, 1),
])
async def test_invalid_bounds(session_factory, owner_and_model, start, stop, step):
    owner, model = owner_and_model
    async with session_factory() as db:
        with pytest.raises(BadRequestError):
            await SimulationService(db).simulate(
                model.id, "A", "B", start, stop, step, "A", "C", owner.id,
            )
    assert await _stored_rows(session_factory) == (0, 0)


async def test_step_limit(session_factory, owner_and_model):
    owner, model = owner_and_model
    async with session_factory() as db:
        with pytest.raises(BadRequestError):
            await SimulationService(db, max_steps=5).simulate(
                model.id, "A", "B", 1, 10, 1, "A", "C", owner.id,
            )
    assert await _stored_rows(session_factory) == (0, 0)


async def test_unknown_edge(session_factory, owner_and_model):
    owner, model = owner_and_model
    async with session_factory() as db:
        with pytest.raises(BadRequestError):
            await SimulationService(db).simulate(
                model.id, "C", "A", 1, 3, 1, "A", "C", owner.id,
            )
    assert await _stored_rows(session_factory) == (0, 0)


async def test_unknown_model(session_factory, make_user):
    user = await make_user()
    async with session_factory() as db:
        with pytest.raises(ResourceNotFoundError):
            await SimulationService(db).simulate(
                uuid4(), "A", "B", 1, 3, 1, "A", "C", user.id,
            )
