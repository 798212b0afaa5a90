"""Weight-Change Moderation: request lifecycle and versioning on approval.

Tests:
    - create validates the edge and the weight
    - approve blends with EMA (5.00, 9.00, 0.9 -> 5.40) into version N+1
    - Only the directed edge changes; earlier versions stay untouched
    - Deciding twice, or rejecting after approval, is a Conflict
    - Two concurrent approvals: one winner, one Conflict, one new version
"""

import asyncio

import pytest

from graphledger.core.domain_types import RequestStatus
from graphledger.core.errors import BadRequestError, ConflictError, ResourceNotFoundError
from graphledger.services.model_store import ModelService
from graphledger.services.weight_moderation import WeightModerationService

GRAPH = {"A": {"B": 5.0, "C": 1.0}, "B": {"A": 5.0}, "C": {}}


@pytest.fixture
async def owner_and_model(session_factory, make_user):
    owner = await make_user(tokens=10)
    async with session_factory() as db:
        created = await ModelService(db).create_model_with_version(
            owner.id, "moderated", None, GRAPH,
        )
    return owner, created.model


async def _request(session_factory, model_id, requester_id, weight=9.0, src="A", dst="B"):
    async with session_factory() as db:
        return await WeightModerationService(db, alpha=0.9).create(
            model_id, src, dst, weight, requester_id,
        )


async def _approve(session_factory, model_id, request_id, approver_id):
    async with session_factory() as db:
        return await WeightModerationService(db, alpha=0.9).approve(
            model_id, request_id, approver_id,
        )


async def test_create_pending_request(session_factory, owner_and_model, make_user):
    owner, model = owner_and_model
    requester = await make_user()

    request = await _request(session_factory, model.id, requester.id, weight=9.004)

    assert request.status == RequestStatus.PENDING.value
    assert float(request.requested_weight) == 9.0
    assert request.requester_id == requester.id


async def test_create_rejects_missing_edge_and_bad_weight(session_factory, owner_and_model):
    owner, model = owner_and_model
    with pytest.raises(BadRequestError):
        await _request(session_factory, model.id, owner.id, src="C", dst="A")
    with pytest.raises(BadRequestError):
        await _request(session_factory, model.id, owner.id, weight=0)
    with pytest.raises(BadRequestError):
        await _request(session_factory, model.id, owner.id, weight=float("inf"))


async def test_approve_blends_and_creates_version(session_factory, owner_and_model):
    owner, model = owner_and_model
    request = await _request(session_factory, model.id, owner.id)

    result = await _approve(session_factory, model.id, request.id, owner.id)

    assert result.previous_weight == 5.0
    assert result.new_weight == 5.4
    assert result.alpha == 0.9
    assert result.version_number == 2

    async with session_factory() as db:
        service = ModelService(db)
        latest = await service.get_latest_version(model.id)
        stored_model = await service.get_model(model.id)
        versions = await service.list_versions(model.id)

    assert stored_model.current_version == max(v.version_number for v in versions) == 2
    assert latest.graph["A"]["B"] == 5.4
    assert latest.graph["B"]["A"] == 5.0
    assert float(latest.alpha_used) == 0.9
    first = next(v for v in versions if v.version_number == 1)
    assert first.graph["A"]["B"] == 5.0


async def test_approve_twice_conflicts(session_factory, owner_and_model):
    owner, model = owner_and_model
    request = await _request(session_factory, model.id, owner.id)
    await _approve(session_factory, model.id, request.id, owner.id)

    with pytest.raises(ConflictError):
        await _approve(session_factory, model.id, request.id, owner.id)


async def test_reject_after_approve_conflicts(session_factory, owner_and_model):
    owner, model = owner_and_model
    request = await _request(session_factory, model.id, owner.id)
    await _approve(session_factory, model.id, request.id, owner.id)

    async with session_factory() as db:
        with pytest.raises(ConflictError):
            await WeightModerationService(db, alpha=0.9).reject(
                model.id, request.id, "too late", owner.id,
            )

    async with session_factory() as db:
        assert (await ModelService(db).get_model(model.id)).current_version == 2


async def test_reject_records_reason_without_version(session_factory, owner_and_model):
    owner, model = owner_and_model
    request = await _request(session_factory, model.id, owner.id)

    async with session_factory() as db:
        rejected = await WeightModerationService(db, alpha=0.9).reject(
            model.id, request.id, "not justified", owner.id,
        )

    assert rejected.status == RequestStatus.REJECTED.value
    assert rejected.rejection_reason == "not justified"
    assert rejected.reviewer_id == owner.id
    async with session_factory() as db:
        assert (await ModelService(db).get_model(model.id)).current_version == 1


async def test_request_from_other_model_not_found(
    session_factory, owner_and_model, make_user,
):
    owner, model = owner_and_model
    other_owner = await make_user(tokens=10)
    async with session_factory() as db:
        other = await ModelService(db).create_model_with_version(
            other_owner.id, "other", None, GRAPH,
        )
    request = await _request(session_factory, other.model.id, other_owner.id)

    with pytest.raises(ResourceNotFoundError):
        await _approve(session_factory, model.id, request.id, owner.id)


async def test_concurrent_approvals_one_winner(session_factory, owner_and_model):
    owner, model = owner_and_model
    request = await _request(session_factory, model.id, owner.id)

    outcomes = await asyncio.gather(
        _approve(session_factory, model.id, request.id, owner.id),
        _approve(session_factory, model.id, request.id, owner.id),
        return_exceptions=True,
    )

    conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
    wins = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(wins) == 1
    assert len(conflicts) == 1
    async with session_factory() as db:
        versions = await ModelService(db).list_versions(model.id)
    assert [v.version_number for v in versions] == [2, 1]


async def test_list_filters_by_status(session_factory, owner_and_model):
    owner, model = owner_and_model
    first = await _request(session_factory, model.id, owner.id)
    await _request(session_factory, model.id, owner.id, weight=3.0)
    await _approve(session_factory, model.id, first.id, owner.id)

    async with session_factory() as db:
        service = WeightModerationService(db, alpha=0.9)
        everything = await service.list(model.id)
        pending = await service.list(model.id, RequestStatus.PENDING)
        approved = await service.list(model.id, RequestStatus.APPROVED)

    assert len(everything) == 2
    assert len(pending) == 1
    assert [r.id for r in approved] == [first.id]
