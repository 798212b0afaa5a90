"""Boundary Protocols: contracts between core and shell, one store per entity.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO goes through these Protocol types; services receive implementations by injection
    - Conditional writes return the affected-row count; callers decide what zero means
    - get_for_update takes an exclusive row lock held until the surrounding transaction ends

Design Decisions:
    - Protocol over ABC: structural subtyping, the SQL stores do not inherit anything
    - *Like protocols describe rows structurally so services are not coupled to the ORM
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, Sequence
from uuid import UUID

from graphledger.core.domain_types import (
    Graph, ModelId, RequestId, RequestStatus, SimulationId, UserId,
)


# ─── Row shapes ──────────────────────────────────────────────────

class UserLike(Protocol):
    id: UUID
    email: str
    role: str
    tokens: Decimal
    updated_at: datetime


class ModelLike(Protocol):
    id: UUID
    owner_id: UUID
    name: str
    description: str | None
    current_version: int
    created_at: datetime


class VersionLike(Protocol):
    id: UUID
    model_id: UUID
    version_number: int
    graph: dict
    node_count: int
    edge_count: int
    alpha_used: Decimal | None
    created_at: datetime


class WeightChangeLike(Protocol):
    id: UUID
    model_id: UUID
    requester_id: UUID
    from_node: str
    to_node: str
    requested_weight: Decimal
    status: str
    reviewer_id: UUID | None
    created_at: datetime


class SimulationLike(Protocol):
    id: UUID
    model_id: UUID
    version_number: int


class TokenTransactionLike(Protocol):
    id: UUID
    user_id: UUID
    performer_id: UUID | None
    previous_tokens: Decimal
    new_tokens: Decimal
    diff_tokens: Decimal
    reason: str
    created_at: datetime


# ─── Stores ──────────────────────────────────────────────────────

class UserStore(Protocol):
    """Contract for user persistence: implemented by repositories/user_repository.py."""
    async def get(self, user_id: UserId) -> UserLike | None: ...
    async def get_by_email(self, email: str) -> UserLike | None: ...
    async def get_for_update(self, user_id: UserId) -> UserLike | None: ...
    async def create(self, email: str, role: str) -> UserLike: ...
    async def update_balance(
        self, user_id: UserId, tokens: Decimal, updated_at: datetime,
    ) -> int: ...


class LedgerStore(Protocol):
    """Contract for the append-only token ledger."""
    async def append(
        self, user_id: UserId, performer_id: UserId | None,
        previous_tokens: Decimal, new_tokens: Decimal, reason: str,
    ) -> TokenTransactionLike: ...
    async def list_for_user(
        self, user_id: UserId, limit: int = 100,
    ) -> Sequence[TokenTransactionLike]: ...
    async def total_diff(self, user_id: UserId) -> Decimal: ...


class ModelStore(Protocol):
    """Contract for models and their immutable versions."""
    async def get_model(self, model_id: ModelId) -> ModelLike | None: ...
    async def find_by_owner_and_name(
        self, owner_id: UserId, name: str,
    ) -> ModelLike | None: ...
    async def create_model(
        self, owner_id: UserId, name: str, description: str | None,
    ) -> ModelLike: ...
    async def create_version(
        self, model_id: ModelId, version_number: int, graph: Graph,
        node_count: int, edge_count: int, alpha_used: Decimal | None,
        creator_id: UserId,
    ) -> VersionLike: ...
    async def find_version(
        self, model_id: ModelId, version_number: int,
    ) -> VersionLike | None: ...
    async def find_latest_version(self, model_id: ModelId) -> VersionLike | None: ...
    async def advance_current_version(
        self, model_id: ModelId, expected: int, new: int,
    ) -> int: ...
    async def list_versions(
        self, model_id: ModelId,
        from_date: datetime | None = None, to_date: datetime | None = None,
        node_count: int | None = None, edge_count: int | None = None,
    ) -> Sequence[VersionLike]: ...


class WeightChangeStore(Protocol):
    """Contract for weight-change requests and their one-time decisions."""
    async def create(
        self, model_id: ModelId, requester_id: UserId,
        from_node: str, to_node: str, weight: Decimal,
    ) -> WeightChangeLike: ...
    async def get(self, request_id: RequestId) -> WeightChangeLike | None: ...
    async def list(
        self, model_id: ModelId, status: RequestStatus | None = None,
        from_date: datetime | None = None, to_date: datetime | None = None,
    ) -> Sequence[WeightChangeLike]: ...
    async def mark_approved(
        self, request_id: RequestId, reviewer_id: UserId,
        previous_weight: Decimal, applied_weight: Decimal, alpha_used: Decimal,
    ) -> int: ...
    async def mark_rejected(
        self, request_id: RequestId, reviewer_id: UserId, reason: str,
    ) -> int: ...


class SimulationStore(Protocol):
    """Contract for simulation headers and their append-only results."""
    async def create_simulation(
        self, model_id: ModelId, version_number: int, user_id: UserId,
        from_node: str, to_node: str, start: float, stop: float, step: float,
    ) -> SimulationLike: ...
    async def add_result(
        self, simulation_id: SimulationId, tested_weight: float, path: list[str],
        path_cost: float | None, execution_time_ms: float,
    ) -> None: ...
    async def get_simulation(self, simulation_id: SimulationId) -> SimulationLike | None: ...
