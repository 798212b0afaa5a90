"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ModelId, VersionId, RequestId, SimulationId wrap UUIDs
    - Graph is an adjacency map node -> {neighbor: positive weight}
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to the DB status columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ModelId = NewType("ModelId", UUID)
VersionId = NewType("VersionId", UUID)
RequestId = NewType("RequestId", UUID)
SimulationId = NewType("SimulationId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Graph = dict[str, dict[str, float]]


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Caller roles. Admins recharge tokens and provision users."""
    USER = "user"
    ADMIN = "admin"


class RequestStatus(str, Enum):
    """Weight-change request lifecycle: pending -> approved | rejected (terminal)."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LedgerReason(str, Enum):
    """Reason tag stored on every token transaction."""
    ADMIN_RECHARGE = "admin_recharge"
    SEED_GRANT = "seed_grant"
    MODEL_CREATION = "model_creation"
    MODEL_EXECUTION = "model_execution"


# ─── Caller Context ──────────────────────────────────────────────

@dataclass(frozen=True)
class CallerContext:
    """Identity resolved upstream and trusted by the core."""
    user_id: UserId
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
