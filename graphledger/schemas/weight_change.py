"""Weight-Change Schemas: request creation, decisions and listing filters."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from graphledger.schemas.graph import EdgeRef


class WeightChangeCreate(EdgeRef):
    weight: float = Field(gt=0, allow_inf_nan=False)


class WeightChangeReject(BaseModel):
    reason: str = Field(min_length=1, max_length=1_000)


class WeightChangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    model_id: UUID
    requester_id: UUID
    from_node: str
    to_node: str
    requested_weight: Decimal
    status: str
    reviewer_id: UUID | None = None
    previous_weight: Decimal | None = None
    applied_weight: Decimal | None = None
    alpha_used: Decimal | None = None
    rejection_reason: str | None = None
    created_at: datetime


class ApprovalResponse(BaseModel):
    request_id: UUID
    from_node: str
    to_node: str
    previous_weight: float
    new_weight: float
    alpha: float
    version_number: int
