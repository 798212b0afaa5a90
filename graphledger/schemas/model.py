"""Model Schemas: creation, execution and version read-back."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from graphledger.schemas.graph import GraphPayload


class ModelCreate(GraphPayload):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5_000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class VersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    version_number: int
    graph: dict[str, dict[str, float]]
    node_count: int
    edge_count: int
    alpha_used: Decimal | None = None
    created_at: datetime


class ModelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    description: str | None = None
    current_version: int
    created_at: datetime


class ModelDetailResponse(BaseModel):
    model: ModelResponse
    latest_version: VersionResponse


class ModelCreateResponse(ModelDetailResponse):
    charged_tokens: Decimal
    remaining_tokens: Decimal


class ExecuteRequest(BaseModel):
    start: str = Field(min_length=1, max_length=255)
    goal: str = Field(min_length=1, max_length=255)


class ExecuteResponse(BaseModel):
    model_id: UUID
    version_number: int
    path: list[str]
    cost: float
    execution_time_ms: float
    charged_tokens: Decimal
    remaining_tokens: Decimal
