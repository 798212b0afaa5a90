"""User Schemas: provisioning, recharge and ledger history."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    role: Literal["user", "admin"] = "user"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str
    tokens: Decimal
    updated_at: datetime


class RechargeRequest(BaseModel):
    email: EmailStr
    tokens: Decimal = Field(gt=0, allow_inf_nan=False)


class RechargeResponse(BaseModel):
    previous_tokens: Decimal
    recharge_tokens: Decimal
    total_tokens: Decimal
    updated_at: datetime


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    performer_id: UUID | None = None
    previous_tokens: Decimal
    new_tokens: Decimal
    diff_tokens: Decimal
    reason: str
    created_at: datetime
