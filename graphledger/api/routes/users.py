"""User Routes: provisioning, profile, ledger history and admin recharge."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.api.deps import get_caller, require_admin
from graphledger.core.domain_types import CallerContext, UserRole
from graphledger.infrastructure.database import get_db
from graphledger.schemas.user import (
    RechargeRequest, RechargeResponse, TransactionResponse, UserCreate, UserResponse,
)
from graphledger.services.token_ledger import TokenLedger
from graphledger.services.user_accounts import UserAccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def provision_user(
    body: UserCreate,
    caller: CallerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a user and credit the configured initial grant."""
    user = await UserAccountService(db).provision_user(
        body.email, UserRole(body.role), caller.user_id,
    )
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def get_profile(
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    user = await UserAccountService(db).profile(caller.user_id)
    return UserResponse.model_validate(user)


@router.get("/me/transactions", response_model=list[TransactionResponse])
async def get_transactions(
    limit: int = Query(100, ge=1, le=1000),
    caller: CallerContext = Depends(get_caller),
    db: AsyncSession = Depends(get_db),
):
    """Ledger rows for the caller, newest first."""
    rows = await TokenLedger(db).history(caller.user_id, limit)
    return [TransactionResponse.model_validate(r) for r in rows]


@router.post("/recharge", response_model=RechargeResponse)
async def recharge(
    body: RechargeRequest,
    caller: CallerContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    receipt = await TokenLedger(db).recharge_by_email(
        body.email, body.tokens, caller.user_id,
    )
    return RechargeResponse(
        previous_tokens=receipt.previous_tokens,
        recharge_tokens=receipt.recharge_tokens,
        total_tokens=receipt.total_tokens,
        updated_at=receipt.updated_at,
    )
