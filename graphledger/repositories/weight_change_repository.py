"""Weight-Change Store: requests and their conditional, one-time decisions."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from graphledger.core.domain_types import ModelId, RequestId, RequestStatus, UserId
from graphledger.models.weight_change_request import WeightChangeRequest


class WeightChangeRepository:
    """SQL implementation of WeightChangeStore."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, model_id: ModelId, requester_id: UserId,
        from_node: str, to_node: str, weight: Decimal,
    ) -> WeightChangeRequest:
        request = WeightChangeRequest(
            model_id=model_id,
            requester_id=requester_id,
            from_node=from_node,
            to_node=to_node,
            requested_weight=weight,
            status=RequestStatus.PENDING.value,
        )
        self.db.add(request)
        await self.db.flush()
        return request

    async def get(self, request_id: RequestId) -> WeightChangeRequest | None:
        result = await self.db.execute(
            select(WeightChangeRequest)
            .where(WeightChangeRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list(
        self, model_id: ModelId, status: RequestStatus | None = None,
        from_date: datetime | None = None, to_date: datetime | None = None,
    ) -> Sequence[WeightChangeRequest]:
        query = select(WeightChangeRequest).where(
            WeightChangeRequest.model_id == model_id,
        )
        if status:
            query = query.where(WeightChangeRequest.status == RequestStatus(status).value)
        if from_date:
            query = query.where(WeightChangeRequest.created_at >= from_date)
        if to_date:
            query = query.where(WeightChangeRequest.created_at <= to_date)
        query = query.order_by(WeightChangeRequest.created_at.desc())
        result = await self.db.execute(query)
        return result.scalars().all()

    async def mark_approved(
        self, request_id: RequestId, reviewer_id: UserId,
        previous_weight: Decimal, applied_weight: Decimal, alpha_used: Decimal,
    ) -> int:
        return await self._decide(
            request_id,
            status=RequestStatus.APPROVED.value,
            reviewer_id=reviewer_id,
            previous_weight=previous_weight,
            applied_weight=applied_weight,
            alpha_used=alpha_used,
        )

    async def mark_rejected(
        self, request_id: RequestId, reviewer_id: UserId, reason: str,
    ) -> int:
        return await self._decide(
            request_id,
            status=RequestStatus.REJECTED.value,
            reviewer_id=reviewer_id,
            rejection_reason=reason,
        )

    async def _decide(self, request_id: RequestId, **values: object) -> int:
        """UPDATE ... WHERE status = 'pending'; 0 rows means someone decided first."""
        result = await self.db.execute(
            update(WeightChangeRequest)
            .where(WeightChangeRequest.id == request_id)
            .where(WeightChangeRequest.status == RequestStatus.PENDING.value)
            .values(updated_at=datetime.now(timezone.utc), **values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
