"""Moderation Rules: weight-change state machine and EMA blending.

Invariants:
    - Only pending requests can be decided; approved and rejected are terminal
    - blend_weight is PURE: next = alpha * previous + (1 - alpha) * proposed, 2 decimals
    - normalize_weight rejects non-finite and non-positive weights

Design Decisions:
    - Decimal for the blend: the result lands in a JSON graph as a float but must round
      the same way on every run (ROUND_HALF_UP)
"""

import math
from decimal import Decimal, ROUND_HALF_UP

from graphledger.core.domain_types import RequestStatus

WEIGHT_PLACES = Decimal("0.01")

_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in _TRANSITIONS[RequestStatus(current)]


def round_weight(value: float | Decimal) -> float:
    """Round an edge weight to 2 decimals, half-up."""
    return float(Decimal(str(value)).quantize(WEIGHT_PLACES, rounding=ROUND_HALF_UP))


def normalize_weight(value: float) -> float | None:
    """Positive finite weight rounded to 2 decimals, or None if unusable."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    if not math.isfinite(float(value)) or value <= 0:
        return None
    rounded = round_weight(value)
    return rounded if rounded > 0 else None


def blend_weight(previous: float, proposed: float, alpha: float) -> float:
    """EMA blend of the current edge weight toward the proposed one."""
    a = Decimal(str(alpha))
    blended = a * Decimal(str(previous)) + (1 - a) * Decimal(str(proposed))
    return round_weight(blended)
