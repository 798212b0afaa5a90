"""Moderation Rules: state machine and EMA blending."""

import math

from graphledger.core.domain_types import RequestStatus
from graphledger.core.moderation_rules import (
    blend_weight, can_transition, normalize_weight, round_weight,
)


def test_pending_can_be_decided():
    assert can_transition(RequestStatus.PENDING, RequestStatus.APPROVED)
    assert can_transition(RequestStatus.PENDING, RequestStatus.REJECTED)


def test_decided_states_are_terminal():
    for terminal in (RequestStatus.APPROVED, RequestStatus.REJECTED):
        for target in RequestStatus:
            assert not can_transition(terminal, target)


def test_blend_example():
    assert blend_weight(5.0, 9.0, 0.9) == 5.4


def test_blend_rounds_half_up():
    # 0.5 * 1.0 + 0.5 * 1.25 = 1.125
    assert blend_weight(1.0, 1.25, 0.5) == 1.13


def test_round_weight():
    assert round_weight(2.345) == 2.35
    assert round_weight(3) == 3.0


def test_normalize_weight():
    assert normalize_weight(4.567) == 4.57
    assert normalize_weight(0) is None
    assert normalize_weight(-1) is None
    assert normalize_weight(math.nan) is None
    assert normalize_weight(math.inf) is None
    assert normalize_weight(True) is None
    assert normalize_weight(0.001) is None
