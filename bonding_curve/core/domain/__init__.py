"""
Domain models and value objects.

Contains curve parameters, token metadata, mutable curve state, snapshots
and lifecycle events.
"""

from bonding_curve.core.domain.events import (
    BondingCurveCompleted,
    CurveEvent,
    EventLog,
    SegmentCompleted,
    TokensPurchased,
    TokensSold,
)
from bonding_curve.core.domain.parameters import (
    LIQUIDITY_RESERVE_PCT,
    SEGMENT_COUNT,
    CurveParameters,
    TokenMetadata,
)
from bonding_curve.core.domain.state import CurveSnapshot, CurveState, CurveStatus

__all__ = [
    # Parameters
    "LIQUIDITY_RESERVE_PCT",
    "SEGMENT_COUNT",
    "CurveParameters",
    "TokenMetadata",
    # State
    "CurveState",
    "CurveSnapshot",
    "CurveStatus",
    # Events
    "SegmentCompleted",
    "BondingCurveCompleted",
    "TokensPurchased",
    "TokensSold",
    "CurveEvent",
    "EventLog",
]
