"""
Contract Validation Module

Модуль для валидации JSON контрактов bonding_curve (снапшоты и события).
"""

from .validators import (
    CURVE_EVENT_CONTRACT,
    CURVE_SNAPSHOT_CONTRACT,
    CurveContract,
    SchemaLoader,
    require_curve_event,
    require_curve_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "CurveContract",
    # Contracts
    "CURVE_SNAPSHOT_CONTRACT",
    "CURVE_EVENT_CONTRACT",
    # Functions
    "require_curve_snapshot",
    "require_curve_event",
]
