"""
bonding_curve — self-custodial issuance engine on a linear bonding curve.

Mints a fungible asset against incoming native value and burns it back on
redemption until the issuable supply is exhausted or the curve goes zombie.
"""

from bonding_curve.core.domain import (
    BondingCurveCompleted,
    CurveParameters,
    CurveSnapshot,
    CurveStatus,
    SegmentCompleted,
    TokenMetadata,
    TokensPurchased,
    TokensSold,
)
from bonding_curve.core.errors import (
    BondingCurveError,
    InsufficientBalance,
    MaxSupplyReached,
    TransferFailed,
    ZeroAmount,
)
from bonding_curve.engine import BondingCurveEngine, BuyReceipt, SellReceipt
from bonding_curve.lifecycle import SegmentConfig

__all__ = [
    "BondingCurveEngine",
    "BuyReceipt",
    "SellReceipt",
    "CurveParameters",
    "TokenMetadata",
    "CurveSnapshot",
    "CurveStatus",
    "SegmentConfig",
    "SegmentCompleted",
    "BondingCurveCompleted",
    "TokensPurchased",
    "TokensSold",
    "BondingCurveError",
    "ZeroAmount",
    "MaxSupplyReached",
    "InsufficientBalance",
    "TransferFailed",
]
