"""Engine — движок bonding curve и чистые функции цены."""

from .bonding_curve import BondingCurveEngine, BuyReceipt, SellReceipt
from .pricing import current_price, tokens_for_value, value_for_tokens, value_to_return

__all__ = [
    "BondingCurveEngine",
    "BuyReceipt",
    "SellReceipt",
    "current_price",
    "tokens_for_value",
    "value_for_tokens",
    "value_to_return",
]
