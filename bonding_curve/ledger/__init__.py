"""Ledger — внешние коллабораторы движка: учёт токенов, перевод стоимости, высота блока."""

from .chain import BlockHeightSource, ManualBlockClock
from .token_ledger import DEFAULT_DECIMALS, InMemoryTokenLedger, TokenLedger
from .value_transfer import InMemoryValueTransfer, ValueTransfer

__all__ = [
    "TokenLedger",
    "InMemoryTokenLedger",
    "DEFAULT_DECIMALS",
    "ValueTransfer",
    "InMemoryValueTransfer",
    "BlockHeightSource",
    "ManualBlockClock",
]
