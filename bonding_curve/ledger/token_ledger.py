"""
Token Ledger — учёт балансов fungible-актива

Внешний коллаборатор движка: holder → balance, счётчик total supply,
примитивы mint/burn.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Сохранение: сумма балансов == total_supply после любой операции
2. burn требует balance[holder] >= amount
3. Балансы никогда не отрицательные
"""

import logging
from typing import Dict, Final, Protocol, Tuple, runtime_checkable

from bonding_curve.core.errors import InsufficientBalance
from bonding_curve.core.math.fixed_point import validate_uint

logger = logging.getLogger("bonding_curve.ledger")

DEFAULT_DECIMALS: Final[int] = 18

LedgerSnapshot = Tuple[Dict[str, int], int]


@runtime_checkable
class TokenLedger(Protocol):
    """Контракт ledger, который потребляет движок."""

    def mint(self, holder: str, amount: int) -> None: ...

    def burn(self, holder: str, amount: int) -> None: ...

    def balance_of(self, holder: str) -> int: ...

    def total_supply(self) -> int: ...

    def snapshot(self) -> LedgerSnapshot: ...

    def restore(self, snapshot: LedgerSnapshot) -> None: ...


class InMemoryTokenLedger:
    """
    In-memory ledger с поддержкой отката на уровне вызова.

    snapshot()/restore() позволяют движку отменить mint/burn, если
    позже в том же вызове произошла ошибка.
    """

    def __init__(self, decimals: int = DEFAULT_DECIMALS):
        self.decimals = decimals
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    def mint(self, holder: str, amount: int) -> None:
        """
        Выпуск amount токенов на holder.

        Увеличивает total_supply и баланс holder ровно на amount.
        """
        _require_holder(holder)
        validate_uint(amount, "amount")

        self._balances[holder] = self._balances.get(holder, 0) + amount
        self._total_supply += amount
        logger.debug("mint holder=%s amount=%d supply=%d", holder, amount, self._total_supply)

    def burn(self, holder: str, amount: int) -> None:
        """
        Сжигание amount токенов с holder.

        Raises:
            InsufficientBalance: Если balance[holder] < amount
        """
        _require_holder(holder)
        validate_uint(amount, "amount")

        balance = self._balances.get(holder, 0)
        if balance < amount:
            raise InsufficientBalance(holder, balance, amount)

        if balance == amount:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = balance - amount
        self._total_supply -= amount
        logger.debug("burn holder=%s amount=%d supply=%d", holder, amount, self._total_supply)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Перемещение amount от sender к recipient (total_supply не меняется)."""
        _require_holder(recipient)
        self.burn(sender, amount)
        self.mint(recipient, amount)

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def holders(self) -> Tuple[str, ...]:
        return tuple(self._balances)

    def snapshot(self) -> LedgerSnapshot:
        return dict(self._balances), self._total_supply

    def restore(self, snapshot: LedgerSnapshot) -> None:
        balances, total_supply = snapshot
        self._balances = dict(balances)
        self._total_supply = total_supply


def _require_holder(holder: str) -> None:
    if not isinstance(holder, str) or not holder:
        raise ValueError(f"holder must be a non-empty string, got {holder!r}")
