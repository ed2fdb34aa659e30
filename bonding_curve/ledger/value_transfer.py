"""
Value Transfer — примитив перевода нативной стоимости

Внешний коллаборатор движка. send() никогда не бросает исключение
наружу: успех/неудача сообщаются через bool, а вызывающая сторона
превращает неудачу в собственную фатальную ошибку.

Reserve — стоимость, находящаяся под кастодией движка: пополняется
deposit() (стоимость, пришедшая вместе с вызовом) и расходуется send().
"""

import logging
from typing import Callable, Dict, Protocol, Set, Tuple, runtime_checkable

from bonding_curve.core.math.fixed_point import validate_uint

logger = logging.getLogger("bonding_curve.value_transfer")

ReceiveHook = Callable[[str, int], None]

VaultSnapshot = Tuple[int, Dict[str, int]]


@runtime_checkable
class ValueTransfer(Protocol):
    """Контракт примитива перевода стоимости."""

    def deposit(self, sender: str, amount: int) -> None: ...

    def send(self, recipient: str, amount: int) -> bool: ...

    def reserve(self) -> int: ...

    def snapshot(self) -> VaultSnapshot: ...

    def restore(self, snapshot: VaultSnapshot) -> None: ...


class InMemoryValueTransfer:
    """
    In-memory примитив перевода стоимости.

    - rejecting recipients: send() на такой адрес всегда возвращает False
    - receive hooks: callback, вызываемый при получении стоимости адресом
      (модель reentrant-вызова). Исключение в hook означает неудачу
      перевода, а не исключение у отправителя.
    """

    def __init__(self, initial_reserve: int = 0):
        validate_uint(initial_reserve, "initial_reserve")
        self._reserve = initial_reserve
        self._balances: Dict[str, int] = {}
        self._rejecting: Set[str] = set()
        self._hooks: Dict[str, ReceiveHook] = {}

    def deposit(self, sender: str, amount: int) -> None:
        """Зачисление стоимости, пришедшей вместе с вызовом, в reserve."""
        validate_uint(amount, "amount")
        self._reserve += amount
        logger.debug("deposit sender=%s amount=%d reserve=%d", sender, amount, self._reserve)

    def send(self, recipient: str, amount: int) -> bool:
        """
        Попытка перевести amount из reserve на recipient.

        Returns:
            True если перевод выполнен, False иначе (без исключений)
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            logger.warning("send rejected: invalid amount %r", amount)
            return False

        if recipient in self._rejecting:
            logger.warning("send rejected by recipient %s (amount=%d)", recipient, amount)
            return False

        if amount > self._reserve:
            logger.warning(
                "send failed: reserve %d below amount %d (recipient=%s)",
                self._reserve,
                amount,
                recipient,
            )
            return False

        snapshot = self.snapshot()
        self._reserve -= amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

        hook = self._hooks.get(recipient)
        if hook is not None:
            try:
                hook(recipient, amount)
            except Exception as e:
                # Неудача получателя = неудача перевода; граница не пропускает исключение
                self.restore(snapshot)
                logger.warning("receive hook of %s failed: %s", recipient, e)
                return False

        return True

    def reserve(self) -> int:
        return self._reserve

    def balance_of(self, holder: str) -> int:
        """Стоимость, полученная holder через send()."""
        return self._balances.get(holder, 0)

    def reject_transfers_to(self, recipient: str) -> None:
        self._rejecting.add(recipient)

    def accept_transfers_to(self, recipient: str) -> None:
        self._rejecting.discard(recipient)

    def set_receive_hook(self, recipient: str, hook: ReceiveHook | None) -> None:
        if hook is None:
            self._hooks.pop(recipient, None)
        else:
            self._hooks[recipient] = hook

    def snapshot(self) -> VaultSnapshot:
        return self._reserve, dict(self._balances)

    def restore(self, snapshot: VaultSnapshot) -> None:
        reserve, balances = snapshot
        self._reserve = reserve
        self._balances = dict(balances)
