"""
Errors — таксономия ошибок движка кривой

Все ошибки терминальны для вызвавшей операции: движок откатывает
все изменения ledger/reserve/state/events, сделанные в рамках вызова.
Повторные попытки внутри движка не выполняются.
"""


class BondingCurveError(Exception):
    """Базовая ошибка движка кривой."""

    pass


class ZeroAmount(BondingCurveError):
    """Операция вызвана с нулевой суммой (buy с value == 0, sell с amount == 0)."""

    pass


class MaxSupplyReached(BondingCurveError):
    """
    Покупка после завершения кривой.

    После is_complete == True выпуск токенов невозможен: весь
    available_supply уже выпущен.
    """

    pass


class InsufficientBalance(BondingCurveError):
    """Продажа превышает баланс продавца в ledger."""

    def __init__(self, holder: str, balance: int, requested: int):
        self.holder = holder
        self.balance = balance
        self.requested = requested
        super().__init__(
            f"Insufficient balance for {holder}: balance={balance}, requested={requested}"
        )


class TransferFailed(BondingCurveError):
    """
    Примитив перевода стоимости вернул False.

    Для buy: не удался возврат излишка (refund). Принять излишек без возврата
    нельзя: это нарушило бы соотношение value/token кривой.
    Для sell: не удалась выплата; сожжённые токены восстанавливаются.
    """

    def __init__(self, recipient: str, amount: int):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Value transfer of {amount} to {recipient} failed")
