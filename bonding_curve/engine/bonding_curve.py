"""Bonding Curve Engine — выпуск и выкуп токенов по линейной кривой.

Движок владеет параметрами кривой и CurveState, управляет mint/burn в ledger
и переводами стоимости, публикует события жизненного цикла.

Порядок buy:
1. remaining = available_supply - total_supply
2. Clamp: tokens_to_mint = min(tokens_for_value(value), remaining)
3. Mint tokens_to_mint (всегда, даже при нулевом количестве)
4. Переход сегмента / завершение
5. Refund излишка (только если был clamp), неудача → TransferFailed

Порядок sell (checks-effects-interactions):
1. payout по предложению ДО сжигания
2. Burn (effects)
3. Перевод payout (interaction), неудача → TransferFailed

Атомарность: любая ошибка внутри вызова откатывает ledger, reserve,
CurveState и события к состоянию до вызова.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Tuple

from bonding_curve.core.domain.events import (
    BondingCurveCompleted,
    CurveEvent,
    EventLog,
    SegmentCompleted,
    TokensPurchased,
    TokensSold,
)
from bonding_curve.core.domain.parameters import CurveParameters, TokenMetadata
from bonding_curve.core.domain.state import CurveSnapshot, CurveState, CurveStatus
from bonding_curve.core.errors import (
    InsufficientBalance,
    MaxSupplyReached,
    TransferFailed,
    ZeroAmount,
)
from bonding_curve.core.math.fixed_point import clamp_uint, validate_uint
from bonding_curve.engine import pricing
from bonding_curve.ledger.chain import BlockHeightSource, ManualBlockClock
from bonding_curve.ledger.token_ledger import InMemoryTokenLedger, TokenLedger
from bonding_curve.ledger.value_transfer import InMemoryValueTransfer, ValueTransfer
from bonding_curve.lifecycle.segment_tracker import (
    SegmentConfig,
    SegmentTracker,
    SegmentTransitionResult,
)

logger = logging.getLogger("bonding_curve.engine")


@dataclass(frozen=True)
class BuyReceipt:
    """Результат успешной покупки."""

    buyer: str
    value_in: int
    tokens_minted: int
    refund: int

    # Прогресс кривой
    transition: SegmentTransitionResult

    @property
    def value_retained(self) -> int:
        return self.value_in - self.refund


@dataclass(frozen=True)
class SellReceipt:
    """Результат успешной продажи."""

    seller: str
    tokens_burned: int
    payout: int
    supply_before: int
    supply_after: int


class BondingCurveEngine:
    """Движок линейной bonding curve.

    Публичные операции:
    - buy(buyer, value) → BuyReceipt
    - sell(seller, token_amount) → SellReceipt
    - receive(sender, value): незапрошенная стоимость, no-op для выпуска

    Ошибки: ZeroAmount, MaxSupplyReached, InsufficientBalance, TransferFailed.
    """

    def __init__(
        self,
        parameters: CurveParameters,
        metadata: TokenMetadata,
        ledger: TokenLedger,
        value_transfer: ValueTransfer,
        clock: BlockHeightSource,
        config: SegmentConfig | None = None
    ):
        """
        Args:
            parameters: параметры кривой (frozen)
            metadata: метаданные токена (frozen)
            ledger: ledger токена (mint/burn/balance_of/total_supply)
            value_transfer: примитив перевода стоимости (reserve движка)
            clock: источник высоты блока
            config: конфигурация rolling deadline
        """
        self._parameters = parameters
        self._metadata = metadata
        self.ledger = ledger
        self.value_transfer = value_transfer
        self.clock = clock
        self.tracker = SegmentTracker(parameters, config)

        self._state: CurveState = self.tracker.initial_state(clock.current_height())
        self._events = EventLog()

        logger.info(
            "Bonding curve %s created: cap=%d max_value=%d available=%d deadline=%d",
            metadata.symbol,
            parameters.total_supply_cap,
            parameters.max_value,
            parameters.available_supply,
            self._state.deadline,
        )

    @classmethod
    def in_memory(
        cls,
        parameters: CurveParameters,
        metadata: TokenMetadata,
        height: int = 0,
        config: SegmentConfig | None = None
    ) -> "BondingCurveEngine":
        """Движок с in-memory коллабораторами (тесты, симуляции)."""
        return cls(
            parameters=parameters,
            metadata=metadata,
            ledger=InMemoryTokenLedger(),
            value_transfer=InMemoryValueTransfer(),
            clock=ManualBlockClock(height),
            config=config,
        )

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def buy(self, buyer: str, value: int) -> BuyReceipt:
        """Покупка токенов за value нативной стоимости.

        Args:
            buyer: адрес покупателя
            value: стоимость, пришедшая вместе с вызовом

        Returns:
            BuyReceipt с количеством выпущенных токенов и refund

        Raises:
            ZeroAmount: value == 0
            MaxSupplyReached: кривая уже завершена
            TransferFailed: не удался возврат излишка
        """
        validate_uint(value, "value")
        if value == 0:
            raise ZeroAmount("buy value must be positive")
        if self._state.is_complete:
            raise MaxSupplyReached(
                f"{self._metadata.symbol}: available supply "
                f"{self._parameters.available_supply} already issued"
            )

        with self._transaction("buy"):
            self.value_transfer.deposit(buyer, value)

            remaining = self._parameters.available_supply - self.ledger.total_supply()
            tokens_wanted = self.tokens_for_value(value)

            # 1. Clamp по оставшемуся предложению
            tokens_to_mint = clamp_uint(tokens_wanted, 0, remaining)
            refund = 0
            if tokens_to_mint < tokens_wanted:
                refund = value - self.value_for_tokens(tokens_to_mint)

            # 2. Mint
            self.ledger.mint(buyer, tokens_to_mint)
            height = self.clock.current_height()
            self._events.emit(
                TokensPurchased(
                    buyer=buyer,
                    value_in=value,
                    tokens_minted=tokens_to_mint,
                    refund=refund,
                    block_height=height,
                )
            )

            # 3. Сегменты / завершение
            transition = self._advance_progress(height)

            # 4. Refund после всех изменений состояния
            if refund > 0 and not self.value_transfer.send(buyer, refund):
                raise TransferFailed(buyer, refund)

        logger.info(
            "BUY %s: buyer=%s value=%d minted=%d refund=%d supply=%d segment=%d",
            self._metadata.symbol,
            buyer,
            value,
            tokens_to_mint,
            refund,
            self.ledger.total_supply(),
            self._state.current_segment,
        )

        return BuyReceipt(
            buyer=buyer,
            value_in=value,
            tokens_minted=tokens_to_mint,
            refund=refund,
            transition=transition,
        )

    def sell(self, seller: str, token_amount: int) -> SellReceipt:
        """Продажа (сжигание) токенов за стоимость.

        Args:
            seller: адрес продавца
            token_amount: количество сжигаемых токенов

        Returns:
            SellReceipt с выплатой

        Raises:
            ZeroAmount: token_amount == 0
            InsufficientBalance: баланс продавца < token_amount
            TransferFailed: не удалась выплата (burn откатывается)
        """
        validate_uint(token_amount, "token_amount")
        if token_amount == 0:
            raise ZeroAmount("sell amount must be positive")

        balance = self.ledger.balance_of(seller)
        if balance < token_amount:
            raise InsufficientBalance(seller, balance, token_amount)

        with self._transaction("sell"):
            supply_before = self.ledger.total_supply()
            payout = self.value_to_return(token_amount)

            # Effects: burn строго до перевода
            self.ledger.burn(seller, token_amount)
            self._events.emit(
                TokensSold(
                    seller=seller,
                    tokens_burned=token_amount,
                    payout=payout,
                    block_height=self.clock.current_height(),
                )
            )

            # Interaction
            if not self.value_transfer.send(seller, payout):
                raise TransferFailed(seller, payout)

            supply_after = self.ledger.total_supply()

        logger.info(
            "SELL %s: seller=%s burned=%d payout=%d supply=%d",
            self._metadata.symbol,
            seller,
            token_amount,
            payout,
            supply_after,
        )

        return SellReceipt(
            seller=seller,
            tokens_burned=token_amount,
            payout=payout,
            supply_before=supply_before,
            supply_after=supply_after,
        )

    def receive(self, sender: str, value: int) -> None:
        """Незапрошенная стоимость без вызова: зачисляется в reserve, ничего не выпускает."""
        self.value_transfer.deposit(sender, value)
        logger.info("Unsolicited value received: sender=%s value=%d", sender, value)

    # =========================================================================
    # PRICING (pure / view)
    # =========================================================================

    def tokens_for_value(self, value: int) -> int:
        return pricing.tokens_for_value(self._parameters, value)

    def value_for_tokens(self, token_amount: int) -> int:
        return pricing.value_for_tokens(self._parameters, token_amount)

    def value_to_return(self, token_amount: int) -> int:
        """Выплата за token_amount при текущем предложении."""
        return pricing.value_to_return(
            self._parameters, self.ledger.total_supply(), token_amount
        )

    def current_price(self) -> int:
        return pricing.current_price(self._parameters)

    # =========================================================================
    # STATUS (view)
    # =========================================================================

    def current_segment(self) -> int:
        return self._state.current_segment

    def deadline(self) -> int:
        return self._state.deadline

    def is_complete(self) -> bool:
        return self._state.is_complete

    def is_zombie(self) -> bool:
        return self.tracker.is_zombie(self._state, self.clock.current_height())

    def status(self) -> CurveStatus:
        return self.tracker.status(self._state, self.clock.current_height())

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, holder: str) -> int:
        return self.ledger.balance_of(holder)

    @property
    def events(self) -> Tuple[CurveEvent, ...]:
        return self._events.events

    def snapshot(self) -> CurveSnapshot:
        """Снапшот параметров и состояния на текущей высоте блока."""
        height = self.clock.current_height()
        return CurveSnapshot(
            symbol=self._metadata.symbol,
            block_height=height,
            total_supply_cap=self._parameters.total_supply_cap,
            max_value=self._parameters.max_value,
            available_supply=self._parameters.available_supply,
            liquidity_reserve=self._parameters.liquidity_reserve,
            segment_size=self._parameters.segment_size,
            current_price=self.current_price(),
            current_segment=self._state.current_segment,
            deadline=self._state.deadline,
            is_complete=self._state.is_complete,
            is_zombie=self.tracker.is_zombie(self._state, height),
            status=self.tracker.status(self._state, height),
            total_supply=self.ledger.total_supply(),
            reserve_balance=self.value_transfer.reserve(),
        )

    # =========================================================================
    # CONSTANTS
    # =========================================================================

    @property
    def parameters(self) -> CurveParameters:
        return self._parameters

    @property
    def metadata(self) -> TokenMetadata:
        return self._metadata

    @property
    def max_supply(self) -> int:
        return self._parameters.total_supply_cap

    @property
    def max_value(self) -> int:
        return self._parameters.max_value

    @property
    def available_supply(self) -> int:
        return self._parameters.available_supply

    @property
    def liquidity_reserve(self) -> int:
        return self._parameters.liquidity_reserve

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _advance_progress(self, height: int) -> SegmentTransitionResult:
        """Пересчёт сегмента и завершения по предложению из ledger."""
        transition = self.tracker.evaluate_progress(
            self._state, self.ledger.total_supply(), height
        )
        self.tracker.apply(self._state, transition)

        if transition.segment_advanced:
            self._events.emit(
                SegmentCompleted(
                    segment=transition.new_segment,
                    new_deadline=transition.new_deadline,
                    block_height=height,
                )
            )
            logger.info(
                "Segment %d completed, new deadline %d",
                transition.new_segment,
                transition.new_deadline,
            )

        if transition.completed_now:
            self._events.emit(
                BondingCurveCompleted(
                    total_supply=self.ledger.total_supply(),
                    block_height=height,
                )
            )
            logger.info("Bonding curve %s completed", self._metadata.symbol)

        return transition

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Откат ledger, reserve, CurveState и событий при любой ошибке внутри вызова."""
        ledger_snapshot = self.ledger.snapshot()
        vault_snapshot = self.value_transfer.snapshot()
        state_snapshot = self._state.copy()
        checkpoint = self._events.checkpoint()

        try:
            yield
        except Exception as e:
            self.ledger.restore(ledger_snapshot)
            self.value_transfer.restore(vault_snapshot)
            self._state = state_snapshot
            self._events.rollback(checkpoint)
            logger.warning("%s reverted: %s", operation, e)
            raise
