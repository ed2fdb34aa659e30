"""
Тесты для Bonding Curve Engine

Покрывает:
- buy: выпуск, clamp по available_supply, точный refund
- sell: сжигание, выплата по предложению до сжигания
- Переходы сегментов, завершение, zombie-статус
- Атомарность: откат ledger/reserve/state/events при ошибках
- Reentrancy при выплате
- Незапрошенная стоимость
"""

import pytest

from bonding_curve import (
    BondingCurveCompleted,
    BondingCurveEngine,
    CurveParameters,
    CurveStatus,
    InsufficientBalance,
    MaxSupplyReached,
    SegmentCompleted,
    TokenMetadata,
    TokensPurchased,
    TokensSold,
    TransferFailed,
    ZeroAmount,
)

WAD = 10**18
CAP = 1_000_000_000 * WAD
MAX_VALUE = 15 * WAD
WEEK = 604_800
START_HEIGHT = 1_000

# 0.75 native = ровно один сегмент
ONE_SEGMENT_VALUE = 75 * 10**16


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def params():
    return CurveParameters(total_supply_cap=CAP, max_value=MAX_VALUE)


@pytest.fixture
def metadata():
    return TokenMetadata(
        name="Curve Token",
        symbol="CRV",
        image_url="https://example.org/crv.png",
        description="Linear curve token",
    )


@pytest.fixture
def engine(params, metadata):
    return BondingCurveEngine.in_memory(params, metadata, height=START_HEIGHT)


# =============================================================================
# CONSTRUCTION / VIEWS
# =============================================================================


class TestConstruction:
    """Начальное состояние и константы"""

    def test_initial_state(self, engine):
        assert engine.current_segment() == 0
        assert engine.deadline() == START_HEIGHT + WEEK
        assert not engine.is_complete()
        assert not engine.is_zombie()
        assert engine.status() == CurveStatus.ACTIVE
        assert engine.total_supply() == 0
        assert engine.events == ()

    def test_constants(self, engine):
        assert engine.max_supply == CAP
        assert engine.max_value == MAX_VALUE
        assert engine.available_supply == CAP * 85 // 100
        assert engine.liquidity_reserve == CAP * 15 // 100
        assert engine.metadata.symbol == "CRV"

    def test_current_price_constant(self, engine):
        price = engine.current_price()
        engine.buy("alice", 3 * WAD)
        assert engine.current_price() == price == MAX_VALUE * WAD // CAP


# =============================================================================
# BUY
# =============================================================================


class TestBuy:
    """Покупка"""

    def test_buy_mints_tokens_for_value(self, engine):
        value = 10**17 + 3
        receipt = engine.buy("alice", value)

        expected = value * CAP // MAX_VALUE
        assert receipt.tokens_minted == expected
        assert receipt.refund == 0
        assert engine.balance_of("alice") == expected
        assert engine.total_supply() == expected
        assert engine.value_transfer.reserve() == value

    def test_one_segment_purchase(self, engine):
        """0.75 native → 50 000 000 токенов → SegmentCompleted(1)"""
        receipt = engine.buy("alice", ONE_SEGMENT_VALUE)

        assert receipt.tokens_minted == 50_000_000 * WAD
        assert engine.current_segment() == 1
        assert engine.deadline() == START_HEIGHT + WEEK
        assert receipt.transition.segment_advanced

        segment_events = [e for e in engine.events if isinstance(e, SegmentCompleted)]
        assert segment_events == [
            SegmentCompleted(segment=1, new_deadline=START_HEIGHT + WEEK, block_height=START_HEIGHT)
        ]

    def test_deadline_resets_at_current_height(self, engine):
        engine.clock.advance(5_000)
        engine.buy("alice", ONE_SEGMENT_VALUE)

        assert engine.deadline() == START_HEIGHT + 5_000 + WEEK

    def test_deadline_unchanged_without_segment_advance(self, engine):
        engine.clock.advance(5_000)
        engine.buy("alice", ONE_SEGMENT_VALUE // 2)

        assert engine.current_segment() == 0
        assert engine.deadline() == START_HEIGHT + WEEK

    def test_segment_matches_supply_after_each_buy(self, engine, params):
        for value in [10**17, 5 * 10**17, 10**18, 2 * 10**18, 3 * 10**17]:
            engine.buy("alice", value)
            assert engine.current_segment() == engine.total_supply() // params.segment_size

    def test_zero_value_rejected(self, engine):
        with pytest.raises(ZeroAmount):
            engine.buy("alice", 0)
        assert engine.events == ()

    def test_tiny_buy_below_one_token_unit(self):
        """Если tokens_for_value == 0, mint всё равно выполняется (нулевой)."""
        params = CurveParameters(total_supply_cap=10**21, max_value=10**22)
        engine = BondingCurveEngine.in_memory(
            params, TokenMetadata(name="Tiny", symbol="TNY")
        )

        receipt = engine.buy("alice", 5)

        assert receipt.tokens_minted == 0
        assert engine.total_supply() == 0
        assert engine.value_transfer.reserve() == 5

    def test_purchase_event_recorded(self, engine):
        engine.buy("alice", 10**17)

        purchase = engine.events[0]
        assert isinstance(purchase, TokensPurchased)
        assert purchase.buyer == "alice"
        assert purchase.value_in == 10**17


class TestOvershootRefund:
    """Clamp по available_supply и точный refund"""

    def test_refund_exact_excess(self, engine, params):
        receipt = engine.buy("whale", 15 * WAD)

        exact_value = params.available_supply * MAX_VALUE // CAP
        assert exact_value == 1275 * 10**16
        assert receipt.tokens_minted == params.available_supply
        assert receipt.refund == 15 * WAD - exact_value
        assert receipt.value_retained == exact_value
        assert engine.total_supply() == params.available_supply
        assert engine.value_transfer.balance_of("whale") == receipt.refund
        assert engine.value_transfer.reserve() == exact_value

    def test_overshoot_completes_curve(self, engine):
        engine.buy("whale", 15 * WAD)

        assert engine.is_complete()
        assert engine.current_segment() == 17
        assert engine.status() == CurveStatus.COMPLETE
        assert [type(e) for e in engine.events] == [
            TokensPurchased,
            SegmentCompleted,
            BondingCurveCompleted,
        ]

    def test_partial_remaining_refund(self, engine, params):
        engine.buy("alice", 12 * WAD)
        remaining = params.available_supply - engine.total_supply()

        receipt = engine.buy("bob", WAD)

        assert receipt.tokens_minted == remaining
        assert receipt.refund == WAD - remaining * MAX_VALUE // CAP
        assert engine.total_supply() == params.available_supply

    def test_exact_completion_has_no_refund(self, engine):
        receipt = engine.buy("alice", 1275 * 10**16)

        assert receipt.refund == 0
        assert engine.is_complete()
        assert engine.value_transfer.balance_of("alice") == 0

    def test_buy_after_completion_rejected(self, engine):
        engine.buy("whale", 15 * WAD)
        events_before = engine.events

        with pytest.raises(MaxSupplyReached):
            engine.buy("alice", WAD)
        assert engine.events == events_before

    def test_refund_failure_reverts_everything(self, engine):
        engine.buy("alice", WAD)
        supply_before = engine.total_supply()
        reserve_before = engine.value_transfer.reserve()
        events_before = engine.events
        segment_before = engine.current_segment()
        deadline_before = engine.deadline()

        engine.value_transfer.reject_transfers_to("whale")
        with pytest.raises(TransferFailed) as exc_info:
            engine.buy("whale", 15 * WAD)

        assert exc_info.value.recipient == "whale"
        assert engine.total_supply() == supply_before
        assert engine.balance_of("whale") == 0
        assert engine.value_transfer.reserve() == reserve_before
        assert engine.events == events_before
        assert engine.current_segment() == segment_before
        assert engine.deadline() == deadline_before
        assert not engine.is_complete()


# =============================================================================
# SELL
# =============================================================================


class TestSell:
    """Продажа"""

    def test_sell_burns_and_pays_pre_burn_price(self, engine):
        engine.buy("bob", ONE_SEGMENT_VALUE)
        engine.buy("alice", 15 * 10**9)
        balance_before = engine.balance_of("alice")
        expected_payout = engine.value_to_return(WAD)

        receipt = engine.sell("alice", WAD)

        assert receipt.payout == expected_payout
        assert receipt.supply_after == receipt.supply_before - WAD
        assert engine.balance_of("alice") == balance_before - WAD
        assert engine.value_transfer.balance_of("alice") == expected_payout

    def test_sell_payout_value(self, engine):
        """
        Буквальная формула value_to_return: payout = A * avg_price / 10^18,
        avg_price = (new_supply + S) * max_value / (2 * cap).

        После покупки на 0.75 native (5e7 токенов) продажа 1 токена (10^18)
        возвращает почти 0.75 native: масштаб формулы не сходится с
        tokens_for_value, это зафиксированное поведение (DESIGN.md, решение 5),
        а крупные продажи откатываются через TransferFailed.
        """
        engine.buy("alice", ONE_SEGMENT_VALUE)

        receipt = engine.sell("alice", WAD)

        assert receipt.payout == 749_999_992_500_000_000

    def test_sell_does_not_touch_curve_state(self, engine):
        engine.buy("alice", ONE_SEGMENT_VALUE)
        deadline = engine.deadline()

        engine.sell("alice", 10**9)

        assert engine.current_segment() == 1
        assert engine.deadline() == deadline

    def test_segment_not_decreased_by_later_buy(self, engine):
        engine.buy("alice", ONE_SEGMENT_VALUE)
        engine.sell("alice", 10**9)
        engine.buy("alice", 1)

        assert engine.current_segment() == 1

    def test_zero_amount_rejected(self, engine):
        with pytest.raises(ZeroAmount):
            engine.sell("alice", 0)

    def test_insufficient_balance_rejected(self, engine):
        engine.buy("alice", 10**17)

        with pytest.raises(InsufficientBalance) as exc_info:
            engine.sell("alice", engine.balance_of("alice") + 1)
        assert exc_info.value.holder == "alice"

    def test_payout_failure_restores_burn(self, engine):
        engine.buy("alice", ONE_SEGMENT_VALUE)
        balance = engine.balance_of("alice")
        reserve = engine.value_transfer.reserve()
        events_before = engine.events

        engine.value_transfer.reject_transfers_to("alice")
        with pytest.raises(TransferFailed):
            engine.sell("alice", 10**9)

        assert engine.balance_of("alice") == balance
        assert engine.total_supply() == balance
        assert engine.value_transfer.reserve() == reserve
        assert engine.events == events_before

    def test_payout_above_reserve_fails(self, engine):
        """Выплата больше reserve → TransferFailed, burn откатывается."""
        engine.buy("alice", ONE_SEGMENT_VALUE)
        balance = engine.balance_of("alice")

        with pytest.raises(TransferFailed):
            engine.sell("alice", balance)

        assert engine.balance_of("alice") == balance

    def test_sell_after_completion_allowed(self, engine):
        engine.buy("whale", 15 * WAD)

        receipt = engine.sell("whale", 10**9)

        assert receipt.tokens_burned == 10**9
        assert engine.is_complete()
        assert isinstance(engine.events[-1], TokensSold)


class TestReentrancy:
    """Reentrant вызов во время выплаты"""

    def test_reentrant_sell_sees_burned_balance(self, engine):
        engine.buy("bob", ONE_SEGMENT_VALUE)
        engine.buy("alice", 15 * 10**9)
        assert engine.balance_of("alice") == WAD

        seen = []

        def reenter(recipient, amount):
            seen.append(engine.balance_of("alice"))
            try:
                engine.sell("alice", WAD)
            except InsufficientBalance as e:
                seen.append(e)

        engine.value_transfer.set_receive_hook("alice", reenter)
        engine.sell("alice", WAD)

        assert seen[0] == 0
        assert isinstance(seen[1], InsufficientBalance)
        assert engine.balance_of("alice") == 0
        assert len([e for e in engine.events if isinstance(e, TokensSold)]) == 1

    def test_failing_hook_reverts_outer_sell(self, engine):
        engine.buy("alice", ONE_SEGMENT_VALUE)
        balance = engine.balance_of("alice")

        def explode(recipient, amount):
            raise RuntimeError("receiver rejected")

        engine.value_transfer.set_receive_hook("alice", explode)
        with pytest.raises(TransferFailed):
            engine.sell("alice", 10**9)

        assert engine.balance_of("alice") == balance


# =============================================================================
# ZOMBIE
# =============================================================================


class TestZombie:
    """Zombie-сценарий"""

    def test_zombie_after_deadline(self, engine):
        engine.clock.set_height(START_HEIGHT + WEEK + 1)

        assert engine.is_zombie()
        assert engine.status() == CurveStatus.ZOMBIE

    def test_not_zombie_exactly_at_deadline(self, engine):
        engine.clock.set_height(START_HEIGHT + WEEK)

        assert not engine.is_zombie()

    def test_buy_without_segment_advance_keeps_zombie(self, engine):
        engine.clock.set_height(START_HEIGHT + WEEK + 10)

        engine.buy("alice", 10**17)

        assert engine.is_zombie()
        assert engine.deadline() == START_HEIGHT + WEEK

    def test_segment_advance_sets_new_deadline(self, engine):
        late = START_HEIGHT + WEEK + 10
        engine.clock.set_height(late)

        engine.buy("alice", ONE_SEGMENT_VALUE)

        assert engine.deadline() == late + WEEK
        assert not engine.is_zombie()

    def test_completion_clears_zombie_regardless_of_height(self, engine):
        engine.clock.set_height(START_HEIGHT + WEEK + 10)
        engine.buy("whale", 15 * WAD)

        engine.clock.advance(100 * WEEK)

        assert engine.is_complete()
        assert not engine.is_zombie()


# =============================================================================
# UNSOLICITED VALUE / SNAPSHOT
# =============================================================================


class TestReceive:
    """Незапрошенная стоимость"""

    def test_receive_is_noop_for_issuance(self, engine):
        engine.receive("stranger", WAD)

        assert engine.total_supply() == 0
        assert engine.balance_of("stranger") == 0
        assert engine.value_transfer.reserve() == WAD
        assert engine.events == ()

    def test_receive_after_completion(self, engine):
        engine.buy("whale", 15 * WAD)
        engine.receive("stranger", 1)

        assert engine.balance_of("stranger") == 0


class TestSnapshot:
    """Снапшот состояния"""

    def test_snapshot_reflects_state(self, engine):
        engine.buy("alice", ONE_SEGMENT_VALUE)

        snapshot = engine.snapshot()

        assert snapshot.symbol == "CRV"
        assert snapshot.current_segment == 1
        assert snapshot.total_supply == 50_000_000 * WAD
        assert snapshot.reserve_balance == ONE_SEGMENT_VALUE
        assert snapshot.status == CurveStatus.ACTIVE
        assert not snapshot.is_zombie
