"""Segment Tracker — прогрессия сегментов, завершение и zombie-статус кривой.

- Переход сегмента: floor(total_supply / segment_size) > current_segment
- Rolling deadline: при каждом переходе сегмента deadline = height + period
- Завершение: total_supply >= available_supply, ровно один раз
- Zombie: height > deadline и кривая не завершена (только наблюдаемый статус)
"""

from dataclasses import dataclass
from typing import Final

from bonding_curve.core.domain.parameters import CurveParameters
from bonding_curve.core.domain.state import CurveState, CurveStatus
from bonding_curve.core.math.fixed_point import validate_positive_uint

# Одна неделя в блоках
BLOCKS_PER_PERIOD: Final[int] = 604_800


@dataclass(frozen=True)
class SegmentConfig:
    """Конфигурация rolling deadline.

    - blocks_per_period: длина одного периода кривой в блоках
    """
    blocks_per_period: int = BLOCKS_PER_PERIOD

    def __post_init__(self):
        validate_positive_uint(self.blocks_per_period, "blocks_per_period")


@dataclass(frozen=True)
class SegmentTransitionResult:
    """Результат оценки прогресса кривой после изменения предложения."""

    new_segment: int
    new_deadline: int
    is_complete: bool

    # Диагностика
    segment_advanced: bool
    completed_now: bool
    transition_reason: str
    previous_segment: int

    # Для отладки
    details: str


class SegmentTracker:
    """Segment Tracker с монотонной прогрессией сегментов.

    Правила:
    - current_segment никогда не уменьшается
    - deadline меняется только при строгом росте current_segment
    - is_complete: False → True ровно один раз, обратно не возвращается
    - zombie не вызывает переходов: это только наблюдаемый статус

    States:
    - ACTIVE: кривая принимает покупки, deadline не истёк
    - ZOMBIE: deadline истёк без завершения (advisory)
    - COMPLETE: весь available_supply выпущен
    """

    def __init__(
        self,
        parameters: CurveParameters,
        config: SegmentConfig | None = None
    ):
        """
        Args:
            parameters: параметры кривой (segment_size, available_supply)
            config: конфигурация rolling deadline
        """
        self.parameters = parameters
        self.config = config or SegmentConfig()

    def initial_state(self, current_height: int) -> CurveState:
        """Начальное состояние: сегмент 0, deadline через один период."""
        return CurveState(
            current_segment=0,
            deadline=current_height + self.config.blocks_per_period,
            is_complete=False,
        )

    def segment_for_supply(self, total_supply: int) -> int:
        return total_supply // self.parameters.segment_size

    def evaluate_progress(
        self,
        state: CurveState,
        total_supply: int,
        current_height: int
    ) -> SegmentTransitionResult:
        """Оценка прогресса сегментов и завершения.

        Args:
            state: текущее состояние кривой (не изменяется)
            total_supply: предложение из ledger после операции
            current_height: текущая высота блока

        Returns:
            SegmentTransitionResult с новым сегментом, deadline и флагом завершения
        """
        new_segment = state.current_segment
        new_deadline = state.deadline
        segment_advanced = False

        # 1. Переход сегмента (только вверх)
        candidate_segment = self.segment_for_supply(total_supply)
        if candidate_segment > state.current_segment:
            new_segment = candidate_segment
            new_deadline = current_height + self.config.blocks_per_period
            segment_advanced = True

        # 2. Завершение (ровно один раз)
        completed_now = (
            not state.is_complete
            and total_supply >= self.parameters.available_supply
        )
        is_complete = state.is_complete or completed_now

        if completed_now:
            reason = "curve_completed"
            details = f"Available supply reached: supply={total_supply}, segment={new_segment}"
        elif segment_advanced:
            reason = f"segment_advanced_{state.current_segment}_to_{new_segment}"
            details = f"Segment {state.current_segment} → {new_segment}, deadline={new_deadline}"
        else:
            reason = "no_transition"
            details = f"Segment={state.current_segment}, supply={total_supply}"

        return SegmentTransitionResult(
            new_segment=new_segment,
            new_deadline=new_deadline,
            is_complete=is_complete,
            segment_advanced=segment_advanced,
            completed_now=completed_now,
            transition_reason=reason,
            previous_segment=state.current_segment,
            details=details
        )

    def apply(self, state: CurveState, result: SegmentTransitionResult) -> None:
        """Применение результата к состоянию (вызывает только движок)."""
        if result.new_segment < state.current_segment:
            raise ValueError(
                f"segment cannot decrease: {state.current_segment} -> {result.new_segment}"
            )
        if state.is_complete and not result.is_complete:
            raise ValueError("completed curve cannot become incomplete")

        state.current_segment = result.new_segment
        state.deadline = result.new_deadline
        state.is_complete = result.is_complete

    def is_zombie(self, state: CurveState, current_height: int) -> bool:
        """Zombie: deadline истёк, кривая не завершена."""
        return current_height > state.deadline and not state.is_complete

    def status(self, state: CurveState, current_height: int) -> CurveStatus:
        if state.is_complete:
            return CurveStatus.COMPLETE
        if self.is_zombie(state, current_height):
            return CurveStatus.ZOMBIE
        return CurveStatus.ACTIVE
