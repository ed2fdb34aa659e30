"""
CurveState / CurveSnapshot — состояние кривой

CurveState — изменяемое состояние, принадлежит исключительно движку:
- current_segment: монотонно не убывает, стартует с 0
- deadline: высота блока, сбрасывается при каждом переходе сегмента
- is_complete: False → True ровно один раз, обратно не возвращается

CurveSnapshot — immutable Pydantic снапшот для внешних потребителей.
Каждый снапшот при создании проверяется контрактом curve_snapshot
(contracts/schema/curve_snapshot.json): снапшот, нарушающий контракт,
создать нельзя.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, model_validator

from bonding_curve.core.contracts.validators import require_curve_snapshot


# =============================================================================
# ENUMS
# =============================================================================


class CurveStatus(str, Enum):
    """
    Наблюдаемый статус кривой.

    ZOMBIE — только рекомендательный статус: никаких автоматических
    последствий у перехода через deadline нет.
    """

    ACTIVE = "ACTIVE"
    ZOMBIE = "ZOMBIE"
    COMPLETE = "COMPLETE"


# =============================================================================
# MUTABLE STATE
# =============================================================================


@dataclass
class CurveState:
    """Изменяемое состояние кривой (только движок пишет сюда)."""

    current_segment: int
    deadline: int
    is_complete: bool = False

    def copy(self) -> "CurveState":
        return CurveState(
            current_segment=self.current_segment,
            deadline=self.deadline,
            is_complete=self.is_complete,
        )


# =============================================================================
# SNAPSHOT
# =============================================================================


class CurveSnapshot(BaseModel):
    """
    Снапшот кривой на конкретной высоте блока.

    Immutable модель (frozen=True). Содержит:
    - Параметры кривой (cap, max_value, производные)
    - Состояние (segment, deadline, completion, zombie)
    - Наблюдения (total_supply, reserve_balance, block_height)
    """

    # Метаданные
    symbol: str = Field(..., description="Тикер токена")
    block_height: int = Field(..., ge=0, description="Высота блока снапшота")

    # Параметры
    total_supply_cap: int = Field(..., gt=0, description="Максимальное предложение")
    max_value: int = Field(..., gt=0, description="Стоимость всего cap")
    available_supply: int = Field(..., gt=0, description="Выпускаемое предложение (85%)")
    liquidity_reserve: int = Field(..., ge=0, description="Резерв ликвидности (15%)")
    segment_size: int = Field(..., gt=0, description="Размер сегмента (5%)")
    current_price: int = Field(..., ge=0, description="Справочная цена (константа)")

    # Состояние
    current_segment: int = Field(..., ge=0, description="Текущий сегмент")
    deadline: int = Field(..., ge=0, description="Deadline текущего сегмента (block)")
    is_complete: bool = Field(..., description="Кривая завершена")
    is_zombie: bool = Field(..., description="Deadline истёк без завершения")
    status: CurveStatus = Field(..., description="Наблюдаемый статус")

    # Наблюдения
    total_supply: int = Field(..., ge=0, description="Текущее предложение (ledger)")
    reserve_balance: int = Field(..., ge=0, description="Баланс резерва стоимости")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_contract(self) -> "CurveSnapshot":
        """Согласованность complete/zombie/status и границы сегмента."""
        require_curve_snapshot(self.to_contract())
        return self

    def to_contract(self) -> Dict[str, Any]:
        """JSON-представление для валидации контрактом curve_snapshot."""
        return self.model_dump(mode="json")
