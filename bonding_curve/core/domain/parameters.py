"""
CurveParameters / TokenMetadata — неизменяемые параметры кривой

Immutable Pydantic модели, задаются один раз при создании движка.
Путей обновления нет: производные величины (available_supply, segment_size,
liquidity_reserve) — чистые функции total_supply_cap.
"""

from typing import Final

from pydantic import BaseModel, Field, field_validator

from bonding_curve.core.math.fixed_point import UINT256_MAX

# =============================================================================
# КОНСТАНТЫ КРИВОЙ
# =============================================================================

# Доля cap, навсегда исключённая из выпуска по кривой (%)
LIQUIDITY_RESERVE_PCT: Final[int] = 15

# Количество равных сегментов выпуска (каждый = 5% cap)
SEGMENT_COUNT: Final[int] = 20

PERCENT_DENOMINATOR: Final[int] = 100


# =============================================================================
# CURVE PARAMETERS
# =============================================================================


class CurveParameters(BaseModel):
    """
    Параметры кривой (frozen).

    - total_supply_cap: максимальное предложение (fixed-point 10^18)
    - max_value: стоимость всего cap в нативных единицах (wei)

    Производные:
    - available_supply = cap * 85%
    - liquidity_reserve = cap - available_supply
    - segment_size = cap / 20
    """

    total_supply_cap: int = Field(
        ..., gt=0, le=UINT256_MAX, description="Максимальное предложение (10^18 scale)"
    )
    max_value: int = Field(
        ..., gt=0, le=UINT256_MAX, description="Стоимость всего cap (native value scale)"
    )

    model_config = {"frozen": True, "strict": True}

    @field_validator("total_supply_cap")
    @classmethod
    def validate_segment_size(cls, v: int) -> int:
        """
        Cap делится на SEGMENT_COUNT без остатка.

        Иначе segment_size усекается и available_supply / segment_size
        превышает SEGMENT_COUNT (cap=39 даёт сегмент 33).
        """
        if v % SEGMENT_COUNT != 0:
            raise ValueError(
                f"total_supply_cap {v} must be a multiple of {SEGMENT_COUNT} "
                f"(one segment = cap / {SEGMENT_COUNT})"
            )
        return v

    @property
    def liquidity_reserve_pct(self) -> int:
        return LIQUIDITY_RESERVE_PCT

    @property
    def available_supply(self) -> int:
        """Предложение, выпускаемое по кривой (85% cap)."""
        return (
            self.total_supply_cap
            * (PERCENT_DENOMINATOR - LIQUIDITY_RESERVE_PCT)
            // PERCENT_DENOMINATOR
        )

    @property
    def liquidity_reserve(self) -> int:
        """Резерв ликвидности (15% cap), исключённый из кривой."""
        return self.total_supply_cap - self.available_supply

    @property
    def segment_size(self) -> int:
        """Размер одного сегмента (5% cap)."""
        return self.total_supply_cap // SEGMENT_COUNT

    @property
    def segment_count(self) -> int:
        return SEGMENT_COUNT


# =============================================================================
# TOKEN METADATA
# =============================================================================


class TokenMetadata(BaseModel):
    """Отображаемые метаданные токена. Только данные, без поведения."""

    name: str = Field(..., min_length=1, max_length=64, description="Имя токена")
    symbol: str = Field(..., min_length=1, max_length=11, description="Тикер")
    image_url: str = Field(default="", description="Ссылка на изображение")
    description: str = Field(default="", description="Описание")

    model_config = {"frozen": True}

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Тикер: печатный ASCII без пробелов."""
        if not v.isascii() or not v.isprintable() or " " in v:
            raise ValueError(f"symbol must be printable ASCII without spaces, got {v!r}")
        return v
