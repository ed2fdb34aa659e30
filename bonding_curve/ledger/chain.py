"""Block height source — источник текущей высоты блока."""

from typing import Protocol, runtime_checkable

from bonding_curve.core.math.fixed_point import validate_uint


@runtime_checkable
class BlockHeightSource(Protocol):
    def current_height(self) -> int: ...


class ManualBlockClock:
    """Высота блока, управляемая вручную (тесты и симуляции)."""

    def __init__(self, height: int = 0):
        validate_uint(height, "height")
        self._height = height

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        validate_uint(blocks, "blocks")
        self._height += blocks
        return self._height

    def set_height(self, height: int) -> None:
        """Высота блока не убывает."""
        validate_uint(height, "height")
        if height < self._height:
            raise ValueError(f"block height cannot decrease: {self._height} -> {height}")
        self._height = height
