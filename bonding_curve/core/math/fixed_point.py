"""
Fixed-Point Math — целочисленные примитивы для кривой

Модуль обеспечивает точную целочисленную арифметику для расчётов кривой:
- mul_div с полноразрядным промежуточным произведением (без переполнения)
- Округление вниз (floor): кривая никогда не выдаёт больше, чем оплачено
- Проверки uint256-диапазона для входов и результатов
- Валидация аргументов (неотрицательность, положительность)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Промежуточное произведение a*b никогда не переполняется (Python int)
2. Деление на ноль никогда не происходит (ValueError)
3. Результат всегда в пределах [0, UINT256_MAX]
4. Float не используется нигде
"""

from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Масштаб fixed-point (18 знаков), совпадает с decimals токена
WAD: Final[int] = 10**18

# Верхняя граница uint256
UINT256_MAX: Final[int] = 2**256 - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: int, name: str) -> None:
    """
    Валидация, что значение — неотрицательное целое в диапазоне uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value не int, отрицательное или > UINT256_MAX
    """
    # bool является подклассом int, но как количество не допускается
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ValueError(f"{name} exceeds uint256 range, got {value}")


def validate_positive_uint(value: int, name: str) -> None:
    """
    Валидация, что значение — положительное целое в диапазоне uint256.

    Raises:
        ValueError: Если value <= 0 или вне uint256
    """
    validate_uint(value, name)

    if value == 0:
        raise ValueError(f"{name} must be positive, got 0")


# =============================================================================
# MUL-DIV
# =============================================================================


def mul_div(a: int, b: int, c: int) -> int:
    """
    floor(a * b / c) с полноразрядным промежуточным произведением.

    Произведение a * b может превышать uint256, переполнения при этом
    нет. Ограничение действует только на входы и на результат.

    Args:
        a: Первый множитель (uint256)
        b: Второй множитель (uint256)
        c: Делитель (uint256, > 0)

    Returns:
        floor(a * b / c)

    Raises:
        ValueError: Если c == 0, входы вне uint256 или результат > UINT256_MAX

    Examples:
        >>> mul_div(10**18, 10**27, 15 * 10**18)
        66666666666666666666666666
        >>> mul_div(2**255, 4, 8)
        2**254
        >>> mul_div(7, 3, 2)
        10
    """
    validate_uint(a, "a")
    validate_uint(b, "b")
    validate_uint(c, "c")

    if c == 0:
        raise ValueError("mul_div: division by zero")

    result = (a * b) // c

    if result > UINT256_MAX:
        raise ValueError(f"mul_div: result exceeds uint256 range ({a} * {b} / {c})")

    return result


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp_uint(value: int, min_value: int = 0, max_value: int = UINT256_MAX) -> int:
    """
    Ограничение целого значения в диапазоне [min_value, max_value].

    Examples:
        >>> clamp_uint(5, 0, 10)
        5
        >>> clamp_uint(15, 0, 10)
        10
    """
    if min_value > max_value:
        raise ValueError(f"min_value {min_value} > max_value {max_value}")

    return max(min_value, min(value, max_value))
