"""
Pricing — функции цены линейной кривой

Прямая кривая: цена единицы токена постоянна = max_value / total_supply_cap.
Все расчёты целочисленные через mul_div (округление вниз): усечение
теряет стоимость только вниз и никогда не создаёт токены или стоимость.

ФОРМУЛЫ:
    tokens_for_value(v) = v * cap / max_value
    value_for_tokens(t) = t * max_value / cap
    current_price       = max_value * 10^18 / cap

    Redemption (трапеция под линейной кривой):
    new_supply    = S - A
    average_price = (new_supply + S) * max_value / (cap * 2)
    payout        = A * average_price / 10^18
"""

from bonding_curve.core.domain.parameters import CurveParameters
from bonding_curve.core.math.fixed_point import WAD, mul_div, validate_uint


def tokens_for_value(parameters: CurveParameters, value: int) -> int:
    """
    Количество токенов за value нативной стоимости.

    Examples:
        >>> params = CurveParameters(total_supply_cap=10**27, max_value=15 * 10**18)
        >>> tokens_for_value(params, 75 * 10**16)
        50000000000000000000000000
    """
    validate_uint(value, "value")
    return mul_div(value, parameters.total_supply_cap, parameters.max_value)


def value_for_tokens(parameters: CurveParameters, token_amount: int) -> int:
    """Стоимость token_amount токенов (точная инверсия tokens_for_value)."""
    validate_uint(token_amount, "token_amount")
    return mul_div(token_amount, parameters.max_value, parameters.total_supply_cap)


def current_price(parameters: CurveParameters) -> int:
    """
    Справочная цена: max_value * 10^18 / cap.

    Структурная константа линейной кривой, не зависит от текущего
    предложения или сегмента.
    """
    return mul_div(parameters.max_value, WAD, parameters.total_supply_cap)


def value_to_return(parameters: CurveParameters, current_supply: int, token_amount: int) -> int:
    """
    Выплата за сжигание token_amount при текущем предложении current_supply.

    Средняя цена — среднее цен линейной кривой в точках S и S - A, поэтому
    выплата равна интегралу кривой по сжигаемому интервалу.

    Args:
        parameters: параметры кривой
        current_supply: предложение до сжигания (S)
        token_amount: сжигаемое количество (A <= S)

    Returns:
        Выплата в нативных единицах

    Raises:
        ValueError: Если token_amount > current_supply
    """
    validate_uint(current_supply, "current_supply")
    validate_uint(token_amount, "token_amount")

    if token_amount > current_supply:
        raise ValueError(
            f"token_amount {token_amount} exceeds current supply {current_supply}"
        )

    new_supply = current_supply - token_amount
    average_price = mul_div(
        new_supply + current_supply,
        parameters.max_value,
        parameters.total_supply_cap * 2,
    )
    return mul_div(token_amount, average_price, WAD)
