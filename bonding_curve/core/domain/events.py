"""
Events — события жизненного цикла кривой

Упорядоченный append-only лог. События — это уведомления, а не
состояние: воспроизводить по ним состояние кривой нельзя.

События:
- SegmentCompleted(segment, new_deadline): пересечён новый сегмент
- BondingCurveCompleted(): выпущен весь available_supply
- TokensPurchased / TokensSold: успешные buy / sell

Каждое событие при создании проверяется контрактом curve_event
(ValueError при нарушении).
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Iterator, List, Tuple, Union

from bonding_curve.core.contracts.validators import require_curve_event


class _ContractEvent:
    """Событие, которое при создании проверяется контрактом curve_event."""

    event_name: ClassVar[str]

    def __post_init__(self) -> None:
        require_curve_event(self.to_contract())

    def to_contract(self) -> Dict[str, Any]:
        return {"event": self.event_name, **asdict(self)}


@dataclass(frozen=True)
class SegmentCompleted(_ContractEvent):
    """Пересечение границы сегмента, deadline сброшен."""

    event_name: ClassVar[str] = "SegmentCompleted"

    segment: int
    new_deadline: int
    block_height: int


@dataclass(frozen=True)
class BondingCurveCompleted(_ContractEvent):
    """Кривая завершена: total_supply достиг available_supply."""

    event_name: ClassVar[str] = "BondingCurveCompleted"

    total_supply: int
    block_height: int


@dataclass(frozen=True)
class TokensPurchased(_ContractEvent):
    """Успешная покупка."""

    event_name: ClassVar[str] = "TokensPurchased"

    buyer: str
    value_in: int
    tokens_minted: int
    refund: int
    block_height: int


@dataclass(frozen=True)
class TokensSold(_ContractEvent):
    """Успешная продажа."""

    event_name: ClassVar[str] = "TokensSold"

    seller: str
    tokens_burned: int
    payout: int
    block_height: int


CurveEvent = Union[SegmentCompleted, BondingCurveCompleted, TokensPurchased, TokensSold]


class EventLog:
    """
    Append-only лог событий.

    checkpoint()/rollback() используются движком, чтобы отменённый вызов
    не оставлял после себя событий. Удалять события вне rollback нельзя.
    """

    def __init__(self):
        self._events: List[CurveEvent] = []

    def emit(self, event: CurveEvent) -> None:
        self._events.append(event)

    def checkpoint(self) -> int:
        return len(self._events)

    def rollback(self, checkpoint: int) -> None:
        del self._events[checkpoint:]

    def of_type(self, event_type: type) -> Tuple[CurveEvent, ...]:
        return tuple(e for e in self._events if isinstance(e, event_type))

    @property
    def events(self) -> Tuple[CurveEvent, ...]:
        return tuple(self._events)

    def __iter__(self) -> Iterator[CurveEvent]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)
