"""
Event sink — приёмник событий ledger и guard.

Ядро только производит события в EventSink; транспорт и хранение лога
находятся за пределами ядра. EventLog: упорядоченная in-memory реализация
с опциональной проверкой JSON Schema контрактов.
"""

import logging
from typing import Any, Iterator, Protocol, TypeVar

from src.core.contracts import validate_event_record
from src.core.domain.events import ContractEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ContractEvent)


class EventSink(Protocol):
    """Всё, что принимает события в порядке эмиссии."""

    def emit(self, event: ContractEvent) -> None:
        ...


class EventLog:
    """
    In-memory упорядоченный лог событий.

    При validate_contracts=True каждый record проверяется против своей
    JSON Schema до добавления; невалидное событие не попадает в лог
    (jsonschema.ValidationError пробрасывается).
    """

    def __init__(self, validate_contracts: bool = True):
        self.validate_contracts = validate_contracts
        self._events: list[ContractEvent] = []

    def emit(self, event: ContractEvent) -> None:
        if self.validate_contracts:
            validate_event_record(event.to_log_record())
        self._events.append(event)
        logger.debug("event emitted: %s", event.event_name)

    @property
    def events(self) -> list[ContractEvent]:
        """Копия событий в порядке эмиссии."""
        return list(self._events)

    def records(self) -> list[dict[str, Any]]:
        """Log records всех событий в порядке эмиссии."""
        return [event.to_log_record() for event in self._events]

    def of_type(self, event_type: type[E]) -> list[E]:
        """События заданного типа в порядке эмиссии."""
        return [event for event in self._events if isinstance(event, event_type)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[ContractEvent]:
        return iter(list(self._events))
