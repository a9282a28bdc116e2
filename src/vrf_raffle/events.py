from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Type, TypeVar, Union


@dataclass(frozen=True)
class EntryRecorded:
    participant: str
    round_index: int
    participant_count: int
    fee_total: int


@dataclass(frozen=True)
class RandomnessRequested:
    request_id: int


@dataclass(frozen=True)
class WinnerPicked:
    winner: str


Event = Union[EntryRecorded, RandomnessRequested, WinnerPicked]
Listener = Callable[[Event], None]
E = TypeVar("E")


class EventLog:
    """Ordered record of emitted notifications plus synchronous subscribers."""

    def __init__(self) -> None:
        self.events: List[Event] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, event: Event) -> None:
        self.events.append(event)
        for listener in self._listeners:
            listener(event)

    def of_type(self, kind: Type[E]) -> List[E]:
        return [e for e in self.events if isinstance(e, kind)]
