"""Ranked events, their sequencing and a priority queue ordered by rank."""

from __future__ import annotations

import heapq
from itertools import count
from typing import Callable, Collection, Generic, Iterable, Iterator, Protocol, TypeVar

ProcessID = int
EventID = int


class RankedEvent(Protocol):
    """An event that can be ordered in an :class:`EventQueue`."""

    process_id: ProcessID
    event_id: EventID

    @property
    def l_rank(self) -> int: ...

    @property
    def tie_breaker(self) -> int: ...

    @property
    def event_type(self) -> str: ...


_TimeT = TypeVar("_TimeT", covariant=True)
_InputT = TypeVar("_InputT", contravariant=True)


class LogicalClock(Protocol[_TimeT, _InputT]):
    """A logical clock that reports its time and advances on events."""

    @property
    def l_time(self) -> _TimeT: ...

    def tick(self, *args: _InputT) -> None: ...


class EventSequencer:
    """Hands out increasing event ids, starting at zero."""

    def __init__(self) -> None:
        self._ids = count()

    def sequence_event(self, event: RankedEvent) -> None:
        """Stamp ``event`` with the next event id."""
        event.event_id = next(self._ids)


E = TypeVar("E", bound=RankedEvent)


def _precedes(left: RankedEvent, right: RankedEvent) -> bool:
    return left.l_rank < right.l_rank or (
        left.tie_breaker == right.tie_breaker and left.event_id < right.event_id
    )


class _Entry(Generic[E]):
    __slots__ = ("event",)

    def __init__(self, event: E) -> None:
        self.event = event

    def __lt__(self, other: _Entry[E]) -> bool:
        return _precedes(self.event, other.event)


class EventQueue(Generic[E]):
    """A min-heap of ranked events; iteration follows storage order."""

    def __init__(self, events: Iterable[E] = ()) -> None:
        self._heap: list[_Entry[E]] = [_Entry(e) for e in events]
        heapq.heapify(self._heap)

    def push(self, event: E) -> None:
        heapq.heappush(self._heap, _Entry(event))

    def pop(self) -> E:
        if not self._heap:
            raise IndexError("pop from an empty event queue")
        return heapq.heappop(self._heap).event

    def peek(self) -> E:
        if not self._heap:
            raise IndexError("peek into an empty event queue")
        return self._heap[0].event

    def remove_at_indices(self, indices: Collection[int]) -> None:
        """Drop the events stored at the given positions and restore heap order."""
        wanted = set(indices)
        self._heap = [entry for i, entry in enumerate(self._heap) if i not in wanted]
        heapq.heapify(self._heap)

    def remove_where(self, predicate: Callable[[E], bool]) -> None:
        """Drop every event for which ``predicate`` is true."""
        self._heap = [entry for entry in self._heap if not predicate(entry.event)]
        heapq.heapify(self._heap)

    def pretty_format(self, label: str) -> str:
        lines = [f"--- EventQueue Contents ({label}) ---"]
        if not self._heap:
            lines.append("  (Queue is empty)")
        else:
            lines.extend(
                f"  [{i}] LRank: {e.l_rank}, EventID: {e.event_id}, "
                f"EventType: {e.event_type}, Tie: {e.tie_breaker}"
                for i, e in enumerate(self)
            )
        lines.append("---------------------------------")
        return "\n".join(lines)

    def pretty_print(self, label: str) -> None:
        print(self.pretty_format(label))

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[E]:
        return (entry.event for entry in self._heap)