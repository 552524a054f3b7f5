"""Process scaffolding shared by the simulations: directory, broadcast and state reports."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Generic, TypeVar

from .common import get_random_duration
from .events import EventQueue, EventSequencer, ProcessID, RankedEvent

E = TypeVar("E", bound=RankedEvent)


@dataclass(frozen=True)
class WatchMessage:
    """A report of a process's state and clock after a state change."""

    process_id: ProcessID
    state: str
    clock: str


@dataclass
class ProcessWatch:
    """The channel on which processes publish their state changes."""

    changes: asyncio.Queue[WatchMessage] = field(default_factory=asyncio.Queue)

    def publish(self, message: WatchMessage) -> None:
        self.changes.put_nowait(message)


@dataclass(frozen=True)
class DirectoryEntry(Generic[E]):
    """Where to deliver events for one process."""

    process_id: ProcessID
    recv: asyncio.Queue[E]


def _default_broadcast_delay() -> timedelta:
    return get_random_duration(200, 100)


class Process(Generic[E]):
    """A simulated process with an inbox, an event queue and a shared directory."""

    def __init__(
        self,
        process_id: ProcessID,
        recv: asyncio.Queue[E],
        watch: ProcessWatch,
        *,
        state: int = 0,
        directory: list[DirectoryEntry[E]] | None = None,
        broadcast_delay: Callable[[], timedelta] | None = None,
    ) -> None:
        self.id = process_id
        self.recv = recv
        self.watch = watch
        self.state = state
        self.directory: list[DirectoryEntry[E]] = directory if directory is not None else []
        self.event_queue: EventQueue[E] = EventQueue()
        self.sequencer = EventSequencer()
        self.broadcast_delay = broadcast_delay or _default_broadcast_delay

    async def broadcast(self, event: E) -> None:
        """After a network delay, deliver ``event`` to every process but its sender."""
        await asyncio.sleep(self.broadcast_delay().total_seconds())
        for entry in self.directory:
            if entry.process_id != event.process_id:
                entry.recv.put_nowait(event)


def format_process_states(num_processes: int, states: Mapping[ProcessID, WatchMessage]) -> str:
    """Render the last reported state of processes ``0 .. num_processes - 1``."""
    lines = ["", "--- Current System State ---"]
    for pid in range(num_processes):
        report = states.get(pid)
        if report is None:
            lines.append(f"  PID: {pid}, Clock: N/A, State: Unknown (Not yet reported)")
        else:
            lines.append(
                f"  PID: {report.process_id}, Clock: {report.clock}, State: {report.state}"
            )
    lines.append("----------------------------")
    return "\n".join(lines)


def print_all_process_states(num_processes: int, states: Mapping[ProcessID, WatchMessage]) -> None:
    print(format_process_states(num_processes, states))