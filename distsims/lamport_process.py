"""A process taking part in Lamport's distributed mutual exclusion algorithm."""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import timedelta
from enum import IntEnum

from .common import get_random_duration
from .events import ProcessID
from .message import LamportClock, LamportTimeStamp, Message, MessageType
from .process import Process, ProcessWatch, WatchMessage

_REQUEST_INTERVAL = 1.0


class PState(IntEnum):
    FREE = 0
    REQUESTED = 1
    ACKNOWLEDGED = 2
    HOLDING = 3

    def __str__(self) -> str:
        return self.name.capitalize()


def _seconds(delay: timedelta) -> float:
    return delay.total_seconds()


class LamportProcess(Process[Message]):
    """Requests, acquires and releases a shared resource using Lamport timestamps."""

    def __init__(
        self,
        process_id: ProcessID,
        initial_message: Message,
        recv: asyncio.Queue[Message],
        watch: ProcessWatch,
        *,
        rng: random.Random | None = None,
        broadcast_delay: Callable[[], timedelta] | None = None,
    ) -> None:
        super().__init__(process_id, recv, watch, state=PState.FREE,
                         broadcast_delay=broadcast_delay)
        self.event_queue.push(replace(initial_message))
        self.clock = LamportClock()
        self.ack_set: set[ProcessID] = set()
        self.resource_hold: Message | None = None
        self.outstanding: Message | None = None
        self.usage_deadline: float | None = None
        self._rng = rng or random.Random()

    @property
    def state_name(self) -> str:
        try:
            return str(PState(self.state))
        except ValueError:
            return "Undefined"

    def set_pstate(self, state: int) -> None:
        """Change state and publish the change on the watch."""
        self.state = state
        self.watch.publish(WatchMessage(self.id, self.state_name, str(self.clock)))

    def new_message(
        self,
        process_id: ProcessID,
        l_time: LamportTimeStamp,
        message_type: MessageType,
        payload: dict[str, int] | None = None,
    ) -> Message:
        message = Message(process_id=process_id, l_time=l_time,
                          message_type=message_type, payload=payload)
        self.sequencer.sequence_event(message)
        return message

    def internal_event(self) -> None:
        self.clock.tick()

    async def request(self) -> None:
        """Ask every other process for the resource; does nothing unless free."""
        if self.state != PState.FREE:
            return
        self.clock.tick()
        request = self.new_message(self.id, self.clock.l_time, MessageType.REQUEST)
        self.outstanding = request
        self.event_queue.push(request)
        self.set_pstate(PState.REQUESTED)
        self.ack_set = set()
        await self.broadcast(request)

    async def release(self) -> None:
        """Give the resource up and tell every other process."""
        self.clock.tick()
        held = self.resource_hold
        if held is None:
            raise RuntimeError("release called while not holding the resource")
        self.usage_deadline = None
        self.event_queue.remove_where(
            lambda m: m.process_id == held.process_id and m.l_rank == held.l_rank
        )
        self.set_pstate(PState.FREE)
        message = self.new_message(
            self.id, self.clock.l_time, MessageType.RELEASE,
            {"ProcessID": int(self.id), "LRank": held.l_rank},
        )
        await self.broadcast(message)
        self.resource_hold = None

    def receive(self, message: Message) -> None:
        """Handle a message from another process, acquiring the resource if now allowed."""
        if message.message_type not in (MessageType.REQUEST, MessageType.ACK, MessageType.RELEASE):
            raise ValueError(f"Message type {int(message.message_type)} not recognized")
        self.clock.tick(message)
        self.event_queue.push(message)
        match message.message_type:
            case MessageType.REQUEST:
                ack = self.new_message(self.id, self.clock.l_time, MessageType.ACK)
                self.directory[message.process_id].recv.put_nowait(ack)
            case MessageType.ACK:
                self.ack_set.add(message.process_id)
            case MessageType.RELEASE:
                payload = message.payload or {}
                owner = payload.get("ProcessID", 0)
                rank = payload.get("LRank", 0)
                self.event_queue.remove_where(
                    lambda m: m.process_id == owner and m.l_rank == rank
                )
        self._try_acquire()

    def _try_acquire(self) -> None:
        outstanding = self.outstanding
        if self.state != PState.REQUESTED or outstanding is None:
            return
        requests = [m for m in self.event_queue if m.message_type == MessageType.REQUEST]
        smallest = min(requests, key=lambda m: (m.l_time, m.process_id), default=None)
        at_head = (
            smallest is not None
            and smallest.process_id == outstanding.process_id
            and smallest.l_rank == outstanding.l_rank
        )
        acked = len(self.ack_set) == len(self.directory) - 1
        if not (at_head and acked):
            return
        self.resource_hold = outstanding
        self.set_pstate(PState.HOLDING)
        self.event_queue.remove_where(
            lambda m: m.process_id == self.id
            and m.l_rank == outstanding.l_rank
            and m.message_type == MessageType.REQUEST
        )
        self.usage_deadline = time.monotonic() + _seconds(get_random_duration(1000, 500))
        self.ack_set = set()
        self.outstanding = None

    async def run(self, stop_event: asyncio.Event) -> None:
        """Serve messages and timers until ``stop_event`` is set."""
        next_request = time.monotonic() + _REQUEST_INTERVAL
        next_internal = time.monotonic() + _seconds(get_random_duration(1000, 500))
        stopper = asyncio.ensure_future(stop_event.wait())
        try:
            while not stop_event.is_set():
                deadlines = [next_request, next_internal]
                if self.usage_deadline is not None:
                    deadlines.append(self.usage_deadline)
                timeout = max(0.0, min(deadlines) - time.monotonic())
                getter = asyncio.ensure_future(self.recv.get())
                await asyncio.wait({getter, stopper}, timeout=timeout,
                                   return_when=asyncio.FIRST_COMPLETED)
                if getter.done():
                    self.receive(getter.result())
                else:
                    getter.cancel()
                if stop_event.is_set():
                    break
                now = time.monotonic()
                if self.usage_deadline is not None and now >= self.usage_deadline:
                    await self.release()
                if now >= next_request:
                    while next_request <= now:
                        next_request += _REQUEST_INTERVAL
                    if self._rng.randrange(2) == 0:
                        await self.request()
                if now >= next_internal:
                    next_internal = now + _seconds(get_random_duration(1000, 500))
                    self.internal_event()
        finally:
            stopper.cancel()