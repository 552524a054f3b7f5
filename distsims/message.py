"""Messages exchanged by Lamport mutex processes, and the Lamport clock."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .events import EventID, ProcessID

LamportTimeStamp = int


class MessageType(IntEnum):
    REQUEST = 0
    ACK = 1
    RELEASE = 2
    INTERNAL = 3

    def __str__(self) -> str:
        return self.name.capitalize()


def _type_label(message_type: int) -> str:
    try:
        return str(MessageType(message_type))
    except ValueError:
        return f"UNKNOWN_MESSAGE_TYPE({int(message_type)})"


@dataclass
class Message:
    """A timestamped message; ranked by Lamport time, tie-broken by sender."""

    process_id: ProcessID
    l_time: LamportTimeStamp
    message_type: MessageType
    event_id: EventID = 0
    payload: dict[str, int] | None = None

    @property
    def l_rank(self) -> int:
        return int(self.l_time)

    @property
    def tie_breaker(self) -> int:
        return int(self.process_id)

    @property
    def event_type(self) -> str:
        return _type_label(self.message_type)


class LamportClock:
    """A Lamport logical clock starting at time 1."""

    def __init__(self) -> None:
        self._time: LamportTimeStamp = 1

    @property
    def l_time(self) -> LamportTimeStamp:
        return self._time

    def tick(self, *args: Message) -> None:
        """Advance the clock; with one received message, jump past its time if later."""
        if len(args) == 1 and args[0].l_time > self._time:
            self._time = args[0].l_time + 1
            return
        self._time += 1

    def __str__(self) -> str:
        return str(self._time)