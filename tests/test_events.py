import random
from dataclasses import dataclass

import pytest

from distsims.events import EventQueue, EventSequencer


@dataclass
class Sample:
    process_id: int
    rank: int
    event_id: int = 0
    kind: str = "Sample"

    @property
    def l_rank(self):
        return self.rank

    @property
    def tie_breaker(self):
        return self.process_id

    @property
    def event_type(self):
        return self.kind


def test_sequencer_assigns_increasing_ids_from_zero():
    sequencer = EventSequencer()
    events = [Sample(0, 5) for _ in range(4)]
    for event in events:
        sequencer.sequence_event(event)
    queue = EventQueue(reversed(events))
    popped = [queue.pop().event_id for _ in range(len(events))]
    assert popped == [0, 1, 2, 3]


def test_separate_sequencers_are_independent():
    first, second = EventSequencer(), EventSequencer()
    a, b = Sample(0, 0), Sample(1, 0)
    first.sequence_event(Sample(0, 0))
    first.sequence_event(a)
    second.sequence_event(b)
    assert a.event_id > b.event_id


def test_pop_returns_events_in_rank_order():
    ranks = list(range(30))
    random.Random(7).shuffle(ranks)
    queue = EventQueue()
    for pid, rank in enumerate(ranks):
        queue.push(Sample(pid, rank))
    popped = [queue.pop().rank for _ in range(len(ranks))]
    assert popped == sorted(ranks)
    assert len(queue) == 0


def test_equal_tie_breaker_orders_by_event_id():
    queue = EventQueue([Sample(3, 5, event_id=i) for i in (3, 1, 2)])
    assert [queue.pop().event_id for _ in range(3)] == [1, 2, 3]


def test_peek_does_not_remove():
    queue = EventQueue([Sample(0, 4), Sample(1, 2)])
    assert queue.peek().rank == 2
    assert len(queue) == 2


def test_pop_and_peek_on_empty_raise():
    queue = EventQueue()
    with pytest.raises(IndexError):
        queue.pop()
    with pytest.raises(IndexError):
        queue.peek()


def test_remove_where_drops_matching_events():
    queue = EventQueue([Sample(pid, pid * 10) for pid in range(6)])
    queue.remove_where(lambda e: e.process_id % 2 == 0)
    assert sorted(e.process_id for e in queue) == [1, 3, 5]
    assert queue.pop().process_id == 1


def test_remove_at_indices_uses_storage_positions():
    queue = EventQueue([Sample(pid, rank) for pid, rank in enumerate([9, 4, 7, 1, 6])])
    stored = list(queue)
    queue.remove_at_indices({0})
    remaining = sorted(e.rank for e in queue)
    assert remaining == sorted(e.rank for e in stored[1:])
    assert queue.peek().rank == min(remaining)


def test_iteration_yields_every_event():
    events = [Sample(pid, rank) for pid, rank in enumerate([3, 1, 2])]
    queue = EventQueue(events)
    assert sorted(e.rank for e in queue) == [1, 2, 3]


def test_pretty_format_empty_queue():
    text = EventQueue().pretty_format("idle")
    assert text.splitlines() == [
        "--- EventQueue Contents (idle) ---",
        "  (Queue is empty)",
        "---------------------------------",
    ]


def test_pretty_format_lists_events():
    queue = EventQueue([Sample(2, 7, event_id=5, kind="Request")])
    lines = queue.pretty_format("p2").splitlines()
    assert lines[1] == "  [0] LRank: 7, EventID: 5, EventType: Request, Tie: 2"
    assert len(lines) == 3


def test_pretty_print_writes_format(capsys):
    queue = EventQueue([Sample(1, 1)])
    queue.pretty_print("out")
    assert capsys.readouterr().out == queue.pretty_format("out") + "\n"