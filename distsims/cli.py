"""Command line entry point running a Lamport distributed mutex simulation."""

from __future__ import annotations

import argparse
import asyncio
import random
import signal
import time
from dataclasses import replace

from .common import get_random_duration
from .events import ProcessID
from .lamport_process import LamportProcess, PState
from .message import Message, MessageType
from .process import DirectoryEntry, ProcessWatch, WatchMessage, print_all_process_states


def build_processes(
    num_processes: int, watch: ProcessWatch, rng: random.Random | None = None
) -> list[LamportProcess]:
    """Create the processes, one of which, chosen at random, starts holding the resource."""
    rng = rng or random.Random()
    holder = rng.randrange(num_processes)
    # Its time must be lower than every initial clock value.
    initial = Message(process_id=holder, l_time=0, message_type=MessageType.REQUEST)
    directory: list[DirectoryEntry[Message]] = [
        DirectoryEntry(pid, asyncio.Queue()) for pid in range(num_processes)
    ]
    processes = []
    for entry in directory:
        process = LamportProcess(entry.process_id, initial, entry.recv, watch, rng=rng)
        if entry.process_id == holder:
            process.resource_hold = replace(initial)
            process.usage_deadline = (
                time.monotonic() + get_random_duration(1000, 250).total_seconds()
            )
            process.state = PState.HOLDING
        process.directory = directory
        processes.append(process)
    return processes


async def _report_changes(
    watch: ProcessWatch,
    num_processes: int,
    states: dict[ProcessID, WatchMessage],
    stop: asyncio.Event,
) -> None:
    stopper = asyncio.ensure_future(stop.wait())
    try:
        while True:
            getter = asyncio.ensure_future(watch.changes.get())
            await asyncio.wait({getter, stopper}, return_when=asyncio.FIRST_COMPLETED)
            if not getter.done():
                getter.cancel()
                return
            change = getter.result()
            states[change.process_id] = change
            print(f"(Process, L Clock, State): {change.process_id}, {change.clock}, {change.state}")
            print_all_process_states(num_processes, states)
    finally:
        stopper.cancel()


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> list[int]:
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            continue
        installed.append(sig)
    return installed


async def run_simulation(
    num_processes: int = 50,
    duration: float | None = None,
) -> dict[ProcessID, WatchMessage]:
    """Run the simulation for ``duration`` seconds, or until interrupted when None.

    Returns the last reported state of every process that reported one.
    """
    watch = ProcessWatch()
    stop = asyncio.Event()
    processes = build_processes(num_processes, watch)
    states: dict[ProcessID, WatchMessage] = {}
    loop = asyncio.get_running_loop()
    installed = _install_signal_handlers(loop, stop) if duration is None else []
    tasks = [asyncio.create_task(p.run(stop)) for p in processes]
    tasks.append(asyncio.create_task(_report_changes(watch, num_processes, states, stop)))
    stopper = asyncio.ensure_future(stop.wait())
    try:
        await asyncio.wait({stopper}, timeout=duration)
    finally:
        stop.set()
        stopper.cancel()
        try:
            await asyncio.gather(*tasks)
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
    return states


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="distsims", description="Simulate Lamport's distributed mutual exclusion."
    )
    parser.add_argument("-n", "--processes", type=int, default=50,
                        help="number of processes (default: 50)")
    parser.add_argument("-d", "--duration", type=float, default=None,
                        help="seconds to run; runs until interrupted when omitted")
    args = parser.parse_args(argv)
    if args.processes < 1:
        parser.error("--processes must be at least 1")
    try:
        asyncio.run(run_simulation(args.processes, args.duration))
    except KeyboardInterrupt:
        pass
    return 0