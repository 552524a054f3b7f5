# distsims

A simulation of Lamport's distributed mutual exclusion algorithm, run as asyncio tasks
in a single Python process.

Many simulated processes share one resource. Each keeps a Lamport logical clock and a
queue of requests. About once a second a free process may (with even odds) ask for the
resource: it timestamps a request and, after a short random delay, delivers it to every
other process, each of which answers with an acknowledgement. A process gets the
resource when its own request has the lowest timestamp among the requests it knows of
(lower process id winning ties) and every other process has acknowledged it. It holds
the resource for a random 0.5 to 1.5 seconds, then releases it and tells every other
process. Processes also advance their clocks on random internal events.

When the simulation starts, one process chosen at random already holds the resource.
Each time a process changes state, the simulator prints a line of the form

```
(Process, L Clock, State): 7, 42, Holding
```

followed by a table with the last reported clock and state of every process. Processes
that have not reported yet are shown as `Unknown (Not yet reported)`. The states a
process moves through are `Free`, `Requested` and `Holding`.

## Installation

```
pip install .
```

## Running the simulation

```
distributed-mutex
```

Options:

- `-n`, `--processes`: number of processes (default 50, at least 1).
- `-d`, `--duration`: seconds to run. When omitted, the simulation runs until it is
  stopped with Ctrl-C or SIGTERM.

For example, `distributed-mutex -n 5 -d 10` runs five processes for ten seconds.

## Using it as a library

`run_simulation` is a coroutine. It returns the last state each process reported, as a
dictionary from process id to `WatchMessage`:

```python
import asyncio

from distsims.cli import run_simulation

states = asyncio.run(run_simulation(num_processes=10, duration=5.0))
for pid, report in sorted(states.items()):
    print(pid, report.clock, report.state)
```

The building blocks can also be used on their own:

- `distsims.common`: `get_random_duration`, a base time in milliseconds with uniform jitter.
- `distsims.message`: `Message`, `MessageType` and `LamportClock`.
- `distsims.events`: `EventQueue`, a priority queue of ranked events, `EventSequencer`,
  and the `RankedEvent` and `LogicalClock` protocols.
- `distsims.process`: `Process`, `DirectoryEntry`, `ProcessWatch`, `WatchMessage` and
  `format_process_states` / `print_all_process_states`.
- `distsims.lamport_process`: `LamportProcess` and its states, `PState`.
- `distsims.cli`: `build_processes`, `run_simulation` and `main`.

## What it does not do

The processes are tasks on one event loop that exchange messages through in-memory
`asyncio.Queue`s. Nothing is sent over a network, and a simulation cannot be spread
across machines or operating-system processes. No state is saved between runs.

## Running the tests

```
pip install ".[test]"
pytest
```