"""
Dispatch & Execution for the Hybrid Scheduling & Deadlock Simulator.

Runs one selected process for a bounded time slice and updates the clock,
the context-switch counter and completion bookkeeping.
"""

from dataclasses import dataclass

from models.system_state import SystemState
from models.process import ProcessState

DEFAULT_QUANTUM = 3


@dataclass
class DispatchRecord:
    """
    Outcome of one dispatch.

    Attributes:
        pid: Process that ran
        start: Clock value when the slice began
        duration: Slice length
        completed: True if the process finished during this slice
    """
    pid: int
    start: int
    duration: int
    completed: bool

    @property
    def end(self) -> int:
        return self.start + self.duration


def dispatch(system_state: SystemState, pid: int, quantum: int = DEFAULT_QUANTUM) -> DispatchRecord:
    """
    Execute one slice of a process.

    Steps:
    1. slice = min(quantum, remaining)
    2. remaining -= slice, time += slice, context_switches += 1
    3. If remaining == 0: finish the process and record completion order
       Otherwise: re-append the process to the back of the ready set

    The caller must already have removed the PID from the ready set.

    Args:
        system_state: Current system state
        pid: Process to run
        quantum: Maximum slice length

    Returns:
        DispatchRecord describing the slice
    """
    process = system_state.get_process(pid)
    start = system_state.time

    slice_length = min(quantum, process.remaining)
    process.run(slice_length)
    system_state.time += slice_length
    system_state.context_switches += 1

    if process.remaining == 0:
        process.complete(system_state.time)
        system_state.finished_order.append(pid)
        return DispatchRecord(pid=pid, start=start, duration=slice_length, completed=True)

    process.state = ProcessState.READY
    system_state.ready.append(pid)
    return DispatchRecord(pid=pid, start=start, duration=slice_length, completed=False)
