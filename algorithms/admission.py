"""
Admission & Clock for the Hybrid Scheduling & Deadlock Simulator.

Moves arrived processes into the ready set and advances the virtual clock
while nothing is ready.
"""

from typing import List

from models.system_state import SystemState
from models.process import ProcessState


def admit_arrivals(system_state: SystemState) -> List[int]:
    """
    Append every arrived, unfinished process that is not already ready.

    Processes are scanned in pid order, so simultaneous arrivals enter the
    ready set in pid order. A process that was dispatched and re-queued is
    already a member and is not admitted twice.

    Args:
        system_state: Current system state

    Returns:
        List of PIDs admitted during this call
    """
    admitted = []
    for process in system_state.processes:
        if process.finished or process.arrival > system_state.time:
            continue
        if process.pid in system_state.ready:
            continue
        system_state.ready.append(process.pid)
        process.state = ProcessState.READY
        admitted.append(process.pid)
    return admitted


def advance_idle(system_state: SystemState) -> None:
    """Advance the clock by one unit while the ready set is empty."""
    system_state.time += 1
    system_state.idle_ticks += 1
