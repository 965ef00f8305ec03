"""
Deadlock Recovery for the Hybrid Scheduling & Deadlock Simulator.

Resolves a detected deadlock by force-terminating a single process.
"""

from typing import List, Optional, Tuple

from models.system_state import SystemState


def select_victim(system_state: SystemState) -> Optional[int]:
    """
    Select victim process for termination.

    The victim is the unfinished process with the lowest pid, whether or not
    it was among the flagged processes.

    Args:
        system_state: Current system state

    Returns:
        PID of the victim, or None if every process is finished
    """
    for process in system_state.processes:
        if not process.finished:
            return process.pid
    return None


def terminate_process(pid: int, system_state: SystemState) -> Tuple[bool, str]:
    """
    Terminate a process without computing its timing statistics.

    Process termination:
    - Set state to TERMINATED (finished, irreversible)
    - Drop the PID from the ready set
    - Leave waiting/turnaround/finish_time at their defaults
    - Do not record it in finished_order

    Args:
        pid: Process ID to terminate
        system_state: Current system state

    Returns:
        Tuple of (success, message)
    """
    try:
        process = system_state.get_process(pid)
    except KeyError:
        return False, f"Process P{pid} not found"

    if process.finished:
        return False, f"Process P{pid} already {process.state.value}"

    process.terminate()
    if pid in system_state.ready:
        system_state.ready.remove(pid)

    message = (
        f"Terminated P{pid} (priority={process.priority}, "
        f"remaining={process.remaining}/{process.burst})"
    )
    return True, message


def recover_from_deadlock(
    deadlocked_pids: List[int],
    system_state: SystemState
) -> Tuple[bool, List[str]]:
    """
    Recover from a detected deadlock.

    Exactly one process is terminated per detection event, regardless of how
    many processes were flagged.

    Args:
        deadlocked_pids: PIDs flagged by the detector
        system_state: Current system state

    Returns:
        Tuple of (success, list of action messages)
    """
    if not deadlocked_pids:
        return False, ["No deadlocked processes to recover"]

    victim_pid = select_victim(system_state)
    if victim_pid is None:
        return False, ["No unfinished process left to terminate"]

    success, message = terminate_process(victim_pid, system_state)
    if not success:
        return False, [f"FAILED: {message}"]

    return True, [f"RECOVERY: {message}"]
