"""
Deadlock Detection for the Hybrid Scheduling & Deadlock Simulator.

Flags processes whose declared requests target an exhausted resource pool.
This is a contention heuristic, not a circular-wait check: a flagged process
is reported even if the resource would free up on its own.
"""

import numpy as np
from typing import List, Tuple

from models.system_state import SystemState


def find_waiting_processes(system_state: SystemState) -> List[int]:
    """
    Find unfinished processes that request at least one exhausted resource.

    Algorithm:
    1. Exhausted[j] = (Available[j] == 0)
    2. Waiting[i] = Unfinished[i] and any(Request[i][j] and Exhausted[j])

    Args:
        system_state: Current global system state

    Returns:
        PIDs of waiting processes, ascending
    """
    if system_state.num_processes == 0 or system_state.num_resources == 0:
        return []

    exhausted = system_state.available_vector == 0
    blocked = np.any(system_state.request_matrix & exhausted, axis=1)
    waiting = blocked & system_state.unfinished_mask

    return [system_state.processes[i].pid for i in np.flatnonzero(waiting)]


def detect_deadlock(system_state: SystemState) -> Tuple[bool, List[int]]:
    """
    Run the detection pass that follows every dispatch.

    A non-empty waiting set counts as one detected deadlock and increments
    the cumulative counter on the system state.

    Args:
        system_state: Current global system state

    Returns:
        Tuple of (deadlock_exists, list of flagged PIDs)
    """
    waiting_pids = find_waiting_processes(system_state)

    if not waiting_pids:
        return False, []

    system_state.deadlocks_detected += 1
    return True, waiting_pids
