"""
Dynamic Scheduler for the Hybrid Scheduling & Deadlock Simulator.

Chooses which ready process runs next. The discipline depends on how many
processes are ready:

    k <= 2      shortest remaining time first
    3 <= k <= 5 priority (lower value first)
    k >= 6      round robin (FIFO)
"""

from enum import Enum
from typing import List, Sequence, Tuple

from models.system_state import SystemState

SRT_MAX_READY = 2
PRIORITY_MAX_READY = 5


class SchedulingTier(Enum):
    """Scheduling discipline applied to one dispatch decision."""
    SHORTEST_REMAINING = "SRT"
    PRIORITY = "PRIORITY"
    ROUND_ROBIN = "RR"


def select_tier(ready_count: int) -> SchedulingTier:
    """
    Pick the scheduling discipline for a ready set of the given size.

    Args:
        ready_count: Number of processes in the ready set

    Returns:
        SchedulingTier to apply
    """
    if ready_count <= SRT_MAX_READY:
        return SchedulingTier.SHORTEST_REMAINING
    if ready_count <= PRIORITY_MAX_READY:
        return SchedulingTier.PRIORITY
    return SchedulingTier.ROUND_ROBIN


def order_candidates(
    candidates: Sequence[int],
    system_state: SystemState,
    tier: SchedulingTier
) -> List[int]:
    """
    Order candidate PIDs according to a scheduling tier.

    The position in the ready set is an explicit secondary key, so ties
    always go to the process that entered the ready set first.

    Args:
        candidates: PIDs in ready-set (FIFO) order
        system_state: Current system state
        tier: Discipline to apply

    Returns:
        New list of PIDs, best candidate first
    """
    indexed = list(enumerate(candidates))

    if tier == SchedulingTier.SHORTEST_REMAINING:
        def primary(pid):
            return system_state.get_process(pid).remaining
    elif tier == SchedulingTier.PRIORITY:
        def primary(pid):
            return system_state.get_process(pid).priority
    else:
        return list(candidates)

    indexed.sort(key=lambda item: (primary(item[1]), item[0]))
    return [pid for _, pid in indexed]


def select_next(system_state: SystemState) -> Tuple[int, SchedulingTier]:
    """
    Select the next process to dispatch from the ready set.

    The ready set is left untouched; the caller removes the chosen PID
    before running it.

    Args:
        system_state: Current system state (ready set must not be empty)

    Returns:
        Tuple of (selected pid, tier used)

    Raises:
        ValueError: If the ready set is empty
    """
    if not system_state.ready:
        raise ValueError("Cannot select from an empty ready set")

    candidates = list(system_state.ready)
    tier = select_tier(len(candidates))
    ordered = order_candidates(candidates, system_state, tier)
    return ordered[0], tier
