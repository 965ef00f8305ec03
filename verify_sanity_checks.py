"""
Verify sanity checks are working:
1. Completed processes satisfy turnaround == waiting + burst
2. 0 <= remaining <= burst, and completed processes have remaining == 0
3. Terminated processes keep zeroed timing statistics
4. Dispatch timeline adds up to the busy time and the context-switch count
5. Allocation table stays empty
"""
import sys
from typing import List

from models.system_state import SystemState
from analysis.events import EventLog


def check_invariants(system_state: SystemState, event_log: EventLog) -> List[str]:
    """
    Check post-run invariants.

    Returns:
        List of violation messages (empty when everything holds)
    """
    violations = []

    for p in system_state.processes:
        if not p.finished:
            violations.append(f"P{p.pid} never finished")
        if not 0 <= p.remaining <= p.burst:
            violations.append(f"P{p.pid} remaining {p.remaining} outside [0, {p.burst}]")
        if p.was_terminated():
            if (p.waiting, p.turnaround, p.finish_time) != (0, 0, 0):
                violations.append(f"P{p.pid} terminated but has timing statistics")
            if p.pid in system_state.finished_order:
                violations.append(f"P{p.pid} terminated but listed as completed")
        elif p.finished:
            if p.remaining != 0:
                violations.append(f"P{p.pid} completed with {p.remaining} units left")
            if p.turnaround != p.waiting + p.burst:
                violations.append(
                    f"P{p.pid} turnaround {p.turnaround} != waiting {p.waiting} + burst {p.burst}"
                )

    timeline = event_log.timeline()
    busy_time = sum(duration for _, duration in timeline)
    if busy_time != system_state.time - system_state.idle_ticks:
        violations.append(
            f"Timeline busy time {busy_time} != clock {system_state.time} - idle {system_state.idle_ticks}"
        )
    if len(timeline) != system_state.context_switches:
        violations.append(
            f"{len(timeline)} dispatches but {system_state.context_switches} context switches"
        )

    if any(system_state.allocation_table.values()):
        violations.append(f"Allocation table not empty: {system_state.allocation_table}")

    return violations


def main(scenario_path: str = "scenarios/demo_deadlock.json") -> int:
    from utils.scenario_loader import load_scenario
    from simulator import simulate
    from algorithms.dispatch import DEFAULT_QUANTUM

    system_state, quantum = load_scenario(scenario_path)
    event_log = simulate(system_state, quantum or DEFAULT_QUANTUM)

    print("="*60)
    print("SANITY CHECK VERIFICATION")
    print("="*60)
    print(f"Scenario: {scenario_path}")
    print(f"Timeline: {event_log.timeline()}")

    violations = check_invariants(system_state, event_log)
    if violations:
        for v in violations:
            print(f"   ✗ FAILED: {v}")
        return 1

    print("\n" + "="*60)
    print("ALL SANITY CHECKS PASSED ✓")
    print("="*60)
    return 0


if __name__ == '__main__':
    sys.exit(main(*sys.argv[1:]))
