#!/usr/bin/env python3
"""
Hybrid Scheduling & Deadlock Simulator
Main entry point for the simulation system.

Simulates cooperative multitasking with a scheduler that switches between
shortest-remaining-time, priority and round-robin depending on how many
processes are ready, and runs a deadlock check after every dispatch.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from models.system_state import SystemState
from utils.scenario_loader import load_scenario, prompt_scenario, ScenarioLoadError
from utils.logger import SimulatorLogger
from algorithms.admission import admit_arrivals, advance_idle
from algorithms.scheduling import select_next
from algorithms.dispatch import dispatch, DEFAULT_QUANTUM
from algorithms.detection import detect_deadlock
from algorithms.recovery import recover_from_deadlock
from analysis.events import EventLog, SimulationEvent, EventType
from analysis.metrics import SimulationMetrics, format_metrics_report
from analysis.analyzer import compare_quanta, generate_comparison_report


def simulate(
    system_state: SystemState,
    quantum: int = DEFAULT_QUANTUM,
    logger: Optional[SimulatorLogger] = None,
    event_log: Optional[EventLog] = None
) -> EventLog:
    """
    Run the dispatch loop until every process is finished.

    Loop Ordering (one iteration):
    1. Admit arrived processes into the ready set
    2. If nothing is ready: stop when all finished, otherwise idle one tick
    3. Select a process (tier chosen by ready-set size), remove it from the ready set
    4. Run one slice; the process finishes or goes to the back of the ready set
    5. Run deadlock detection; on detection terminate one process

    Args:
        system_state: Initialized system state (mutated in place)
        quantum: Maximum slice length
        logger: Logger instance (a quiet one is created if omitted)
        event_log: Event log to append to (created if omitted)

    Returns:
        EventLog containing all simulation events

    Raises:
        ValueError: If quantum is not positive
    """
    if quantum < 1:
        raise ValueError(f"Quantum must be a positive integer, got {quantum}")

    if logger is None:
        logger = SimulatorLogger(verbose=False)
    if event_log is None:
        event_log = EventLog()

    while True:
        # Step 1: Admission
        admitted = admit_arrivals(system_state)
        if admitted:
            logger.log_time(
                system_state.time,
                f"Admitted {', '.join(f'P{pid}' for pid in admitted)}",
                "debug"
            )

        # Step 2: Idle tick or termination
        if not system_state.ready:
            if system_state.all_finished():
                break
            event_log.add(SimulationEvent(
                time=system_state.time,
                event_type=EventType.IDLE,
                process_id=-1
            ))
            logger.log_idle(system_state.time)
            advance_idle(system_state)
            continue

        # Step 3: Selection
        pid, tier = select_next(system_state)
        system_state.ready.remove(pid)

        # Step 4: Dispatch
        record = dispatch(system_state, pid, quantum)
        event_log.add(SimulationEvent(
            time=record.start,
            event_type=EventType.DISPATCH,
            process_id=pid,
            duration=record.duration,
            message=tier.value
        ))
        logger.log_dispatch(record.start, pid, record.duration, tier.value, record.completed)

        if record.completed:
            process = system_state.get_process(pid)
            event_log.add(SimulationEvent(
                time=record.end,
                event_type=EventType.COMPLETION,
                process_id=pid,
                message=f"waiting={process.waiting}, turnaround={process.turnaround}"
            ))

        # Step 5: Deadlock detection and recovery
        deadlock_exists, deadlocked_pids = detect_deadlock(system_state)
        if deadlock_exists:
            logger.log_deadlock(system_state.time, deadlocked_pids)
            event_log.add(SimulationEvent(
                time=system_state.time,
                event_type=EventType.DEADLOCK,
                process_id=-1,
                message=f"processes: {deadlocked_pids}"
            ))

            success, recovery_actions = recover_from_deadlock(deadlocked_pids, system_state)
            for action in recovery_actions:
                logger.log_recovery(system_state.time, action)
                if action.startswith("RECOVERY:"):
                    event_log.add(SimulationEvent(
                        time=system_state.time,
                        event_type=EventType.RECOVERY,
                        process_id=-1,
                        message=action
                    ))
            if not success:
                logger.log("Recovery found no process to terminate", "warning")

        if logger.verbose:
            logger.log_system_state(system_state.time, system_state.display())

    return event_log


def run_simulation(
    scenario_path: Optional[str] = None,
    quantum: Optional[int] = None,
    verbose: bool = False,
    system_state: Optional[SystemState] = None,
    log_file: Optional[str] = None
) -> Tuple[EventLog, Optional[SimulationMetrics], Optional[SystemState]]:
    """
    Load a scenario, run it and print the reports.

    Quantum precedence: explicit argument, then the scenario's "quantum",
    then DEFAULT_QUANTUM.

    Args:
        scenario_path: Path to scenario JSON file (ignored if system_state given)
        quantum: Time quantum override
        verbose: Enable verbose logging
        system_state: Pre-built system state (e.g. from interactive input)
        log_file: Optional log file path

    Returns:
        Tuple of (EventLog, SimulationMetrics, final SystemState);
        metrics and state are None if the scenario could not be loaded
    """
    logger = SimulatorLogger(verbose=verbose, log_file=log_file)
    event_log = EventLog()

    scenario_quantum = None
    if system_state is None:
        try:
            system_state, scenario_quantum = load_scenario(scenario_path)
        except ScenarioLoadError as e:
            logger.log(f"Failed to load scenario: {e}", "error")
            logger.close()
            return event_log, None, None

    if quantum is None:
        quantum = scenario_quantum if scenario_quantum is not None else DEFAULT_QUANTUM

    logger.log(f"\n{'='*60}")
    logger.log(f"SIMULATION START: quantum={quantum}")
    if scenario_path:
        logger.log(f"Scenario: {scenario_path}")
    logger.log(f"{'='*60}\n")

    _display_initial_state(system_state, logger)

    simulate(system_state, quantum, logger, event_log)

    logger.log(f"\nAll processes finished at time {system_state.time}")
    logger.log(f"\n{'='*60}")
    logger.log("SIMULATION COMPLETE")
    logger.log(f"{'='*60}\n")

    metrics = SimulationMetrics.from_state(system_state, quantum)
    logger.log(event_log.display_gantt())
    logger.log(format_metrics_report(metrics, verbose=verbose, scenario=scenario_path))
    logger.log("\n" + system_state.display_rag())

    logger.close()
    return event_log, metrics, system_state


def _display_initial_state(system_state: SystemState, logger: SimulatorLogger) -> None:
    """Display initial system state."""
    logger.log("Initial System State:")
    logger.log("\nProcesses:")
    for p in system_state.processes:
        logger.log(
            f"  P{p.pid}: arrival={p.arrival}, burst={p.burst}, "
            f"priority={p.priority}, requests={p.resources_requested}"
        )

    logger.log("\nResources:")
    for r in system_state.resources:
        logger.log(f"  R{r.rid}: total={r.total}, available={r.available}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the simulator."""
    parser = argparse.ArgumentParser(
        description='Hybrid Scheduling & Deadlock Simulator'
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--scenario',
        type=str,
        help='Path to scenario JSON file'
    )
    source.add_argument(
        '--interactive',
        action='store_true',
        help='Enter resources and processes at the prompt'
    )
    parser.add_argument(
        '--quantum',
        type=int,
        default=None,
        help=f'Time quantum (default: scenario value or {DEFAULT_QUANTUM})'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write the log to this file'
    )
    parser.add_argument(
        '--compare-quanta',
        type=int,
        nargs='+',
        metavar='Q',
        help='Run the scenario once per quantum and compare (requires --scenario)'
    )

    args = parser.parse_args(argv)

    if args.quantum is not None and args.quantum < 1:
        parser.error('--quantum must be a positive integer')
    if args.compare_quanta:
        if args.interactive:
            parser.error('--compare-quanta requires --scenario')
        if any(q < 1 for q in args.compare_quanta):
            parser.error('--compare-quanta values must be positive integers')

    if args.compare_quanta:
        try:
            load_scenario(args.scenario)
        except ScenarioLoadError as e:
            print(f"[ERROR] Failed to load scenario: {e}")
            return 1
        results, _ = compare_quanta(
            args.compare_quanta,
            args.scenario,
            verbose=args.verbose,
            run_simulation_func=run_simulation
        )
        print(generate_comparison_report(results, args.scenario))
        return 0

    system_state = None
    if args.interactive:
        try:
            system_state = prompt_scenario()
        except ScenarioLoadError as e:
            print(f"[ERROR] Invalid input: {e}")
            return 1

    _, metrics, _ = run_simulation(
        scenario_path=args.scenario,
        quantum=args.quantum,
        verbose=args.verbose,
        system_state=system_state,
        log_file=args.log_file
    )
    return 0 if metrics is not None else 1


if __name__ == '__main__':
    sys.exit(main())
