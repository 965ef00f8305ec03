"""
Metrics Tracking for the Hybrid Scheduling & Deadlock Simulator.

Collects final per-process timing statistics and run counters.
"""

from dataclasses import dataclass, field
from typing import Dict, List
import statistics

from models.system_state import SystemState


@dataclass
class ProcessSummary:
    """Final statistics for a single process."""
    pid: int
    arrival: int
    burst: int
    priority: int
    waiting: int
    turnaround: int
    finish_time: int
    state: str


@dataclass
class SimulationMetrics:
    """
    Accumulated metrics for a single simulation run.

    Tracks the key performance figures:
    1. Average Waiting Time over completed processes
    2. Average Turnaround Time over completed processes
    3. System Throughput: completed processes / total time
    4. CPU Utilization: busy time / total time
    5. Context Switches and Deadlocks Detected
    """
    quantum: int = 0
    total_time: int = 0
    busy_time: int = 0
    context_switches: int = 0
    deadlock_count: int = 0
    total_processes: int = 0
    completed_processes: int = 0
    terminated_processes: int = 0
    finished_order: List[int] = field(default_factory=list)
    process_summaries: Dict[int, ProcessSummary] = field(default_factory=dict)

    @classmethod
    def from_state(cls, system_state: SystemState, quantum: int) -> "SimulationMetrics":
        """
        Build metrics from a system state after the loop has ended.

        Args:
            system_state: Final system state
            quantum: Quantum used for the run

        Returns:
            Populated SimulationMetrics
        """
        metrics = cls(
            quantum=quantum,
            total_time=system_state.time,
            busy_time=system_state.time - system_state.idle_ticks,
            context_switches=system_state.context_switches,
            deadlock_count=system_state.deadlocks_detected,
            total_processes=system_state.num_processes,
            finished_order=list(system_state.finished_order)
        )

        for p in system_state.processes:
            if p.was_terminated():
                metrics.terminated_processes += 1
            elif p.finished:
                metrics.completed_processes += 1

            metrics.process_summaries[p.pid] = ProcessSummary(
                pid=p.pid,
                arrival=p.arrival,
                burst=p.burst,
                priority=p.priority,
                waiting=p.waiting,
                turnaround=p.turnaround,
                finish_time=p.finish_time,
                state=p.state.value
            )
        return metrics

    def _completed(self) -> List[ProcessSummary]:
        return [s for s in self.process_summaries.values() if s.state == "FINISHED"]

    def get_avg_waiting_time(self) -> float:
        """
        Calculate average waiting time across completed processes.

        Terminated processes are excluded since their statistics are never
        computed.
        """
        completed = self._completed()
        if not completed:
            return 0.0
        return statistics.mean(s.waiting for s in completed)

    def get_avg_turnaround_time(self) -> float:
        """Calculate average turnaround time across completed processes."""
        completed = self._completed()
        if not completed:
            return 0.0
        return statistics.mean(s.turnaround for s in completed)

    def get_throughput(self) -> float:
        """Completed processes per time unit."""
        if self.total_time == 0:
            return 0.0
        return self.completed_processes / self.total_time

    def get_cpu_utilization(self) -> float:
        """Busy time as a percentage of total time."""
        if self.total_time == 0:
            return 0.0
        return (self.busy_time / self.total_time) * 100


def format_metrics_report(
    metrics: SimulationMetrics,
    verbose: bool = False,
    scenario: str = None
) -> str:
    """
    Format metrics for display at end of simulation.

    Args:
        metrics: SimulationMetrics instance with collected data
        verbose: If True, include metric formulas
        scenario: Scenario file path

    Returns:
        Formatted metrics report string
    """
    lines = []
    lines.append("\n" + "="*60)
    lines.append("SIMULATION METRICS")
    lines.append("="*60)

    if scenario:
        lines.append(f"Scenario: {scenario}")
    lines.append(f"Quantum: {metrics.quantum}")
    lines.append(f"Total Time: {metrics.total_time}")
    lines.append(f"Total Processes: {metrics.total_processes}")
    lines.append(f"Completed Processes: {metrics.completed_processes}")
    lines.append(f"Terminated Processes: {metrics.terminated_processes}")
    lines.append("")

    lines.append("PROCESS SUMMARY:")
    lines.append("-" * 60)
    lines.append(f"{'PID':>4} {'Arrival':>8} {'Burst':>6} {'Waiting':>8} {'Turnaround':>11} {'Finish':>7}  State")
    for pid in sorted(metrics.process_summaries.keys()):
        s = metrics.process_summaries[pid]
        lines.append(
            f"{s.pid:>4} {s.arrival:>8} {s.burst:>6} {s.waiting:>8} "
            f"{s.turnaround:>11} {s.finish_time:>7}  {s.state}"
        )
    lines.append("")

    lines.append("KEY PERFORMANCE METRICS:")
    lines.append("-" * 60)
    lines.append(f"1. Average Waiting Time: {metrics.get_avg_waiting_time():.2f}")
    lines.append(f"2. Average Turnaround Time: {metrics.get_avg_turnaround_time():.2f}")
    lines.append(f"3. System Throughput: {metrics.get_throughput():.4f} processes/unit")
    lines.append(f"4. CPU Utilization: {metrics.get_cpu_utilization():.2f}%")
    lines.append(f"5. Context Switches: {metrics.context_switches}")
    lines.append(f"6. Deadlocks Detected and Resolved: {metrics.deadlock_count}")

    if metrics.finished_order:
        order = " -> ".join(f"P{pid}" for pid in metrics.finished_order)
        lines.append(f"\nCompletion Order: {order}")

    if verbose:
        lines.append("")
        lines.append("METRIC FORMULAS:")
        lines.append("-" * 60)
        lines.append("1. Waiting Time: turnaround - burst (completed processes only)")
        lines.append("2. Turnaround Time: finish time - arrival")
        lines.append("3. Throughput: (# processes that reached FINISHED) / (total time)")
        lines.append("4. CPU Utilization: (total time - idle time) / total time x 100")

    lines.append("="*60)
    return "\n".join(lines)
