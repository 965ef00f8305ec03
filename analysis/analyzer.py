"""
Performance Analysis Library for the Hybrid Scheduling & Deadlock Simulator.

Called by simulator.py --compare-quanta to compare time quantum settings.
This is a library module, not a standalone CLI tool.
"""

from typing import Dict, List, Tuple
from dataclasses import dataclass


@dataclass
class QuantumComparisonResult:
    """Results from running a scenario with one quantum."""
    quantum: int
    total_time: int
    completed_processes: int
    terminated_processes: int
    total_processes: int
    context_switches: int
    deadlock_count: int
    avg_waiting_time: float
    avg_turnaround_time: float
    throughput: float
    cpu_utilization: float

    def is_successful(self) -> bool:
        """Check if every process completed without termination."""
        return self.completed_processes == self.total_processes

    def display(self) -> str:
        """Format results for display."""
        result = f"\nQuantum: {self.quantum}\n"
        result += (
            f"  Outcome: Completed={self.completed_processes}/{self.total_processes}, "
            f"Terminated={self.terminated_processes}\n"
        )
        result += f"  Total Time: {self.total_time}\n"
        result += f"  Context Switches: {self.context_switches}\n"
        result += f"  Deadlocks Detected: {self.deadlock_count}\n"
        result += f"  Avg Waiting Time: {self.avg_waiting_time:.2f}\n"
        result += f"  Avg Turnaround Time: {self.avg_turnaround_time:.2f}\n"
        result += f"  Throughput: {self.throughput:.4f} processes/unit\n"
        result += f"  CPU Utilization: {self.cpu_utilization:.2f}%"
        return result


def analyze_quantum(
    quantum: int,
    scenario_path: str,
    verbose: bool = False,
    run_simulation_func=None
) -> QuantumComparisonResult:
    """
    Run a scenario once with the given quantum and collect its metrics.

    The simulation is deterministic, so a single run per quantum is enough.

    Args:
        quantum: Time quantum to test
        scenario_path: Path to scenario JSON file
        verbose: Enable verbose output for the run
        run_simulation_func: Function to run simulation (injected from simulator.py)

    Returns:
        QuantumComparisonResult
    """
    if run_simulation_func is None:
        raise ValueError("run_simulation_func must be provided")

    print(f"\nRunning simulation with quantum={quantum}")

    _, metrics, _ = run_simulation_func(
        scenario_path=scenario_path,
        quantum=quantum,
        verbose=verbose
    )

    return QuantumComparisonResult(
        quantum=quantum,
        total_time=metrics.total_time,
        completed_processes=metrics.completed_processes,
        terminated_processes=metrics.terminated_processes,
        total_processes=metrics.total_processes,
        context_switches=metrics.context_switches,
        deadlock_count=metrics.deadlock_count,
        avg_waiting_time=metrics.get_avg_waiting_time(),
        avg_turnaround_time=metrics.get_avg_turnaround_time(),
        throughput=metrics.get_throughput(),
        cpu_utilization=metrics.get_cpu_utilization()
    )


def compare_quanta(
    quanta: List[int],
    scenario_path: str,
    verbose: bool = False,
    run_simulation_func=None
) -> Tuple[List[QuantumComparisonResult], Dict[int, QuantumComparisonResult]]:
    """
    Compare multiple quantum values on the same scenario.

    Args:
        quanta: Quantum values to compare
        scenario_path: Path to scenario JSON file
        verbose: Enable verbose output for each run
        run_simulation_func: Function to run simulation (injected from simulator.py)

    Returns:
        Tuple of (results in input order, Dict[quantum -> result])
    """
    results = []
    by_quantum = {}

    for quantum in quanta:
        result = analyze_quantum(quantum, scenario_path, verbose, run_simulation_func)
        results.append(result)
        by_quantum[quantum] = result

    return results, by_quantum


def generate_comparison_report(
    results: List[QuantumComparisonResult],
    scenario_path: str
) -> str:
    """
    Generate formatted comparison report.

    Args:
        results: List of quantum comparison results
        scenario_path: Path to scenario file

    Returns:
        Formatted string report
    """
    report = "\n" + "="*70 + "\n"
    report += "QUANTUM COMPARISON REPORT\n"
    report += "="*70 + "\n"
    report += f"Scenario: {scenario_path}\n"
    report += f"Quanta: {', '.join(str(r.quantum) for r in results)}\n"
    report += "="*70 + "\n"

    for result in results:
        report += result.display()
        report += "\n" + "-"*70

    report += "\n\nKEY INSIGHTS:\n"
    report += "-"*70 + "\n"

    def format_best(metric_name: str, results_list: List[QuantumComparisonResult],
                    key_func, format_func, higher_is_better: bool = True):
        """Format best metric, handling ties. Returns empty string if all quanta tied."""
        if higher_is_better:
            target_value = max(key_func(r) for r in results_list)
        else:
            target_value = min(key_func(r) for r in results_list)

        winners = [r for r in results_list if key_func(r) == target_value]

        if len(winners) == len(results_list):
            return ""

        if len(winners) == 1:
            return f"  {metric_name}: quantum {winners[0].quantum} ({format_func(target_value)})\n"
        else:
            names = ", ".join(str(w.quantum) for w in winners)
            return f"  {metric_name}: quanta {names} (tie at {format_func(target_value)})\n"

    if len(results) > 1:
        insights = [
            format_best(
                "Lowest Waiting Time",
                results,
                lambda r: r.avg_waiting_time,
                lambda v: f"{v:.2f}",
                higher_is_better=False
            ),
            format_best(
                "Lowest Turnaround Time",
                results,
                lambda r: r.avg_turnaround_time,
                lambda v: f"{v:.2f}",
                higher_is_better=False
            ),
            format_best(
                "Fewest Context Switches",
                results,
                lambda r: r.context_switches,
                lambda v: f"{v}",
                higher_is_better=False
            ),
            format_best(
                "Best Throughput",
                results,
                lambda r: r.throughput,
                lambda v: f"{v:.4f} processes/unit",
                higher_is_better=True
            ),
        ]

        insights = [i for i in insights if i]

        if insights:
            for insight in insights:
                report += insight
        else:
            report += "  All quanta showed identical performance.\n"

    report += "\n" + "="*70 + "\n"

    return report
