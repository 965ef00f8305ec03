"""
System State model for the Hybrid Scheduling & Deadlock Simulator.

Owns every piece of mutable simulation state: process and resource
registries, the request/allocation tables, the ready set, the clock and the
run counters. Each phase of the dispatch loop receives this object instead
of touching module-level globals.
"""

import numpy as np
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from models.process import Process
from models.resource import Resource


@dataclass
class SystemState:
    """
    Global system state for one simulation run.

    Attributes:
        processes: All processes, in pid order
        resources: All resource types, in rid order
        time: Virtual clock
        ready: FIFO ready set (pids)
        context_switches: Dispatch counter (every slice counts)
        deadlocks_detected: Number of detection events
        idle_ticks: Clock units spent with an empty ready set
        finished_order: PIDs in completion order (terminated ones excluded)
        allocation_table: pid -> resources held (never written by the loop)
        request_matrix: [P][R] boolean, True where process i requests resource j
        available_vector: [R] available units per resource
    """
    processes: List[Process] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    time: int = 0
    ready: Deque[int] = field(default_factory=deque)
    context_switches: int = 0
    deadlocks_detected: int = 0
    idle_ticks: int = 0
    finished_order: List[int] = field(default_factory=list)
    allocation_table: Dict[int, List[int]] = field(default_factory=dict)

    _request_table: Optional[Dict[int, Tuple[int, ...]]] = None
    _request_matrix: Optional[np.ndarray] = None

    def __post_init__(self):
        """Order registries and freeze the request table."""
        self.processes = sorted(self.processes, key=lambda p: p.pid)
        self.resources = sorted(self.resources, key=lambda r: r.rid)

        pids = [p.pid for p in self.processes]
        if len(set(pids)) != len(pids):
            raise ValueError(f"Duplicate process ids: {pids}")
        rids = [r.rid for r in self.resources]
        if len(set(rids)) != len(rids):
            raise ValueError(f"Duplicate resource ids: {rids}")

        self._process_index = {p.pid: i for i, p in enumerate(self.processes)}
        self._resource_index = {r.rid: j for j, r in enumerate(self.resources)}
        self._request_table = {
            p.pid: tuple(p.resources_requested) for p in self.processes
        }

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return len(self.processes)

    @property
    def num_resources(self) -> int:
        """Number of resource types in the system."""
        return len(self.resources)

    @property
    def request_table(self) -> Dict[int, Tuple[int, ...]]:
        """pid -> requested resource IDs, fixed at creation."""
        return dict(self._request_table)

    @property
    def request_matrix(self) -> np.ndarray:
        """Get request matrix [P][R]. Built once since requests never change."""
        if self._request_matrix is None:
            self._build_request_matrix()
        return self._request_matrix

    @property
    def available_vector(self) -> np.ndarray:
        """Get available units vector [R] from current resource state."""
        return np.array([r.available for r in self.resources], dtype=int)

    @property
    def unfinished_mask(self) -> np.ndarray:
        """Get [P] boolean mask of processes that have not finished."""
        return np.array([not p.finished for p in self.processes], dtype=bool)

    def _build_request_matrix(self) -> None:
        """Build boolean request matrix from the request table."""
        self._request_matrix = np.zeros((self.num_processes, self.num_resources), dtype=bool)
        for i, process in enumerate(self.processes):
            for rid in self._request_table[process.pid]:
                # Requests against undeclared resources are not representable
                j = self._resource_index.get(rid)
                if j is not None:
                    self._request_matrix[i][j] = True

    def get_process(self, pid: int) -> Process:
        """Look up a process by pid (KeyError if unknown)."""
        return self.processes[self._process_index[pid]]

    def get_resource(self, rid: int) -> Resource:
        """Look up a resource by rid (KeyError if unknown)."""
        return self.resources[self._resource_index[rid]]

    def all_finished(self) -> bool:
        """Check if all processes are finished or terminated."""
        return all(p.finished for p in self.processes)

    def display(self) -> str:
        """
        Generate readable string representation of system state.

        Returns:
            Formatted string showing clock, ready set, processes and resources
        """
        output = []
        output.append("\n" + "="*60)
        output.append("SYSTEM STATE")
        output.append("="*60)
        output.append(f"Time: {self.time}   Ready: {list(self.ready)}")
        output.append(
            f"Context switches: {self.context_switches}   "
            f"Deadlocks detected: {self.deadlocks_detected}"
        )

        output.append("\nProcess States:")
        for process in self.processes:
            output.append(
                f"  P{process.pid}: {process.state.value:12} "
                f"(arrival={process.arrival}, remaining={process.remaining}/{process.burst}, "
                f"priority={process.priority})"
            )

        output.append("\nAvailable Resources:")
        output.append(
            "  [" + ", ".join(f"R{r.rid}:{r.available:2}/{r.total}" for r in self.resources) + "]"
        )

        output.append("\nRequest Matrix:")
        output.append("     " + " ".join([f"R{r.rid:2}" for r in self.resources]))
        for i, process in enumerate(self.processes):
            row = f"  P{process.pid}: "
            row += " ".join([f"{int(self.request_matrix[i][j]):3}" for j in range(self.num_resources)])
            output.append(row)

        output.append("\n" + "="*60)
        return "\n".join(output)

    def display_rag(self) -> str:
        """
        Render the resource allocation graph as edge lines.

        Request edges point process -> resource, allocation edges point
        resource -> process.
        """
        output = ["Resource Allocation Graph (RAG):"]
        for pid, rids in self._request_table.items():
            for rid in rids:
                output.append(f"P{pid} --> R{rid}")
        for pid, rids in self.allocation_table.items():
            for rid in rids:
                output.append(f"R{rid} --> P{pid}")
        return "\n".join(output)
