"""
Process model for the Hybrid Scheduling & Deadlock Simulator.

Represents a simulated process with its CPU demand, priority and the
resources it declares at creation.
"""

from dataclasses import dataclass, field
from typing import List
from enum import Enum


class ProcessState(Enum):
    """Process states in the simulation."""
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"
    TERMINATED = "TERMINATED"


@dataclass
class Process:
    """
    Represents a process in the operating system simulation.

    Attributes:
        pid: Process identifier (unique)
        arrival: Time unit at which the process becomes eligible to run
        burst: Total execution units required (fixed at creation)
        priority: Priority level (lower value = higher precedence)
        resources_requested: Resource IDs the process declares it needs
        remaining: Execution units left (starts equal to burst)
        waiting: Turnaround minus burst, written at completion
        turnaround: Finish time minus arrival, written at completion
        finish_time: Clock value when the last slice ended
        state: Current process state
    """
    pid: int
    arrival: int
    burst: int
    priority: int
    resources_requested: List[int] = field(default_factory=list)
    remaining: int = -1
    waiting: int = 0
    turnaround: int = 0
    finish_time: int = 0
    state: ProcessState = ProcessState.NEW

    def __post_init__(self):
        """Validate burst and initialize remaining time."""
        if self.burst < 0:
            raise ValueError(f"P{self.pid}: burst cannot be negative ({self.burst})")
        if self.remaining < 0:
            self.remaining = self.burst
        if self.remaining > self.burst:
            raise ValueError(
                f"P{self.pid}: remaining ({self.remaining}) exceeds burst ({self.burst})"
            )
        self.resources_requested = list(self.resources_requested)

    @property
    def finished(self) -> bool:
        """True once the process has completed or been terminated."""
        return self.state in [ProcessState.FINISHED, ProcessState.TERMINATED]

    def is_finished(self) -> bool:
        return self.finished

    def was_terminated(self) -> bool:
        """True if the process was force-terminated by deadlock recovery."""
        return self.state == ProcessState.TERMINATED

    def run(self, slice_length: int) -> None:
        """
        Consume execution units for one dispatch.

        Args:
            slice_length: Units executed (must not exceed remaining)

        Raises:
            ValueError: If the process is finished or the slice is out of range
        """
        if self.finished:
            raise ValueError(f"P{self.pid}: cannot run a finished process")
        if slice_length < 0 or slice_length > self.remaining:
            raise ValueError(
                f"P{self.pid}: invalid slice {slice_length} (remaining {self.remaining})"
            )
        self.remaining -= slice_length
        self.state = ProcessState.RUNNING

    def complete(self, time: int) -> None:
        """
        Mark process as finished and compute its timing statistics.

        Args:
            time: Current clock value (becomes finish_time)

        Raises:
            ValueError: If already finished or work is left
        """
        if self.finished:
            raise ValueError(f"P{self.pid}: already {self.state.value}")
        if self.remaining != 0:
            raise ValueError(f"P{self.pid}: cannot complete with {self.remaining} units left")
        self.state = ProcessState.FINISHED
        self.finish_time = time
        self.turnaround = self.finish_time - self.arrival
        self.waiting = self.turnaround - self.burst

    def terminate(self) -> None:
        """
        Force-terminate the process. Timing statistics are left untouched.

        Raises:
            ValueError: If the process is already finished
        """
        if self.finished:
            raise ValueError(f"P{self.pid}: already {self.state.value}")
        self.state = ProcessState.TERMINATED

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Process(pid={self.pid}, priority={self.priority}, "
            f"state={self.state.value}, remaining={self.remaining}/{self.burst}, "
            f"requests={self.resources_requested})"
        )
