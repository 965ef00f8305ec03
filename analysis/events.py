"""
Event Model for the Hybrid Scheduling & Deadlock Simulator.

Defines event types for tracking simulation actions. The dispatch events,
in order, form the timeline used for the Gantt chart.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class EventType(Enum):
    """Types of events in the simulation."""
    DISPATCH = "dispatch"
    COMPLETION = "completion"
    IDLE = "idle"
    DEADLOCK = "deadlock"
    RECOVERY = "recovery"


@dataclass
class SimulationEvent:
    """
    Represents a single event in the simulation.

    Attributes:
        time: Clock value when the event was recorded
        event_type: Type of event
        process_id: PID involved in event (-1 for system-wide events)
        duration: Slice length for dispatch events
        message: Human-readable description
    """
    time: int
    event_type: EventType
    process_id: int
    duration: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        base = f"Time {self.time}: P{self.process_id}"

        if self.event_type == EventType.DISPATCH:
            return f"{base} runs for {self.duration} ({self.message})"
        elif self.event_type == EventType.COMPLETION:
            return f"{base} - FINISHED ({self.message})"
        elif self.event_type == EventType.IDLE:
            return f"Time {self.time}: CPU idle"
        elif self.event_type == EventType.DEADLOCK:
            return f"Time {self.time}: DEADLOCK DETECTED ({self.message})"
        elif self.event_type == EventType.RECOVERY:
            return f"Time {self.time}: RECOVERY ({self.message})"
        else:
            return f"{base} - {self.event_type.value}: {self.message}"


@dataclass
class EventLog:
    """Append-only collection of simulation events."""
    events: list = None

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event: SimulationEvent) -> None:
        """Add an event to the log."""
        self.events.append(event)

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_by_process(self, pid: int) -> list:
        """Get all events involving a specific process."""
        return [e for e in self.events if e.process_id == pid]

    def timeline(self) -> List[Tuple[int, int]]:
        """Dispatch timeline as (pid, duration) pairs in chronological order."""
        return [(e.process_id, e.duration) for e in self.get_events_by_type(EventType.DISPATCH)]

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)

    def display_gantt(self) -> str:
        """Format the dispatch timeline as a one-line Gantt chart."""
        cells = [f"| P{pid}({duration}) " for pid, duration in self.timeline()]
        return "Gantt Chart:\n" + "".join(cells) + "|"
