"""
Resource model for the Hybrid Scheduling & Deadlock Simulator.

Represents a resource type with a fixed number of units.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Resource:
    """
    Represents a resource type in the operating system simulation.

    Attributes:
        rid: Resource identifier
        total: Total number of units (fixed capacity)
        available: Units not currently held (defaults to total)

    Invariant:
        0 <= available <= total
    """
    rid: int
    total: int
    available: Optional[int] = None

    def __post_init__(self):
        """Validate resource state."""
        if self.total < 0:
            raise ValueError(f"Resource {self.rid}: total cannot be negative")
        if self.available is None:
            self.available = self.total
        if self.available < 0:
            raise ValueError(f"Resource {self.rid}: available cannot be negative")
        if self.available > self.total:
            raise ValueError(
                f"Resource {self.rid}: available ({self.available}) "
                f"exceeds total ({self.total})"
            )

    @property
    def exhausted(self) -> bool:
        """True when no units are available."""
        return self.available == 0
