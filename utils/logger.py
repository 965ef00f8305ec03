"""
Logger utility for the Hybrid Scheduling & Deadlock Simulator.

Provides time-stamped simulation logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime


class SimulatorLogger:
    """
    Logger for simulation events and decisions.

    Format: "Time X: P<pid> runs for N [TIER]"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Simulation Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        print(formatted)

        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_time(self, time: int, message: str, level: str = "info") -> None:
        """Log a message prefixed with the simulation clock."""
        self.log(f"Time {time}: {message}", level)

    def log_dispatch(
        self,
        start: int,
        pid: int,
        duration: int,
        tier: str,
        completed: bool
    ) -> None:
        """
        Log one dispatch.

        Args:
            start: Clock value when the slice started
            pid: Process ID
            duration: Slice length
            tier: Scheduling discipline that picked the process
            completed: Whether the process finished in this slice
        """
        status = "FINISHED" if completed else "requeued"
        message = f"P{pid} runs for {duration} [{tier}] - {status}"
        self.log_time(start, message)

    def log_idle(self, time: int) -> None:
        """Log an idle clock tick."""
        self.log_time(time, "CPU idle, no process ready", "debug")

    def log_deadlock(self, time: int, deadlocked_pids: List[int]) -> None:
        """
        Log deadlock detection.

        Args:
            time: Current clock value
            deadlocked_pids: List of flagged PIDs
        """
        pids_str = ", ".join(f"P{pid}" for pid in deadlocked_pids)
        message = f"DEADLOCK DETECTED - Processes waiting on exhausted resources: [{pids_str}]"
        self.log_time(time, message, "warning")

    def log_recovery(self, time: int, action: str) -> None:
        """
        Log recovery action.

        Args:
            time: Current clock value
            action: Recovery action message
        """
        self.log_time(time, action)

    def log_system_state(self, time: int, state_str: str) -> None:
        """
        Log system state snapshot.

        Args:
            time: Current clock value
            state_str: Formatted system state
        """
        if self.verbose:
            self.log_time(time, f"System State:\n{state_str}")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
