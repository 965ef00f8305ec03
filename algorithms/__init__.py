"""
Algorithms package for Hybrid Scheduling & Deadlock Simulator.
Contains admission, dynamic scheduling, dispatch, deadlock detection and recovery.
"""
