"""
Utility package for the Hybrid Scheduling & Deadlock Simulator.
Contains scenario loading and logging helpers.
"""
