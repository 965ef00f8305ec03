"""
Analysis package for the Hybrid Scheduling & Deadlock Simulator.
Contains the event log, run metrics and quantum comparison.
"""
