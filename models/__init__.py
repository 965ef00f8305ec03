"""
Models package for the Hybrid Scheduling & Deadlock Simulator.
Contains the Process and Resource entities and the owned SystemState context.
"""
