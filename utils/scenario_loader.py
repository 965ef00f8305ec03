"""
Scenario Loader for the Hybrid Scheduling & Deadlock Simulator.

Loads and validates JSON scenario files, or collects the same data
interactively from an operator.
"""

import json
from typing import Callable, Dict, List, Optional, Tuple

from models.process import Process
from models.resource import Resource
from models.system_state import SystemState


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> Tuple[SystemState, Optional[int]]:
    """
    Load scenario from JSON file.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Tuple of (SystemState, quantum)
        - SystemState: Initialized system with processes and resources
        - quantum: Quantum declared by the scenario, or None

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return build_scenario(data)


def build_scenario(data: Dict) -> Tuple[SystemState, Optional[int]]:
    """
    Build a system state from already-parsed scenario data.

    Args:
        data: Scenario dictionary

    Returns:
        Tuple of (SystemState, quantum or None)

    Raises:
        ScenarioLoadError: If the data is invalid
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")
    if 'processes' not in data:
        raise ScenarioLoadError("Scenario missing 'processes' field")
    if 'resources' not in data:
        raise ScenarioLoadError("Scenario missing 'resources' field")

    quantum = data.get('quantum')
    if quantum is not None and (not isinstance(quantum, int) or quantum < 1):
        raise ScenarioLoadError(f"Invalid quantum: {quantum!r} (must be a positive integer)")

    # Load resources first (needed for request validation)
    resources = _load_resources(data['resources'])
    known_rids = {r.rid for r in resources}

    processes = [
        _load_process(proc_data, index, known_rids)
        for index, proc_data in enumerate(data['processes'])
    ]

    pids = [p.pid for p in processes]
    if len(set(pids)) != len(pids):
        raise ScenarioLoadError(f"Duplicate process pid in {pids}")

    return SystemState(processes=processes, resources=resources), quantum


def _load_resources(resource_data: List[Dict]) -> List[Resource]:
    """
    Load resource definitions from scenario data.

    Args:
        resource_data: List of resource dictionaries

    Returns:
        List of Resource objects, sorted by rid
    """
    resources = []

    for index, res in enumerate(resource_data):
        if 'total' not in res:
            raise ScenarioLoadError(f"Resource {res.get('rid', index)} missing 'total'")
        rid = res.get('rid', index)
        if res['total'] < 0:
            raise ScenarioLoadError(f"Resource {rid}: total cannot be negative")
        resources.append(Resource(rid=rid, total=res['total']))

    rids = [r.rid for r in resources]
    if len(set(rids)) != len(rids):
        raise ScenarioLoadError(f"Duplicate resource rid in {rids}")

    return sorted(resources, key=lambda r: r.rid)


def _load_process(proc_data: Dict, index: int, known_rids: set) -> Process:
    """
    Load a single process from scenario data.

    Args:
        proc_data: Process dictionary from scenario
        index: Position in the process list (default pid)
        known_rids: Resource IDs declared by the scenario

    Returns:
        Process object
    """
    pid = proc_data.get('pid', index)

    required_fields = ['arrival', 'burst', 'priority']
    for field in required_fields:
        if field not in proc_data:
            raise ScenarioLoadError(f"Process {pid} missing required field: {field}")

    if proc_data['arrival'] < 0:
        raise ScenarioLoadError(f"Process {pid}: arrival cannot be negative")
    if proc_data['burst'] < 0:
        raise ScenarioLoadError(f"Process {pid}: burst cannot be negative")

    requested = proc_data.get('resources_requested', [])
    for rid in requested:
        if rid not in known_rids:
            raise ScenarioLoadError(f"Process {pid}: requests unknown resource R{rid}")

    return Process(
        pid=pid,
        arrival=proc_data['arrival'],
        burst=proc_data['burst'],
        priority=proc_data['priority'],
        resources_requested=list(requested)
    )


def prompt_scenario(input_func: Callable[[str], str] = input) -> SystemState:
    """
    Collect a scenario interactively.

    Resources are entered first, then processes. PIDs and RIDs are assigned
    in entry order.

    Args:
        input_func: Prompt function (defaults to built-in input)

    Returns:
        Initialized SystemState

    Raises:
        ScenarioLoadError: If an answer is not a valid integer or is out of range
    """
    def ask_int(prompt: str) -> int:
        answer = input_func(prompt)
        try:
            return int(answer.strip())
        except ValueError:
            raise ScenarioLoadError(f"Expected an integer for '{prompt.strip()}', got {answer!r}")

    def ask_ints(prompt: str, count: int) -> List[int]:
        if count == 0:
            return []
        answer = input_func(prompt)
        try:
            values = [int(token) for token in answer.split()]
        except ValueError:
            raise ScenarioLoadError(f"Expected {count} integers, got {answer!r}")
        if len(values) != count:
            raise ScenarioLoadError(f"Expected {count} integers, got {len(values)}")
        return values

    data = {'resources': [], 'processes': []}

    num_resources = ask_int("Enter number of resource types: ")
    for rid in range(num_resources):
        data['resources'].append({'rid': rid, 'total': ask_int(f"Total units of Resource {rid}: ")})

    num_processes = ask_int("Enter number of processes: ")
    for pid in range(num_processes):
        arrival = ask_int(f"Process {pid} - Arrival Time: ")
        burst = ask_int(f"Process {pid} - Burst Time: ")
        priority = ask_int(f"Process {pid} - Priority (lower = higher priority): ")
        count = ask_int(f"Process {pid} - Number of resources requested: ")
        requested = ask_ints(f"Process {pid} - Enter resource IDs: ", count)
        data['processes'].append({
            'pid': pid,
            'arrival': arrival,
            'burst': burst,
            'priority': priority,
            'resources_requested': requested
        })

    system_state, _ = build_scenario(data)
    return system_state
