"""
Screen navigation as an XState machine, run with xstate-python.

flows/people_machine.json is standard XState JSON (id, initial, states with
on: { EVENT: target }), so it can also be opened in Stately Studio.
"""

import json
import os
from pathlib import Path

from xstate.machine import Machine


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


def get_machine_path() -> Path:
    """Return path to the machine JSON (XSTATE_MACHINE_PATH env or flows/people_machine.json)."""
    default = _repo_root() / "flows" / "people_machine.json"
    path = os.environ.get("XSTATE_MACHINE_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return default


def load_machine(path: Path | None = None) -> dict:
    """Load the machine JSON. Every transition target must be a declared state."""
    if path is None:
        path = get_machine_path()
    config = json.loads(path.read_text(encoding="utf-8"))
    if "initial" not in config or "states" not in config:
        raise ValueError("Machine must have 'initial' and 'states'")
    states = config["states"]
    if config["initial"] not in states:
        raise ValueError(f"initial '{config['initial']}' must be a state")
    for name, node in states.items():
        for event, target in ((node or {}).get("on") or {}).items():
            if target not in states:
                raise ValueError(
                    f"State '{name}' event '{event}' targets unknown state '{target}'"
                )
    return config


def _machine_instance(config: dict) -> Machine:
    """Return a Machine instance for this config. Cached per config id."""
    cache: dict[int, Machine] = getattr(_machine_instance, "_cache", {})
    key = id(config)
    if key not in cache:
        cache[key] = Machine(config)
        _machine_instance._cache = cache
    return cache[key]


def transition(machine: dict, state_value: str, event: str) -> str | None:
    """Return next state value for (state_value, event), or None if the event is not handled."""
    try:
        instance = _machine_instance(machine)
        state = instance.state_from(state_value)
        next_state = instance.transition(state, event)
        if next_state.value == state_value:
            return None
        return next_state.value
    except (ValueError, KeyError):
        return None


# Module-level cache for config dict (for get_machine)
_machine_cache: dict | None = None


def get_machine(cache: bool = True) -> dict:
    global _machine_cache
    if cache and _machine_cache is not None:
        return _machine_cache
    _machine_cache = load_machine()
    return _machine_cache
