"""
Authored content loading.

Scenario pools and narrative threads are authored as JSON, either a bare
list or an object with a "scenarios" / "threads" key. Keys may be
camelCase or snake_case. Malformed content raises pydantic's
ValidationError; content problems surface at load time, not mid-turn.
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from ..state.schema import NarrativeThread, Scenario

logger = logging.getLogger(__name__)

_scenario_list = TypeAdapter(list[Scenario])
_thread_list = TypeAdapter(list[NarrativeThread])

DATA_DIR = Path(__file__).parent / "data"


def _read_items(path: Path | str, key: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get(key, [])
    return data


def load_scenarios(path: Path | str) -> list[Scenario]:
    """Load and validate a scenario pool from a JSON file."""
    scenarios = _scenario_list.validate_python(_read_items(path, "scenarios"))
    _warn_duplicates([s.id for s in scenarios], "scenario", path)
    logger.debug(f"Loaded {len(scenarios)} scenarios from {path}")
    return scenarios


def load_threads(path: Path | str) -> list[NarrativeThread]:
    """Load and validate narrative threads from a JSON file."""
    threads = _thread_list.validate_python(_read_items(path, "threads"))
    _warn_duplicates([t.id for t in threads], "thread", path)
    logger.debug(f"Loaded {len(threads)} threads from {path}")
    return threads


def load_sample_scenarios() -> list[Scenario]:
    """The small scenario pool shipped with the package."""
    return load_scenarios(DATA_DIR / "scenarios.json")


def load_sample_threads() -> list[NarrativeThread]:
    """The sample narrative threads shipped with the package."""
    return load_threads(DATA_DIR / "threads.json")


def index_by_id(scenarios: list[Scenario]) -> dict[str, Scenario]:
    return {s.id: s for s in scenarios}


def _warn_duplicates(ids: list[str], kind: str, path: Path | str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            logger.warning(f"Duplicate {kind} id '{item_id}' in {path}; last one wins")
        seen.add(item_id)
