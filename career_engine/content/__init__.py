"""Authored content: the fallback scenario and JSON loaders."""

from .fallback import FALLBACK_SCENARIO, FALLBACK_SCENARIO_ID
from .loader import (
    index_by_id,
    load_sample_scenarios,
    load_sample_threads,
    load_scenarios,
    load_threads,
)

__all__ = [
    "FALLBACK_SCENARIO",
    "FALLBACK_SCENARIO_ID",
    "index_by_id",
    "load_sample_scenarios",
    "load_sample_threads",
    "load_scenarios",
    "load_threads",
]
