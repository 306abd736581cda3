"""
Pytest fixtures for career engine tests.

Provides fresh states, scenario factories and in-memory stores.
"""

import pytest
from pathlib import Path

# Add project root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from career_engine.content import load_sample_scenarios, load_sample_threads
from career_engine.state import (
    Choice,
    GameState,
    MemoryGameStore,
    Scenario,
    new_game_state,
)


@pytest.fixture
def state() -> GameState:
    """Fresh session state for an engineer."""
    return new_game_state("Tester", role="engineer")


@pytest.fixture
def make_choice():
    """Factory for choices with sensible defaults."""
    def _make(choice_id: str = "c1", **kwargs) -> Choice:
        kwargs.setdefault("text", f"Choice {choice_id}")
        return Choice(id=choice_id, **kwargs)
    return _make


@pytest.fixture
def make_scenario(make_choice):
    """Factory for hunt scenarios with one default choice."""
    def _make(scenario_id: str, **kwargs) -> Scenario:
        kwargs.setdefault("title", scenario_id.replace("_", " ").title())
        kwargs.setdefault("text", f"Text for {scenario_id}")
        kwargs.setdefault("phase", "hunt")
        kwargs.setdefault("choices", [make_choice(f"{scenario_id}_go")])
        return Scenario(id=scenario_id, **kwargs)
    return _make


@pytest.fixture
def sample_scenarios() -> list[Scenario]:
    return load_sample_scenarios()


@pytest.fixture
def sample_threads():
    return load_sample_threads()


@pytest.fixture
def memory_store():
    """In-memory game store for testing."""
    return MemoryGameStore()
