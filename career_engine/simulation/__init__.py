"""Headless simulation of many sessions for balance testing."""

from .runner import (
    PRESETS,
    FinancialPreset,
    RunOutcome,
    RunResult,
    SimulationReport,
    SimulationRunner,
)

__all__ = [
    "PRESETS",
    "FinancialPreset",
    "RunOutcome",
    "RunResult",
    "SimulationReport",
    "SimulationRunner",
]
