"""Headless multi-run simulation for balance testing."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from ..config import Tuning
from ..rules.rng import rng_for
from ..state.base import Role
from ..state.schema import GameState, NarrativeThread, Scenario, new_game_state
from ..systems.turns import Offer, TurnOrchestrator

logger = logging.getLogger(__name__)


class RunOutcome(str, Enum):
    HIRED = "hired"
    BURNOUT = "burnout"
    BANKRUPT = "bankrupt"
    STUCK = "stuck"


@dataclass(frozen=True)
class FinancialPreset:
    """Starting finances for a simulated player."""
    name: str
    savings: float
    burn_rate: float
    bankrupt_below: float = -5000  # Savings floor that ends the run


PRESETS: list[FinancialPreset] = [
    FinancialPreset("Comfortable", 25000, 2200),
    FinancialPreset("Middle Class", 15000, 2000),
    FinancialPreset("Self-Dependent", 10000, 1800),
    FinancialPreset("In Debt", -3000, 1600, bankrupt_below=-15000),
]


@dataclass
class RunResult:
    """Outcome of a single simulated run."""

    preset: str
    outcome: RunOutcome
    months: float
    turns: int
    final_stage: int
    achievements: list[str] = field(default_factory=list)


@dataclass
class SimulationReport:
    """All runs of a simulation, with per-preset summaries."""

    seed: int = 0
    results: list[RunResult] = field(default_factory=list)

    def for_preset(self, preset: str) -> list[RunResult]:
        return [r for r in self.results if r.preset == preset]

    def outcome_counts(self, preset: str) -> Counter:
        return Counter(r.outcome for r in self.for_preset(preset))

    def average_months(self, preset: str, outcome: RunOutcome = RunOutcome.HIRED) -> float | None:
        months = [r.months for r in self.for_preset(preset) if r.outcome == outcome]
        if not months:
            return None
        return sum(months) / len(months)

    def presets(self) -> list[str]:
        seen = []
        for r in self.results:
            if r.preset not in seen:
                seen.append(r.preset)
        return seen

    def model_dump(self) -> dict:
        """Serialize for JSON (matches Pydantic convention)."""
        return {
            "seed": self.seed,
            "presets": {
                preset: {
                    "runs": len(self.for_preset(preset)),
                    "outcomes": {o.value: self.outcome_counts(preset).get(o, 0) for o in RunOutcome},
                    "avg_months_to_hire": self.average_months(preset),
                }
                for preset in self.presets()
            },
        }


class SimulationRunner:
    """
    Plays many sessions with a random-choice policy.

    Choices are drawn from a PRNG seeded by (seed, preset, run, turn),
    so a report is reproducible for a given seed and content.
    """

    def __init__(
        self,
        scenarios: list[Scenario],
        threads: list[NarrativeThread] | None = None,
        *,
        tuning: Tuning | None = None,
        seed: int = 0,
        max_months: float = 24,
        max_turns: int = 400,
        role: Role = Role.ENGINEER,
    ):
        self.orchestrator = TurnOrchestrator(scenarios, threads, tuning=tuning)
        self.seed = seed
        self.max_months = max_months
        self.max_turns = max_turns
        self.role = role

    def new_state(self, preset: FinancialPreset, index: int) -> GameState:
        return new_game_state(
            f"sim-{self.seed}-{preset.name}-{index}",
            role=self.role,
            savings=preset.savings,
            burn_rate_per_month=preset.burn_rate,
        )

    def run_one(self, preset: FinancialPreset, index: int = 0) -> RunResult:
        """Play one session until hired, broke, burnt out or out of time."""
        state = self.new_state(preset, index)
        offer: Offer = self.orchestrator.next_scenario(state)
        state = offer.state
        outcome = RunOutcome.STUCK
        steps = 0

        while state.months < self.max_months and steps < self.max_turns:
            steps += 1
            if offer.scenario is None:
                # Nothing eligible this turn; let cooldowns tick
                offer = self.orchestrator.next_scenario(state)
                state = offer.state
                continue

            choices = offer.content.choices if offer.content else offer.scenario.choices
            if not choices:
                logger.warning(f"Scenario {offer.scenario.id} has no choices")
                break
            rng = rng_for(self.seed, preset.name, index, state.turn)
            choice = choices[int(rng.next_float() * len(choices))]

            result = self.orchestrator.submit(state, offer.scenario.id, choice.id)
            state = result.state
            offer = result.offer

            if state.is_hired:
                outcome = RunOutcome.HIRED
                break
            if state.stats.stress >= 1.0 or state.stats.energy <= 0:
                outcome = RunOutcome.BURNOUT
                break
            if state.stats.savings < preset.bankrupt_below:
                outcome = RunOutcome.BANKRUPT
                break

        return RunResult(
            preset=preset.name,
            outcome=outcome,
            months=state.months,
            turns=state.turn,
            final_stage=state.hunt_stage,
            achievements=sorted(state.achievements),
        )

    def run(self, runs_per_preset: int = 100, presets: list[FinancialPreset] | None = None) -> SimulationReport:
        """Run every preset runs_per_preset times."""
        report = SimulationReport(seed=self.seed)
        for preset in presets or PRESETS:
            for index in range(runs_per_preset):
                report.results.append(self.run_one(preset, index))
            counts = report.outcome_counts(preset.name)
            logger.info(f"{preset.name}: {dict(counts)}")
        return report
