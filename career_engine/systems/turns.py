"""
Turn orchestrator for the career engine.

Owns the phase state machine and sequences one turn:
    reducer → NPC interactions → thread chapters → stage advance
    → achievements → next scenario (threads, then pool) → branch resolution

Design principles:
- Orchestrator sequences and delegates; rules do the resolving.
- Submissions while a turn is resolving are rejected.
- State is passed in and returned; the orchestrator keeps none of it.

Usage:
    orchestrator = TurnOrchestrator(scenarios, threads)
    offer = orchestrator.next_scenario(state)
    result = orchestrator.submit(offer.state, offer.scenario.id, "some_choice")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..config import Tuning, resolve_tuning
from ..content.fallback import FALLBACK_SCENARIO
from ..rules.achievements import check_achievements
from ..rules.effects import apply_choice
from ..rules.notices import Notice
from ..rules.npc import apply_npc_interactions
from .branches import EffectiveContent, resolve
from .selector import pick_next, tick_cooldowns
from .stages import check_stage_advance
from .threads import ThreadOutcome, chapter_for_scenario, complete_chapter, plan_next, start_thread

if TYPE_CHECKING:
    from ..rules.achievements import AchievementDefinition
    from ..state.schema import GameState, NarrativeThread, Scenario
    from .stages import StageRule

logger = logging.getLogger(__name__)


class TurnPhase(str, Enum):
    """Phase state machine for a single turn."""
    IDLE = "idle"              # No turn in progress
    RESOLVING = "resolving"    # Choice submitted, engine processing
    OFFERING = "offering"      # Picking the next scenario


VALID_TRANSITIONS: dict[TurnPhase, set[TurnPhase]] = {
    TurnPhase.IDLE: {TurnPhase.RESOLVING, TurnPhase.OFFERING},
    TurnPhase.RESOLVING: {TurnPhase.OFFERING, TurnPhase.IDLE},  # IDLE on failure
    TurnPhase.OFFERING: {TurnPhase.IDLE},
}


class OfferSource(str, Enum):
    THREAD = "thread"
    POOL = "pool"
    FALLBACK = "fallback"
    NONE = "none"


class TurnError(Exception):
    """Error during turn processing."""
    pass


class UnknownScenarioError(TurnError):
    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Unknown scenario: {scenario_id}")


class UnknownChoiceError(TurnError):
    def __init__(self, scenario_id: str, choice_id: str):
        self.scenario_id = scenario_id
        self.choice_id = choice_id
        super().__init__(f"Scenario {scenario_id} has no choice {choice_id}")


class StaleStateError(TurnError):
    """Submitted scenario isn't the one the state was offered."""
    def __init__(self, expected: str, got: str):
        self.expected = expected
        self.got = got
        super().__init__(
            f"Stale state: current scenario is {expected}, got {got}. "
            "Request the next scenario again."
        )


class TurnInProgressError(TurnError):
    """A turn is already resolving."""
    def __init__(self, phase: TurnPhase):
        self.phase = phase
        super().__init__(f"Cannot start a turn during {phase.value}")


# ─── Results ────────────────────────────────────────────────

@dataclass
class Offer:
    """The next scenario to present, with the state that offered it."""
    state: "GameState"
    scenario: "Scenario | None" = None
    content: EffectiveContent | None = None
    source: OfferSource = OfferSource.NONE

    @property
    def is_idle(self) -> bool:
        """No scenario available: show the idle state."""
        return self.scenario is None


@dataclass
class TurnResult:
    """Everything that came out of one submitted choice."""
    state: "GameState"
    notices: list[Notice] = field(default_factory=list)
    thread_outcomes: list[ThreadOutcome] = field(default_factory=list)
    offer: Offer | None = None

    @property
    def next_scenario(self) -> "Scenario | None":
        return self.offer.scenario if self.offer else None


# ─── Orchestrator ───────────────────────────────────────────

class TurnOrchestrator:
    """
    Sequences the engine for one session at a time.

    Holds only authored content and configuration, so a single
    orchestrator can serve any number of sessions sequentially.
    """

    def __init__(
        self,
        scenarios: list["Scenario"],
        threads: list["NarrativeThread"] | None = None,
        *,
        registry: list["AchievementDefinition"] | None = None,
        tuning: Tuning | None = None,
        stage_rules: list["StageRule"] | None = None,
        fallback: "Scenario | None" = None,
    ):
        self._pool = list(scenarios)
        self._threads = list(threads or [])
        self._registry = registry
        self._tuning = resolve_tuning(tuning)
        self._stage_rules = stage_rules
        self._fallback = fallback or FALLBACK_SCENARIO
        self._scenarios = {s.id: s for s in self._pool}
        self._scenarios.setdefault(self._fallback.id, self._fallback)
        self._phase = TurnPhase.IDLE

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    def get_scenario(self, scenario_id: str) -> "Scenario | None":
        return self._scenarios.get(scenario_id)

    def _require_idle(self) -> None:
        if self._phase != TurnPhase.IDLE:
            raise TurnInProgressError(self._phase)

    def _transition(self, to: TurnPhase) -> None:
        if to not in VALID_TRANSITIONS[self._phase]:
            raise TurnInProgressError(self._phase)
        self._phase = to

    # ─── Offering ───────────────────────────────────────────

    def next_scenario(self, state: "GameState") -> Offer:
        """
        Pick the scenario to present next, without consuming a choice.

        Returns:
            Offer; its state carries the updated selection windows
        """
        self._require_idle()
        self._transition(TurnPhase.OFFERING)
        try:
            return self._offer(state)
        finally:
            self._phase = TurnPhase.IDLE

    def _offer(self, state: "GameState") -> Offer:
        decision = plan_next(self._threads, state)
        if decision is not None:
            scenario = self._scenarios.get(decision.scenario_id)
            if scenario is None:
                logger.warning(
                    f"Thread {decision.thread_id} chapter {decision.chapter_order} "
                    f"points at unknown scenario {decision.scenario_id}"
                )
            else:
                if decision.starts_thread:
                    state = start_thread(state, decision.thread_id)
                # Pool cooldowns count storyline turns too
                state = state.model_copy(deep=True, update={
                    "current_scenario_id": scenario.id,
                    "cooldowns": tick_cooldowns(state.cooldowns),
                })
                return Offer(
                    state=state,
                    scenario=scenario,
                    content=resolve(scenario, state),
                    source=OfferSource.THREAD,
                )

        scenario, updates = pick_next(
            self._pool, state, state.role, tuning=self._tuning, fallback=self._fallback,
        )
        state = updates.apply_to(state)
        if scenario is None:
            return Offer(state=state)

        source = OfferSource.FALLBACK if scenario.id == self._fallback.id else OfferSource.POOL
        return Offer(
            state=state,
            scenario=scenario,
            content=resolve(scenario, state),
            source=source,
        )

    # ─── Resolving ──────────────────────────────────────────

    def submit(self, state: "GameState", scenario_id: str, choice_id: str) -> TurnResult:
        """
        Resolve the player's choice and offer the next scenario.

        Args:
            state: State the scenario was offered with
            scenario_id: Scenario being answered
            choice_id: Chosen option (from the effective content)

        Returns:
            TurnResult with the new state, notices and next offer

        Raises:
            UnknownScenarioError, UnknownChoiceError, StaleStateError,
            TurnInProgressError
        """
        self._require_idle()
        self._transition(TurnPhase.RESOLVING)
        try:
            result = self._resolve(state, scenario_id, choice_id)
            self._transition(TurnPhase.OFFERING)
            result.offer = self._offer(result.state)
            result.state = result.offer.state
            return result
        finally:
            self._phase = TurnPhase.IDLE

    def _resolve(self, state: "GameState", scenario_id: str, choice_id: str) -> TurnResult:
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise UnknownScenarioError(scenario_id)
        if state.current_scenario_id is not None and state.current_scenario_id != scenario_id:
            raise StaleStateError(state.current_scenario_id, scenario_id)

        content = resolve(scenario, state)
        choice = content.get_choice(choice_id)
        if choice is None:
            raise UnknownChoiceError(scenario_id, choice_id)

        first_time = not state.has_completed(scenario_id)

        new_state, notices = apply_choice(
            state, choice,
            scenario_id=scenario_id,
            tuning=self._tuning,
            registry=self._registry,
        )

        if choice.npc_interactions:
            apply_npc_interactions(
                new_state.narrative, choice.npc_interactions, scenario_id, new_state.months,
            )

        outcomes = []
        if first_time:
            for thread, chapter in chapter_for_scenario(self._threads, new_state, scenario_id):
                if thread.id not in new_state.narrative.active_threads:
                    new_state = start_thread(new_state, thread.id)
                new_state, outcome = complete_chapter(thread, chapter.order, new_state)
                notices.extend(outcome.notices)
                outcomes.append(outcome)

        advance = check_stage_advance(new_state, self._stage_rules)
        if advance is not None:
            new_state, notice = advance
            notices.append(notice)

        if advance is not None or outcomes:
            unlocked, new_state = check_achievements(new_state, self._registry)
            for record in unlocked:
                notices.append(Notice(
                    headline=f"Achievement Unlocked: {record.name}",
                    details=[record.description],
                ))

        new_state.current_scenario_id = None
        return TurnResult(state=new_state, notices=notices, thread_outcomes=outcomes)
