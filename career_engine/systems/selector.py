"""
Weighted scenario selector.

Picks the next pool scenario for the job hunt. Selection is a pure
function of (pool, state, role): eligible candidates are filtered,
weighted by difficulty band and tag fatigue, and drawn with a PRNG
seeded from the state, so the same inputs always pick the same scenario.

If nothing is eligible the hard-coded fallback is offered, unless the
fallback is itself cooling down, in which case there is no scenario.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ..config import Tuning, resolve_tuning
from ..content.fallback import FALLBACK_SCENARIO
from ..rules.rng import rng_for, weighted_draw
from ..state.base import Difficulty, Role

if TYPE_CHECKING:
    from ..state.schema import GameState, Scenario

logger = logging.getLogger(__name__)


class SelectionUpdate(BaseModel):
    """State changes produced by one selection."""
    recent_scenario_ids: list[str] = Field(default_factory=list)
    recent_tags: list[str] = Field(default_factory=list)
    cooldowns: dict[str, int] = Field(default_factory=dict)
    current_scenario_id: str | None = None

    def apply_to(self, state: "GameState") -> "GameState":
        """New state with the selection windows replaced."""
        return state.model_copy(deep=True, update={
            "recent_scenario_ids": list(self.recent_scenario_ids),
            "recent_tags": list(self.recent_tags),
            "cooldowns": dict(self.cooldowns),
            "current_scenario_id": self.current_scenario_id,
        })


# ─── Filtering ──────────────────────────────────────────────

def tick_cooldowns(cooldowns: dict[str, int]) -> dict[str, int]:
    """Decrement every cooldown by one turn, dropping those that expire."""
    return {sid: turns - 1 for sid, turns in cooldowns.items() if turns > 1}


def _role_value(role: Role | str | None) -> str | None:
    if isinstance(role, Role):
        return role.value
    return role


def is_eligible(
    scenario: "Scenario",
    state: "GameState",
    role: Role | str | None,
    cooldowns: dict[str, int],
    tuning: Tuning,
) -> bool:
    """Whether a scenario may be drawn this turn."""
    if scenario.phase != tuning["selection_phase"]:
        return False

    if scenario.role_lock is not None:
        if _role_value(role) not in {r.value for r in scenario.role_lock}:
            return False

    gates = scenario.gates
    if gates is not None:
        if gates.stage_min is not None and state.hunt_stage < gates.stage_min:
            return False
        if gates.stage_max is not None and state.hunt_stage > gates.stage_max:
            return False

    if scenario.id in state.recent_scenario_ids:
        return False
    if scenario.id in cooldowns:
        return False

    for stat, minimum in scenario.min_req.items():
        value = state.stats.get(stat)
        if value is None or value < minimum:
            return False

    return True


# ─── Weighting ──────────────────────────────────────────────

def stage_band(stage: int) -> Difficulty:
    """Difficulty band the player's pipeline stage falls in."""
    if stage <= 1:
        return Difficulty.BEGINNER
    if stage <= 3:
        return Difficulty.INTERMEDIATE
    return Difficulty.ADVANCED


def scenario_weight(scenario: "Scenario", state: "GameState", tuning: Tuning) -> int:
    """
    Integer draw weight for an eligible scenario.

    Matching the stage band earns a bonus. Advanced content at stage 0
    is excluded, and beginner content in the advanced band keeps only a
    token weight. Tags shared with recent picks divide the weight.
    """
    weight = tuning["base_weight"]
    difficulty = scenario.difficulty
    band = stage_band(state.hunt_stage)

    if difficulty is not None:
        if difficulty == Difficulty.ADVANCED and state.hunt_stage == 0:
            return 0
        if difficulty == band:
            weight += tuning["band_match_bonus"]
        elif difficulty == Difficulty.BEGINNER and band == Difficulty.ADVANCED:
            weight = tuning["too_easy_weight"]

    overlap = len(set(scenario.tags) & set(state.recent_tags))
    if overlap:
        # Tag fatigue never takes a reachable candidate to zero
        weight = max(1, weight // (overlap + 1))

    return weight


def describe_candidates(
    pool: list["Scenario"],
    state: "GameState",
    role: Role | str | None = None,
    tuning: Tuning | None = None,
) -> list[tuple[str, int]]:
    """(scenario id, weight) for every eligible candidate. Debug aid."""
    tuning = resolve_tuning(tuning)
    cooldowns = tick_cooldowns(state.cooldowns)
    return [
        (s.id, scenario_weight(s, state, tuning))
        for s in pool
        if is_eligible(s, state, role, cooldowns, tuning)
    ]


# ─── Selection ──────────────────────────────────────────────

def selection_seed(state: "GameState", role: Role | str | None) -> str:
    """Seed key: character name, months, stage and role."""
    return f"{state.character_name}|{state.months:g}|{state.hunt_stage}|{_role_value(role) or ''}"


def pick_next(
    pool: list["Scenario"],
    state: "GameState",
    role: Role | str | None = None,
    *,
    tuning: Tuning | None = None,
    fallback: "Scenario | None" = None,
) -> tuple["Scenario | None", SelectionUpdate]:
    """
    Choose the next scenario from the pool.

    Args:
        pool: Candidate scenarios
        state: Current state (read-only)
        role: Player role; defaults to state.role
        tuning: Tuning overrides
        fallback: Scenario to offer when nothing is eligible

    Returns:
        (scenario or None, updates to apply to the state)
    """
    tuning = resolve_tuning(tuning)
    if role is None:
        role = state.role
    if fallback is None:
        fallback = FALLBACK_SCENARIO

    cooldowns = tick_cooldowns(state.cooldowns)

    candidates = [s for s in pool if is_eligible(s, state, role, cooldowns, tuning)]
    weighted = [(s, scenario_weight(s, state, tuning)) for s in candidates]
    weighted = [(s, w) for s, w in weighted if w > 0]

    if not weighted:
        if fallback.id in cooldowns:
            logger.debug("No eligible scenarios and fallback is cooling down")
            return None, SelectionUpdate(
                recent_scenario_ids=list(state.recent_scenario_ids),
                recent_tags=list(state.recent_tags),
                cooldowns=cooldowns,
            )
        logger.debug("No eligible scenarios; offering fallback")
        chosen = fallback
    else:
        logger.debug(f"Candidates: {[(s.id, w) for s, w in weighted]}")
        rng = rng_for(selection_seed(state, role))
        index = weighted_draw([w for _, w in weighted], rng)
        chosen = weighted[index][0]

    return chosen, _record_pick(chosen, state, cooldowns, tuning)


def _record_pick(
    scenario: "Scenario",
    state: "GameState",
    cooldowns: dict[str, int],
    tuning: Tuning,
) -> SelectionUpdate:
    recent_ids = [sid for sid in state.recent_scenario_ids if sid != scenario.id]
    recent_ids.append(scenario.id)
    capacity = tuning["recent_ids_capacity"]
    recent_ids = recent_ids[-capacity:] if capacity > 0 else []

    recent_tags = (list(scenario.tags) + list(state.recent_tags))[:tuning["recent_tags_capacity"]]

    cooldowns = dict(cooldowns)
    cooldown = scenario.cooldown if scenario.cooldown is not None else tuning["default_cooldown"]
    if cooldown > 0:
        cooldowns[scenario.id] = cooldown

    return SelectionUpdate(
        recent_scenario_ids=recent_ids,
        recent_tags=recent_tags,
        cooldowns=cooldowns,
        current_scenario_id=scenario.id,
    )
