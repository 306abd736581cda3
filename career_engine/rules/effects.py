"""
Choice effect reducer.

Pure function design: (state, choice) -> (new_state, notices)
The input state is never mutated and the output shares no mutable
collections with it.

Effects are applied in a fixed order:
 1. Clone state
 2. Stat deltas, clamped
 3. Randomized skill bonus
 4. Energy cost
 5. Time cost (salary earned, living costs paid)
 6. Flag, role and emotional directives
 7. Explicit stage jump
 8. Hunt progress with momentum and stage rollover
 9. Behavioral counters
10. Turn bookkeeping and achievement check
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ..config import Tuning, resolve_tuning
from ..state.schema import (
    BEHAVIORAL_STATS,
    FINANCIAL_STATS,
    NUMERIC_STATS,
    SIGNED_STATS,
    UNIT_STATS,
    HistoryEntry,
    resolve_stat_name,
)
from .achievements import check_achievements
from .notices import Notice, NoticeSeverity
from .rng import Mulberry32, rng_for

if TYPE_CHECKING:
    from ..state.schema import Choice, GameState, StatBlock
    from .achievements import AchievementDefinition

logger = logging.getLogger(__name__)

STAGE_NAMES = {
    0: "SETUP",
    1: "GATED",
    2: "SCAN",
    3: "REACH",
    4: "INTERVIEW",
    5: "OFFER",
}


# ─── Stat math ──────────────────────────────────────────────

def clamp_stat(name: str, value: float, ceiling: float = 200) -> float:
    """
    Clamp a stat to its legal range.

    Savings may go negative. Energy and stress stay in [0, 1].
    Behavioral attributes stay in [0, ceiling]. Everything else floors at 0.
    """
    if name in SIGNED_STATS:
        return value
    value = max(0, value)
    if name in UNIT_STATS:
        return min(1.0, value)
    if name in BEHAVIORAL_STATS:
        return min(ceiling, value)
    return value


def apply_stat_delta(stats: "StatBlock", name: str, delta: float, ceiling: float = 200) -> float | None:
    """
    Add delta to a stat in place, clamped.

    Unknown stat names and non-finite deltas are ignored.

    Returns:
        The new value, or None if nothing was applied
    """
    field_name = resolve_stat_name(name)
    if field_name is None:
        logger.debug(f"Ignoring delta for unknown stat '{name}'")
        return None
    if not math.isfinite(delta):
        logger.warning(f"Ignoring non-finite delta {delta} for stat '{name}'")
        return None
    value = clamp_stat(field_name, getattr(stats, field_name) + delta, ceiling)
    setattr(stats, field_name, value)
    return value


def stage_name(stage: int) -> str:
    return STAGE_NAMES.get(stage, f"STAGE {stage}")


# ─── Reducer ────────────────────────────────────────────────

def apply_choice(
    state: "GameState",
    choice: "Choice",
    *,
    scenario_id: str | None = None,
    tuning: Tuning | None = None,
    registry: list["AchievementDefinition"] | None = None,
    rng: Mulberry32 | None = None,
) -> tuple["GameState", list[Notice]]:
    """
    Apply a choice's effects to state.

    Args:
        state: Current state (never mutated)
        choice: The option the player picked
        scenario_id: Scenario the choice belongs to; recorded in history
        tuning: Tuning overrides
        registry: Achievement definitions; defaults to DEFAULT_ACHIEVEMENTS
        rng: PRNG for the skill bonus; seeded from state when omitted

    Returns:
        (new_state, notices)
    """
    tuning = resolve_tuning(tuning)
    ceiling = tuning["stat_ceiling"]
    notices: list[Notice] = []

    # 1. Clone
    new_state = state.model_copy(deep=True)
    stats = new_state.stats
    old_stage = state.hunt_stage
    old_progress = state.hunt_progress
    momentum_was_active = state.momentum_active

    # 2. Stat deltas
    for name, delta in choice.fx.items():
        apply_stat_delta(stats, name, delta, ceiling)

    # 3. Skill bonus
    if choice.skill_bonus:
        if resolve_stat_name(choice.skill_bonus) is None:
            logger.debug(f"Ignoring skill bonus for unknown stat '{choice.skill_bonus}'")
        else:
            if rng is None:
                rng = rng_for(
                    state.character_name, state.months, state.turn, choice.id, "skill",
                )
            bonus = rng.randint(tuning["skill_bonus_min"], tuning["skill_bonus_max"])
            apply_stat_delta(stats, choice.skill_bonus, bonus, ceiling)
            notices.append(Notice(
                headline="Skill Boost",
                details=[f"{choice.skill_bonus} +{bonus}"],
            ))

    # 4. Energy cost, in percent points
    if choice.energy_cost:
        cost = choice.energy_cost / 100
        stats.energy = clamp_stat("energy", stats.energy - cost)

    # 5. Time cost
    if choice.time_cost:
        months = choice.time_cost
        new_state.months += months
        if stats.salary > 0:
            stats.savings += math.floor(stats.salary / 12 * months)
        stats.savings -= stats.burn_rate_per_month * months

    if stats.savings < 0 <= state.stats.savings:
        notices.append(Notice(
            headline="In Debt",
            details=["Savings dropped below zero."],
            severity=NoticeSeverity.WARNING,
        ))

    # 6. Directives
    if choice.flag:
        new_state.flags[choice.flag] = True
    if choice.set_role is not None:
        new_state.role = choice.set_role
    if choice.set_emotion is not None:
        stats.emotional_state = choice.set_emotion

    # 7. Explicit stage jump
    if choice.hunt_stage is not None:
        new_state.hunt_stage = max(0, min(tuning["max_stage"], choice.hunt_stage))

    # 8. Progress and momentum
    if choice.hunt_progress is not None:
        notices.extend(_apply_progress(new_state, choice.hunt_progress, momentum_was_active, tuning))

    if new_state.hunt_stage != old_stage:
        notices.append(Notice(
            headline=f"Stage Advanced: {stage_name(new_state.hunt_stage)}",
            details=[f"{stage_name(old_stage)} → {stage_name(new_state.hunt_stage)}"],
        ))

    # 9. Behavioral counters
    _update_counters(new_state, tuning)

    # 10. Bookkeeping and achievements
    new_state.turn += 1
    if scenario_id is not None:
        new_state.history.append(HistoryEntry(
            scenario_id=scenario_id,
            choice_id=choice.id,
            month=new_state.months,
            turn=new_state.turn,
        ))

    if _should_check_achievements(state, new_state, old_stage, old_progress, tuning):
        unlocked, new_state = check_achievements(new_state, registry)
        for record in unlocked:
            notices.append(Notice(
                headline=f"Achievement Unlocked: {record.name}",
                details=[record.description],
            ))

    return new_state, notices


def _apply_progress(
    state: "GameState",
    base: float,
    momentum_was_active: bool,
    tuning: Tuning,
) -> list[Notice]:
    """
    Add hunt progress, tracking momentum and rolling over stages.

    The boost applies only when momentum was active at the start of the
    turn, so a streak pays off on the turn after it completes.
    Mutates state in place.
    """
    notices = []

    contribution = base
    if momentum_was_active:
        contribution = math.ceil(base * tuning["momentum_boost"])

    if base >= tuning["momentum_threshold"]:
        state.momentum_counter += 1
    else:
        state.momentum_counter = 0
        state.momentum_active = False

    if state.momentum_counter >= tuning["momentum_streak"] and not state.momentum_active:
        state.momentum_active = True
        state.counters.momentum_triggers += 1
        notices.append(Notice(
            headline="Momentum!",
            details=[f"Progress boosted x{tuning['momentum_boost']} while the streak lasts."],
        ))

    per_stage = tuning["progress_per_stage"]
    max_stage = tuning["max_stage"]
    progress = max(0, state.hunt_progress + contribution)
    while progress >= per_stage and state.hunt_stage < max_stage:
        progress -= per_stage
        state.hunt_stage += 1
    if state.hunt_stage >= max_stage:
        progress = min(progress, per_stage)
    state.hunt_progress = progress

    return notices


def _update_counters(state: "GameState", tuning: Tuning) -> None:
    counters = state.counters
    stress = state.stats.stress
    energy = state.stats.energy

    if stress < tuning["low_stress_threshold"]:
        counters.low_stress_streak += 1
    else:
        counters.low_stress_streak = 0

    if energy > tuning["high_energy_threshold"]:
        counters.high_energy_streak += 1
    else:
        counters.high_energy_streak = 0

    if stress >= tuning["stress_peak_threshold"]:
        counters.stress_peaked = True
    elif counters.stress_peaked and stress < tuning["stress_recovery_threshold"]:
        counters.stress_recovered = True


def _should_check_achievements(
    before: "GameState",
    after: "GameState",
    old_stage: int,
    old_progress: float,
    tuning: Tuning,
) -> bool:
    """Achievements are re-checked only on turns where something notable moved."""
    if after.hunt_stage != old_stage:
        return True

    milestone = tuning["achievement_progress_milestone"]
    if int(old_progress // milestone) != int(after.hunt_progress // milestone):
        return True

    swing = tuning["achievement_stat_swing"]
    for name in NUMERIC_STATS:
        if name in FINANCIAL_STATS:
            continue
        if abs(getattr(after.stats, name) - getattr(before.stats, name)) >= swing:
            return True

    return after.turn % tuning["achievement_turn_interval"] == 0
