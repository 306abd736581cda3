"""
Condition evaluation as pure functions.

Every condition kind has exactly one evaluator, registered in a single
dispatch table keyed by model class. Evaluation is total: missing
stats, flags, NPCs or history resolve to False, and an unregistered or
malformed condition logs a warning and evaluates to False.
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import TYPE_CHECKING, Callable

from ..state.conditions import (
    AndCondition,
    EmotionalCondition,
    EventHistoryCondition,
    FlagCondition,
    NPCRelationCondition,
    NotCondition,
    OrCondition,
    StatCondition,
    StatEqualCondition,
    ThreadActiveCondition,
)

if TYPE_CHECKING:
    from ..state.conditions import BranchCondition
    from ..state.schema import GameState, NarrativeContext

logger = logging.getLogger(__name__)

# Engine-level numerics a stat condition may also refer to
STATE_NUMERICS = ("hunt_stage", "hunt_progress", "months", "turn")


# ─── Lookups ────────────────────────────────────────────────

def stat_value(state: "GameState", name: str) -> float | None:
    """
    Numeric value for a stat condition.

    Looks in the stat block first, then at the engine numerics.
    Returns None for unknown or non-numeric stats.
    """
    value = state.stats.get(name)
    if value is None and name in STATE_NUMERICS:
        value = getattr(state, name)
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return value


def flag_value(state: "GameState", context: "NarrativeContext", name: str) -> bool:
    """Truthiness of a flag. Narrative flags shadow game flags; missing is False."""
    if name in context.narrative_flags:
        return bool(context.narrative_flags[name])
    return bool(state.flags.get(name, False))


# ─── Evaluators ─────────────────────────────────────────────

def _eval_stat(cond: StatCondition, state: "GameState", context: "NarrativeContext") -> bool:
    value = stat_value(state, cond.stat)
    if value is None:
        return False
    if cond.min is not None and value < cond.min:
        return False
    if cond.max is not None and value > cond.max:
        return False
    return True


def _eval_stat_equal(cond: StatEqualCondition, state: "GameState", context: "NarrativeContext") -> bool:
    value = stat_value(state, cond.stat)
    return value is not None and value == cond.value


def _eval_flag(cond: FlagCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return flag_value(state, context, cond.flag) == cond.value


def _eval_emotional(cond: EmotionalCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return state.stats.emotional_state == cond.state


def _eval_npc_relation(cond: NPCRelationCondition, state: "GameState", context: "NarrativeContext") -> bool:
    relationship = context.npc_relationships.get(cond.npc_id)
    if relationship is None:
        return False
    if cond.min_trust is not None and relationship.trust_level < cond.min_trust:
        return False
    if cond.attitude is not None and relationship.attitude != cond.attitude:
        return False
    return True


def _eval_event_history(cond: EventHistoryCondition, state: "GameState", context: "NarrativeContext") -> bool:
    for entry in state.history:
        if entry.scenario_id != cond.scenario_id:
            continue
        if cond.choice_id is None or entry.choice_id == cond.choice_id:
            return True
    return False


def _eval_thread_active(cond: ThreadActiveCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return cond.thread_id in context.active_threads


def _eval_and(cond: AndCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return all(evaluate(c, state, context) for c in cond.conditions)


def _eval_or(cond: OrCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return any(evaluate(c, state, context) for c in cond.conditions)


def _eval_not(cond: NotCondition, state: "GameState", context: "NarrativeContext") -> bool:
    return not evaluate(cond.condition, state, context)


EVALUATORS: dict[type, Callable[..., bool]] = {
    StatCondition: _eval_stat,
    StatEqualCondition: _eval_stat_equal,
    FlagCondition: _eval_flag,
    EmotionalCondition: _eval_emotional,
    NPCRelationCondition: _eval_npc_relation,
    EventHistoryCondition: _eval_event_history,
    ThreadActiveCondition: _eval_thread_active,
    AndCondition: _eval_and,
    OrCondition: _eval_or,
    NotCondition: _eval_not,
}


# ─── Public API ─────────────────────────────────────────────

def evaluate(
    condition: "BranchCondition",
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> bool:
    """
    Evaluate a condition tree against state.

    Args:
        condition: Any BranchCondition
        state: Current game state (read-only)
        context: Narrative context; defaults to state.narrative

    Returns:
        True if the condition holds, False otherwise (never raises)
    """
    if context is None:
        context = state.narrative

    handler = EVALUATORS.get(type(condition))
    if handler is None:
        logger.warning(f"No evaluator for condition type {type(condition).__name__}")
        return False

    try:
        return bool(handler(condition, state, context))
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Condition {condition!r} could not be evaluated: {e}")
        return False


def evaluate_all(
    conditions: list["BranchCondition"],
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> bool:
    """AND a list of conditions. An empty list holds."""
    return all(evaluate(c, state, context) for c in conditions)


def explain_failure(
    condition: "BranchCondition",
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> str:
    """Human-readable reason a condition does not hold. Debug aid only."""
    if context is None:
        context = state.narrative

    if evaluate(condition, state, context):
        return "condition holds"

    if isinstance(condition, StatCondition):
        value = stat_value(state, condition.stat)
        if value is None:
            return f"stat '{condition.stat}' is unknown"
        bounds = []
        if condition.min is not None:
            bounds.append(f">= {condition.min}")
        if condition.max is not None:
            bounds.append(f"<= {condition.max}")
        return f"stat '{condition.stat}' is {value}, needs {' and '.join(bounds)}"

    if isinstance(condition, StatEqualCondition):
        return f"stat '{condition.stat}' is {stat_value(state, condition.stat)}, needs {condition.value}"

    if isinstance(condition, FlagCondition):
        return f"flag '{condition.flag}' is not {condition.value}"

    if isinstance(condition, EmotionalCondition):
        return f"emotional state is {state.stats.emotional_state.value}, needs {condition.state.value}"

    if isinstance(condition, NPCRelationCondition):
        relationship = context.npc_relationships.get(condition.npc_id)
        if relationship is None:
            return f"no relationship with '{condition.npc_id}'"
        return (
            f"'{condition.npc_id}' trust {relationship.trust_level} "
            f"({relationship.attitude.value}) does not meet requirement"
        )

    if isinstance(condition, EventHistoryCondition):
        if condition.choice_id:
            return f"scenario '{condition.scenario_id}' not completed with choice '{condition.choice_id}'"
        return f"scenario '{condition.scenario_id}' not completed"

    if isinstance(condition, ThreadActiveCondition):
        return f"thread '{condition.thread_id}' is not active"

    if isinstance(condition, AndCondition):
        failed = [
            explain_failure(c, state, context)
            for c in condition.conditions
            if not evaluate(c, state, context)
        ]
        return "AND failed: " + "; ".join(failed)

    if isinstance(condition, OrCondition):
        if not condition.conditions:
            return "OR has no alternatives"
        return "OR failed: no alternative holds"

    if isinstance(condition, NotCondition):
        return "NOT failed: inner condition holds"

    return f"unsupported condition type {type(condition).__name__}"
