"""
Engine systems: selection, branching, storylines, stages and turns.

Systems compose the pure rules into the per-turn control flow.
"""

from .branches import EffectiveContent, explain_branch_failure, resolve, resolve_branch
from .selector import SelectionUpdate, describe_candidates, pick_next
from .stages import STAGE_RULES, StageRule, check_stage_advance
from .threads import (
    ThreadDecision,
    ThreadOutcome,
    complete_chapter,
    find_triggered_threads,
    next_chapter,
    plan_next,
    start_thread,
)
from .turns import (
    Offer,
    OfferSource,
    StaleStateError,
    TurnError,
    TurnInProgressError,
    TurnOrchestrator,
    TurnPhase,
    TurnResult,
    UnknownChoiceError,
    UnknownScenarioError,
)

__all__ = [
    # Branches
    "EffectiveContent",
    "explain_branch_failure",
    "resolve",
    "resolve_branch",
    # Selector
    "SelectionUpdate",
    "describe_candidates",
    "pick_next",
    # Stages
    "STAGE_RULES",
    "StageRule",
    "check_stage_advance",
    # Threads
    "ThreadDecision",
    "ThreadOutcome",
    "complete_chapter",
    "find_triggered_threads",
    "next_chapter",
    "plan_next",
    "start_thread",
    # Turns
    "Offer",
    "OfferSource",
    "StaleStateError",
    "TurnError",
    "TurnInProgressError",
    "TurnOrchestrator",
    "TurnPhase",
    "TurnResult",
    "UnknownChoiceError",
    "UnknownScenarioError",
]
