"""
Branch resolver.

Given a scenario and the current state, picks the narrative variant
to render. Branches are tried in authored order; the first whose
conditions all hold wins. Fields the branch leaves empty fall back to
the base scenario. Resolution is side-effect free and repeatable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..rules.conditions import evaluate, evaluate_all, explain_failure

if TYPE_CHECKING:
    from ..state.schema import (
        Choice,
        GameState,
        NarrativeContext,
        Scenario,
        ScenarioBranch,
    )

logger = logging.getLogger(__name__)


@dataclass
class EffectiveContent:
    """What the presentation layer renders for a scenario."""
    scenario_id: str
    title: str
    text: str
    choices: list["Choice"] = field(default_factory=list)
    npc_message: str | None = None
    branch_id: str | None = None  # None when the base content is shown

    @property
    def is_variant(self) -> bool:
        return self.branch_id is not None

    def get_choice(self, choice_id: str) -> "Choice | None":
        return next((c for c in self.choices if c.id == choice_id), None)


def resolve_branch(
    scenario: "Scenario",
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> "ScenarioBranch | None":
    """
    First branch whose conditions all hold, or None.

    Branches listed in the context's locked_branches are skipped.
    """
    if context is None:
        context = state.narrative

    for branch in scenario.branches:
        if branch.id in context.locked_branches:
            continue
        if evaluate_all(branch.conditions, state, context):
            logger.debug(f"Scenario {scenario.id} resolved to branch {branch.id}")
            return branch
    return None


def resolve(
    scenario: "Scenario",
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> EffectiveContent:
    """
    Effective content for a scenario.

    Args:
        scenario: Scenario to render
        state: Current state (read-only)
        context: Narrative context; defaults to state.narrative

    Returns:
        EffectiveContent with branch overrides applied
    """
    branch = resolve_branch(scenario, state, context)
    if branch is None:
        return EffectiveContent(
            scenario_id=scenario.id,
            title=scenario.title,
            text=scenario.text,
            choices=list(scenario.choices),
        )

    return EffectiveContent(
        scenario_id=scenario.id,
        title=branch.variant_title or scenario.title,
        text=branch.variant_text or scenario.text,
        choices=list(branch.variant_choices or scenario.choices),
        npc_message=branch.npc_message,
        branch_id=branch.id,
    )


def explain_branch_failure(
    branch: "ScenarioBranch",
    state: "GameState",
    context: "NarrativeContext | None" = None,
) -> list[str]:
    """Reasons each failing condition of a branch does not hold."""
    if context is None:
        context = state.narrative
    if branch.id in context.locked_branches:
        return [f"branch '{branch.id}' is locked"]
    return [
        explain_failure(c, state, context)
        for c in branch.conditions
        if not evaluate(c, state, context)
    ]
