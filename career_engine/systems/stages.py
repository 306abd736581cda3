"""
Stage advance rules.

Some pipeline stages open on merit rather than accumulated progress:
a visible portfolio gets you past the gate, and confidence or a strong
interview gets you to the offer. Each rule is a condition tree over
state, evaluated after the reducer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..rules.conditions import evaluate
from ..rules.effects import stage_name
from ..rules.notices import Notice
from ..state.conditions import FlagCondition, OrCondition, StatCondition

if TYPE_CHECKING:
    from ..state.conditions import BranchCondition
    from ..state.schema import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageRule:
    from_stage: int
    to_stage: int
    condition: "BranchCondition"
    message: str


STAGE_RULES: list[StageRule] = [
    StageRule(
        from_stage=1,
        to_stage=2,
        condition=OrCondition(conditions=[
            StatCondition(stat="reputation", min=20),
            FlagCondition(flag="portfolio_done", value=True),
        ]),
        message="Market visibility increased. Outreach unlocked.",
    ),
    StageRule(
        from_stage=4,
        to_stage=5,
        condition=OrCondition(conditions=[
            StatCondition(stat="confidence", min=60),
            StatCondition(stat="interview_performance", min=50),
        ]),
        message="Final rounds approaching. Negotiation ready.",
    ),
]


def check_stage_advance(
    state: "GameState",
    rules: list[StageRule] | None = None,
) -> tuple["GameState", Notice] | None:
    """
    Advance the pipeline stage if a rule for the current stage holds.

    Accumulated progress carries over. At most one rule fires.

    Returns:
        (new_state, notice), or None if nothing changed
    """
    if rules is None:
        rules = STAGE_RULES

    for rule in rules:
        if rule.from_stage != state.hunt_stage:
            continue
        if not evaluate(rule.condition, state):
            continue

        new_state = state.model_copy(deep=True)
        new_state.hunt_stage = rule.to_stage
        logger.info(f"Stage advanced {rule.from_stage} -> {rule.to_stage}")
        return new_state, Notice(
            headline=f"Stage Advanced: {stage_name(rule.to_stage)}",
            details=[rule.message],
        )

    return None
