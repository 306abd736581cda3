"""
Achievement engine.

Achievements are declared as data: an id, display metadata and a
predicate over GameState. The engine evaluates every definition that
is not yet unlocked and stamps new unlocks with the current month.
Unlocks are never revoked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from ..state.base import AchievementCategory, AchievementTier
from ..state.schema import TECH_SKILLS, AchievementRecord

if TYPE_CHECKING:
    from ..state.schema import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDefinition:
    """A registry entry: display metadata plus the unlock predicate."""
    id: str
    name: str
    description: str
    icon: str
    tier: AchievementTier
    category: AchievementCategory
    check: Callable[["GameState"], bool]
    hidden: bool = False

    def to_record(self, month: float) -> AchievementRecord:
        return AchievementRecord(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            tier=self.tier,
            category=self.category,
            unlocked=True,
            unlocked_at=month,
            hidden=self.hidden,
        )


def _count_flag(state: "GameState", name: str) -> float:
    """Numeric value of a counter flag; missing or boolean reads as 0."""
    value = state.flags.get(name, 0)
    if isinstance(value, bool):
        return 0
    return value


# ─── Registry ───────────────────────────────────────────────

PIPELINE = AchievementCategory.PIPELINE
SKILL = AchievementCategory.SKILL
BEHAVIORAL = AchievementCategory.BEHAVIORAL
OUTCOME = AchievementCategory.OUTCOME
SECRET = AchievementCategory.SECRET

DEFAULT_ACHIEVEMENTS: list[AchievementDefinition] = [
    # Pipeline
    AchievementDefinition(
        "first_contact", "First Contact", "Reach Stage 1: GATED",
        "🚪", AchievementTier.BRONZE, PIPELINE,
        lambda s: s.hunt_stage >= 1,
    ),
    AchievementDefinition(
        "speed_runner", "Speed Runner", "Get hired in under 4 months",
        "⚡", AchievementTier.GOLD, PIPELINE,
        lambda s: s.is_hired and s.months < 4,
    ),
    AchievementDefinition(
        "methodical_climber", "Methodical Climber", "Reach Stage 4 sequentially",
        "🧗", AchievementTier.SILVER, PIPELINE,
        lambda s: s.hunt_stage >= 4 and not s.flags.get("stage_skipped"),
    ),
    AchievementDefinition(
        "pipeline_master", "Pipeline Master", "Reach Stage 4 in under 6 months",
        "🎯", AchievementTier.GOLD, PIPELINE,
        lambda s: s.hunt_stage >= 4 and s.months < 6,
    ),

    # Skills
    AchievementDefinition(
        "sql_wizard", "SQL Wizard", "Reach SQL skill level 80+",
        "🔮", AchievementTier.GOLD, SKILL,
        lambda s: s.stats.sql >= 80,
    ),
    AchievementDefinition(
        "python_master", "Python Master", "Reach Python skill level 80+",
        "🐍", AchievementTier.GOLD, SKILL,
        lambda s: s.stats.python >= 80,
    ),
    AchievementDefinition(
        "full_stack", "Full Stack", "All technical skills above 40",
        "📚", AchievementTier.SILVER, SKILL,
        lambda s: all(getattr(s.stats, skill) >= 40 for skill in TECH_SKILLS),
    ),
    AchievementDefinition(
        "communication_master", "Communication Master", "Communication + Stakeholder mgmt > 140",
        "🗣️", AchievementTier.SILVER, SKILL,
        lambda s: s.stats.communication + s.stats.stakeholder_mgmt >= 140,
    ),

    # Behavioral
    AchievementDefinition(
        "zen_master", "Zen Master", "Complete 10 scenarios in a row with stress < 30%",
        "🧘", AchievementTier.SILVER, BEHAVIORAL,
        lambda s: s.counters.low_stress_streak >= 10,
    ),
    AchievementDefinition(
        "grinder", "The Grinder", "Complete 30+ scenarios",
        "💪", AchievementTier.BRONZE, BEHAVIORAL,
        lambda s: len(s.history) >= 30,
    ),
    AchievementDefinition(
        "momentum_master", "Momentum Master", "Trigger momentum bonus 5 times",
        "🔥", AchievementTier.SILVER, BEHAVIORAL,
        lambda s: s.counters.momentum_triggers >= 5,
    ),
    AchievementDefinition(
        "energy_efficient", "Energy Efficient", "Complete 5 scenarios in a row with >70% energy",
        "⚡", AchievementTier.BRONZE, BEHAVIORAL,
        lambda s: s.counters.high_energy_streak >= 5,
    ),
    AchievementDefinition(
        "networker", "Master Networker", "Reach network level 80+",
        "🤝", AchievementTier.GOLD, BEHAVIORAL,
        lambda s: s.stats.network >= 80,
    ),

    # Outcomes
    AchievementDefinition(
        "startup_warrior", "Startup Warrior", "Accept the startup gamble",
        "🚀", AchievementTier.GOLD, OUTCOME,
        lambda s: bool(s.flags.get("has_job_startup")),
    ),
    AchievementDefinition(
        "negotiator", "Master Negotiator", "Increase starting salary by 30%+",
        "💰", AchievementTier.GOLD, OUTCOME,
        lambda s: _count_flag(s, "salary_boost") >= 30,
    ),
    AchievementDefinition(
        "portfolio_pro", "Portfolio Pro", "Complete portfolio before Stage 2",
        "📁", AchievementTier.SILVER, OUTCOME,
        lambda s: bool(s.flags.get("portfolio_done")) and s.hunt_stage >= 2,
    ),
    AchievementDefinition(
        "first_job", "First Job", "Land your first job offer",
        "🎉", AchievementTier.BRONZE, OUTCOME,
        lambda s: s.is_hired,
    ),

    # Secret
    AchievementDefinition(
        "phoenix_rising", "Phoenix Rising", "Recover from 80%+ stress",
        "🔥", AchievementTier.PLATINUM, SECRET,
        lambda s: s.counters.stress_recovered,
        hidden=True,
    ),
    AchievementDefinition(
        "debt_warrior", "Debt Warrior", "Get hired while in debt",
        "⚔️", AchievementTier.PLATINUM, SECRET,
        lambda s: s.is_hired and s.stats.savings < 0,
        hidden=True,
    ),
    AchievementDefinition(
        "comeback_kid", "Comeback Kid", "Get hired after 5+ rejections",
        "💪", AchievementTier.PLATINUM, SECRET,
        lambda s: s.is_hired and _count_flag(s, "rejection_count") >= 5,
        hidden=True,
    ),
    AchievementDefinition(
        "unstoppable", "Unstoppable", "Complete 50+ scenarios",
        "🏆", AchievementTier.PLATINUM, SECRET,
        lambda s: len(s.history) >= 50,
        hidden=True,
    ),
]


# ─── Engine ─────────────────────────────────────────────────

def check_achievements(
    state: "GameState",
    registry: list[AchievementDefinition] | None = None,
) -> tuple[list[AchievementRecord], "GameState"]:
    """
    Unlock every achievement whose predicate now holds.

    Already-unlocked entries are skipped, so records are never
    overwritten or revoked. A predicate that raises is logged and
    treated as not satisfied.

    Args:
        state: Current state (not mutated)
        registry: Definitions to check; defaults to DEFAULT_ACHIEVEMENTS

    Returns:
        (newly_unlocked, new_state)
    """
    if registry is None:
        registry = DEFAULT_ACHIEVEMENTS

    new_state = state.model_copy(deep=True)
    unlocked: list[AchievementRecord] = []

    for definition in registry:
        existing = new_state.achievements.get(definition.id)
        if existing is not None and existing.unlocked:
            continue

        try:
            satisfied = definition.check(state)
        except Exception as e:
            logger.warning(f"Achievement '{definition.id}' predicate failed: {e}")
            continue

        if satisfied:
            record = definition.to_record(state.months)
            new_state.achievements[definition.id] = record
            new_state.achievement_count += 1
            unlocked.append(record)
            logger.info(f"Achievement unlocked: {definition.name}")

    return unlocked, new_state


def visible_achievements(
    state: "GameState",
    registry: list[AchievementDefinition] | None = None,
) -> list[AchievementDefinition]:
    """Definitions to display: everything except hidden ones not yet unlocked."""
    if registry is None:
        registry = DEFAULT_ACHIEVEMENTS
    return [
        d for d in registry
        if not d.hidden or d.id in state.achievements
    ]


def achievement_progress(
    state: "GameState",
    registry: list[AchievementDefinition] | None = None,
) -> tuple[int, int]:
    """(unlocked, total) for the registry."""
    if registry is None:
        registry = DEFAULT_ACHIEVEMENTS
    unlocked = sum(1 for d in registry if d.id in state.achievements)
    return unlocked, len(registry)
