"""
Game rules as pure functions.

Separates logic from data models for easier testing.
"""

from .achievements import (
    AchievementDefinition,
    DEFAULT_ACHIEVEMENTS,
    check_achievements,
)
from .conditions import evaluate, evaluate_all, explain_failure
from .effects import apply_choice, clamp_stat
from .notices import Notice, NoticeSeverity
from .npc import (
    apply_npc_interactions,
    get_or_create_relationship,
    update_trust,
)
from .rng import Mulberry32, fnv1a_32, rng_for

__all__ = [
    # Achievements
    "AchievementDefinition",
    "DEFAULT_ACHIEVEMENTS",
    "check_achievements",
    # Conditions
    "evaluate",
    "evaluate_all",
    "explain_failure",
    # Effects
    "apply_choice",
    "clamp_stat",
    "Notice",
    "NoticeSeverity",
    # NPCs
    "apply_npc_interactions",
    "get_or_create_relationship",
    "update_trust",
    # Randomness
    "Mulberry32",
    "fnv1a_32",
    "rng_for",
]
