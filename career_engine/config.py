"""
Tuning configuration for the career engine.

Every product-tuning constant the engine consults lives here under a
name. Callers may pass a partial override dict to any engine entry point,
or load one from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)


class Tuning(TypedDict, total=False):
    """Engine tuning constants."""
    # Momentum
    momentum_threshold: int  # Base progress that counts toward the streak
    momentum_streak: int  # Consecutive qualifying turns to activate momentum
    momentum_boost: float  # Progress multiplier while momentum is active

    # Pipeline
    max_stage: int
    progress_per_stage: int

    # Selection
    selection_phase: str  # Only scenarios in this phase are drawn
    base_weight: int
    band_match_bonus: int
    too_easy_weight: int  # Beginner content once the player is in the advanced band
    default_cooldown: int
    recent_ids_capacity: int
    recent_tags_capacity: int

    # Reducer
    skill_bonus_min: int
    skill_bonus_max: int
    stat_ceiling: float  # Ceiling for behavioral attributes

    # Achievement cadence
    achievement_progress_milestone: int
    achievement_stat_swing: float
    achievement_turn_interval: int

    # Behavioral counters
    low_stress_threshold: float
    high_energy_threshold: float
    stress_peak_threshold: float
    stress_recovery_threshold: float


DEFAULT_TUNING: Tuning = {
    "momentum_threshold": 8,
    "momentum_streak": 3,
    "momentum_boost": 1.25,
    "max_stage": 5,
    "progress_per_stage": 100,
    "selection_phase": "hunt",
    "base_weight": 10,
    "band_match_bonus": 10,
    "too_easy_weight": 1,
    "default_cooldown": 3,
    "recent_ids_capacity": 6,
    "recent_tags_capacity": 3,
    "skill_bonus_min": 5,
    "skill_bonus_max": 15,
    "stat_ceiling": 200,
    "achievement_progress_milestone": 25,
    "achievement_stat_swing": 10,
    "achievement_turn_interval": 5,
    "low_stress_threshold": 0.3,
    "high_energy_threshold": 0.7,
    "stress_peak_threshold": 0.8,
    "stress_recovery_threshold": 0.5,
}


def resolve_tuning(overrides: Tuning | dict | None = None) -> Tuning:
    """Merge a partial override dict over the defaults."""
    tuning = DEFAULT_TUNING.copy()
    if overrides:
        tuning.update(overrides)
    return tuning


def load_tuning(path: Path | str | None) -> Tuning:
    """Load tuning overrides from a JSON file, or return defaults if not found."""
    if path is None:
        return DEFAULT_TUNING.copy()

    path = Path(path)
    if not path.exists():
        return DEFAULT_TUNING.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Could not read tuning file {path}: {e}")
        return DEFAULT_TUNING.copy()

    unknown = set(saved) - set(DEFAULT_TUNING)
    if unknown:
        logger.warning(f"Ignoring unknown tuning keys: {sorted(unknown)}")
        saved = {k: v for k, v in saved.items() if k in DEFAULT_TUNING}
    return resolve_tuning(saved)


def save_tuning(tuning: Tuning, path: Path | str) -> bool:
    """Save tuning to a JSON file. Returns True on success."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(tuning, f, indent=2)
        return True
    except IOError as e:
        logger.warning(f"Could not write tuning file {path}: {e}")
        return False
