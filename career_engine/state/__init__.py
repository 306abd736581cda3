"""State models and storage for career engine sessions."""

from .base import (
    AchievementCategory,
    AchievementTier,
    Difficulty,
    EmotionalState,
    NPCAttitude,
    Role,
    ScenarioPhase,
)
from .conditions import (
    AndCondition,
    BranchCondition,
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
from .schema import (
    AchievementRecord,
    Choice,
    GameState,
    HistoryEntry,
    NarrativeContext,
    NarrativeThread,
    NPCRelationship,
    Scenario,
    ScenarioBranch,
    StatBlock,
    ThreadChapter,
    ThreadEnding,
    new_game_state,
)
from .store import GameStateStore, JsonGameStore, MemoryGameStore

__all__ = [
    # Enums
    "AchievementCategory",
    "AchievementTier",
    "Difficulty",
    "EmotionalState",
    "NPCAttitude",
    "Role",
    "ScenarioPhase",
    # Conditions
    "AndCondition",
    "BranchCondition",
    "EmotionalCondition",
    "EventHistoryCondition",
    "FlagCondition",
    "NPCRelationCondition",
    "NotCondition",
    "OrCondition",
    "StatCondition",
    "StatEqualCondition",
    "ThreadActiveCondition",
    # Schema
    "AchievementRecord",
    "Choice",
    "GameState",
    "HistoryEntry",
    "NarrativeContext",
    "NarrativeThread",
    "NPCRelationship",
    "Scenario",
    "ScenarioBranch",
    "StatBlock",
    "ThreadChapter",
    "ThreadEnding",
    "new_game_state",
    # Store
    "GameStateStore",
    "JsonGameStore",
    "MemoryGameStore",
]
