"""
Shared enums and the base model for authored content.

Authored scenario and thread files use camelCase keys; saves use the
snake_case field names. ContentModel accepts both.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContentModel(BaseModel):
    """Base for models that are loaded from authored JSON content."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Role(str, Enum):
    ANALYST = "analyst"
    ENGINEER = "engineer"
    AI_ENGINEER = "ai_engineer"
    FULLSTACK = "fullstack"


class ScenarioPhase(str, Enum):
    SETUP = "setup"
    HUNT = "hunt"
    GAME = "game"
    ROADMAP = "roadmap"
    END = "end"
    THREAD = "thread"  # Storyline chapters, never drawn by the selector


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EmotionalState(str, Enum):
    CALM = "calm"
    ANXIOUS = "anxious"
    CONFIDENT = "confident"
    DEFLATED = "deflated"
    NUMB = "numb"


class NPCAttitude(str, Enum):
    HOSTILE = "hostile"
    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    MENTOR = "mentor"


class AchievementTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class AchievementCategory(str, Enum):
    PIPELINE = "pipeline"
    SKILL = "skill"
    BEHAVIORAL = "behavioral"
    OUTCOME = "outcome"
    SECRET = "secret"
