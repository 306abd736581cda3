"""
Pydantic models for career engine state and authored content.

GameState is the single mutable aggregate of a session; every engine
operation takes one and returns a new one. Scenario, Choice and
NarrativeThread are authored content and never change at runtime.
"""

from uuid import uuid4

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_snake

from .base import (
    AchievementCategory,
    AchievementTier,
    ContentModel,
    Difficulty,
    EmotionalState,
    NPCAttitude,
    Role,
    ScenarioPhase,
)
from .conditions import BranchCondition


def generate_id() -> str:
    return str(uuid4())[:8]


# -----------------------------------------------------------------------------
# Stats
# -----------------------------------------------------------------------------

# Percentage stats, kept in [0, 1]
UNIT_STATS = frozenset({"energy", "stress"})

# Behavioral attributes, kept in [0, stat_ceiling]
BEHAVIORAL_STATS = frozenset({
    "confidence",
    "grit",
    "aggression",
    "stability",
    "learning_speed",
    "startup_bias",
    "burnout_risk",
})

# Savings is the only stat allowed below zero (debt)
SIGNED_STATS = frozenset({"savings"})

FINANCIAL_STATS = frozenset({"savings", "salary", "burn_rate_per_month"})

TECH_SKILLS = ("sql", "python", "excel", "powerbi", "cloud", "ml")


class StatBlock(ContentModel):
    """Named numeric stats plus the categorical emotional state."""
    # Technical skills
    sql: float = 10
    python: float = 10
    excel: float = 10
    powerbi: float = 0
    cloud: float = 0
    ml: float = 0

    # Soft skills
    communication: float = 10
    leadership: float = 0
    problem_solving: float = 10
    stakeholder_mgmt: float = 0

    # Finances
    savings: float = 15000
    salary: float = 0
    burn_rate_per_month: float = 2000

    # Wellbeing
    energy: float = 1.0
    stress: float = 0.0
    network: float = 0

    # Behavioral
    confidence: float = 50
    grit: float = 10
    aggression: float = 10
    stability: float = 10
    learning_speed: float = 50
    startup_bias: float = 10
    burnout_risk: float = 0
    interview_performance: float = 0

    # Hidden
    reputation: float = 0
    ethics: float = 50
    strategy: float = 0
    intelligence: float = 50

    emotional_state: EmotionalState = EmotionalState.CALM

    def get(self, name: str) -> float | None:
        """Numeric value of a stat by (possibly camelCase) name, or None."""
        field_name = resolve_stat_name(name)
        if field_name is None:
            return None
        return getattr(self, field_name)


NUMERIC_STATS: tuple[str, ...] = tuple(
    name for name in StatBlock.model_fields if name != "emotional_state"
)


def resolve_stat_name(name: str) -> str | None:
    """
    Map an authored stat name to its StatBlock field.

    Accepts snake_case or camelCase ("learningSpeed"). Returns None for
    anything that isn't a numeric stat.
    """
    if name in NUMERIC_STATS:
        return name
    snake = to_snake(name)
    if snake in NUMERIC_STATS:
        return snake
    return None


# -----------------------------------------------------------------------------
# NPCs
# -----------------------------------------------------------------------------

class NPCInteraction(ContentModel):
    """Relationship change caused by picking a choice."""
    npc_id: str
    trust_delta: int = 0
    attitude_shift: NPCAttitude | None = None
    memory: str | None = None


class NPCRelationship(BaseModel):
    npc_id: str
    trust_level: int = 25  # 0-100, starts at the bottom of the neutral band
    attitude: NPCAttitude = NPCAttitude.NEUTRAL
    shared_history: list[str] = Field(default_factory=list)  # Scenario ids
    memories: list[str] = Field(default_factory=list)
    last_interaction: float | None = None  # Month of last interaction


# -----------------------------------------------------------------------------
# Content: choices and scenarios
# -----------------------------------------------------------------------------

class Choice(ContentModel):
    """One option of a scenario and the effects of picking it."""
    id: str
    text: str
    description: str = ""
    fx: dict[str, float] = Field(default_factory=dict)  # Stat deltas
    skill_bonus: str | None = None  # Stat receiving a randomized bonus
    flag: str | None = None  # Flag set to true
    set_role: Role | None = None
    set_emotion: EmotionalState | None = None
    time_cost: float = 0  # Months
    energy_cost: float | None = None  # Percent points, e.g. 10 = 10%
    hunt_stage: int | None = None  # Explicit stage jump
    hunt_progress: float | None = None
    npc_interactions: list[NPCInteraction] = Field(default_factory=list)


class StageGates(ContentModel):
    stage_min: int | None = None
    stage_max: int | None = None


class ScenarioBranch(ContentModel):
    """
    Conditional variant of a scenario.

    All conditions must hold. Any variant field left empty falls back
    to the base scenario.
    """
    id: str
    conditions: list[BranchCondition] = Field(default_factory=list)
    variant_title: str | None = None
    variant_text: str | None = None
    variant_choices: list[Choice] | None = None
    npc_message: str | None = None


class Scenario(ContentModel):
    id: str
    phase: ScenarioPhase = ScenarioPhase.HUNT
    title: str
    text: str
    choices: list[Choice] = Field(default_factory=list)
    difficulty: Difficulty | None = None
    tags: list[str] = Field(default_factory=list)
    role_lock: list[Role] | None = None
    min_req: dict[str, float] = Field(default_factory=dict)
    gates: StageGates | None = None
    cooldown: int | None = None
    branches: list[ScenarioBranch] = Field(default_factory=list)
    primary_npc: str | None = None
    thread_id: str | None = None

    def get_choice(self, choice_id: str) -> Choice | None:
        """Find a choice by id, searching branch variants too."""
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        for branch in self.branches:
            for choice in branch.variant_choices or []:
                if choice.id == choice_id:
                    return choice
        return None


# -----------------------------------------------------------------------------
# Content: narrative threads
# -----------------------------------------------------------------------------

class NPCEffect(ContentModel):
    """Trust delta and optional attitude applied when a chapter completes."""
    npc_id: str
    trust: int = 0
    attitude: NPCAttitude | None = None


class ChapterEffects(ContentModel):
    global_flag: str | None = None
    global_flags: dict[str, bool] = Field(default_factory=dict)
    npc_effect: list[NPCEffect] = Field(default_factory=list)


class ThreadChapter(ContentModel):
    order: int
    scenario_id: str
    title: str = ""
    trigger_conditions: list[BranchCondition] = Field(default_factory=list)
    on_complete: ChapterEffects | None = None


class NPCRelationUpdate(ContentModel):
    """Absolute relationship values set by an ending."""
    npc_id: str
    trust: int | None = None  # Absolute trust level
    attitude: NPCAttitude | None = None


class EndingRewards(ContentModel):
    global_flags: dict[str, bool] = Field(default_factory=dict)
    stat_bonuses: dict[str, float] = Field(default_factory=dict)
    npc_relation_updates: list[NPCRelationUpdate] = Field(default_factory=list)


class ThreadEnding(ContentModel):
    id: str
    title: str
    description: str = ""
    condition: list[BranchCondition] = Field(default_factory=list)
    rewards: EndingRewards | None = None


class NarrativeThread(ContentModel):
    """Multi-chapter storyline spanning several scenarios."""
    id: str
    name: str
    description: str = ""
    start_scenario: str | None = None
    start_conditions: list[BranchCondition] = Field(default_factory=list)
    chapters: list[ThreadChapter] = Field(default_factory=list)
    endings: list[ThreadEnding] = Field(default_factory=list)
    primary_npc: str | None = None


class CompletedThread(BaseModel):
    thread_id: str
    ending_id: str | None = None
    completed_at: float = 0  # Month


class NarrativeContext(BaseModel):
    """Narrative bookkeeping owned by the game state."""
    active_threads: list[str] = Field(default_factory=list)  # First is primary
    completed_threads: list[CompletedThread] = Field(default_factory=list)
    npc_relationships: dict[str, NPCRelationship] = Field(default_factory=dict)
    narrative_flags: dict[str, bool] = Field(default_factory=dict)
    locked_branches: list[str] = Field(default_factory=list)

    def is_thread_completed(self, thread_id: str) -> bool:
        return any(t.thread_id == thread_id for t in self.completed_threads)


# -----------------------------------------------------------------------------
# Achievements
# -----------------------------------------------------------------------------

class AchievementRecord(BaseModel):
    """Immutable unlock record. Never revoked once written."""
    id: str
    name: str
    description: str
    icon: str = ""
    tier: AchievementTier
    category: AchievementCategory
    unlocked: bool = True
    unlocked_at: float  # Month of unlock
    hidden: bool = False


# -----------------------------------------------------------------------------
# Game state
# -----------------------------------------------------------------------------

class HistoryEntry(BaseModel):
    scenario_id: str
    choice_id: str
    month: float = 0
    turn: int = 0


class BehaviorCounters(BaseModel):
    """Counters read only by achievement predicates."""
    low_stress_streak: int = 0  # Consecutive turns with low stress
    high_energy_streak: int = 0  # Consecutive turns with high energy
    momentum_triggers: int = 0  # Times momentum switched on
    stress_peaked: bool = False  # Stress reached the peak threshold
    stress_recovered: bool = False  # Stress fell back after peaking


class GameState(BaseModel):
    """
    Complete session state.

    Created once per session with new_game_state() and replaced, never
    mutated, by engine operations.
    """
    session_id: str = Field(default_factory=generate_id)
    character_name: str = "Player"
    role: Role | None = None
    months: float = 0
    turn: int = 0

    # Job-hunt pipeline
    hunt_stage: int = 0
    hunt_progress: float = 0

    stats: StatBlock = Field(default_factory=StatBlock)
    flags: dict[str, bool | int | float] = Field(default_factory=dict)
    history: list[HistoryEntry] = Field(default_factory=list)
    current_scenario_id: str | None = None

    # Selection windows
    recent_scenario_ids: list[str] = Field(default_factory=list)  # FIFO, oldest first
    recent_tags: list[str] = Field(default_factory=list)  # Newest first
    cooldowns: dict[str, int] = Field(default_factory=dict)

    # Momentum
    momentum_counter: int = 0
    momentum_active: bool = False

    counters: BehaviorCounters = Field(default_factory=BehaviorCounters)
    achievements: dict[str, AchievementRecord] = Field(default_factory=dict)
    achievement_count: int = 0

    narrative: NarrativeContext = Field(default_factory=NarrativeContext)

    def has_completed(self, scenario_id: str) -> bool:
        return any(entry.scenario_id == scenario_id for entry in self.history)

    @property
    def is_hired(self) -> bool:
        return bool(self.flags.get("has_job")) or bool(self.flags.get("has_job_startup"))


def new_game_state(
    character_name: str = "Player",
    role: Role | str | None = None,
    **stat_overrides: float,
) -> GameState:
    """
    Create a fresh session state with default stats.

    Args:
        character_name: Player name (also part of the selection seed)
        role: Starting role, if already chosen
        **stat_overrides: Starting stat values, e.g. savings=25000

    Returns:
        New GameState sharing nothing with any other session
    """
    return GameState(
        character_name=character_name,
        role=Role(role) if role is not None else None,
        stats=StatBlock(**stat_overrides),
    )
