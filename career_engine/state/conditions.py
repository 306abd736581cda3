"""
Branch condition models.

A closed union of condition kinds, discriminated on ``type``. Composite
kinds (AND, OR, NOT) nest other conditions, so conditions form trees.
Evaluation lives in ``rules.conditions``; these are pure data.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from .base import ContentModel, EmotionalState, NPCAttitude


class StatCondition(ContentModel):
    """Stat within an inclusive range. Either bound may be omitted."""
    type: Literal["stat"] = "stat"
    stat: str
    min: float | None = None
    max: float | None = None


class StatEqualCondition(ContentModel):
    type: Literal["stat_equal"] = "stat_equal"
    stat: str
    value: float


class FlagCondition(ContentModel):
    """Flag equals value. A missing flag reads as false."""
    type: Literal["flag"] = "flag"
    flag: str
    value: bool = True


class EmotionalCondition(ContentModel):
    type: Literal["emotional"] = "emotional"
    state: EmotionalState


class NPCRelationCondition(ContentModel):
    type: Literal["npcRelation"] = "npcRelation"
    npc_id: str
    min_trust: int | None = None
    attitude: NPCAttitude | None = None


class EventHistoryCondition(ContentModel):
    """Scenario was completed, optionally with a specific choice."""
    type: Literal["eventHistory"] = "eventHistory"
    scenario_id: str
    choice_id: str | None = None


class ThreadActiveCondition(ContentModel):
    type: Literal["threadActive"] = "threadActive"
    thread_id: str


class AndCondition(ContentModel):
    type: Literal["AND"] = "AND"
    conditions: list["BranchCondition"] = Field(default_factory=list)


class OrCondition(ContentModel):
    type: Literal["OR"] = "OR"
    conditions: list["BranchCondition"] = Field(default_factory=list)


class NotCondition(ContentModel):
    type: Literal["NOT"] = "NOT"
    condition: "BranchCondition"


BranchCondition = Annotated[
    Union[
        StatCondition,
        StatEqualCondition,
        FlagCondition,
        EmotionalCondition,
        NPCRelationCondition,
        EventHistoryCondition,
        ThreadActiveCondition,
        AndCondition,
        OrCondition,
        NotCondition,
    ],
    Field(discriminator="type"),
]

# Every member of the union, in declaration order
CONDITION_TYPES: tuple[type[ContentModel], ...] = (
    StatCondition,
    StatEqualCondition,
    FlagCondition,
    EmotionalCondition,
    NPCRelationCondition,
    EventHistoryCondition,
    ThreadActiveCondition,
    AndCondition,
    OrCondition,
    NotCondition,
)

AndCondition.model_rebuild()
OrCondition.model_rebuild()
NotCondition.model_rebuild()
