"""
NPC relationship rules as pure functions.

These functions operate on NarrativeContext data without being methods
on the model. Functions that change a relationship mutate the context
they are given, so callers pass a cloned state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..state.base import NPCAttitude
from ..state.schema import NPCRelationship

if TYPE_CHECKING:
    from ..state.schema import NarrativeContext, NPCInteraction

MIN_TRUST = 0
MAX_TRUST = 100

# Trust floor for each inferred attitude, highest first
ATTITUDE_THRESHOLDS: list[tuple[int, NPCAttitude]] = [
    (75, NPCAttitude.MENTOR),
    (50, NPCAttitude.FRIENDLY),
    (25, NPCAttitude.NEUTRAL),
]

# Attitudes that are set explicitly and survive trust changes
STICKY_ATTITUDES = frozenset({NPCAttitude.MENTOR, NPCAttitude.HOSTILE})


def infer_attitude(trust: int, current: NPCAttitude) -> NPCAttitude:
    """
    Attitude implied by a trust level.

    Mentor and hostile are explicit states and are kept as they are.

    Args:
        trust: Trust level 0-100
        current: The relationship's current attitude

    Returns:
        The attitude after the trust change
    """
    if current in STICKY_ATTITUDES:
        return current
    for floor, attitude in ATTITUDE_THRESHOLDS:
        if trust >= floor:
            return attitude
    return NPCAttitude.HOSTILE


def get_or_create_relationship(context: "NarrativeContext", npc_id: str) -> NPCRelationship:
    """Get a relationship, registering a default one if the NPC is new."""
    relationship = context.npc_relationships.get(npc_id)
    if relationship is None:
        relationship = NPCRelationship(npc_id=npc_id)
        context.npc_relationships[npc_id] = relationship
    return relationship


def update_trust(relationship: NPCRelationship, delta: int) -> int:
    """
    Shift trust by delta, clamped to 0-100, and re-infer the attitude.

    Mutates the relationship in place and returns the new trust level.
    """
    new_trust = max(MIN_TRUST, min(MAX_TRUST, relationship.trust_level + delta))
    relationship.trust_level = new_trust
    relationship.attitude = infer_attitude(new_trust, relationship.attitude)
    return new_trust


def set_attitude(relationship: NPCRelationship, attitude: NPCAttitude) -> None:
    """Set an attitude explicitly. Mutates the relationship in place."""
    relationship.attitude = attitude


def record_interaction(
    relationship: NPCRelationship,
    scenario_id: str | None,
    month: float,
    memory: str | None = None,
) -> None:
    """Note a shared scenario and an optional memory. Mutates in place."""
    if scenario_id and scenario_id not in relationship.shared_history:
        relationship.shared_history.append(scenario_id)
    if memory:
        relationship.memories.append(memory)
    relationship.last_interaction = month


def apply_npc_interactions(
    context: "NarrativeContext",
    interactions: list["NPCInteraction"],
    scenario_id: str | None = None,
    month: float = 0,
) -> list[str]:
    """
    Apply a choice's NPC interactions to the context.

    Trust deltas are applied before attitude shifts, so an explicit
    attitude always wins. Mutates the context in place.

    Returns:
        Ids of the NPCs that were touched
    """
    touched = []
    for interaction in interactions:
        relationship = get_or_create_relationship(context, interaction.npc_id)
        if interaction.trust_delta:
            update_trust(relationship, interaction.trust_delta)
        if interaction.attitude_shift is not None:
            set_attitude(relationship, interaction.attitude_shift)
        record_interaction(relationship, scenario_id, month, interaction.memory)
        touched.append(interaction.npc_id)
    return touched


def has_good_standing(relationship: NPCRelationship, min_trust: int = 50) -> bool:
    return relationship.trust_level >= min_trust and relationship.attitude != NPCAttitude.HOSTILE


def has_mentor_relationship(relationship: NPCRelationship) -> bool:
    return relationship.attitude == NPCAttitude.MENTOR and relationship.trust_level >= 75
