"""
Narrative thread tracker.

Decides whether the next scenario comes from an authored storyline
before the weighted pool is consulted, and applies chapter completion
effects and endings.

Priority for the next scenario:
1. Next eligible chapter of the primary (first) active thread
2. First eligible chapter of the first newly triggered thread
3. None: the caller falls back to the weighted selector

A chapter counts as completed once its scenario is in the history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..rules.conditions import evaluate_all
from ..rules.effects import apply_stat_delta
from ..rules.notices import Notice
from ..rules.npc import get_or_create_relationship, infer_attitude, set_attitude, update_trust
from ..state.schema import CompletedThread

if TYPE_CHECKING:
    from ..state.schema import GameState, NarrativeThread, ThreadChapter, ThreadEnding

logger = logging.getLogger(__name__)


# ─── Data Structures ────────────────────────────────────────

@dataclass
class ThreadDecision:
    """Which chapter to offer next, and whether offering it starts the thread."""
    thread_id: str
    chapter_order: int
    scenario_id: str
    starts_thread: bool = False


@dataclass
class ThreadOutcome:
    """Result of completing a chapter."""
    thread_id: str
    chapter_order: int
    endings_checked: bool = False  # No later chapter was reachable
    ending_id: str | None = None
    notices: list[Notice] = field(default_factory=list)


# ─── Queries ────────────────────────────────────────────────

def _chapters_in_order(thread: "NarrativeThread") -> list["ThreadChapter"]:
    return sorted(thread.chapters, key=lambda c: c.order)


def next_chapter(thread: "NarrativeThread", state: "GameState") -> "ThreadChapter | None":
    """
    First chapter whose scenario isn't completed and whose triggers hold.

    Returns None when nothing in the thread is playable right now.
    """
    for chapter in _chapters_in_order(thread):
        if state.has_completed(chapter.scenario_id):
            continue
        if evaluate_all(chapter.trigger_conditions, state):
            return chapter
    return None


def is_thread_triggered(thread: "NarrativeThread", state: "GameState") -> bool:
    """Inactive, not completed, start conditions hold and start scenario is done."""
    narrative = state.narrative
    if thread.id in narrative.active_threads or narrative.is_thread_completed(thread.id):
        return False
    if not evaluate_all(thread.start_conditions, state):
        return False
    if thread.start_scenario and not state.has_completed(thread.start_scenario):
        return False
    return True


def find_triggered_threads(
    threads: list["NarrativeThread"],
    state: "GameState",
) -> list["NarrativeThread"]:
    """Threads that became available but aren't active yet, in authored order."""
    return [t for t in threads if is_thread_triggered(t, state)]


def plan_next(threads: list["NarrativeThread"], state: "GameState") -> ThreadDecision | None:
    """
    Pick the next storyline scenario, if any.

    Args:
        threads: All authored threads
        state: Current state (read-only)

    Returns:
        ThreadDecision, or None to defer to the weighted selector
    """
    by_id = {t.id: t for t in threads}
    active = state.narrative.active_threads

    if active:
        primary = by_id.get(active[0])
        if primary is None:
            logger.warning(f"Active thread '{active[0]}' is not among the loaded threads")
        else:
            chapter = next_chapter(primary, state)
            if chapter is not None:
                return ThreadDecision(primary.id, chapter.order, chapter.scenario_id)

    for thread in find_triggered_threads(threads, state):
        chapter = next_chapter(thread, state)
        if chapter is not None:
            return ThreadDecision(thread.id, chapter.order, chapter.scenario_id, starts_thread=True)

    return None


def chapter_for_scenario(
    threads: list["NarrativeThread"],
    state: "GameState",
    scenario_id: str,
) -> list[tuple["NarrativeThread", "ThreadChapter"]]:
    """
    Chapters that a just-completed scenario belongs to.

    Only active threads, and threads that are triggered by now, count.
    """
    matches = []
    for thread in threads:
        if state.narrative.is_thread_completed(thread.id):
            continue
        if thread.id not in state.narrative.active_threads and not is_thread_triggered(thread, state):
            continue
        for chapter in thread.chapters:
            if chapter.scenario_id == scenario_id:
                matches.append((thread, chapter))
                break
    return matches


# ─── Transitions ────────────────────────────────────────────

def start_thread(state: "GameState", thread_id: str) -> "GameState":
    """Return a new state with the thread appended to the active set."""
    new_state = state.model_copy(deep=True)
    if thread_id not in new_state.narrative.active_threads:
        new_state.narrative.active_threads.append(thread_id)
        logger.info(f"Thread started: {thread_id}")
    return new_state


def complete_chapter(
    thread: "NarrativeThread",
    chapter_order: int,
    state: "GameState",
) -> tuple["GameState", ThreadOutcome]:
    """
    Apply a completed chapter's effects and check for an ending.

    Endings are checked once no later chapter is reachable. The first
    ending whose conditions all hold is committed: its rewards are
    applied and the thread moves from active to completed.

    Args:
        thread: The thread the chapter belongs to
        chapter_order: Order of the completed chapter
        state: Current state (not mutated)

    Returns:
        (new_state, outcome)
    """
    new_state = state.model_copy(deep=True)
    narrative = new_state.narrative
    outcome = ThreadOutcome(thread_id=thread.id, chapter_order=chapter_order)

    chapter = next((c for c in thread.chapters if c.order == chapter_order), None)
    if chapter is None:
        logger.warning(f"Thread '{thread.id}' has no chapter {chapter_order}")
        return new_state, outcome

    effects = chapter.on_complete
    if effects is not None:
        if effects.global_flag:
            narrative.narrative_flags[effects.global_flag] = True
        narrative.narrative_flags.update(effects.global_flags)
        for npc_effect in effects.npc_effect:
            relationship = get_or_create_relationship(narrative, npc_effect.npc_id)
            if npc_effect.trust:
                update_trust(relationship, npc_effect.trust)
            if npc_effect.attitude is not None:
                set_attitude(relationship, npc_effect.attitude)

    if chapter.title:
        outcome.notices.append(Notice(headline=f"Chapter Complete: {chapter.title}"))

    if _has_reachable_chapter(thread, chapter_order, new_state):
        return new_state, outcome

    outcome.endings_checked = True
    for ending in thread.endings:
        if evaluate_all(ending.condition, new_state):
            _commit_ending(thread, ending, new_state)
            outcome.ending_id = ending.id
            outcome.notices.append(Notice(
                headline=f"Storyline Ended: {ending.title}",
                details=[ending.description] if ending.description else [],
            ))
            logger.info(f"Thread {thread.id} ended with {ending.id}")
            break

    return new_state, outcome


def _has_reachable_chapter(thread: "NarrativeThread", after_order: int, state: "GameState") -> bool:
    for chapter in _chapters_in_order(thread):
        if chapter.order <= after_order or state.has_completed(chapter.scenario_id):
            continue
        if evaluate_all(chapter.trigger_conditions, state):
            return True
    return False


def _commit_ending(thread: "NarrativeThread", ending: "ThreadEnding", state: "GameState") -> None:
    """Apply ending rewards and close the thread. Mutates state in place."""
    narrative = state.narrative
    rewards = ending.rewards
    if rewards is not None:
        narrative.narrative_flags.update(rewards.global_flags)
        for stat, bonus in rewards.stat_bonuses.items():
            apply_stat_delta(state.stats, stat, bonus)
        for update in rewards.npc_relation_updates:
            relationship = get_or_create_relationship(narrative, update.npc_id)
            if update.trust is not None:
                relationship.trust_level = max(0, min(100, update.trust))
                relationship.attitude = infer_attitude(relationship.trust_level, relationship.attitude)
            if update.attitude is not None:
                set_attitude(relationship, update.attitude)

    narrative.active_threads = [t for t in narrative.active_threads if t != thread.id]
    narrative.completed_threads.append(CompletedThread(
        thread_id=thread.id,
        ending_id=ending.id,
        completed_at=state.months,
    ))
