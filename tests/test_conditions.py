"""
Tests for branch condition evaluation.

Covers every condition kind, composite logic and totality: missing
references and malformed conditions evaluate to False instead of
raising.
"""

from pydantic import TypeAdapter

from career_engine.rules.conditions import (
    EVALUATORS,
    evaluate,
    evaluate_all,
    explain_failure,
)
from career_engine.state import (
    AndCondition,
    BranchCondition,
    EmotionalCondition,
    EmotionalState,
    EventHistoryCondition,
    FlagCondition,
    HistoryEntry,
    NotCondition,
    NPCAttitude,
    NPCRelationCondition,
    NPCRelationship,
    OrCondition,
    StatCondition,
    StatEqualCondition,
    ThreadActiveCondition,
)
from career_engine.state.base import ContentModel
from career_engine.state.conditions import CONDITION_TYPES


class TestDispatchTable:
    """The evaluator table covers the whole union."""

    def test_every_condition_kind_has_an_evaluator(self):
        for condition_type in CONDITION_TYPES:
            assert condition_type in EVALUATORS

    def test_unregistered_kind_is_false(self, state):
        """A model outside the union evaluates to False rather than raising."""
        class MysteryCondition(ContentModel):
            type: str = "mystery"

        assert evaluate(MysteryCondition(), state) is False


class TestStatCondition:
    """Tests for stat range conditions."""

    def test_within_range(self, state):
        assert evaluate(StatCondition(stat="sql", min=5, max=20), state)

    def test_bounds_are_inclusive(self, state):
        """Default sql is 10; both bounds at 10 hold."""
        assert evaluate(StatCondition(stat="sql", min=10, max=10), state)

    def test_below_min(self, state):
        assert not evaluate(StatCondition(stat="sql", min=11), state)

    def test_above_max(self, state):
        assert not evaluate(StatCondition(stat="confidence", max=49), state)

    def test_unknown_stat_is_false(self, state):
        assert not evaluate(StatCondition(stat="charisma", min=0), state)

    def test_camel_case_stat_name(self, state):
        """Authored camelCase names resolve to snake_case fields."""
        assert evaluate(StatCondition(stat="learningSpeed", min=50), state)

    def test_engine_numerics(self, state):
        """Stage and progress are readable by stat conditions."""
        state.hunt_stage = 3
        state.hunt_progress = 40

        assert evaluate(StatCondition(stat="hunt_stage", min=3), state)
        assert evaluate(StatCondition(stat="hunt_progress", max=50), state)

    def test_malformed_bound_is_false(self, state):
        """A bound that can't be compared evaluates to False."""
        broken = StatCondition.model_construct(type="stat", stat="sql", min="lots", max=None)

        assert evaluate(broken, state) is False


class TestStatEqualCondition:

    def test_equal(self, state):
        assert evaluate(StatEqualCondition(stat="savings", value=15000), state)

    def test_not_equal(self, state):
        assert not evaluate(StatEqualCondition(stat="savings", value=14999), state)


class TestFlagCondition:
    """Tests for flag conditions."""

    def test_set_flag(self, state):
        state.flags["portfolio_done"] = True
        assert evaluate(FlagCondition(flag="portfolio_done"), state)

    def test_missing_flag_reads_false(self, state):
        assert not evaluate(FlagCondition(flag="portfolio_done"), state)
        assert evaluate(FlagCondition(flag="portfolio_done", value=False), state)

    def test_numeric_flag_truthiness(self, state):
        """Counter flags are truthy when non-zero."""
        state.flags["rejection_count"] = 2
        assert evaluate(FlagCondition(flag="rejection_count"), state)

        state.flags["rejection_count"] = 0
        assert evaluate(FlagCondition(flag="rejection_count", value=False), state)

    def test_narrative_flag(self, state):
        state.narrative.narrative_flags["sarah_contacted"] = True
        assert evaluate(FlagCondition(flag="sarah_contacted"), state)

    def test_narrative_flag_shadows_game_flag(self, state):
        """A narrative flag wins over a game flag of the same name."""
        state.flags["met"] = True
        state.narrative.narrative_flags["met"] = False

        assert not evaluate(FlagCondition(flag="met"), state)


class TestEmotionalCondition:

    def test_matches_current_state(self, state):
        assert evaluate(EmotionalCondition(state=EmotionalState.CALM), state)

    def test_other_state(self, state):
        state.stats.emotional_state = EmotionalState.ANXIOUS
        assert not evaluate(EmotionalCondition(state=EmotionalState.CALM), state)


class TestNPCRelationCondition:
    """Tests for relationship conditions."""

    def test_missing_npc_is_false(self, state):
        assert not evaluate(NPCRelationCondition(npc_id="sarah"), state)

    def test_min_trust(self, state):
        state.narrative.npc_relationships["sarah"] = NPCRelationship(npc_id="sarah", trust_level=40)

        assert evaluate(NPCRelationCondition(npc_id="sarah", min_trust=40), state)
        assert not evaluate(NPCRelationCondition(npc_id="sarah", min_trust=41), state)

    def test_attitude(self, state):
        state.narrative.npc_relationships["sarah"] = NPCRelationship(
            npc_id="sarah", trust_level=80, attitude=NPCAttitude.MENTOR,
        )

        assert evaluate(NPCRelationCondition(npc_id="sarah", attitude=NPCAttitude.MENTOR), state)
        assert not evaluate(NPCRelationCondition(npc_id="sarah", attitude=NPCAttitude.FRIENDLY), state)


class TestEventHistoryCondition:

    def test_scenario_completed(self, state):
        state.history.append(HistoryEntry(scenario_id="jh2", choice_id="ignore"))
        assert evaluate(EventHistoryCondition(scenario_id="jh2"), state)

    def test_specific_choice(self, state):
        state.history.append(HistoryEntry(scenario_id="jh2", choice_id="ignore"))

        assert evaluate(EventHistoryCondition(scenario_id="jh2", choice_id="ignore"), state)
        assert not evaluate(EventHistoryCondition(scenario_id="jh2", choice_id="message_sarah"), state)

    def test_empty_history(self, state):
        assert not evaluate(EventHistoryCondition(scenario_id="jh2"), state)


class TestThreadActiveCondition:

    def test_active(self, state):
        state.narrative.active_threads.append("thread_a")
        assert evaluate(ThreadActiveCondition(thread_id="thread_a"), state)

    def test_inactive(self, state):
        assert not evaluate(ThreadActiveCondition(thread_id="thread_a"), state)


class TestCompositeConditions:
    """Tests for AND / OR / NOT."""

    def test_empty_and_holds(self, state):
        assert evaluate(AndCondition(conditions=[]), state)

    def test_empty_or_fails(self, state):
        assert not evaluate(OrCondition(conditions=[]), state)

    def test_and_requires_all(self, state):
        cond = AndCondition(conditions=[
            StatCondition(stat="sql", min=5),
            FlagCondition(flag="missing"),
        ])
        assert not evaluate(cond, state)

    def test_or_requires_any(self, state):
        cond = OrCondition(conditions=[
            StatCondition(stat="sql", min=500),
            FlagCondition(flag="missing", value=False),
        ])
        assert evaluate(cond, state)

    def test_not_inverts(self, state):
        assert evaluate(NotCondition(condition=FlagCondition(flag="missing")), state)

    def test_nested_tree(self, state):
        """Composites nest to any depth."""
        state.flags["a"] = True
        cond = AndCondition(conditions=[
            OrCondition(conditions=[FlagCondition(flag="a"), FlagCondition(flag="b")]),
            NotCondition(condition=AndCondition(conditions=[FlagCondition(flag="b")])),
        ])
        assert evaluate(cond, state)

    def test_evaluate_all_empty_list(self, state):
        assert evaluate_all([], state)


class TestParsing:
    """Conditions load from authored camelCase JSON."""

    def test_discriminated_union(self):
        adapter = TypeAdapter(BranchCondition)
        cond = adapter.validate_python({
            "type": "AND",
            "conditions": [
                {"type": "npcRelation", "npcId": "sarah", "minTrust": 10},
                {"type": "NOT", "condition": {"type": "flag", "flag": "x"}},
                {"type": "eventHistory", "scenarioId": "jh2", "choiceId": "ignore"},
            ],
        })

        assert isinstance(cond, AndCondition)
        assert isinstance(cond.conditions[0], NPCRelationCondition)
        assert cond.conditions[0].min_trust == 10
        assert isinstance(cond.conditions[1], NotCondition)
        assert cond.conditions[2].choice_id == "ignore"


class TestExplainFailure:
    """Debug explanations."""

    def test_holding_condition(self, state):
        assert explain_failure(StatCondition(stat="sql", min=1), state) == "condition holds"

    def test_stat_explanation(self, state):
        reason = explain_failure(StatCondition(stat="sql", min=50), state)
        assert "sql" in reason
        assert ">= 50" in reason

    def test_missing_npc(self, state):
        reason = explain_failure(NPCRelationCondition(npc_id="sarah", min_trust=10), state)
        assert "no relationship" in reason

    def test_and_lists_failures(self, state):
        cond = AndCondition(conditions=[FlagCondition(flag="x"), FlagCondition(flag="y")])
        reason = explain_failure(cond, state)

        assert "'x'" in reason
        assert "'y'" in reason
