"""
Tests for the weighted scenario selector.

Selection is a pure function of (pool, state, role): eligibility
filters, band weighting, tag fatigue, cooldowns and the fallback.
"""

from career_engine.content import FALLBACK_SCENARIO_ID
from career_engine.state import Difficulty
from career_engine.systems.selector import (
    describe_candidates,
    is_eligible,
    pick_next,
    scenario_weight,
    selection_seed,
    stage_band,
    tick_cooldowns,
)
from career_engine.config import resolve_tuning


TUNING = resolve_tuning()


class TestEligibility:
    """Tests for candidate filtering."""

    def test_phase_filter(self, state, make_scenario):
        assert is_eligible(make_scenario("a"), state, "engineer", {}, TUNING)
        assert not is_eligible(make_scenario("b", phase="thread"), state, "engineer", {}, TUNING)

    def test_role_lock(self, state, make_scenario):
        locked = make_scenario("ml", role_lock=["ai_engineer", "engineer"])

        assert is_eligible(locked, state, "engineer", {}, TUNING)
        assert not is_eligible(locked, state, "analyst", {}, TUNING)
        assert not is_eligible(locked, state, None, {}, TUNING)

    def test_stage_gates(self, state, make_scenario):
        gated = make_scenario("screen", gates={"stage_min": 1, "stage_max": 2})

        assert not is_eligible(gated, state, None, {}, TUNING)
        state.hunt_stage = 2
        assert is_eligible(gated, state, None, {}, TUNING)
        state.hunt_stage = 3
        assert not is_eligible(gated, state, None, {}, TUNING)

    def test_min_requirements(self, state, make_scenario):
        demanding = make_scenario("sql", min_req={"sql": 15})

        assert not is_eligible(demanding, state, None, {}, TUNING)
        state.stats.sql = 15
        assert is_eligible(demanding, state, None, {}, TUNING)

    def test_recent_and_cooling(self, state, make_scenario):
        scenario = make_scenario("a")

        state.recent_scenario_ids = ["a"]
        assert not is_eligible(scenario, state, None, {}, TUNING)

        state.recent_scenario_ids = []
        assert not is_eligible(scenario, state, None, {"a": 2}, TUNING)


class TestWeights:
    """Tests for band weighting and tag fatigue."""

    def test_stage_bands(self):
        assert stage_band(0) == stage_band(1) == Difficulty.BEGINNER
        assert stage_band(2) == stage_band(3) == Difficulty.INTERMEDIATE
        assert stage_band(4) == stage_band(5) == Difficulty.ADVANCED

    def test_band_match_bonus(self, state, make_scenario):
        assert scenario_weight(make_scenario("a", difficulty="beginner"), state, TUNING) == 20
        assert scenario_weight(make_scenario("b", difficulty="intermediate"), state, TUNING) == 10
        assert scenario_weight(make_scenario("c"), state, TUNING) == 10

    def test_advanced_excluded_at_stage_zero(self, state, make_scenario):
        assert scenario_weight(make_scenario("a", difficulty="advanced"), state, TUNING) == 0

    def test_advanced_allowed_later(self, state, make_scenario):
        state.hunt_stage = 1
        assert scenario_weight(make_scenario("a", difficulty="advanced"), state, TUNING) == 10

    def test_too_easy_content(self, state, make_scenario):
        state.hunt_stage = 4
        assert scenario_weight(make_scenario("a", difficulty="beginner"), state, TUNING) == 1
        assert scenario_weight(make_scenario("b", difficulty="advanced"), state, TUNING) == 20

    def test_tag_fatigue(self, state, make_scenario):
        """Each shared recent tag divides the weight further."""
        state.hunt_stage = 2
        state.recent_tags = ["SQL", "Technical"]

        one = make_scenario("a", difficulty="intermediate", tags=["SQL", "Networking"])
        two = make_scenario("b", difficulty="intermediate", tags=["SQL", "Technical"])

        assert scenario_weight(one, state, TUNING) == 10
        assert scenario_weight(two, state, TUNING) == 6

    def test_fatigue_never_reaches_zero(self, state, make_scenario):
        state.hunt_stage = 4
        state.recent_tags = ["SQL"]

        assert scenario_weight(make_scenario("a", difficulty="beginner", tags=["SQL"]), state, TUNING) == 1


class TestPickNext:
    """Tests for the selection entry point."""

    def test_deterministic(self, state, make_scenario):
        pool = [make_scenario(f"s{i}", difficulty="beginner") for i in range(6)]

        first, first_update = pick_next(pool, state)
        second, second_update = pick_next(pool, state)

        assert first.id == second.id
        assert first_update == second_update

    def test_input_state_unchanged(self, state, make_scenario):
        before = state.model_dump()
        pick_next([make_scenario("a")], state)

        assert state.model_dump() == before

    def test_seed_varies_with_name(self, state, make_scenario):
        """Different players see different draws over a pool."""
        pool = [make_scenario("easy", difficulty="beginner"), make_scenario("mid", difficulty="intermediate")]
        picks = set()
        for i in range(200):
            state.character_name = f"player-{i}"
            scenario, _ = pick_next(pool, state)
            picks.add(scenario.id)

        assert picks == {"easy", "mid"}

    def test_selection_seed(self, state):
        assert selection_seed(state, "engineer") == "Tester|0|0|engineer"
        state.months = 1.5
        assert selection_seed(state, None) == "Tester|1.5|0|"

    def test_role_defaults_to_state_role(self, state, make_scenario):
        locked = make_scenario("ml", role_lock=["engineer"])

        scenario, _ = pick_next([locked], state)
        assert scenario.id == "ml"

    def test_records_pick(self, state, make_scenario):
        scenario, update = pick_next([make_scenario("a", tags=["SQL"])], state)

        assert update.current_scenario_id == "a"
        assert update.recent_scenario_ids == ["a"]
        assert update.recent_tags == ["SQL"]
        assert update.cooldowns == {"a": 3}

    def test_declared_cooldown(self, state, make_scenario):
        _, update = pick_next([make_scenario("a", cooldown=5)], state)
        assert update.cooldowns["a"] == 5

    def test_cooldowns_tick(self, state, make_scenario):
        state.cooldowns = {"x": 1, "y": 3}
        _, update = pick_next([make_scenario("a")], state)

        assert "x" not in update.cooldowns
        assert update.cooldowns["y"] == 2

    def test_recent_ids_fifo(self, state, make_scenario):
        """Recent ids keep the last six picks, oldest first."""
        state.recent_scenario_ids = ["a", "b", "c", "d", "e", "f"]
        _, update = pick_next([make_scenario("g")], state)

        assert update.recent_scenario_ids == ["b", "c", "d", "e", "f", "g"]

    def test_recent_tags_newest_first(self, state, make_scenario):
        state.recent_tags = ["X", "Y"]
        _, update = pick_next([make_scenario("a", tags=["A", "B"])], state)

        assert update.recent_tags == ["A", "B", "X"]

    def test_apply_to_returns_new_state(self, state, make_scenario):
        _, update = pick_next([make_scenario("a")], state)
        new_state = update.apply_to(state)

        assert new_state.current_scenario_id == "a"
        assert state.current_scenario_id is None
        assert new_state.cooldowns is not state.cooldowns


class TestFallback:
    """Tests for the fallback scenario."""

    def test_empty_pool(self, state):
        scenario, update = pick_next([], state)

        assert scenario.id == FALLBACK_SCENARIO_ID
        assert update.cooldowns[FALLBACK_SCENARIO_ID] == 3

    def test_all_weights_zero(self, state, make_scenario):
        scenario, _ = pick_next([make_scenario("hard", difficulty="advanced")], state)
        assert scenario.id == FALLBACK_SCENARIO_ID

    def test_cooling_fallback_means_no_scenario(self, state):
        state.cooldowns = {FALLBACK_SCENARIO_ID: 3}
        scenario, update = pick_next([], state)

        assert scenario is None
        assert update.current_scenario_id is None
        assert update.cooldowns == {FALLBACK_SCENARIO_ID: 2}

    def test_custom_fallback(self, state, make_scenario):
        custom = make_scenario("rest_day")
        scenario, _ = pick_next([], state, fallback=custom)

        assert scenario.id == "rest_day"


class TestCooldownSequence:
    """Cooldowns count down monotonically across consecutive selections."""

    def test_single_scenario_cycle(self, state, make_scenario):
        pool = [make_scenario("only")]
        tuning = {"recent_ids_capacity": 0}
        picks = []

        for _ in range(4):
            scenario, update = pick_next(pool, state, tuning=tuning)
            picks.append(scenario.id if scenario else None)
            state = update.apply_to(state)

        assert picks == ["only", FALLBACK_SCENARIO_ID, None, "only"]

    def test_tick_never_increases(self):
        cooldowns = {"a": 5, "b": 1}
        ticked = tick_cooldowns(cooldowns)

        assert ticked == {"a": 4}
        assert cooldowns == {"a": 5, "b": 1}


class TestDescribeCandidates:

    def test_lists_weights(self, state, make_scenario):
        pool = [
            make_scenario("easy", difficulty="beginner"),
            make_scenario("hard", difficulty="advanced"),
            make_scenario("story", phase="thread"),
        ]

        assert describe_candidates(pool, state, "engineer") == [("easy", 20), ("hard", 0)]
