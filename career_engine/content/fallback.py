"""
The guaranteed fallback scenario.

Offered when no authored scenario is eligible, so a session can always
advance. It sits on its own cooldown like any other scenario, so it is
never offered twice in a row.
"""

from ..state.base import ScenarioPhase
from ..state.schema import Choice, Scenario

FALLBACK_SCENARIO_ID = "fallback_grind"

FALLBACK_SCENARIO = Scenario(
    id=FALLBACK_SCENARIO_ID,
    phase=ScenarioPhase.HUNT,
    title="The Daily Grind",
    text=(
        "No callbacks today. The inbox is quiet and the job boards look "
        "the same as yesterday. You can keep pushing or take a breather."
    ),
    tags=["Filler", "Grind"],
    choices=[
        Choice(
            id="grind_apply",
            text="Send out another batch of applications",
            fx={"stress": 0.05},
            energy_cost=10,
            time_cost=0.25,
            hunt_progress=5,
        ),
        Choice(
            id="grind_study",
            text="Spend the day on a course",
            fx={"stress": -0.05},
            skill_bonus="sql",
            energy_cost=5,
            time_cost=0.25,
        ),
        Choice(
            id="grind_rest",
            text="Take the day off",
            fx={"energy": 0.2, "stress": -0.1},
            time_cost=0.25,
        ),
    ],
)
