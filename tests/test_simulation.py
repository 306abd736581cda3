"""
Tests for the headless simulation runner and CLI.
"""

import json

from career_engine.__main__ import main
from career_engine.simulation import (
    PRESETS,
    FinancialPreset,
    RunOutcome,
    SimulationRunner,
)

# Let a one-scenario pool repeat every turn
NO_REPEAT_WINDOW = {"recent_ids_capacity": 0}


class TestSimulationRunner:
    """Tests for simulated sessions."""

    def test_same_seed_same_report(self, sample_scenarios, sample_threads):
        a = SimulationRunner(sample_scenarios, sample_threads, seed=7).run(2)
        b = SimulationRunner(sample_scenarios, sample_threads, seed=7).run(2)

        assert a.results == b.results

    def test_report_shape(self, sample_scenarios, sample_threads):
        report = SimulationRunner(sample_scenarios, sample_threads, seed=1).run(2)
        dumped = report.model_dump()

        assert dumped["seed"] == 1
        assert list(dumped["presets"]) == [p.name for p in PRESETS]
        for summary in dumped["presets"].values():
            assert summary["runs"] == 2
            assert sum(summary["outcomes"].values()) == 2

    def test_immediate_hire(self, make_scenario, make_choice):
        pool = [make_scenario("offer_now", choices=[make_choice("accept", flag="has_job")])]
        runner = SimulationRunner(pool)

        result = runner.run_one(PRESETS[0])

        assert result.outcome == RunOutcome.HIRED
        assert result.turns == 1

    def test_bankrupt(self, make_scenario, make_choice):
        pool = [make_scenario("wait", choices=[make_choice("wait", time_cost=1)], cooldown=0)]
        preset = FinancialPreset("Broke", savings=0, burn_rate=3000, bankrupt_below=-5000)

        result = SimulationRunner(pool, tuning=NO_REPEAT_WINDOW).run_one(preset)

        assert result.outcome == RunOutcome.BANKRUPT
        assert result.months == 2

    def test_stuck_when_time_runs_out(self, make_scenario, make_choice):
        pool = [make_scenario("wait", choices=[make_choice("wait", time_cost=1)], cooldown=0)]
        preset = FinancialPreset("Rich", savings=10**7, burn_rate=0)

        result = SimulationRunner(pool, tuning=NO_REPEAT_WINDOW, max_months=3).run_one(preset)

        assert result.outcome == RunOutcome.STUCK
        assert result.months == 3

    def test_average_months(self, make_scenario, make_choice):
        pool = [make_scenario("offer_now", choices=[make_choice("accept", flag="has_job", time_cost=2)])]
        report = SimulationRunner(pool).run(3, presets=PRESETS[:1])

        assert report.average_months(PRESETS[0].name) == 2
        assert report.average_months(PRESETS[0].name, RunOutcome.STUCK) is None


class TestCli:
    """Tests for the command-line entry point."""

    def test_simulate_json(self, capsys):
        assert main(["simulate", "--runs", "1", "--seed", "3", "--json"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["seed"] == 3
        assert len(report["presets"]) == len(PRESETS)

    def test_content_options_after_command(self, capsys, tmp_path):
        """Content and tuning paths are accepted after the command name."""
        pool = tmp_path / "pool.json"
        pool.write_text(json.dumps([{
            "id": "offer_now", "title": "Offer", "text": "Take it?",
            "choices": [{"id": "accept", "text": "Accept", "flag": "has_job"}],
        }]))
        tuning = tmp_path / "tuning.json"
        tuning.write_text(json.dumps(NO_REPEAT_WINDOW))

        argv = [
            "simulate", "--runs", "1", "--json",
            "--scenarios", str(pool), "--tuning", str(tuning),
        ]
        assert main(argv) == 0

        report = json.loads(capsys.readouterr().out)
        for summary in report["presets"].values():
            assert summary["outcomes"]["hired"] == 1

    def test_inspect_accepts_tuning(self, capsys, tmp_path):
        tuning = tmp_path / "tuning.json"
        tuning.write_text(json.dumps(NO_REPEAT_WINDOW))

        assert main(["inspect", "--role", "analyst", "--tuning", str(tuning)]) == 0
        assert "jh2" in capsys.readouterr().out

    def test_simulate_table(self, capsys):
        assert main(["simulate", "--runs", "1"]) == 0
        assert "Simulation" in capsys.readouterr().out

    def test_inspect(self, capsys):
        assert main(["inspect", "--stage", "0", "--role", "analyst"]) == 0
        assert "jh2" in capsys.readouterr().out
