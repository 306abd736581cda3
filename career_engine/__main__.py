"""
Command-line entry point.

Usage:
    python -m career_engine simulate --runs 100
    python -m career_engine inspect --stage 2
"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from .config import load_tuning
from .content import load_sample_scenarios, load_sample_threads, load_scenarios, load_threads
from .simulation import PRESETS, RunOutcome, SimulationRunner
from .state import Role, new_game_state
from .systems import describe_candidates

logger = logging.getLogger(__name__)
console = Console()


def _load_content(args):
    scenarios = load_scenarios(args.scenarios) if args.scenarios else load_sample_scenarios()
    threads = load_threads(args.threads) if args.threads else load_sample_threads()
    return scenarios, threads


def cmd_simulate(args) -> int:
    """Run the headless simulation and print an outcome table."""
    scenarios, threads = _load_content(args)
    runner = SimulationRunner(
        scenarios,
        threads,
        tuning=load_tuning(args.tuning),
        seed=args.seed,
        max_months=args.months,
    )
    report = runner.run(args.runs)

    if args.json:
        print(json.dumps(report.model_dump(), indent=2))
        return 0

    table = Table(title=f"Simulation ({args.runs} runs per preset, seed {args.seed})")
    table.add_column("Preset")
    table.add_column("Savings", justify="right")
    table.add_column("Burn", justify="right")
    for outcome in RunOutcome:
        table.add_column(outcome.value.title(), justify="right")
    table.add_column("Avg months to hire", justify="right")

    for preset in PRESETS:
        counts = report.outcome_counts(preset.name)
        total = max(1, len(report.for_preset(preset.name)))
        avg = report.average_months(preset.name)
        table.add_row(
            preset.name,
            f"{preset.savings:,.0f}",
            f"{preset.burn_rate:,.0f}",
            *[f"{100 * counts.get(o, 0) / total:.0f}%" for o in RunOutcome],
            f"{avg:.1f}" if avg is not None else "-",
        )

    console.print(table)
    return 0


def cmd_inspect(args) -> int:
    """Print selector weights for a fresh state at a given stage."""
    scenarios, _ = _load_content(args)
    state = new_game_state(args.name, role=args.role)
    state.hunt_stage = args.stage

    table = Table(title=f"Candidates at stage {args.stage} ({args.role})")
    table.add_column("Scenario")
    table.add_column("Weight", justify="right")
    candidates = describe_candidates(scenarios, state, args.role, load_tuning(args.tuning))
    for scenario_id, weight in candidates:
        table.add_row(scenario_id, str(weight))

    if not candidates:
        console.print("[dim]No eligible scenarios; the fallback would be offered.[/dim]")
    else:
        console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Career engine tools")
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Log more (-v info, -vv debug)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # Content options belong to each command
    content = argparse.ArgumentParser(add_help=False)
    content.add_argument("--scenarios", help="Scenario pool JSON (defaults to the bundled sample)")
    content.add_argument("--threads", help="Narrative threads JSON (defaults to the bundled sample)")
    content.add_argument("--tuning", help="Tuning overrides JSON")

    simulate = sub.add_parser("simulate", parents=[content], help="Run many headless sessions")
    simulate.add_argument("--runs", type=int, default=100, help="Runs per financial preset")
    simulate.add_argument("--seed", type=int, default=0)
    simulate.add_argument("--months", type=float, default=24, help="Months before a run counts as stuck")
    simulate.add_argument("--json", action="store_true", help="Print the report as JSON")
    simulate.set_defaults(func=cmd_simulate)

    inspect = sub.add_parser("inspect", parents=[content], help="Show selector weights for a stage")
    inspect.add_argument("--stage", type=int, default=0)
    inspect.add_argument("--role", default=Role.ENGINEER.value, choices=[r.value for r in Role])
    inspect.add_argument("--name", default="Player")
    inspect.set_defaults(func=cmd_inspect)

    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
