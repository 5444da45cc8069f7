"""
automaton_cli.py - Headless Existon Automaton Runner

Runs a scenario without any window or rendering and prints a report or
JSON export. Optionally streams the receipt ledger to a JSONL file.
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from receipts import write_ledger_jsonl

from existon import SCENARIOS_BY_NAME, AutomatonConfig, export_run, generate_report, run_automaton


def parse_extents(text: str) -> tuple:
    """'120x80' or '8,8,8' -> (120, 80) / (8, 8, 8)."""
    parts = text.replace(",", "x").split("x")
    try:
        extents = tuple(int(p) for p in parts if p)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid grid extents: {text!r}")
    if not extents:
        raise argparse.ArgumentTypeError(f"invalid grid extents: {text!r}")
    return extents


def build_config(args: argparse.Namespace) -> AutomatonConfig:
    """Scenario preset with command line overrides applied."""
    config = SCENARIOS_BY_NAME[args.scenario]
    overrides = {}
    if args.steps is not None:
        overrides["n_steps"] = args.steps
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if args.extents is not None:
        overrides["grid_extents"] = args.extents
    if args.ga_dimension is not None:
        overrides["ga_dimension"] = args.ga_dimension
    return replace(config, **overrides) if overrides else config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Existon Automaton - headless runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python automaton_cli.py --scenario DETERMINISTIC
  python automaton_cli.py --scenario ORIGINAL --steps 10 --seed 7
  python automaton_cli.py --extents 8x8x8 --ga-dimension 3 --json
  python automaton_cli.py --receipts run.jsonl
        """,
    )
    parser.add_argument(
        "--scenario", "-s",
        type=str,
        choices=sorted(SCENARIOS_BY_NAME),
        default="ORIGINAL",
        help="Scenario preset (default: ORIGINAL)",
    )
    parser.add_argument(
        "--steps", "-n",
        type=int,
        default=None,
        help="Number of steps (default: scenario value)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: scenario value)",
    )
    parser.add_argument(
        "--extents",
        type=parse_extents,
        default=None,
        help="Grid extents, e.g. 120x80 (default: scenario value)",
    )
    parser.add_argument(
        "--ga-dimension", "-p",
        type=int,
        default=None,
        help="Number of basis vectors of the algebra (default: scenario value)",
    )
    parser.add_argument(
        "--receipts",
        type=str,
        default=None,
        help="Write the receipt ledger to this JSONL file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the JSON export instead of the text report",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for invalid configuration).
    """
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = run_automaton(config)

    if args.json:
        print(export_run(result))
    else:
        print(generate_report(result))

    if args.receipts:
        with open(args.receipts, "w") as fh:
            count = write_ledger_jsonl(result.final_universe.drain_receipts(), fh)
        print(f"Wrote {count} receipts to {args.receipts}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
