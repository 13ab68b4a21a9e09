from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from apps.StoneLock.io.json_codec import dumps
from apps.StoneLock.pipeline.run_puzzle import run_puzzle, set_package_log_level
from src.stonelock.constants import FULL_STONES, STONE_TYPES
from src.stonelock.factory import PuzzleFactory
from src.stonelock.models import OrientationDataError
from src.stonelock.puzzle import StonePuzzle

logger = logging.getLogger(__name__)


def _default_paths() -> dict[str, Path]:
    base = Path(__file__).resolve().parent
    examples = base / "io" / "examples"
    return {
        "demo_in": examples / "puzzle_input.example.json",
        "demo_out": examples / "puzzle_report.example.json",
    }


def _parse_pairs(pairs: Optional[Sequence[str]], option: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key or not value:
            raise SystemExit(f"{option} expects stone=value, got {pair!r}")
        parsed[key] = value
    return parsed


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    set_package_log_level(level)


def _add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    # SUPPRESS keeps a subcommand from clobbering a level given before it
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=argparse.SUPPRESS)


def _build(args: argparse.Namespace, solution: Optional[dict[str, str]] = None) -> StonePuzzle:
    return PuzzleFactory.create_custom_puzzle(
        args.stones,
        solution,
        orientations=args.orientations,
        rng=np.random.default_rng(args.seed),
    )


def _add_puzzle_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--stones", nargs="+", choices=STONE_TYPES, default=list(FULL_STONES))
    parser.add_argument("--seed", type=int)
    parser.add_argument("--orientations", dest="orientations", help="Orientation document (JSON)")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="StoneLock CLI")
    _add_log_level_argument(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser = subparsers.add_parser("demo", help="Rotate every disc, then solve the puzzle")
    demo_parser.add_argument("--in", dest="input_path")
    demo_parser.add_argument("--out", dest="output_path")
    demo_parser.add_argument("--seed", type=int, help="Overrides puzzle.seed from the input file")

    solve_parser = subparsers.add_parser("solve", help="Apply the solution and print the state")
    _add_puzzle_arguments(solve_parser)
    solve_parser.add_argument("--solution", nargs="+", metavar="STONE=SYMBOL")

    clues_parser = subparsers.add_parser("clues", help="Print the solution and one clue per disc")
    _add_puzzle_arguments(clues_parser)

    state_parser = subparsers.add_parser("state", help="Rotate discs and print the state")
    _add_puzzle_arguments(state_parser)
    state_parser.add_argument("--rotate", nargs="+", metavar="STONE=STEPS")

    for subparser in (demo_parser, solve_parser, clues_parser, state_parser):
        _add_log_level_argument(subparser)

    args = parser.parse_args(argv)
    log_level = getattr(args, "log_level", None)
    _configure_logging(log_level or "INFO")

    try:
        if args.command == "demo":
            defaults = _default_paths()
            input_path = Path(args.input_path) if args.input_path else defaults["demo_in"]
            output_path = Path(args.output_path or defaults["demo_out"])
            overrides: dict = {}
            if args.seed is not None:
                overrides["puzzle"] = {"seed": args.seed}
            if log_level is not None:
                overrides["logging"] = {"level": log_level}
            run_puzzle(input_path, output_path, overrides)
            return 0

        if args.command == "solve":
            puzzle = _build(args, _parse_pairs(args.solution, "--solution") or None)
            puzzle.apply_solution()
            print(dumps(puzzle.get_state()))
            return 0

        if args.command == "clues":
            puzzle = _build(args)
            print(dumps({"solution": puzzle.get_solution(), "clues": puzzle.get_clues_for_solution()}))
            return 0

        puzzle = _build(args)
        for stone_type, steps in _parse_pairs(args.rotate, "--rotate").items():
            disc = puzzle.get_disc(stone_type)
            if disc is None:
                logger.warning("No %s disc installed; skipping rotation", stone_type)
                continue
            disc.rotate(int(steps))
        print(dumps(puzzle.get_state()))
        return 0
    except OrientationDataError as exc:
        logger.error("Cannot load orientation data: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
