from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import numpy as np

from apps.StoneLock.io.json_codec import dumps, load_json, save_json, to_jsonable
from apps.StoneLock.io.schemas import PUZZLE_REPORT_KEYS, timestamp_utc
from src.stonelock.factory import PuzzleFactory
from src.stonelock.models import PuzzleInput, deep_merge
from src.stonelock.puzzle import StonePuzzle

logger = logging.getLogger(__name__)

PACKAGE_LOGGERS = ("src.stonelock", "apps.StoneLock")


def set_package_log_level(level: str) -> int:
    """Apply ``level`` to the StoneLock package loggers and return its numeric value."""
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(value)
    return value


def _resolve_orientations(puzzle_input: PuzzleInput, base_dir: Path | None) -> Path | None:
    if not puzzle_input.orientations_path:
        return None
    path = Path(puzzle_input.orientations_path)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def build_puzzle(puzzle_input: PuzzleInput, base_dir: Path | None = None) -> StonePuzzle:
    return PuzzleFactory.create_custom_puzzle(
        puzzle_input.stones,
        puzzle_input.solution,
        orientations=_resolve_orientations(puzzle_input, base_dir),
        rng=np.random.default_rng(puzzle_input.seed),
    )


def _validate_report(report: Dict[str, Any]) -> None:
    expected = to_jsonable(PUZZLE_REPORT_KEYS)
    missing = [key for key in expected if key not in report]
    if missing:
        raise ValueError(f"Report is missing keys: {', '.join(missing)}")


def run_demo(puzzle: StonePuzzle, rotate_steps: int = 1) -> Dict[str, Any]:
    """Rotate every disc once, then solve the puzzle, logging each step."""
    initial_state = puzzle.get_state()
    logger.info("Initial puzzle state and solution:\n%s", dumps(initial_state))
    clues = puzzle.get_clues_for_solution()
    for clue in clues:
        logger.info("Clue: %s", clue)

    rotations = []
    for disc in puzzle.all_discs():
        logger.info("Current state before rotating %s:\n%s", disc.stone_type, dumps(puzzle.get_state()))
        disc.rotate(rotate_steps)
        state = puzzle.get_state()
        rotations.append({"stone_type": disc.stone_type, "steps": rotate_steps, "state": state})
        logger.info("State after rotating %s:\n%s", disc.stone_type, dumps(state))

    logger.info("Now solving the puzzle using proper alignment")
    puzzle.apply_solution()
    final_state = puzzle.get_state()
    logger.info("Puzzle solved=%s:\n%s", final_state["is_solved"], dumps(final_state))

    return {
        "solution": puzzle.get_solution(),
        "clues": clues,
        "initial_state": initial_state,
        "rotations": rotations,
        "final_state": final_state,
        "discs": to_jsonable(puzzle.all_discs()),
    }


def run_puzzle(
    input_path: str | Path | None,
    output_path: str | Path | None = None,
    overrides: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Run the demo for an input file. ``overrides`` is merged over the file contents."""
    payload: Dict[str, Any] = {}
    base_dir = None
    if input_path is not None:
        payload = load_json(input_path)
        base_dir = Path(input_path).resolve().parent
    if overrides:
        payload = deep_merge(payload, overrides)

    puzzle_input = PuzzleInput.from_dict(payload)
    set_package_log_level(puzzle_input.log_level)
    puzzle = build_puzzle(puzzle_input, base_dir)

    report = run_demo(puzzle, puzzle_input.rotate_steps)
    report["meta"] = {
        "app": puzzle_input.meta.get("app", "StoneLock"),
        "case_id": puzzle_input.meta.get("case_id", ""),
        "stage": "demo",
        "timestamp": timestamp_utc(),
    }
    _validate_report(report)

    if output_path is not None:
        save_json(output_path, to_jsonable(report))
        logger.info("Wrote report to %s", output_path)
    return report


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run the StoneLock demo pipeline")
    parser.add_argument("--in", dest="input_path")
    parser.add_argument("--out", dest="output_path")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    run_puzzle(args.input_path, args.output_path)
