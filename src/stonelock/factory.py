from __future__ import annotations

from typing import Any, Iterable, Mapping

import numpy as np

from src.stonelock.constants import BASIC_STONES, FULL_STONES, INTERMEDIATE_STONES
from src.stonelock.puzzle import StonePuzzle


class PuzzleFactory:
    """Preset puzzle layouts: one, two or three discs, or a custom list."""

    @staticmethod
    def create_basic_puzzle(*, orientations: Any = None, rng: np.random.Generator | None = None) -> StonePuzzle:
        return PuzzleFactory.create_custom_puzzle(BASIC_STONES, orientations=orientations, rng=rng)

    @staticmethod
    def create_intermediate_puzzle(
        *, orientations: Any = None, rng: np.random.Generator | None = None
    ) -> StonePuzzle:
        return PuzzleFactory.create_custom_puzzle(INTERMEDIATE_STONES, orientations=orientations, rng=rng)

    @staticmethod
    def create_full_puzzle(*, orientations: Any = None, rng: np.random.Generator | None = None) -> StonePuzzle:
        return PuzzleFactory.create_custom_puzzle(FULL_STONES, orientations=orientations, rng=rng)

    @staticmethod
    def create_custom_puzzle(
        stones: Iterable[str],
        solution: Mapping[str, str] | None = None,
        *,
        orientations: Any = None,
        rng: np.random.Generator | None = None,
    ) -> StonePuzzle:
        puzzle = StonePuzzle(orientations=orientations, rng=rng)
        for stone_type in stones:
            puzzle.add_disc(stone_type)

        if solution is not None:
            puzzle.set_solution(solution)
        else:
            puzzle.generate_random_solution()
        return puzzle
