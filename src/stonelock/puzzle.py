from __future__ import annotations

import logging
from math import floor
from pathlib import Path
from typing import Any, Mapping, Protocol

import numpy as np

from src.stonelock.disc import Disc
from src.stonelock.loader import load_orientations
from src.stonelock.models import Clue, OrientationDocument, StoneSymbol

logger = logging.getLogger(__name__)


class SymbolSource(Protocol):
    def symbols_for(self, stone_type: str) -> tuple[StoneSymbol, ...] | None:
        ...


def rescale_position(position: int, from_size: int, to_size: int) -> int:
    """Map a slot on a ring of ``from_size`` onto a ring of ``to_size``."""
    if from_size <= 0 or to_size <= 0:
        return 0
    return floor(position * to_size / from_size + 0.5) % to_size


def _resolve_source(orientations: Any) -> SymbolSource:
    if orientations is None:
        return load_orientations()
    if isinstance(orientations, (str, Path)):
        return load_orientations(orientations)
    if isinstance(orientations, Mapping):
        return OrientationDocument.from_dict(dict(orientations))
    if hasattr(orientations, "symbols_for"):
        return orientations
    raise TypeError(f"Unsupported orientation source: {type(orientations).__name__}")


def _foundation_position(symbol: StoneSymbol) -> int:
    if symbol.orientations:
        return symbol.orientations[0].target_position
    if symbol.position is not None:
        return symbol.position_index
    return 0


class StonePuzzle:
    """A set of discs plus the solution they must be turned to.

    Discs form a chain in installation order. The first disc is the
    foundation: its symbols carry absolute target positions. Every later disc
    resolves its target position from the clue that applies to the solution
    symbol of the disc before it.
    """

    def __init__(
        self,
        orientations: SymbolSource | Mapping[str, Any] | str | Path | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        self.orientations = _resolve_source(orientations)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._discs: dict[str, Disc] = {}
        self._solution: dict[str, str] = {}

    # -- discs -----------------------------------------------------------

    def add_disc(self, stone_type: str) -> Disc | None:
        symbols = self.orientations.symbols_for(stone_type)
        if symbols is None:
            logger.warning("No symbol ring defined for stone type %r", stone_type)
            return None
        disc = Disc(stone_type, symbols)
        self._discs[stone_type] = disc
        logger.debug("Added %s disc with %d symbols", stone_type, len(disc))
        return disc

    def remove_disc(self, stone_type: str) -> bool:
        return self._discs.pop(stone_type, None) is not None

    def get_disc(self, stone_type: str) -> Disc | None:
        return self._discs.get(stone_type)

    def all_discs(self) -> list[Disc]:
        return list(self._discs.values())

    def foundation_stone(self) -> str | None:
        return next(iter(self._discs), None)

    def _previous_stone(self, stone_type: str) -> str | None:
        chain = list(self._discs)
        if stone_type not in chain:
            return None
        index = chain.index(stone_type)
        return chain[index - 1] if index > 0 else None

    def reset(self) -> None:
        for disc in self._discs.values():
            disc.reset()

    # -- solution --------------------------------------------------------

    def generate_random_solution(self) -> None:
        self._solution = {}
        for stone_type, disc in self._discs.items():
            if not disc.symbols:
                continue
            choice = int(self.rng.integers(len(disc.symbols)))
            self._solution[stone_type] = disc.symbols[choice].id
        logger.debug("Generated solution %s", self._solution)

    def set_solution(self, solution: Mapping[str, str]) -> None:
        self._solution = {stone_type: symbol_id for stone_type, symbol_id in solution.items()}

    def get_solution(self) -> dict[str, str]:
        return dict(self._solution)

    # -- alignment -------------------------------------------------------

    def _valid_clues(self, stone_type: str, symbol: StoneSymbol) -> list[Clue]:
        previous = self._previous_stone(stone_type)
        if previous is None:
            return list(symbol.orientations)
        previous_symbol_id = self._solution.get(previous)
        return [clue for clue in symbol.orientations if clue.applies_to_symbol(previous_symbol_id)]

    def _target_clues(self, stone_type: str, symbol: StoneSymbol) -> list[Clue]:
        """Valid clues that agree with the first valid clue on the target slot."""
        valid = self._valid_clues(stone_type, symbol)
        if not valid:
            return []
        target = valid[0].target_position
        return [clue for clue in valid if clue.target_position == target]

    def effective_target_position(self, stone_type: str, symbol_id: str | None = None) -> int | None:
        """Position the solution symbol of ``stone_type`` must occupy, or None."""
        disc = self._discs.get(stone_type)
        if disc is None:
            return None
        if symbol_id is None:
            symbol_id = self._solution.get(stone_type)
            if symbol_id is None:
                return None
        symbol = disc.find_symbol(symbol_id)
        if symbol is None:
            return None

        previous = self._previous_stone(stone_type)
        if previous is None:
            return _foundation_position(symbol) % len(disc)

        clues = self._valid_clues(stone_type, symbol)
        if not clues:
            return None
        return rescale_position(clues[0].target_position, len(self._discs[previous]), len(disc))

    def is_solved(self) -> bool:
        if not self._solution:
            return False
        for stone_type, symbol_id in self._solution.items():
            disc = self._discs.get(stone_type)
            if disc is None:
                return False
            position = self.effective_target_position(stone_type, symbol_id)
            if position is None or not disc.is_symbol_at_position(symbol_id, position):
                return False
        return True

    def apply_solution(self) -> None:
        for stone_type, symbol_id in self._solution.items():
            disc = self._discs.get(stone_type)
            if disc is None:
                continue
            position = self.effective_target_position(stone_type, symbol_id)
            if position is None:
                logger.debug("No target position resolved for %s=%s", stone_type, symbol_id)
                continue
            disc.set_symbol_to_position(symbol_id, position)

    def get_clues_for_solution(self) -> list[str]:
        clues: list[str] = []
        for stone_type, symbol_id in self._solution.items():
            disc = self._discs.get(stone_type)
            if disc is None:
                continue
            symbol = disc.find_symbol(symbol_id)
            if symbol is None:
                continue
            candidates = self._target_clues(stone_type, symbol)
            if not candidates:
                continue
            clues.append(candidates[int(self.rng.integers(len(candidates)))].clue)
        return clues

    # -- resonance alignment ---------------------------------------------

    def _resonance_slot(self, stone_type: str, resonance_id: str) -> tuple[Disc, int] | None:
        foundation = self.foundation_stone()
        if foundation is None or stone_type == foundation:
            return None
        target = self._discs.get(stone_type)
        if target is None:
            return None
        foundation_disc = self._discs[foundation]
        resonance_position = foundation_disc.symbol_position(resonance_id)
        if resonance_position is None:
            return None
        return target, rescale_position(resonance_position, len(foundation_disc), len(target))

    def is_alignment_valid(self, stone_type: str, symbol_id: str, resonance_id: str) -> bool:
        """True if ``symbol_id`` currently lines up with the foundation's ``resonance_id``."""
        slot = self._resonance_slot(stone_type, resonance_id)
        if slot is None:
            return False
        target, position = slot
        return target.is_symbol_at_position(symbol_id, position)

    def align_symbol_with_resonance(self, stone_type: str, symbol_id: str, resonance_id: str) -> bool:
        slot = self._resonance_slot(stone_type, resonance_id)
        if slot is None:
            return False
        target, position = slot
        return target.set_symbol_to_position(symbol_id, position)

    # -- snapshot --------------------------------------------------------

    def get_state(self) -> dict[str, Any]:
        discs = []
        for stone_type, disc in self._discs.items():
            current = disc.current_symbol()
            discs.append(
                {
                    "stone_type": stone_type,
                    "current_symbol": current.id if current is not None else "unknown",
                    "current_label": current.label if current is not None else "Unknown",
                }
            )
        return {
            "discs": discs,
            "is_solved": self.is_solved(),
            "solution": self.get_solution(),
        }
