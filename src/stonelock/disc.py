from __future__ import annotations

from typing import Sequence

from src.stonelock.models import StoneSymbol


class Disc:
    """A single stone disc: a fixed ring of symbols and one rotation offset.

    ``current_rotation`` is the ring index of the symbol sitting at position 0.
    A symbol at ring index ``i`` therefore sits at position
    ``(i - current_rotation) mod n``.
    """

    def __init__(self, stone_type: str, symbols: Sequence[StoneSymbol]) -> None:
        self.stone_type = stone_type
        self.symbols: tuple[StoneSymbol, ...] = tuple(symbols)
        self.current_rotation = 0

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return f"Disc({self.stone_type!r}, size={len(self.symbols)}, rotation={self.current_rotation})"

    def _index_of(self, symbol_id: str) -> int | None:
        for index, symbol in enumerate(self.symbols):
            if symbol.id == symbol_id:
                return index
        return None

    def symbol_ids(self) -> list[str]:
        return [symbol.id for symbol in self.symbols]

    def find_symbol(self, symbol_id: str) -> StoneSymbol | None:
        index = self._index_of(symbol_id)
        return self.symbols[index] if index is not None else None

    def current_symbol(self) -> StoneSymbol | None:
        if not self.symbols:
            return None
        return self.symbols[self.current_rotation]

    def rotate(self, steps: int = 1) -> None:
        if not self.symbols:
            return
        self.current_rotation = (self.current_rotation + steps) % len(self.symbols)

    def reset(self) -> None:
        self.current_rotation = 0

    def rotation_for_position(self, symbol_id: str, position: int) -> int | None:
        index = self._index_of(symbol_id)
        if index is None:
            return None
        size = len(self.symbols)
        return (index - position) % size

    def set_symbol_to_position(self, symbol_id: str, position: int) -> bool:
        rotation = self.rotation_for_position(symbol_id, position)
        if rotation is None:
            return False
        self.current_rotation = rotation
        return True

    def symbol_position(self, symbol_id: str) -> int | None:
        index = self._index_of(symbol_id)
        if index is None:
            return None
        size = len(self.symbols)
        return (index - self.current_rotation) % size

    def is_symbol_at_position(self, symbol_id: str, position: int) -> bool:
        current = self.symbol_position(symbol_id)
        return current is not None and current == position

    def symbol_at_position(self, position: int) -> StoneSymbol | None:
        if not self.symbols:
            return None
        return self.symbols[(self.current_rotation + position) % len(self.symbols)]
