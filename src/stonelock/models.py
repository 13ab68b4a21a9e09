from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from src.stonelock.constants import RESONANCE_PREFIX, STONE_TYPES, default_settings
from src.stonelock.positions import InvalidPositionError, PositionMapper


class OrientationDataError(ValueError):
    pass


def deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise OrientationDataError(f"{where} must be an object")
    if key not in data:
        raise OrientationDataError(f"{where}.{key} is required")
    return data[key]


def _string_list(data: Mapping[str, Any], key: str, where: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise OrientationDataError(f"{where}.{key} must be a list")
    return tuple(str(item) for item in value)


def solution_mentions(solution_text: str, symbol_id: str) -> bool:
    """Legacy context rule: does a clue's solution text name ``symbol_id``?

    ``resonance_<kind>`` ids match on ``<kind>``; other ids match on the id
    itself or its underscore-to-space form. Case-insensitive.
    """
    text = solution_text.lower()
    sid = symbol_id.lower()
    if sid.startswith(RESONANCE_PREFIX):
        return sid[len(RESONANCE_PREFIX):] in text
    return sid in text or sid.replace("_", " ") in text


def derive_applies_to(solution_text: str, candidate_ids: Iterable[str]) -> frozenset[str]:
    return frozenset(sid for sid in candidate_ids if solution_mentions(solution_text, sid))


@dataclass(frozen=True)
class Clue:
    clue: str
    solution: str
    target_position: int
    applies_to: frozenset[str] = frozenset()

    def applies_to_symbol(self, symbol_id: str | None) -> bool:
        return symbol_id is not None and symbol_id in self.applies_to

    @classmethod
    def from_dict(cls, data: dict, candidate_ids: Iterable[str] = (), where: str = "clue") -> "Clue":
        solution = str(_require(data, "solution", where))
        target_position = _require(data, "target_position", where)
        if isinstance(target_position, bool) or not isinstance(target_position, int):
            raise OrientationDataError(f"{where}.target_position must be an integer")

        explicit = _string_list(data, "applies_to", where)
        if explicit is not None:
            applies_to = frozenset(explicit)
        else:
            applies_to = derive_applies_to(solution, candidate_ids)

        return cls(
            clue=str(_require(data, "clue", where)),
            solution=solution,
            target_position=target_position,
            applies_to=applies_to,
        )


@dataclass(frozen=True)
class StoneSymbol:
    id: str
    label: str
    orientations: tuple[Clue, ...] = ()
    position: str | None = None
    aligns_with_resonance: tuple[str, ...] = ()

    @property
    def position_index(self) -> int | None:
        if self.position is None:
            return None
        return PositionMapper.get_position_index(self.position)

    @classmethod
    def from_dict(
        cls,
        data: dict,
        candidate_ids: Iterable[str] = (),
        where: str = "symbol",
    ) -> "StoneSymbol":
        candidates = tuple(candidate_ids)
        symbol_id = str(_require(data, "id", where))
        where = f"{where}[{symbol_id}]"
        raw_orientations = data.get("orientations", [])
        if not isinstance(raw_orientations, list):
            raise OrientationDataError(f"{where}.orientations must be a list")

        position = data.get("position")
        if position is not None:
            try:
                PositionMapper.get_position_index(position)
            except InvalidPositionError as exc:
                raise OrientationDataError(f"{where}.position: {exc}") from exc

        return cls(
            id=symbol_id,
            label=str(data.get("label", symbol_id)),
            orientations=tuple(
                Clue.from_dict(item, candidates, where=f"{where}.orientations[{i}]")
                for i, item in enumerate(raw_orientations)
            ),
            position=position,
            aligns_with_resonance=_string_list(data, "aligns_with_resonance", where) or (),
        )


@dataclass(frozen=True)
class StoneData:
    symbols: tuple[StoneSymbol, ...]
    note: str | None = None

    @classmethod
    def from_dict(cls, data: dict, candidate_ids: Iterable[str] = (), where: str = "stone") -> "StoneData":
        raw_symbols = _require(data, "symbols", where)
        if not isinstance(raw_symbols, list):
            raise OrientationDataError(f"{where}.symbols must be a list")
        candidates = tuple(candidate_ids)
        return cls(
            symbols=tuple(
                StoneSymbol.from_dict(item, candidates, where=f"{where}.symbols")
                for item in raw_symbols
            ),
            note=data.get("note"),
        )


@dataclass(frozen=True)
class HornInfo:
    description: str = ""
    sample_clues: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict | None) -> "HornInfo":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise OrientationDataError("horn must be an object")
        return cls(
            description=str(data.get("description", "")),
            sample_clues=_string_list(data, "sample_clues", "horn") or (),
        )


@dataclass(frozen=True)
class OrientationDocument:
    """Parsed orientation document: one symbol ring per stone type."""

    stones: dict[str, StoneData]
    horn: HornInfo = field(default_factory=HornInfo)

    def symbols_for(self, stone_type: str) -> tuple[StoneSymbol, ...] | None:
        stone = self.stones.get(stone_type)
        if stone is None:
            return None
        return stone.symbols

    @classmethod
    def from_dict(cls, data: dict) -> "OrientationDocument":
        if not isinstance(data, Mapping):
            raise OrientationDataError("orientation document must be an object")
        present = [stone_type for stone_type in STONE_TYPES if stone_type in data]
        if not present:
            raise OrientationDataError(
                f"orientation document defines none of: {', '.join(STONE_TYPES)}"
            )

        ids_by_stone: dict[str, list[str]] = {}
        for stone_type in present:
            raw_symbols = _require(data[stone_type], "symbols", stone_type)
            if not isinstance(raw_symbols, list):
                raise OrientationDataError(f"{stone_type}.symbols must be a list")
            ids_by_stone[stone_type] = [
                str(_require(item, "id", f"{stone_type}.symbols")) for item in raw_symbols
            ]

        stones = {}
        for stone_type in present:
            # clue tags are resolved against every other ring in the document
            candidates = [
                sid
                for other, ids in ids_by_stone.items()
                if other != stone_type
                for sid in ids
            ]
            stones[stone_type] = StoneData.from_dict(data[stone_type], candidates, where=stone_type)

        return cls(stones=stones, horn=HornInfo.from_dict(data.get("horn")))


@dataclass(frozen=True)
class PuzzleInput:
    stones: list[str]
    solution: dict[str, str] | None
    seed: int | None
    orientations_path: str | None
    rotate_steps: int
    meta: dict[str, Any]
    log_level: str

    @classmethod
    def from_dict(cls, data: dict) -> "PuzzleInput":
        settings = deep_merge(default_settings(), data)
        puzzle = settings["puzzle"]
        stones = puzzle.get("stones")
        if not stones:
            raise ValueError("puzzle.stones must list at least one stone type")
        seed = puzzle.get("seed")
        solution = puzzle.get("solution")
        return cls(
            stones=[str(stone) for stone in stones],
            solution={str(k): str(v) for k, v in solution.items()} if solution else None,
            seed=int(seed) if seed is not None else None,
            orientations_path=puzzle.get("orientations_path"),
            rotate_steps=int(settings["demo"]["rotate_steps"]),
            meta=settings["meta"],
            log_level=str(settings["logging"]["level"]),
        )
