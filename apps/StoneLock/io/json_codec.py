import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterable

from src.stonelock.disc import Disc
from src.stonelock.models import Clue, StoneSymbol, deep_merge


def load_json(path: str | Path) -> Dict[str, Any]:
    """Load a JSON object, first merging every file named in its ``__include__`` list."""
    return _load_with_includes(Path(path).resolve(), chain=())


def _load_with_includes(path: Path, chain: tuple[Path, ...]) -> Dict[str, Any]:
    if path in chain:
        raise ValueError(f"Circular __include__ detected for {path}")

    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a JSON object")

    merged: Dict[str, Any] = {}
    for include in _include_paths(path, payload.pop("__include__", [])):
        merged = deep_merge(merged, _load_with_includes(include, chain + (path,)))
    return deep_merge(merged, payload)


def _include_paths(base_path: Path, includes: Iterable[str]) -> list[Path]:
    if isinstance(includes, str):
        includes = [includes]
    return [(base_path.parent / include).resolve() for include in includes]


def save_json(path: str | Path, payload: Dict[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(to_jsonable(payload), handle, indent=2, sort_keys=True)
        handle.write("\n")


def dumps(payload: Any) -> str:
    return json.dumps(to_jsonable(payload), indent=2, sort_keys=True)


def _clue_to_dict(clue: Clue) -> Dict[str, Any]:
    return {
        "clue": clue.clue,
        "solution": clue.solution,
        "target_position": clue.target_position,
        "applies_to": sorted(clue.applies_to),
    }


def _symbol_to_dict(symbol: StoneSymbol) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": symbol.id,
        "label": symbol.label,
        "orientations": [_clue_to_dict(clue) for clue in symbol.orientations],
    }
    if symbol.position is not None:
        data["position"] = symbol.position
    if symbol.aligns_with_resonance:
        data["aligns_with_resonance"] = list(symbol.aligns_with_resonance)
    return data


def _disc_to_dict(disc: Disc) -> Dict[str, Any]:
    current = disc.current_symbol()
    return {
        "stone_type": disc.stone_type,
        "rotation": disc.current_rotation,
        "ring": disc.symbol_ids(),
        "current_symbol": current.id if current is not None else None,
    }


def to_jsonable(obj: Any) -> Any:
    """Convert puzzle objects (discs, symbols, clues) and containers into plain JSON types."""
    if isinstance(obj, Disc):
        return _disc_to_dict(obj)
    if isinstance(obj, StoneSymbol):
        return _symbol_to_dict(obj)
    if isinstance(obj, Clue):
        return _clue_to_dict(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {key: to_jsonable(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(value) for value in obj]
    return obj
