from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass(frozen=True)
class PuzzleReportSchema:
    meta: Dict[str, Any]
    solution: Dict[str, Any]
    clues: List[str]
    discs: List[Dict[str, Any]]
    initial_state: Dict[str, Any]
    final_state: Dict[str, Any]


PUZZLE_REPORT_KEYS = PuzzleReportSchema(
    meta={"app": "", "case_id": "", "stage": "demo", "timestamp": ""},
    solution={},
    clues=[],
    discs=[],
    initial_state={"discs": [], "is_solved": None, "solution": {}},
    final_state={"discs": [], "is_solved": None, "solution": {}},
)


def timestamp_utc() -> str:
    return datetime.now(timezone.utc).isoformat()
