from copy import deepcopy
from pathlib import Path

CAVERNSTONE = "cavernstone"
GODSTONE = "godstone"
WORLDSTONE = "worldstone"

STONE_TYPES = (CAVERNSTONE, GODSTONE, WORLDSTONE)

BASIC_STONES = [CAVERNSTONE]
INTERMEDIATE_STONES = [CAVERNSTONE, GODSTONE]
FULL_STONES = [CAVERNSTONE, GODSTONE, WORLDSTONE]

RESONANCE_PREFIX = "resonance_"

DEFAULT_ORIENTATIONS_PATH = Path(__file__).resolve().parent / "resources" / "orientations.json"

DEFAULT_SETTINGS = {
    "meta": {
        "app": "StoneLock",
        "case_id": "",
    },
    "puzzle": {
        "stones": list(FULL_STONES),
        "solution": None,
        "seed": None,
        "orientations_path": None,
    },
    "demo": {
        "rotate_steps": 1,
    },
    "logging": {
        "level": "INFO",
    },
}


def default_settings() -> dict:
    return deepcopy(DEFAULT_SETTINGS)
