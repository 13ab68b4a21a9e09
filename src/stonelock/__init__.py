from src.stonelock.disc import Disc
from src.stonelock.factory import PuzzleFactory
from src.stonelock.loader import load_orientations
from src.stonelock.models import (
    Clue,
    HornInfo,
    OrientationDataError,
    OrientationDocument,
    PuzzleInput,
    StoneData,
    StoneSymbol,
)
from src.stonelock.positions import InvalidPositionError, PositionMapper
from src.stonelock.puzzle import StonePuzzle, rescale_position

__all__ = [
    "Clue",
    "Disc",
    "HornInfo",
    "InvalidPositionError",
    "OrientationDataError",
    "OrientationDocument",
    "PositionMapper",
    "PuzzleFactory",
    "PuzzleInput",
    "StoneData",
    "StonePuzzle",
    "StoneSymbol",
    "load_orientations",
    "rescale_position",
]
