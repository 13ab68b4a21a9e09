from __future__ import annotations

import json
import logging
from pathlib import Path

from src.stonelock.constants import DEFAULT_ORIENTATIONS_PATH
from src.stonelock.models import OrientationDataError, OrientationDocument

logger = logging.getLogger(__name__)


def load_orientations(path: str | Path | None = None) -> OrientationDocument:
    path = Path(path) if path is not None else DEFAULT_ORIENTATIONS_PATH
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise OrientationDataError(f"Orientation document not found: {path}") from exc
    except OSError as exc:
        raise OrientationDataError(f"Orientation document {path} could not be read: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise OrientationDataError(f"Orientation document {path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise OrientationDataError(f"Orientation document {path} is not valid JSON: {exc}") from exc

    document = OrientationDocument.from_dict(payload)
    logger.debug("Loaded orientation document %s (%s)", path, ", ".join(document.stones))
    return document
