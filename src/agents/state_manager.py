"""
State Manager Agent — persists the set of asset IDs already alerted on.

Backend: a JSON array at .data/notified_positions.json, written via a temp
file and an atomic rename so a crash mid-write never corrupts it.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from src.config import DEFAULT_DATA_DIR, NOTIFIED_FILENAME

log = logging.getLogger(__name__)

_STATE_PATH = DEFAULT_DATA_DIR / NOTIFIED_FILENAME


def load_notified_ids(path: Path = _STATE_PATH) -> set[str]:
    """
    Load the notified asset IDs from *path*.

    Returns an empty set if the file doesn't exist, is corrupt, or doesn't
    hold a JSON array.
    """
    if not path.exists():
        return set()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.error("Error loading notified positions from %s (%s) — starting empty.", path, exc)
        return set()

    if not isinstance(raw, list):
        log.error("Notified positions file %s does not hold a JSON array — starting empty.", path)
        return set()

    ids = {str(i) for i in raw}
    log.info("Loaded %d already notified position(s).", len(ids))
    return ids


def save_notified_ids(ids: set[str], path: Path = _STATE_PATH) -> bool:
    """Persist *ids* to *path*. Returns False (after logging) if the write failed."""
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(sorted(ids), indent=2), encoding="utf-8")
        tmp.replace(path)
    except OSError as exc:
        log.error("Error saving notified positions to %s: %s", path, exc)
        return False

    log.info("Saved %d notified position(s) to disk.", len(ids))
    return True
