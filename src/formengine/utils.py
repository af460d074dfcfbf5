"""Utility functions for formengine"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_now(timezone: ZoneInfo = UTC) -> datetime:
    """Get current time in specified timezone

    Args:
        timezone: Timezone object

    Returns:
        Current time with timezone info
    """
    return datetime.now(timezone)


def new_id() -> str:
    return str(uuid.uuid4())


def is_number(value: Any) -> bool:
    """True for int/float values; bools are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_empty(value: Any) -> bool:
    """Emptiness shared by the visibility and validation engines.

    None, blank-after-strip strings and zero-length lists/tuples are empty;
    everything else (including 0 and False) is not.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False
