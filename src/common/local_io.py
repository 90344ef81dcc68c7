"""Local file I/O utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from common.hashing import content_hash
from common.serialization import dumps_stable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a change-aware write."""
    path: Path
    changed: bool


def read_text_if_exists(path: Path) -> str | None:
    """Return the file's text, or None if it is absent or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s, treating as changed: %s", path, e)
        return None


def write_json_if_changed(path: str | Path, data: Any) -> WriteResult:
    """
    Serialize `data` as stable JSON and write it only when it differs on disk.

    Parent directories are created whether or not a write happens. Errors from
    the write itself propagate to the caller.

    Args:
        path: Target file path
        data: JSON-serializable data (dicts, lists, scalars)

    Returns:
        WriteResult with changed=False when the existing content is identical
    """
    path = Path(path)
    new_text = dumps_stable(data)

    path.parent.mkdir(parents=True, exist_ok=True)

    old_text = read_text_if_exists(path)
    if old_text is not None and content_hash(old_text) == content_hash(new_text):
        return WriteResult(path=path, changed=False)

    path.write_text(new_text, encoding="utf-8")
    return WriteResult(path=path, changed=True)
