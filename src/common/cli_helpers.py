"""Common CLI helper utilities."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone


def setup_logging() -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def utc_today(now: datetime | None = None) -> date:
    """Return the UTC calendar date for `now` (default: the current time)."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date()
