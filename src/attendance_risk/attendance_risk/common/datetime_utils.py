from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date."""
    value = value.strip()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()


def days_between(earlier: date, later: date) -> int:
    """Whole days from ``earlier`` to ``later``, never negative."""
    return max((later - earlier).days, 0)
