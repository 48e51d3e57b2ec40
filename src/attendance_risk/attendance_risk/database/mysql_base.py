from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional

from .connection import DatabaseConnection


@contextmanager
def read_cursor(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Dictionary cursor on a fresh connection; nothing is committed."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        try:
            yield cur
        finally:
            cur.close()
    finally:
        conn.close()


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_date(value: Any) -> Optional[str]:
    """Render DATE/DATETIME columns as ISO dates.

    mysql-connector returns DATE as ``datetime.date`` but some drivers and
    views hand back strings or ``datetime``; the ingestion layer parses
    the ISO form either way.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
