# MozDef index naming

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from mozdef_search.core.time import as_utc, utc_now


# ========== Index constants ==========
INDEX_PATTERNS = {
    "EVENTS": "events",
}

# backend document type per search mode
DOC_TYPES = {
    "audit": "auditd",
    "syslog": "event",
}

_DAY = timedelta(hours=24)


def get_index_name(pattern: str, date: Optional[datetime] = None) -> str:
    """
    Build a day-bucketed index name, e.g. ``events-20240131``.

    MozDef rolls its event indices daily and names them without separators
    between the date parts.
    """
    if date is None:
        date = utc_now()
    return f"{pattern}-{as_utc(date).strftime('%Y%m%d')}"


def enumerate_indices(
    start: datetime,
    end: datetime,
    pattern: str = INDEX_PATTERNS["EVENTS"],
) -> list[str]:
    """
    List every daily index touched by ``[start, end]`` in chronological order.

    Walks forward from ``start`` in 24 hour steps; once fewer than 24 hours
    remain before ``end``, the index for ``end``'s own day closes the list.
    Always returns at least one name.
    """
    start = as_utc(start)
    end = as_utc(end)

    indices: list[str] = []
    cursor = start
    while True:
        indices.append(get_index_name(pattern, cursor))
        if end - cursor < _DAY:
            last = get_index_name(pattern, end)
            if last not in indices:
                indices.append(last)
            return indices
        cursor += _DAY
