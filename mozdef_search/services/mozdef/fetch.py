"""
Paginated retrieval of MozDef events across daily indices.

Each index is read page by page (``DOCS_PER_SEARCH`` documents per request)
until the store answers with an empty page. Every hit is decoded into an
``Event`` and normalized before it reaches the caller. The first failure,
whether from the transport or from decoding, aborts the whole run.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterator, List

from pydantic import ValidationError

from mozdef_search.core.errors import EventDecodeError
from mozdef_search.schemas.event import Event
from .client import EventStoreConnection
from .index import enumerate_indices
from .normalize import normalize
from .query import DOCS_PER_SEARCH, SearchQuery


_LOGGER = logging.getLogger(__name__)

ConnectionFactory = Callable[[], EventStoreConnection]


def _page_hits(response: Any) -> List[Any]:
    hits = (response or {}).get("hits", {}).get("hits", [])
    return list(hits or [])


def decode_hit(hit: Any, index: str) -> Event:
    source = hit.get("_source") if isinstance(hit, dict) else None
    if not isinstance(source, dict):
        raise EventDecodeError(index, "hit has no _source document")
    try:
        return Event.model_validate(source)
    except ValidationError as exc:
        raise EventDecodeError(index, str(exc)) from exc


def iter_index_events(
    conn: EventStoreConnection,
    query: SearchQuery,
    index: str,
    doc_type: str,
) -> Iterator[Event]:
    offset = 0
    while True:
        page = query.with_offset(offset)
        _LOGGER.debug("searching %s/%s from=%d size=%d", index, doc_type, page.from_, page.size)
        hits = _page_hits(conn.search(index, doc_type, page.to_body()))
        # a short page is not the end; only an empty one is
        if not hits:
            return
        for hit in hits:
            yield normalize(decode_hit(hit, index))
        offset += DOCS_PER_SEARCH


def fetch_index(
    query: SearchQuery,
    index: str,
    doc_type: str,
    results: List[Event],
    *,
    connect: ConnectionFactory,
) -> int:
    """Append every event of ``index`` to ``results``; returns how many were added."""
    before = len(results)
    with connect() as conn:
        results.extend(iter_index_events(conn, query, index, doc_type))
    added = len(results) - before
    _LOGGER.info("fetched %d events from %s", added, index)
    return added


def iter_events(
    query: SearchQuery,
    doc_type: str,
    start: datetime,
    end: datetime,
    *,
    connect: ConnectionFactory,
) -> Iterator[Event]:
    """Stream normalized events index by index without buffering them."""
    for index in enumerate_indices(start, end):
        with connect() as conn:
            yield from iter_index_events(conn, query, index, doc_type)


def run_query(
    query: SearchQuery,
    doc_type: str,
    start: datetime,
    end: datetime,
    *,
    connect: ConnectionFactory,
) -> List[Event]:
    results: List[Event] = []
    indices = enumerate_indices(start, end)
    _LOGGER.debug("searching %d indices: %s", len(indices), ", ".join(indices))
    for index in indices:
        fetch_index(query, index, doc_type, results, connect=connect)
    return results
