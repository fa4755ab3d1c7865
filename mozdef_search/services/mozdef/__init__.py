"""
MozDef event store search

Public interface:
  - build_query(): criteria -> bool query (pure)
  - enumerate_indices(): daily index names covering a date range
  - run_query(): fetch and normalize every matching event, index by index
  - iter_events(): streaming variant of run_query()
  - normalize(): resolve aliased event fields
  - render(): mode specific summary lines

Connections are created through connect(settings); fetch functions take a
zero-argument factory so tests can substitute a scripted backend.
"""

from .client import EventStoreConnection, connect
from .fetch import fetch_index, iter_events, iter_index_events, run_query
from .index import DOC_TYPES, INDEX_PATTERNS, enumerate_indices, get_index_name
from .normalize import normalize
from .query import (
    DOCS_PER_SEARCH,
    SearchCriteria,
    SearchQuery,
    build_audit_search,
    build_query,
    build_syslog_search,
)
from .render import render

__all__ = [
    "EventStoreConnection",
    "connect",
    "fetch_index",
    "iter_events",
    "iter_index_events",
    "run_query",
    "DOC_TYPES",
    "INDEX_PATTERNS",
    "enumerate_indices",
    "get_index_name",
    "normalize",
    "DOCS_PER_SEARCH",
    "SearchCriteria",
    "SearchQuery",
    "build_audit_search",
    "build_query",
    "build_syslog_search",
    "render",
]
