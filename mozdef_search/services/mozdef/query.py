"""
MozDef search query construction

Translates the command line criteria into the bool query body sent to the
event store. Nothing here touches the network.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List

from mozdef_search.core.errors import InputError
from mozdef_search.core.time import as_utc, format_rfc3339


DOCS_PER_SEARCH = 100

TIMESTAMP_FIELD = "utctimestamp"

# fields searched by the hostname regex, in clause order
HOSTNAME_FIELDS = ("hostname", "details.dhost", "details.hostname")

MODES = ("audit", "syslog")


@dataclass(frozen=True)
class SearchCriteria:
    start: datetime
    end: datetime
    mode: str
    hostmatch: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.mode not in MODES:
            raise InputError(f"unknown search mode: {self.mode!r}")
        if self.start > self.end:
            raise InputError(
                f"start date {format_rfc3339(self.start)} is after end date "
                f"{format_rfc3339(self.end)}"
            )


@dataclass(frozen=True)
class SearchQuery:
    must: List[Dict[str, Any]] = field(default_factory=list)
    should: List[Dict[str, Any]] = field(default_factory=list)
    minimum_should_match: int = 1
    from_: int = 0
    size: int = DOCS_PER_SEARCH
    sort: Dict[str, str] = field(default_factory=lambda: {TIMESTAMP_FIELD: "asc"})

    def with_offset(self, offset: int) -> "SearchQuery":
        return replace(self, from_=offset)

    def to_body(self) -> Dict[str, Any]:
        bool_query: Dict[str, Any] = {"must": copy.deepcopy(self.must)}
        if self.should:
            bool_query["should"] = copy.deepcopy(self.should)
            bool_query["minimum_should_match"] = self.minimum_should_match
        return {
            "from": self.from_,
            "size": self.size,
            "sort": dict(self.sort),
            "query": {"bool": bool_query},
        }


def _time_range(start: datetime, end: datetime) -> Dict[str, Any]:
    return {
        "range": {
            TIMESTAMP_FIELD: {
                "gte": format_rfc3339(start),
                "lte": format_rfc3339(end),
            }
        }
    }


def _regexp_clause(field_name: str, pattern: str) -> Dict[str, Any]:
    # pattern is passed through verbatim; a malformed regex fails on the backend
    return {"query_string": {"query": f"{field_name}: /{pattern}/"}}


def _match(key: str, value: str) -> Dict[str, Any]:
    return {"match": {key: value}}


def _mode_clauses(mode: str) -> List[Dict[str, Any]]:
    if mode == "audit":
        return [_match("_type", "auditd")]
    return [_match("_type", "event"), _match("category", "syslog")]


def build_query(criteria: SearchCriteria) -> SearchQuery:
    """
    Build the search query for ``criteria``.

    The bool query always requires the UTC timestamp range. A non-empty
    hostname pattern adds three alternative regex clauses (hostname,
    details.dhost, details.hostname) of which at least one must match. The
    mode then adds its document type discriminator, and for syslog the
    category as well.
    """
    must = [_time_range(criteria.start, criteria.end)]
    should: List[Dict[str, Any]] = []
    if criteria.hostmatch:
        should = [_regexp_clause(f, criteria.hostmatch) for f in HOSTNAME_FIELDS]
    must.extend(_mode_clauses(criteria.mode))
    return SearchQuery(must=must, should=should, minimum_should_match=1)


def build_audit_search(start: datetime, end: datetime, hostmatch: str = "") -> SearchQuery:
    return build_query(SearchCriteria(start=start, end=end, mode="audit", hostmatch=hostmatch))


def build_syslog_search(start: datetime, end: datetime, hostmatch: str = "") -> SearchQuery:
    return build_query(SearchCriteria(start=start, end=end, mode="syslog", hostmatch=hostmatch))
