from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mozdef_search.core.errors import InputError
from mozdef_search.services.mozdef import (
    DOCS_PER_SEARCH,
    SearchCriteria,
    build_audit_search,
    build_query,
    build_syslog_search,
)


pytestmark = [pytest.mark.unit]

START = datetime(2024, 1, 30, 0, 0, 0, tzinfo=timezone.utc)
END = datetime(2024, 1, 31, 12, 30, 0, tzinfo=timezone.utc)

TIME_RANGE = {"range": {"utctimestamp": {"gte": "2024-01-30T00:00:00Z", "lte": "2024-01-31T12:30:00Z"}}}


def test_audit_query_without_hostmatch() -> None:
    query = build_query(SearchCriteria(start=START, end=END, mode="audit"))

    assert query.must == [TIME_RANGE, {"match": {"_type": "auditd"}}]
    assert query.should == []
    assert query.from_ == 0
    assert query.size == DOCS_PER_SEARCH == 100
    assert query.sort == {"utctimestamp": "asc"}


def test_syslog_query_requires_type_and_category() -> None:
    query = build_query(SearchCriteria(start=START, end=END, mode="syslog"))

    assert query.must == [
        TIME_RANGE,
        {"match": {"_type": "event"}},
        {"match": {"category": "syslog"}},
    ]


def test_hostmatch_adds_three_should_clauses() -> None:
    query = build_query(SearchCriteria(start=START, end=END, mode="audit", hostmatch="web[0-9]+"))

    assert query.should == [
        {"query_string": {"query": "hostname: /web[0-9]+/"}},
        {"query_string": {"query": "details.dhost: /web[0-9]+/"}},
        {"query_string": {"query": "details.hostname: /web[0-9]+/"}},
    ]
    assert query.minimum_should_match == 1
    # the hostname filter never becomes a required clause
    assert len(query.must) == 2


def test_hostmatch_is_not_escaped() -> None:
    query = build_syslog_search(START, END, hostmatch="a/b(")
    assert query.should[0] == {"query_string": {"query": "hostname: /a/b(/"}}


def test_body_omits_should_when_no_hostmatch() -> None:
    body = build_audit_search(START, END).to_body()

    assert body == {
        "from": 0,
        "size": 100,
        "sort": {"utctimestamp": "asc"},
        "query": {"bool": {"must": [TIME_RANGE, {"match": {"_type": "auditd"}}]}},
    }


def test_body_with_hostmatch() -> None:
    body = build_audit_search(START, END, hostmatch="db").to_body()

    assert body["query"]["bool"]["minimum_should_match"] == 1
    assert len(body["query"]["bool"]["should"]) == 3


def test_build_query_is_deterministic() -> None:
    criteria = SearchCriteria(start=START, end=END, mode="syslog", hostmatch="mail")
    assert build_query(criteria).to_body() == build_query(criteria).to_body()


def test_with_offset_returns_copy() -> None:
    query = build_audit_search(START, END)
    page = query.with_offset(300)

    assert page.from_ == 300
    assert page.to_body()["from"] == 300
    assert query.from_ == 0
    assert page.must == query.must


def test_to_body_does_not_share_clauses() -> None:
    query = build_audit_search(START, END)
    body = query.to_body()
    body["query"]["bool"]["must"][0]["range"]["utctimestamp"]["gte"] = "changed"

    assert query.must[0] == TIME_RANGE


def test_naive_datetimes_are_utc() -> None:
    criteria = SearchCriteria(start=datetime(2024, 1, 30), end=datetime(2024, 1, 30, 1), mode="audit")
    assert criteria.start.tzinfo is not None
    assert build_query(criteria).must[0]["range"]["utctimestamp"]["gte"] == "2024-01-30T00:00:00Z"


def test_fractional_seconds_are_dropped() -> None:
    end = datetime(2024, 1, 30, 5, 6, 7, 891011, tzinfo=timezone.utc)
    query = build_audit_search(START, end)
    assert query.must[0]["range"]["utctimestamp"]["lte"] == "2024-01-30T05:06:07Z"


def test_start_after_end_rejected() -> None:
    with pytest.raises(InputError):
        SearchCriteria(start=END, end=START, mode="audit")


def test_unknown_mode_rejected() -> None:
    with pytest.raises(InputError):
        SearchCriteria(start=START, end=END, mode="netflow")
