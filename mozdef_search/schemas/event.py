from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from mozdef_search.core.time import ZERO_TIME, parse_datetime


def _null_to_empty(value: Any) -> Any:
    # MozDef writes explicit nulls for absent fields
    return "" if value is None else value


class EventDetails(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    hostname: str = ""
    command: str = ""
    dhost: str = ""
    dproc: str = ""
    duser: str = ""
    suser: str = ""
    fname: str = ""
    # auditd rule name; some producers emit it as "rulename"
    name: str = Field("", validation_alias=AliasChoices("name", "rulename"))
    processname: str = ""
    originaluser: str = ""
    user: str = ""
    path: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _empty_strings(cls, value: Any) -> Any:
        return _null_to_empty(value)


class Event(BaseModel):
    """A MozDef event document, before or after normalization."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    category: str = ""
    hostname: str = ""
    timestamp: datetime = ZERO_TIME
    utctimestamp: datetime = ZERO_TIME
    summary: str = ""
    details: EventDetails = Field(default_factory=EventDetails)

    @field_validator("category", "hostname", "summary", mode="before")
    @classmethod
    def _empty_strings(cls, value: Any) -> Any:
        return _null_to_empty(value)

    @field_validator("details", mode="before")
    @classmethod
    def _empty_details(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timestamp", "utctimestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime:
        if value is None or value == "":
            return ZERO_TIME
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"invalid timestamp: {value!r}")
        return parsed
