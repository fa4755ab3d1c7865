"""
Field fallback rules applied to every decoded MozDef event.

Different MozDef producers (auditd, CEF-style forwarders, syslog) put the same
piece of information under different keys. Each canonical field below is
filled from the first non-empty source, and only when the canonical field is
itself empty, so normalizing an already normalized event changes nothing.
"""

from __future__ import annotations

from typing import Any, Mapping

from mozdef_search.schemas.event import Event


# canonical field -> ordered source fields, paths relative to the event root
EVENT_FALLBACKS: Mapping[str, tuple[str, ...]] = {
    "hostname": ("details.dhost",),
}

DETAIL_FALLBACKS: Mapping[str, tuple[str, ...]] = {
    "user": ("duser", "suser"),
    "path": ("fname",),
    "originaluser": ("suser",),
    "processname": ("dproc",),
}

EXEC_RULE_NAME = "Unix Exec"
EXEC_CATEGORY = "execve"

_SUMMARY_STRIP = " \n"


def _lookup(source: Any, dotted: str) -> str:
    value = source
    for part in dotted.split("."):
        value = getattr(value, part)
    return value


def _resolve(source: Any, fallbacks: Mapping[str, tuple[str, ...]]) -> dict[str, str]:
    update: dict[str, str] = {}
    for field, candidates in fallbacks.items():
        if getattr(source, field):
            continue
        for candidate in candidates:
            value = _lookup(source, candidate)
            if value:
                update[field] = value
                break
    return update


def normalize(event: Event) -> Event:
    """Return a copy of ``event`` with aliased fields resolved."""
    details_update = _resolve(event.details, DETAIL_FALLBACKS)
    update: dict[str, Any] = _resolve(event, EVENT_FALLBACKS)

    if details_update:
        update["details"] = event.details.model_copy(update=details_update)
    if event.details.name == EXEC_RULE_NAME:
        update["category"] = EXEC_CATEGORY

    summary = event.summary.strip(_SUMMARY_STRIP)
    if summary != event.summary:
        update["summary"] = summary

    if not update:
        return event
    return event.model_copy(update=update)
