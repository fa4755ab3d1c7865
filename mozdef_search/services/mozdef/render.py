from __future__ import annotations

from typing import Iterable, List

from mozdef_search.core.time import format_rfc3339
from mozdef_search.schemas.event import Event
from .normalize import EXEC_CATEGORY


_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    "\"": "\\\"",
}


def _quote(value: str) -> str:
    """Double-quote ``value``, backslash-escaping control and non-printable characters."""
    out = []
    for ch in value:
        code = ord(ch)
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    return '"' + "".join(out) + '"'


def audit_line(event: Event) -> str:
    descriptor = "unknown audit event"
    if event.category == EXEC_CATEGORY:
        details = event.details
        origuser = details.originaluser or "none"
        descriptor = f"[execve] ({origuser}/{details.user})"
        if details.command:
            descriptor += f" command:{_quote(details.command)}"
        if details.processname:
            descriptor += f" proc:{_quote(details.processname)}"
        if details.path:
            descriptor += f" path:{_quote(details.path)}"
    return f"{format_rfc3339(event.timestamp, timespec='auto')} {event.hostname} {descriptor}"


def syslog_line(event: Event) -> str:
    descriptor = "[syslog] unknown syslog event"
    if event.summary:
        descriptor = f"[syslog] {event.summary}"
    return f"{format_rfc3339(event.timestamp, timespec='auto')} {event.details.hostname} {descriptor}"


def render(events: Iterable[Event], mode: str) -> List[str]:
    """One summary line per event, in the order the events were fetched."""
    if mode == "audit":
        return [audit_line(e) for e in events]
    if mode == "syslog":
        return [syslog_line(e) for e in events]
    raise ValueError(f"unknown search mode: {mode!r}")
