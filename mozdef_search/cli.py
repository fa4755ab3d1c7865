#!/usr/bin/env python3
"""
Search MozDef for audit or syslog events.

Usage:
    # execve events of the last day for web hosts
    MOZDEFESHOST=mozdef-es:9200 mozdef-search -a -b "2024-01-30 00:00:00" -H "web[0-9]+"

    # print the first query instead of running it
    mozdef-search -s -b "2024-01-30 00:00:00" -e "2024-01-31 00:00:00" -n
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from functools import partial
from typing import NoReturn, Optional, Sequence

from opensearchpy.exceptions import OpenSearchException

from mozdef_search.core.config import Settings, load_env_file
from mozdef_search.core.errors import ConfigError, InputError, SearchError
from mozdef_search.core.logging import configure_logging
from mozdef_search.core.time import CLI_DATE_FORMAT, parse_cli_date, utc_now
from mozdef_search.services.mozdef import (
    DOC_TYPES,
    SearchCriteria,
    build_query,
    connect,
    render,
    run_query,
)


_LOGGER = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    # usage errors share exit status 1 with every other failure
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="mozdef-search",
        description="Search MozDef for audit or syslog events",
    )
    parser.add_argument("-a", dest="audit", action="store_true", help="search for audit events")
    parser.add_argument("-s", dest="syslog", action="store_true", help="search for syslog events")
    parser.add_argument("-b", dest="begin", default="", help="start date for search in UTC (yyyy-mm-dd hh:mm:ss)")
    parser.add_argument(
        "-e",
        dest="end",
        default="",
        help="end date for search in UTC (yyyy-mm-dd hh:mm:ss, defaults to now)",
    )
    parser.add_argument(
        "-n",
        dest="noop",
        action="store_true",
        help="dont search, just print the first query in json and exit",
    )
    parser.add_argument("-H", dest="hostmatch", default="", help="match events for hostname matching regexp")
    return parser


def _mode(args: argparse.Namespace) -> str:
    if args.audit == args.syslog:
        raise ConfigError("must specify exactly one of -a or -s")
    return "audit" if args.audit else "syslog"


def _parse_date(value: str, flag: str) -> datetime:
    try:
        return parse_cli_date(value)
    except ValueError:
        raise InputError(f"invalid date for {flag}: {value!r} (expected {CLI_DATE_FORMAT})") from None


def criteria_from_args(args: argparse.Namespace) -> SearchCriteria:
    mode = _mode(args)
    if not args.begin:
        raise InputError("start date (-b) is required")
    start = _parse_date(args.begin, "-b")
    end = _parse_date(args.end, "-e") if args.end else utc_now()
    return SearchCriteria(start=start, end=end, mode=mode, hostmatch=args.hostmatch)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_env_file()
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    args = build_parser().parse_args(argv)
    try:
        criteria = criteria_from_args(args)
        query = build_query(criteria)
        if args.noop:
            print(json.dumps(query.to_body(), indent=4))
            return 0
        events = run_query(
            query,
            DOC_TYPES[criteria.mode],
            criteria.start,
            criteria.end,
            connect=partial(connect, settings),
        )
    except (SearchError, OpenSearchException) as exc:
        _LOGGER.debug("search failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for line in render(events, criteria.mode):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
