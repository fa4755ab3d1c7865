from __future__ import annotations

import os

import pytest


def _live_tests_enabled() -> bool:
    return os.getenv("RUN_MOZDEF_TESTS", "").strip().lower() in {"1", "true", "yes"}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests, no external services")
    config.addinivalue_line("markers", "requires_mozdef: needs a reachable MozDef event store")


def pytest_runtest_setup(item: pytest.Item) -> None:
    if "requires_mozdef" in item.keywords and not _live_tests_enabled():
        pytest.skip("Set RUN_MOZDEF_TESTS=1 to run tests against a live event store.")
