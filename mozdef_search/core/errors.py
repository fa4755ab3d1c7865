from __future__ import annotations


class SearchError(Exception):
    """Base class for every error reported by the search client."""


class ConfigError(SearchError):
    """Missing or contradictory configuration, detected before any query runs."""


class InputError(SearchError):
    """User supplied criteria that cannot be turned into a query."""


class EventDecodeError(SearchError):
    def __init__(self, index: str, message: str) -> None:
        super().__init__(f"failed to decode document from {index}: {message}")
        self.index = index
