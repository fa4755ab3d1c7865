# Event store connection

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlparse

from opensearchpy import OpenSearch, RequestsHttpConnection

from mozdef_search.core.config import Settings


_LOGGER = logging.getLogger(__name__)


def _get_opensearch_config(settings: Settings) -> dict[str, Any]:
    # MOZDEFESHOST may be a bare "host:port" or a full URL
    node_url = settings.es_host
    if "://" not in node_url:
        node_url = f"http://{node_url}"
    parsed = urlparse(node_url)
    host = parsed.hostname or "localhost"
    port = parsed.port or 9200

    return {
        "hosts": [{"host": host, "port": port}],
        "connection_class": RequestsHttpConnection,
        "timeout": settings.request_timeout,
        "max_retries": 0,
        "retry_on_timeout": False,
    }


class EventStoreConnection:
    """One connection to the event store, closed once its index is done."""

    def __init__(self, client: OpenSearch) -> None:
        self._client = client

    def search(self, index: str, doc_type: str, body: dict[str, Any]) -> dict[str, Any]:
        # the typed search path predates the removal of mapping types
        path = f"/{quote(index, safe='')}/{quote(doc_type, safe='')}/_search"
        return self._client.transport.perform_request("POST", path, body=body)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "EventStoreConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def connect(settings: Settings) -> EventStoreConnection:
    config = _get_opensearch_config(settings)
    _LOGGER.debug("connecting to %s:%s", config["hosts"][0]["host"], config["hosts"][0]["port"])
    return EventStoreConnection(OpenSearch(**config))
