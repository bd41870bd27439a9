"""Search backend interfaces and adapters."""

from agg_lens.search.adapters import ElasticClientAdapter, OpenSearchClientAdapter
from agg_lens.search.factory import build_search_backend, supported_backends
from agg_lens.search.protocols import SearchBackend

__all__ = [
    "ElasticClientAdapter",
    "OpenSearchClientAdapter",
    "SearchBackend",
    "build_search_backend",
    "supported_backends",
]
