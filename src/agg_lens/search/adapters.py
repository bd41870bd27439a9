"""Adapters implementing the thin SearchBackend interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import TYPE_CHECKING, Any

from agg_lens.errors import MissingOptionalDependencyError

if TYPE_CHECKING:
    from agg_lens.query.request import QueryRequest

_ELASTIC_MISSING_DEP_MSG = "Install the optional dependency group 'elasticsearch' to use this backend."
_OPENSEARCH_MISSING_DEP_MSG = "Install the optional dependency group 'opensearch' to use this backend."
_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ElasticClientAdapter:
    """Thin adapter around the Elasticsearch Python client."""

    client: Any
    backend_name: str = "elasticsearch"

    @classmethod
    def from_connection(
        cls,
        *,
        url: str,
        timeout_s: float,
        verify_certs: bool,
    ) -> ElasticClientAdapter:
        """Build an adapter from connection settings.

        Args:
            url (str): Backend URL.
            timeout_s (float): Request timeout in seconds.
            verify_certs (bool): Whether TLS certificates are verified.

        Raises:
            MissingOptionalDependencyError: If `elasticsearch` is not installed.

        Returns:
            ElasticClientAdapter: Configured adapter.

        """
        try:
            module = import_module("elasticsearch")
        except ImportError as exc:
            raise MissingOptionalDependencyError(_ELASTIC_MISSING_DEP_MSG) from exc

        elasticsearch_class = module.Elasticsearch
        client = elasticsearch_class(
            hosts=[url],
            request_timeout=timeout_s,
            verify_certs=verify_certs,
        )
        return cls(client=client)

    def execute(self, *, index: str, request: QueryRequest) -> dict[str, Any]:
        """Execute one query request with typed aggregation keys.

        Args:
            index (str): Target index name.
            request (QueryRequest): Query request to execute.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        body = request.to_body()
        _logger.debug("Elasticsearch search on '%s': %s", index, body)
        response = self.client.search(index=index, body=body, typed_keys=True)
        return dict(response)

    def index_document(
        self,
        *,
        index: str,
        document: dict[str, Any],
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Store one document with an immediate refresh.

        Args:
            index (str): Target index name.
            document (dict[str, Any]): Document source.
            document_id (str | None): Optional document identifier.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        response = self.client.index(index=index, id=document_id, document=document, refresh=True)
        return dict(response)


@dataclass(frozen=True, slots=True)
class OpenSearchClientAdapter:
    """Thin adapter around the OpenSearch Python client."""

    client: Any
    backend_name: str = "opensearch"

    @classmethod
    def from_connection(
        cls,
        *,
        url: str,
        timeout_s: float,
        verify_certs: bool,
    ) -> OpenSearchClientAdapter:
        """Build an adapter from connection settings.

        Args:
            url (str): Backend URL.
            timeout_s (float): Request timeout in seconds.
            verify_certs (bool): Whether TLS certificates are verified.

        Raises:
            MissingOptionalDependencyError: If `opensearch-py` is not installed.

        Returns:
            OpenSearchClientAdapter: Configured adapter.

        """
        try:
            module = import_module("opensearchpy")
        except ImportError as exc:
            raise MissingOptionalDependencyError(_OPENSEARCH_MISSING_DEP_MSG) from exc

        opensearch_class = module.OpenSearch
        client = opensearch_class(
            hosts=[url],
            timeout=timeout_s,
            use_ssl=url.startswith("https://"),
            verify_certs=verify_certs,
        )
        return cls(client=client)

    def execute(self, *, index: str, request: QueryRequest) -> dict[str, Any]:
        """Execute one query request with typed aggregation keys.

        Args:
            index (str): Target index name.
            request (QueryRequest): Query request to execute.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        body = request.to_body()
        _logger.debug("OpenSearch search on '%s': %s", index, body)
        response = self.client.search(index=index, body=body, typed_keys=True)
        return dict(response)

    def index_document(
        self,
        *,
        index: str,
        document: dict[str, Any],
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Store one document with an immediate refresh.

        Args:
            index (str): Target index name.
            document (dict[str, Any]): Document source.
            document_id (str | None): Optional document identifier.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        response = self.client.index(index=index, body=document, id=document_id, refresh=True)
        return dict(response)
