"""Protocols for search backends used by the query services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from agg_lens.query.request import QueryRequest


class SearchBackend(Protocol):
    """Define a thin interface for Elasticsearch/OpenSearch operations."""

    backend_name: str

    def execute(self, *, index: str, request: QueryRequest) -> dict[str, Any]:
        """Execute one query request with typed aggregation keys.

        Args:
            index (str): Target index name.
            request (QueryRequest): Query request to execute.

        Returns:
            dict[str, Any]: Raw backend response.

        """

    def index_document(
        self,
        *,
        index: str,
        document: dict[str, Any],
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Store one document and make it visible to search.

        Args:
            index (str): Target index name.
            document (dict[str, Any]): Document source.
            document_id (str | None): Optional document identifier.

        Returns:
            dict[str, Any]: Raw backend response.

        """
