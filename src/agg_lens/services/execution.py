"""Single round trip to the search backend."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from agg_lens.decoding import SearchResponse, parse_response
from agg_lens.errors import QueryExecutionError

if TYPE_CHECKING:
    from agg_lens.query.request import QueryRequest
    from agg_lens.search.protocols import SearchBackend

_MALFORMED_RESPONSE_ERROR = "Backend returned a {kind} instead of a response object."


def execute_request(*, backend: SearchBackend, index: str, request: QueryRequest) -> SearchResponse:
    """Run one request and normalize its response.

    Args:
        backend (SearchBackend): Search backend adapter.
        index (str): Target index name.
        request (QueryRequest): Query request to execute.

    Raises:
        QueryExecutionError: If the backend call fails or returns a malformed payload.

    Returns:
        SearchResponse: Parsed response.

    """
    try:
        payload = backend.execute(index=index, request=request)
    except Exception as exc:
        raise QueryExecutionError(index=index, cause=exc) from exc

    if not isinstance(payload, Mapping):
        cause = TypeError(_MALFORMED_RESPONSE_ERROR.format(kind=type(payload).__name__))
        raise QueryExecutionError(index=index, cause=cause)
    return parse_response(payload)
