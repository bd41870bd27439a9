"""Factory helpers to instantiate the configured search backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agg_lens.domain import BackendName
from agg_lens.errors import MissingBackendUrlError, UnsupportedBackendError
from agg_lens.search.adapters import ElasticClientAdapter, OpenSearchClientAdapter

if TYPE_CHECKING:
    from agg_lens.search.protocols import SearchBackend

_ADAPTERS: dict[BackendName, type[ElasticClientAdapter] | type[OpenSearchClientAdapter]] = {
    BackendName.ELASTICSEARCH: ElasticClientAdapter,
    BackendName.OPENSEARCH: OpenSearchClientAdapter,
}


def supported_backends() -> tuple[BackendName, ...]:
    """Return backend names supported by agg-lens.

    Returns:
        tuple[BackendName, ...]: Supported backend identifiers.

    """
    return tuple(_ADAPTERS)


def _resolve_backend_name(backend: BackendName | str) -> BackendName:
    if isinstance(backend, BackendName):
        return backend
    try:
        return BackendName(backend.strip().lower())
    except ValueError as exc:
        supported = ", ".join(item.value for item in supported_backends())
        raise UnsupportedBackendError(backend=backend, supported=supported) from exc


def build_search_backend(
    *,
    backend: BackendName | str,
    client: object | None = None,
    url: str | None = None,
    timeout_s: float = 30.0,
    verify_certs: bool = True,
) -> SearchBackend:
    """Build a concrete backend adapter from user options.

    An injected `client` takes precedence over connection settings.

    Args:
        backend (BackendName | str): Backend identifier.
        client (object | None): Optional pre-configured backend client.
        url (str | None): Optional backend URL when no client is injected.
        timeout_s (float): Request timeout in seconds.
        verify_certs (bool): Whether TLS certificates are verified.

    Raises:
        MissingBackendUrlError: If `url` is missing when `client` is absent.
        UnsupportedBackendError: If the backend identifier is unsupported.

    Returns:
        SearchBackend: Search backend adapter.

    """
    adapter_class = _ADAPTERS[_resolve_backend_name(backend)]

    if client is not None:
        return adapter_class(client=client)
    if url is None:
        raise MissingBackendUrlError
    return adapter_class.from_connection(
        url=url,
        timeout_s=timeout_s,
        verify_certs=verify_certs,
    )
