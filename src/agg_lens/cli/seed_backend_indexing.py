"""Order seeding workflow used by the seed command."""

from __future__ import annotations

import csv
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from agg_lens.domain import OrderDocument
from agg_lens.errors import SeedError

if TYPE_CHECKING:
    from pathlib import Path

_BACKEND_RESET_ERROR = "Failed to reset index '{index}' on backend '{backend_url}': {error}"
_BULK_INDEX_ERRORS_MESSAGE = "Bulk indexing reported errors."
_BULK_REQUEST_ERROR = "Bulk request to index '{index}' on backend '{backend_url}' failed: {error}"
_SEED_READ_ERROR = "Cannot read seed file '{path}': {error}"
_SEED_PARSE_ERROR = "Cannot parse seed file '{path}': {error}"
_SEED_SUFFIXES = frozenset({".csv", ".json", ".yaml", ".yml"})
_UNSUPPORTED_SEED_FORMAT_ERROR = "Unsupported seed file format '{suffix}'. Use .json, .yaml, .yml or .csv."
_SEED_ROOT_ERROR = "Seed file '{path}' must contain a list of orders or an object with an 'orders' list."
_logger = logging.getLogger(__name__)


def orders_index_mapping_body() -> dict[str, Any]:
    """Build index mapping used by `seed --reset-index`.

    Returns:
        dict[str, Any]: Mapping payload.

    """
    return {
        "mappings": {
            "properties": {
                "order_id": {"type": "keyword"},
                "customer": {"type": "keyword"},
                "order_date": {"type": "date", "format": "strict_date_optional_time||epoch_millis"},
                "total_amount": {"type": "double"},
                "status": {"type": "keyword"},
                "category": {"type": "keyword"},
            },
        },
    }


def reset_backend_index(*, backend_url: str, index: str) -> None:
    """Reset backend index by deleting and recreating it with the orders mapping.

    Args:
        backend_url (str): Backend base URL.
        index (str): Target index name.

    Raises:
        SeedError: If backend reset operation fails.

    """
    index_url = f"{backend_url.rstrip('/')}/{index}"
    try:
        with httpx.Client(timeout=60.0) as client:
            delete_response = client.delete(index_url)
            if delete_response.status_code not in {200, 202, 404}:
                delete_response.raise_for_status()
            create_response = client.put(index_url, json=orders_index_mapping_body())
            create_response.raise_for_status()
    except httpx.HTTPError as exc:
        raise SeedError(
            _BACKEND_RESET_ERROR.format(
                index=index,
                backend_url=backend_url,
                error=f"{exc.__class__.__name__}: {exc}",
            ),
        ) from exc
    _logger.info("Reset index %s on %s", index, backend_url)


def _blank_to_none(row: dict[str, Any]) -> dict[str, Any]:
    return {key: (None if isinstance(value, str) and not value.strip() else value) for key, value in row.items()}


def _read_seed_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SeedError(_SEED_READ_ERROR.format(path=path, error=f"{exc.__class__.__name__}: {exc}")) from exc


def _load_csv_rows(text: str) -> list[dict[str, Any]]:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    header = lines[0]
    delimiter = ";" if header.count(";") > header.count(",") else ","
    return [_blank_to_none(dict(row)) for row in csv.DictReader(lines, delimiter=delimiter)]


def _load_structured_rows(path: Path, data: object) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("orders")
    if not isinstance(data, list):
        raise ValueError(_SEED_ROOT_ERROR.format(path=path))
    return data


def load_order_rows(path: Path) -> list[Any]:
    """Load raw order rows from one seed file.

    Supported formats are `.json`, `.yaml`/`.yml` and `.csv`.

    Args:
        path (Path): Seed file path.

    Raises:
        ValueError: If the suffix is unsupported or the file root is not a list of orders.
        SeedError: If the file cannot be read or parsed.

    Returns:
        list[Any]: Raw rows, one per order.

    """
    suffix = path.suffix.lower()
    if suffix not in _SEED_SUFFIXES:
        raise ValueError(_UNSUPPORTED_SEED_FORMAT_ERROR.format(suffix=suffix or "<none>"))
    text = _read_seed_text(path)
    if suffix == ".csv":
        try:
            return _load_csv_rows(text)
        except csv.Error as exc:
            raise SeedError(_SEED_PARSE_ERROR.format(path=path, error=exc)) from exc
    if suffix == ".json":
        return _load_structured_rows(path, json.loads(text))

    import yaml  # noqa: PLC0415

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SeedError(_SEED_PARSE_ERROR.format(path=path, error=exc)) from exc
    return _load_structured_rows(path, data)


def load_orders(path: Path) -> list[OrderDocument]:
    """Load and validate orders from one seed file, skipping invalid rows.

    Args:
        path (Path): Seed file path.

    Returns:
        list[OrderDocument]: Valid orders in file order.

    """
    orders: list[OrderDocument] = []
    for position, row in enumerate(load_order_rows(path), start=1):
        if not isinstance(row, dict):
            _logger.warning("Skipping seed row %d of %s: not an object", position, path)
            continue
        try:
            orders.append(OrderDocument.model_validate(row))
        except PydanticValidationError as exc:
            _logger.warning("Skipping seed row %d of %s: %s", position, path, exc.errors()[0]["msg"])
    return orders


def bulk_index_orders(
    *,
    backend_url: str,
    index: str,
    orders: list[OrderDocument],
) -> None:
    """Bulk index orders with an immediate refresh.

    Args:
        backend_url (str): Backend base URL.
        index (str): Target index name.
        orders (list[OrderDocument]): Orders to index; `id` is used as document id when set.

    Raises:
        SeedError: If the bulk request fails or the backend reports indexing errors.

    """
    if not orders:
        return

    lines: list[str] = []
    for order in orders:
        action: dict[str, Any] = {"_index": index}
        if order.id is not None:
            action["_id"] = order.id
        lines.extend(
            [
                json.dumps({"index": action}, ensure_ascii=False),
                json.dumps(order.to_source(), ensure_ascii=False),
            ],
        )

    payload = "\n".join(lines) + "\n"
    bulk_url = f"{backend_url.rstrip('/')}/_bulk?refresh=true"
    try:
        with httpx.Client(timeout=60.0) as client:
            response = client.post(
                bulk_url,
                content=payload.encode("utf-8"),
                headers={"Content-Type": "application/x-ndjson"},
            )
            response.raise_for_status()
            response_payload = response.json()
    except httpx.HTTPError as exc:
        raise SeedError(
            _BULK_REQUEST_ERROR.format(index=index, backend_url=backend_url, error=f"{exc.__class__.__name__}: {exc}"),
        ) from exc

    if response_payload.get("errors"):
        raise SeedError(_BULK_INDEX_ERRORS_MESSAGE)
    _logger.info("Indexed %d orders into %s", len(orders), index)
