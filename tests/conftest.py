from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

_DAY_MATH_SUFFIX = "d/d"
_MULTI_KEY_SEPARATOR = "|"


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            p = Path(str(item.fspath)).resolve()
        except Exception:  # noqa: S112
            continue

        if p == target_dir or target_dir in p.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def _resolve_bound(bound: Any, sample: Any) -> Any:
    if isinstance(bound, str) and bound.startswith("now-") and bound.endswith(_DAY_MATH_SUFFIX):
        days = int(bound.removeprefix("now-").removesuffix(_DAY_MATH_SUFFIX))
        return datetime.now(tz=UTC).date() - timedelta(days=days)
    if isinstance(sample, str):
        return date.fromisoformat(str(bound))
    return bound


def _comparable(value: Any, bound: Any) -> Any:
    if isinstance(bound, date) and isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def _matches(query: dict[str, Any], source: dict[str, Any]) -> bool:
    kind, params = next(iter(query.items()))
    if kind == "match_all":
        return True
    if kind == "term":
        field_name, value = next(iter(params.items()))
        return source.get(field_name) == value
    if kind == "match":
        field_name, text = next(iter(params.items()))
        tokens = set(str(source.get(field_name, "")).lower().split())
        return any(token in tokens for token in str(text).lower().split())
    if kind == "range":
        field_name, bounds = next(iter(params.items()))
        value = source.get(field_name)
        if value is None:
            return False
        checks = {
            "gt": lambda left, right: left > right,
            "gte": lambda left, right: left >= right,
            "lt": lambda left, right: left < right,
            "lte": lambda left, right: left <= right,
        }
        for operator, check in checks.items():
            if operator in bounds:
                bound = _resolve_bound(bounds[operator], value)
                if not check(_comparable(value, bound), bound):
                    return False
        return True
    if kind == "bool":
        must = all(_matches(clause, source) for clause in params.get("must", []))
        should = not params.get("should") or any(_matches(clause, source) for clause in params["should"])
        must_not = not any(_matches(clause, source) for clause in params.get("must_not", []))
        return must and should and must_not
    raise AssertionError(f"unsupported query {kind}")


def _metric(kind: str, field_name: str, sources: list[dict[str, Any]]) -> dict[str, Any]:
    present = [src[field_name] for src in sources if src.get(field_name) is not None]
    if kind == "value_count":
        return {"value": len(present)}
    values = [float(value) for value in present]
    if kind == "sum":
        return {"value": sum(values)}
    if not values:
        return {"value": None}
    if kind == "avg":
        return {"value": sum(values) / len(values)}
    return {"value": min(values) if kind == "min" else max(values)}


def _terms_prefix(keys: list[Any]) -> str:
    if keys and all(isinstance(key, int) and not isinstance(key, bool) for key in keys):
        return "lterms"
    if keys and all(isinstance(key, float) for key in keys):
        return "dterms"
    return "sterms"


def _grouped(sources: list[dict[str, Any]], key_of: Callable[[dict[str, Any]], Any]) -> list[tuple[Any, list]]:
    groups: dict[Any, list[dict[str, Any]]] = {}
    for src in sources:
        key = key_of(src)
        if key is not None:
            groups.setdefault(key, []).append(src)
    return sorted(groups.items(), key=lambda item: (-len(item[1]), str(item[0])))


def _aggregate(aggs: dict[str, Any], sources: list[dict[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for name, node in aggs.items():
        children = node.get("aggs", {})
        kind = next(key for key in node if key != "aggs")
        params = node[kind]
        if kind in {"sum", "avg", "min", "max", "value_count"}:
            result[f"{kind}#{name}"] = _metric(kind, params["field"], sources)
        elif kind == "terms":
            groups = _grouped(sources, lambda src, f=params["field"]: src.get(f))[: params["size"]]
            buckets = [{"key": key, "doc_count": len(docs), **_aggregate(children, docs)} for key, docs in groups]
            result[f"{_terms_prefix([key for key, _ in groups])}#{name}"] = {"buckets": buckets}
        elif kind == "multi_terms":
            fields = [item["field"] for item in params["terms"]]

            def _combined(src: dict[str, Any], fields: list[str] = fields) -> tuple | None:
                parts = tuple(src.get(f) for f in fields)
                return None if any(part is None for part in parts) else parts

            groups = _grouped(sources, _combined)[: params["size"]]
            buckets = [
                {
                    "key": list(key),
                    "key_as_string": _MULTI_KEY_SEPARATOR.join(str(part) for part in key),
                    "doc_count": len(docs),
                    **_aggregate(children, docs),
                }
                for key, docs in groups
            ]
            result[f"multi_terms#{name}"] = {"buckets": buckets}
        elif kind == "date_histogram":
            groups = _grouped(sources, lambda src, f=params["field"]: (src.get(f) or "")[:10] or None)
            buckets = []
            for key, docs in sorted(groups):
                day = datetime.fromisoformat(key).replace(tzinfo=UTC)
                buckets.append(
                    {
                        "key_as_string": day.strftime("%Y-%m-%dT00:00:00.000Z"),
                        "key": int(day.timestamp() * 1000),
                        "doc_count": len(docs),
                        **_aggregate(children, docs),
                    },
                )
            result[f"date_histogram#{name}"] = {"buckets": buckets}
        else:
            raise AssertionError(f"unsupported aggregation {kind}")
    return result


@dataclass
class InMemorySearchBackend:
    """Evaluate request bodies over stored sources and answer with typed keys."""

    documents: list[dict[str, Any]] = field(default_factory=list)
    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    backend_name: str = "memory"

    def execute(self, *, index: str, request: Any) -> dict[str, Any]:
        body = request.to_body()
        self.calls.append((index, body))
        matched = [doc for doc in self.documents if _matches(body["query"], doc["_source"])]
        for criterion in reversed(body.get("sort", [])):
            field_name, options = next(iter(criterion.items()))
            matched.sort(
                key=lambda doc, f=field_name: doc["_source"].get(f) or 0,
                reverse=options["order"] == "desc",
            )
        start = body.get("from", 0)
        response: dict[str, Any] = {
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "hits": matched[start : start + body["size"]],
            },
        }
        if "aggs" in body:
            response["aggregations"] = _aggregate(body["aggs"], [doc["_source"] for doc in matched])
        return response

    def index_document(
        self,
        *,
        index: str,
        document: dict[str, Any],
        document_id: str | None = None,
    ) -> dict[str, Any]:
        doc_id = document_id or f"generated-{len(self.documents) + 1}"
        self.documents.append({"_id": doc_id, "_source": dict(document)})
        return {"_index": index, "_id": doc_id, "result": "created"}


@pytest.fixture
def memory_backend() -> Callable[[list[dict[str, Any]]], InMemorySearchBackend]:
    """Return a factory building an in-memory backend over order sources."""

    def _build(sources: list[dict[str, Any]]) -> InMemorySearchBackend:
        documents = [{"_id": str(position), "_source": dict(src)} for position, src in enumerate(sources, start=1)]
        return InMemorySearchBackend(documents=documents)

    return _build
