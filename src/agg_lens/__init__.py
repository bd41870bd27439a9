"""Typed aggregation queries over Elasticsearch and OpenSearch."""

__version__ = "0.1.0"
