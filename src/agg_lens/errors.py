"""Project-specific exceptions for agg-lens."""


class AggLensError(Exception):
    """Base exception for the project."""


class ValidationError(ValueError, AggLensError):
    """Raised when a filter, aggregation or request is malformed at build time."""


class UnsupportedAggregationShapeError(ValueError, AggLensError):
    """Raised when a response aggregation carries a tag or bucket no decoder understands."""

    def __init__(self, name: str, tag: str, detail: str | None = None) -> None:
        """Build exception payload for unsupported aggregation shapes."""
        message = f"Unsupported aggregation shape '{tag}' for aggregation '{name}'"
        super().__init__(f"{message}: {detail}." if detail else f"{message}.")
        self.name = name
        self.tag = tag


class QueryExecutionError(RuntimeError, AggLensError):
    """Raised when the search backend fails to execute a query."""

    def __init__(self, index: str, cause: Exception) -> None:
        """Build exception payload wrapping the backend failure."""
        super().__init__(f"Query execution failed on index '{index}': {cause.__class__.__name__}: {cause}")
        self.index = index


class MissingOptionalDependencyError(ImportError, AggLensError):
    """Raised when an optional dependency is not installed."""


class UnsupportedBackendError(ValueError, AggLensError):
    """Raised when the user asks for an unsupported backend."""

    def __init__(self, backend: str, supported: str) -> None:
        """Build exception payload for unsupported backend values."""
        super().__init__(f"Unsupported backend '{backend}'. Supported values: {supported}.")


class MissingBackendUrlError(ValueError, AggLensError):
    """Raised when no backend URL is supplied and no client is injected."""

    def __init__(self) -> None:
        """Build exception payload for missing backend URLs."""
        super().__init__("Backend URL is required when no client instance is provided.")


class UnsupportedReportError(ValueError, AggLensError):
    """Raised when the user asks for an unknown aggregation report or search."""

    def __init__(self, report: str, supported: str) -> None:
        """Build exception payload for unsupported report names."""
        super().__init__(f"Unsupported report '{report}'. Supported values: {supported}.")


class SeedError(RuntimeError, AggLensError):
    """Raised when seed orders cannot be read or written to the backend."""
