"""Unified CLI package exports."""

from agg_lens.cli.argument_parser import build_parser
from agg_lens.cli.command_handlers import build_search_backend
from agg_lens.cli.entrypoint import main

__all__ = ["build_parser", "build_search_backend", "main"]
