"""CLI entrypoint execution flow."""

from __future__ import annotations

import logging

from agg_lens.cli.argument_parser import build_parser
from agg_lens.cli.common_runtime import apply_proxy_environment, configure_logging, emit_payload
from agg_lens.errors import AggLensError

_logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code.

    Args:
        argv (list[str] | None): Optional command-line arguments.

    Returns:
        int: Process exit code.

    """
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1

    configure_logging(getattr(args, "log_level", None))
    apply_proxy_environment(getattr(args, "proxy_url", None))
    try:
        payload = handler(args)
    except (AggLensError, ValueError) as exc:
        _logger.error("%s failed: %s", args.command, exc)  # noqa: TRY400
        return 2
    emit_payload(payload=payload, output=args.output)
    return 0
