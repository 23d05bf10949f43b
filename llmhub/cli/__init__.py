"""``llmhub`` command-line entrypoint.

Wires argument parsing to the handlers in ``cli_actions``. The default
subcommand is ``chat``, so ``llmhub "hello"`` sends one prompt.
"""

from __future__ import annotations

import sys
from typing import Optional

from ..base.logging import configure_logger
from .cli_actions import ClientFactory, handle_chat, handle_providers
from .cli_parser import build_parser

_SUBCOMMANDS = {"chat", "providers"}


def main(argv: Optional[list[str]] = None, *, client_factory: Optional[ClientFactory] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.
    client_factory: Optional[ClientFactory]
        Builds the client from an optional config path (tests inject fakes).

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    p = build_parser()
    argv_list = list(sys.argv[1:] if argv is None else argv)
    # inject the default subcommand, keeping global options in front of it
    head = []
    while argv_list and argv_list[0] == "--log-level" and len(argv_list) > 1:
        head += argv_list[:2]
        argv_list = argv_list[2:]
    if not argv_list or (argv_list[0] not in _SUBCOMMANDS and argv_list[0] not in {"-h", "--help"}):
        argv_list = ["chat"] + argv_list
    args = p.parse_args(head + argv_list)
    if args.log_level:
        configure_logger(level=args.log_level)

    if args.cmd == "providers":
        return handle_providers(args)
    if client_factory is not None:
        return handle_chat(args, client_factory=client_factory)
    return handle_chat(args)


__all__ = ["main"]
