"""Argument parsing for the ``llmhub`` command (no execution logic)."""

from __future__ import annotations

import argparse

from ..config.defaults import CLI_DEFAULT_SYSTEM_MESSAGE

_TRUE = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE = frozenset({"0", "f", "false", "n", "no", "off"})


def _flag_value(text: str) -> bool:
    value = text.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {text!r}")


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """``--stream [BOOL]`` (bare means true) and ``--no-stream``; off by default."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--stream", nargs="?", const=True, default=False, type=_flag_value, metavar="BOOL")
    group.add_argument("--no-stream", dest="stream", action="store_false")


def _add_chat(sub: argparse._SubParsersAction) -> None:
    chat = sub.add_parser("chat", help="Send one prompt and print the reply (default)")
    chat.add_argument("--provider", help="Provider name; inferred from the model when omitted")
    chat.add_argument("--model")
    chat.add_argument("--system", default=CLI_DEFAULT_SYSTEM_MESSAGE, help="System message ('' to omit)")
    chat.add_argument("--temperature", type=float)
    chat.add_argument("--max-tokens", type=int)
    add_stream_flags(chat)
    chat.add_argument("--show-reasoning", action="store_true", help="Also print reasoning text to stderr")
    chat.add_argument("--config", help="Path to a provider config JSON file")
    chat.add_argument("--json", action="store_true", help="Print the full response as JSON")
    chat.add_argument("prompt", nargs="*", help="Prompt text; read from stdin when omitted")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="llmhub", description="One-shot chat against OpenAI-compatible providers")
    parser.add_argument("--log-level", help="Override LLMHUB_LOG_LEVEL for this run")
    sub = parser.add_subparsers(dest="cmd")
    _add_chat(sub)
    providers = sub.add_parser("providers", help="List known providers and their capabilities")
    providers.add_argument("--json", action="store_true")
    return parser


__all__ = ["build_parser", "add_stream_flags"]
