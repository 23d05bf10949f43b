"""CLI action handlers.

Purpose
-------
Subcommand handlers for the ``llmhub`` CLI, kept apart from argument wiring
so they can be called directly in tests. No top-level side effects.

Error Semantics
---------------
Library errors (``ProviderError``) are rendered with ``user_message()`` on
stderr (or as a JSON ``error`` object with ``--json``) and yield exit code 1.
Anything else propagates.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from ..base.errors import ConfigurationError, ProviderError
from ..base.models import ChatCompletion, Message
from ..base.registry import REGISTRY, parse_provider
from ..client import LLMClient
from ..config.defaults import CLI_DEFAULT_MODEL, CLI_DEFAULT_PROVIDER
from ..models import models_for

ClientFactory = Callable[[Optional[str]], LLMClient]


def _default_client_factory(config_path: Optional[str]) -> LLMClient:
    """Build a client from the config file (or the default location) and env."""
    return LLMClient.from_config(config_path)


def plan_chat(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> Dict[str, Any]:
    """Resolve provider, model, messages and options from parsed arguments.

    With neither provider nor model the CLI defaults are used. With only a
    provider, its first catalog model is used. With only a model, the
    client infers the provider from the catalog.
    """
    model = args.model
    provider = args.provider
    if model is None and provider is None:
        model, provider = CLI_DEFAULT_MODEL, CLI_DEFAULT_PROVIDER
    elif model is None:
        hosted = models_for(parse_provider(provider))
        if not hosted:
            raise ConfigurationError(f"no default model known for provider '{provider}'; pass --model")
        model = hosted[0]
    prompt = " ".join(args.prompt).strip() if args.prompt else ""
    if not prompt:
        prompt = (stdin or sys.stdin).read().strip()
    messages: List[Message] = []
    if args.system:
        messages.append(Message.system(args.system))
    if prompt:
        messages.append(Message.user(prompt))
    options: Dict[str, Any] = {}
    if args.temperature is not None:
        options["temperature"] = args.temperature
    if args.max_tokens is not None:
        options["max_tokens"] = args.max_tokens
    return {"provider": provider, "model": model, "messages": messages, "options": options}


def _print_error(err: ProviderError, as_json: bool, out: TextIO, err_out: TextIO) -> int:
    """Render ``err`` for the user and return the failing exit code.

    With ``--json`` the error goes to stdout as ``{"error": {...}}`` so
    scripted callers parse one stream; otherwise a single line on stderr.
    """
    if as_json:
        payload = {"error": {"code": err.code.value, "message": err.user_message(), "provider": err.provider}}
        print(json.dumps(payload, ensure_ascii=False), file=out)
    else:
        print(f"Error: {err.user_message()}", file=err_out)
    return 1


def _print_completion(completion: ChatCompletion, args: argparse.Namespace, out: TextIO, err_out: TextIO) -> None:
    """Print a complete reply: the full document with ``--json``, else its text.

    Reasoning text goes to ``err_out`` when ``--show-reasoning`` is set, so
    stdout carries only the answer.
    """
    if args.json:
        print(json.dumps(completion.model_dump(mode="json", exclude_none=True), ensure_ascii=False), file=out)
        return
    if args.show_reasoning and completion.reasoning():
        print(completion.reasoning(), file=err_out)
    print(completion.content() or "", file=out)


def handle_chat(
    args: argparse.Namespace,
    *,
    client_factory: ClientFactory = _default_client_factory,
    stdin: Optional[TextIO] = None,
    out: Optional[TextIO] = None,
    err_out: Optional[TextIO] = None,
) -> int:
    """Run one chat exchange and print the reply.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed ``chat`` arguments.
    client_factory: ClientFactory
        Builds the client from ``--config``; tests inject fakes here.
    stdin, out, err_out: Optional[TextIO]
        Stream overrides; default to the process streams.

    Streaming replies are written delta by delta and flushed as they arrive.
    The client (and with it the stream) is closed before returning.

    Returns
    -------
    int
        0 on success, 1 on a library error.
    """
    out = out or sys.stdout
    err_out = err_out or sys.stderr
    try:
        plan = plan_chat(args, stdin)
        with client_factory(args.config) as client:
            if not args.stream:
                completion = client.chat(
                    plan["model"], plan["messages"], provider=plan["provider"], options=plan["options"]
                )
                _print_completion(completion, args, out, err_out)
                return 0
            with client.chat_stream(
                plan["model"], plan["messages"], provider=plan["provider"], options=plan["options"]
            ) as stream:
                if args.json:
                    _print_completion(stream.collect(), args, out, err_out)
                    return 0
                for chunk in stream.chunks():
                    if args.show_reasoning and (reasoning := chunk.reasoning()):
                        err_out.write(reasoning)
                        err_out.flush()
                    if text := chunk.content():
                        out.write(text)
                        out.flush()
                out.write("\n")
            return 0
    except ProviderError as err:
        return _print_error(err, args.json, out, err_out)


def handle_providers(args: argparse.Namespace, *, out: Optional[TextIO] = None) -> int:
    """Print every registry entry with its base URL and capabilities.

    One aligned line per provider, or a JSON list with ``--json``. Reads only
    the static registry; no configuration or network access.
    """
    out = out or sys.stdout
    rows = [
        {
            "provider": d.provider.value,
            "base_url": d.base_url,
            "capabilities": sorted(c.value for c in d.capabilities),
        }
        for d in REGISTRY.values()
    ]
    if args.json:
        print(json.dumps(rows, ensure_ascii=False), file=out)
        return 0
    for row in rows:
        print(f"{row['provider']:<12} {row['base_url']}  [{', '.join(row['capabilities'])}]", file=out)
    return 0


__all__ = ["plan_chat", "handle_chat", "handle_providers", "ClientFactory"]
