"""llmhub.config.defaults
=====================

Central place for small, stable default values used by the configuration
loader and the CLI. These can be overridden through environment
variables or command-line flags.

This module avoids importing from other llmhub packages to prevent circular
dependencies. Only plain constants and lightweight helpers live here.
"""

from __future__ import annotations

import os

# ---- Configuration file ----
# Directory and file holding the provider list (JSON array of records).
CONFIG_DIR_NAME = ".llmhub"
CONFIG_FILE_NAME = "config.json"
# Environment variable pointing at an alternative configuration file.
CONFIG_FILE_ENV = "LLMHUB_CONFIG_FILE"


def default_config_path() -> str:
    """Return ``~/.llmhub/config.json`` (or ``./.llmhub`` without a home)."""
    home = os.path.expanduser("~")
    if not home or home == "~":
        home = "."
    return os.path.join(home, CONFIG_DIR_NAME, CONFIG_FILE_NAME)


# ---- CLI defaults ----
# Provider and model used by the one-shot CLI when none is specified.
CLI_DEFAULT_PROVIDER = "deepseek"
CLI_DEFAULT_MODEL = "deepseek-chat"
CLI_DEFAULT_SYSTEM_MESSAGE = "You are a helpful assistant."


__all__ = [
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "CONFIG_FILE_ENV",
    "default_config_path",
    "CLI_DEFAULT_PROVIDER",
    "CLI_DEFAULT_MODEL",
    "CLI_DEFAULT_SYSTEM_MESSAGE",
]
