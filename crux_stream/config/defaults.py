"""crux_stream.config.defaults
==========================

Small, stable default values for providers. They can be overridden through
the external config file, environment variables or explicit overrides (see
:func:`crux_stream.config.get_provider_config`).

Only plain constants live here; this module imports nothing from the rest of
the package.
"""

from __future__ import annotations

# ---- Anthropic ----
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-20250514"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"
# Messages API requires max_tokens on every request.
ANTHROPIC_DEFAULT_MAX_TOKENS = 2048

# ---- OpenAI (Responses API) ----
OPENAI_DEFAULT_MODEL = "gpt-5"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

# ---- Ollama (local daemon) ----
OLLAMA_DEFAULT_MODEL = "gpt-oss:20b"
OLLAMA_DEFAULT_HOST = "http://localhost:11434"

# ---- Replicate (asynchronous predictions) ----
REPLICATE_DEFAULT_MODEL = "meta/meta-llama-3-8b-instruct"
REPLICATE_DEFAULT_BASE_URL = "https://api.replicate.com/v1"
# Poll/simulate strategy: interval between status checks and total wait budget.
REPLICATE_POLL_INTERVAL_MS = 1000
REPLICATE_MAX_WAIT_SECONDS = 60


__all__ = [
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_HOST",
    "REPLICATE_DEFAULT_MODEL",
    "REPLICATE_DEFAULT_BASE_URL",
    "REPLICATE_POLL_INTERVAL_MS",
    "REPLICATE_MAX_WAIT_SECONDS",
]
