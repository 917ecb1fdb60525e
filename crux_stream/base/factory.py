"""Stream producer factory.

Purpose
-------
Resolve a canonical provider name (``"anthropic"``, ``"openai"``,
``"ollama"``, ``"replicate"``) to a :class:`StreamProducer` instance.
Producer modules are imported lazily with ``importlib`` so that importing the
factory does not import every provider.

Failure semantics
-----------------
The factory never falls back to another provider: it returns an instance or
raises :class:`UnknownProviderError` naming what went wrong.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from .streaming.producer import StreamProducer


class UnknownProviderError(Exception):
    """Raised when a provider name cannot be resolved to a producer.

    Failure modes include an unregistered name, a module that fails to
    import, a missing producer class, and constructor errors.
    """


class ProducerFactory:
    """Create stream producers by canonical provider name."""

    _PRODUCERS: Dict[str, Dict[str, str]] = {
        "anthropic": {"module": "crux_stream.anthropic.stream", "class": "AnthropicStreamProducer"},
        "openai": {"module": "crux_stream.openai.stream", "class": "OpenAIStreamProducer"},
        "ollama": {"module": "crux_stream.ollama.stream", "class": "OllamaStreamProducer"},
        "replicate": {"module": "crux_stream.replicate.stream", "class": "ReplicateStreamProducer"},
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> StreamProducer:
        """Create the producer registered for ``provider``.

        ``kwargs`` are forwarded to the producer constructor (``client``,
        ``config``, ``cancellation_token`` and producer-specific options).

        Raises:
            UnknownProviderError: unknown name, import failure, missing class
                or invalid constructor arguments.
        """
        name = (provider or "").lower().strip()
        spec = cls._PRODUCERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{provider}'")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type[StreamProducer] = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - registry typo
            raise UnknownProviderError(
                f"Producer class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' producer constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._PRODUCERS.keys())


__all__ = ["ProducerFactory", "UnknownProviderError"]
