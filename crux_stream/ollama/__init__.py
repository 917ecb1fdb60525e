"""Ollama streaming over newline-delimited JSON."""

from .stream import OllamaStreamProducer

__all__ = ["OllamaStreamProducer"]
