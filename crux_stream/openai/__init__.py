"""OpenAI Responses API streaming."""

from .stream import OpenAIStreamProducer

__all__ = ["OpenAIStreamProducer"]
