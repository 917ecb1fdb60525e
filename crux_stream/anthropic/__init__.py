"""Anthropic Messages API streaming."""

from .stream import AnthropicStreamProducer

__all__ = ["AnthropicStreamProducer"]
