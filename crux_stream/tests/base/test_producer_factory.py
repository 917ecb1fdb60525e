from __future__ import annotations

import httpx
import pytest

from crux_stream.anthropic import AnthropicStreamProducer
from crux_stream.base.factory import ProducerFactory, UnknownProviderError
from crux_stream.replicate import ReplicateStreamProducer


def test_supported_providers():
    assert ProducerFactory.supported() == ("anthropic", "openai", "ollama", "replicate")


def test_create_is_case_insensitive_and_forwards_kwargs():
    producer = ProducerFactory.create(" Replicate ", client=httpx.Client(), config={"poll_interval_ms": 10})
    assert isinstance(producer, ReplicateStreamProducer)
    assert producer.poll_interval_seconds == 0.01


def test_create_default_config():
    producer = ProducerFactory.create("anthropic")
    assert isinstance(producer, AnthropicStreamProducer)
    assert producer.config["base_url"].startswith("https://api.anthropic.com")


def test_unknown_provider():
    with pytest.raises(UnknownProviderError, match="Unknown provider 'gemini'"):
        ProducerFactory.create("gemini")


def test_bad_constructor_arguments():
    with pytest.raises(UnknownProviderError, match="Invalid arguments"):
        ProducerFactory.create("openai", bogus=True)
