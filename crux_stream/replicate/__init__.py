"""Replicate predictions presented as a stream (job channel or poll + tokenize)."""

from .stream import ReplicateStreamProducer

__all__ = ["ReplicateStreamProducer"]
