"""crux_stream package

Provider-independent streaming core for LLM text generation.

Purpose:
    Translate each provider's streaming wire protocol into one canonical,
    lazily produced event sequence; drive multi-step tool calling on top of
    it; rebuild the resulting conversation; and render the sequence as
    server-sent events, a chunked data protocol or broadcast notifications.

Public API (re-exported):
    - Version: ``__version__``
    - Entry points: :class:`TextStream`, :func:`stream_text`
    - Factory: :class:`ProducerFactory`
    - Request/tool types: :class:`TextRequest`, :class:`Tool`,
      :class:`UserMessage`, :class:`SystemMessage`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
"""

from .base.errors import ErrorCode, ProviderError
from .base.factory import ProducerFactory, UnknownProviderError
from .base.models import FinishReason, SystemMessage, TextRequest, UserMessage
from .base.streaming.events import StreamEvent, StreamEventType
from .base.tools import Tool, ToolRegistry
from .stream import TextStream, stream_text

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "TextStream",
    "stream_text",
    "ProducerFactory",
    "UnknownProviderError",
    "TextRequest",
    "SystemMessage",
    "UserMessage",
    "FinishReason",
    "StreamEvent",
    "StreamEventType",
    "Tool",
    "ToolRegistry",
    "ProviderError",
    "ErrorCode",
]
