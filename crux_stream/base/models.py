"""Core value objects (public API facade).

Re-exports the one-class-per-file implementations under ``models_parts``.
"""

from .models_parts.citation import (
    Citation,
    CitationSourcePositionType,
    CitationSourceType,
    MessagePartWithCitations,
)
from .models_parts.finish_reason import FinishReason
from .models_parts.messages import (
    AssistantMessage,
    Message,
    Role,
    SystemMessage,
    ToolResultMessage,
    UserMessage,
)
from .models_parts.rate_limit import ProviderRateLimit
from .models_parts.text_request import TextRequest
from .models_parts.usage import Usage

__all__ = [
    "Citation",
    "CitationSourceType",
    "CitationSourcePositionType",
    "MessagePartWithCitations",
    "FinishReason",
    "Message",
    "Role",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolResultMessage",
    "ProviderRateLimit",
    "TextRequest",
    "Usage",
]
