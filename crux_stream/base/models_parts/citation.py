"""Citation value objects attached to generated text."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class CitationSourceType(str, Enum):
    DOCUMENT = "document"
    URL = "url"


class CitationSourcePositionType(str, Enum):
    CHARACTER = "character"
    PAGE = "page"
    CHUNK = "chunk"


@dataclass(frozen=True)
class Citation:
    """One source backing a span of generated text.

    Attributes:
        source_type: Whether ``source`` is a document reference or a URL.
        source: Document index/id or the URL.
        source_text: Quoted text from the source, when provided.
        source_title: Human-readable title of the source.
        source_position_type: Unit of the start/end indices.
        source_start_index / source_end_index: Position of the cited span.
        additional_content: Provider-specific extras.
    """

    source_type: CitationSourceType
    source: str
    source_text: Optional[str] = None
    source_title: Optional[str] = None
    source_position_type: Optional[CitationSourcePositionType] = None
    source_start_index: Optional[int] = None
    source_end_index: Optional[int] = None
    additional_content: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_type": self.source_type.value,
            "source": self.source,
            "source_text": self.source_text,
            "source_title": self.source_title,
            "source_position_type": self.source_position_type.value if self.source_position_type else None,
            "source_start_index": self.source_start_index,
            "source_end_index": self.source_end_index,
            "additional_content": dict(self.additional_content),
        }


@dataclass(frozen=True)
class MessagePartWithCitations:
    """A text segment and the citations that support it."""

    output_text: str
    citations: Tuple[Citation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output_text": self.output_text,
            "citations": [c.to_dict() for c in self.citations],
        }


__all__ = [
    "Citation",
    "CitationSourceType",
    "CitationSourcePositionType",
    "MessagePartWithCitations",
]
