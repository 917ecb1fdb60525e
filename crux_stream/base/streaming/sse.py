"""Line-oriented frame readers for push-based provider streams.

Two wire shapes are supported:

* Server-sent events: ``field: value`` lines terminated by a blank line.
  ``event:`` selects how the following ``data:`` is interpreted and
  ``:``-prefixed lines are comments. ``id:`` and ``retry:`` are ignored.
* Newline-delimited JSON: one JSON object per non-empty line.

Both readers are generators over an iterable of decoded lines (typically
``httpx.Response.iter_lines()``), so they stop reading as soon as the
consumer stops pulling.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional

from ..errors_parts.stream_errors import StreamDecodeError


@dataclass(frozen=True)
class SSEFrame:
    """One server-sent event; ``event`` is ``None`` for data-only frames."""

    event: Optional[str]
    data: str

    def json(self, *, provider: str, model: Optional[str] = None) -> Dict[str, Any]:
        return decode_json_object(self.data, provider=provider, model=model)


def iter_sse_frames(lines: Iterable[str]) -> Iterator[SSEFrame]:
    """Group raw lines into :class:`SSEFrame` objects.

    A new ``event:`` line while a frame is still pending flushes the pending
    frame first, so streams that omit the blank separator still parse.
    """
    event: Optional[str] = None
    data: Optional[str] = None
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if event is not None or data is not None:
                yield SSEFrame(event=event, data=data or "")
            event, data = None, None
            continue
        if line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "event":
            if data is not None:
                yield SSEFrame(event=event, data=data)
                data = None
            event = value
        elif name == "data":
            data = value if data is None else f"{data}\n{value}"
    if event is not None or data is not None:
        yield SSEFrame(event=event, data=data or "")


def decode_json_object(text: str, *, provider: str, model: Optional[str] = None) -> Dict[str, Any]:
    """Decode ``text`` as a JSON object or raise :class:`StreamDecodeError`."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StreamDecodeError(
            f"malformed stream chunk: {exc.msg}",
            provider=provider,
            model=model,
            frame=text,
            raw=exc,
        ) from exc
    if not isinstance(parsed, dict):
        raise StreamDecodeError(
            "stream chunk is not a JSON object",
            provider=provider,
            model=model,
            frame=text,
        )
    return parsed


def iter_json_lines(lines: Iterable[str], *, provider: str, model: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Yield one decoded object per non-empty NDJSON line."""
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        yield decode_json_object(line, provider=provider, model=model)


__all__ = ["SSEFrame", "iter_sse_frames", "iter_json_lines", "decode_json_object"]
