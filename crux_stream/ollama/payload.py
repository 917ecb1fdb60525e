"""``/api/chat`` payload construction for a local Ollama daemon."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from ..base.models import AssistantMessage, Message, TextRequest, ToolResultMessage, UserMessage


def map_messages(message: Message) -> List[Dict[str, Any]]:
    if isinstance(message, UserMessage):
        return [{"role": "user", "content": message.content}]
    if isinstance(message, AssistantMessage):
        out: Dict[str, Any] = {"role": "assistant", "content": message.content}
        if message.tool_calls:
            out["tool_calls"] = [
                {"function": {"name": c.name, "arguments": c.arguments()}} for c in message.tool_calls
            ]
        return [out]
    if isinstance(message, ToolResultMessage):
        return [
            {
                "role": "tool",
                "tool_name": r.tool_name,
                "content": r.result if isinstance(r.result, str) else json.dumps(r.result, default=str),
            }
            for r in message.tool_results
        ]
    raise TypeError(f"unsupported message type for ollama: {type(message).__name__}")


def build_payload(request: TextRequest) -> Dict[str, Any]:
    """Build the streaming ``POST /api/chat`` body."""
    messages: List[Dict[str, Any]] = [{"role": "system", "content": s.content} for s in request.system_prompts]
    for message in request.messages:
        messages.extend(map_messages(message))
    options: Dict[str, Any] = {}
    if request.temperature is not None:
        options["temperature"] = request.temperature
    if request.top_p is not None:
        options["top_p"] = request.top_p
    if request.max_tokens is not None:
        options["num_predict"] = request.max_tokens
    payload: Dict[str, Any] = {"model": request.model, "messages": messages, "stream": True}
    if options:
        payload["options"] = options
    if request.tools:
        payload["tools"] = [
            {
                "type": "function",
                "function": {"name": t.name, "description": t.description, "parameters": t.json_schema()},
            }
            for t in request.tools
        ]
    if request.schema is not None:
        payload["format"] = request.schema
    provider_options = dict(request.provider_options)
    if "thinking" in provider_options:
        payload["think"] = provider_options.pop("thinking")
    payload.update(provider_options)
    return payload


__all__ = ["build_payload", "map_messages"]
