"""Messages API payload construction for Anthropic."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from ..base.models import AssistantMessage, Message, TextRequest, ToolResultMessage, UserMessage


def _result_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)


def map_message(message: Message) -> Dict[str, Any]:
    if isinstance(message, UserMessage):
        return {"role": "user", "content": message.content}
    if isinstance(message, AssistantMessage):
        blocks: List[Dict[str, Any]] = []
        thinking = message.additional_content.get("thinking")
        signature = message.additional_content.get("thinking_signature")
        if thinking and signature:
            blocks.append({"type": "thinking", "thinking": thinking, "signature": signature})
        if message.content:
            blocks.append({"type": "text", "text": message.content})
        for call in message.tool_calls:
            blocks.append({"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments()})
        return {"role": "assistant", "content": blocks}
    if isinstance(message, ToolResultMessage):
        return {
            "role": "user",
            "content": [
                {"type": "tool_result", "tool_use_id": r.tool_call_id, "content": _result_text(r.result)}
                for r in message.tool_results
            ],
        }
    raise TypeError(f"unsupported message type for anthropic: {type(message).__name__}")


def build_payload(request: TextRequest, config: Mapping[str, Any]) -> Dict[str, Any]:
    """Build the streaming ``POST /messages`` body."""
    payload: Dict[str, Any] = {
        "model": request.model,
        "max_tokens": request.max_tokens or int(config.get("max_tokens", 0)),
        "stream": True,
        "messages": [map_message(m) for m in request.messages],
    }
    if request.system_prompts:
        payload["system"] = [{"type": "text", "text": s.content} for s in request.system_prompts]
    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.top_p is not None:
        payload["top_p"] = request.top_p
    if request.tools:
        payload["tools"] = [
            {"name": t.name, "description": t.description, "input_schema": t.json_schema()} for t in request.tools
        ]
    payload.update(request.provider_options)
    return payload


def build_headers(config: Mapping[str, Any]) -> Dict[str, str]:
    headers = {"anthropic-version": str(config.get("api_version", "")), "content-type": "application/json"}
    if config.get("api_key"):
        headers["x-api-key"] = str(config["api_key"])
    return headers


__all__ = ["build_payload", "build_headers", "map_message"]
