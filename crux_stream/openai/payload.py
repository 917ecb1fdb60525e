"""Responses API payload construction for OpenAI."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from ..base.models import AssistantMessage, Message, TextRequest, ToolResultMessage, UserMessage


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)


def _reasoning_items(message: AssistantMessage) -> List[Dict[str, Any]]:
    """Reasoning items the turn's function calls were issued under, in stream order."""
    wanted = {call.reasoning_id for call in message.tool_calls if call.reasoning_id}
    items: List[Dict[str, Any]] = []
    for raw in message.additional_content.get("reasoning_items") or []:
        if raw.get("id") not in wanted:
            continue
        item: Dict[str, Any] = {"type": "reasoning", "id": raw["id"], "summary": raw.get("summary") or []}
        if raw.get("encrypted_content"):
            item["encrypted_content"] = raw["encrypted_content"]
        items.append(item)
    return items


def map_input_items(message: Message) -> List[Dict[str, Any]]:
    """Map one conversation message onto Responses ``input`` items."""
    if isinstance(message, UserMessage):
        return [{"role": "user", "content": message.content}]
    if isinstance(message, AssistantMessage):
        items = _reasoning_items(message)
        if message.content:
            items.append({"role": "assistant", "content": message.content})
        for call in message.tool_calls:
            items.append(
                {
                    "type": "function_call",
                    "call_id": call.result_id or call.id,
                    "name": call.name,
                    "arguments": json.dumps(call.arguments(), ensure_ascii=False),
                }
            )
        return items
    if isinstance(message, ToolResultMessage):
        return [
            {
                "type": "function_call_output",
                "call_id": r.tool_call_result_id or r.tool_call_id,
                "output": _as_text(r.result),
            }
            for r in message.tool_results
        ]
    raise TypeError(f"unsupported message type for openai: {type(message).__name__}")


def build_payload(request: TextRequest) -> Dict[str, Any]:
    """Build the streaming ``POST /responses`` body."""
    items: List[Dict[str, Any]] = [{"role": "system", "content": s.content} for s in request.system_prompts]
    for message in request.messages:
        items.extend(map_input_items(message))
    payload: Dict[str, Any] = {"model": request.model, "input": items, "stream": True}
    if request.max_tokens is not None:
        payload["max_output_tokens"] = request.max_tokens
    if request.temperature is not None:
        payload["temperature"] = request.temperature
    if request.top_p is not None:
        payload["top_p"] = request.top_p
    if request.tools:
        payload["tools"] = [
            {
                "type": "function",
                "name": t.name,
                "description": t.description,
                "parameters": t.json_schema(),
            }
            for t in request.tools
        ]
    if request.schema is not None:
        payload["text"] = {
            "format": {"type": "json_schema", "name": "response", "schema": request.schema, "strict": True}
        }
    payload.update(request.provider_options)
    return payload


def build_headers(config: Mapping[str, Any]) -> Dict[str, str]:
    headers = {"content-type": "application/json"}
    if config.get("api_key"):
        headers["authorization"] = f"Bearer {config['api_key']}"
    return headers


__all__ = ["build_payload", "build_headers", "map_input_items"]
