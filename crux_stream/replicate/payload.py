"""Prediction payload construction for Replicate language models.

Replicate models take a single prompt string, so the conversation is
flattened into labelled turns.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Tuple

from ..base.models import AssistantMessage, Message, SystemMessage, TextRequest, ToolResultMessage, UserMessage


def _turn(message: Message) -> str:
    if isinstance(message, SystemMessage):
        return f"System: {message.content}"
    if isinstance(message, UserMessage):
        return f"User: {message.content}"
    if isinstance(message, AssistantMessage):
        return f"Assistant: {message.content}"
    if isinstance(message, ToolResultMessage):
        results = [
            "Tool: {}\nResult: {}".format(
                r.tool_name, r.result if isinstance(r.result, str) else json.dumps(r.result, default=str)
            )
            for r in message.tool_results
        ]
        return "Tool Results:\n" + "\n\n".join(results)
    return ""


def build_prompt(request: TextRequest) -> str:
    turns: List[str] = [_turn(m) for m in (*request.system_prompts, *request.messages)]
    return "\n\n".join(t for t in turns if t).strip()


def prediction_target(request: TextRequest) -> Tuple[str, Dict[str, Any]]:
    """Return the create path and the identifying payload fields.

    ``owner/name:version`` pins a version through ``POST /predictions``;
    a bare ``owner/name`` runs the model's latest version through
    ``POST /models/owner/name/predictions``.
    """
    if ":" in request.model:
        return "/predictions", {"version": request.model.split(":", 1)[1]}
    return f"/models/{request.model}/predictions", {}


def build_payload(request: TextRequest) -> Dict[str, Any]:
    inputs: Dict[str, Any] = {"prompt": build_prompt(request)}
    if request.max_tokens is not None:
        inputs["max_tokens"] = request.max_tokens
    if request.temperature is not None:
        inputs["temperature"] = request.temperature
    if request.top_p is not None:
        inputs["top_p"] = request.top_p
    inputs.update(request.provider_options)
    _, target = prediction_target(request)
    return {**target, "input": inputs, "stream": True}


def build_headers(config: Mapping[str, Any]) -> Dict[str, str]:
    headers = {"content-type": "application/json"}
    if config.get("api_key"):
        headers["authorization"] = f"Bearer {config['api_key']}"
    return headers


__all__ = ["build_prompt", "build_payload", "build_headers", "prediction_target"]
