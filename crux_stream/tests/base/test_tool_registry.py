from __future__ import annotations

import pytest

from crux_stream.base.dto import ToolCall
from crux_stream.base.errors import ToolArgumentsError, ToolExecutionError, ToolNotFoundError
from crux_stream.base.tools import Tool, ToolRegistry


def _add(args):
    return args["a"] + args["b"]


def _boom(args):
    raise RuntimeError("kaput")


def test_execute_decodes_arguments():
    registry = ToolRegistry([Tool(name="add", handler=_add, parameters={"a": {"type": "integer"}}, required=("a",))])
    outcome = registry.execute(ToolCall(id="c1", name="add", raw_arguments='{"a": 2, "b": 3}', result_id="r1"))
    assert outcome.success
    assert outcome.result.result == 5
    assert outcome.result.args == {"a": 2, "b": 3}
    assert outcome.result.tool_call_result_id == "r1"


def test_mapping_and_empty_arguments():
    assert ToolCall(id="c", name="t", raw_arguments={"x": 1}).arguments() == {"x": 1}
    assert ToolCall(id="c", name="t", raw_arguments="   ").arguments() == {}


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
def test_bad_arguments(raw):
    with pytest.raises(ToolArgumentsError):
        ToolCall(id="c", name="t", raw_arguments=raw).arguments()


def test_unknown_tool():
    with pytest.raises(ToolNotFoundError) as info:
        ToolRegistry().get("missing")
    assert info.value.tool_name == "missing"


def test_failure_is_fatal_without_failed_handler(log_records):
    registry = ToolRegistry([Tool(name="boom", handler=_boom)])
    with pytest.raises(ToolExecutionError) as info:
        registry.execute(ToolCall(id="c1", name="boom"))
    assert isinstance(info.value.raw, RuntimeError)
    assert any(r.get("event") == "tool.error" and r.get("swallowed") is False for r in log_records)


def test_failure_is_swallowed_with_failed_handler():
    tool = Tool(name="boom", handler=_boom).with_error_handling(lambda exc, args: f"handled: {exc}")
    outcome = ToolRegistry([tool]).execute(ToolCall(id="c1", name="boom"))
    assert not outcome.success
    assert outcome.error == "kaput"
    assert outcome.result.result == "handled: kaput"
    assert not tool.without_error_handling().swallows_errors


def test_later_registration_replaces_earlier():
    registry = ToolRegistry([Tool(name="t", handler=lambda a: 1)])
    registry.register(Tool(name="t", handler=lambda a: 2))
    assert registry.names() == ["t"]
    assert registry.execute(ToolCall(id="c", name="t")).result.result == 2


def test_json_schema():
    tool = Tool(name="w", handler=_add, parameters={"city": {"type": "string"}}, required=("city",))
    assert tool.json_schema() == {
        "type": "object",
        "properties": {"city": {"type": "string"}},
        "required": ["city"],
    }
