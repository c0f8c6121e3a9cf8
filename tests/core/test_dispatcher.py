"""Tests for ToolDispatcher."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import BaseModel

from mcpkit.core.cancellation import CancellationToken
from mcpkit.core.dispatcher import COMPLETION_MESSAGE, ToolDispatcher, ToolOutcome, render_text
from mcpkit.core.registry import ToolRegistry
from mcpkit.protocol.errors import InvalidArgumentsError, ToolNotFoundError
from mcpkit.protocol.models import Tool
from tests.conftest import add, fail

received: list[object] = []


class EchoParams(BaseModel):
    text: str


@dataclasses.dataclass
class Pair:
    left: int
    right: int


def echo(params: EchoParams) -> str:
    return params.text


def nothing(params: EchoParams) -> None:
    received.append(params)


def returns_none_anyway(params: EchoParams) -> str | None:
    return None


def sum_pair(params: Pair) -> int:
    return params.left + params.right


@dataclasses.dataclass
class Point:
    x: int
    y: int


class RouteParams(BaseModel):
    start: Point
    tags: list[str]


def route(params: RouteParams) -> str:
    return f"{params.start.x},{params.start.y} {' '.join(params.tags)}"


def record_token(token: CancellationToken, params: EchoParams) -> str:
    received.append(token)
    return "cancelled" if token.cancelled else "running"


def empty_message(params: EchoParams) -> str:
    raise RuntimeError()


@pytest.fixture
def dispatcher() -> ToolDispatcher:
    received.clear()
    registry = ToolRegistry()
    registry.register_tool(Tool(name="calculator/add"), add)
    registry.register_tool(Tool(name="fail"), fail)
    registry.register_tool(Tool(name="echo"), echo)
    registry.register_tool(Tool(name="nothing"), nothing)
    registry.register_tool(Tool(name="maybe"), returns_none_anyway)
    registry.register_tool(Tool(name="pair"), sum_pair)
    registry.register_tool(Tool(name="route"), route)
    registry.register_tool(Tool(name="token"), record_token)
    registry.register_tool(Tool(name="empty"), empty_message)
    return ToolDispatcher(registry)


class TestInvoke:
    def test_add_renders_five(self, dispatcher: ToolDispatcher) -> None:
        outcome = dispatcher.invoke("calculator/add", {"a": 2, "b": 3})
        assert outcome == ToolOutcome(text="5", is_error=False)

    def test_dataclass_parameters(self, dispatcher: ToolDispatcher) -> None:
        assert dispatcher.invoke("pair", {"left": 4, "right": 5}).text == "9"

    def test_handler_error_becomes_outcome(self, dispatcher: ToolDispatcher) -> None:
        outcome = dispatcher.invoke("fail", {"a": 1, "b": 0})
        assert outcome.is_error
        assert outcome.text == "division by zero is not allowed"

    def test_error_without_message_uses_class_name(self, dispatcher: ToolDispatcher) -> None:
        outcome = dispatcher.invoke("empty", {"text": "x"})
        assert outcome == ToolOutcome(text="RuntimeError", is_error=True)

    def test_none_return_gives_completion_message(self, dispatcher: ToolDispatcher) -> None:
        assert dispatcher.invoke("nothing", {"text": "x"}).text == COMPLETION_MESSAGE
        assert dispatcher.invoke("maybe", {"text": "x"}).text == COMPLETION_MESSAGE

    def test_unknown_tool(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(ToolNotFoundError):
            dispatcher.invoke("nope", {})

    def test_invalid_arguments_skip_handler(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(InvalidArgumentsError, match="Invalid arguments for tool nothing") as exc_info:
            dispatcher.invoke("nothing", {"text": {"not": "a string"}})
        assert exc_info.value.data
        assert received == []

    def test_missing_arguments(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(InvalidArgumentsError):
            dispatcher.invoke("calculator/add", None)

    def test_non_mapping_arguments(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(InvalidArgumentsError, match="Invalid arguments"):
            dispatcher.invoke("echo", ["text"])  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "arguments",
        [
            {"a": "2", "b": "3"},
            {"a": True, "b": 3},
            {"a": None, "b": 3},
            {"a": [2], "b": 3},
        ],
    )
    def test_wrong_types_rejected(self, dispatcher: ToolDispatcher, arguments: dict[str, object]) -> None:
        with pytest.raises(InvalidArgumentsError, match="Invalid arguments for tool calculator/add"):
            dispatcher.invoke("calculator/add", arguments)

    def test_int_accepted_for_float(self, dispatcher: ToolDispatcher) -> None:
        assert dispatcher.invoke("calculator/add", {"a": 2, "b": 0.5}).text == "2.5"

    def test_bool_rejected_for_int(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(InvalidArgumentsError):
            dispatcher.invoke("pair", {"left": True, "right": 1})

    def test_nested_objects_decoded(self, dispatcher: ToolDispatcher) -> None:
        assert dispatcher.invoke("route", {"start": {"x": 1, "y": 2}, "tags": ["a"]}).text == "1,2 a"

    def test_non_json_arguments(self, dispatcher: ToolDispatcher) -> None:
        with pytest.raises(InvalidArgumentsError, match="Invalid arguments"):
            dispatcher.invoke("echo", {"text": object()})


class TestCancellationToken:
    def test_fresh_token_per_call(self, dispatcher: ToolDispatcher) -> None:
        dispatcher.invoke("token", {"text": "x"})
        dispatcher.invoke("token", {"text": "x"})
        first, second = received
        assert isinstance(first, CancellationToken)
        assert first is not second
        assert not first.cancelled

    def test_caller_supplied_token(self, dispatcher: ToolDispatcher) -> None:
        token = CancellationToken()
        token.cancel("client went away")
        outcome = dispatcher.invoke("token", {"text": "x"}, token)
        assert outcome.text == "cancelled"
        assert received == [token]


class TestCall:
    def test_wraps_result(self, dispatcher: ToolDispatcher) -> None:
        result = dispatcher.call("echo", {"text": "hi"})
        assert result.to_wire() == {
            "content": [{"type": "text", "text": "hi"}],
            "isError": False,
        }


class TestRenderText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            (True, "true"),
            (False, "false"),
            (5.0, "5"),
            (2.5, "2.5"),
            (7, "7"),
            ({"k": 1}, '{"k": 1}'),
            ([1, 2], "[1, 2]"),
        ],
    )
    def test_values(self, value: object, expected: str) -> None:
        assert render_text(value) == expected

    def test_model(self) -> None:
        assert render_text(EchoParams(text="x")) == '{"text":"x"}'

    def test_dataclass(self) -> None:
        assert render_text(Pair(left=1, right=2)) == '{"left": 1, "right": 2}'
