import pytest

from gptchat.core.exceptions import InvalidResponse
from gptchat.messages.attachments import ChatImageUrl
from gptchat.messages.codec import (
	decode_message,
	deserialize_messages,
	normalize_arguments,
	serialize_messages,
)
from gptchat.messages.types import (
	ChatInput,
	ChatOutput,
	ToolCall,
	ToolResult,
	WebSearchResult,
)


def test_history_round_trip():
	history = [
		ChatInput.mk("What is on this picture?", attachment=ChatImageUrl(url="data:image/png;base64,AAA")),
		ChatOutput(tools=(ToolCall(id="c1", name="describe", arguments={"detail": "high"}),)),
		ToolResult(tool_call_id="c1", content=[{"label": "cat"}]),
		ChatOutput(result="A cat."),
	]

	assert deserialize_messages(serialize_messages(history)) == history


def test_decode_arguments_from_json_string():
	message = decode_message(
		{"type": "tool_call", "id": "c1", "name": "f", "arguments": '{"a": 1}'}
	)

	assert message == ToolCall(id="c1", name="f", arguments={"a": 1})


@pytest.mark.parametrize("arguments", ["[1, 2]", "not json", 5])
def test_decode_invalid_arguments(arguments):
	with pytest.raises(InvalidResponse):
		normalize_arguments(arguments)


@pytest.mark.parametrize(
	"result, expected",
	[
		(None, None),
		("text", "text"),
		({"a": 1}, {"a": 1}),
		([1, 2], "[1, 2]"),
		(3, "3"),
		(2.5, "2.5"),
		(True, "true"),
		(False, "false"),
	],
)
def test_decode_output_result_coercion(result, expected):
	message = decode_message({"type": "output", "result": result, "tools": []})

	assert message.result == expected


def test_decode_output_tools_arguments_always_object():
	message = decode_message(
		{
			"type": "output",
			"result": None,
			"tools": [{"id": "c1", "name": "f", "arguments": '{"x": [1]}'}],
		}
	)

	assert message.tools == (ToolCall(id="c1", name="f", arguments={"x": [1]}),)


def test_decode_tool_result_keeps_content_type():
	message = decode_message({"type": "tool_result", "call_id": "c1", "content": 7, "role": "tool"})

	assert message == ToolResult(tool_call_id="c1", content=7)


def test_decode_web_search_result_scalar_content():
	message = decode_message({"type": "web_search_result", "id": "w1", "content": 42})

	assert message == WebSearchResult(tool_call_id="w1", content="42")


def test_decode_input_defaults():
	message = decode_message({"type": "input", "content": "Hi"})

	assert message == ChatInput.mk("Hi")


@pytest.mark.parametrize(
	"payload",
	[
		{"type": "system", "content": "?"},
		{"content": "no tag"},
		{"type": ["input"]},
		"input",
	],
)
def test_decode_unknown_message(payload):
	with pytest.raises(InvalidResponse, match="Unknown message type"):
		decode_message(payload)


def test_decode_invalid_output_tools():
	with pytest.raises(InvalidResponse):
		decode_message({"type": "output", "result": None, "tools": ["c1"]})
