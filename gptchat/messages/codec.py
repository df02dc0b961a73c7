"""
Tagged (de)serialization of a conversation history.

Serialized form: one dict per message, tagged by `type`
(`input`, `output`, `tool_call`, `tool_result`, `web_search_result`).
Decoding is lenient about loosely typed fields coming back from a browser
or a JSON store: arguments are always decoded to a dict, output results
become str/dict/list/None, and scalars are turned into strings where the
target field is text only.
"""

import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from gptchat.core.exceptions import InvalidResponse
from gptchat.messages.attachments import ChatImageUrl
from gptchat.messages.base import ChatMessage
from gptchat.messages.types import (
	ChatInput,
	ChatOutput,
	ToolCall,
	ToolResult,
	WebSearchResult,
)


# ============================================================
# ENCODE
# ============================================================


def serialize_messages(messages: Iterable[ChatMessage]) -> List[Dict[str, Any]]:
	return [message.to_serialized() for message in messages]


# ============================================================
# NORMALIZERS
# ============================================================


def _string(value: Any, default: str = "") -> str:
	return value if isinstance(value, str) else default


def _scalar_text(value: Any) -> str:
	if isinstance(value, bool):
		return "true" if value else "false"
	return str(value)


def normalize_arguments(raw: Any) -> Dict[str, Any]:
	if isinstance(raw, Mapping):
		return dict(raw)

	if isinstance(raw, str):
		try:
			decoded = json.loads(raw)
		except json.JSONDecodeError as e:
			raise InvalidResponse("Invalid serialized arguments.") from e
		if isinstance(decoded, dict):
			return decoded

	raise InvalidResponse("Invalid serialized arguments.")


def normalize_result(raw: Any) -> Any:
	if raw is None or isinstance(raw, (str, dict)):
		return raw

	if isinstance(raw, (list, tuple)):
		return json.dumps(list(raw), ensure_ascii=False)

	if isinstance(raw, (bool, int, float)):
		return _scalar_text(raw)

	raise InvalidResponse("Invalid result type.")


def normalize_content(raw: Any) -> Any:
	try:
		return to_jsonable_python(raw)
	except PydanticSerializationError as e:
		raise InvalidResponse("Invalid content type.") from e


def normalize_web_search_content(raw: Any) -> Any:
	if isinstance(raw, (str, dict, list)):
		return raw

	if isinstance(raw, (bool, int, float)):
		return _scalar_text(raw)

	raise InvalidResponse("Invalid web search content type.")


# ============================================================
# DECODE
# ============================================================


def _decode_attachment(raw: Any) -> Optional[ChatImageUrl]:
	if isinstance(raw, Mapping) and raw.get("type") == "image_url":
		url = raw.get("url")
		if isinstance(url, str):
			return ChatImageUrl(url=url)
	return None


def _decode_input(data: Mapping[str, Any]) -> ChatMessage:
	return ChatInput(
		content=_string(data.get("content")),
		role=_string(data.get("role"), "user"),
		attachment=_decode_attachment(data.get("attachment")),
	)


def _decode_tool_call(data: Mapping[str, Any]) -> ToolCall:
	return ToolCall(
		id=_string(data.get("id")),
		name=_string(data.get("name")),
		arguments=normalize_arguments(data.get("arguments", {})),
	)


def _decode_output(data: Mapping[str, Any]) -> ChatMessage:
	tools = data.get("tools")
	tool_items = tools if isinstance(tools, list) else []
	for tool in tool_items:
		if not isinstance(tool, Mapping):
			raise InvalidResponse("Invalid serialized tool call.")

	return ChatOutput(
		result=normalize_result(data.get("result")),
		tools=tuple(_decode_tool_call(tool) for tool in tool_items),
	)


def _decode_tool_result(data: Mapping[str, Any]) -> ChatMessage:
	return ToolResult(
		tool_call_id=_string(data.get("call_id")),
		content=normalize_content(data.get("content")),
		role=_string(data.get("role"), "tool"),
	)


def _decode_web_search_result(data: Mapping[str, Any]) -> ChatMessage:
	return WebSearchResult(
		tool_call_id=_string(data.get("id")),
		content=normalize_web_search_content(data.get("content", [])),
	)


DECODERS: Dict[str, Callable[[Mapping[str, Any]], ChatMessage]] = {
	"input": _decode_input,
	"output": _decode_output,
	"tool_call": _decode_tool_call,
	"tool_result": _decode_tool_result,
	"web_search_result": _decode_web_search_result,
}


def decode_message(data: Any) -> ChatMessage:
	tag = data.get("type") if isinstance(data, Mapping) else None
	decoder = DECODERS.get(tag) if isinstance(tag, str) else None
	if decoder is None:
		raise InvalidResponse("Unknown message type in serialized conversation.")

	try:
		return decoder(data)
	except ValidationError as e:
		raise InvalidResponse(f"Invalid serialized message: {e}") from e


def deserialize_messages(payload: Iterable[Any]) -> List[ChatMessage]:
	return [decode_message(item) for item in payload]
