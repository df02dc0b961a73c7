import json
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator
from pydantic_core import to_jsonable_python

from gptchat.messages.attachments import ChatImageUrl
from gptchat.messages.base import ChatMessage


def to_json_text(value: Any) -> str:
	return json.dumps(to_jsonable_python(value), ensure_ascii=False)


# ============================================================
# INPUT
# ============================================================


class ChatInput(ChatMessage):
	type: Literal["input"] = "input"
	content: str
	role: str = "user"
	attachment: Optional[ChatImageUrl] = None

	@classmethod
	def mk(
		cls,
		content: str,
		role: str = "user",
		attachment: Optional[ChatImageUrl] = None,
	) -> "ChatInput":
		return cls(content=content, role=role, attachment=attachment)

	def to_input_items(self) -> List[Dict[str, Any]]:
		content: List[Dict[str, Any]] = [
			{
				"type": "input_text",
				"text": self.content,
			}
		]
		if self.attachment is not None:
			content.extend(self.attachment.to_input_content_parts())

		return [{"role": self.role, "content": content}]

	def to_serialized(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {
			"type": self.type,
			"content": self.content,
			"role": self.role,
		}
		if self.attachment is not None:
			data["attachment"] = self.attachment.to_serialized()
		return data


# ============================================================
# TOOL CALL / TOOL RESULT
# ============================================================


class ToolCall(ChatMessage):
	"""
	A function call the model asked for.
	`id` connects the call with its ToolResult.
	"""

	type: Literal["tool_call"] = "tool_call"
	id: str
	name: str
	arguments: Dict[str, Any] = Field(default_factory=dict)
	call_type: str = "function"
	role: str = "assistant"

	def to_input_items(self) -> List[Dict[str, Any]]:
		return [
			{
				"type": "function_call",
				"call_id": self.id,
				"name": self.name,
				"arguments": to_json_text(self.arguments),
			}
		]

	def to_serialized(self) -> Dict[str, Any]:
		return {
			"type": self.type,
			"id": self.id,
			"name": self.name,
			"arguments": to_jsonable_python(self.arguments),
		}


class ToolResult(ChatMessage):
	type: Literal["tool_result"] = "tool_result"
	tool_call_id: str
	content: Any = None
	role: str = "tool"

	@field_validator("content", mode="before")
	@classmethod
	def _dump_models(cls, value: Any) -> Any:
		if isinstance(value, BaseModel):
			return value.model_dump(mode="json")
		return value

	def output_text(self) -> str:
		if isinstance(self.content, str):
			return self.content
		if self.content is None:
			return ""
		return to_json_text(self.content)

	def to_input_items(self) -> List[Dict[str, Any]]:
		return [
			{
				"type": "function_call_output",
				"call_id": self.tool_call_id,
				"output": self.output_text(),
			}
		]

	def to_serialized(self) -> Dict[str, Any]:
		return {
			"type": self.type,
			"call_id": self.tool_call_id,
			"content": to_jsonable_python(self.content),
			"role": self.role,
		}


# ============================================================
# ASSISTANT OUTPUT
# ============================================================


class ChatOutput(ChatMessage):
	"""
	What the assistant answered in one round: text or structured result,
	plus the tool calls it requested (answered or not).
	"""

	type: Literal["output"] = "output"
	result: Union[None, str, Dict[str, Any], List[Any]] = None
	tools: Tuple[ToolCall, ...] = ()

	def to_input_items(self) -> List[Dict[str, Any]]:
		items: List[Dict[str, Any]] = []

		if self.result is not None:
			text = (
				self.result
				if isinstance(self.result, str)
				else to_json_text(self.result)
			)
			items.append(
				{
					"role": "assistant",
					"content": [{"type": "output_text", "text": text}],
				}
			)

		for tool in self.tools:
			items.extend(tool.to_input_items())

		return items

	def to_serialized(self) -> Dict[str, Any]:
		return {
			"type": self.type,
			"result": to_jsonable_python(self.result),
			"tools": [
				{
					"id": tool.id,
					"name": tool.name,
					"arguments": to_jsonable_python(tool.arguments),
				}
				for tool in self.tools
			],
		}


# ============================================================
# WEB SEARCH
# ============================================================


class WebSearchCall(ToolCall):
	"""A `web_search` function call placed into the context by the caller."""

	name: str = "web_search"

	@classmethod
	def mk(
		cls,
		id: str,
		query: str,
		user_location: Optional[Dict[str, Any]] = None,
		model: Optional[str] = None,
		effort: Optional[str] = None,
	) -> "WebSearchCall":
		args: Dict[str, Any] = {"query": query}
		if user_location is not None:
			args["user_location"] = user_location
		if model is not None:
			args["model"] = model
		if effort is not None:
			args["effort"] = effort

		return cls(id=id, arguments=args)

	@property
	def query(self) -> str:
		return self.arguments.get("query", "")


class WebSearchResult(ToolResult):
	"""Result of a web search, answering a WebSearchCall."""

	type: Literal["web_search_result"] = "web_search_result"
	content: Union[str, Dict[str, Any], List[Any]]
	name: str = "web_search"

	@classmethod
	def from_text(
		cls,
		tool_call_id: str,
		text: str,
		extra: Optional[Dict[str, Any]] = None,
	) -> "WebSearchResult":
		return cls(tool_call_id=tool_call_id, content={"text": text, **(extra or {})})

	@classmethod
	def from_texts(
		cls,
		tool_call_id: str,
		texts: List[str],
		extra: Optional[Dict[str, Any]] = None,
	) -> "WebSearchResult":
		return cls(
			tool_call_id=tool_call_id,
			content={"texts": list(texts), **(extra or {})},
		)

	def to_serialized(self) -> Dict[str, Any]:
		return {
			"type": self.type,
			"id": self.tool_call_id,
			"content": to_jsonable_python(self.content),
		}
