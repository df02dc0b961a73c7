import hashlib
import time
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from gptchat.core.exceptions import NoResponseFromAPI
from gptchat.messages.base import ChatMessage
from gptchat.messages.types import ChatOutput, ToolCall, WebSearchCall, WebSearchResult


# ============================================================
# CHAT RESPONSE MODELS
# ============================================================


class ChatFuncCallResult(BaseModel):
	"""
	A tool call returned by the model, with arguments already decoded.
	`tool_call_message` is the ToolCall to put back into the history.
	"""

	model_config = ConfigDict(frozen=True)

	id: str
	function_name: str
	arguments: Dict[str, Any]
	tool_call_message: ToolCall

	@classmethod
	def create(
		cls, id: str, function_name: str, arguments: Dict[str, Any]
	) -> "ChatFuncCallResult":
		return cls(
			id=id,
			function_name=function_name,
			arguments=arguments,
			tool_call_message=ToolCall(id=id, name=function_name, arguments=arguments),
		)


class ChatResponseChoice(BaseModel):
	"""
	Normalized outcome of one round: text or structured result and/or
	the tool calls the model asked for. `enhanced_context` is a snapshot
	of the request context with this choice appended as a ChatOutput.
	"""

	model_config = ConfigDict(frozen=True)

	result: Union[None, str, Dict[str, Any], List[Any]] = None
	tools: List[ChatFuncCallResult] = Field(default_factory=list)
	enhanced_context: Tuple[ChatMessage, ...] = ()

	@property
	def text_result(self) -> Optional[str]:
		return self.result if isinstance(self.result, str) else None

	@property
	def obj_result(self) -> Optional[Dict[str, Any]]:
		return self.result if isinstance(self.result, dict) else None

	@property
	def is_tool_call(self) -> bool:
		return bool(self.tools)

	def to_output(self) -> ChatOutput:
		return ChatOutput(
			result=self.result,
			tools=tuple(tool.tool_call_message for tool in self.tools),
		)


class ChatResponse(BaseModel):
	model_config = ConfigDict(frozen=True)

	choices: List[ChatResponseChoice]

	def first_choice(self) -> ChatResponseChoice:
		return self.choices[0]


# ============================================================
# WEB SEARCH RESPONSE
# ============================================================


class WebSearchResponse(BaseModel):
	id: str
	output: Dict[str, Any]
	structure: Dict[str, Any]
	query: str
	user_location: Optional[Dict[str, Any]] = None
	model: str
	effort: Optional[str] = None

	def try_get_first_text(self) -> Optional[str]:
		content = self.output.get("content")
		if isinstance(content, list) and content and isinstance(content[0], dict):
			text = content[0].get("text")
			if isinstance(text, str):
				return text
		return None

	def get_first_text(self) -> str:
		text = self.try_get_first_text()
		if text is None:
			raise NoResponseFromAPI("No text found in response")
		return text

	def get_texts(self) -> List[str]:
		"""All textual chunks of the completed message, in order."""
		items = self.output.get("content")
		if not isinstance(items, list):
			return []
		return [
			item["text"]
			for item in items
			if isinstance(item, dict) and isinstance(item.get("text"), str)
		]

	def get_web_search_call(self, id: Optional[str] = None) -> WebSearchCall:
		if id is None:
			digest = hashlib.sha1(f"{self.query}{time.time()}".encode()).hexdigest()
			id = f"web_{digest[:12]}"

		return WebSearchCall.mk(
			id=id,
			query=self.query,
			user_location=self.user_location,
			model=self.model,
			effort=self.effort,
		)

	def get_web_search_result(self, tool_call_id: str) -> WebSearchResult:
		extra = {
			"texts": self.get_texts(),
			"query": self.query,
			"model": self.model,
			"effort": self.effort,
			"user_location": self.user_location,
		}
		return WebSearchResult.from_text(tool_call_id, self.get_first_text(), extra)
