import copy
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from gptchat.chat import ChatGPT
from gptchat.core.config import settings
from gptchat.core.exceptions import MissingExecutable
from gptchat.core.logging import get_logger
from gptchat.functions.function import CallableGPTFunction, GPTFunctions
from gptchat.functions.builder import as_callable_function
from gptchat.functions.invoker import CallableInvoker
from gptchat.messages.base import ChatMessage
from gptchat.messages.codec import deserialize_messages, serialize_messages
from gptchat.messages.types import ToolResult, WebSearchCall
from gptchat.models import ChatModelName, LLMMediumNoReasoning
from gptchat.response import ChatResponseChoice
from gptchat.response_format import JsonSchemaResponseFormat


logger = get_logger(__name__)


class GPTConversation:
	"""
	Stateful conversation on top of a ChatGPT engine.

	Every `step` is one round: one request, the assistant output appended
	to the history, then one ToolResult per executed tool call. With
	`rerun_on_tool_use=True` rounds repeat while the model keeps calling
	tools. There is no round limit; a model that always calls a tool keeps
	the loop running.

	Not safe for concurrent `step` calls on the same instance.
	"""

	def __init__(
		self,
		chat: ChatGPT,
		context: Optional[Iterable[ChatMessage]] = None,
		tools: Optional[Iterable[Any]] = None,
		response_format: Optional[JsonSchemaResponseFormat] = None,
		model: Optional[ChatModelName] = None,
		max_tokens: Optional[int] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
	):
		self.chat = chat
		self._context: List[ChatMessage] = list(context or [])
		self._tools: Dict[str, CallableGPTFunction] = {}
		self.response_format = response_format
		self.model = model or LLMMediumNoReasoning()
		self.max_tokens = (
			max_tokens if max_tokens is not None else settings.DEFAULT_MAX_TOKENS
		)
		self.temperature = temperature
		self.top_p = top_p

		self.set_tools(tools or [])

	# ============================================================
	# HISTORY
	# ============================================================

	@property
	def context(self) -> Tuple[ChatMessage, ...]:
		return tuple(self._context)

	@context.setter
	def context(self, messages: Iterable[ChatMessage]) -> None:
		self._context = list(messages)

	def add_message(self, message: ChatMessage) -> "GPTConversation":
		self._context.append(message)
		return self

	def add_web_search(
		self,
		query: str,
		user_location: Optional[Dict[str, Any]] = None,
		model: Optional[str] = None,
		effort: Optional[str] = None,
	) -> WebSearchCall:
		"""
		Record a `web_search` call in the history. The caller answers it
		with a WebSearchResult (see WebSearchResponse.get_web_search_result).
		"""
		call = WebSearchCall.mk(
			id=f"web_{uuid.uuid4().hex[:12]}",
			query=query,
			user_location=user_location,
			model=model,
			effort=effort,
		)
		self._context.append(call)
		return call

	# ============================================================
	# TOOLS / FORMAT
	# ============================================================

	@property
	def tools(self) -> Tuple[CallableGPTFunction, ...]:
		return tuple(self._tools.values())

	def add_tool(self, tool: Any) -> "GPTConversation":
		"""
		Register a CallableGPTFunction or a callable decorated with
		`gpt_tool`. A tool with the same name replaces the previous one.
		"""
		function = as_callable_function(tool)
		self._tools[function.name] = function
		return self

	def set_tools(self, tools: Iterable[Any]) -> "GPTConversation":
		self._tools = {}
		for tool in tools:
			self.add_tool(tool)
		return self

	def set_response_format(
		self, response_format: Optional[JsonSchemaResponseFormat]
	) -> "GPTConversation":
		self.response_format = response_format
		return self

	def functions(self) -> GPTFunctions:
		return GPTFunctions(*self._tools.values())

	# ============================================================
	# ROUNDS
	# ============================================================

	async def step(self, rerun_on_tool_use: bool = False) -> ChatResponseChoice:
		"""
		Run one round against the model and execute the requested tools.

		Args:
		    rerun_on_tool_use: Start another round after tools were executed,
		                       until a round executes none.

		Returns:
		    The choice of the last round.

		Raises:
		    MissingExecutable: a tool call names no registered tool. The
		        call stays in the history without a result.
		    MissingArgument, InvalidResponse, NoResponseFromAPI, LLMException
		"""
		rounds = 0
		while True:
			rounds += 1
			functions = self.functions()

			response = await self.chat.chat(
				context=self._context,
				functions=functions,
				response_format=self.response_format,
				model=self.model,
				max_tokens=self.max_tokens,
				temperature=self.temperature,
				top_p=self.top_p,
			)
			choice = response.first_choice()
			self._context.append(choice.to_output())

			invoked = await self._run_tools(choice, functions)

			if not (rerun_on_tool_use and invoked):
				return choice

			logger.warning(
				f"Tools executed in round {rounds}, continuing with round {rounds + 1}."
			)

	async def _run_tools(
		self, choice: ChatResponseChoice, functions: GPTFunctions
	) -> int:
		invoked = 0
		for tool in choice.tools:
			fn = functions.get_callable(tool.function_name)
			if fn is None:
				raise MissingExecutable(tool.function_name)

			logger.info(f"Executing tool: {tool.function_name} (call {tool.id})")
			result = await CallableInvoker.invoke(fn, tool.arguments)

			self._context.append(ToolResult(tool_call_id=tool.id, content=result))
			invoked += 1
		return invoked

	# ============================================================
	# PERSISTENCE
	# ============================================================

	def serialize(self) -> List[Dict[str, Any]]:
		return serialize_messages(self._context)

	@classmethod
	def from_serialized(
		cls,
		chat: ChatGPT,
		payload: Iterable[Mapping[str, Any]],
		**kwargs: Any,
	) -> "GPTConversation":
		"""
		Resume a conversation from `serialize()` output. Keyword arguments
		are passed to the constructor (tools, response_format, model, ...).
		"""
		return cls(chat, context=deserialize_messages(payload), **kwargs)

	def split(self) -> "GPTConversation":
		"""Independent copy: history is copied, the engine is shared."""
		return GPTConversation(
			self.chat,
			context=copy.deepcopy(self._context),
			tools=self._tools.values(),
			response_format=self.response_format,
			model=self.model,
			max_tokens=self.max_tokens,
			temperature=self.temperature,
			top_p=self.top_p,
		)
