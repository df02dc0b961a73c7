import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from gptchat.core.config import settings
from gptchat.core.exceptions import (
	InvalidResponse,
	LLMException,
	NoResponseFromAPI,
)
from gptchat.core.logging import get_logger
from gptchat.enquiry import ChatEnquiry
from gptchat.functions.function import CallableGPTFunction, GPTFunctions
from gptchat.functions.properties import (
	GPTObjectProperty,
	GPTProperties,
	GPTStringProperty,
)
from gptchat.http.base import HttpPost, HttpResponse
from gptchat.http.httpx_client import HttpxPostClient
from gptchat.interceptors import MessageInterceptor, passthrough_interceptor
from gptchat.messages.base import ChatMessage
from gptchat.models import (
	ChatModelName,
	GPT4oMiniTextToSpeech,
	LLMCustomModel,
	LLMMediumNoReasoning,
	TextToSpeechModel,
	reasoning_effort,
)
from gptchat.response import (
	ChatFuncCallResult,
	ChatResponse,
	ChatResponseChoice,
	WebSearchResponse,
)
from gptchat.response_format import JsonSchemaResponseFormat
from gptchat.validation import DefaultJsonSchemaValidator, JsonSchemaValidator


logger = get_logger(__name__)


INCOMPLETE_RESPONSE = "Invalid or incomplete response from OpenAI."


def _first_present(*values: Any) -> Any:
	return next((v for v in values if v is not None), None)


# ============================================================
# CHAT ENGINE
# ============================================================


class ChatGPT:
	"""
	Low level client for the Responses API.

	Workflow of `chat`:
	1. Build a ChatEnquiry from context, functions and sampling parameters
	2. Hand it to the message interceptor, which calls `_send_enquiry`
	   (building the request body and posting it)
	3. Parse the raw response into a ChatResponseChoice

	The transport, the JSON schema validator and the interceptor are
	injected; defaults are built once per instance.
	"""

	def __init__(
		self,
		token: Optional[str] = None,
		http_post_client: Optional[HttpPost] = None,
		json_schema_validator: Optional[JsonSchemaValidator] = None,
		message_interceptor: Optional[MessageInterceptor] = None,
		base_url: Optional[str] = None,
	):
		self.token = token if token is not None else settings.OPENAI_API_KEY
		self.http_post_client = http_post_client or HttpxPostClient()
		self.json_schema_validator = (
			json_schema_validator or DefaultJsonSchemaValidator()
		)
		self.message_interceptor = message_interceptor or passthrough_interceptor
		self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")

	async def aclose(self) -> None:
		"""Release the transport's connections, if it holds any."""
		aclose = getattr(self.http_post_client, "aclose", None)
		if aclose is not None:
			await aclose()

	async def __aenter__(self) -> "ChatGPT":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	@property
	def responses_url(self) -> str:
		return f"{self.base_url}/responses"

	@property
	def speech_url(self) -> str:
		return f"{self.base_url}/audio/speech"

	def _headers(self, **extra: str) -> Dict[str, str]:
		return {
			"Authorization": f"Bearer {self.token}",
			"Content-Type": "application/json",
			**extra,
		}

	# ============================================================
	# CHAT
	# ============================================================

	async def chat(
		self,
		context: Sequence[ChatMessage],
		functions: Optional[GPTFunctions] = None,
		response_format: Optional[JsonSchemaResponseFormat] = None,
		model: Optional[ChatModelName] = None,
		max_tokens: Optional[int] = None,
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
	) -> ChatResponse:
		"""
		Send one request and parse the answer.

		Args:
		    context: Conversation so far, in order.
		    functions: Function descriptors offered to the model.
		    response_format: Requested JSON schema; the answer is parsed
		                     and validated against it.
		    model: Defaults to LLMMediumNoReasoning.
		    max_tokens: Maximum output tokens (settings.DEFAULT_MAX_TOKENS).
		    temperature / top_p: Optional sampling parameters.

		Raises:
		    InvalidResponse, NoResponseFromAPI, LLMException
		"""
		enquiry = ChatEnquiry(
			context=tuple(context),
			model=model or LLMMediumNoReasoning(),
			functions=tuple(functions.to_schema()) if functions else (),
			response_format=response_format,
			max_tokens=max_tokens if max_tokens is not None else settings.DEFAULT_MAX_TOKENS,
			temperature=temperature,
			top_p=top_p,
		)

		response = await self.message_interceptor(enquiry, self._send_enquiry)

		choice = self.parse_response(
			response.text,
			context=enquiry.context,
			response_format=response_format,
		)
		return ChatResponse(choices=[choice])

	async def _send_enquiry(self, enquiry: ChatEnquiry) -> HttpResponse:
		body = self.build_request_body(enquiry)

		logger.info(
			f"Sending request to {body['model']} "
			f"({len(body['input'])} input item(s), {len(body.get('tools', []))} tool(s))..."
		)
		response = await self.http_post_client.post(
			self.responses_url, body, self._headers()
		)
		logger.info("Received response from OpenAI.")
		return response

	# ============================================================
	# REQUEST BUILDING
	# ============================================================

	@staticmethod
	def build_request_body(enquiry: ChatEnquiry) -> Dict[str, Any]:
		inputs: List[Dict[str, Any]] = []
		for message in enquiry.context:
			if not isinstance(message, ChatMessage):
				raise TypeError(
					f"Every context entry must be a ChatMessage, "
					f"got {type(message).__name__}."
				)
			inputs.extend(message.to_input_items())

		body: Dict[str, Any] = {
			"model": str(enquiry.model),
			"input": inputs,
		}

		effort = reasoning_effort(enquiry.model)
		if effort is not None:
			body["reasoning"] = {"effort": effort}

		if enquiry.response_format is not None:
			body["text"] = {"format": enquiry.response_format.to_responses_format()}

		if enquiry.max_tokens is not None:
			body["max_output_tokens"] = enquiry.max_tokens

		if enquiry.temperature is not None:
			body["temperature"] = enquiry.temperature

		if enquiry.top_p is not None:
			body["top_p"] = enquiry.top_p

		if enquiry.functions:
			body["tools"] = [
				{**function, "type": "function"} for function in enquiry.functions
			]
			body["tool_choice"] = "auto"

		return body

	# ============================================================
	# RESPONSE PARSING
	# ============================================================

	def parse_response(
		self,
		raw: str,
		context: Iterable[ChatMessage] = (),
		response_format: Optional[JsonSchemaResponseFormat] = None,
	) -> ChatResponseChoice:
		try:
			data = json.loads(raw)
		except json.JSONDecodeError as e:
			raise InvalidResponse(f"Response is not JSON: {raw[:200]}") from e

		if not isinstance(data, dict):
			raise InvalidResponse(str(data))

		error = data.get("error")
		if error is not None:
			message = error.get("message") if isinstance(error, dict) else None
			raise InvalidResponse(message or "Unknown error")

		output = data.get("output") or []
		if not isinstance(output, list):
			raise InvalidResponse(INCOMPLETE_RESPONSE)
		if not output and "output_text" not in data:
			raise NoResponseFromAPI(INCOMPLETE_RESPONSE)

		message_parts: List[str] = []
		tool_results: List[ChatFuncCallResult] = []

		for item in output:
			if not isinstance(item, dict):
				continue
			item_type = item.get("type")

			if item_type == "message":
				message_parts.extend(self._extract_message_text(item))
				for tool_call in item.get("tool_calls") or []:
					tool_results.append(self._map_tool_call(tool_call))

			elif item_type in ("function_call", "tool_call"):
				tool_results.append(self._map_tool_call(item))

			elif item_type == "output_text":
				text = self._normalize_text_value(item.get("text"))
				if text is not None:
					message_parts.append(text)

		# Some payloads only carry the aggregated text on the root object
		if not message_parts and "output_text" in data:
			output_text = data["output_text"]
			if isinstance(output_text, list):
				message_parts = [str(t) for t in output_text]
			elif isinstance(output_text, str):
				message_parts = [output_text]

		message = "\n".join(part for part in message_parts if part != "").strip()
		result: Any = message or None

		if result is not None and response_format is not None:
			result = self._parse_structured(result, response_format)

		if result is None and not tool_results:
			raise NoResponseFromAPI(INCOMPLETE_RESPONSE)

		choice = ChatResponseChoice(result=result, tools=tool_results)
		return choice.model_copy(
			update={"enhanced_context": (*context, choice.to_output())}
		)

	def _parse_structured(
		self, text: str, response_format: JsonSchemaResponseFormat
	) -> Any:
		try:
			data = json.loads(text)
		except json.JSONDecodeError as e:
			raise InvalidResponse("Structured response is not valid JSON.") from e

		if not self.json_schema_validator.validate(data, response_format.schema):
			raise InvalidResponse("Invalid response from OpenAI.")

		if not isinstance(data, (dict, list)):
			raise InvalidResponse("Structured response must be a JSON object or array.")
		return data

	def _extract_message_text(self, item: Dict[str, Any]) -> List[str]:
		content = item.get("content")
		if isinstance(content, str):
			return [content]

		parts: List[str] = []
		if isinstance(content, list):
			for part in content:
				if isinstance(part, str):
					parts.append(part)
				elif isinstance(part, dict):
					text = self._normalize_text_value(part.get("text"))
					if text is not None:
						parts.append(text)
		return parts

	@staticmethod
	def _normalize_text_value(text: Any) -> Optional[str]:
		if isinstance(text, str):
			return text
		if isinstance(text, dict) and text.get("value") is not None:
			return str(text["value"])
		return None

	def _map_tool_call(self, tool_call: Any) -> ChatFuncCallResult:
		if not isinstance(tool_call, dict):
			raise InvalidResponse(INCOMPLETE_RESPONSE)

		function = tool_call.get("function")
		if not isinstance(function, dict):
			function = {}

		fn_name = _first_present(function.get("name"), tool_call.get("name"))
		arguments_raw = _first_present(
			function.get("arguments"), tool_call.get("arguments")
		)
		call_id = _first_present(tool_call.get("call_id"), tool_call.get("id"))

		if fn_name is None or arguments_raw is None or call_id is None:
			raise InvalidResponse(INCOMPLETE_RESPONSE)

		return ChatFuncCallResult.create(
			id=str(call_id),
			function_name=str(fn_name),
			arguments=self._normalize_tool_arguments(arguments_raw),
		)

	@staticmethod
	def _normalize_tool_arguments(arguments_raw: Any) -> Dict[str, Any]:
		if isinstance(arguments_raw, str):
			try:
				arguments = json.loads(arguments_raw)
			except json.JSONDecodeError as e:
				raise InvalidResponse(INCOMPLETE_RESPONSE) from e
		elif isinstance(arguments_raw, (dict, list)):
			arguments = json.loads(json.dumps(arguments_raw))
		else:
			raise InvalidResponse(INCOMPLETE_RESPONSE)

		if not isinstance(arguments, dict):
			raise InvalidResponse(INCOMPLETE_RESPONSE)
		return arguments

	# ============================================================
	# WEB SEARCH
	# ============================================================

	async def web_search(
		self,
		query: str,
		user_location: Optional[Dict[str, Any]] = None,
		model: Optional[ChatModelName] = None,
	) -> WebSearchResponse:
		model = model or LLMMediumNoReasoning()
		tool: Dict[str, Any] = {"type": "web_search"}
		if user_location is not None:
			tool["user_location"] = user_location

		body: Dict[str, Any] = {
			"model": str(model),
			"tools": [tool],
			"input": query,
		}

		effort = reasoning_effort(model)
		if effort is not None:
			body["reasoning"] = {"effort": effort}

		logger.info(f"Running web search with {model}: {query[:100]}")
		response = await self.http_post_client.post(
			self.responses_url, body, self._headers()
		)

		try:
			data = response.json()
		except ValueError as e:
			raise InvalidResponse("Web search response is not JSON.") from e

		if not isinstance(data, dict):
			raise InvalidResponse("Invalid response from OpenAI.")

		for output in data.get("output") or []:
			if (
				isinstance(output, dict)
				and output.get("type") == "message"
				and output.get("status") == "completed"
			):
				return WebSearchResponse(
					id=str(data.get("id", "")),
					output=output,
					structure=data,
					query=query,
					user_location=user_location,
					model=str(model),
					effort=effort,
				)

		raise InvalidResponse("Invalid response from OpenAI.")

	def build_web_search_function(
		self,
		default_user_location: Optional[Dict[str, Any]] = None,
		default_model: Optional[ChatModelName] = None,
	) -> CallableGPTFunction:
		"""
		Callable `web_search` tool the model can use. Without defaults the
		model has to supply `user_location` and a non-reasoning `model`.
		"""
		properties = GPTProperties(
			GPTStringProperty("query", "The search query.", required=True),
			GPTObjectProperty(
				"user_location",
				"User location hints (exact|approximate, city, region, country, timezone). "
				"Required unless a default was supplied server-side.",
				GPTProperties(
					GPTStringProperty("type", "exact|approximate"),
					GPTStringProperty("city", "City name"),
					GPTStringProperty("region", "Region/state"),
					GPTStringProperty("country", "Country code (ISO 3166-1 alpha-2)"),
					GPTStringProperty("timezone", "IANA timezone"),
				),
				required=default_user_location is None,
			),
			GPTStringProperty(
				"model",
				"Optional model name for web search (if omitted, server defaults apply). "
				"Agents must not request reasoning models.",
				required=default_model is None,
			),
		)

		async def run_web_search(
			query: str = "",
			user_location: Optional[Dict[str, Any]] = None,
			model: Optional[str] = None,
		) -> Dict[str, Any]:
			location = default_user_location
			if location is None and isinstance(user_location, dict):
				location = user_location

			model_name = default_model
			if model_name is None and isinstance(model, str) and model:
				model_name = LLMCustomModel(model)

			if model_name is None:
				raise InvalidResponse(
					"web_search requires a non-reasoning model name when no default is provided."
				)

			if default_model is None and (
				reasoning_effort(model_name) is not None
				or "reasoning" in str(model_name).lower()
			):
				raise InvalidResponse(
					"Reasoning models cannot be requested explicitly for web_search."
				)

			if location is None:
				raise InvalidResponse(
					"web_search requires user_location when no default is provided."
				)

			response = await self.web_search(
				query=str(query), user_location=location, model=model_name
			)
			return {
				"text": response.get_first_text(),
				"query": response.query,
				"model": response.model,
				"effort": None,
				"user_location": response.user_location,
				"response_id": response.id,
			}

		return CallableGPTFunction(
			name="web_search",
			description="Perform an OpenAI web search and return the first text result (plus metadata).",
			properties=properties,
			callable=run_web_search,
		)

	# ============================================================
	# TEXT TO SPEECH
	# ============================================================

	async def text_to_speech(
		self,
		text: str,
		voice: str = "alloy",
		speed: float = 1.0,
		instructions: Optional[str] = None,
		model: Optional[TextToSpeechModel] = None,
		format: str = "wav",
	) -> bytes:
		"""Returns the raw audio bytes in the requested format."""
		model = model or GPT4oMiniTextToSpeech()

		body: Dict[str, Any] = {
			"model": str(model),
			"input": text,
			"voice": voice,
			"format": format,
			"speed": speed,
		}
		if instructions:
			body["instructions"] = instructions

		response = await self.http_post_client.post(
			self.speech_url,
			body,
			self._headers(Accept=f"audio/{format}"),
		)

		try:
			decoded = response.json()
		except ValueError:
			return response.content

		if isinstance(decoded, dict) and "error" in decoded:
			error = decoded["error"]
			message = (
				error.get("message") if isinstance(error, dict) else None
			) or "Unknown error"
			raise LLMException(f"OpenAI TTS error: {message}", response.status_code)

		return response.content
