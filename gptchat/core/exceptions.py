import json
from typing import Mapping, Optional, Sequence


# ============================================================
# BASE ERROR
# ============================================================


class GPTChatError(Exception):
	"""Root of every error raised by the library."""


# ============================================================
# RESPONSE ERRORS
# ============================================================


class InvalidResponse(GPTChatError):
	"""
	Raised when a payload does not have the expected shape:
	malformed API responses, schema validation failures, unresolvable
	tool calls and unknown tags in a serialized conversation.
	"""


class NoResponseFromAPI(GPTChatError):
	"""Raised when the envelope is valid but carries no usable content."""


# ============================================================
# TRANSPORT ERRORS
# ============================================================


class LLMException(GPTChatError):
	"""Transport or protocol failure."""

	def __init__(self, message: str = "", status_code: Optional[int] = None):
		self.status_code = status_code
		super().__init__(message)


class LLMNetworkException(LLMException):
	"""
	Raised by the transport when the server answers with an error status.
	The message is taken from the body's `error.message` when the body is JSON.
	"""

	def __init__(
		self,
		contents: str,
		headers: Mapping[str, Sequence[str]],
		status_code: int,
	):
		self.contents = contents
		self.headers = dict(headers)
		super().__init__(self._extract_message(contents), status_code)

	@staticmethod
	def _extract_message(contents: str) -> str:
		try:
			data = json.loads(contents)
		except (json.JSONDecodeError, TypeError):
			return ""

		if isinstance(data, dict) and isinstance(data.get("error"), dict):
			message = data["error"].get("message")
			if isinstance(message, str):
				return message
		return ""


class LLMConnectionError(LLMException):
	"""Raised when the server could not be reached at all."""

	def __init__(self, message: str = ""):
		super().__init__(message, status_code=0)


# ============================================================
# TOOL EXECUTION ERRORS
# ============================================================


class MissingExecutable(GPTChatError):
	"""Raised when the model calls a function with no registered callable."""

	def __init__(self, function_name: str):
		self.function_name = function_name
		super().__init__(f"Missing executable for function {function_name}.")


class MissingArgument(GPTChatError):
	"""Raised when a callable tool is invoked without a required argument."""

	def __init__(self, argument: str, callable_name: Optional[str] = None):
		self.argument = argument
		self.callable_name = callable_name
		target = f" for callable tool '{callable_name}'" if callable_name else ""
		super().__init__(f"Missing required argument '{argument}'{target}.")


class InvalidToolDefinition(GPTChatError):
	"""Raised when a callable cannot be turned into a function descriptor."""
