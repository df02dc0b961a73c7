from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from gptchat.messages.base import ChatMessage
from gptchat.models import ChatModelName
from gptchat.response_format import JsonSchemaResponseFormat


@dataclass(frozen=True)
class ChatEnquiry:
	"""
	Everything needed for one request to the responses endpoint.
	Built fresh for every round and never mutated; interceptors that want
	to change a request create a new one with dataclasses.replace().
	"""

	context: Tuple[ChatMessage, ...]
	model: ChatModelName
	functions: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
	response_format: Optional[JsonSchemaResponseFormat] = None
	max_tokens: Optional[int] = None
	temperature: Optional[float] = None
	top_p: Optional[float] = None
