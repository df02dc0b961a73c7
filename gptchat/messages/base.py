from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict


# ============================================================
# BASE MESSAGE
# ============================================================


class ChatMessage(BaseModel, ABC):
	"""
	One entry of a conversation history.

	Every message knows two encodings:
	- to_input_items(): the Responses API `input` items it contributes
	  to a request (zero or more),
	- to_serialized(): the tagged, transport-neutral dict used to store
	  and resume a conversation.
	"""

	model_config = ConfigDict(frozen=True)

	type: str

	@abstractmethod
	def to_input_items(self) -> List[Dict[str, Any]]:
		"""Wire items for the request `input` array."""

	@abstractmethod
	def to_serialized(self) -> Dict[str, Any]:
		"""Tagged representation for conversation storage."""

	def add_to_context(self, context: List["ChatMessage"]) -> List["ChatMessage"]:
		return [*context, self]
