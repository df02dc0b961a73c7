import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol


@dataclass(frozen=True)
class HttpResponse:
	status_code: int
	headers: Dict[str, List[str]] = field(default_factory=dict)
	content: bytes = b""

	@property
	def text(self) -> str:
		return self.content.decode("utf-8", errors="replace")

	def json(self) -> Any:
		return json.loads(self.content)


class HttpPost(Protocol):
	"""
	Transport collaborator used by the chat engine.

	Implementations must raise LLMNetworkException when the server
	answers with an error status and LLMConnectionError when the
	server cannot be reached. Timeouts belong here too.
	"""

	async def post(
		self,
		url: str,
		data: Mapping[str, Any],
		headers: Mapping[str, str],
	) -> HttpResponse: ...
