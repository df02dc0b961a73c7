import json
from typing import Any, Dict, List, Mapping, Tuple, Union

import pytest

from gptchat.chat import ChatGPT
from gptchat.http.base import HttpResponse


class FakeHttpPost:
	"""
	HttpPost double. Queued bodies are returned in order; every call is
	recorded as (url, body, headers). Raises once the queue is empty.
	"""

	def __init__(self) -> None:
		self.responses: List[HttpResponse] = []
		self.calls: List[Tuple[str, Dict[str, Any], Dict[str, str]]] = []

	def queue(self, body: Union[Mapping[str, Any], str, bytes], status_code: int = 200) -> "FakeHttpPost":
		if isinstance(body, Mapping):
			content = json.dumps(body).encode()
		elif isinstance(body, str):
			content = body.encode()
		else:
			content = body
		self.responses.append(HttpResponse(status_code=status_code, content=content))
		return self

	async def post(
		self,
		url: str,
		data: Mapping[str, Any],
		headers: Mapping[str, str],
	) -> HttpResponse:
		self.calls.append((url, json.loads(json.dumps(data)), dict(headers)))
		if not self.responses:
			raise AssertionError(f"Unexpected request #{len(self.calls)} to {url}")
		return self.responses.pop(0)

	@property
	def bodies(self) -> List[Dict[str, Any]]:
		return [body for _, body, _ in self.calls]


def message_response(text: str, id: str = "resp_1") -> Dict[str, Any]:
	return {
		"id": id,
		"output": [
			{
				"type": "message",
				"status": "completed",
				"role": "assistant",
				"content": [{"type": "output_text", "text": text}],
			}
		],
	}


def function_call_response(
	name: str, arguments: Any, call_id: str = "call_1"
) -> Dict[str, Any]:
	return {
		"output": [
			{
				"type": "function_call",
				"call_id": call_id,
				"name": name,
				"arguments": arguments if isinstance(arguments, str) else json.dumps(arguments),
			}
		],
	}


@pytest.fixture
def http_post() -> FakeHttpPost:
	return FakeHttpPost()


@pytest.fixture
def chat(http_post: FakeHttpPost) -> ChatGPT:
	return ChatGPT(
		token="test-token",
		http_post_client=http_post,
		base_url="https://api.test/v1",
	)
