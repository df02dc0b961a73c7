from typing import Any, Dict, List, Mapping, Optional

import httpx

from gptchat.core.config import settings
from gptchat.core.exceptions import (
	LLMConnectionError,
	LLMException,
	LLMNetworkException,
)
from gptchat.core.logging import get_logger
from gptchat.http.base import HttpResponse


logger = get_logger(__name__)


DEFAULT_HEADERS = {"Accept": "application/json; charset=utf-8"}


class HttpxPostClient:
	"""
	HttpPost implementation on top of httpx.AsyncClient.

	The client is created lazily with the configured timeouts unless one
	is injected (tests pass a client built on httpx.MockTransport).
	"""

	def __init__(
		self,
		client: Optional[httpx.AsyncClient] = None,
		default_headers: Optional[Mapping[str, str]] = None,
	) -> None:
		self.httpx_client = client
		self.default_headers = dict(
			DEFAULT_HEADERS if default_headers is None else default_headers
		)

	def _get_client(self) -> httpx.AsyncClient:
		if self.httpx_client is None:
			self.httpx_client = httpx.AsyncClient(
				timeout=httpx.Timeout(
					settings.HTTP_TIMEOUT,
					read=settings.HTTP_READ_TIMEOUT,
					write=settings.HTTP_WRITE_TIMEOUT,
					connect=settings.HTTP_CONNECT_TIMEOUT,
				)
			)
		return self.httpx_client

	async def post(
		self,
		url: str,
		data: Mapping[str, Any],
		headers: Mapping[str, str],
	) -> HttpResponse:
		merged_headers = {**self.default_headers, **headers}
		if not any(k.lower() == "content-type" for k in merged_headers):
			merged_headers["Content-Type"] = "application/json"

		try:
			response = await self._get_client().post(
				url, json=data, headers=merged_headers
			)
		except httpx.TransportError as e:
			logger.error(f"Could not reach {url}: {e}")
			raise LLMConnectionError(str(e)) from e
		except httpx.HTTPError as e:
			raise LLMException(str(e)) from e

		response_headers = self._collect_headers(response.headers)

		if response.status_code >= 400:
			logger.warning(
				f"POST {url} answered with status {response.status_code}"
			)
			raise LLMNetworkException(
				contents=response.text,
				headers=response_headers,
				status_code=response.status_code,
			)

		return HttpResponse(
			status_code=response.status_code,
			headers=response_headers,
			content=response.content,
		)

	@staticmethod
	def _collect_headers(headers: httpx.Headers) -> Dict[str, List[str]]:
		collected: Dict[str, List[str]] = {}
		for key, value in headers.multi_items():
			collected.setdefault(key, []).append(value)
		return collected

	async def aclose(self) -> None:
		if self.httpx_client is not None:
			await self.httpx_client.aclose()
