import time
from functools import reduce
from typing import Awaitable, Callable, TypeAlias

from gptchat.core.logging import get_logger
from gptchat.enquiry import ChatEnquiry
from gptchat.http.base import HttpResponse


logger = get_logger(__name__)


CallNext: TypeAlias = Callable[[ChatEnquiry], Awaitable[HttpResponse]]

MessageInterceptor: TypeAlias = Callable[
	[ChatEnquiry, CallNext], Awaitable[HttpResponse]
]  # enquiry, call_next -> raw response


# ============================================================
# DEFAULT INTERCEPTORS
# ============================================================


async def passthrough_interceptor(
	enquiry: ChatEnquiry, call_next: CallNext
) -> HttpResponse:
	"""Default hook: performs the call unchanged."""
	return await call_next(enquiry)


class LoggingInterceptor:
	"""
	Logs every enquiry before it is sent and the status/duration of the
	response. Errors are logged and re-raised.
	"""

	def __init__(self, logger_name: str = __name__) -> None:
		self.logger = get_logger(logger_name)

	async def __call__(
		self, enquiry: ChatEnquiry, call_next: CallNext
	) -> HttpResponse:
		self.logger.info(
			f"Enquiry to {enquiry.model}: {len(enquiry.context)} message(s), "
			f"{len(enquiry.functions)} function(s), "
			f"structured={enquiry.response_format is not None}"
		)

		started = time.perf_counter()
		try:
			response = await call_next(enquiry)
		except Exception as e:
			self.logger.error(f"Enquiry to {enquiry.model} failed: {type(e).__name__}: {e}")
			raise

		elapsed = time.perf_counter() - started
		self.logger.info(
			f"Enquiry to {enquiry.model} answered with status "
			f"{response.status_code} in {elapsed:.2f}s"
		)
		return response


# ============================================================
# COMPOSITION
# ============================================================


def chain_interceptors(*interceptors: MessageInterceptor) -> MessageInterceptor:
	"""
	Compose interceptors into one. The first interceptor is the outermost:
	it sees the enquiry first and the response last.
	"""
	if not interceptors:
		return passthrough_interceptor

	def wrap(inner: MessageInterceptor, outer: MessageInterceptor) -> MessageInterceptor:
		async def composed(enquiry: ChatEnquiry, call_next: CallNext) -> HttpResponse:
			async def next_step(e: ChatEnquiry) -> HttpResponse:
				return await inner(e, call_next)

			return await outer(enquiry, next_step)

		return composed

	return reduce(wrap, reversed(interceptors[:-1]), interceptors[-1])
