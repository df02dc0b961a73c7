import pytest

from gptchat.core.exceptions import MissingArgument
from gptchat.functions.invoker import CallableInvoker, parameter_specs


def add(a: int, b: int = 10) -> int:
	return a + b


def test_bind_positional_with_defaults():
	assert CallableInvoker.bind(add, {"a": 1}) == ([1, 10], {})
	assert CallableInvoker.bind(add, {"b": 2, "a": 1}) == ([1, 2], {})


def test_bind_ignores_unknown_arguments():
	assert CallableInvoker.bind(add, {"a": 1, "c": 3}) == ([1, 10], {})


def test_bind_keyword_only_and_var_kwargs():
	def fn(a, *, flag=False, **extra):
		return a, flag, extra

	args, kwargs = CallableInvoker.bind(fn, {"a": 1, "flag": True, "other": "x"})

	assert args == [1]
	assert kwargs == {"flag": True, "other": "x"}


def test_bind_missing_argument():
	with pytest.raises(MissingArgument) as exc_info:
		CallableInvoker.bind(add, {"b": 1})

	assert exc_info.value.argument == "a"
	assert exc_info.value.callable_name == "add"


@pytest.mark.asyncio
async def test_invoke_sync_callable():
	assert await CallableInvoker.invoke(add, {"a": 1, "b": 2}) == 3


@pytest.mark.asyncio
async def test_invoke_async_callable():
	async def shout(text: str) -> str:
		return text.upper()

	assert await CallableInvoker.invoke(shout, {"text": "hi"}) == "HI"


@pytest.mark.asyncio
async def test_invoke_callable_object():
	class Multiplier:
		def __init__(self, factor):
			self.factor = factor

		def __call__(self, value: int) -> int:
			return value * self.factor

	assert await CallableInvoker.invoke(Multiplier(3), {"value": 2}) == 6


def test_parameter_specs():
	specs = parameter_specs(add)

	assert [spec.name for spec in specs] == ["a", "b"]
	assert specs[0].required
	assert not specs[1].required
	assert specs[0].annotation is int
