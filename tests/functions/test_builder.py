from typing import Annotated, Any, List, Literal, Optional

import pytest
from pydantic import BaseModel, Field

from gptchat.core.exceptions import InvalidToolDefinition
from gptchat.functions.builder import (
	GPTParameter,
	as_callable_function,
	function_from_callable,
	function_from_model,
	get_descriptor,
	gpt_tool,
	normalize_callable_name,
)
from gptchat.functions.function import CallableGPTFunction


@gpt_tool("Finds flights between two airports.")
def searchFlights(
	origin: Annotated[str, GPTParameter("IATA code of the departure airport")],
	destination: str,
	passengers: int = 1,
	max_price: Optional[float] = None,
	direct: bool = False,
	cabin: Literal["economy", "business"] = "economy",
	airlines: Optional[List[str]] = None,
	note=None,
):
	return []


class SearchInput(BaseModel):
	query: str = Field(description="What to look for")
	limit: int = 5


def test_function_from_callable_schema():
	function = function_from_callable(searchFlights)
	schema = function.to_schema()

	assert function.name == "search_flights"
	assert function.callable is searchFlights
	assert schema["description"] == "Finds flights between two airports."
	assert schema["parameters"]["required"] == ["origin", "destination"]
	assert schema["parameters"]["properties"] == {
		"origin": {"type": "string", "description": "IATA code of the departure airport"},
		"destination": {"type": "string"},
		"passengers": {"type": "integer"},
		"max_price": {"type": "number"},
		"direct": {"type": "boolean"},
		"cabin": {"name": "cabin", "type": "string", "enum": ["economy", "business"]},
		"airlines": {"name": "airlines", "type": "array", "items": {"type": "string"}},
		"note": {"type": "string"},
	}


def test_descriptor_name_overrides():
	@gpt_tool("Echo", name="repeat")
	def echo(text: str) -> str:
		return text

	assert get_descriptor(echo).description == "Echo"
	assert function_from_callable(echo).name == "repeat"
	assert function_from_callable(echo, name="explicit").name == "explicit"


def test_descriptor_on_call_method():
	class Counter:
		@gpt_tool("Counts characters.")
		def __call__(self, text: str) -> int:
			return len(text)

	function = function_from_callable(Counter())

	assert function.name == "counter"
	assert function.to_schema()["parameters"]["required"] == ["text"]


def test_explicit_description_without_decorator():
	def plain(value: int) -> int:
		return value

	function = function_from_callable(plain, description="Returns the value")

	assert function.description == "Returns the value"


def test_missing_descriptor():
	def plain(value: int) -> int:
		return value

	with pytest.raises(InvalidToolDefinition):
		function_from_callable(plain)


def test_unsupported_annotation():
	@gpt_tool("Takes a dict")
	def takes_dict(data: dict) -> None:
		return None

	with pytest.raises(InvalidToolDefinition):
		function_from_callable(takes_dict)


def test_parameter_definition_override():
	@gpt_tool("Tags things")
	def tag(labels: Annotated[Any, GPTParameter("Labels", definition={"type": "array", "items": {"type": "string"}})]):
		return labels

	prop = function_from_callable(tag).to_schema()["parameters"]["properties"]["labels"]

	assert prop == {"name": "labels", "type": "array", "items": {"type": "string"}, "description": "Labels"}


def test_function_from_model():
	def search(query: str, limit: int = 5):
		return [query] * limit

	function = function_from_model("search", "Search the index", SearchInput, search)
	parameters = function.to_schema()["parameters"]

	assert parameters["required"] == ["query"]
	assert parameters["properties"]["query"] == {
		"name": "query",
		"type": "string",
		"description": "What to look for",
	}
	assert parameters["properties"]["limit"] == {"name": "limit", "type": "integer", "default": 5}


def test_function_from_nested_model():
	class Outer(BaseModel):
		inner: SearchInput

	with pytest.raises(InvalidToolDefinition):
		function_from_model("outer", "Nested", Outer, lambda inner: inner)


def test_as_callable_function_keeps_explicit_functions():
	explicit = CallableGPTFunction("x", "X", None, lambda: None)

	assert as_callable_function(explicit) is explicit
	assert as_callable_function(searchFlights).name == "search_flights"


@pytest.mark.parametrize(
	"name, expected",
	[
		("searchFlights", "search_flights"),
		("GetWeather", "get_weather"),
		("already_snake", "already_snake"),
	],
)
def test_normalize_callable_name(name, expected):
	assert normalize_callable_name(name) == expected
