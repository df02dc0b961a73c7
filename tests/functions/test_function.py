import pytest

from gptchat.core.exceptions import InvalidToolDefinition
from gptchat.functions.function import CallableGPTFunction, GPTFunction, GPTFunctions
from gptchat.functions.properties import GPTIntegerProperty, GPTProperties, GPTStringProperty
from gptchat.response_format import JsonSchemaResponseFormat


def test_function_schema():
	function = GPTFunction(
		"search",
		"Searches documents",
		GPTProperties(
			GPTStringProperty("query", "Search text", required=True),
			GPTIntegerProperty("limit"),
		),
	)

	assert function.to_schema() == {
		"name": "search",
		"description": "Searches documents",
		"parameters": {
			"type": "object",
			"properties": {
				"query": {"type": "string", "description": "Search text"},
				"limit": {"type": "integer"},
			},
			"additionalProperties": False,
			"required": ["query"],
		},
	}


def test_function_schema_without_required():
	parameters = GPTFunction("ping", "Pings").to_schema()["parameters"]

	assert parameters == {"type": "object", "properties": {}, "additionalProperties": False}


def test_function_returns():
	returns = JsonSchemaResponseFormat({"type": "object", "properties": {"ok": {"type": "boolean"}}})

	schema = GPTFunction("ping", "Pings", returns=returns).to_schema()

	assert schema["returns"] == {
		"type": "object",
		"properties": {"ok": {"type": "boolean"}},
		"strict": True,
	}


def test_functions_collection():
	def echo(text):
		return text

	functions = GPTFunctions(
		GPTFunction("plain", "No callable"),
		CallableGPTFunction("echo", "Echo", None, echo),
	)

	assert len(functions) == 2
	assert [f["name"] for f in functions.to_schema()] == ["plain", "echo"]
	assert functions.get_callable("echo") is echo
	assert functions.get_callable("plain") is None
	assert functions.get_callable("missing") is None


def test_functions_reject_duplicate_names():
	with pytest.raises(InvalidToolDefinition):
		GPTFunctions(GPTFunction("a", "first"), GPTFunction("a", "second"))
