from typing import Any, Callable, Dict, Iterator, List, Optional

from gptchat.core.exceptions import InvalidToolDefinition
from gptchat.functions.properties import GPTProperties
from gptchat.response_format import JsonSchemaResponseFormat


# ============================================================
# FUNCTION DESCRIPTOR
# ============================================================


class GPTFunction:
	def __init__(
		self,
		name: str,
		description: str,
		properties: Optional[GPTProperties] = None,
		returns: Optional[JsonSchemaResponseFormat] = None,
	) -> None:
		self.name = name
		self.description = description
		self.properties = properties if properties is not None else GPTProperties()
		self.returns = returns

	def to_schema(self) -> Dict[str, Any]:
		"""
		Function definition as sent to the API (without the `type` tag,
		which the engine adds when building the request).
		"""
		parameters: Dict[str, Any] = {
			"type": "object",
			"properties": self.properties.to_schema(),
			"additionalProperties": False,
		}

		required = self.properties.required_names()
		if required:
			parameters["required"] = required

		data: Dict[str, Any] = {
			"name": self.name,
			"description": self.description,
			"parameters": parameters,
		}

		if self.returns is not None:
			data["returns"] = {
				**self.returns.schema,
				"strict": self.returns.strict,
			}

		return data

	def __repr__(self) -> str:
		return f"{type(self).__name__}(name={self.name!r})"


class CallableGPTFunction(GPTFunction):
	"""Function descriptor backed by a Python callable."""

	def __init__(
		self,
		name: str,
		description: str,
		properties: Optional[GPTProperties],
		callable: Callable[..., Any],
		returns: Optional[JsonSchemaResponseFormat] = None,
	) -> None:
		super().__init__(name, description, properties, returns)
		self.callable = callable


# ============================================================
# FUNCTION COLLECTION
# ============================================================


class GPTFunctions:
	"""Ordered list of function descriptors with unique names."""

	def __init__(self, *functions: GPTFunction) -> None:
		self.functions: tuple[GPTFunction, ...] = tuple(functions)
		self._callable_map: Dict[str, Callable[..., Any]] = {}

		seen = set()
		for function in self.functions:
			if function.name in seen:
				raise InvalidToolDefinition(
					f"Duplicate function name '{function.name}'."
				)
			seen.add(function.name)

			if isinstance(function, CallableGPTFunction):
				self._callable_map[function.name] = function.callable

	def __iter__(self) -> Iterator[GPTFunction]:
		return iter(self.functions)

	def __len__(self) -> int:
		return len(self.functions)

	def to_schema(self) -> List[Dict[str, Any]]:
		return [function.to_schema() for function in self.functions]

	def get_callable(self, name: str) -> Optional[Callable[..., Any]]:
		return self._callable_map.get(name)
