import copy
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel


# ============================================================
# STRICT SCHEMA TRANSFORM
# ============================================================


def enforce_strict_schema(schema: Any) -> Any:
	"""
	Return a copy of `schema` that satisfies strict structured output.

	Every object node with `properties` gets `required` (all keys) unless
	it already declares one, and every object node gets
	`additionalProperties: false` unless it already declares it. Array
	`items`, `$defs` and `anyOf` branches are walked as well.

	Applying the transform to its own output returns an equal schema.
	"""
	if not isinstance(schema, dict):
		return schema

	schema = dict(schema)
	schema_type = schema.get("type")

	if schema_type == "object":
		properties = schema.get("properties")
		if isinstance(properties, dict):
			schema["properties"] = {
				key: enforce_strict_schema(value)
				for key, value in properties.items()
			}
			if "required" not in schema:
				schema["required"] = list(properties.keys())

		if "additionalProperties" not in schema:
			schema["additionalProperties"] = False

	if schema_type == "array" and "items" in schema:
		schema["items"] = enforce_strict_schema(schema["items"])

	for key in ("$defs", "definitions"):
		if isinstance(schema.get(key), dict):
			schema[key] = {
				name: enforce_strict_schema(value)
				for name, value in schema[key].items()
			}

	if isinstance(schema.get("anyOf"), list):
		schema["anyOf"] = [enforce_strict_schema(v) for v in schema["anyOf"]]

	return schema


# ============================================================
# RESPONSE FORMAT
# ============================================================


class JsonSchemaResponseFormat:
	"""
	Requests JSON output matching `schema`.
	The raw schema is what responses are validated against; the strict
	variant is what gets sent to the API.
	"""

	def __init__(
		self,
		schema: Dict[str, Any],
		strict: bool = True,
		name: str = "Response",
	) -> None:
		self.schema = copy.deepcopy(schema)
		self.strict = strict
		self.name = name

	@classmethod
	def from_model(
		cls,
		model_cls: Type[BaseModel],
		strict: bool = True,
		name: Optional[str] = None,
	) -> "JsonSchemaResponseFormat":
		return cls(
			model_cls.model_json_schema(),
			strict=strict,
			name=name or model_cls.__name__,
		)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"type": "json_schema",
			"json_schema": {
				"name": self.name,
				"schema": copy.deepcopy(self.schema),
				"strict": self.strict,
			},
		}

	def to_responses_format(self) -> Dict[str, Any]:
		"""Shape expected under `text.format` by the Responses API."""
		return {
			"type": "json_schema",
			"name": self.name,
			"schema": enforce_strict_schema(self.schema),
			"strict": self.strict,
		}

	def __repr__(self) -> str:
		return f"JsonSchemaResponseFormat(name={self.name!r}, strict={self.strict!r})"
