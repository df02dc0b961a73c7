"""
Builds function descriptors for Python callables.

Callables opt in explicitly: either they are wrapped in a
CallableGPTFunction by hand, or they carry a descriptor attached with the
`gpt_tool` decorator. Parameter descriptions come from
`Annotated[T, GPTParameter("...")]`.

	@gpt_tool("Returns a number for a letter.")
	def get_number_by_letter(
		letter: Annotated[str, GPTParameter("The letter")],
	) -> int:
		...
"""

import inspect
import re
import types
from dataclasses import dataclass
from typing import (
	Annotated,
	Any,
	Callable,
	Dict,
	Literal,
	Optional,
	Type,
	Union,
	get_args,
	get_origin,
)

from pydantic import BaseModel

from gptchat.core.exceptions import InvalidToolDefinition
from gptchat.functions.function import CallableGPTFunction
from gptchat.functions.invoker import ParameterSpec, callable_name, parameter_specs
from gptchat.functions.properties import (
	GPTBooleanProperty,
	GPTCustomProperty,
	GPTIntegerProperty,
	GPTNumberProperty,
	GPTProperties,
	GPTProperty,
	GPTStringProperty,
)


DESCRIPTOR_ATTR = "__gpt_descriptor__"


# ============================================================
# DESCRIPTORS
# ============================================================


@dataclass(frozen=True)
class GPTCallableDescriptor:
	description: str
	name: Optional[str] = None


@dataclass(frozen=True)
class GPTParameter:
	"""
	Parameter metadata for `Annotated`.
	`definition` replaces the derived schema fragment entirely.
	"""

	description: Optional[str] = None
	definition: Optional[Dict[str, Any]] = None


def gpt_tool(description: str, name: Optional[str] = None) -> Callable:
	"""Mark a function (or a `__call__` method) as a callable tool."""

	def decorator(fn: Callable) -> Callable:
		setattr(fn, DESCRIPTOR_ATTR, GPTCallableDescriptor(description, name))
		return fn

	return decorator


def get_descriptor(fn: Callable[..., Any]) -> Optional[GPTCallableDescriptor]:
	descriptor = getattr(fn, DESCRIPTOR_ATTR, None)
	if descriptor is None:
		descriptor = getattr(getattr(fn, "__call__", None), DESCRIPTOR_ATTR, None)
	return descriptor


def normalize_callable_name(name: str) -> str:
	return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# ============================================================
# PARAMETER MAPPING
# ============================================================


SCALAR_PROPERTIES: Dict[Any, Type[GPTProperty]] = {
	bool: GPTBooleanProperty,
	int: GPTIntegerProperty,
	float: GPTNumberProperty,
	str: GPTStringProperty,
}

SCALAR_JSON_TYPES = {
	bool: "boolean",
	int: "integer",
	float: "number",
	str: "string",
}


def _split_annotated(annotation: Any):
	if get_origin(annotation) is Annotated:
		base, *metadata = get_args(annotation)
		parameter = next(
			(m for m in metadata if isinstance(m, GPTParameter)), None
		)
		return base, parameter
	return annotation, None


def _unwrap_optional(annotation: Any) -> Any:
	if get_origin(annotation) in (Union, types.UnionType):
		args = [a for a in get_args(annotation) if a is not type(None)]
		if len(args) == 1:
			return args[0]
	return annotation


def property_from_parameter(spec: ParameterSpec) -> GPTProperty:
	annotation, parameter = _split_annotated(spec.annotation)
	annotation = _unwrap_optional(annotation)
	description = parameter.description if parameter else None

	if parameter is not None and parameter.definition is not None:
		definition = {"name": spec.name, **parameter.definition}
		if description is not None:
			definition.setdefault("description", description)
		return GPTCustomProperty(definition, required=spec.required)

	if annotation is inspect.Parameter.empty or annotation is Any:
		return GPTStringProperty(spec.name, description, required=spec.required)

	if annotation in SCALAR_PROPERTIES:
		return SCALAR_PROPERTIES[annotation](
			spec.name, description, required=spec.required
		)

	definition: Optional[Dict[str, Any]] = None
	origin = get_origin(annotation)

	if origin is Literal:
		values = list(get_args(annotation))
		json_type = SCALAR_JSON_TYPES.get(type(values[0])) if values else None
		if json_type and all(type(v) is type(values[0]) for v in values):
			definition = {"type": json_type, "enum": values}

	elif origin is list:
		item_args = get_args(annotation)
		item_type = SCALAR_JSON_TYPES.get(item_args[0]) if item_args else None
		if item_type:
			definition = {"type": "array", "items": {"type": item_type}}

	if definition is None:
		raise InvalidToolDefinition(
			f"Unsupported parameter type for callable tool: "
			f"{spec.name}: {annotation!r}"
		)

	definition = {"name": spec.name, **definition}
	if description is not None:
		definition["description"] = description
	return GPTCustomProperty(definition, required=spec.required)


# ============================================================
# FACTORIES
# ============================================================


def function_from_callable(
	fn: Callable[..., Any],
	name: Optional[str] = None,
	description: Optional[str] = None,
) -> CallableGPTFunction:
	"""
	Build a CallableGPTFunction from a callable carrying a `gpt_tool`
	descriptor (or an explicit description).
	"""
	if not callable(fn):
		raise InvalidToolDefinition(f"{fn!r} is not callable.")

	descriptor = get_descriptor(fn)
	if descriptor is None and description is None:
		raise InvalidToolDefinition(
			f"Callable tool '{callable_name(fn)}' needs a gpt_tool descriptor."
		)

	name = (
		name
		or (descriptor.name if descriptor else None)
		or normalize_callable_name(callable_name(fn))
	)
	if description is None:
		description = descriptor.description

	properties = [
		property_from_parameter(spec)
		for spec in parameter_specs(fn)
		if not spec.is_variadic
	]

	return CallableGPTFunction(
		name=name,
		description=description,
		properties=GPTProperties(*properties),
		callable=fn,
	)


def function_from_model(
	name: str,
	description: str,
	model_cls: Type[BaseModel],
	fn: Callable[..., Any],
) -> CallableGPTFunction:
	"""
	Build a CallableGPTFunction whose parameters come from the JSON schema
	of a flat pydantic model. `fn` receives the fields by name.
	"""
	schema = model_cls.model_json_schema()
	if "$defs" in schema:
		raise InvalidToolDefinition(
			f"Model '{model_cls.__name__}' has nested models; "
			"only flat models can describe tool parameters."
		)

	required = set(schema.get("required", []))
	properties = []
	for key, prop_schema in schema.get("properties", {}).items():
		definition = {k: v for k, v in prop_schema.items() if k != "title"}
		properties.append(
			GPTCustomProperty({"name": key, **definition}, required=key in required)
		)

	return CallableGPTFunction(
		name=name,
		description=description,
		properties=GPTProperties(*properties),
		callable=fn,
	)


def as_callable_function(tool: Any) -> CallableGPTFunction:
	if isinstance(tool, CallableGPTFunction):
		return tool
	return function_from_callable(tool)
