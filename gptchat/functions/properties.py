from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Mapping, Optional


# ============================================================
# PROPERTY BASE
# ============================================================


class GPTProperty(ABC):
	"""A single named parameter of a function descriptor."""

	def __init__(
		self,
		name: str,
		description: Optional[str] = None,
		required: bool = False,
	) -> None:
		if not name:
			raise ValueError("A property needs a name.")
		self._name = name
		self._description = description
		self._required = required

	@property
	def name(self) -> str:
		return self._name

	@property
	def description(self) -> Optional[str]:
		return self._description

	@property
	def required(self) -> bool:
		return self._required

	@abstractmethod
	def to_schema(self) -> Dict[str, Any]:
		pass

	def __repr__(self) -> str:
		return (
			f"{type(self).__name__}(name={self.name!r}, "
			f"required={self.required!r})"
		)


class _ScalarProperty(GPTProperty):
	json_type: str = ""

	def to_schema(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {"type": self.json_type}
		if self.description is not None:
			data["description"] = self.description
		return data


class GPTStringProperty(_ScalarProperty):
	json_type = "string"


class GPTIntegerProperty(_ScalarProperty):
	json_type = "integer"


class GPTNumberProperty(_ScalarProperty):
	json_type = "number"


class GPTBooleanProperty(_ScalarProperty):
	json_type = "boolean"


# ============================================================
# COLLECTION
# ============================================================


class GPTProperties:
	"""Ordered, name-unique list of properties."""

	def __init__(self, *properties: GPTProperty) -> None:
		seen = set()
		for prop in properties:
			if not isinstance(prop, GPTProperty):
				raise TypeError(
					f"Expected GPTProperty, got {type(prop).__name__}"
				)
			if prop.name in seen:
				raise ValueError(f"Duplicate property name '{prop.name}'.")
			seen.add(prop.name)

		self.properties: tuple[GPTProperty, ...] = tuple(properties)

	def __iter__(self) -> Iterator[GPTProperty]:
		return iter(self.properties)

	def __len__(self) -> int:
		return len(self.properties)

	def required_names(self) -> List[str]:
		return [prop.name for prop in self.properties if prop.required]

	def to_schema(self) -> Dict[str, Any]:
		return {prop.name: prop.to_schema() for prop in self.properties}


# ============================================================
# NESTED / CUSTOM PROPERTIES
# ============================================================


class GPTObjectProperty(GPTProperty):
	def __init__(
		self,
		name: str,
		description: Optional[str],
		properties: GPTProperties,
		required: bool = False,
	) -> None:
		super().__init__(name, description, required)
		self.properties = properties

	def to_schema(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {
			"type": "object",
			"name": self.name,
		}
		if self.description is not None:
			data["description"] = self.description

		data["properties"] = self.properties.to_schema()

		required = self.properties.required_names()
		if required:
			data["required"] = required

		return data


class GPTCustomProperty(GPTProperty):
	"""
	Property backed by a caller-supplied schema fragment.
	The fragment must carry the property `name`.
	"""

	def __init__(self, structure_definition: Mapping[str, Any], required: bool = False):
		name = structure_definition.get("name")
		if not isinstance(name, str):
			raise ValueError("Custom property definitions need a string 'name'.")
		super().__init__(name, structure_definition.get("description"), required)
		self.structure_definition = dict(structure_definition)

	def to_schema(self) -> Dict[str, Any]:
		return dict(self.structure_definition)
