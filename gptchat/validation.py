from typing import Any, Mapping, Protocol

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for
from referencing.exceptions import Unresolvable

from gptchat.core.logging import get_logger


logger = get_logger(__name__)


class JsonSchemaValidator(Protocol):
	"""
	Predicate over (data, schema). Implementations never raise:
	any failure, including a broken schema, is reported as False.
	"""

	def validate(self, data: Any, schema: Mapping[str, Any]) -> bool: ...


class DefaultJsonSchemaValidator:
	"""JsonSchemaValidator backed by the `jsonschema` package."""

	def validate(self, data: Any, schema: Mapping[str, Any]) -> bool:
		try:
			validator_cls = validator_for(schema)
			validator_cls.check_schema(schema)
			error = jsonschema_exceptions.best_match(
				validator_cls(schema).iter_errors(data)
			)
		except jsonschema_exceptions.SchemaError as e:
			logger.debug(f"Response schema is invalid: {e.message}")
			return False
		except Unresolvable as e:
			logger.debug(f"Response schema has an unresolvable reference: {e}")
			return False

		if error is not None:
			logger.debug(f"Response does not match schema: {error.message}")
			return False
		return True
