import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple

from gptchat.core.exceptions import MissingArgument
from gptchat.core.logging import get_logger


logger = get_logger(__name__)


# ============================================================
# SIGNATURE INSPECTION
# ============================================================


@dataclass(frozen=True)
class ParameterSpec:
	name: str
	kind: inspect._ParameterKind
	annotation: Any = inspect.Parameter.empty
	default: Any = inspect.Parameter.empty

	@property
	def required(self) -> bool:
		return self.default is inspect.Parameter.empty

	@property
	def is_variadic(self) -> bool:
		return self.kind in (
			inspect.Parameter.VAR_POSITIONAL,
			inspect.Parameter.VAR_KEYWORD,
		)


def callable_name(fn: Callable[..., Any]) -> str:
	name = getattr(fn, "__name__", None)
	if name is None:
		name = type(fn).__name__
	return name


def _type_hints(fn: Callable[..., Any]) -> Dict[str, Any]:
	target = fn
	if not (inspect.isfunction(fn) or inspect.ismethod(fn)):
		target = getattr(fn, "__call__", fn)

	try:
		return typing.get_type_hints(target, include_extras=True)
	except (NameError, TypeError):
		# Unresolvable forward references: fall back to raw annotations.
		return {}


def parameter_specs(fn: Callable[..., Any]) -> List[ParameterSpec]:
	"""
	Ordered parameters of `fn` with resolved annotations
	(`Annotated` metadata is kept).
	"""
	hints = _type_hints(fn)
	specs = []
	for param in inspect.signature(fn).parameters.values():
		specs.append(
			ParameterSpec(
				name=param.name,
				kind=param.kind,
				annotation=hints.get(param.name, param.annotation),
				default=param.default,
			)
		)
	return specs


# ============================================================
# INVOCATION
# ============================================================


class CallableInvoker:
	"""
	Calls a Python callable with arguments given by name,
	as decoded from a model tool call.
	"""

	@staticmethod
	def bind(
		fn: Callable[..., Any], arguments: Mapping[str, Any]
	) -> Tuple[List[Any], Dict[str, Any]]:
		"""
		Map named arguments onto the signature of `fn`.

		Each parameter takes the same-named argument when present, its
		default otherwise. A missing parameter without default raises
		MissingArgument. Extra arguments are only passed on when `fn`
		accepts **kwargs.
		"""
		args: List[Any] = []
		kwargs: Dict[str, Any] = {}
		consumed = set()
		accepts_kwargs = False

		for spec in parameter_specs(fn):
			if spec.kind == inspect.Parameter.VAR_POSITIONAL:
				continue
			if spec.kind == inspect.Parameter.VAR_KEYWORD:
				accepts_kwargs = True
				continue

			if spec.name in arguments:
				value = arguments[spec.name]
				consumed.add(spec.name)
			elif not spec.required:
				value = spec.default
			else:
				raise MissingArgument(spec.name, callable_name(fn))

			if spec.kind == inspect.Parameter.KEYWORD_ONLY:
				kwargs[spec.name] = value
			else:
				args.append(value)

		if accepts_kwargs:
			for key, value in arguments.items():
				if key not in consumed:
					kwargs[key] = value

		return args, kwargs

	@classmethod
	async def invoke(
		cls, fn: Callable[..., Any], arguments: Mapping[str, Any]
	) -> Any:
		"""
		Invoke `fn` with `arguments`. Coroutine functions (and any callable
		returning an awaitable) are awaited.
		"""
		args, kwargs = cls.bind(fn, arguments)
		logger.debug(f"Invoking '{callable_name(fn)}' with args: {args} {kwargs}")

		result = fn(*args, **kwargs)
		if inspect.isawaitable(result):
			result = await result
		return result
