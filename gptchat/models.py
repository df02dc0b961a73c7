import enum
from typing import Optional, Protocol, runtime_checkable


class ReasoningEffort(str, enum.Enum):
	MINIMAL = "minimal"
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"


@runtime_checkable
class ChatModelName(Protocol):
	"""Anything whose str() is a model identifier."""

	def __str__(self) -> str: ...


# ============================================================
# CHAT MODELS
# ============================================================


class LLMSmallNoReasoning:
	def __str__(self) -> str:
		return "gpt-4.1-mini"


class LLMMediumNoReasoning:
	def __str__(self) -> str:
		return "gpt-4.1"


class LLMSmallReasoning:
	def __init__(self, effort: ReasoningEffort = ReasoningEffort.LOW):
		self.effort = effort

	def __str__(self) -> str:
		return "gpt-5-mini"


class LLMMediumReasoning:
	def __init__(self, effort: ReasoningEffort = ReasoningEffort.MEDIUM):
		self.effort = effort

	def __str__(self) -> str:
		return "gpt-5.1"


class LLMCustomModel:
	def __init__(self, model: str, effort: Optional[ReasoningEffort] = None):
		self.model = model
		self.effort = effort

	def __str__(self) -> str:
		return self.model

	def __repr__(self) -> str:
		return f"LLMCustomModel(model={self.model!r}, effort={self.effort!r})"


REASONING_MODELS = (LLMSmallReasoning, LLMMediumReasoning, LLMCustomModel)


def reasoning_effort(model: ChatModelName) -> Optional[str]:
	"""
	Effort to send for `model`, or None. Only gpt-5 family identifiers
	carry an effort, and only when the model object has one configured.
	"""
	if not str(model).startswith("gpt-5"):
		return None

	if isinstance(model, REASONING_MODELS) and model.effort is not None:
		return ReasoningEffort(model.effort).value

	return None


# ============================================================
# TEXT TO SPEECH MODELS
# ============================================================


class TextToSpeechModel:
	name: str = ""

	def __str__(self) -> str:
		return self.name


class GPT4oMiniTextToSpeech(TextToSpeechModel):
	name = "gpt-4o-mini-tts"
