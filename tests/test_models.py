from gptchat.models import (
	GPT4oMiniTextToSpeech,
	LLMCustomModel,
	LLMMediumNoReasoning,
	LLMMediumReasoning,
	LLMSmallNoReasoning,
	LLMSmallReasoning,
	ReasoningEffort,
	reasoning_effort,
)


def test_model_identifiers():
	assert str(LLMSmallNoReasoning()) == "gpt-4.1-mini"
	assert str(LLMMediumNoReasoning()) == "gpt-4.1"
	assert str(LLMSmallReasoning()) == "gpt-5-mini"
	assert str(LLMMediumReasoning()) == "gpt-5.1"
	assert str(GPT4oMiniTextToSpeech()) == "gpt-4o-mini-tts"


def test_reasoning_effort():
	assert reasoning_effort(LLMSmallReasoning()) == "low"
	assert reasoning_effort(LLMMediumReasoning(ReasoningEffort.HIGH)) == "high"
	assert reasoning_effort(LLMCustomModel("gpt-5-nano", ReasoningEffort.MINIMAL)) == "minimal"


def test_no_reasoning_effort():
	assert reasoning_effort(LLMMediumNoReasoning()) is None
	assert reasoning_effort(LLMCustomModel("gpt-5-nano")) is None
	# Effort is only sent to gpt-5 models
	assert reasoning_effort(LLMCustomModel("o3", ReasoningEffort.HIGH)) is None
