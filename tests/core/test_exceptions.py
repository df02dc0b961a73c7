from gptchat.core.config import Settings
from gptchat.core.exceptions import (
	GPTChatError,
	InvalidResponse,
	LLMException,
	LLMNetworkException,
	MissingArgument,
	MissingExecutable,
)


def test_network_exception_message_from_json():
	error = LLMNetworkException('{"error": {"message": "Invalid key"}}', {"x": ["1"]}, 401)

	assert str(error) == "Invalid key"
	assert error.status_code == 401
	assert error.headers == {"x": ["1"]}
	assert isinstance(error, LLMException)


def test_network_exception_non_json_body():
	error = LLMNetworkException("<html>", {}, 500)

	assert str(error) == ""
	assert error.contents == "<html>"


def test_tool_errors():
	assert str(MissingExecutable("lookup")) == "Missing executable for function lookup."
	assert MissingArgument("a", "add").argument == "a"
	assert issubclass(InvalidResponse, GPTChatError)
	assert not issubclass(InvalidResponse, ValueError)


def test_settings_from_environment(monkeypatch):
	monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
	monkeypatch.setenv("OPENAI_API_BASE", "https://proxy.test/v1")
	monkeypatch.setenv("DEFAULT_MAX_TOKENS", "123")

	settings = Settings(_env_file=None)

	assert settings.OPENAI_BASE_URL == "https://proxy.test/v1"
	assert settings.DEFAULT_MAX_TOKENS == 123
