import json
import logging

from gptchat.core.logging import GPTChatFormatter, configure_logging, get_logger


def make_record(message: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
	return logging.LogRecord("gptchat.chat", level, __file__, 1, message, None, None)


def test_json_format():
	line = GPTChatFormatter(mode="json").format(make_record("sent"))
	data = json.loads(line)

	assert data["severity"] == "INFO"
	assert data["logger"] == "gptchat.chat"
	assert data["message"] == "sent"


def test_standard_format_without_colors():
	line = GPTChatFormatter(mode="standard", use_colors=False).format(make_record("sent"))

	assert line.startswith("INFO | ")
	assert line.endswith(" | gptchat.chat | sent")


def test_configure_logging_replaces_handler():
	logger = configure_logging(level="debug", mode="json")
	configure_logging(level="warning")

	handlers = [h for h in logger.handlers if getattr(h, "_gptchat_handler", False)]
	assert len(handlers) == 1
	assert logger.level == logging.WARNING

	logger.removeHandler(handlers[0])
	logger.setLevel(logging.NOTSET)


def test_get_logger():
	assert get_logger("gptchat.chat").name == "gptchat.chat"
