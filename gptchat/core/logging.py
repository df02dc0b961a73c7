import json
import logging
from logging import LogRecord
from typing import Optional

from gptchat.core.config import settings


class Ansi:
	RESET = "\x1b[0m"
	BOLD = "\x1b[1m"

	RED = "\x1b[31m"
	GREEN = "\x1b[32m"
	YELLOW = "\x1b[33m"
	BLUE = "\x1b[34m"
	CYAN = "\x1b[36m"


LEVEL_COLORS = {
	"DEBUG": Ansi.CYAN,
	"INFO": Ansi.GREEN,
	"WARNING": Ansi.YELLOW,
	"ERROR": Ansi.RED,
	"CRITICAL": Ansi.RED + Ansi.BOLD,
}


class GPTChatFormatter(logging.Formatter):
	"""
	Renders library log records either as a coloured single line
	or as one JSON object per line, depending on settings.LOG_MODE.
	"""

	def __init__(self, mode: Optional[str] = None, use_colors: bool = True):
		super().__init__()
		self.mode = mode or settings.LOG_MODE
		self.use_colors = use_colors

	def format(self, record: LogRecord) -> str:
		if self.mode == "json":
			log_record = {
				"time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
				"severity": record.levelname,
				"logger": record.name,
				"message": record.getMessage(),
			}
			if record.exc_info:
				log_record["exc_info"] = self.formatException(record.exc_info)
			return json.dumps(log_record)

		if self.use_colors:
			color = LEVEL_COLORS.get(record.levelname, "")
			line = (
				f"{color}{record.levelname}{Ansi.RESET} | "
				f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} | "
				f"{Ansi.BLUE}{record.name}{Ansi.RESET} | "
				f"{record.getMessage()}"
			)
		else:
			line = (
				f"{record.levelname} | "
				f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} | "
				f"{record.name} | "
				f"{record.getMessage()}"
			)

		if record.exc_info:
			line = f"{line}\n{self.formatException(record.exc_info)}"
		return line


def configure_logging(
	level: Optional[str] = None,
	mode: Optional[str] = None,
	use_colors: bool = True,
) -> logging.Logger:
	"""
	Attach a stream handler with GPTChatFormatter to the package logger.
	Calling it twice replaces the handler instead of stacking a second one.
	"""
	logger = logging.getLogger("gptchat")
	logger.setLevel((level or settings.LOG_LEVEL).upper())

	for handler in list(logger.handlers):
		if getattr(handler, "_gptchat_handler", False):
			logger.removeHandler(handler)

	handler = logging.StreamHandler()
	handler.setFormatter(GPTChatFormatter(mode=mode, use_colors=use_colors))
	handler._gptchat_handler = True
	logger.addHandler(handler)
	return logger


def get_logger(name: str) -> logging.Logger:
	"""
	Get a logger below the package namespace.
	"""
	logger = logging.getLogger(name)
	return logger
