from typing import Literal
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# ------------------------------------------------------------
	# Logging
	# ------------------------------------------------------------
	LOG_LEVEL: str = "INFO"
	LOG_MODE: Literal["standard", "json"] = "standard"

	# ------------------------------------------------------------
	# OpenAI Settings
	# ------------------------------------------------------------
	OPENAI_API_KEY: str = ""
	OPENAI_BASE_URL: str = Field(
		default="https://api.openai.com/v1",
		validation_alias=AliasChoices("OPENAI_BASE_URL", "OPENAI_API_BASE"),
	)
	DEFAULT_MAX_TOKENS: int = 2500

	# ------------------------------------------------------------
	# HTTP transport timeouts (seconds)
	# ------------------------------------------------------------
	HTTP_TIMEOUT: float = 30
	HTTP_CONNECT_TIMEOUT: float = 10
	HTTP_READ_TIMEOUT: float = 300
	HTTP_WRITE_TIMEOUT: float = 60

	# Configurations
	model_config = SettingsConfigDict(
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)


settings = Settings()
