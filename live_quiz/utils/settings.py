"""Runtime settings read from the environment (``LIVE_QUIZ_*``) or ``.env``."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from live_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LIVE_QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    # Host (optionally with port) printed in join links; detected when unset.
    public_host: str | None = None
    log_level: str = "INFO"
