"""Configuration models."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are prefixed with GITMINE_ (e.g., GITMINE_BACKEND).
    """

    model_config = SettingsConfigDict(
        env_prefix="GITMINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Git settings
    git_binary: str = Field("git", description="git executable to run")
    backend: Literal["cli", "library"] = Field(
        "cli", description="Backend: cli (git binary) or library (GitPython)"
    )
    ask_pass_script: str = Field(
        "/git-ask-pass.sh",
        description="GIT_ASKPASS helper used when credentials are supplied",
    )

    # Processing settings
    poll_interval: float = Field(
        0.1, gt=0, description="Seconds between cancellation checks of a running command"
    )
    default_commit_count: int = Field(20, gt=0, description="Commits fetched when no count is given")

    # Logging
    log_level: str = "INFO"
