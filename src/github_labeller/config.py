"""Configuration for github-labeller.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `LABELLER_GITHUB_TOKEN`.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_labeller.client import DEFAULT_BASE_URL


class LabellerSettings(BaseSettings):
    """Settings for the labeller.

    Environment variables:
    - LABELLER_GITHUB_TOKEN
    - GITHUB_BASE_URL   (optional)
    - LOG_LEVEL         (optional)

    Notes:
        Fields may also be passed by name, e.g. `LabellerSettings(github_token=...)`,
        which is how the CLI's `--token` flag overrides the environment.
    """

    github_token: str = Field(
        default="",
        validation_alias="LABELLER_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> LabellerSettings:
        if not self.github_token.strip():
            raise ValueError("LABELLER_GITHUB_TOKEN is required")
        return self
