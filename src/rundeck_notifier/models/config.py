"""Configuration models for the Rundeck notifier.

RundeckConfig holds the process-wide connection settings for the
Rundeck instance (shared by every notification step).
NotificationConfig holds the per-step settings of one build step.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_TIMEOUT = 10.0


class RundeckConfig(BaseModel):
    """Connection settings for a Rundeck instance.

    Immutable: a configuration change produces a new instance which is
    swapped in whole, so readers never see a partial update.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    login: str = ""
    password: str = ""
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("url", "login", "password", mode="before")
    @classmethod
    def normalize_blank(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def is_valid(self) -> bool:
        """Structural check: url, login and password are present."""
        if not (self.url and self.login and self.password):
            return False
        return self.url.startswith(("http://", "https://"))

    @classmethod
    def from_env(cls) -> RundeckConfig:
        """Read RUNDECK_URL, RUNDECK_LOGIN, RUNDECK_PASSWORD, RUNDECK_TIMEOUT."""
        timeout_raw = os.environ.get("RUNDECK_TIMEOUT", "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            timeout = DEFAULT_TIMEOUT
        return cls(
            url=os.environ.get("RUNDECK_URL", ""),
            login=os.environ.get("RUNDECK_LOGIN", ""),
            password=os.environ.get("RUNDECK_PASSWORD", ""),
            timeout=timeout,
        )

    def __str__(self) -> str:
        # Never render the password in build logs.
        return f"RundeckInstance[url={self.url}, login={self.login}]"


class NotificationConfig(BaseModel):
    """Settings of one notification build step."""

    model_config = ConfigDict(frozen=True)

    group_path: str = ""
    job_name: str
    options: str = ""
    tag: Optional[str] = None
    should_fail_the_build: bool = False

    @field_validator("group_path", "options", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value: object) -> object:
        if value is None:
            return ""
        return value
