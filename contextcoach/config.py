"""Configuration helpers for the ContextCoach service and CLI."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_VECTOR_DB_API_URL = "http://localhost:5000"
DEFAULT_LLM_API_URL = "https://api.rabbithole.cred.club/v1/chat/completions"
DEFAULT_LLM_MODEL = "gpt-4o-mini"

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

_TRUTHY = {"true", "1", "yes"}


def _env_flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


def _env_text(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class Settings:
    """Runtime options resolved from the process environment."""

    use_real_vector_db: bool = False
    vector_db_api_url: str = DEFAULT_VECTOR_DB_API_URL
    vector_db_launch_command: Optional[str] = None
    llm_api_url: str = DEFAULT_LLM_API_URL
    llm_api_key: Optional[str] = None
    llm_model: str = DEFAULT_LLM_MODEL
    jira_api_url: Optional[str] = None
    jira_username: Optional[str] = None
    jira_api_token: Optional[str] = None
    jira_project_key: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            use_real_vector_db=_env_flag(env.get("USE_REAL_VECTOR_DB")),
            vector_db_api_url=_env_text(env, "VECTOR_DB_API_URL") or DEFAULT_VECTOR_DB_API_URL,
            vector_db_launch_command=_env_text(env, "VECTOR_DB_LAUNCH_COMMAND"),
            llm_api_url=_env_text(env, "LLM_API_URL") or DEFAULT_LLM_API_URL,
            llm_api_key=_env_text(env, "LLM_API_KEY"),
            llm_model=_env_text(env, "LLM_MODEL") or DEFAULT_LLM_MODEL,
            jira_api_url=_env_text(env, "JIRA_API_URL"),
            jira_username=_env_text(env, "JIRA_USERNAME"),
            jira_api_token=_env_text(env, "JIRA_API_TOKEN"),
            jira_project_key=_env_text(env, "JIRA_PROJECT_KEY"),
            log_level=(_env_text(env, "LOG_LEVEL") or "INFO").upper(),
        )

    @property
    def jira_configured(self) -> bool:
        """True when enough tracker credentials exist to file external tickets."""
        return bool(self.jira_api_url and self.jira_username and self.jira_api_token)


def get_settings() -> Settings:
    """Return settings for the current process environment."""
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
