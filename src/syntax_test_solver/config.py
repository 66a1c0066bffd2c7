from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_BACKEND = "gemini"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_WORKERS = 4

API_KEY_VARS = ("API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


@dataclass(frozen=True)
class SolverConfig:
    """
    Settings for one solver session.

    Built once at startup and handed to the pipeline; nothing downstream
    reads the process environment.
    """
    api_key: Optional[str] = None
    llm_backend: str = DEFAULT_BACKEND
    model_name: str = DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS

    # Only used by the azure backend
    azure_endpoint: Optional[str] = None
    azure_deployment: Optional[str] = None
    azure_api_version: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> "SolverConfig":
        """
        Build a config from environment variables (after loading a .env file).

        Keyword overrides win over the environment; None overrides are ignored.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        api_key = None
        for var in API_KEY_VARS:
            value = (env.get(var) or "").strip()
            if value:
                api_key = value
                break

        values = {
            "api_key": api_key,
            "llm_backend": env.get("SYNTAX_SOLVER_BACKEND") or DEFAULT_BACKEND,
            "model_name": env.get("SYNTAX_SOLVER_MODEL") or DEFAULT_MODEL,
            "timeout_seconds": _parse_number(
                env.get("SYNTAX_SOLVER_TIMEOUT"), float, DEFAULT_TIMEOUT_SECONDS, "SYNTAX_SOLVER_TIMEOUT"
            ),
            "max_workers": _parse_number(
                env.get("SYNTAX_SOLVER_MAX_WORKERS"), int, DEFAULT_MAX_WORKERS, "SYNTAX_SOLVER_MAX_WORKERS"
            ),
            "azure_endpoint": env.get("AZURE_OPENAI_ENDPOINT"),
            "azure_deployment": env.get("AZURE_OPENAI_DEPLOYMENT_NAME"),
            "azure_api_version": env.get("AZURE_OPENAI_API_VERSION"),
        }

        overrides = {k: v for k, v in overrides.items() if v is not None}
        values.update(overrides)

        # Azure keeps its own key variable, as in the Azure SDK samples.
        # Never fall back to the Gemini key for Azure.
        if values["llm_backend"] == "azure" and "api_key" not in overrides:
            values["api_key"] = (env.get("AZURE_OPENAI_API_KEY") or "").strip() or None

        return cls(**values)


def _parse_number(raw: Optional[str], kind, default, name: str):
    if raw is None or raw.strip() == "":
        return default
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value
