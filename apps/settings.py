"""
Backend Settings.

Loads and validates configuration for the backend application,
aggregating settings from environment variables and config files.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

from dotenv import dotenv_values

from libs.core.config_loader import load_root_config
from libs.core.project_paths import get_project_root
from libs.llm_openai.chat_client import ChatClientConfig

DEFAULT_LLM_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_LLM_MODEL = "gpt-4o-mini"


@dataclass(frozen=True)
class BackendSettings:
    """Immutable configuration object for the backend service."""

    host: str
    port: int
    internal_token: str

    # Chat-completion endpoint (OpenAI compatible)
    llm_api_url: str
    llm_api_key: str
    llm_model_name: str
    llm_vision_model_name: str
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 45.0

    # Bearer JWT verification
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_jwks_url: str = ""

    user_data_dir: str = "user_data"

    def chat_client_config(self) -> ChatClientConfig:
        return ChatClientConfig(
            api_url=self.llm_api_url,
            api_key=self.llm_api_key,
            model_name=self.llm_model_name,
            temperature=self.llm_temperature,
            timeout_seconds=self.llm_timeout_seconds,
        )


@lru_cache(maxsize=1)
def _load_dotenv_vars() -> Dict[str, str]:
    env_path = get_project_root() / ".env"
    if not env_path.exists():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def _get_value(name: str, root_cfg: Dict[str, Any], default: str = "") -> str:
    """
    Read from the real environment first, then .env, then config.json, then fallback.
    """
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    dotenv_val = _load_dotenv_vars().get(name, "").strip()
    if dotenv_val:
        return dotenv_val
    cfg_val = root_cfg.get(name)
    if cfg_val is not None and str(cfg_val).strip():
        return str(cfg_val).strip()
    return default


def load_settings() -> BackendSettings:
    """
    Backend configuration (single process entry point).

    Priority: environment > .env > config.json > defaults
    """
    root_cfg = load_root_config()

    llm_model_name = _get_value("LLM_MODEL_NAME", root_cfg, DEFAULT_LLM_MODEL)

    return BackendSettings(
        host=_get_value("BACKEND_HOST", root_cfg, "127.0.0.1"),
        port=int(_get_value("BACKEND_PORT", root_cfg, "8001")),
        internal_token=_get_value("BACKEND_INTERNAL_TOKEN", root_cfg),
        llm_api_url=_get_value("LLM_API_URL", root_cfg, DEFAULT_LLM_API_URL),
        llm_api_key=_get_value("LLM_API_KEY", root_cfg),
        llm_model_name=llm_model_name,
        llm_vision_model_name=_get_value("LLM_VISION_MODEL_NAME", root_cfg, llm_model_name),
        llm_temperature=float(_get_value("LLM_TEMPERATURE", root_cfg, "0.7")),
        llm_timeout_seconds=float(_get_value("LLM_TIMEOUT_SECONDS", root_cfg, "45")),
        jwt_secret=_get_value("JWT_SECRET", root_cfg),
        jwt_algorithm=_get_value("JWT_ALGORITHM", root_cfg, "HS256"),
        jwt_jwks_url=_get_value("JWT_JWKS_URL", root_cfg),
        user_data_dir=_get_value(
            "USER_DATA_DIR", root_cfg, str(get_project_root() / "user_data")
        ),
    )
