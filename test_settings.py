"""Settings loading and app wiring."""

from fastapi.testclient import TestClient

from apps.app import create_app
from apps.settings import load_settings

ENV_VARS = [
    "BACKEND_HOST", "BACKEND_PORT", "BACKEND_INTERNAL_TOKEN", "LLM_API_URL", "LLM_API_KEY",
    "LLM_MODEL_NAME", "LLM_VISION_MODEL_NAME", "LLM_TEMPERATURE", "LLM_TIMEOUT_SECONDS",
    "JWT_SECRET", "JWT_ALGORITHM", "JWT_JWKS_URL", "USER_DATA_DIR",
]


def _clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_environment_overrides(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv("LLM_API_KEY", "sk-env")
    monkeypatch.setenv("LLM_MODEL_NAME", "custom-model")
    monkeypatch.setenv("LLM_TEMPERATURE", "0.2")
    monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("BACKEND_PORT", "9000")
    monkeypatch.setenv("USER_DATA_DIR", str(tmp_path))

    settings = load_settings()

    assert settings.port == 9000
    assert settings.llm_api_key == "sk-env"
    assert settings.llm_model_name == "custom-model"
    # vision model follows the text model unless set
    assert settings.llm_vision_model_name == "custom-model"
    assert settings.user_data_dir == str(tmp_path)

    cfg = settings.chat_client_config()
    assert cfg.api_key == "sk-env"
    assert cfg.temperature == 0.2
    assert cfg.timeout_seconds == 30.0


def test_vision_model_can_differ(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("LLM_MODEL_NAME", "text-model")
    monkeypatch.setenv("LLM_VISION_MODEL_NAME", "vision-model")

    settings = load_settings()

    assert settings.llm_model_name == "text-model"
    assert settings.llm_vision_model_name == "vision-model"
    assert settings.chat_client_config().model_name == "text-model"


def test_health_endpoint(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv("USER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LLM_API_KEY", "sk-env")

    client = TestClient(create_app())
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["llm_configured"] is True
