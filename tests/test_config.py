from unittest.mock import patch

import pytest

from syntax_test_solver.config import (
    DEFAULT_BACKEND,
    DEFAULT_MAX_WORKERS,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    SolverConfig,
)
from syntax_test_solver.credentials import EnvCredentialSelector
from syntax_test_solver.errors import ConfigError


class TestSolverConfigFromEnv:
    def test_defaults(self):
        config = SolverConfig.from_env({})

        assert config.api_key is None
        assert config.llm_backend == DEFAULT_BACKEND
        assert config.model_name == DEFAULT_MODEL
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert config.max_workers == DEFAULT_MAX_WORKERS

    def test_api_key(self):
        assert SolverConfig.from_env({"API_KEY": " abc "}).api_key == "abc"

    def test_api_key_fallbacks(self):
        assert SolverConfig.from_env({"GEMINI_API_KEY": "g"}).api_key == "g"
        assert SolverConfig.from_env({"API_KEY": "a", "GOOGLE_API_KEY": "g"}).api_key == "a"

    def test_blank_key_is_missing(self):
        assert SolverConfig.from_env({"API_KEY": "   "}).api_key is None

    def test_settings(self):
        config = SolverConfig.from_env(
            {
                "SYNTAX_SOLVER_BACKEND": "mock",
                "SYNTAX_SOLVER_MODEL": "gemini-2.5-pro",
                "SYNTAX_SOLVER_TIMEOUT": "30",
                "SYNTAX_SOLVER_MAX_WORKERS": "2",
            }
        )
        assert config.llm_backend == "mock"
        assert config.model_name == "gemini-2.5-pro"
        assert config.timeout_seconds == 30.0
        assert config.max_workers == 2

    def test_azure_key(self):
        env = {
            "SYNTAX_SOLVER_BACKEND": "azure",
            "AZURE_OPENAI_API_KEY": "az",
            "AZURE_OPENAI_ENDPOINT": "https://x",
        }
        config = SolverConfig.from_env(env)
        assert config.api_key == "az"
        assert config.azure_endpoint == "https://x"

    def test_azure_backend_override_uses_azure_key(self):
        env = {"AZURE_OPENAI_API_KEY": "az", "API_KEY": "gemini-key"}
        config = SolverConfig.from_env(env, llm_backend="azure")
        assert config.llm_backend == "azure"
        assert config.api_key == "az"

    def test_azure_never_gets_gemini_key(self):
        config = SolverConfig.from_env({"API_KEY": "gemini-key"}, llm_backend="azure")
        assert config.api_key is None

    def test_gemini_backend_override_ignores_azure_key(self):
        env = {"SYNTAX_SOLVER_BACKEND": "azure", "AZURE_OPENAI_API_KEY": "az", "API_KEY": "g"}
        assert SolverConfig.from_env(env, llm_backend="gemini").api_key == "g"

    def test_explicit_api_key_override_kept_for_azure(self):
        config = SolverConfig.from_env({"AZURE_OPENAI_API_KEY": "az"}, llm_backend="azure", api_key="explicit")
        assert config.api_key == "explicit"

    def test_overrides_win(self):
        config = SolverConfig.from_env({"SYNTAX_SOLVER_BACKEND": "azure"}, llm_backend="mock", model_name=None)
        assert config.llm_backend == "mock"
        assert config.model_name == DEFAULT_MODEL

    @pytest.mark.parametrize("value", ["soon", "-5", "0"])
    def test_bad_timeout(self, value):
        with pytest.raises(ConfigError, match="SYNTAX_SOLVER_TIMEOUT"):
            SolverConfig.from_env({"SYNTAX_SOLVER_TIMEOUT": value})

    def test_bad_workers(self):
        with pytest.raises(ConfigError, match="SYNTAX_SOLVER_MAX_WORKERS"):
            SolverConfig.from_env({"SYNTAX_SOLVER_MAX_WORKERS": "1.5"})

    @patch("syntax_test_solver.config.load_dotenv")
    def test_process_env_loads_dotenv(self, mock_load, monkeypatch):
        monkeypatch.setenv("API_KEY", "from-env")
        config = SolverConfig.from_env()

        mock_load.assert_called_once()
        assert config.api_key == "from-env"

    def test_frozen(self):
        config = SolverConfig()
        with pytest.raises(AttributeError):
            config.api_key = "x"


class TestEnvCredentialSelector:
    def test_has_selected(self):
        assert EnvCredentialSelector(env={"API_KEY": "k"}).has_selected_credential() is True
        assert EnvCredentialSelector(env={}).has_selected_credential() is False

    def test_open_select_stores_key(self):
        env = {}
        selector = EnvCredentialSelector(env=env, prompt=lambda _: "  new-key ")
        selector.open_select_credential()

        assert env["API_KEY"] == "new-key"
        assert selector.has_selected_credential() is True

    def test_open_select_empty_raises(self):
        selector = EnvCredentialSelector(env={}, prompt=lambda _: "")
        with pytest.raises(ValueError):
            selector.open_select_credential()
