"""Unit tests for config.yaml templating and loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.bookhub.runtime.config.config_data import ConfigData, DatabaseConfig
from src.bookhub.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
)
from src.bookhub.runtime.context import _load_default_config

PROJECT_CONFIG = Path(__file__).resolve().parents[5] / "config.yaml"


class TestSubstituteEnvVars:
    def test_simple_variable(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_default_when_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-fallback}") == "fallback"

    def test_empty_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-}") == ""

    def test_required_variable_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="Required environment variable MISSING_VAR not set"):
                substitute_env_vars("${MISSING_VAR}")

    def test_custom_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="MISSING_VAR: needed for auth"):
                substitute_env_vars("${MISSING_VAR:?needed for auth}")


class TestLoadTemplatedYaml:
    def test_project_config_loads_with_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.pagination.default_page == 1
        assert config.pagination.default_limit == 12
        assert config.users.max_update_attempts == 3
        assert config.reviews.max_comment_length == 2000
        assert config.logging.file is None
        assert config.database.url == "sqlite:///./bookhub.db"

    def test_environment_prefixed_override(self):
        env = {"APP_ENVIRONMENT": "test", "TEST_DATABASE_URL": "sqlite:///:memory:"}
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(PROJECT_CONFIG)

        assert config.app.environment == "test"
        assert config.database.url == "sqlite:///:memory:"

    def test_partial_file_keeps_model_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  pagination:\n    default_limit: 5\n")

        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(path)

        assert config.pagination.default_limit == 5
        assert config.pagination.default_page == 1
        assert config.jwt.allowed_algorithms == ["HS256"]

    def test_invalid_values_are_reported(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  pagination:\n    default_limit: 0\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)


class TestDatabaseConfig:
    def test_password_file_is_injected(self, tmp_path):
        secret = tmp_path / "pw"
        secret.write_text("s3cret\n")
        config = DatabaseConfig(
            url="postgresql://bookhub@db:5432/bookhub", password_file=str(secret)
        )

        assert config.connection_string == "postgresql://bookhub:s3cret@db:5432/bookhub"

    def test_url_without_password_file_is_unchanged(self):
        assert DatabaseConfig(url="sqlite:///x.db").connection_string == "sqlite:///x.db"


def test_config_model_defaults():
    config = ConfigData()
    assert config.app.environment == "development"
    assert config.jwt.gen_issuer == "bookhub"


class TestDefaultConfigDiscovery:
    def test_shipped_config_loads_without_any_environment(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with patch.dict(os.environ, {}, clear=True):
            config = _load_default_config()

        assert config.app.environment == "development"
        assert config.database.url == "sqlite:///./bookhub.db"

    def test_missing_file_falls_back_to_model_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        env = {"BOOKHUB_CONFIG_FILE": str(tmp_path / "absent.yaml")}

        with patch.dict(os.environ, env, clear=True):
            config = _load_default_config()

        assert config == ConfigData()
