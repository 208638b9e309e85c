"""Unit tests for configuration loading."""

import os
from pathlib import Path
from textwrap import dedent
from unittest.mock import patch

import pytest

from studentdir.config import (
    DEFAULT_DATABASE_URL,
    ConfigError,
    Settings,
    find_config,
    load_settings,
)

ENV_VARS = (
    "DATABASE_URL",
    "STUDENTDIR_CONFIG",
    "STUDENTDIR_POOL_SIZE",
    "STUDENTDIR_BCRYPT_ROUNDS",
    "STUDENTDIR_HOST",
    "STUDENTDIR_PORT",
    "STUDENTDIR_LOG_LEVEL",
    "STUDENTDIR_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the caller's environment and any studentdir.yaml."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_content = dedent("""
        database:
          url: postgresql://app:secret@db:5432/students
          pool_size: 8
        security:
          bcrypt_rounds: 10
        server:
          host: 127.0.0.1
          port: 8080
        logging:
          level: DEBUG
          dir: /var/log/studentdir
    """).strip()

    config_path = tmp_path / "studentdir.yaml"
    config_path.write_text(config_content)
    return config_path


@pytest.mark.unit
class TestLoadSettings:
    """Tests for load_settings function."""

    def test_defaults_without_file(self) -> None:
        settings = load_settings(use_dotenv=False)

        assert settings == Settings()
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.port == 3000
        assert settings.bcrypt_rounds == 12

    def test_load_yaml(self, temp_config: Path) -> None:
        settings = load_settings(temp_config, use_dotenv=False)

        assert settings.database_url == "postgresql://app:secret@db:5432/students"
        assert settings.pool_size == 8
        assert settings.bcrypt_rounds == 10
        assert settings.host == "127.0.0.1"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == "/var/log/studentdir"

    def test_auto_detects_config(self, temp_config: Path) -> None:
        settings = load_settings(use_dotenv=False)

        assert settings.port == 8080

    def test_partial_yaml_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.yaml"
        path.write_text("server:\n  port: 9000\n")

        settings = load_settings(path, use_dotenv=False)

        assert settings.port == 9000
        assert settings.database_url == DEFAULT_DATABASE_URL

    def test_env_overrides_yaml(self, temp_config: Path) -> None:
        with patch.dict(
            os.environ,
            {"DATABASE_URL": "sqlite:///other.db", "STUDENTDIR_PORT": "4000"},
        ):
            settings = load_settings(temp_config, use_dotenv=False)

        assert settings.database_url == "sqlite:///other.db"
        assert settings.port == 4000
        assert settings.host == "127.0.0.1"

    def test_dotenv_loaded(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("DATABASE_URL=sqlite:///from-dotenv.db\n")

        with patch.dict(os.environ, {}):
            settings = load_settings()

        assert settings.database_url == "sqlite:///from-dotenv.db"

    def test_invalid_env_int(self) -> None:
        with (
            patch.dict(os.environ, {"STUDENTDIR_PORT": "http"}),
            pytest.raises(ConfigError, match="STUDENTDIR_PORT"),
        ):
            load_settings(use_dotenv=False)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path, use_dotenv=False)

    def test_non_mapping_section(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("server: 8080\n")

        with pytest.raises(ConfigError, match="server"):
            load_settings(path, use_dotenv=False)

    def test_config_path_from_env(self, tmp_path: Path) -> None:
        path = tmp_path / "conf" / "custom.yaml"
        path.parent.mkdir()
        path.write_text("server:\n  port: 9100\n")

        with patch.dict(os.environ, {"STUDENTDIR_CONFIG": str(path)}):
            settings = load_settings(use_dotenv=False)

        assert settings.port == 9100

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_settings(tmp_path / "nope.yaml", use_dotenv=False)

    @pytest.mark.parametrize(
        "content",
        [
            "server:\n  port: abc\n",
            "database:\n  pool_size: [5]\n",
            "security:\n  bcrypt_rounds: 10.5\n",
            "server:\n  port: true\n",
            "database:\n  url: {host: db}\n",
        ],
    )
    def test_wrong_yaml_types(self, tmp_path: Path, content: str) -> None:
        """Badly typed YAML values are configuration errors, not crashes."""
        path = tmp_path / "typed.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError, match="Invalid value"):
            load_settings(path, use_dotenv=False)

    def test_numeric_strings_coerced(self, tmp_path: Path) -> None:
        path = tmp_path / "quoted.yaml"
        path.write_text("database:\n  pool_size: '5'\nserver:\n  port: '8081'\n  host: 10\n")

        settings = load_settings(path, use_dotenv=False)

        assert settings.pool_size == 5
        assert settings.port == 8081
        assert settings.host == "10"

    def test_unparseable_database_url(self) -> None:
        with (
            patch.dict(os.environ, {"DATABASE_URL": "not a url"}),
            pytest.raises(ConfigError, match="Invalid database URL"),
        ):
            load_settings(use_dotenv=False)


@pytest.mark.unit
class TestValidate:
    """Tests for Settings.validate."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"database_url": ""},
            {"database_url": "not a url"},
            {"pool_size": 0},
            {"bcrypt_rounds": 3},
            {"bcrypt_rounds": 32},
            {"port": 0},
            {"port": 70000},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ConfigError):
            Settings(**overrides).validate()

    def test_defaults_valid(self) -> None:
        Settings().validate()


@pytest.mark.unit
class TestFindConfig:
    """Tests for find_config function."""

    def test_finds_in_parent(self, temp_config: Path, tmp_path: Path) -> None:
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config(nested) == temp_config.resolve()

    def test_none_when_absent(self, tmp_path: Path) -> None:
        nested = tmp_path / "empty"
        nested.mkdir()

        # tmp_path has no studentdir.yaml in this test
        assert find_config(nested) is None
