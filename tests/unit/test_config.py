"""
Unit tests for server configuration.
"""

import os

import pytest

from assetserver.config import AssetServerConfig, ConfigError


ENV_VARS = [
    "ASSETS_HOST",
    "ASSETS_PORT",
    "ASSETS_URL_PREFIX",
    "ASSETS_PATHS",
    "ASSETS_GZIP",
    "ASSETS_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    """Tests for AssetServerConfig.from_env()."""

    def test_defaults(self, clean_env):
        """Test defaults when nothing is set."""
        config = AssetServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.url_prefix == "/assets"
        assert config.paths == []
        assert config.gzip is True
        assert config.log_level == "INFO"

    def test_overrides(self, clean_env):
        """Test values read from the environment."""
        clean_env.setenv("ASSETS_HOST", "0.0.0.0")
        clean_env.setenv("ASSETS_PORT", "3000")
        clean_env.setenv("ASSETS_URL_PREFIX", "/static")
        clean_env.setenv("ASSETS_LOG_LEVEL", "DEBUG")

        config = AssetServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.url_prefix == "/static"
        assert config.log_level == "DEBUG"

    def test_paths_split(self, clean_env):
        """ASSETS_PATHS is split on os.pathsep, empty entries dropped."""
        clean_env.setenv("ASSETS_PATHS", os.pathsep.join(["js", "", "css"]))

        assert AssetServerConfig.from_env().paths == ["js", "css"]

    @pytest.mark.parametrize("value,enabled", [
        ("1", True),
        ("true", True),
        ("Yes", True),
        ("on", True),
        ("0", False),
        ("false", False),
        ("", False),
    ])
    def test_gzip_flag(self, clean_env, value, enabled):
        clean_env.setenv("ASSETS_GZIP", value)

        assert AssetServerConfig.from_env().gzip is enabled

    def test_invalid_port(self, clean_env):
        clean_env.setenv("ASSETS_PORT", "eighty")

        with pytest.raises(ValueError):
            AssetServerConfig.from_env()


class TestValidate:
    """Tests for AssetServerConfig.validate()."""

    def test_valid(self, tmp_path):
        AssetServerConfig(paths=[str(tmp_path)]).validate()

    @pytest.mark.parametrize("changes,message", [
        ({"port": 70000}, "Invalid port"),
        ({"port": -1}, "Invalid port"),
        ({"url_prefix": "assets"}, "must start with '/'"),
        ({"paths": []}, "At least one asset path"),
        ({"gzip_level": 0}, "gzip_level"),
        ({"gzip_min_size": -1}, "gzip_min_size"),
        ({"log_level": "CHATTY"}, "Unknown log level"),
    ])
    def test_invalid(self, tmp_path, changes, message):
        """Each bad setting is reported."""
        settings = {"paths": [str(tmp_path)]}
        settings.update(changes)

        with pytest.raises(ConfigError, match=message):
            AssetServerConfig(**settings).validate()

    def test_missing_path(self, tmp_path):
        missing = tmp_path / "nope"

        with pytest.raises(ConfigError, match="does not exist"):
            AssetServerConfig(paths=[str(missing)]).validate()

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestMountPrefix:
    """Tests for AssetServerConfig.mount_prefix."""

    @pytest.mark.parametrize("url_prefix,mount", [
        ("/assets", "/assets"),
        ("/assets/", "/assets"),
        ("/", ""),
    ])
    def test_trailing_slash_removed(self, url_prefix, mount):
        assert AssetServerConfig(url_prefix=url_prefix).mount_prefix == mount
