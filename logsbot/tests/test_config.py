"""Tests for the log bot configuration module."""

import pytest

from logsbot.config import LogsBotConfig


class TestLogsBotConfig:
    """Test LogsBotConfig class."""

    def test_default_values(self):
        config = LogsBotConfig()
        assert config.cooldown_ms == 3000
        assert config.recipients == []
        assert config.enabled is True
        assert config.rate_limit_max_keys == 0
        assert config.time_format == "%d/%m/%Y %H:%M:%S"
        assert config.primary_recipient is None
        assert config.has_recipients() is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LOGSBOT_BOT_ID", "42")
        monkeypatch.setenv("LOGSBOT_RECIPIENTS", " 1, 2 ,,3 ")
        monkeypatch.setenv("LOGSBOT_ENABLED", "no")
        monkeypatch.setenv("LOGSBOT_COOLDOWN_MS", "500")
        monkeypatch.setenv("LOGSBOT_API_URL", "https://gateway.test")
        monkeypatch.setenv("LOGSBOT_API_TOKEN", "secret")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = LogsBotConfig.from_env()

        assert config.bot_id == "42"
        assert config.recipients == ["1", "2", "3"]
        assert config.primary_recipient == "1"
        assert config.enabled is False
        assert config.cooldown_ms == 500
        assert config.api_url == "https://gateway.test"
        assert config.api_token == "secret"
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for key in ("LOGSBOT_RECIPIENTS", "LOGSBOT_API_TOKEN", "LOG_PATH"):
            monkeypatch.delenv(key, raising=False)

        config = LogsBotConfig.from_env()

        assert config.recipients == []
        assert config.api_token is None
        assert config.log_path is None

    def test_validate_ok(self):
        LogsBotConfig().validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"cooldown_ms": -1},
            {"rate_limit_max_keys": -1},
            {"timeout_seconds": 0},
            {"log_level": "LOUD"},
            {"timezone": "Mars/Olympus_Mons"},
        ],
    )
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            LogsBotConfig(**overrides).validate()

    def test_repr_masks_token(self):
        config = LogsBotConfig(api_token="secret")
        assert "secret" not in repr(config)
        assert "***" in repr(config)
