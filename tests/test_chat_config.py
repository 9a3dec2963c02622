"""Tests for environment driven server config."""
import pytest
from pydantic import ValidationError

from chat_lodge.chat_config import ChatServerConfig


def test_defaults():
    config = ChatServerConfig.from_env({})
    assert config.host == "0.0.0.0"
    assert config.port == 3000
    assert config.subscriber_queue_size == 1000
    assert config.ws_send_timeout == pytest.approx(5.0)
    assert config.cors_origins == ["*"]
    assert config.log_events is True
    assert config.log_level == "INFO"


def test_from_env_overrides():
    config = ChatServerConfig.from_env({
        "HOST": "127.0.0.1",
        "PORT": "9000",
        "SUBSCRIBER_QUEUE_SIZE": "16",
        "WS_SEND_TIMEOUT": "0.5",
        "CORS_ORIGINS": "http://localhost:3000, http://localhost:5173,",
        "LOG_EVENTS": "0",
        "LOG_LEVEL": "debug",
    })
    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.subscriber_queue_size == 16
    assert config.ws_send_timeout == pytest.approx(0.5)
    assert config.cors_origins == ["http://localhost:3000", "http://localhost:5173"]
    assert config.log_events is False
    assert config.log_level == "DEBUG"


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("PORT", "4242")
    assert ChatServerConfig.from_env().port == 4242


def test_invalid_queue_size_rejected():
    with pytest.raises(ValidationError):
        ChatServerConfig.from_env({"SUBSCRIBER_QUEUE_SIZE": "0"})
