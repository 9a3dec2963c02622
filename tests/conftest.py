"""Test configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from chat_lodge.chat_config import ChatServerConfig
from chat_lodge.hub import ChatHub
from chat_lodge.standalone import create_app


@pytest.fixture
def hub() -> ChatHub:
    """Fresh hub with an empty room."""
    return ChatHub()


@pytest.fixture
def config() -> ChatServerConfig:
    return ChatServerConfig(log_events=False, ws_send_timeout=2.0)


@pytest.fixture
def client(hub, config):
    """Test client around an app sharing the ``hub`` fixture."""
    app = create_app(config=config, hub=hub)
    with TestClient(app) as test_client:
        yield test_client
