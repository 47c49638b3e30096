#!/usr/bin/env python3
"""
Unit tests for provider wiring
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jumpserver.auth import AUTH_PATH
from jumpserver.config import ProviderConfig
from jumpserver.errors import AuthenticationError
from jumpserver.models import HostSuggestionFilters
from jumpserver.provider import JumpServerProvider
from jumpserver.transport import BearerAuth


@pytest.fixture
def config():
    return ProviderConfig(
        base_url="https://js.example.com", username="admin", password="secret", timeout=15,
    )


class TestConfigure:

    def test_exchanges_credentials_for_token(self, config):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200, **{"json.return_value": {"token": "tok-1"}})

        provider = JumpServerProvider.configure(config, session=session)

        args, kwargs = session.post.call_args
        assert args[0] == f"https://js.example.com{AUTH_PATH}"
        assert kwargs["json"] == {"username": "admin", "password": "secret"}
        assert kwargs["timeout"] == 15
        assert provider.transport.token == "tok-1"
        assert provider.transport.timeout == 15

    def test_configured_token_skips_exchange(self):
        session = MagicMock()
        config = ProviderConfig(
            base_url="https://js.example.com", username="admin",
            password="secret", token="given-tok",
        )

        provider = JumpServerProvider.configure(config, session=session)

        assert session.post.call_count == 0
        assert provider.transport.token == "given-tok"

    def test_authentication_failure_is_fatal(self, config):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=401, **{"json.return_value": {"detail": "no"}})

        with pytest.raises(AuthenticationError):
            JumpServerProvider.configure(config, session=session)

    def test_controllers_share_one_transport(self, config):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200, **{"json.return_value": {"token": "tok-1"}})

        provider = JumpServerProvider.configure(config, session=session)

        assert provider.hosts.transport is provider.transport
        assert provider.accounts.transport is provider.transport
        assert provider.host_suggestions._transport is provider.transport

    def test_requests_use_bearer_token(self, config):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200, **{"json.return_value": {"token": "tok-1"}})
        session.request.return_value = MagicMock(status_code=200, **{"json.return_value": []})

        provider = JumpServerProvider.configure(config, session=session)
        provider.host_suggestions.read(HostSuggestionFilters(name="web-1"))

        assert session.request.call_args[1]["auth"] == BearerAuth("tok-1")
