#!/usr/bin/env python3
"""
Unit tests for the authenticated transport
"""

import http.client
import threading
import pytest
import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

import requests
from requests.adapters import HTTPAdapter
from requests.cookies import extract_cookies_to_jar

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jumpserver.config import ProviderConfig
from jumpserver.errors import TransportError
from jumpserver.transport import AuthenticatedTransport, BearerAuth, default_session


def _wire_response(status: int, body: bytes = b"{}") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    return resp


class TestTransportInit:

    def test_strips_trailing_slash(self):
        transport = AuthenticatedTransport(base_url="https://js.example.com/", token="tok")
        assert transport.base_url == "https://js.example.com"

    def test_url_concatenates_path(self):
        transport = AuthenticatedTransport(base_url="https://js.example.com", token="tok")
        assert transport.url("/api/v1/assets/hosts/") == "https://js.example.com/api/v1/assets/hosts/"

    def test_from_config(self):
        config = ProviderConfig(
            base_url="https://js.example.com", username="admin",
            password="secret", timeout=12,
        )
        transport = AuthenticatedTransport.from_config(config, "tok")
        assert transport.base_url == "https://js.example.com"
        assert transport.token == "tok"
        assert transport.timeout == 12
        assert transport.session.headers["Accept"] == "application/json"

    def test_from_config_default_session(self):
        config = ProviderConfig(base_url="https://js.example.com", username="admin", password="secret")
        transport = AuthenticatedTransport.from_config(config, "tok", session=None)
        assert isinstance(transport.session, requests.Session)
        assert transport.timeout == 30

    def test_is_immutable(self):
        transport = AuthenticatedTransport(base_url="https://js.example.com", token="tok")
        with pytest.raises(AttributeError):
            transport.token = "other"

    def test_repr_hides_token(self):
        transport = AuthenticatedTransport(base_url="https://js.example.com", token="secret-tok")
        assert "secret-tok" not in repr(transport)
        assert "secret-tok" not in repr(transport.auth)


class TestBearerAuth:

    def test_sets_header_in_place(self):
        prepared = requests.Request("GET", "https://js.example.com/x").prepare()
        result = BearerAuth("tok-1")(prepared)
        assert result is prepared
        assert prepared.headers["Authorization"] == "Bearer tok-1"

    def test_replaces_existing_header(self):
        prepared = requests.Request(
            "GET", "https://js.example.com/x", headers={"authorization": "Token old"}
        ).prepare()
        BearerAuth("tok-1")(prepared)
        keys = [k for k in prepared.headers if k.lower() == "authorization"]
        assert len(keys) == 1
        assert prepared.headers["Authorization"] == "Bearer tok-1"


class TestHeaderInjection:
    """Requests go through the real requests pipeline; only the adapter is faked."""

    @pytest.fixture
    def transport(self):
        return AuthenticatedTransport(base_url="https://js.example.com", token="tok-xyz")

    @pytest.mark.parametrize("method,body", [
        ("GET", None),
        ("POST", {"name": "web-1"}),
        ("DELETE", None),
    ])
    def test_exactly_one_bearer_header(self, transport, method, body):
        with patch.object(HTTPAdapter, "send", return_value=_wire_response(200)) as mock_send:
            transport.request(method, "/api/v1/assets/hosts/", json=body)

        prepared = mock_send.call_args[0][0]
        auth_headers = [v for k, v in prepared.headers.items() if k.lower() == "authorization"]
        assert auth_headers == ["Bearer tok-xyz"]
        assert prepared.method == method

    def test_json_body_sets_content_type(self, transport):
        with patch.object(HTTPAdapter, "send", return_value=_wire_response(201)) as mock_send:
            transport.request("POST", "/api/v1/assets/hosts/", json={"name": "web-1"})

        prepared = mock_send.call_args[0][0]
        assert prepared.headers["Content-Type"] == "application/json"
        assert prepared.headers["Accept"] == "application/json"
        assert prepared.url == "https://js.example.com/api/v1/assets/hosts/"


class TestTransportErrors:

    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def transport(self, session):
        return AuthenticatedTransport(base_url="https://js.example.com", token="tok", session=session)

    def test_passes_auth_and_timeout(self, transport, session):
        session.request.return_value = MagicMock(status_code=200, text="{}")
        transport.request("GET", "/api/v1/assets/hosts/abc/")

        args, kwargs = session.request.call_args
        assert args == ("GET", "https://js.example.com/api/v1/assets/hosts/abc/")
        assert kwargs["auth"] == BearerAuth("tok")
        assert kwargs["timeout"] == 30

    def test_connection_error(self, transport, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TransportError):
            transport.request("GET", "/api/v1/assets/hosts/")

    def test_timeout(self, transport, session):
        session.request.side_effect = requests.Timeout("slow")
        with pytest.raises(TransportError, match="timed out"):
            transport.request("GET", "/api/v1/assets/hosts/")

    def test_error_status_is_returned_not_raised(self, transport, session):
        session.request.return_value = MagicMock(status_code=500, text="boom")
        resp = transport.request("GET", "/api/v1/assets/hosts/")
        assert resp.status_code == 500

    def test_cancelled_before_send(self, transport, session):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(TransportError, match="cancelled"):
            transport.request("GET", "/api/v1/assets/hosts/", cancel=cancel)
        assert session.request.call_count == 0

    def test_shared_across_threads(self, transport, session):
        session.request.return_value = MagicMock(status_code=200, text="{}")
        threads = [
            threading.Thread(target=transport.request, args=("GET", f"/api/v1/assets/hosts/{i}/"))
            for i in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.request.call_count == 8
        for _, kwargs in session.request.call_args_list:
            assert kwargs["auth"] == BearerAuth("tok")


def _set_cookie_response(value: str) -> MagicMock:
    msg = http.client.HTTPMessage()
    msg["Set-Cookie"] = value
    raw = MagicMock()
    raw._original_response.msg = msg
    return raw


class TestSessionCookies:

    def test_default_session_refuses_set_cookie(self):
        session = default_session()
        prepared = requests.Request("POST", "https://js.example.com/api/v1/authentication/auth/").prepare()

        extract_cookies_to_jar(session.cookies, prepared, _set_cookie_response("sessionid=abc; Path=/"))

        assert len(session.cookies) == 0

    def test_plain_session_would_store_it(self):
        session = requests.Session()
        prepared = requests.Request("POST", "https://js.example.com/api/v1/authentication/auth/").prepare()

        extract_cookies_to_jar(session.cookies, prepared, _set_cookie_response("sessionid=abc; Path=/"))

        assert len(session.cookies) == 1

    def test_no_cookie_header_after_login_response(self):
        transport = AuthenticatedTransport(base_url="https://js.example.com", token="tok")
        login = requests.Request("POST", "https://js.example.com/api/v1/authentication/auth/").prepare()
        extract_cookies_to_jar(transport.session.cookies, login, _set_cookie_response("csrftoken=xyz; Path=/"))

        with patch.object(HTTPAdapter, "send", return_value=_wire_response(200)) as mock_send:
            transport.request("GET", "/api/v1/assets/hosts/abc/")

        prepared = mock_send.call_args[0][0]
        assert "Cookie" not in prepared.headers
