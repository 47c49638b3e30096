"""
Authenticated transport — the single path for JumpServer API traffic.

Every request goes through one requests.Session with a bearer token
attached by BearerAuth. Token and base URL are fixed at construction,
so one transport can be shared by all controllers and threads.
"""

import logging
import threading
from dataclasses import dataclass, field
from http.cookiejar import DefaultCookiePolicy
from typing import Optional, Dict, Any

import requests
from requests.auth import AuthBase

from .config import DEFAULT_TIMEOUT, ProviderConfig
from .errors import TransportError

logger = logging.getLogger(__name__)


class BearerAuth(AuthBase):
    """Sets ``Authorization: Bearer <token>`` on the outgoing request."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, BearerAuth) and other.token == self.token

    def __repr__(self) -> str:
        return "BearerAuth(token='***')"


def default_session() -> requests.Session:
    session = requests.Session()
    # Bearer token only; Set-Cookie from any response is refused.
    session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
    session.headers.update({"Accept": "application/json"})
    return session


@dataclass(frozen=True)
class AuthenticatedTransport:
    """
    Wraps a requests.Session with the session credential.

    Callers build absolute URLs with ``url(path)`` and send through
    ``request``. Network failures raise TransportError; HTTP status
    handling is left to the caller.
    """

    base_url: str
    token: str = field(repr=False)
    session: requests.Session = field(default_factory=default_session, repr=False, compare=False)
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_config(
        cls, config: ProviderConfig, token: str, session: Optional[requests.Session] = None
    ) -> "AuthenticatedTransport":
        return cls(
            base_url=config.base_url,
            token=token,
            session=session or default_session(),
            timeout=config.timeout,
        )

    @property
    def auth(self) -> BearerAuth:
        return BearerAuth(self.token)

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> requests.Response:
        """Send one authenticated request. No retries."""
        if cancel is not None and cancel.is_set():
            logger.warning(f"JumpServer API request cancelled before send: {method} {path}")
            raise TransportError(f"{method} {path} cancelled")

        url = self.url(path)
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.error(f"JumpServer API timeout: {method} {path} (>{self.timeout}s)")
            raise TransportError(f"{method} {path} timed out after {self.timeout}s") from e
        except requests.ConnectionError as e:
            logger.error(f"JumpServer API connection error: {method} {path}")
            raise TransportError(f"{method} {path} connection failed: {e}") from e
        except requests.RequestException as e:
            logger.error(f"JumpServer API unexpected error: {method} {path}: {e}")
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                f"JumpServer API error: {method} {path} -> "
                f"{response.status_code} {response.text[:300]}"
            )
        return response
