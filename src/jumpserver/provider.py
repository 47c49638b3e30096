"""
JumpServer provider — configure once, share one transport.

Usage:
    config = load_config("jumpserver.yml")
    provider = JumpServerProvider.configure(config)
    host = provider.hosts.create(Host(name="web-1", ...))
"""

import logging
from typing import Optional

import requests

from .accounts import AccountController
from .auth import get_token
from .config import ProviderConfig
from .hosts import HostController
from .suggestions import HostSuggestionsQuery
from .transport import AuthenticatedTransport, default_session

logger = logging.getLogger(__name__)


class JumpServerProvider:
    """Holds the shared transport and one controller per resource kind."""

    def __init__(self, transport: AuthenticatedTransport):
        self.transport = transport
        self.hosts = HostController(transport)
        self.accounts = AccountController(transport)
        self.host_suggestions = HostSuggestionsQuery(transport)

    @classmethod
    def configure(
        cls, config: ProviderConfig, session: Optional[requests.Session] = None
    ) -> "JumpServerProvider":
        """
        Acquire a token (unless one is configured) and build the transport.

        Raises AuthenticationError when the token exchange fails.
        """
        session = session or default_session()
        if config.token:
            token = config.token
            logger.info("Using configured JumpServer token, skipping authentication")
        else:
            token = get_token(
                config.base_url,
                config.username,
                config.password,
                session=session,
                timeout=config.timeout,
            )

        transport = AuthenticatedTransport.from_config(config, token, session=session)
        logger.info(
            f"JumpServerProvider configured (base_url={config.base_url}, "
            f"token={'configured' if token else 'missing'})"
        )
        return cls(transport)
