"""Token acquisition: exchange a username/password pair for a bearer token."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import DEFAULT_TIMEOUT
from .errors import AuthenticationError, DecodeError
from .translator import decode_token

logger = logging.getLogger(__name__)

AUTH_PATH = "/api/v1/authentication/auth/"


def get_token(
    base_url: str,
    username: str,
    password: str,
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """
    POST the credentials once and return the ``token`` field.

    Raises AuthenticationError on any network, parse or shape failure.
    This request is not authenticated and is not retried.
    """
    url = f"{base_url.rstrip('/')}{AUTH_PATH}"
    http = session or requests
    try:
        resp = http.post(
            url,
            json={"username": username, "password": password},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error(f"JumpServer authentication request failed for user {username}: {e}")
        raise AuthenticationError(f"unable to reach {url}: {e}") from e

    try:
        payload = resp.json()
    except ValueError as e:
        logger.error(
            f"JumpServer authentication returned non-JSON body: "
            f"{resp.status_code} {resp.text[:200]}"
        )
        raise AuthenticationError(f"authentication response is not JSON (status {resp.status_code})") from e

    try:
        token = decode_token(payload)
    except DecodeError as e:
        logger.error(f"JumpServer authentication failed for user {username}: status {resp.status_code}")
        raise AuthenticationError(f"unable to fetch token: {e}") from e

    logger.info(f"Authenticated with JumpServer as {username}")
    return token
