"""
Resource controller base — the per-resource lifecycle state machine.

    absent --create--> creating --201--> present --delete--> deleting --200/204--> absent
                          |                  |                   |
                          +--error--> absent +--update (no-op)   +--error--> present

A controller never mutates the value it is given. Each operation returns
the new state on success and raises on failure, so the caller's prior
state is what remains after an error.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Optional, Tuple, Generic, TypeVar

import requests

from .errors import APIError, ValidationError
from .models import Lifecycle
from .transport import AuthenticatedTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSITIONS = {
    "create": (Lifecycle.ABSENT, Lifecycle.CREATING, Lifecycle.PRESENT),
    "update": (Lifecycle.PRESENT, Lifecycle.UPDATING, Lifecycle.PRESENT),
    "delete": (Lifecycle.PRESENT, Lifecycle.DELETING, Lifecycle.ABSENT),
}


class ResourceController(Generic[T]):
    """
    Base class for one resource kind.

    Subclasses set ``kind`` and ``collection_path`` and override the
    operations the remote API supports. The defaults for read, update
    and delete are pass-throughs with no remote effect.
    """

    kind = "resource"
    collection_path = ""

    def __init__(self, transport: AuthenticatedTransport):
        self._transport = transport

    @property
    def transport(self) -> AuthenticatedTransport:
        return self._transport

    def item_path(self, resource_id: str) -> str:
        return f"{self.collection_path}{resource_id}/"

    def _log_transition(self, operation: str, label: str, stage: int) -> None:
        states = _TRANSITIONS[operation]
        logger.info(
            f"{self.kind} {label}: {states[stage].value} -> {states[stage + 1].value}"
        )

    def _request(
        self,
        method: str,
        path: str,
        cancel: Optional[threading.Event] = None,
        **kwargs,
    ) -> requests.Response:
        return self._transport.request(method, path, cancel=cancel, **kwargs)

    @staticmethod
    def _expect(
        resp: requests.Response, accepted: Tuple[int, ...], action: str
    ) -> None:
        if resp.status_code not in accepted:
            raise APIError(resp.status_code, resp.text, action=action)

    @staticmethod
    def _require_id(resource_id: Optional[str], action: str) -> str:
        if not resource_id:
            raise ValidationError("id", resource_id, f"is required to {action}")
        return resource_id

    def create(self, planned: T, cancel: Optional[threading.Event] = None) -> T:
        """Create the remote object. Subclasses must implement this."""
        raise NotImplementedError

    def read(self, state: T, cancel: Optional[threading.Event] = None) -> T:
        return state

    def update(self, state: T, planned: T, cancel: Optional[threading.Event] = None) -> T:
        """Accept the planned value without touching the remote object.

        The remote update contract is unconfirmed, so nothing is sent.
        The server-assigned id of ``state`` is carried over.
        """
        label = getattr(state, "name", "")
        self._log_transition("update", label, 0)
        logger.warning(
            f"{self.kind} {label}: update is not supported remotely, "
            f"remote object left unchanged"
        )
        self._log_transition("update", label, 1)
        prior_id: Any = getattr(state, "id", None)
        if prior_id is not None and hasattr(planned, "id"):
            return replace(planned, id=prior_id)
        return planned

    def delete(self, state: T, cancel: Optional[threading.Event] = None) -> None:
        """Forget the resource. Returning normally means it is gone from state."""
        label = getattr(state, "name", "")
        logger.warning(f"{self.kind} {label}: no remote delete endpoint, only forgetting state")
