"""Asset host controller: /api/v1/assets/hosts/."""

import logging
import threading
from dataclasses import replace
from typing import Optional

from .controller import ResourceController
from .models import Host
from .translator import (
    decode_created_id,
    encode_host,
    merge_host,
    response_json,
    validate_host,
)

logger = logging.getLogger(__name__)


class HostController(ResourceController[Host]):
    """Create, read and delete asset hosts. Update is a pass-through."""

    kind = "host"
    collection_path = "/api/v1/assets/hosts/"

    def create(self, planned: Host, cancel: Optional[threading.Event] = None) -> Host:
        """
        POST the host and return it with the server-assigned id.

        Raises ValidationError before sending, APIError on any status
        other than 201, DecodeError when the body has no string id.
        """
        validate_host(planned)
        payload = encode_host(planned)
        payload["is_active"] = True

        self._log_transition("create", planned.name, 0)
        resp = self._request("POST", self.collection_path, json=payload, cancel=cancel)
        self._expect(resp, (201,), f"create host {planned.name}")

        host_id = decode_created_id(response_json(resp, "create host response"))
        self._log_transition("create", planned.name, 1)
        logger.info(f"Created host {planned.name} ({planned.address}) id={host_id}")
        return replace(planned, id=host_id)

    def read(self, state: Host, cancel: Optional[threading.Event] = None) -> Host:
        """GET the host and merge the fields the server returned into ``state``."""
        host_id = self._require_id(state.id, "read a host")
        resp = self._request("GET", self.item_path(host_id), cancel=cancel)
        self._expect(resp, (200,), f"read host {host_id}")
        return merge_host(state, response_json(resp, "host detail response"))

    def delete(self, state: Host, cancel: Optional[threading.Event] = None) -> None:
        """DELETE the host. Success means the caller forgets it.

        On failure the caller's state keeps its id so removal can be retried.
        """
        host_id = self._require_id(state.id, "delete a host")
        self._log_transition("delete", state.name, 0)
        resp = self._request("DELETE", self.item_path(host_id), cancel=cancel)
        self._expect(resp, (200, 204), f"delete host {host_id}")
        self._log_transition("delete", state.name, 1)
        logger.info(f"Deleted host {state.name} id={host_id}")
