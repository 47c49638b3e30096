"""Account controller: bulk creation via /api/v1/accounts/accounts/bulk/."""

import logging
import threading
from dataclasses import replace
from typing import Optional

from .controller import ResourceController
from .errors import APIError
from .models import Account
from .translator import (
    decode_bulk_results,
    encode_account,
    response_json,
    validate_account,
)

logger = logging.getLogger(__name__)


class AccountController(ResourceController[Account]):
    """
    Push one account to a list of assets.

    The bulk API has no item endpoint, so read and delete are
    pass-throughs inherited from ResourceController.
    """

    kind = "account"
    bulk_path = "/api/v1/accounts/accounts/bulk/"

    def create(self, planned: Account, cancel: Optional[threading.Event] = None) -> Account:
        """
        POST the account to every listed asset.

        Every asset must be a UUID; a bad one raises ValidationError and
        nothing is sent. Success is a 200 whose first entry has
        state "created". Later entries are only logged.
        """
        validate_account(planned)
        payload = encode_account(planned)

        self._log_transition("create", planned.name, 0)
        resp = self._request("POST", self.bulk_path, json=payload, cancel=cancel)
        self._expect(resp, (200,), f"create account {planned.name}")

        results = decode_bulk_results(response_json(resp, "bulk account response"))
        if results and not results[0].created:
            raise APIError(
                resp.status_code,
                resp.text,
                action=f"create account {planned.name} on {results[0].asset} (state {results[0].state})",
            )
        for result in results[1:]:
            if not result.created:
                logger.warning(
                    f"account {planned.name}: asset {result.asset} reported state "
                    f"{result.state!r}, ignored"
                )

        self._log_transition("create", planned.name, 1)
        logger.info(f"Created account {planned.name} ({planned.username}) on {len(results)} assets")
        return replace(planned, results=results)
