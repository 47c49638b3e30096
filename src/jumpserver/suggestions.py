"""Host suggestions lookup: read-only filtered query of asset hosts."""

import logging
import threading
from typing import Optional

from .errors import APIError
from .models import HostSuggestionFilters, HostSuggestions
from .transport import AuthenticatedTransport
from .translator import decode_suggestions, encode_filters, response_json

logger = logging.getLogger(__name__)


class HostSuggestionsQuery:
    """
    GET /api/v1/assets/hosts/suggestions/ with the filters that are set.

    total_count is the length of the returned array; the server's own
    pagination metadata is not read.
    """

    path = "/api/v1/assets/hosts/suggestions/"

    def __init__(self, transport: AuthenticatedTransport):
        self._transport = transport

    def read(
        self,
        filters: Optional[HostSuggestionFilters] = None,
        cancel: Optional[threading.Event] = None,
    ) -> HostSuggestions:
        params = encode_filters(filters or HostSuggestionFilters())
        resp = self._transport.request("GET", self.path, params=params, cancel=cancel)
        if resp.status_code != 200:
            raise APIError(resp.status_code, resp.text, action="host suggestions")

        results = decode_suggestions(response_json(resp, "host suggestions response"))
        logger.info(f"Host suggestions: {len(results)} results for {sorted(params)}")
        return HostSuggestions(results=results, total_count=len(results))
