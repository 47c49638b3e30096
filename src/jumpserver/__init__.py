"""
JumpServer resources — declarative management of JumpServer objects

Provides:
- Authenticated transport (AuthenticatedTransport) — bearer token on every call
- Token acquisition (get_token) — username/password exchange
- Attribute translator (jumpserver.translator) — typed values <-> JSON
- Host controller (HostController) — create/read/delete asset hosts
- Account controller (AccountController) — bulk account creation
- Host suggestions (HostSuggestionsQuery) — filtered host lookup
- Provider (JumpServerProvider) — one transport shared by all controllers
"""

from .accounts import AccountController
from .auth import get_token
from .config import ProviderConfig, load_config
from .errors import (
    JumpServerError, ConfigurationError, AuthenticationError,
    ValidationError, TransportError, APIError, DecodeError,
)
from .hosts import HostController
from .models import (
    Lifecycle, Protocol, Host, Account, BulkAssetResult,
    HostSuggestionFilters, HostSummary, HostSuggestions,
)
from .provider import JumpServerProvider
from .suggestions import HostSuggestionsQuery
from .transport import AuthenticatedTransport, BearerAuth

__all__ = [
    'AccountController', 'HostController', 'HostSuggestionsQuery',
    'JumpServerProvider', 'AuthenticatedTransport', 'BearerAuth', 'get_token',
    'ProviderConfig', 'load_config',
    'JumpServerError', 'ConfigurationError', 'AuthenticationError',
    'ValidationError', 'TransportError', 'APIError', 'DecodeError',
    'Lifecycle', 'Protocol', 'Host', 'Account', 'BulkAssetResult',
    'HostSuggestionFilters', 'HostSummary', 'HostSuggestions',
]
