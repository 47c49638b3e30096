"""Typed attribute values for JumpServer resources."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any, List


class Lifecycle(Enum):
    """Lifecycle states of a managed resource."""
    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    UPDATING = "updating"
    DELETING = "deleting"


@dataclass(frozen=True)
class Protocol:
    """A connection protocol on a host, e.g. ssh on port 22."""
    name: str
    port: Optional[int] = None


@dataclass(frozen=True)
class Host:
    """An asset host. ``id`` is assigned by the server on create."""
    name: str
    address: str
    platform: str
    nodes_display: List[str] = field(default_factory=list)
    protocols: List[Protocol] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def lifecycle(self) -> Lifecycle:
        return Lifecycle.PRESENT if self.id else Lifecycle.ABSENT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BulkAssetResult:
    """One entry of a bulk account creation response."""
    asset: str
    state: str
    changed: bool = False

    @property
    def created(self) -> bool:
        return self.state == "created"


@dataclass(frozen=True)
class Account:
    """A service account pushed to one or more assets."""
    name: str
    username: str
    privileged: bool
    is_active: bool
    assets: List[str] = field(default_factory=list)
    results: List[BulkAssetResult] = field(default_factory=list, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("results", None)
        return d


@dataclass(frozen=True)
class HostSuggestionFilters:
    """Filters for the host suggestions query. Unset filters are not sent."""
    id: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None
    type: Optional[str] = None
    category: Optional[str] = None
    platform: Optional[str] = None
    is_gateway: Optional[bool] = None
    exclude_platform: Optional[str] = None
    domain: Optional[str] = None
    protocols: Optional[str] = None
    domain_enabled: Optional[bool] = None
    ping_enabled: Optional[bool] = None
    gather_facts_enabled: Optional[bool] = None
    change_secret_enabled: Optional[bool] = None
    push_account_enabled: Optional[bool] = None
    verify_account_enabled: Optional[bool] = None
    gather_accounts_enabled: Optional[bool] = None
    search: Optional[str] = None
    order: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class HostSummary:
    id: str
    name: str


@dataclass
class HostSuggestions:
    """Result set of a host suggestions query.

    ``next`` and ``previous`` stay None: the endpoint returns a bare array
    and pagination metadata is not consulted.
    """
    results: List[HostSummary] = field(default_factory=list)
    total_count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
