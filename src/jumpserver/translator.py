"""
Attribute translator — typed resource values to JSON payloads and back.

Outbound:
- encode_host(Host) -> dict
- encode_account(Account) -> dict
- encode_filters(HostSuggestionFilters) -> dict of query params

Inbound (one JSON schema per response shape, extra fields ignored):
- decode_token(payload) -> str
- decode_created_id(payload) -> str
- merge_host(prior, payload) -> Host
- decode_bulk_results(payload) -> list[BulkAssetResult]
- decode_suggestions(payload) -> list[HostSummary]

Validation (runs before any request is built):
- require, validate_uuid, validate_host, validate_account
"""

from __future__ import annotations

import re
from dataclasses import fields, replace
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from .errors import DecodeError, ValidationError
from .models import Account, BulkAssetResult, Host, HostSuggestionFilters, HostSummary, Protocol

_NULLABLE_STRING = {"type": ["string", "null"]}

_HEX_UUID = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

# Canonical, braced, urn:uuid: prefixed, or 32 bare hex digits.
_UUID_RE = re.compile(
    rf"^(?:{_HEX_UUID}|\{{{_HEX_UUID}\}}|(?i:urn:uuid:){_HEX_UUID}|[0-9a-fA-F]{{32}})\Z"
)

TOKEN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["token"],
    "properties": {"token": {"type": "string"}},
}

CREATED_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["id"],
    "properties": {"id": {"type": "string", "minLength": 1}},
}

PROTOCOL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "port": {"type": ["integer", "null"]},
    },
}

HOST_DETAIL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": _NULLABLE_STRING,
        "ip": _NULLABLE_STRING,
        "address": _NULLABLE_STRING,
        # Newer servers return the platform as {"id": ..., "name": ...}.
        "platform": {
            "oneOf": [
                _NULLABLE_STRING,
                {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}},
                },
            ]
        },
        "nodes_display": {
            "type": ["array", "null"],
            "items": {"type": "string"},
        },
        "protocols": {
            "type": ["array", "null"],
            "items": PROTOCOL_SCHEMA,
        },
    },
}

BULK_RESULT_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["asset", "state"],
        "properties": {
            "asset": {"type": "string"},
            "state": {"type": "string"},
            "changed": {"type": "boolean"},
        },
    },
}

SUGGESTIONS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
        },
    },
}

_token_validator = Draft7Validator(TOKEN_SCHEMA)
_created_validator = Draft7Validator(CREATED_SCHEMA)
_host_detail_validator = Draft7Validator(HOST_DETAIL_SCHEMA)
_bulk_validator = Draft7Validator(BULK_RESULT_SCHEMA)
_suggestions_validator = Draft7Validator(SUGGESTIONS_SCHEMA)


def _check(payload: Any, validator: Draft7Validator, what: str) -> None:
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        messages = ", ".join(
            f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
            for error in errors
        )
        raise DecodeError(f"{what} has unexpected shape: {messages}")


def response_json(resp: Any, what: str) -> Any:
    """Parse a response body, raising DecodeError when it is not JSON."""
    try:
        return resp.json()
    except ValueError as e:
        raise DecodeError(f"{what} is not valid JSON: {resp.text[:200]}") from e


# ── Validation ───────────────────────────────────────────────


def require(field_name: str, value: Any) -> None:
    if value is None or value == "":
        raise ValidationError(field_name, value, "is required")


def validate_uuid(field_name: str, value: Any) -> str:
    if not isinstance(value, str) or not _UUID_RE.match(value):
        raise ValidationError(field_name, value, "is not a valid UUID")
    return value


def validate_host(host: Host) -> None:
    require("name", host.name)
    require("address", host.address)
    require("platform", host.platform)
    if host.nodes_display is None:
        raise ValidationError("nodes_display", None, "is required")
    for i, node in enumerate(host.nodes_display):
        if not isinstance(node, str) or not node:
            raise ValidationError(f"nodes_display[{i}]", node, "must be a non-empty string")
    if not host.protocols:
        raise ValidationError("protocols", host.protocols, "must contain at least one protocol")
    for i, proto in enumerate(host.protocols):
        require(f"protocols[{i}].name", proto.name)
        if proto.port is None:
            continue
        if isinstance(proto.port, bool) or not isinstance(proto.port, int):
            raise ValidationError(f"protocols[{i}].port", proto.port, "must be an integer")
        if not 0 < proto.port <= 65535:
            raise ValidationError(f"protocols[{i}].port", proto.port, "is out of range")


def validate_account(account: Account) -> None:
    require("name", account.name)
    require("username", account.username)
    for name in ("privileged", "is_active"):
        if not isinstance(getattr(account, name), bool):
            raise ValidationError(name, getattr(account, name), "must be a boolean")
    if account.assets is None:
        raise ValidationError("assets", None, "is required")
    for i, asset in enumerate(account.assets):
        validate_uuid(f"assets[{i}]", asset)


# ── Outbound ─────────────────────────────────────────────────


def encode_protocol(proto: Protocol) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": proto.name}
    if proto.port is not None:
        data["port"] = proto.port
    return data


def encode_host(host: Host) -> Dict[str, Any]:
    return {
        "name": host.name,
        "address": host.address,
        "platform": host.platform,
        "nodes_display": list(host.nodes_display),
        "protocols": [encode_protocol(p) for p in host.protocols],
    }


def encode_account(account: Account) -> Dict[str, Any]:
    return {
        "name": account.name,
        "username": account.username,
        "privileged": account.privileged,
        "is_active": account.is_active,
        "assets": list(account.assets),
    }


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_filters(filters: HostSuggestionFilters) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for f in fields(filters):
        value = getattr(filters, f.name)
        if value is None:
            continue
        params[f.name] = _query_value(value)
    return params


# ── Inbound ──────────────────────────────────────────────────


def decode_token(payload: Any) -> str:
    _check(payload, _token_validator, "authentication response")
    return payload["token"]


def decode_created_id(payload: Any) -> str:
    _check(payload, _created_validator, "create response")
    return payload["id"]


def decode_protocol(data: Dict[str, Any]) -> Protocol:
    port = data.get("port")
    # Draft 7 accepts 22.0 as an integer.
    if isinstance(port, float):
        port = int(port)
    return Protocol(name=data["name"], port=port)


def merge_host(prior: Host, payload: Any) -> Host:
    """Overlay fields present in a host detail response onto prior state.

    Absent or null fields keep their prior values.
    """
    _check(payload, _host_detail_validator, "host detail response")

    changes: Dict[str, Any] = {}
    if payload.get("name") is not None:
        changes["name"] = payload["name"]

    address = payload.get("ip")
    if address is None:
        address = payload.get("address")
    if address is not None:
        changes["address"] = address

    platform = payload.get("platform")
    if isinstance(platform, dict):
        changes["platform"] = platform["name"]
    elif platform is not None:
        changes["platform"] = platform

    if payload.get("nodes_display") is not None:
        changes["nodes_display"] = list(payload["nodes_display"])
    if payload.get("protocols") is not None:
        changes["protocols"] = [decode_protocol(p) for p in payload["protocols"]]

    return replace(prior, **changes)


def decode_bulk_results(payload: Any) -> List[BulkAssetResult]:
    _check(payload, _bulk_validator, "bulk account response")
    return [
        BulkAssetResult(
            asset=item["asset"],
            state=item["state"],
            changed=item.get("changed", False),
        )
        for item in payload
    ]


def decode_suggestions(payload: Any) -> List[HostSummary]:
    _check(payload, _suggestions_validator, "host suggestions response")
    return [HostSummary(id=item["id"], name=item["name"]) for item in payload]
