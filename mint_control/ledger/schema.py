"""JSON schemas for the JSON-RPC payloads this package reads."""

from __future__ import annotations

from typing import Any

import jsonschema  # type: ignore[import-untyped]

from mint_control.errors import MalformedResponseError

_HEX = {"type": "string", "pattern": "^0x[0-9a-fA-F]*$"}
_HEX_OR_NULL = {"anyOf": [_HEX, {"type": "null"}]}

RESPONSE_ENVELOPE: dict[str, Any] = {
    "type": "object",
    "required": ["jsonrpc"],
    "properties": {
        "jsonrpc": {"const": "2.0"},
        "error": {
            "type": "object",
            "required": ["code", "message"],
            "properties": {
                "code": {"type": "integer"},
                "message": {"type": "string"},
            },
        },
    },
    "oneOf": [
        {"required": ["result"]},
        {"required": ["error"]},
    ],
}

# eth_getTransactionByHash: null while unknown to the node.
TRANSACTION: dict[str, Any] = {
    "anyOf": [
        {"type": "null"},
        {
            "type": "object",
            "required": ["hash"],
            "properties": {
                "hash": _HEX,
                "blockNumber": _HEX_OR_NULL,
            },
        },
    ]
}

# eth_getTransactionReceipt: null until the receipt is indexed.
RECEIPT: dict[str, Any] = {
    "anyOf": [
        {"type": "null"},
        {
            "type": "object",
            "required": ["status", "blockNumber"],
            "properties": {
                "status": _HEX,
                "blockNumber": _HEX,
            },
        },
    ]
}

QUANTITY: dict[str, Any] = _HEX
DATA: dict[str, Any] = _HEX


def validate(instance: Any, schema: dict[str, Any], *, what: str) -> None:
    """Validate ``instance`` or raise MalformedResponseError naming ``what``."""
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as e:
        raise MalformedResponseError(
            f"malformed {what}: {e.message}",
            details={"path": list(e.absolute_path)},
        ) from e
