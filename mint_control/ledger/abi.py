"""
ABI and unit helpers for the mint contract.

Only zero-argument calls are needed, so call data is just the 4-byte
function selector and every read returns a single uint256 word.

Selectors (first 4 bytes of keccak256 of the signature):
    mint()        0x1249c58b
    totalMinted() 0xa2309ff8
    MAX_SUPPLY()  0x32cb6b0c
    MINT_PRICE()  0xc002d23d
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

MINT_SELECTOR = "0x1249c58b"
TOTAL_MINTED_SELECTOR = "0xa2309ff8"
MAX_SUPPLY_SELECTOR = "0x32cb6b0c"
MINT_PRICE_SELECTOR = "0xc002d23d"

WEI_PER_ETHER = 10**18

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")


def is_address(value: str) -> bool:
    """True if ``value`` is a 0x-prefixed 20-byte hex address."""
    return bool(_ADDRESS_RE.match(value))


def decode_uint256(data: str) -> int:
    """Decode a single uint256 return word.

    Args:
        data: 0x-prefixed hex returned by ``eth_call``.

    Raises:
        ValueError: If ``data`` is not hex or is empty ("0x"), which is
            what nodes return for calls to non-contract addresses.
    """
    if not isinstance(data, str) or not _HEX_RE.match(data):
        raise ValueError(f"not a hex string: {data!r}")
    body = data[2:]
    if not body:
        raise ValueError("empty return data")
    # Only the first word matters for a single return value.
    return int(body[:64], 16)


def parse_quantity(value: str) -> int:
    """Decode a JSON-RPC hex quantity ("0x1a" → 26)."""
    if not isinstance(value, str) or not _HEX_RE.match(value) or value == "0x":
        raise ValueError(f"not a hex quantity: {value!r}")
    return int(value, 16)


def to_wei(amount: Decimal | str) -> int:
    """Convert an ether amount to wei.

    Raises:
        ValueError: If the amount is negative, not a number, or has more
            than 18 decimal places.
    """
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"not a decimal amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValueError(f"amount must be a non-negative number, got: {amount!r}")
    wei = value * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise ValueError(f"amount has more than 18 decimals: {amount!r}")
    return int(wei)


def from_wei(wei: int) -> Decimal:
    """Convert wei to an ether amount without trailing zeros."""
    value = Decimal(wei).scaleb(-18)
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()
