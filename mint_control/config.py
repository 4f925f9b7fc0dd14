"""
Runtime configuration.

Everything comes from the process environment (or an explicit mapping
for tests). The contract address and the aggregate read endpoint are
required; everything else has a default matching Base mainnet.

Variables:
    MINT_CONTRACT_ADDRESS     target contract (required)
    MINT_RPC_URL              endpoint for aggregate reads (required)
    MINT_TRACKING_RPC_URL     endpoint for confirmation polling
    MINT_PRICE_OVERRIDE       unit price used before aggregate data exists
    MINT_CHAIN                chain slug used in the wallet deep link
    MINT_EXPLORER_URL         block explorer base URL
    MINT_WALLET_DEEPLINK_URL  wallet deep-link base URL
    MINT_POLL_MAX_RETRIES     poll budget R
    MINT_POLL_INTERVAL        seconds between polls I
    MINT_POLL_INITIAL_DELAY   seconds before the first poll
    MINT_GAS_LIMIT            fixed gas ceiling for the mint call
    MINT_HTTP_TIMEOUT         per-request HTTP timeout in seconds
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping

from mint_control.errors import ConfigError
from mint_control.ledger.abi import is_address

DEFAULT_TRACKING_RPC_URL = "https://mainnet.base.org"
DEFAULT_CHAIN = "base"
DEFAULT_EXPLORER_URL = "https://basescan.org"
DEFAULT_WALLET_DEEPLINK_URL = "https://warpcast.com/~/transactions"
FALLBACK_PRICE = Decimal("0.0001")
DEFAULT_MAX_SUPPLY = 10000
DEFAULT_MAX_RETRIES = 20
DEFAULT_POLL_INTERVAL = 6.0
DEFAULT_INITIAL_DELAY = 3.0
DEFAULT_GAS_LIMIT = 300_000
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Validated configuration for one controller."""

    contract_address: str
    rpc_url: str
    tracking_rpc_url: str = DEFAULT_TRACKING_RPC_URL
    price_override: Decimal | None = None
    chain: str = DEFAULT_CHAIN
    explorer_url: str = DEFAULT_EXPLORER_URL
    wallet_deeplink_url: str = DEFAULT_WALLET_DEEPLINK_URL
    max_retries: int = DEFAULT_MAX_RETRIES
    poll_interval: float = DEFAULT_POLL_INTERVAL
    initial_delay: float = DEFAULT_INITIAL_DELAY
    gas_limit: int = DEFAULT_GAS_LIMIT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self) -> None:
        if not is_address(self.contract_address):
            raise ConfigError(
                f"contract_address must be 0x + 40 hex chars, got: {self.contract_address!r}"
            )
        if not self.rpc_url:
            raise ConfigError("rpc_url must be non-empty")
        if not self.tracking_rpc_url:
            raise ConfigError("tracking_rpc_url must be non-empty")
        if self.price_override is not None and (
            not self.price_override.is_finite() or self.price_override <= 0
        ):
            raise ConfigError(f"price_override must be positive, got: {self.price_override}")
        if self.max_retries < 1:
            raise ConfigError(f"max_retries must be >= 1, got: {self.max_retries}")
        if not all(
            math.isfinite(v) and v >= 0 for v in (self.poll_interval, self.initial_delay)
        ):
            raise ConfigError("poll_interval and initial_delay must be finite and >= 0")
        if self.gas_limit <= 0:
            raise ConfigError(f"gas_limit must be positive, got: {self.gas_limit}")
        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            raise ConfigError(f"http_timeout must be positive, got: {self.http_timeout}")

    @property
    def fallback_price(self) -> Decimal:
        """Price used whenever no aggregate price is known."""
        return self.price_override if self.price_override is not None else FALLBACK_PRICE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Raises:
            ConfigError: If a required variable is missing or a value
                cannot be parsed.
        """
        env = os.environ if environ is None else environ

        contract_address = env.get("MINT_CONTRACT_ADDRESS", "").strip()
        if not contract_address:
            raise ConfigError("MINT_CONTRACT_ADDRESS is required")
        rpc_url = env.get("MINT_RPC_URL", "").strip()
        if not rpc_url:
            raise ConfigError("MINT_RPC_URL is required")

        return cls(
            contract_address=contract_address,
            rpc_url=rpc_url,
            tracking_rpc_url=env.get("MINT_TRACKING_RPC_URL") or DEFAULT_TRACKING_RPC_URL,
            price_override=_decimal(env, "MINT_PRICE_OVERRIDE"),
            chain=env.get("MINT_CHAIN") or DEFAULT_CHAIN,
            explorer_url=(env.get("MINT_EXPLORER_URL") or DEFAULT_EXPLORER_URL).rstrip("/"),
            wallet_deeplink_url=env.get("MINT_WALLET_DEEPLINK_URL") or DEFAULT_WALLET_DEEPLINK_URL,
            max_retries=_int(env, "MINT_POLL_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            poll_interval=_float(env, "MINT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            initial_delay=_float(env, "MINT_POLL_INITIAL_DELAY", DEFAULT_INITIAL_DELAY),
            gas_limit=_int(env, "MINT_GAS_LIMIT", DEFAULT_GAS_LIMIT),
            http_timeout=_float(env, "MINT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got: {raw!r}") from e


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got: {raw!r}") from e
    if not math.isfinite(value):
        raise ConfigError(f"{key} must be a finite number, got: {raw!r}")
    return value


def _decimal(env: Mapping[str, str], key: str) -> Decimal | None:
    raw = env.get(key)
    if not raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise ConfigError(f"{key} must be a decimal amount, got: {raw!r}") from e
    if not value.is_finite():
        raise ConfigError(f"{key} must be a finite amount, got: {raw!r}")
    return value
