"""
JSON-RPC wallet session — EIP-1193 style write path.

Talks to a wallet endpoint that holds the keys (a wallet bridge or an
unlocked development node). This module never signs anything itself:
it asks for accounts, then asks the wallet to send a transaction and
returns the hash the wallet reports.

Every failure on the write path surfaces as SignerError whose message
is the wallet's own text, because that text is what the submission
gate classifies (e.g. EIP-1193 code 4001 "User rejected the request.").
"""

from __future__ import annotations

import logging
import re

from mint_control.errors import LedgerReadError, SignerError
from mint_control.ledger.client import CallRequest
from mint_control.ledger.jsonrpc_client import build_request, unwrap_response
from mint_control.ledger.transport import HttpxTransport, JsonRpcTransport

logger = logging.getLogger(__name__)

_TX_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


async def _wallet_call(
    transport: JsonRpcTransport,
    url: str,
    method: str,
    params: list[object],
) -> object:
    try:
        response = await transport.post_json(url, build_request(method, params))
        return unwrap_response(response, method)
    except LedgerReadError as e:
        rpc_code = e.details.get("rpc_code")
        raise SignerError(str(e), code=rpc_code if isinstance(rpc_code, int) else None) from e


class JsonRpcSigner:
    """Signer bound to one wallet account."""

    def __init__(self, url: str, account: str, transport: JsonRpcTransport) -> None:
        self._url = url
        self._account = account
        self._transport = transport

    @property
    def account(self) -> str:
        return self._account

    async def submit(self, request: CallRequest) -> str:
        """Ask the wallet to sign and broadcast ``request``."""
        result = await _wallet_call(
            self._transport,
            self._url,
            "eth_sendTransaction",
            [request.to_rpc_params(self._account)],
        )
        if not isinstance(result, str) or not _TX_HASH_RE.match(result):
            raise SignerError(f"wallet returned an invalid transaction hash: {result!r}")
        logger.info("wallet accepted transaction %s", result)
        return result


class JsonRpcWalletSession:
    """WalletSession over a JSON-RPC wallet endpoint.

    Args:
        url: Wallet endpoint URL.
        transport: Injectable transport. Defaults to HttpxTransport.
    """

    def __init__(self, url: str, transport: JsonRpcTransport | None = None) -> None:
        self._url = url
        self._transport = transport or HttpxTransport()

    async def get_signer(self) -> JsonRpcSigner:
        """Request account access and bind a signer to the first account."""
        accounts = await _wallet_call(self._transport, self._url, "eth_requestAccounts", [])
        if not isinstance(accounts, list) or not accounts or not isinstance(accounts[0], str):
            raise SignerError("wallet did not expose any account")
        return JsonRpcSigner(self._url, accounts[0], self._transport)
