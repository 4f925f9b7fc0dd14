"""
Ethereum JSON-RPC read client — real network implementation of
LedgerReader, plus the contract-state reader built on ``eth_call``.

Uses an injectable transport (JsonRpcTransport) so the HTTP layer can
be swapped for test fakes without changing parsing logic.

No retry loops. No secrets. No wallet access: this client is the
independent read path, so it never shares a session with the signer.

Response handling:
    - Envelopes are validated against JSON-RPC 2.0 (schema.py).
    - ``{"error": {...}}`` raises LedgerReadError(code="RPC_ERROR").
    - A result that does not match the expected shape raises
      MalformedResponseError.
    - ``null`` results for unknown transactions/receipts return None.
"""

from __future__ import annotations

import logging
from typing import Any

from mint_control.errors import LedgerReadError, MalformedResponseError
from mint_control.ledger import schema
from mint_control.ledger.abi import (
    MAX_SUPPLY_SELECTOR,
    MINT_PRICE_SELECTOR,
    TOTAL_MINTED_SELECTOR,
    decode_uint256,
    from_wei,
    parse_quantity,
)
from mint_control.ledger.client import AggregateState, TxOutcome, TxRecord
from mint_control.ledger.transport import HttpxTransport, JsonRpcTransport

logger = logging.getLogger(__name__)

# JSON-RPC request ID counter (simple, no thread-safety needed for async)
_REQUEST_ID = 0


def _next_request_id() -> int:
    global _REQUEST_ID
    _REQUEST_ID += 1
    return _REQUEST_ID


def build_request(method: str, params: list[Any]) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 request body."""
    return {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": _next_request_id(),
    }


def unwrap_response(response: dict[str, Any], method: str) -> Any:
    """Validate a JSON-RPC envelope and return its ``result``.

    Raises:
        MalformedResponseError: If the envelope is not JSON-RPC 2.0.
        LedgerReadError: If the envelope carries an ``error`` member.
    """
    schema.validate(response, schema.RESPONSE_ENVELOPE, what=f"{method} response")
    if "error" in response:
        error = response["error"]
        raise LedgerReadError(
            f"{method} failed: {error['message']}",
            code="RPC_ERROR",
            details={"rpc_code": error["code"], "method": method},
        )
    return response["result"]


class EthJsonRpcClient:
    """Read-only Ethereum JSON-RPC client implementing LedgerReader.

    Args:
        url: JSON-RPC endpoint URL (e.g. "https://mainnet.base.org").
        transport: Injectable transport for HTTP POST. Defaults to
            HttpxTransport.
    """

    def __init__(
        self,
        url: str,
        transport: JsonRpcTransport | None = None,
    ) -> None:
        self._url = url
        self._transport = transport or HttpxTransport()

    @property
    def url(self) -> str:
        """The JSON-RPC endpoint URL."""
        return self._url

    async def _call(self, method: str, params: list[Any]) -> Any:
        response = await self._transport.post_json(self._url, build_request(method, params))
        return unwrap_response(response, method)

    # -----------------------------------------------------------------
    # LedgerReader protocol methods
    # -----------------------------------------------------------------

    async def get_transaction(self, identifier: str) -> TxRecord | None:
        """Look up a transaction by hash (``eth_getTransactionByHash``)."""
        result = await self._call("eth_getTransactionByHash", [identifier])
        schema.validate(result, schema.TRANSACTION, what="transaction")
        if result is None:
            return None

        block = result.get("blockNumber")
        return TxRecord(
            identifier=result["hash"],
            block_number=parse_quantity(block) if block else None,
        )

    async def get_outcome(self, identifier: str) -> TxOutcome | None:
        """Fetch the receipt (``eth_getTransactionReceipt``) and the current
        block height to derive status and confirmations."""
        result = await self._call("eth_getTransactionReceipt", [identifier])
        schema.validate(result, schema.RECEIPT, what="receipt")
        if result is None:
            return None

        receipt_block = parse_quantity(result["blockNumber"])
        status = "success" if parse_quantity(result["status"]) == 1 else "failure"
        head = await self.block_number()

        return TxOutcome(
            status=status,
            confirmations=max(0, head - receipt_block + 1),
            block_number=receipt_block,
        )

    # -----------------------------------------------------------------
    # Plain queries
    # -----------------------------------------------------------------

    async def block_number(self) -> int:
        result = await self._call("eth_blockNumber", [])
        schema.validate(result, schema.QUANTITY, what="block number")
        return parse_quantity(result)

    async def call(self, to: str, data: str, block: str = "latest") -> str:
        """Execute a read-only contract call (``eth_call``)."""
        result = await self._call("eth_call", [{"to": to, "data": data}, block])
        schema.validate(result, schema.DATA, what="call result")
        return str(result)


class ContractStateReader:
    """AggregateReader for the mint contract.

    Reads ``totalMinted()``, ``MAX_SUPPLY()`` and ``MINT_PRICE()``
    one after another through ``eth_call``.
    """

    def __init__(self, client: EthJsonRpcClient, contract_address: str) -> None:
        self._client = client
        self._address = contract_address

    @property
    def contract_address(self) -> str:
        return self._address

    async def read_aggregate(self) -> AggregateState:
        minted = await self._read_uint(TOTAL_MINTED_SELECTOR, "totalMinted")
        max_supply = await self._read_uint(MAX_SUPPLY_SELECTOR, "MAX_SUPPLY")
        price_wei = await self._read_uint(MINT_PRICE_SELECTOR, "MINT_PRICE")

        state = AggregateState(
            minted=minted,
            max_supply=max_supply,
            unit_price=from_wei(price_wei),
        )
        logger.debug("aggregate state %s", state.to_dict())
        return state

    async def _read_uint(self, selector: str, name: str) -> int:
        data = await self._client.call(self._address, selector)
        try:
            return decode_uint256(data)
        except ValueError as e:
            raise MalformedResponseError(
                f"{name}() returned undecodable data",
                details={"data": data[:80]},
            ) from e
