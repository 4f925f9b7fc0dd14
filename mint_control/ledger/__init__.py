"""
Ledger boundary for the mint lifecycle.

Public API:

    Protocols (for dependency injection):
        - ``WalletSession``, ``Signer`` — write side.
        - ``LedgerReader`` — read side used for confirmation tracking.
        - ``AggregateReader`` — contract supply/price summary.
        - ``ExternalViewer`` — hands URLs to a browser or wallet app.

    Value types:
        - ``CallRequest``, ``TxRecord``, ``TxOutcome``, ``AggregateState``.

    Concrete clients:
        - ``EthJsonRpcClient`` — JSON-RPC implementation of LedgerReader.
        - ``ContractStateReader`` — AggregateReader over ``eth_call``.
        - ``JsonRpcWalletSession`` — WalletSession over a wallet endpoint.

    Transport:
        - ``JsonRpcTransport`` — injectable transport protocol.
        - ``HttpxTransport`` — default httpx-based transport.
"""

from mint_control.ledger.abi import (
    MAX_SUPPLY_SELECTOR,
    MINT_PRICE_SELECTOR,
    MINT_SELECTOR,
    TOTAL_MINTED_SELECTOR,
    decode_uint256,
    from_wei,
    is_address,
    to_wei,
)
from mint_control.ledger.client import (
    AggregateReader,
    AggregateState,
    CallRequest,
    ExternalViewer,
    LedgerReader,
    Signer,
    TxOutcome,
    TxRecord,
    WalletSession,
)
from mint_control.ledger.jsonrpc_client import ContractStateReader, EthJsonRpcClient
from mint_control.ledger.transport import HttpxTransport, JsonRpcTransport
from mint_control.ledger.wallet import JsonRpcSigner, JsonRpcWalletSession

__all__ = [
    "MAX_SUPPLY_SELECTOR",
    "MINT_PRICE_SELECTOR",
    "MINT_SELECTOR",
    "TOTAL_MINTED_SELECTOR",
    "AggregateReader",
    "AggregateState",
    "CallRequest",
    "ContractStateReader",
    "EthJsonRpcClient",
    "ExternalViewer",
    "HttpxTransport",
    "JsonRpcSigner",
    "JsonRpcTransport",
    "JsonRpcWalletSession",
    "LedgerReader",
    "Signer",
    "TxOutcome",
    "TxRecord",
    "WalletSession",
    "decode_uint256",
    "from_wei",
    "is_address",
    "to_wei",
]
