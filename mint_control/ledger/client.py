"""
Ledger protocols — the boundaries the lifecycle controller depends on.

Defines interfaces, not implementations. The gate and poller only see
these protocols, which keeps them testable and keeps ``httpx`` out of
the lifecycle logic.

Boundaries:
    - WalletSession / Signer — write side. Produces a submission
      identifier or raises SignerError. The controller never sees keys.
    - LedgerReader — read side used for confirmation tracking. Must not
      share a connection with the wallet session.
    - AggregateReader — supply/price summary of the target contract.
    - ExternalViewer — hands a URL to something outside the process
      (browser, wallet app).

Concrete implementations:
    - EthJsonRpcClient (LedgerReader), ContractStateReader
      (AggregateReader), JsonRpcWalletSession (WalletSession),
      BrowserViewer (ExternalViewer).
    - Fakes in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


# =========================================================================
# Value types
# =========================================================================


@dataclass(frozen=True)
class CallRequest:
    """A contract call to be signed and submitted.

    Attributes:
        to: Target contract address ("0x" + 40 hex).
        value_wei: Amount to transfer, in wei.
        data: Hex call data (a 4-byte selector for zero-argument calls).
        gas_limit: Fixed gas ceiling.
    """

    to: str
    value_wei: int
    data: str
    gas_limit: int

    def to_rpc_params(self, sender: str | None = None) -> dict[str, str]:
        """JSON-RPC ``eth_sendTransaction`` parameter object."""
        params = {
            "to": self.to,
            "value": hex(self.value_wei),
            "data": self.data,
            "gas": hex(self.gas_limit),
        }
        if sender is not None:
            params["from"] = sender
        return params


@dataclass(frozen=True)
class TxRecord:
    """A transaction as seen by the read endpoint.

    Attributes:
        identifier: Transaction hash.
        block_number: Block that includes the transaction. None while
            the transaction is still waiting in the mempool.
    """

    identifier: str
    block_number: int | None = None

    @property
    def included(self) -> bool:
        return self.block_number is not None


@dataclass(frozen=True)
class TxOutcome:
    """Execution result of an included transaction.

    Attributes:
        status: "success" or "failure".
        confirmations: Blocks on top of (and including) the inclusion block.
        block_number: Inclusion block, when known.
    """

    status: str
    confirmations: int = 0
    block_number: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class AggregateState:
    """Supply and price summary of the target contract."""

    minted: int
    max_supply: int
    unit_price: Decimal

    @property
    def remaining(self) -> int:
        return max(0, self.max_supply - self.minted)

    def to_dict(self) -> dict[str, object]:
        return {
            "minted": self.minted,
            "max_supply": self.max_supply,
            "unit_price": str(self.unit_price),
        }


# =========================================================================
# Protocols
# =========================================================================


@runtime_checkable
class Signer(Protocol):
    """Write capability bound to one wallet session."""

    async def submit(self, request: CallRequest) -> str:
        """Sign and broadcast ``request``.

        Returns:
            The submission identifier (transaction hash).

        Raises:
            SignerError: On any refusal or failure. The message text is
                the only signal used to classify the failure.
        """
        ...


@runtime_checkable
class WalletSession(Protocol):
    """Source of session-scoped signers."""

    async def get_signer(self) -> Signer:
        """Obtain a signer for the current session."""
        ...


@runtime_checkable
class LedgerReader(Protocol):
    """Read-only capability used to track a submission."""

    async def get_transaction(self, identifier: str) -> TxRecord | None:
        """Return the transaction record, or None if not yet known."""
        ...

    async def get_outcome(self, identifier: str) -> TxOutcome | None:
        """Return the execution outcome, or None if not yet available."""
        ...


@runtime_checkable
class AggregateReader(Protocol):
    """Read-only capability for the contract's supply/price summary."""

    async def read_aggregate(self) -> AggregateState:
        ...


@runtime_checkable
class ExternalViewer(Protocol):
    """Opens a URL outside the process."""

    def open_external(self, url: str) -> None:
        ...
