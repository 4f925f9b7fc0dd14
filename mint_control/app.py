"""
Wiring: builds a MintController from Settings and runs single attempts.

create_controller() constructs the dependencies; mint_once() runs one
attempt and maps the final snapshot to an outcome dict.

Separation of concerns:
    - Settings: where to talk to, budgets, fallback price
    - WalletSession: write path (caller-supplied; wallet custody is
      not this package's business)
    - EthJsonRpcClient: independent read path for tracking
    - ContractStateReader: supply/price reads on the aggregate endpoint
    - MintController: the lifecycle

Usage:
    settings = Settings.from_env()
    session = JsonRpcWalletSession("http://127.0.0.1:8545")
    controller = create_controller(settings, session)
    await controller.refresh_aggregate()
    summary = await mint_once(controller)
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from mint_control.config import Settings
from mint_control.controller import MintController
from mint_control.gate import SubmissionGate
from mint_control.ledger.client import ExternalViewer, WalletSession
from mint_control.ledger.jsonrpc_client import ContractStateReader, EthJsonRpcClient
from mint_control.ledger.transport import HttpxTransport, JsonRpcTransport
from mint_control.poller import ConfirmationPoller, Sleep
from mint_control.state import TransactionState, TxPhase
from mint_control.viewer import BrowserViewer


def create_controller(
    settings: Settings,
    session: WalletSession,
    *,
    viewer: ExternalViewer | None = None,
    transport: JsonRpcTransport | None = None,
    tracking_transport: JsonRpcTransport | None = None,
    sleep: Sleep | None = None,
) -> MintController:
    """Build a controller for ``settings``.

    Args:
        settings: Validated configuration.
        session: Wallet session used for submissions.
        viewer: External viewer. Default: BrowserViewer.
        transport: Transport for aggregate reads. Default: HttpxTransport.
        tracking_transport: Transport for confirmation polling. Default:
            its own HttpxTransport, never shared with the wallet.
        sleep: Awaitable sleep for the poller (tests).

    Returns:
        A MintController in the initial state.
    """
    viewer = viewer or BrowserViewer()
    aggregate_client = EthJsonRpcClient(
        settings.rpc_url,
        transport=transport or HttpxTransport(timeout=settings.http_timeout),
    )
    tracking_client = EthJsonRpcClient(
        settings.tracking_rpc_url,
        transport=tracking_transport or HttpxTransport(timeout=settings.http_timeout),
    )

    def _gate(state: TransactionState, on_submitted: Callable[[str], None]) -> SubmissionGate:
        return SubmissionGate(
            state,
            session,
            viewer,
            contract_address=settings.contract_address,
            fallback_price=settings.fallback_price,
            chain=settings.chain,
            deeplink_url=settings.wallet_deeplink_url,
            gas_limit=settings.gas_limit,
            on_submitted=on_submitted,
        )

    def _poller(
        state: TransactionState, on_confirmed: Callable[[], Awaitable[object]]
    ) -> ConfirmationPoller:
        return ConfirmationPoller(
            state,
            tracking_client,
            max_retries=settings.max_retries,
            interval=settings.poll_interval,
            initial_delay=settings.initial_delay,
            sleep=sleep,
            on_confirmed=on_confirmed,
        )

    return MintController(
        _gate,
        _poller,
        ContractStateReader(aggregate_client, settings.contract_address),
        viewer,
        explorer_url=settings.explorer_url,
        fallback_price=settings.fallback_price,
    )


async def mint_once(controller: MintController) -> dict[str, Any]:
    """Run one attempt to completion and summarize it.

    Returns:
        Dict with:
            - outcome: CONFIRMED | FAILED | CANCELLED | HANDED_OFF | BUSY
            - phase, message, identifier, progress: final snapshot
    """
    started = await controller.request_mint()
    if not started:
        return {"outcome": "BUSY", **controller.state.to_dict()}

    await controller.wait()
    snapshot = controller.state

    if snapshot.phase == TxPhase.CONFIRMED:
        outcome = "CONFIRMED"
    elif snapshot.phase == TxPhase.FAILED:
        outcome = "FAILED"
    elif snapshot.phase == TxPhase.AWAITING_APPROVAL:
        outcome = "HANDED_OFF"
    else:
        outcome = "CANCELLED"

    return {"outcome": outcome, **snapshot.to_dict()}
