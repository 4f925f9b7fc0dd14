"""
Mint controller — the boundary exposed to the presentation layer.

Owns the single TransactionState, the last-known aggregate data and
the background poll task. The presentation layer reads snapshots (or
subscribes) and issues commands; it never mutates state directly.

Commands:
    - request_mint() — start an attempt unless one is already running.
    - track(identifier) — resume tracking after a deep-link hand-off.
    - reset() — clear a parked or terminal state.
    - open_explorer() — show the current identifier on the explorer.
    - refresh_aggregate() — re-read supply/price.

Re-entrancy: one attempt at a time. request_mint() is a no-op while
the phase is Preparing, Awaiting Approval, Submitted or Pending.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable

from mint_control.config import DEFAULT_MAX_SUPPLY
from mint_control.gate import GateKind, GateResult, SubmissionGate
from mint_control.ledger.client import AggregateReader, AggregateState, ExternalViewer
from mint_control.poller import ConfirmationPoller, PollOutcome
from mint_control.state import (
    BUSY_PHASES,
    Listener,
    TransactionSnapshot,
    TransactionState,
    TxPhase,
)
from mint_control.viewer import explorer_tx_url

logger = logging.getLogger(__name__)

# Factories receive the controller-owned state plus the callback wiring
# the component back to the controller.
GateFactory = Callable[[TransactionState, Callable[[str], None]], SubmissionGate]
PollerFactory = Callable[
    [TransactionState, Callable[[], Awaitable[object]]], ConfirmationPoller
]


class MintController:
    """Lifecycle controller for one mint button.

    The gate and poller are built by the controller around its own
    state, so no other object can write to it.

    Args:
        gate_factory: Callable building the SubmissionGate from the
            state and the submission hand-off callback.
        poller_factory: Callable building the ConfirmationPoller from
            the state and the post-confirmation callback.
        aggregate_reader: Supply/price reader.
        viewer: External viewer for explorer links.
        explorer_url: Block explorer base URL.
        fallback_price: Unit price reported before the first read.
    """

    def __init__(
        self,
        gate_factory: GateFactory,
        poller_factory: PollerFactory,
        aggregate_reader: AggregateReader,
        viewer: ExternalViewer,
        *,
        explorer_url: str,
        fallback_price: Decimal,
    ) -> None:
        self._state = TransactionState()
        self._gate = gate_factory(self._state, self._start_polling)
        self._poller = poller_factory(self._state, self.refresh_aggregate)
        self._aggregate_reader = aggregate_reader
        self._viewer = viewer
        self._explorer_url = explorer_url
        self._price: Decimal | None = None
        self._aggregate = AggregateState(
            minted=0,
            max_supply=DEFAULT_MAX_SUPPLY,
            unit_price=fallback_price,
        )
        self._poll_task: asyncio.Task[PollOutcome] | None = None
        self._handed_off = False

    # -----------------------------------------------------------------
    # Read side
    # -----------------------------------------------------------------

    @property
    def state(self) -> TransactionSnapshot:
        return self._state.snapshot()

    @property
    def aggregate(self) -> AggregateState:
        return self._aggregate

    @property
    def price(self) -> Decimal | None:
        """Last price read from the contract; None until the first read."""
        return self._price

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a snapshot listener; returns an unsubscribe callable."""
        return self._state.subscribe(listener)

    # -----------------------------------------------------------------
    # Commands
    # -----------------------------------------------------------------

    async def request_mint(self) -> bool:
        """Start a mint attempt.

        Returns:
            False if an attempt is already in a non-terminal phase
            (nothing happens), True otherwise. The attempt's outcome is
            reported through the state, never by raising.
        """
        if self._state.phase in BUSY_PHASES:
            logger.debug("request_mint ignored in phase %s", self._state.phase)
            return False

        self._handed_off = False
        self._state.reset()
        result: GateResult = await self._gate.submit(self._price)
        if result.kind == GateKind.HANDED_OFF:
            self._handed_off = True
        return True

    async def track(self, identifier: str) -> bool:
        """Hand an out-of-band identifier to the poller.

        Only valid while parked in Awaiting Approval after a deep-link
        hand-off. Returns False otherwise.
        """
        if not identifier:
            return False
        if not self._handed_off or self._state.phase != TxPhase.AWAITING_APPROVAL:
            return False
        self._handed_off = False
        self._state.transition(TxPhase.SUBMITTED, identifier=identifier)
        self._start_polling(identifier)
        return True

    def reset(self) -> bool:
        """Return to the initial state.

        Refused (returns False) while a submission is in flight or a
        poll has not reached a terminal phase. A deep-link hand-off can
        always be reset.
        """
        if self._state.phase in BUSY_PHASES and not self._handed_off:
            return False
        self._handed_off = False
        self._state.reset()
        return True

    def open_explorer(self) -> bool:
        """Open the current identifier on the explorer, if there is one."""
        identifier = self._state.identifier
        if identifier is None:
            return False
        self._viewer.open_external(explorer_tx_url(self._explorer_url, identifier))
        return True

    async def refresh_aggregate(self) -> AggregateState:
        """Re-read supply/price. Failures keep the previous values."""
        try:
            aggregate = await self._aggregate_reader.read_aggregate()
        except Exception as exc:
            logger.warning("aggregate refresh failed: %s", exc)
            return self._aggregate
        self._aggregate = aggregate
        self._price = aggregate.unit_price
        return aggregate

    async def wait(self) -> PollOutcome | None:
        """Wait for the current poll task, if any, and return its outcome."""
        if self._poll_task is None:
            return None
        return await self._poll_task

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _start_polling(self, identifier: str) -> None:
        self._poll_task = asyncio.create_task(
            self._poller.poll(identifier),
            name=f"mint-poll-{identifier[:10]}",
        )

