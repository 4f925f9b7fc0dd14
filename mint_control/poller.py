"""
Confirmation poller — resolves a submitted identifier to a terminal
phase through repeated read-only queries.

One call to poll() does:
    1. Announce Submitted ("waiting for confirmation").
    2. Wait ``initial_delay`` so the submission can propagate.
    3. Poll at most ``max_retries`` times, ``interval`` apart:
        - not found → miss
        - found, not in a block → Pending, miss
        - in a block → read the outcome:
            success → Confirmed (100%), refresh aggregate data, stop
            failure → Failed, stop
            not yet available → miss
        - reader raised → transient miss, phase unchanged
    4. On the ``max_retries``-th consecutive miss → Failed (timeout, or
       "could not verify" if the last miss was transient). No further
       poll is made.

Progress after each miss is ``min(95, misses * 100 // max_retries)``,
never lower than the progress already reported.

The reader is the independent tracking endpoint, never the wallet
session, so a disconnected wallet does not block confirmation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from mint_control import messages
from mint_control.errors import ErrorKind, InvalidTransition
from mint_control.ledger.client import LedgerReader, TxOutcome, TxRecord
from mint_control.state import TransactionState, TxPhase

logger = logging.getLogger(__name__)

MAX_POLL_PROGRESS = 95

Sleep = Callable[[float], Awaitable[None]]
OnConfirmed = Callable[[], Awaitable[object]]


@dataclass(frozen=True)
class PollOutcome:
    """Result of one poll() run.

    Attributes:
        identifier: The tracked identifier.
        phase: Terminal phase reached (Confirmed or Failed).
        polls: Number of read rounds performed.
        error_kind: Taxonomy entry when phase is Failed.
    """

    identifier: str
    phase: TxPhase
    polls: int
    error_kind: ErrorKind | None = None


class ConfirmationPoller:
    """Bounded retry loop over a LedgerReader.

    Args:
        state: The controller-owned transaction state.
        reader: Independent read capability.
        max_retries: Poll budget R (>= 1).
        interval: Seconds between polls.
        initial_delay: Seconds before the first poll.
        sleep: Awaitable sleep. Inject for deterministic tests.
            Default: asyncio.sleep.
        on_confirmed: Awaited once after Confirmed. Its failure is
            logged and never changes the phase.
    """

    def __init__(
        self,
        state: TransactionState,
        reader: LedgerReader,
        *,
        max_retries: int = 20,
        interval: float = 6.0,
        initial_delay: float = 3.0,
        sleep: Sleep | None = None,
        on_confirmed: OnConfirmed | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got: {max_retries}")
        self._state = state
        self._reader = reader
        self._max_retries = max_retries
        self._interval = interval
        self._initial_delay = initial_delay
        self._sleep = sleep or asyncio.sleep
        self._on_confirmed = on_confirmed

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def poll(self, identifier: str) -> PollOutcome:
        """Track ``identifier`` until Confirmed or Failed.

        Raises:
            InvalidTransition: If the state is not Submitted for
                ``identifier`` on entry.
        """
        state = self._state
        if state.phase != TxPhase.SUBMITTED or state.identifier != identifier:
            raise InvalidTransition(
                f"polling requires Submitted for {identifier}, "
                f"state is {state.phase} for {state.identifier}"
            )

        state.set_message(messages.SUBMITTED)
        await self._sleep(self._initial_delay)

        misses = 0
        polls = 0
        while True:
            polls += 1
            transient = False
            record: TxRecord | None = None
            outcome: TxOutcome | None = None
            try:
                record = await self._reader.get_transaction(identifier)
                if record is not None and record.included:
                    outcome = await self._reader.get_outcome(identifier)
            except Exception as exc:
                transient = True
                logger.warning("poll %d for %s failed: %s", polls, identifier, exc)

            if outcome is not None:
                return await self._finish(identifier, polls, outcome.succeeded)
            if record is not None and not record.included:
                state.transition(TxPhase.PENDING, message=messages.PENDING)

            misses += 1
            if misses >= self._max_retries:
                return self._give_up(identifier, polls, transient)

            state.set_progress(min(MAX_POLL_PROGRESS, misses * 100 // self._max_retries))
            await self._sleep(self._interval)

    async def _finish(self, identifier: str, polls: int, succeeded: bool) -> PollOutcome:
        if not succeeded:
            logger.warning("transaction %s reverted on-ledger", identifier)
            self._state.transition(TxPhase.FAILED, message=messages.FAILED)
            return PollOutcome(
                identifier, TxPhase.FAILED, polls, ErrorKind.LEDGER_OUTCOME_FAILURE
            )

        self._state.transition(TxPhase.CONFIRMED, message=messages.CONFIRMED)
        logger.info("transaction %s confirmed after %d polls", identifier, polls)
        if self._on_confirmed is not None:
            try:
                await self._on_confirmed()
            except Exception:
                logger.exception("post-confirmation refresh failed")
        return PollOutcome(identifier, TxPhase.CONFIRMED, polls)

    def _give_up(self, identifier: str, polls: int, transient: bool) -> PollOutcome:
        if transient:
            error_kind = ErrorKind.CONFIRMATION_TRANSIENT
            message = messages.UNVERIFIED
        else:
            error_kind = ErrorKind.CONFIRMATION_TIMEOUT
            message = messages.TIMED_OUT
        logger.warning("giving up on %s after %d polls (%s)", identifier, polls, error_kind)
        self._state.transition(TxPhase.FAILED, message=message)
        return PollOutcome(identifier, TxPhase.FAILED, polls, error_kind)
