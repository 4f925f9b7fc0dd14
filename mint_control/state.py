"""
Transaction state — the single record describing one mint attempt.

One mutable ``TransactionState`` is owned by the controller. Everything
outside the controller sees immutable ``TransactionSnapshot`` values,
either by reading ``MintController.state`` or by subscribing.

Status transitions:
    None → Preparing (new attempt)
    Preparing → Awaiting Approval (signer obtained)
    Preparing → Failed (preparation error)
    Awaiting Approval → Submitted (identifier issued)
    Awaiting Approval → Failed (submission failed)
    Submitted → Pending | Confirmed | Failed
    Pending → Pending | Confirmed | Failed
    Confirmed → (terminal)
    Failed → (terminal)
    any → None (reset)

Invariants:
    - identifier is only ever set in Submitted, Pending, Confirmed, Failed.
    - progress == 100 if and only if phase == Confirmed.
    - progress never decreases until reset().
    - reset() restores (None, None, None, 0) exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable

from mint_control.errors import InvalidTransition

logger = logging.getLogger(__name__)


class TxPhase(StrEnum):
    """Lifecycle phase of a mint attempt."""

    NONE = "None"
    PREPARING = "Preparing"
    AWAITING_APPROVAL = "Awaiting Approval"
    SUBMITTED = "Submitted"
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    FAILED = "Failed"


TERMINAL_PHASES: frozenset[TxPhase] = frozenset({TxPhase.CONFIRMED, TxPhase.FAILED})

# Phases during which a new attempt must not start.
BUSY_PHASES: frozenset[TxPhase] = frozenset(
    {
        TxPhase.PREPARING,
        TxPhase.AWAITING_APPROVAL,
        TxPhase.SUBMITTED,
        TxPhase.PENDING,
    }
)

# Phases in which an identifier may be present.
IDENTIFIED_PHASES: frozenset[TxPhase] = frozenset(
    {
        TxPhase.SUBMITTED,
        TxPhase.PENDING,
        TxPhase.CONFIRMED,
        TxPhase.FAILED,
    }
)

_TRANSITIONS: dict[TxPhase, frozenset[TxPhase]] = {
    TxPhase.NONE: frozenset({TxPhase.PREPARING}),
    TxPhase.PREPARING: frozenset({TxPhase.AWAITING_APPROVAL, TxPhase.FAILED}),
    TxPhase.AWAITING_APPROVAL: frozenset({TxPhase.SUBMITTED, TxPhase.FAILED}),
    TxPhase.SUBMITTED: frozenset({TxPhase.PENDING, TxPhase.CONFIRMED, TxPhase.FAILED}),
    TxPhase.PENDING: frozenset({TxPhase.PENDING, TxPhase.CONFIRMED, TxPhase.FAILED}),
    TxPhase.CONFIRMED: frozenset(),
    TxPhase.FAILED: frozenset(),
}

COMPLETE = 100


@dataclass(frozen=True)
class TransactionSnapshot:
    """Read-only view of the transaction state at one instant."""

    phase: TxPhase = TxPhase.NONE
    message: str | None = None
    identifier: str | None = None
    progress: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def is_busy(self) -> bool:
        return self.phase in BUSY_PHASES

    def to_dict(self) -> dict[str, object]:
        return {
            "phase": str(self.phase),
            "message": self.message,
            "identifier": self.identifier,
            "progress": self.progress,
        }


Listener = Callable[[TransactionSnapshot], None]


class TransactionState:
    """Mutable owner of the current attempt's phase, message, identifier
    and progress. Every mutation notifies subscribers with a snapshot."""

    def __init__(self) -> None:
        self._phase = TxPhase.NONE
        self._message: str | None = None
        self._identifier: str | None = None
        self._progress = 0
        self._listeners: list[Listener] = []

    @property
    def phase(self) -> TxPhase:
        return self._phase

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def identifier(self) -> str | None:
        return self._identifier

    @property
    def progress(self) -> int:
        return self._progress

    def snapshot(self) -> TransactionSnapshot:
        return TransactionSnapshot(
            phase=self._phase,
            message=self._message,
            identifier=self._identifier,
            progress=self._progress,
        )

    # -----------------------------------------------------------------
    # Subscribers
    # -----------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("state listener failed for phase %s", snap.phase)

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def transition(
        self,
        phase: TxPhase,
        *,
        message: str | None = None,
        progress: int | None = None,
        identifier: str | None = None,
    ) -> None:
        """Move to ``phase``.

        Args:
            phase: Target phase. Must be allowed from the current phase.
            message: New status text. None keeps the current text.
            progress: Requested progress. Lower values than the current
                progress are ignored. Confirmed always forces 100.
            identifier: Submission identifier. Required when entering
                Submitted; rejected for phases that cannot carry one.

        Raises:
            InvalidTransition: If the transition or identifier is illegal.
            ValueError: If progress is outside [0, 100) for a
                non-Confirmed phase.
        """
        if phase not in _TRANSITIONS[self._phase]:
            raise InvalidTransition(f"{self._phase} -> {phase} is not allowed")

        if identifier is not None and phase not in IDENTIFIED_PHASES:
            raise InvalidTransition(f"phase {phase} cannot carry an identifier")
        if phase == TxPhase.SUBMITTED and identifier is None and self._identifier is None:
            raise InvalidTransition("Submitted requires an identifier")

        if phase == TxPhase.CONFIRMED:
            new_progress = COMPLETE
        elif progress is not None:
            new_progress = self._checked_progress(progress)
        else:
            new_progress = self._progress

        logger.debug("transition %s -> %s", self._phase, phase)
        self._phase = phase
        if identifier is not None:
            self._identifier = identifier
        if message is not None:
            self._message = message
        self._progress = new_progress
        self._notify()

    def set_progress(self, progress: int) -> None:
        """Raise progress; values at or below the current one are ignored."""
        new_progress = self._checked_progress(progress)
        if new_progress != self._progress:
            self._progress = new_progress
            self._notify()

    def set_message(self, message: str | None) -> None:
        self._message = message
        self._notify()

    def reset(self) -> None:
        """Silent reset to the initial state."""
        logger.debug("reset from %s", self._phase)
        self._phase = TxPhase.NONE
        self._message = None
        self._identifier = None
        self._progress = 0
        self._notify()

    def _checked_progress(self, progress: int) -> int:
        if not 0 <= progress < COMPLETE:
            raise ValueError(
                f"progress must be in [0, {COMPLETE}) outside Confirmed, got: {progress}"
            )
        return max(self._progress, progress)
