"""
Submission gate — turns one mint request into an in-flight submission
or a classified outcome.

Steps (all state writes go through TransactionState):
    1. Preparing (5%) — build the call, obtain a session-scoped signer.
    2. Awaiting Approval (10%) — ask the signer to submit the call.
    3. Classify the immediate result:
        - identifier → Submitted, hand the identifier to the poller.
        - user cancellation → silent reset to the initial state.
        - estimation/visibility failure → open a wallet deep link,
          stay in Awaiting Approval, start no polling.
        - anything else → Failed with a generic message.

The gate never polls and never waits for confirmation. Raw error text
goes to the log only; the single exception is a preparation failure
(before a signer exists), whose message is kept for diagnostics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Callable

from mint_control import messages
from mint_control.errors import (
    ErrorKind,
    SignerError,
    SubmitErrorKind,
    classify_submit_error,
)
from mint_control.ledger.abi import MINT_SELECTOR, to_wei
from mint_control.ledger.client import CallRequest, ExternalViewer, WalletSession
from mint_control.state import TransactionState, TxPhase
from mint_control.viewer import wallet_deep_link

logger = logging.getLogger(__name__)

PREPARING_PROGRESS = 5
AWAITING_APPROVAL_PROGRESS = 10


class GateKind(StrEnum):
    """Which path a gate run took."""

    SUBMITTED = "SUBMITTED"
    CANCELLED = "CANCELLED"
    HANDED_OFF = "HANDED_OFF"
    FAILED = "FAILED"


@dataclass(frozen=True)
class GateResult:
    """Outcome of one gate run.

    Attributes:
        kind: Path taken.
        identifier: Submission identifier (SUBMITTED only).
        error_kind: Taxonomy entry for non-success paths.
        deep_link: URL handed to the external viewer (HANDED_OFF only).
    """

    kind: GateKind
    identifier: str | None = None
    error_kind: ErrorKind | None = None
    deep_link: str | None = None


class SubmissionGate:
    """Runs the pre-confirmation half of a mint attempt.

    Args:
        state: The controller-owned transaction state.
        session: Wallet session producing signers.
        viewer: External viewer for the deep-link fallback.
        contract_address: Target contract.
        fallback_price: Unit price used when no price is known.
        chain: Chain slug for the deep link.
        deeplink_url: Wallet deep-link base URL.
        gas_limit: Fixed gas ceiling.
        on_submitted: Called with the identifier once Submitted is reached.
    """

    def __init__(
        self,
        state: TransactionState,
        session: WalletSession,
        viewer: ExternalViewer,
        *,
        contract_address: str,
        fallback_price: Decimal,
        chain: str,
        deeplink_url: str,
        gas_limit: int,
        on_submitted: Callable[[str], None] | None = None,
    ) -> None:
        self._state = state
        self._session = session
        self._viewer = viewer
        self._contract_address = contract_address
        self._fallback_price = fallback_price
        self._chain = chain
        self._deeplink_url = deeplink_url
        self._gas_limit = gas_limit
        self._on_submitted = on_submitted

    def build_request(self, price: Decimal | None) -> CallRequest:
        """The mint call for ``price`` (fallback price when unknown)."""
        amount = self._fallback_price if price is None else price
        return CallRequest(
            to=self._contract_address,
            value_wei=to_wei(amount),
            data=MINT_SELECTOR,
            gas_limit=self._gas_limit,
        )

    async def submit(self, price: Decimal | None) -> GateResult:
        """Run one submission. Never raises for runtime failures."""
        state = self._state
        state.transition(
            TxPhase.PREPARING,
            message=messages.PREPARING,
            progress=PREPARING_PROGRESS,
        )

        try:
            request = self.build_request(price)
            signer = await self._session.get_signer()
        except Exception as exc:
            logger.error("mint preparation failed: %s", exc)
            state.transition(
                TxPhase.FAILED,
                message=messages.PREPARATION_FAILED.format(detail=exc),
            )
            return GateResult(GateKind.FAILED, error_kind=ErrorKind.SUBMISSION_FAILED)

        state.transition(
            TxPhase.AWAITING_APPROVAL,
            message=messages.AWAITING_APPROVAL,
            progress=AWAITING_APPROVAL_PROGRESS,
        )

        try:
            identifier = await signer.submit(request)
        except SignerError as exc:
            return self._handle_signer_error(exc, request)
        except Exception as exc:
            logger.exception("unexpected signer failure")
            return self._fail(exc)

        if not isinstance(identifier, str) or not identifier:
            return self._fail(SignerError(f"signer returned no identifier: {identifier!r}"))

        state.transition(TxPhase.SUBMITTED, message=messages.SUBMITTED, identifier=identifier)
        logger.info("submitted %s", identifier)
        if self._on_submitted is not None:
            self._on_submitted(identifier)
        return GateResult(GateKind.SUBMITTED, identifier=identifier)

    # -----------------------------------------------------------------
    # Failure paths
    # -----------------------------------------------------------------

    def _handle_signer_error(self, exc: SignerError, request: CallRequest) -> GateResult:
        kind = classify_submit_error(str(exc))

        if kind == SubmitErrorKind.USER_CANCELLED:
            logger.info("submission cancelled by user")
            self._state.reset()
            return GateResult(GateKind.CANCELLED, error_kind=ErrorKind.USER_CANCELLED)

        if kind == SubmitErrorKind.ESTIMATION_UNAVAILABLE:
            logger.warning("signer could not estimate, handing off to wallet: %s", exc)
            link = wallet_deep_link(
                self._deeplink_url,
                chain=self._chain,
                to=request.to,
                value_wei=request.value_wei,
                data=request.data,
            )
            self._state.set_message(messages.OPENING_WALLET)
            try:
                self._viewer.open_external(link)
            except Exception as open_exc:
                logger.exception("could not open wallet deep link")
                return self._fail(open_exc)
            return GateResult(
                GateKind.HANDED_OFF,
                error_kind=ErrorKind.ESTIMATION_UNAVAILABLE,
                deep_link=link,
            )

        return self._fail(exc)

    def _fail(self, exc: BaseException) -> GateResult:
        logger.error("submission failed: %s", exc)
        self._state.transition(TxPhase.FAILED, message=messages.FAILED)
        return GateResult(GateKind.FAILED, error_kind=ErrorKind.SUBMISSION_FAILED)
