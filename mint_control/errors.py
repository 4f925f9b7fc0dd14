"""
Error taxonomy and submit-error classification.

Wallets report failures as free text. The only reliable signal is a
handful of substrings, so classification is a coarse, pure function
from error text to one of three buckets. Keep the pattern lists small
and conservative; unknown text is always OTHER.

Exception classes:
    - MintControlError — base for everything raised by this package.
    - SignerError — the wallet/signer refused or failed the submission.
    - LedgerReadError — the read endpoint failed (network, HTTP, RPC).
    - MalformedResponseError — the read endpoint answered with garbage.
    - ConfigError — missing or invalid configuration.
    - InvalidTransition — illegal TransactionState transition.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


# =========================================================================
# Exceptions
# =========================================================================


class MintControlError(Exception):
    """Base class for mint-control errors."""


class SignerError(MintControlError):
    """Raised by a signer when a submission does not produce an identifier.

    Attributes:
        code: Optional machine code from the wallet (e.g. EIP-1193 4001).
    """

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class LedgerReadError(MintControlError):
    """Raised when the read endpoint cannot answer a query.

    Attributes:
        code: One of TIMEOUT, CONNECTION_FAILED, HTTP_ERROR,
            INVALID_JSON, RPC_ERROR, MALFORMED_RESPONSE.
        details: Diagnostic context (url, status code, rpc error).
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class MalformedResponseError(LedgerReadError):
    """The endpoint answered, but not with a valid JSON-RPC envelope."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="MALFORMED_RESPONSE", details=details)


class ConfigError(MintControlError):
    """Missing or invalid configuration value."""


class InvalidTransition(MintControlError):
    """A phase transition not allowed by the lifecycle table."""


# =========================================================================
# Taxonomy
# =========================================================================


class SubmitErrorKind(StrEnum):
    """Bucket for an immediate submission failure."""

    USER_CANCELLED = "USER_CANCELLED"
    ESTIMATION_UNAVAILABLE = "ESTIMATION_UNAVAILABLE"
    OTHER = "OTHER"


class ErrorKind(StrEnum):
    """Failure taxonomy used in logs and outcome summaries."""

    USER_CANCELLED = "USER_CANCELLED"
    ESTIMATION_UNAVAILABLE = "ESTIMATION_UNAVAILABLE"
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    CONFIRMATION_TIMEOUT = "CONFIRMATION_TIMEOUT"
    CONFIRMATION_TRANSIENT = "CONFIRMATION_TRANSIENT"
    LEDGER_OUTCOME_FAILURE = "LEDGER_OUTCOME_FAILURE"


# ---------------------------------------------------------------------------
# Pattern lists (lowercase; matched as substrings of lowercased text)
# ---------------------------------------------------------------------------

CANCELLATION_PATTERNS: tuple[str, ...] = (
    "user rejected",
    "user denied",
    "rejected",
    "denied",
    "cancelled",
    "canceled",
    "user cancel",
)

ESTIMATION_PATTERNS: tuple[str, ...] = (
    "estimategas",
    "cannot estimate gas",
    "gas required exceeds",
    "eth_gettransactionreceipt",
)


def classify_submit_error(text: str | None) -> SubmitErrorKind:
    """Map wallet error text to a SubmitErrorKind.

    Cancellation is checked first: a user who rejects the estimation
    prompt has still cancelled.

    Args:
        text: Error text as reported by the signer. None or empty
            text is OTHER.

    Returns:
        USER_CANCELLED, ESTIMATION_UNAVAILABLE or OTHER.
    """
    if not text:
        return SubmitErrorKind.OTHER

    lowered = text.lower()

    if any(pattern in lowered for pattern in CANCELLATION_PATTERNS):
        return SubmitErrorKind.USER_CANCELLED

    if any(pattern in lowered for pattern in ESTIMATION_PATTERNS):
        return SubmitErrorKind.ESTIMATION_UNAVAILABLE

    return SubmitErrorKind.OTHER
