"""
mint-control: lifecycle controller for a single on-chain mint action.

Every attempt moves through one observable state:
- None → Preparing → Awaiting Approval → Submitted → Pending
- ending in Confirmed or Failed (or silently reset on cancellation)

Submission goes through a wallet session; confirmation is tracked on an
independent read endpoint with a bounded retry budget.
"""

__version__ = "0.1.0"

from mint_control.app import create_controller, mint_once
from mint_control.config import FALLBACK_PRICE, Settings
from mint_control.controller import MintController
from mint_control.errors import (
    ConfigError,
    ErrorKind,
    InvalidTransition,
    LedgerReadError,
    MalformedResponseError,
    MintControlError,
    SignerError,
    SubmitErrorKind,
    classify_submit_error,
)
from mint_control.gate import GateKind, GateResult, SubmissionGate
from mint_control.poller import ConfirmationPoller, PollOutcome
from mint_control.state import TransactionSnapshot, TransactionState, TxPhase
from mint_control.viewer import BrowserViewer, explorer_tx_url, wallet_deep_link

__all__ = [
    "FALLBACK_PRICE",
    "BrowserViewer",
    "ConfigError",
    "ConfirmationPoller",
    "ErrorKind",
    "GateKind",
    "GateResult",
    "InvalidTransition",
    "LedgerReadError",
    "MalformedResponseError",
    "MintControlError",
    "MintController",
    "PollOutcome",
    "Settings",
    "SignerError",
    "SubmissionGate",
    "SubmitErrorKind",
    "TransactionSnapshot",
    "TransactionState",
    "TxPhase",
    "__version__",
    "classify_submit_error",
    "create_controller",
    "explorer_tx_url",
    "mint_once",
    "wallet_deep_link",
]
