"""
Tests for submit-error classification and the exception hierarchy.

Test plan:
- Cancellation texts (EIP-1193 4001, wallet-specific variants) → USER_CANCELLED
- Estimation/visibility texts → ESTIMATION_UNAVAILABLE
- Cancellation wins when both patterns appear
- Unknown, empty and None text → OTHER
- Exception hierarchy and attributes
"""

import pytest

from mint_control.errors import (
    ConfigError,
    InvalidTransition,
    LedgerReadError,
    MalformedResponseError,
    MintControlError,
    SignerError,
    SubmitErrorKind,
    classify_submit_error,
)


class TestCancellation:
    @pytest.mark.parametrize(
        "text",
        [
            "User rejected the request.",
            "MetaMask Tx Signature: User denied transaction signature.",
            "Request rejected by wallet",
            "Transaction was cancelled",
            "user canceled",
            "USER CANCELLED THE ACTION",
        ],
    )
    def test_cancellation_texts(self, text: str) -> None:
        assert classify_submit_error(text) == SubmitErrorKind.USER_CANCELLED

    def test_cancellation_checked_before_estimation(self) -> None:
        text = "User rejected the request during eth_estimateGas"
        assert classify_submit_error(text) == SubmitErrorKind.USER_CANCELLED


class TestEstimation:
    @pytest.mark.parametrize(
        "text",
        [
            "execution reverted: eth_estimateGas failed",
            "Cannot estimate gas; transaction may fail",
            "gas required exceeds allowance (300000)",
            "Method eth_getTransactionReceipt not supported by this provider",
        ],
    )
    def test_estimation_texts(self, text: str) -> None:
        assert classify_submit_error(text) == SubmitErrorKind.ESTIMATION_UNAVAILABLE


class TestOther:
    @pytest.mark.parametrize(
        "text",
        [
            "insufficient funds for gas * price + value",
            "nonce too low",
            "Internal JSON-RPC error.",
        ],
    )
    def test_unknown_texts(self, text: str) -> None:
        assert classify_submit_error(text) == SubmitErrorKind.OTHER

    def test_empty_text(self) -> None:
        assert classify_submit_error("") == SubmitErrorKind.OTHER

    def test_none_text(self) -> None:
        assert classify_submit_error(None) == SubmitErrorKind.OTHER


class TestExceptions:
    def test_all_derive_from_base(self) -> None:
        for cls in (SignerError, LedgerReadError, ConfigError, InvalidTransition):
            assert issubclass(cls, MintControlError)

    def test_signer_error_code(self) -> None:
        err = SignerError("User rejected the request.", code=4001)
        assert err.code == 4001
        assert str(err) == "User rejected the request."

    def test_signer_error_code_optional(self) -> None:
        assert SignerError("boom").code is None

    def test_ledger_read_error_details_default(self) -> None:
        err = LedgerReadError("down", code="CONNECTION_FAILED")
        assert err.code == "CONNECTION_FAILED"
        assert err.details == {}

    def test_malformed_response_code(self) -> None:
        err = MalformedResponseError("bad", details={"path": ["result"]})
        assert isinstance(err, LedgerReadError)
        assert err.code == "MALFORMED_RESPONSE"
        assert err.details == {"path": ["result"]}
