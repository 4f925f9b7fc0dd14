"""User-visible status texts. Never interpolate raw error detail here."""

PREPARING = "Preparing transaction..."
AWAITING_APPROVAL = "Please approve the transaction in your wallet"
OPENING_WALLET = "Opening wallet for confirmation..."
SUBMITTED = "Transaction submitted. Waiting for confirmation..."
PENDING = "Transaction is in progress..."
CONFIRMED = "NFT successfully minted! 🎉"
FAILED = "Transaction failed. Please try again."
TIMED_OUT = "Transaction timed out. Please check explorer."
UNVERIFIED = "Could not verify transaction status."

# Pre-signer failures keep the underlying message for diagnostics.
PREPARATION_FAILED = "Failed to mint: {detail}"
