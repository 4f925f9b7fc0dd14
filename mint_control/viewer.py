"""External viewer hand-off: explorer links and wallet deep links."""

from __future__ import annotations

import logging
import webbrowser
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def explorer_tx_url(explorer_url: str, identifier: str) -> str:
    """Public explorer page for a transaction hash."""
    return f"{explorer_url.rstrip('/')}/tx/{identifier}"


def wallet_deep_link(
    base_url: str,
    *,
    chain: str,
    to: str,
    value_wei: int,
    data: str,
) -> str:
    """Deep link asking an external wallet to complete a contract call."""
    query = urlencode(
        {"chain": chain, "to": to, "value": str(value_wei), "data": data}
    )
    return f"{base_url}?{query}"


class BrowserViewer:
    """ExternalViewer that opens URLs in the default web browser."""

    def open_external(self, url: str) -> None:
        logger.info("opening %s", url)
        if not webbrowser.open(url):
            logger.warning("no browser available to open %s", url)
