"""
Tests for create_controller() / mint_once() wiring and the viewer helpers.

The wallet, aggregate and tracking endpoints each get their own
FakeTransport, so the tests also pin which endpoint serves which call.

Test plan:
- Confirmed end-to-end: wallet submit, tracking polls, aggregate refresh
- Cancelled, handed-off and failed outcomes
- BUSY when an attempt is already in flight
- Explorer URL and deep-link construction
"""

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from mint_control import messages
from mint_control.app import create_controller, mint_once
from mint_control.config import DEFAULT_TRACKING_RPC_URL, Settings
from mint_control.ledger.abi import (
    MAX_SUPPLY_SELECTOR,
    MINT_PRICE_SELECTOR,
    TOTAL_MINTED_SELECTOR,
)
from mint_control.ledger.wallet import JsonRpcWalletSession
from mint_control.viewer import explorer_tx_url, wallet_deep_link

CONTRACT = "0x" + "12" * 20
ACCOUNT = "0x" + "aa" * 20
TX_HASH = "0x" + "ab" * 32
RPC_URL = "https://rpc.example.test"
WALLET_URL = "http://127.0.0.1:8545"


def _ok(result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "result": result}


def _err(code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}}


def _word(value: int) -> str:
    return "0x" + format(value, "064x")


class FakeTransport:
    """Answers by method; eth_call answers by selector."""

    def __init__(
        self,
        responses: dict[str, dict[str, Any]],
        *,
        release: asyncio.Event | None = None,
    ) -> None:
        self._responses = responses
        self._release = release
        self.calls: list[tuple[str, str]] = []
        self.payloads: list[dict[str, Any]] = []

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        method = payload["method"]
        self.calls.append((url, method))
        self.payloads.append(payload)
        if self._release is not None and method == "eth_sendTransaction":
            await self._release.wait()
        if method == "eth_call":
            return self._responses[payload["params"][0]["data"]]
        return self._responses[method]


class FakeViewer:
    def __init__(self) -> None:
        self.urls: list[str] = []

    def open_external(self, url: str) -> None:
        self.urls.append(url)


class FakeSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


AGGREGATE = {
    TOTAL_MINTED_SELECTOR: _ok(_word(43)),
    MAX_SUPPLY_SELECTOR: _ok(_word(10000)),
    MINT_PRICE_SELECTOR: _ok(_word(2 * 10**14)),
}

TRACKING_CONFIRMED = {
    "eth_getTransactionByHash": _ok({"hash": TX_HASH, "blockNumber": "0x64"}),
    "eth_getTransactionReceipt": _ok({"status": "0x1", "blockNumber": "0x64"}),
    "eth_blockNumber": _ok("0x65"),
}


def _wallet(send: dict[str, Any], *, release: asyncio.Event | None = None) -> FakeTransport:
    return FakeTransport(
        {"eth_requestAccounts": _ok([ACCOUNT]), "eth_sendTransaction": send},
        release=release,
    )


def _build(
    wallet: FakeTransport,
    tracking: dict[str, dict[str, Any]] | None = None,
) -> tuple[Any, FakeTransport, FakeTransport, FakeViewer, FakeSleep]:
    settings = Settings(contract_address=CONTRACT, rpc_url=RPC_URL, max_retries=3)
    aggregate = FakeTransport(AGGREGATE)
    tracker = FakeTransport(tracking or TRACKING_CONFIRMED)
    viewer = FakeViewer()
    sleep = FakeSleep()
    controller = create_controller(
        settings,
        JsonRpcWalletSession(WALLET_URL, wallet),
        viewer=viewer,
        transport=aggregate,
        tracking_transport=tracker,
        sleep=sleep,
    )
    return controller, aggregate, tracker, viewer, sleep


class TestMintOnce:
    @pytest.mark.asyncio
    async def test_confirmed(self) -> None:
        controller, aggregate, tracker, _, sleep = _build(_wallet(_ok(TX_HASH)))

        summary = await mint_once(controller)

        assert summary == {
            "outcome": "CONFIRMED",
            "phase": "Confirmed",
            "message": messages.CONFIRMED,
            "identifier": TX_HASH,
            "progress": 100,
        }
        assert sleep.delays == [3.0]
        assert controller.aggregate.minted == 43
        assert controller.price == Decimal("0.0002")
        assert {url for url, _ in tracker.calls} == {DEFAULT_TRACKING_RPC_URL}
        assert {url for url, _ in aggregate.calls} == {RPC_URL}
        assert {method for _, method in aggregate.calls} == {"eth_call"}

    @pytest.mark.asyncio
    async def test_price_from_refresh(self) -> None:
        wallet = _wallet(_ok(TX_HASH))
        controller, _, _, _, _ = _build(wallet)

        await controller.refresh_aggregate()
        await mint_once(controller)

        sent = [p for p in wallet.payloads if p["method"] == "eth_sendTransaction"]
        assert sent[0]["params"][0]["value"] == hex(2 * 10**14)

    @pytest.mark.asyncio
    async def test_cancelled(self) -> None:
        controller, _, tracker, _, _ = _build(
            _wallet(_err(4001, "User rejected the request."))
        )

        summary = await mint_once(controller)

        assert summary["outcome"] == "CANCELLED"
        assert summary["phase"] == "None"
        assert summary["progress"] == 0
        assert tracker.calls == []

    @pytest.mark.asyncio
    async def test_handed_off(self) -> None:
        controller, _, tracker, viewer, _ = _build(
            _wallet(_err(-32000, "gas required exceeds allowance (0)"))
        )

        summary = await mint_once(controller)

        assert summary["outcome"] == "HANDED_OFF"
        assert summary["phase"] == "Awaiting Approval"
        assert len(viewer.urls) == 1
        assert CONTRACT in viewer.urls[0]
        assert tracker.calls == []

    @pytest.mark.asyncio
    async def test_failed_on_timeout(self) -> None:
        tracking = {"eth_getTransactionByHash": _ok(None)}
        controller, _, tracker, _, _ = _build(_wallet(_ok(TX_HASH)), tracking)

        summary = await mint_once(controller)

        assert summary["outcome"] == "FAILED"
        assert summary["message"] == messages.TIMED_OUT
        assert len(tracker.calls) == 3

    @pytest.mark.asyncio
    async def test_busy(self) -> None:
        release = asyncio.Event()
        controller, _, _, _, _ = _build(_wallet(_ok(TX_HASH), release=release))

        first = asyncio.create_task(mint_once(controller))
        await asyncio.sleep(0)

        summary = await mint_once(controller)
        assert summary["outcome"] == "BUSY"
        assert summary["phase"] == "Awaiting Approval"

        release.set()
        assert (await first)["outcome"] == "CONFIRMED"


class TestViewerHelpers:
    def test_explorer_url(self) -> None:
        assert explorer_tx_url("https://basescan.org/", TX_HASH) == (
            f"https://basescan.org/tx/{TX_HASH}"
        )

    def test_deep_link(self) -> None:
        link = wallet_deep_link(
            "https://warpcast.com/~/transactions",
            chain="base",
            to=CONTRACT,
            value_wei=10**14,
            data="0x1249c58b",
        )
        assert link == (
            "https://warpcast.com/~/transactions"
            f"?chain=base&to={CONTRACT}&value=100000000000000&data=0x1249c58b"
        )
