from __future__ import annotations

import json
import logging
from collections import deque
from typing import Any, AsyncIterator

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from ..domain.errors import FetchError
from ..domain.models import BlockHeader, CanonicalBlock, RawLog
from ..domain.value_types import Address, BlockHash, Topic0
from ..ports.heads import HeadSource
from ..ports.rpc import ChainRPC
from .jsonrpc import normalize_topic0, reply_result, to_block, to_hex_block, to_raw_logs

log = logging.getLogger(__name__)

WS_PING_INTERVAL = 20
WS_PING_TIMEOUT = 30
WS_CLOSE_TIMEOUT = 10
WS_MAX_SIZE = 10 * 1024 * 1024


def _hex_int(v: Any) -> int | None:
    if v is None:
        return None
    try:
        return int(v, 16) if isinstance(v, str) else int(v)
    except ValueError:
        return None


def parse_new_head(result: dict[str, Any]) -> BlockHeader:
    """newHeads payload -> BlockHeader; absent or unparsable fields become None."""
    h = result.get("hash")
    return BlockHeader(
        number=_hex_int(result.get("number")),
        hash=BlockHash(h.lower()) if isinstance(h, str) and h else None,
    )


class WebsocketChain(ChainRPC, HeadSource):
    """
    One websocket carrying both the newHeads subscription and the request /
    response calls. The pipeline is strictly sequential, so while a call is
    waiting for its reply any head notification that arrives is parked and
    handed out by `headers()` afterwards.
    """
    def __init__(self, ws_url: str, ws: Any = None) -> None:
        self.ws_url = ws_url
        self.ws = ws
        self._id = 0
        self._parked: deque[dict[str, Any]] = deque()

    async def connect(self) -> None:
        if self.ws is not None:
            return
        log.info("Connecting to %s", self.ws_url)
        try:
            self.ws = await websockets.connect(
                self.ws_url,
                ping_interval=WS_PING_INTERVAL,
                ping_timeout=WS_PING_TIMEOUT,
                close_timeout=WS_CLOSE_TIMEOUT,
                max_size=WS_MAX_SIZE,
            )
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise FetchError(f"Failed to connect to Ethereum node via WebSocket: {e}") from e

    async def aclose(self) -> None:
        if self.ws is not None:
            await self.ws.close()

    async def _recv(self) -> dict[str, Any]:
        raw = await self.ws.recv()
        try:
            msg = json.loads(raw)
        except json.JSONDecodeError as e:
            raise FetchError(f"Invalid JSON from node: {e}") from e
        if not isinstance(msg, dict):
            raise FetchError(f"Expected a JSON-RPC object from node, got {type(msg).__name__}")
        return msg

    async def _call(self, method: str, params: list[Any]) -> Any:
        await self.connect()
        self._id += 1
        req_id = self._id
        try:
            await self.ws.send(json.dumps({"jsonrpc": "2.0", "id": req_id, "method": method, "params": params}))
            while True:
                msg = await self._recv()
                if msg.get("method") == "eth_subscription":
                    self._parked.append(msg)
                    continue
                if msg.get("id") != req_id:
                    log.debug("Ignoring unexpected message: %s", msg)
                    continue
                break
        except ConnectionClosed as e:
            raise FetchError(f"{method} failed, connection closed: {e}") from e
        return reply_result(method, msg)

    async def get_block(self, number: int) -> CanonicalBlock | None:
        return to_block(await self._call("eth_getBlockByNumber", [to_hex_block(number), False]))

    async def get_block_logs(self, block_hash: BlockHash, address: Address, topic0: Topic0) -> list[RawLog]:
        res = await self._call("eth_getLogs", [{
            "blockHash": str(block_hash),
            "address": str(address),
            "topics": [normalize_topic0(topic0)],
        }])
        return to_raw_logs(res)

    async def headers(self) -> AsyncIterator[BlockHeader]:
        sub_id = await self._call("eth_subscribe", ["newHeads"])
        log.info("Subscribed to newHeads (subscription %s)", sub_id)
        while True:
            if self._parked:
                msg = self._parked.popleft()
            else:
                try:
                    msg = await self._recv()
                except ConnectionClosedOK:
                    log.info("Node closed the head subscription")
                    return
                except ConnectionClosed as e:
                    raise FetchError(f"Head subscription lost: {e}") from e
            if msg.get("method") != "eth_subscription":
                continue
            params = msg.get("params") or {}
            if params.get("subscription") != sub_id:
                continue
            yield parse_new_head(params.get("result") or {})
