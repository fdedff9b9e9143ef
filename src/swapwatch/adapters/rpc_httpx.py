from __future__ import annotations
import asyncio, httpx
from typing import Any
from ..domain.errors import FetchError
from ..domain.models import CanonicalBlock, RawLog
from ..domain.value_types import Address, BlockHash, Topic0
from ..ports.rpc import BlockReader, ChainRPC
from .jsonrpc import normalize_topic0, reply_result, to_block, to_hex_block, to_raw_logs

class HttpxRPC(ChainRPC, BlockReader):
    def __init__(self, rpc_url: str, timeout_s: int = 20, max_conn: int = 8,
                 client: httpx.AsyncClient | None = None) -> None:
        self.rpc_url = rpc_url
        self.client = client or httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max_conn//2),
        )
        self._id = 0

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _call(self, method: str, params: list[Any]) -> Any:
        self._id += 1
        payload = {"jsonrpc":"2.0","id":self._id,"method":method,"params":params}
        # retry on 429 with simple backoff
        for attempt in range(3):
            try:
                r = await self.client.post(self.rpc_url, json=payload)
                if r.status_code == 429:
                    ra = r.headers.get("Retry-After")
                    delay = max(1.0, float(ra)) if ra and ra.isdigit() else (1.0 * (2**attempt))
                    await asyncio.sleep(delay); continue
                r.raise_for_status()
                data = r.json()
            except (httpx.HTTPError, ValueError) as e:
                raise FetchError(f"{method} failed: {e}") from e
            return reply_result(method, data)
        raise FetchError(f"Retries exhausted for {method}")

    async def latest_block(self) -> CanonicalBlock | None:
        return to_block(await self._call("eth_getBlockByNumber", ["latest", False]))

    async def get_block(self, number: int) -> CanonicalBlock | None:
        return to_block(await self._call("eth_getBlockByNumber", [to_hex_block(number), False]))

    async def get_block_logs(self, block_hash: BlockHash, address: Address, topic0: Topic0) -> list[RawLog]:
        res = await self._call("eth_getLogs", [{
            "blockHash": str(block_hash),
            "address": str(address),
            "topics": [normalize_topic0(topic0)],
        }])
        return to_raw_logs(res)
