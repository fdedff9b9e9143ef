import asyncio
import json

import httpx
import pytest

from swapwatch.adapters import rpc_httpx
from swapwatch.adapters.rpc_httpx import HttpxRPC
from swapwatch.domain.errors import FetchError
from swapwatch.domain.value_types import Address, BlockHash, Topic0

from conftest import SWAP_T0, addr_word, bh, int256_word

POOL = Address("0x" + "99" * 20)
T0 = Topic0("0x" + SWAP_T0.hex())


def _rpc(handler) -> tuple[HttpxRPC, list[dict]]:
    seen: list[dict] = []

    def wrapped(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(wrapped))
    return HttpxRPC("http://node", client=client), seen


def _ok(result):
    return lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


def test_get_block_logs_is_scoped_by_block_hash():
    data = int256_word(5) + int256_word(-5)
    rpc, seen = _rpc(_ok([{
        "topics": ["0x" + SWAP_T0.hex(), "0x" + addr_word("0x" + "11" * 20).hex(), "0x" + addr_word("0x" + "22" * 20).hex()],
        "data": "0x" + data.hex(),
    }]))

    logs = asyncio.run(rpc.get_block_logs(bh(9), POOL, T0))

    [req] = seen
    assert req["method"] == "eth_getLogs"
    assert req["params"] == [{"blockHash": bh(9), "address": POOL, "topics": [T0]}]
    [raw] = logs
    assert raw.topics[0] == SWAP_T0
    assert raw.data == data


def test_get_block_by_number():
    rpc, seen = _rpc(_ok({"number": "0x1b4", "hash": "0xABC" + "0" * 61}))
    blk = asyncio.run(rpc.get_block(436))
    assert seen[0]["params"] == ["0x1b4", False]
    assert blk.number == 436
    assert blk.hash == BlockHash("0xabc" + "0" * 61)


def test_missing_block_is_none():
    rpc, _ = _rpc(_ok(None))
    assert asyncio.run(rpc.get_block(10**9)) is None


def test_rpc_error_object_raises_fetch_error():
    rpc, _ = _rpc(lambda r: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1,
                                                      "error": {"code": -32000, "message": "boom"}}))
    with pytest.raises(FetchError, match="boom"):
        asyncio.run(rpc.get_block(1))


def test_http_error_raises_fetch_error():
    rpc, _ = _rpc(lambda r: httpx.Response(502, text="bad gateway"))
    with pytest.raises(FetchError):
        asyncio.run(rpc.get_block_logs(bh(1), POOL, T0))


def test_transport_error_raises_fetch_error():
    def boom(request):
        raise httpx.ConnectError("refused", request=request)
    rpc, _ = _rpc(boom)
    with pytest.raises(FetchError):
        asyncio.run(rpc.get_block(1))


def test_rate_limit_is_retried(monkeypatch):
    delays: list[float] = []

    async def no_sleep(d):
        delays.append(d)
    monkeypatch.setattr(rpc_httpx.asyncio, "sleep", no_sleep)

    replies = iter([
        httpx.Response(429, headers={"Retry-After": "3"}),
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"number": "0x1", "hash": bh(1)}}),
    ])
    rpc, seen = _rpc(lambda r: next(replies))
    assert asyncio.run(rpc.get_block(1)).hash == bh(1)
    assert delays == [3.0]
    assert len(seen) == 2


def test_rate_limit_exhausted(monkeypatch):
    async def no_sleep(d):
        return None
    monkeypatch.setattr(rpc_httpx.asyncio, "sleep", no_sleep)
    rpc, seen = _rpc(lambda r: httpx.Response(429))
    with pytest.raises(FetchError, match="Retries exhausted"):
        asyncio.run(rpc.get_block(1))
    assert len(seen) == 3


def test_invalid_topic0_is_a_fetch_error():
    rpc, seen = _rpc(_ok([]))
    with pytest.raises(FetchError, match="Invalid topic0"):
        asyncio.run(rpc.get_block_logs(bh(1), POOL, Topic0("0x1234")))
    assert seen == []


@pytest.mark.parametrize("body", [[], ["not", "an", "object"], "0x1", 7])
def test_non_object_reply_is_a_fetch_error(body):
    rpc, _ = _rpc(lambda r: httpx.Response(200, json=body))
    with pytest.raises(FetchError, match="expected a JSON-RPC object"):
        asyncio.run(rpc.get_block(1))
