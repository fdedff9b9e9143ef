from __future__ import annotations

import pytest

from swapwatch.domain.models import BlockRecord, CanonicalBlock, RawLog
from swapwatch.domain.value_types import BlockHash

SWAP_T0 = bytes.fromhex("c42079f94a6350d7e6235f29174924f928cc2ac818eb64fed8004e115fbcca67")


def bh(n: int, tag: str = "a") -> BlockHash:
    """Deterministic fake block hash, e.g. bh(1) -> 0xaaaa...01."""
    return BlockHash("0x" + tag * 62 + f"{n:02x}")


def addr_word(addr_hex: str) -> bytes:
    return bytes(12) + bytes.fromhex(addr_hex.removeprefix("0x"))


def int256_word(v: int) -> bytes:
    return (v % (1 << 256)).to_bytes(32, "big")


def swap_log(sender: str, receiver: str, amount0: int, amount1: int, extra_words: int = 0) -> RawLog:
    data = int256_word(amount0) + int256_word(amount1) + bytes(32 * extra_words)
    return RawLog(topics=(SWAP_T0, addr_word(sender), addr_word(receiver)), data=data)


class FakeRPC:
    """In-memory ChainRPC: logs keyed by block hash, canonical hashes keyed by number."""
    def __init__(self) -> None:
        self.logs: dict[str, list[RawLog]] = {}
        self.canonical: dict[int, str] = {}
        self.log_calls: list[str] = []
        self.block_calls: list[int] = []

    async def get_block_logs(self, block_hash, address, topic0):
        self.log_calls.append(block_hash)
        return list(self.logs.get(block_hash, []))

    async def get_block(self, number):
        self.block_calls.append(number)
        h = self.canonical.get(number)
        return None if h is None else CanonicalBlock(number=number, hash=BlockHash(h))


class ListSink:
    def __init__(self) -> None:
        self.blocks: list[BlockRecord] = []
        self.closed = False

    async def write_block(self, block):
        self.blocks.append(block)

    async def close(self):
        self.closed = True


@pytest.fixture
def rpc() -> FakeRPC:
    return FakeRPC()


@pytest.fixture
def sink() -> ListSink:
    return ListSink()
