from __future__ import annotations
from dataclasses import dataclass
from .value_types import BlockHash

@dataclass(slots=True, frozen=True)
class RawLog:
    topics: tuple[bytes, ...]          # 32-byte words, topic0 first
    data: bytes

@dataclass(slots=True, frozen=True)
class SwapEvent:
    sender: str                        # checksum address
    receiver: str                      # checksum address
    amount0: int                       # signed 256-bit range
    amount1: int

@dataclass(slots=True, frozen=True)
class BlockRecord:
    number: int
    hash: BlockHash                    # as observed when the logs were fetched
    events: tuple[SwapEvent, ...] = ()

@dataclass(slots=True, frozen=True)
class BlockHeader:
    number: int | None
    hash: BlockHash | None

    @property
    def complete(self) -> bool:
        return self.number is not None and self.hash is not None

@dataclass(slots=True, frozen=True)
class CanonicalBlock:
    number: int
    hash: BlockHash

@dataclass(slots=True, frozen=True)
class AssetMeta:
    symbol: str
    decimals: int
