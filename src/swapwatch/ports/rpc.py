# swapwatch/ports/rpc.py
from __future__ import annotations

from typing import Protocol
from ..domain.models import CanonicalBlock, RawLog
from ..domain.value_types import Address, BlockHash, Topic0


class ChainRPC(Protocol):
    """Port defining the contract for the Ethereum JSON-RPC calls the watcher needs."""

    async def get_block_logs(
        self,
        block_hash: BlockHash,
        address: Address,
        topic0: Topic0,
    ) -> list[RawLog]:
        """Return logs of `address` matching `topic0` in the block with this exact hash, in emission order."""

    async def get_block(self, number: int) -> CanonicalBlock | None:
        """Return the canonical block at `number`, or None if the node does not have it yet."""


class BlockReader(Protocol):
    """Port for reading heads by polling: the latest block plus blocks by number."""

    async def latest_block(self) -> CanonicalBlock | None:
        """Return the current chain head."""

    async def get_block(self, number: int) -> CanonicalBlock | None:
        """Return the canonical block at `number`, or None if the node does not have it yet."""
