from __future__ import annotations

import logging
from typing import AsyncIterator, Sequence

from ..domain.decoding import decode_swap_log
from ..domain.models import BlockHeader, BlockRecord
from ..domain.value_types import Address, Topic0
from ..ports.rpc import ChainRPC
from ..ports.storage import ConfirmedSink
from .confirmation import DEFAULT_CONFIRMATIONS, PendingBlockStore, check_confirmed_blocks

log = logging.getLogger(__name__)


class SwapPipeline:
    """
    Header stream -> per-block swap logs -> pending store -> confirmation
    sweep -> sinks. One header is handled completely before the next one
    is read, so the store never sees concurrent access.
    """
    def __init__(
        self,
        *,
        rpc: ChainRPC,
        sinks: Sequence[ConfirmedSink],
        address: Address,
        topic0: Topic0,
        confirmations: int = DEFAULT_CONFIRMATIONS,
        store: PendingBlockStore | None = None,
    ) -> None:
        self.rpc = rpc
        self.sinks = list(sinks)
        self.address = address
        self.topic0 = topic0
        self.confirmations = confirmations
        self.store = store if store is not None else PendingBlockStore()

    async def handle_header(self, header: BlockHeader) -> list[BlockRecord]:
        if not header.complete:
            log.warning("Skipping incomplete header (number=%s, hash=%s)", header.number, header.hash)
            return []

        raw_logs = await self.rpc.get_block_logs(header.hash, self.address, self.topic0)
        events = tuple(evt for evt in map(decode_swap_log, raw_logs) if evt is not None)
        log.debug("Block %d (%s): %d logs, %d swaps", header.number, header.hash, len(raw_logs), len(events))
        self.store.put(BlockRecord(number=header.number, hash=header.hash, events=events))

        released = await check_confirmed_blocks(self.rpc, self.store, header.number, self.confirmations)
        for block in released:
            for sink in self.sinks:
                await sink.write_block(block)
        return released

    async def run(self, headers: AsyncIterator[BlockHeader]) -> int:
        """Consume the stream until it ends; returns the number of blocks confirmed."""
        total = 0
        try:
            async for header in headers:
                total += len(await self.handle_header(header))
        finally:
            for sink in self.sinks:
                await sink.close()
        log.info("Head stream ended after %d confirmed blocks (%d still pending)", total, len(self.store))
        return total
