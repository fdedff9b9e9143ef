from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from ..application.confirmation import DEFAULT_CONFIRMATIONS
from ..domain.models import BlockHeader
from ..domain.value_types import BlockHash
from ..ports.heads import HeadSource
from ..ports.rpc import BlockReader

log = logging.getLogger(__name__)


class PollingHeads(HeadSource):
    """
    Head stream for plain HTTP endpoints: polls the latest block and yields
    every number it has not reported yet, gaps included, in ascending order.

    Whenever the head changes, the last `depth` heights below it are fetched
    again and any height whose hash differs from the one already yielded is
    yielded again, so shallow reorgs reach the pending store as replacements.
    """
    def __init__(self, rpc: BlockReader, poll_interval: float = 2.0, depth: int = DEFAULT_CONFIRMATIONS) -> None:
        self.rpc = rpc
        self.poll_interval = poll_interval
        self.depth = depth
        self._seen: dict[int, BlockHash] = {}

    async def headers(self) -> AsyncIterator[BlockHeader]:
        last: int | None = None
        while True:
            head = await self.rpc.latest_block()
            if head is not None and self._seen.get(head.number) != head.hash:
                start = head.number if last is None else max(0, min(last + 1, head.number - self.depth))
                for n in range(start, head.number):
                    blk = await self.rpc.get_block(n)
                    if blk is None:
                        if last is None or n > last:
                            log.warning("Block %d vanished while catching up", n)
                            yield BlockHeader(number=n, hash=None)
                        continue
                    if self._seen.get(n) == blk.hash:
                        continue
                    if last is not None and n <= last and n not in self._seen:
                        continue   # predates the first head we reported
                    if n in self._seen:
                        log.info("Block %d replaced: %s -> %s", n, self._seen[n], blk.hash)
                    self._seen[n] = blk.hash
                    yield BlockHeader(number=blk.number, hash=blk.hash)
                self._seen[head.number] = head.hash
                yield BlockHeader(number=head.number, hash=head.hash)
                last = head.number if last is None else max(last, head.number)
                for n in [n for n in self._seen if n < head.number - self.depth]:
                    del self._seen[n]
            await asyncio.sleep(self.poll_interval)
