from __future__ import annotations

import logging
from typing import Iterator

from ..domain.errors import ReorgDetected
from ..domain.models import BlockRecord
from ..ports.rpc import ChainRPC

log = logging.getLogger(__name__)

DEFAULT_CONFIRMATIONS = 5


class PendingBlockStore:
    """
    Blocks seen on the head stream but not yet confirmed, keyed by number.
    Iteration is always ascending. A second record for the same number
    replaces the first one wholesale.
    """
    def __init__(self) -> None:
        self._blocks: dict[int, BlockRecord] = {}

    def put(self, rec: BlockRecord) -> None:
        prev = self._blocks.get(rec.number)
        if prev is not None and prev.hash != rec.hash:
            log.info("Block %d re-observed with new hash %s (was %s)", rec.number, rec.hash, prev.hash)
        self._blocks[rec.number] = rec

    def get(self, number: int) -> BlockRecord | None:
        return self._blocks.get(number)

    def pop(self, number: int) -> BlockRecord:
        return self._blocks.pop(number)

    def at_or_below(self, cutoff: int) -> list[BlockRecord]:
        return [self._blocks[n] for n in sorted(self._blocks) if n <= cutoff]

    def numbers(self) -> list[int]:
        return sorted(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, number: object) -> bool:
        return number in self._blocks

    def __iter__(self) -> Iterator[BlockRecord]:
        return iter([self._blocks[n] for n in sorted(self._blocks)])


async def check_confirmed_blocks(
    rpc: ChainRPC,
    store: PendingBlockStore,
    head_number: int,
    confirmations: int = DEFAULT_CONFIRMATIONS,
) -> list[BlockRecord]:
    """
    Re-validate every buffered block at least `confirmations` deep against the
    canonical chain and release the ones that still match.

    Returns the confirmed records in ascending order; they are removed from
    the store. A candidate the node cannot serve yet stays pending. A hash
    mismatch raises ReorgDetected and releases nothing from this sweep.
    """
    cutoff = head_number - confirmations
    confirmed: list[int] = []
    for rec in store.at_or_below(cutoff):
        canonical = await rpc.get_block(rec.number)
        if canonical is None:
            log.debug("Block %d not served by node yet; keeping it pending", rec.number)
            continue
        if canonical.hash != rec.hash:
            raise ReorgDetected(rec.number, rec.hash, canonical.hash)
        confirmed.append(rec.number)
    return [store.pop(n) for n in confirmed]
