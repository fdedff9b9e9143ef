# swapwatch/ports/storage.py
from __future__ import annotations

from typing import Protocol
from ..domain.models import BlockRecord


class ConfirmedSink(Protocol):
    """Port for consumers of confirmed blocks (console report, Parquet shards, ...)."""

    async def write_block(self, block: BlockRecord) -> None:
        """Consume one confirmed block. Called in ascending block-number order."""

    async def close(self) -> None:
        """Flush anything buffered."""
