from __future__ import annotations

import typer

from ..application.reporting import DAI, USDC, format_block
from ..domain.models import AssetMeta, BlockRecord
from ..ports.storage import ConfirmedSink


class ConsoleReporter(ConfirmedSink):
    """Prints each confirmed block's report lines to stdout."""
    def __init__(self, asset0: AssetMeta = DAI, asset1: AssetMeta = USDC) -> None:
        self.asset0 = asset0
        self.asset1 = asset1

    async def write_block(self, block: BlockRecord) -> None:
        for line in format_block(block, self.asset0, self.asset1):
            typer.echo(line)

    async def close(self) -> None:
        return None
