import asyncio, logging
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from ..adapters.console_report import ConsoleReporter
from ..adapters.heads_polling import PollingHeads
from ..adapters.parquet_sink import ParquetSwapSink
from ..adapters.rpc_httpx import HttpxRPC
from ..adapters.ws_chain import WebsocketChain
from ..application.pipeline import SwapPipeline
from ..config import POOL_ENV, RPC_ENV, SWAP_SIGNATURE, Settings
from ..domain.errors import ConfigMissing, FetchError, ReorgDetected
from ..domain.models import AssetMeta

app = typer.Typer(add_completion=False)
err_console = Console(stderr=True)
log = logging.getLogger("swapwatch")

EXIT_FETCH = 1
EXIT_REORG = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


async def _watch(settings: Settings) -> int:
    sinks = [ConsoleReporter(settings.asset0, settings.asset1)]
    if settings.parquet_out:
        sinks.append(ParquetSwapSink(settings.parquet_out))

    if settings.is_websocket:
        chain = WebsocketChain(settings.rpc_url)
        rpc, heads = chain, chain
    else:
        rpc = HttpxRPC(settings.rpc_url)
        heads = PollingHeads(rpc, settings.poll_interval, depth=settings.confirmations)

    pipeline = SwapPipeline(
        rpc=rpc, sinks=sinks,
        address=settings.pool, topic0=settings.topic0,
        confirmations=settings.confirmations,
    )
    log.info("Watching %s for %s (%d confirmations)", settings.pool, settings.event_signature, settings.confirmations)
    try:
        return await pipeline.run(heads.headers())
    finally:
        await rpc.aclose()


@app.command()
def watch(
    rpc: Optional[str] = typer.Option(None, "--rpc", envvar=RPC_ENV, help="Node endpoint (ws://, wss://, http://, https://)"),
    pool: Optional[str] = typer.Option(None, "--pool", envvar=POOL_ENV, help="Pool contract address (hex, 0x optional)"),
    event_signature: str = typer.Option(SWAP_SIGNATURE, "--event-signature", help="Event whose logs are watched"),
    confirmations: int = typer.Option(5, "--confirmations", help="Blocks on top before a block is reported"),
    asset0_symbol: str = typer.Option("DAI", "--asset0-symbol"),
    asset0_decimals: int = typer.Option(18, "--asset0-decimals"),
    asset1_symbol: str = typer.Option("USDC", "--asset1-symbol"),
    asset1_decimals: int = typer.Option(6, "--asset1-decimals"),
    poll_interval: float = typer.Option(2.0, "--poll-interval", help="Seconds between head polls (HTTP endpoints)"),
    parquet_out: Optional[str] = typer.Option(None, "--parquet-out", help="Also write confirmed swaps as Parquet shards here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Report swaps of one pool once their blocks are confirmed; stop on a deep reorg."""
    _setup_logging(verbose)
    try:
        settings = Settings.build(
            rpc, pool,
            event_signature=event_signature,
            confirmations=confirmations,
            asset0=AssetMeta(asset0_symbol, asset0_decimals),
            asset1=AssetMeta(asset1_symbol, asset1_decimals),
            poll_interval=poll_interval,
            parquet_out=parquet_out,
        )
    except ConfigMissing as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=EXIT_FETCH)

    try:
        confirmed = asyncio.run(_watch(settings))
    except ReorgDetected as e:
        log.error("%s Reorg depth greater than %d detected.", e, settings.confirmations)
        raise typer.Exit(code=EXIT_REORG)
    except FetchError as e:
        log.error("Fetch failed: %s", e)
        raise typer.Exit(code=EXIT_FETCH)
    log.info("Done: %d blocks confirmed", confirmed)


def main() -> None:
    load_dotenv()
    app()

if __name__ == "__main__":
    main()
