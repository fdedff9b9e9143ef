from __future__ import annotations
import glob, logging, os, pyarrow as pa, pyarrow.parquet as pq

from ..application.reporting import classify_direction
from ..domain.models import BlockRecord
from ..ports.storage import ConfirmedSink

log = logging.getLogger(__name__)

CONFIRMED_SCHEMA = pa.schema([
    pa.field("block_number", pa.int64()),
    pa.field("block_hash",   pa.large_string()),
    pa.field("event_index",  pa.int32()),          # position within the block's swaps
    pa.field("sender",       pa.large_string()),
    pa.field("receiver",     pa.large_string()),
    pa.field("amount0",      pa.large_string()),   # big ints as strings
    pa.field("amount1",      pa.large_string()),
    pa.field("direction",    pa.large_string()),
])

COLS = [f.name for f in CONFIRMED_SCHEMA]

def empty_columns() -> dict[str, list]:
    return {name: [] for name in COLS}


class ParquetSwapSink(ConfirmedSink):
    """
    Buffers confirmed swaps and writes them to numbered shards under
    `<out_dir>/shards`, sorted by (block_number, event_index).
    """
    def __init__(self, out_dir: str, rows_per_shard: int = 10_000, codec: str = "zstd") -> None:
        self.shards_dir = os.path.join(out_dir, "shards")
        os.makedirs(self.shards_dir, exist_ok=True)
        self.rows_per_shard = rows_per_shard
        self.codec = codec
        self._buf = empty_columns()
        self._shard_idx = self.next_shard_index()
        self.written: list[str] = []

    def next_shard_index(self) -> int:
        existing = sorted(glob.glob(os.path.join(self.shards_dir, "shard_*.parquet")))
        if not existing:
            return 1
        last = os.path.basename(existing[-1]).split("_")[1].split(".")[0]
        return int(last) + 1

    def buffered(self) -> int:
        return len(self._buf["block_number"])

    async def write_block(self, block: BlockRecord) -> None:
        for i, evt in enumerate(block.events):
            self._buf["block_number"].append(block.number)
            self._buf["block_hash"].append(block.hash)
            self._buf["event_index"].append(i)
            self._buf["sender"].append(evt.sender)
            self._buf["receiver"].append(evt.receiver)
            self._buf["amount0"].append(str(evt.amount0))
            self._buf["amount1"].append(str(evt.amount1))
            self._buf["direction"].append(classify_direction(evt.amount0, evt.amount1))
        if self.buffered() >= self.rows_per_shard:
            self._flush()

    async def close(self) -> None:
        self._flush()

    def _flush(self) -> None:
        if self.buffered() == 0:
            return
        arrays = {k: pa.array(v, type=CONFIRMED_SCHEMA.field(k).type) for k, v in self._buf.items()}
        table = pa.Table.from_pydict(arrays, schema=CONFIRMED_SCHEMA)
        table = table.sort_by([("block_number", "ascending"), ("event_index", "ascending")])
        out_path = os.path.join(self.shards_dir, f"shard_{self._shard_idx:05d}.parquet")
        tmp = out_path + ".tmp"
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, out_path)
        log.info("Wrote %d confirmed swaps to %s", table.num_rows, out_path)
        self.written.append(out_path)
        self._buf = empty_columns()
        self._shard_idx += 1
