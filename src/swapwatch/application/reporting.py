from __future__ import annotations

from ..domain.amounts import render_amount
from ..domain.models import AssetMeta, BlockRecord, SwapEvent
from ..domain.value_types import Direction

DAI  = AssetMeta("DAI", 18)
USDC = AssetMeta("USDC", 6)


def classify_direction(amount0: int, amount1: int) -> Direction:
    # pool's point of view: positive = paid in, negative = paid out
    if amount0 > 0 and amount1 < 0:
        return "asset0→asset1"
    if amount0 < 0 and amount1 > 0:
        return "asset1→asset0"
    return "Unknown"


def direction_label(direction: Direction, asset0: AssetMeta, asset1: AssetMeta) -> str:
    if direction == "asset0→asset1":
        return f"{asset0.symbol} -> {asset1.symbol}"
    if direction == "asset1→asset0":
        return f"{asset1.symbol} -> {asset0.symbol}"
    return "Unknown"


def format_swap_line(number: int, evt: SwapEvent, asset0: AssetMeta, asset1: AssetMeta) -> str:
    label = direction_label(classify_direction(evt.amount0, evt.amount1), asset0, asset1)
    a0 = render_amount(evt.amount0, asset0.decimals)
    a1 = render_amount(evt.amount1, asset1.decimals)
    return (
        f"Block {number} | Swap {label}: sender: {evt.sender}, receiver: {evt.receiver}, "
        f"amount0: {a0} {asset0.symbol}, amount1: {a1} {asset1.symbol}"
    )


def format_block(block: BlockRecord, asset0: AssetMeta = DAI, asset1: AssetMeta = USDC) -> list[str]:
    """Report lines for one confirmed block: one per swap, or a single 'no swaps' line."""
    if not block.events:
        return [f"Block {block.number}: No swap events"]
    return [format_swap_line(block.number, evt, asset0, asset1) for evt in block.events]
