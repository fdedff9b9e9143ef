import pytest
from eth_utils import to_checksum_address

from swapwatch.application.reporting import DAI, USDC, classify_direction, format_block
from swapwatch.domain.models import AssetMeta, BlockRecord, SwapEvent

from conftest import bh

S = to_checksum_address("0x" + "11" * 20)
R = to_checksum_address("0x" + "22" * 20)


@pytest.mark.parametrize("a0,a1,expected", [
    (100, -50, "asset0→asset1"),
    (-50, 100, "asset1→asset0"),
    (0, 0, "Unknown"),
    (100, 50, "Unknown"),
    (-1, -1, "Unknown"),
    (0, -5, "Unknown"),
])
def test_classify_direction(a0, a1, expected):
    assert classify_direction(a0, a1) == expected


def test_empty_block_line():
    assert format_block(BlockRecord(number=42, hash=bh(42))) == ["Block 42: No swap events"]


def test_one_line_per_event_in_emission_order():
    block = BlockRecord(number=7, hash=bh(7), events=(
        SwapEvent(S, R, 100 * 10**18, -50 * 10**6),
        SwapEvent(R, S, -15 * 10**17, 2_500_000),
        SwapEvent(S, S, 0, 0),
    ))
    assert format_block(block, DAI, USDC) == [
        f"Block 7 | Swap DAI -> USDC: sender: {S}, receiver: {R}, amount0: 100 DAI, amount1: -50 USDC",
        f"Block 7 | Swap USDC -> DAI: sender: {R}, receiver: {S}, amount0: -1.5 DAI, amount1: 2.5 USDC",
        f"Block 7 | Swap Unknown: sender: {S}, receiver: {S}, amount0: 0 DAI, amount1: 0 USDC",
    ]


def test_uses_each_assets_own_decimals():
    weth, usdt = AssetMeta("WETH", 18), AssetMeta("USDT", 6)
    block = BlockRecord(number=1, hash=bh(1), events=(SwapEvent(S, R, 10**18, -3_000_000_000),))
    [line] = format_block(block, weth, usdt)
    assert line.endswith("amount0: 1 WETH, amount1: -3000 USDT")
