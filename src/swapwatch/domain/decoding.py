from __future__ import annotations

import logging

from eth_utils import to_checksum_address

from .amounts import to_signed_256
from .models import RawLog, SwapEvent

log = logging.getLogger(__name__)

# Swap(address indexed sender, address indexed recipient, int256 amount0, int256 amount1, ...)
MIN_TOPICS = 3
MIN_DATA_LEN = 64

# --------- 32B word slicing (fast, no eth_abi) --------------------------------
def _word(b: bytes, i: int) -> bytes:
    return b[i*32:(i+1)*32]

def _addr_from_word(w: bytes) -> str:
    return to_checksum_address("0x" + w[-20:].hex())

def _decode_amounts(data_b: bytes) -> tuple[int, int]:
    # ["int256","int256", ...trailing words ignored]
    return (to_signed_256(_word(data_b, 0)),
            to_signed_256(_word(data_b, 1)))

# ---------------------------- public API --------------------------------------

def decode_swap_log(raw: RawLog) -> SwapEvent | None:
    """Decode one pool log into a SwapEvent, or None when it does not fit the layout."""
    if len(raw.topics) < MIN_TOPICS:
        log.warning("Skipping log: expected >= %d topics, got %d", MIN_TOPICS, len(raw.topics))
        return None
    t_sender, t_receiver = raw.topics[1], raw.topics[2]
    if len(t_sender) != 32 or len(t_receiver) != 32:
        log.warning("Skipping log: topic words must be 32 bytes")
        return None
    if len(raw.data) < MIN_DATA_LEN:
        log.warning("Skipping log: data holds %d bytes, need two int256 words", len(raw.data))
        return None

    amount0, amount1 = _decode_amounts(raw.data)
    return SwapEvent(
        sender=_addr_from_word(t_sender),
        receiver=_addr_from_word(t_receiver),
        amount0=amount0,
        amount1=amount1,
    )
