# swapwatch/adapters/jsonrpc.py
from __future__ import annotations
from typing import Any
from ..domain.errors import FetchError
from ..domain.models import CanonicalBlock, RawLog
from ..domain.value_types import BlockHash, Topic0

def to_hex_block(n: int) -> str: return hex(int(n))
def is_topic_hash(x: str) -> bool: return isinstance(x, str) and x.startswith("0x") and len(x)==66

def hex_to_bytes(s: str) -> bytes:
    h = s[2:] if s[:2].lower() == "0x" else s
    if len(h) % 2: h = "0" + h
    return bytes.fromhex(h) if h else b""

def normalize_topic0(topic0: Topic0) -> str:
    t0 = str(topic0).strip().lower()
    if not is_topic_hash(t0):
        raise FetchError(f"Invalid topic0: {topic0}")
    return t0

def reply_result(method: str, data: Any) -> Any:
    """Unwrap a JSON-RPC reply object; error objects and non-objects become FetchError."""
    if not isinstance(data, dict):
        raise FetchError(f"{method} returned {type(data).__name__}, expected a JSON-RPC object")
    if "error" in data:
        err = data["error"]
        if isinstance(err, dict):
            raise FetchError(f"{method} RPC error code={err.get('code')} message={err.get('message')}")
        raise FetchError(f"{method} RPC error: {err}")
    return data.get("result")

def to_raw_logs(res: Any) -> list[RawLog]:
    if not isinstance(res, list):
        raise FetchError(f"eth_getLogs returned {type(res).__name__}, expected a list")
    try:
        return [RawLog(
            topics=tuple(hex_to_bytes(t) for t in rl.get("topics", [])),
            data=hex_to_bytes(rl.get("data") or "0x"),
        ) for rl in res]
    except (TypeError, AttributeError, ValueError) as e:
        raise FetchError(f"Malformed log in eth_getLogs result: {e}") from e

def to_block(res: Any) -> CanonicalBlock | None:
    if res is None:
        return None
    try:
        return CanonicalBlock(number=int(res["number"], 16), hash=BlockHash(res["hash"].lower()))
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise FetchError(f"Malformed block object: {res!r}") from e
