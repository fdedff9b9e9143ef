from __future__ import annotations
from typing import NewType, Literal

Address   = NewType("Address", str)     # 0x-prefixed, lowercase
BlockHash = NewType("BlockHash", str)   # 66-char 0x-hash, lowercase
Topic0    = NewType("Topic0", str)      # 66-char 0x-hash, lowercase
Direction = Literal["asset0→asset1", "asset1→asset0", "Unknown"]
