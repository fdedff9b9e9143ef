# swapwatch/ports/heads.py
from __future__ import annotations

from typing import AsyncIterator, Protocol
from ..domain.models import BlockHeader


class HeadSource(Protocol):
    """Port for a live, ordered stream of new chain heads."""

    def headers(self) -> AsyncIterator[BlockHeader]:
        """Yield headers as they arrive; return when the stream ends."""
