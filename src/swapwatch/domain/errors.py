from __future__ import annotations


class SwapWatchError(Exception):
    """Base class for every error the watcher raises on purpose."""


class ConfigMissing(SwapWatchError):
    """A required startup parameter is absent or unusable."""


class FetchError(SwapWatchError):
    """Log or block fetch failed at the transport or JSON-RPC level."""


class ReorgDetected(SwapWatchError):
    """
    The canonical block at `number` no longer matches the hash we buffered.
    Raised only for blocks already past the confirmation depth, so the
    pipeline treats it as out-of-policy and stops.
    """
    def __init__(self, number: int, expected: str, actual: str) -> None:
        self.number = number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Reorganization detected at block {number}. "
            f"Expected hash: {expected}, got: {actual}."
        )
