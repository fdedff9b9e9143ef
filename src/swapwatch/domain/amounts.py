from __future__ import annotations

_TWO_255 = 1 << 255
_TWO_256 = 1 << 256


def to_signed_256(word: bytes) -> int:
    """Two's-complement int256 from a 32-byte big-endian word."""
    if len(word) != 32:
        raise ValueError(f"expected a 32-byte word, got {len(word)} bytes")
    u = int.from_bytes(word, "big")
    return u - _TWO_256 if u >= _TWO_255 else u


def _div_rem_trunc(a: int, b: int) -> tuple[int, int]:
    # Python's divmod floors; fixed-point rendering wants truncation toward zero
    q = abs(a) // b
    if a < 0:
        q = -q
    return q, a - q * b


def render_amount(amount: int, decimals: int) -> str:
    """
    Render a fixed-point integer scaled by 10**decimals as a decimal string.

    Whole values come out without a separator ("1234"); fractional values keep
    their significant digits only ("1.5", "-0.05").
    The remainder is zero-padded to `decimals` digits and a sub-unit negative
    keeps its sign, unlike a bare "quotient.remainder" join.
    """
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    q, r = _div_rem_trunc(amount, 10 ** decimals)
    if r == 0:
        return str(q)
    frac = str(abs(r)).rjust(decimals, "0").rstrip("0")
    sign = "-" if amount < 0 and q == 0 else ""
    return f"{sign}{q}.{frac}"
