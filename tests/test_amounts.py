import pytest

from swapwatch.domain.amounts import render_amount, to_signed_256


def test_signed_boundaries():
    assert to_signed_256((2**255 - 1).to_bytes(32, "big")) == 2**255 - 1
    assert to_signed_256((2**255).to_bytes(32, "big")) == -(2**255)
    assert to_signed_256(b"\xff" * 32) == -1
    assert to_signed_256(bytes(32)) == 0


def test_signed_rejects_short_word():
    with pytest.raises(ValueError):
        to_signed_256(b"\x01" * 31)


@pytest.mark.parametrize("k", [0, 1, 1234, -7, 10**30, -(10**40)])
@pytest.mark.parametrize("d", [0, 6, 18])
def test_whole_multiples_have_no_separator(k, d):
    out = render_amount(k * 10**d, d)
    assert "." not in out
    assert out == str(k)


def test_fractional_rendering():
    assert render_amount(1234 * 10**18, 18) == "1234"
    assert render_amount(15 * 10**17, 18) == "1.5"
    assert render_amount(-15 * 10**17, 18) == "-1.5"
    assert render_amount(-50 * 10**6, 6) == "-50"
    assert render_amount(1_250_000, 6) == "1.25"


def test_fraction_keeps_leading_zeros_and_sign():
    assert render_amount(5 * 10**16, 18) == "0.05"
    assert render_amount(-5 * 10**17, 18) == "-0.5"
    assert render_amount(1, 18) == "0.000000000000000001"
