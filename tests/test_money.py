import pytest

from errors import FormatError
from money import is_nonzero_amount, to_cents, to_display


def test_to_cents_parses_whole_and_fractional_parts() -> None:
    assert to_cents("12.50") == 1250
    assert to_cents("0.01") == 1
    assert to_cents("7") == 700
    assert to_cents(".50") == 50
    assert to_cents("0") == 0


@pytest.mark.parametrize(
    "raw", ["12.5", "", ".", "1.2.3", "12.", "abc", "-1.00", "1,00"]
)
def test_to_cents_rejects_malformed_amounts(raw: str) -> None:
    with pytest.raises(FormatError):
        to_cents(raw)


def test_to_cents_rejects_trailing_newline() -> None:
    with pytest.raises(FormatError):
        to_cents("12.50\n")


@pytest.mark.parametrize("raw", ["٥.٠٠", "٠.٠٠", "１2"])
def test_to_cents_rejects_non_ascii_digits(raw: str) -> None:
    with pytest.raises(FormatError):
        to_cents(raw)


def test_to_display_pads_cents_without_float_rounding() -> None:
    assert to_display(0) == "$0.00"
    assert to_display(5) == "$0.05"
    assert to_display(1250) == "$12.50"
    assert to_display(123456) == "$1234.56"
    # 0.29 * 100 is not exactly 29 in binary floating point
    assert to_display(29) == "$0.29"


def test_to_display_rejects_negative_cents() -> None:
    with pytest.raises(FormatError):
        to_display(-1)


def test_display_then_parse_returns_same_cents() -> None:
    samples = list(range(0, 1_000)) + list(range(1_000, 10_000_001, 9_973))
    for boundary in (100, 10_000, 100_000, 1_000_000, 10_000_000):
        samples.extend(range(boundary - 10, min(boundary + 10, 10_000_001)))
    samples.append(10_000_000)
    for cents in samples:
        assert to_cents(to_display(cents)[1:]) == cents


def test_nonzero_check_treats_zeros_and_dots_as_zero() -> None:
    assert not is_nonzero_amount("0")
    assert not is_nonzero_amount("0.00")
    assert not is_nonzero_amount(".00")
    assert not is_nonzero_amount("")
    assert is_nonzero_amount("0.01")
    assert is_nonzero_amount("10")
