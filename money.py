import re

from errors import FormatError

AMOUNT_PATTERN = re.compile(r"^[0-9]*(\.[0-9]{2})?$")


def to_cents(amount: str) -> int:
    """
    Convert a typed amount such as ``"12.50"`` into integer cents.

    The fractional part is optional but must have exactly two digits when
    present. Zero amounts are accepted here; rejecting them is the job of the
    input layer (see ``is_nonzero_amount``).
    """
    if not amount or not AMOUNT_PATTERN.fullmatch(amount):
        raise FormatError(f"Invalid amount: {amount!r}")
    parts = amount.split(".")
    if len(parts) > 2:
        raise FormatError(f"Invalid amount: {amount!r}")
    whole_raw = parts[0]
    frac_raw = parts[1] if len(parts) == 2 else ""
    if not whole_raw and not frac_raw:
        raise FormatError(f"Invalid amount: {amount!r}")
    whole = int(whole_raw) if whole_raw else 0
    cents = int(frac_raw) if frac_raw else 0
    return whole * 100 + cents


def to_display(cents: int) -> str:
    if cents < 0:
        raise FormatError("Amount must be positive")
    whole, frac = divmod(cents, 100)
    return f"${whole}.{frac:02d}"


def is_nonzero_amount(amount: str) -> bool:
    return any(ch not in ".0" for ch in amount)
